"""
仓储接口模块。
定义仓储接口，用于持久化和检索领域对象。
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


class Repository(Generic[T], ABC):
    """
    仓储接口。
    定义了所有仓储必须实现的基本操作。
    """

    @abstractmethod
    def find_by_id(self, id: Any, include_deleted: bool = False) -> Optional[T]:
        """
        根据ID获取实体。

        Args:
            id: 实体ID
            include_deleted: 是否包含已软删除的实体

        Returns:
            找到的实体，如果不存在则返回None
        """
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """
        保存新实体。

        Args:
            entity: 要保存的实体

        Returns:
            保存后的实体
        """
        pass

    @abstractmethod
    def update(self, entity: T) -> T:
        """
        更新已存在的实体。
        实现必须校验版本号，版本不一致时抛出ConcurrencyException。

        Args:
            entity: 要更新的实体

        Returns:
            更新后的实体
        """
        pass

    @abstractmethod
    def delete(self, id: Any) -> None:
        """
        物理删除实体。

        Args:
            id: 实体ID
        """
        pass

    @abstractmethod
    def exists(self, id: Any) -> bool:
        pass


class ReadOnlyRepository(Generic[T], ABC):
    """
    只读仓储接口。
    适用于只需要按ID查找的关联上下文，例如分类。
    """

    @abstractmethod
    def find_by_id(self, id: Any) -> Optional[T]:
        """
        根据ID获取实体。

        Args:
            id: 实体ID

        Returns:
            找到的实体，如果不存在则返回None
        """
        pass

    @abstractmethod
    def exists(self, id: Any) -> bool:
        """
        判断实体是否存在。

        Args:
            id: 实体ID
        """
        pass
