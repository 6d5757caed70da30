"""
商品领域模型中的实体。
包含商品上下文引用的分类实体。
"""
from typing import Any, Dict, Optional

from core.domain import Entity


class Category(Entity):
    """
    商品分类实体。
    分类由独立的上下文维护，商品上下文只读取分类是否存在及其基本信息。
    """

    def __init__(
        self,
        id: Any = None,
        name: str = "",
        description: str = "",
        parent_id: Optional[Any] = None,
        is_active: bool = True
    ):
        """
        初始化分类实体。

        Args:
            id: 分类ID，如果未提供则自动生成
            name: 分类名称
            description: 分类描述
            parent_id: 父分类ID，如果没有则为None
            is_active: 是否启用
        """
        super().__init__(id)
        self.name = name
        self.description = description
        self.parent_id = parent_id
        self.is_active = is_active

    def to_dict(self) -> Dict[str, Any]:
        """
        将分类转换为字典表示。

        Returns:
            分类的字典表示
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "parent_id": str(self.parent_id) if self.parent_id else None,
            "is_active": self.is_active,
        }
