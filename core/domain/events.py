"""
领域事件模块。
包含DomainEvent基类和EventBus接口，用于领域事件的发布和订阅。
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Type, Union
import uuid


class DomainEvent:
    """
    领域事件基类。
    领域事件表示领域模型中发生的重要事件，通常用于跨聚合的业务流程。
    事件一经创建即不可修改。
    """

    # 事件类型名称，子类覆盖
    event_type: str = "DomainEvent"

    def __init__(self, aggregate_id: Any = None):
        """
        初始化领域事件。
        自动设置事件ID和发生时间。

        Args:
            aggregate_id: 产生事件的聚合根ID
        """
        self.id = uuid.uuid4()
        self.aggregate_id = aggregate_id
        self.occurred_on = datetime.now()

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def seal(self) -> None:
        """冻结事件，子类在__init__结束时调用"""
        object.__setattr__(self, "_sealed", True)

    def payload(self) -> Dict[str, Any]:
        """
        事件携带的业务数据，子类覆盖。

        Returns:
            业务数据字典
        """
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """
        将事件转换为字典表示。

        Returns:
            事件的字典表示
        """
        return {
            "event_id": str(self.id),
            "event_type": self.event_type,
            "aggregate_id": str(self.aggregate_id) if self.aggregate_id is not None else None,
            "occurred_on": self.occurred_on.isoformat(),
            "payload": self.payload(),
        }


# 事件处理器类型
EventHandler = Callable[[DomainEvent], None]

# 订阅键：事件类型名称或事件类
EventKey = Union[str, Type[DomainEvent]]


def event_key(key: EventKey) -> str:
    """
    将订阅键统一为事件类型名称。

    Args:
        key: 事件类型名称或事件类

    Returns:
        事件类型名称
    """
    if isinstance(key, type) and issubclass(key, DomainEvent):
        return key.event_type
    return str(key)


class EventBus(ABC):
    """
    事件总线接口。
    至少一次、尽力而为的扇出投递；处理器异常只记录日志，不向发布方传播。
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        发布单个事件，等待所有订阅者处理完成。

        Args:
            event: 要发布的事件
        """

    def publish_many(self, events: Iterable[DomainEvent]) -> None:
        """
        按顺序发布多个事件。

        Args:
            events: 要发布的事件列表
        """
        for event in events:
            self.publish(event)

    @abstractmethod
    def subscribe(self, event_type: EventKey, handler: EventHandler) -> None:
        """
        注册事件处理器。

        Args:
            event_type: 事件类型名称或事件类
            handler: 事件处理器函数
        """

    @abstractmethod
    def unsubscribe(self, event_type: EventKey, handler: EventHandler) -> None:
        """
        取消注册事件处理器。

        Args:
            event_type: 事件类型名称或事件类
            handler: 事件处理器函数
        """
