"""
商品领域模型中的事件。
定义商品相关的领域事件。
"""
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


def _serialize(value: Any) -> Any:
    """将事件中的值对象转换为可序列化的基本类型"""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return str(value)


class ProductCreatedEvent(DomainEvent):
    """商品创建事件"""

    event_type = "ProductCreated"

    def __init__(self, product_id: Any, product_name: str, product_sku: str, price: Any, created_by: Any = None):
        """
        初始化商品创建事件。

        Args:
            product_id: 商品ID
            product_name: 商品名称
            product_sku: 商品SKU
            price: 商品价格
            created_by: 创建人ID
        """
        super().__init__(product_id)
        self.product_name = product_name
        self.product_sku = product_sku
        self.price = price
        self.created_by = created_by
        self.seal()

    def payload(self) -> Dict[str, Any]:
        return {
            "product_name": self.product_name,
            "product_sku": self.product_sku,
            "price": _serialize(self.price),
            "created_by": _serialize(self.created_by),
        }


class ProductUpdatedEvent(DomainEvent):
    """商品更新事件"""

    event_type = "ProductUpdated"

    def __init__(self, product_id: Any, changes: Dict[str, Any], updated_by: Any = None):
        """
        初始化商品更新事件。

        Args:
            product_id: 商品ID
            changes: 变更内容，键为字段名，值通常为{"old": ..., "new": ...}
            updated_by: 更新人ID
        """
        super().__init__(product_id)
        self.changes = dict(changes)
        self.updated_by = updated_by
        self.seal()

    @property
    def changed_fields(self) -> list:
        return list(self.changes.keys())

    def payload(self) -> Dict[str, Any]:
        return {"changes": _serialize(self.changes), "updated_by": _serialize(self.updated_by)}


class ProductStatusChangedEvent(DomainEvent):
    """商品状态变更事件"""

    event_type = "ProductStatusChanged"

    def __init__(self, product_id: Any, old_status: str, new_status: str, updated_by: Any = None):
        """
        初始化商品状态变更事件。

        Args:
            product_id: 商品ID
            old_status: 旧状态
            new_status: 新状态
            updated_by: 更新人ID
        """
        super().__init__(product_id)
        self.old_status = str(old_status)
        self.new_status = str(new_status)
        self.updated_by = updated_by
        self.seal()

    def payload(self) -> Dict[str, Any]:
        return {
            "old_status": self.old_status,
            "new_status": self.new_status,
            "updated_by": _serialize(self.updated_by),
        }


class ProductDeletedEvent(DomainEvent):
    """商品删除（软删除）事件"""

    event_type = "ProductDeleted"

    def __init__(self, product_id: Any, product_sku: str, deleted_by: Optional[Any] = None):
        super().__init__(product_id)
        self.product_sku = product_sku
        self.deleted_by = deleted_by
        self.seal()

    def payload(self) -> Dict[str, Any]:
        return {"product_sku": self.product_sku, "deleted_by": _serialize(self.deleted_by)}
