"""
核心领域模型基类模块。
包含Entity基类和带审计字段的AuditableEntity基类。
"""
from datetime import datetime
from typing import Any, Optional
import uuid

from core.domain.exceptions import ValidationException


def parse_entity_id(value: Any, field_name: str = "id") -> uuid.UUID:
    """
    将外部传入的标识解析为UUID。

    Args:
        value: 字符串或UUID
        field_name: 字段名称，用于错误提示

    Returns:
        解析后的UUID

    Raises:
        ValidationException: 标识格式无效
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationException(field_name, f"Invalid {field_name} format")
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise ValidationException(field_name, f"Invalid {field_name} format") from None


class Entity:
    """
    实体基类。
    实体是具有唯一标识的领域对象，其相等性通过标识而非属性值判断。
    """
    def __init__(self, id: Any = None):
        """
        初始化实体。

        Args:
            id: 实体标识，如果未提供，将自动生成UUID
        """
        self.id = id if id is not None else uuid.uuid4()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class AuditableEntity(Entity):
    """
    带审计字段的实体基类。
    记录创建、更新、软删除的时间和操作人。
    """

    def __init__(
        self,
        id: Any = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        created_by: Any = None,
        updated_by: Any = None,
        deleted_at: Optional[datetime] = None,
        deleted_by: Any = None
    ):
        super().__init__(id)
        now = datetime.now()
        self.created_at = created_at or now
        self.updated_at = updated_at or now
        self.created_by = created_by
        self.updated_by = updated_by
        self.deleted_at = deleted_at
        self.deleted_by = deleted_by

    @property
    def is_deleted(self) -> bool:
        """是否已被软删除"""
        return self.deleted_at is not None

    def touch(self, updated_by: Any = None) -> None:
        """
        刷新更新时间和更新人。

        Args:
            updated_by: 更新人ID，未提供时保留原值
        """
        self.updated_at = datetime.now()
        if updated_by is not None:
            self.updated_by = updated_by

    def mark_as_deleted(self, deleted_by: Any = None) -> None:
        self.deleted_at = datetime.now()
        self.deleted_by = deleted_by
        self.touch(deleted_by)

    def mark_as_restored(self, restored_by: Any = None) -> None:
        self.deleted_at = None
        self.deleted_by = None
        self.touch(restored_by)
