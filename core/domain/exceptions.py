"""
领域异常模块。
包含领域模型中使用的各种异常类。

异常分为四大类，应用层据此转换为统一的失败结果:
    - ValidationException: 输入格式或取值范围错误
    - EntityNotFoundException: 实体不存在(或已被软删除)
    - ConflictException: 唯一性冲突、非法状态迁移、并发冲突
    - BusinessRuleViolationException: 依赖聚合当前状态的业务规则被违反
"""
from typing import Any, Optional


class DomainException(Exception):
    """
    领域异常基类。
    所有领域模型中的异常都应继承自此类。
    """

    def __init__(self, message: str):
        """
        初始化领域异常。

        Args:
            message: 异常消息
        """
        self.message = message
        super().__init__(self.message)


class ValidationException(DomainException):
    """
    数据验证异常。
    当值对象工厂方法或用例请求的数据验证失败时抛出。
    """

    def __init__(self, field_name: Optional[str] = None, message: str = "Validation failed"):
        """
        初始化数据验证异常。

        Args:
            field_name: 字段名称
            message: 异常消息
        """
        super().__init__(message)
        self.field_name = field_name


class EntityNotFoundException(DomainException):
    """
    实体未找到异常。
    当请求的实体不存在时抛出。
    """

    def __init__(self, entity_name: str, entity_id: Any = None):
        """
        初始化实体未找到异常。

        Args:
            entity_name: 实体名称
            entity_id: 实体ID
        """
        super().__init__(f"{entity_name} not found")
        self.entity_name = entity_name
        self.entity_id = entity_id


class ConflictException(DomainException):
    """
    冲突异常。
    当违反唯一性约束或发生非法状态迁移时抛出。
    """

    def __init__(self, message: str, conflicting_value: Any = None):
        """
        初始化冲突异常。

        Args:
            message: 异常消息
            conflicting_value: 引起冲突的值
        """
        super().__init__(message)
        self.conflicting_value = conflicting_value


class InvalidStatusTransitionException(ConflictException):
    """
    状态迁移异常。
    当状态机中不存在从当前状态到目标状态的边时抛出。
    """

    def __init__(self, current_status: str, target_status: str):
        """
        初始化状态迁移异常。

        Args:
            current_status: 当前状态
            target_status: 目标状态
        """
        super().__init__(
            f"Cannot transition from {current_status} to {target_status}",
            conflicting_value=target_status
        )
        self.current_status = current_status
        self.target_status = target_status


class ConcurrencyException(ConflictException):
    """
    并发异常。
    当发生并发冲突时抛出，例如在乐观锁情况下。
    """

    def __init__(self, entity_name: str, entity_id: Any):
        """
        初始化并发异常。

        Args:
            entity_name: 实体名称
            entity_id: 实体ID
        """
        super().__init__(
            f"{entity_name} (ID={entity_id}) was modified by another transaction",
            conflicting_value=entity_id
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class BusinessRuleViolationException(DomainException):
    """
    业务规则违反异常。
    当违反依赖聚合当前状态的业务规则时抛出。
    """

    def __init__(self, rule_name: str, message: str):
        """
        初始化业务规则违反异常。

        Args:
            rule_name: 规则名称
            message: 异常消息
        """
        super().__init__(message)
        self.rule_name = rule_name


class InsufficientStockException(BusinessRuleViolationException):
    """
    库存不足异常。
    当商品库存不足以满足请求时抛出。
    """

    def __init__(self, product_id: Any, requested: int, available: int):
        """
        初始化库存不足异常。

        Args:
            product_id: 商品ID
            requested: 请求数量
            available: 可用数量
        """
        super().__init__(
            "insufficient_stock",
            f"Insufficient stock quantity: requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class LockAcquisitionException(DomainException):
    """
    锁获取异常。
    当无法获取资源锁时抛出。
    """

    def __init__(self, resource_name: str, message: Optional[str] = None):
        """
        初始化锁获取异常。

        Args:
            resource_name: 资源名称
            message: 额外消息
        """
        if message:
            full_message = f"Could not acquire lock for '{resource_name}': {message}"
        else:
            full_message = f"Could not acquire lock for '{resource_name}'"
        super().__init__(full_message)
        self.resource_name = resource_name
