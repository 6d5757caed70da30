"""
用例结果模块。
提供用例执行结果的标准化结构，包括成功标志、数据、错误信息和业务状态码。
用例从不向调用方抛出异常，所有失败都转换为UseCaseResult。
"""
import time
import typing as t
from dataclasses import dataclass, field

from core.domain.exceptions import (
    BusinessRuleViolationException,
    ConflictException,
    ConcurrencyException,
    DomainException,
    EntityNotFoundException,
    InsufficientStockException,
    LockAcquisitionException,
    ValidationException,
)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorCode:
    """业务状态码定义"""

    # 成功状态码 (1xxxx)
    SUCCESS = 10000                # 通用成功

    # 输入错误 (400xx)
    VALIDATION = 40001             # 数据验证错误

    # 资源错误 (404xx)
    NOT_FOUND = 40401              # 实体不存在

    # 操作冲突 (409xx)
    CONFLICT = 40900               # 唯一性冲突、非法状态迁移
    OPTIMISTIC_LOCK = 40901        # 乐观锁冲突
    LOCK_TIMEOUT = 40903           # 资源锁获取超时

    # 业务规则 (410xx)
    BUSINESS_RULE = 41000          # 业务规则违反
    STOCK_INSUFFICIENT = 41001     # 商品库存不足

    # 服务器错误 (5xxxx)
    UNEXPECTED = 50000             # 未预期的错误

    @classmethod
    def for_exception(cls, exc: BaseException) -> int:
        """
        根据异常类型获取状态码，子类异常优先于父类匹配。

        Args:
            exc: 异常对象

        Returns:
            业务状态码
        """
        if isinstance(exc, ValidationException):
            return cls.VALIDATION
        if isinstance(exc, EntityNotFoundException):
            return cls.NOT_FOUND
        if isinstance(exc, ConcurrencyException):
            return cls.OPTIMISTIC_LOCK
        if isinstance(exc, ConflictException):
            return cls.CONFLICT
        if isinstance(exc, LockAcquisitionException):
            return cls.LOCK_TIMEOUT
        if isinstance(exc, InsufficientStockException):
            return cls.STOCK_INSUFFICIENT
        if isinstance(exc, BusinessRuleViolationException):
            return cls.BUSINESS_RULE
        return cls.UNEXPECTED

    @classmethod
    def is_conflict(cls, code: int) -> bool:
        return code in (cls.CONFLICT, cls.OPTIMISTIC_LOCK, cls.LOCK_TIMEOUT)

    @classmethod
    def is_business_rule(cls, code: int) -> bool:
        return code in (cls.BUSINESS_RULE, cls.STOCK_INSUFFICIENT)


@dataclass
class UseCaseResult:
    """用例结果数据结构"""
    success: bool = True  # 是否成功
    data: t.Any = None  # 结果数据
    error: t.Optional[str] = None  # 错误消息
    errors: t.List[str] = field(default_factory=list)  # 全部错误消息
    error_code: int = ErrorCode.SUCCESS  # 业务状态码
    metadata: t.Dict[str, t.Any] = field(default_factory=dict)  # 元数据
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))  # 时间戳，毫秒级

    @classmethod
    def ok(cls, data: t.Any = None, metadata: t.Dict[str, t.Any] = None) -> "UseCaseResult":
        """
        创建成功结果

        Args:
            data: 结果数据
            metadata: 元数据

        Returns:
            UseCaseResult: 成功结果
        """
        return cls(success=True, data=data, metadata=metadata or {})

    @classmethod
    def fail(
        cls,
        error: t.Optional[str] = None,
        errors: t.Optional[t.List[str]] = None,
        error_code: int = ErrorCode.VALIDATION,
        metadata: t.Dict[str, t.Any] = None
    ) -> "UseCaseResult":
        """
        创建失败结果。
        只传errors时，error为所有错误以"; "拼接的结果。

        Args:
            error: 错误消息
            errors: 错误消息列表
            error_code: 业务状态码
            metadata: 元数据

        Returns:
            UseCaseResult: 失败结果
        """
        error_list = list(errors or [])
        if error is None:
            error = "; ".join(error_list) if error_list else UNEXPECTED_ERROR_MESSAGE
        if not error_list:
            error_list = [error]
        return cls(
            success=False,
            error=error,
            errors=error_list,
            error_code=error_code,
            metadata=metadata or {}
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UseCaseResult":
        """
        将异常转换为失败结果。
        领域异常保留原始消息，其他异常只返回通用消息。

        Args:
            exc: 异常对象

        Returns:
            UseCaseResult: 失败结果
        """
        if isinstance(exc, DomainException):
            return cls.fail(exc.message, error_code=ErrorCode.for_exception(exc))
        return cls.fail(UNEXPECTED_ERROR_MESSAGE, error_code=ErrorCode.UNEXPECTED)

    def to_dict(self) -> dict:
        """转换为字典"""
        result = {
            "success": self.success,
            "code": self.error_code,
            "timestamp": self.timestamp,
        }

        # 只有在有数据时才添加data字段
        if self.data is not None:
            result["data"] = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data

        if not self.success:
            result["error"] = self.error
            result["errors"] = list(self.errors)

        # 只有在有元数据时才添加metadata字段
        if self.metadata:
            result["metadata"] = self.metadata

        return result
