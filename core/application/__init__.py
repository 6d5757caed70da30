"""
应用层公共包。
提供用例结果和业务状态码。
"""
from core.application.result import ErrorCode, UseCaseResult, UNEXPECTED_ERROR_MESSAGE

__all__ = [
    'ErrorCode',
    'UseCaseResult',
    'UNEXPECTED_ERROR_MESSAGE',
]
