"""
环境变量处理模块。
负责加载和处理环境变量，并配置loguru的输出。
"""
import os
from pathlib import Path
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from loguru import logger


# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent


def load_env_file() -> bool:
    """从当前文件同级目录加载.env文件"""
    env_path = os.path.join(os.path.dirname(__file__), '.env')

    if not os.path.exists(env_path):
        logger.debug(f"环境变量文件不存在: {env_path}，将使用默认值")
        return False

    loaded = load_dotenv(dotenv_path=env_path, encoding='utf-8')
    logger.debug(f"加载环境变量文件: {env_path}")
    return loaded


# 尝试加载环境变量
load_env_file()


def get_env(name: str, default: Any = None, cast_type: Optional[type] = None) -> Any:
    """
    获取环境变量值，支持类型转换和默认值

    Args:
        name: 环境变量名称
        default: 默认值，如果环境变量不存在则返回此值
        cast_type: 类型转换函数，如int, float, bool等

    Returns:
        环境变量的值，经过类型转换（如果指定了cast_type）
    """
    value = os.environ.get(name, default)

    if value is None:
        return None

    if cast_type is not None:
        if cast_type is bool and isinstance(value, str):
            return value.lower() in ('true', 'yes', '1', 'y')
        if cast_type is list and isinstance(value, str):
            return [item.strip() for item in value.split(',') if item.strip()]
        try:
            return cast_type(value)
        except (ValueError, TypeError):
            logger.warning(f"无法将环境变量{name}的值'{value}'转换为{cast_type.__name__}类型，使用默认值")
            return default

    return value


def configure_logger(level: str, log_file: Optional[str] = None) -> None:
    """
    重置loguru的输出。

    Args:
        level: 控制台日志级别
        log_file: 日志文件路径，提供时按大小轮转
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        logger.add(log_file, level='INFO', rotation='10 MB', retention=10, encoding='utf-8')


# 导出常用环境变量
DEBUG = get_env('DEBUG', default=True, cast_type=bool)
SECRET_KEY = get_env('SECRET_KEY', default='django-insecure-catalog-admin-development-key')
ALLOWED_HOSTS = get_env('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast_type=list)
LOG_LEVEL = get_env('LOG_LEVEL', default='DEBUG')

# 国际化配置
LANGUAGE_CODE = get_env('LANGUAGE_CODE', default='zh-hans')
TIME_ZONE = get_env('TIME_ZONE', default='Asia/Shanghai')

# 商品模块配置
PRODUCT_DEFAULT_CURRENCY = get_env('PRODUCT_DEFAULT_CURRENCY', default='USD')
PRODUCT_DEFAULT_MAX_STOCK_LEVEL = get_env('PRODUCT_DEFAULT_MAX_STOCK_LEVEL', default=1000, cast_type=int)
PRODUCT_SKU_MAX_ATTEMPTS = get_env('PRODUCT_SKU_MAX_ATTEMPTS', default=100, cast_type=int)
PRODUCT_EVENT_BUS_WORKERS = get_env('PRODUCT_EVENT_BUS_WORKERS', default=4, cast_type=int)
PRODUCT_INVENTORY_LOCK_TIMEOUT = get_env('PRODUCT_INVENTORY_LOCK_TIMEOUT', default=10, cast_type=float)
PRODUCT_LOW_STOCK_THRESHOLD = get_env('PRODUCT_LOW_STOCK_THRESHOLD', default=10, cast_type=int)
