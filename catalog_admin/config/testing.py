"""
测试环境配置文件。
包含测试环境特定的Django配置。
"""
from .base import *
from .env import *

# 测试环境禁用调试模式
DEBUG = False

# 简化日志配置
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'console': {
            'level': 'ERROR',
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'ERROR',
            'propagate': False,
        },
    },
}

# 测试中只输出警告及以上的日志
configure_logger('WARNING')

# 商品模块测试环境配置
PRODUCT_SETTINGS = {
    **PRODUCT_SETTINGS,
    'DEFAULT_CURRENCY': 'USD',
    'DEFAULT_MAX_STOCK_LEVEL': 1000,
    'SKU_GENERATION_MAX_ATTEMPTS': 100,
    'EVENT_BUS_MAX_WORKERS': 2,
    'INVENTORY_LOCK_TIMEOUT': 5,  # 测试中尽快暴露死锁
}
