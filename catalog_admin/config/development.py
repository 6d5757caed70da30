"""
开发环境配置文件。
包含开发环境特定的Django配置。
"""
from .base import *
from .env import *

# 开发环境默认开启调试模式
DEBUG = True

# 日志配置 - 开发环境更详细的日志
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': True,
        },
    },
}

# 应用代码使用loguru输出日志
configure_logger(LOG_LEVEL)

# 商品模块开发环境配置
PRODUCT_SETTINGS = {
    **PRODUCT_SETTINGS,
    'INVENTORY_LOCK_TIMEOUT': 30,  # 开发环境调试时放宽锁超时
}
