"""
基础配置文件。
包含所有环境共享的Django配置。
"""
from .env import (
    ALLOWED_HOSTS,
    BASE_DIR,
    LANGUAGE_CODE,
    PRODUCT_DEFAULT_CURRENCY,
    PRODUCT_DEFAULT_MAX_STOCK_LEVEL,
    PRODUCT_EVENT_BUS_WORKERS,
    PRODUCT_INVENTORY_LOCK_TIMEOUT,
    PRODUCT_LOW_STOCK_THRESHOLD,
    PRODUCT_SKU_MAX_ATTEMPTS,
    SECRET_KEY,
    TIME_ZONE,
)

# 应用定义，商品模块不依赖数据库和HTTP层
INSTALLED_APPS = [
    'products',
]

USE_I18N = True
USE_TZ = False

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# 日志目录
LOG_DIR = BASE_DIR / 'logs'

# 商品模块配置，未列出的键使用products.domain.config中的默认值
PRODUCT_SETTINGS = {
    'DEFAULT_CURRENCY': PRODUCT_DEFAULT_CURRENCY,
    'DEFAULT_MAX_STOCK_LEVEL': PRODUCT_DEFAULT_MAX_STOCK_LEVEL,
    'SKU_GENERATION_MAX_ATTEMPTS': PRODUCT_SKU_MAX_ATTEMPTS,
    'EVENT_BUS_MAX_WORKERS': PRODUCT_EVENT_BUS_WORKERS,
    'INVENTORY_LOCK_TIMEOUT': PRODUCT_INVENTORY_LOCK_TIMEOUT,
    'SEARCH_MAX_LIMIT': 1000,
    'SEARCH_DEFAULT_LIMIT': 50,
    'LOW_STOCK_THRESHOLD': PRODUCT_LOW_STOCK_THRESHOLD,
}
