"""
商品模块配置文件。
从Django设置中获取商品模块的配置。

配置在使用时读取，测试中可以通过覆盖settings.PRODUCT_SETTINGS调整。
"""
from typing import Any

from django.conf import settings

# 默认配置，Django设置中未提供的键使用这里的值
DEFAULTS = {
    # 默认货币
    'DEFAULT_CURRENCY': 'USD',
    # 创建商品时未指定的最大库存水平
    'DEFAULT_MAX_STOCK_LEVEL': 1000,
    # 自动生成SKU时追加序号的最大尝试次数
    'SKU_GENERATION_MAX_ATTEMPTS': 100,
    # 事件总线线程池大小
    'EVENT_BUS_MAX_WORKERS': 4,
    # 库存锁获取超时（秒）
    'INVENTORY_LOCK_TIMEOUT': 10,
    # 商品搜索分页配置
    'SEARCH_MAX_LIMIT': 1000,
    'SEARCH_DEFAULT_LIMIT': 50,
    # 低库存统计阈值，未设置最低库存水平的商品使用
    'LOW_STOCK_THRESHOLD': 10,
}


def get_product_setting(name: str) -> Any:
    """
    获取商品模块配置项。

    Args:
        name: 配置项名称

    Returns:
        Django设置中的值，如果不存在则返回默认值
    """
    product_settings = getattr(settings, 'PRODUCT_SETTINGS', {})
    return product_settings.get(name, DEFAULTS.get(name))
