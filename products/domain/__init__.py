"""
商品领域模型包。
提供商品聚合根、值对象、领域事件、仓储接口和领域服务。
"""

from products.domain.value_objects import (
    ProductName,
    ProductSku,
    ProductDescription,
    ProductStatus,
    STATUS_TRANSITIONS,
)
from products.domain.entities import Category
from products.domain.aggregates import Product
from products.domain.events import (
    ProductCreatedEvent,
    ProductUpdatedEvent,
    ProductStatusChangedEvent,
    ProductDeletedEvent,
)
from products.domain.repositories import (
    ProductRepository,
    CategoryRepository,
    InventoryLockService,
    ProductSearchFilters,
    ProductSearchOptions,
    ProductSearchResult,
    ProductStatistics,
    ProductTrends,
    SORT_FIELDS,
    SORT_ORDERS,
)
from products.domain.services import ProductSkuService

__all__ = [
    # 值对象
    'ProductName',
    'ProductSku',
    'ProductDescription',
    'ProductStatus',
    'STATUS_TRANSITIONS',

    # 实体和聚合根
    'Category',
    'Product',

    # 领域事件
    'ProductCreatedEvent',
    'ProductUpdatedEvent',
    'ProductStatusChangedEvent',
    'ProductDeletedEvent',

    # 仓储接口
    'ProductRepository',
    'CategoryRepository',
    'InventoryLockService',
    'ProductSearchFilters',
    'ProductSearchOptions',
    'ProductSearchResult',
    'ProductStatistics',
    'ProductTrends',
    'SORT_FIELDS',
    'SORT_ORDERS',

    # 领域服务
    'ProductSkuService',
]
