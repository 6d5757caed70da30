"""
商品仓储实现。
"""
from products.infrastructure.repositories.in_memory_product_repository import InMemoryProductRepository
from products.infrastructure.repositories.in_memory_category_repository import InMemoryCategoryRepository

__all__ = [
    'InMemoryProductRepository',
    'InMemoryCategoryRepository',
]
