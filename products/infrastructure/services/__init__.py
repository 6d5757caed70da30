"""
商品基础设施服务。
"""
from products.infrastructure.services.inventory_lock_service import InProcessInventoryLockService

__all__ = [
    'InProcessInventoryLockService',
]
