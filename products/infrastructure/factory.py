"""
商品模块工厂。
负责创建和管理商品模块的对象，包括仓储、服务、事件总线和用例实例。
"""
from typing import Optional

from core.domain import EventBus
from core.infrastructure import InMemoryEventBus
from products.application import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductByIdUseCase,
    GetProductBySkuUseCase,
    SearchProductsUseCase,
    UpdateProductStockUseCase,
    UpdateProductUseCase,
)
from products.domain import CategoryRepository, InventoryLockService, ProductRepository, ProductSkuService
from products.domain.config import get_product_setting
from products.infrastructure.repositories import InMemoryCategoryRepository, InMemoryProductRepository
from products.infrastructure.services import InProcessInventoryLockService


class ProductModuleFactory:
    """
    商品模块工厂类。
    作为组合根按需创建依赖并缓存，同一工厂创建的用例共享仓储、事件总线和库存锁。
    未提供的依赖使用内存实现。
    """

    def __init__(
        self,
        product_repository: Optional[ProductRepository] = None,
        category_repository: Optional[CategoryRepository] = None,
        event_bus: Optional[EventBus] = None,
        inventory_lock_service: Optional[InventoryLockService] = None
    ):
        """
        初始化商品模块工厂。

        Args:
            product_repository: 商品仓储
            category_repository: 分类仓储
            event_bus: 事件总线
            inventory_lock_service: 库存锁定服务
        """
        # 存储已创建的实例
        self._product_repository = product_repository
        self._category_repository = category_repository
        self._event_bus = event_bus
        self._inventory_lock_service = inventory_lock_service
        self._sku_service = None
        # 只关闭工厂自己创建的事件总线
        self._owns_event_bus = False

    def create_product_repository(self) -> ProductRepository:
        """
        创建商品仓储。

        Returns:
            商品仓储实例
        """
        if not self._product_repository:
            self._product_repository = InMemoryProductRepository()

        return self._product_repository

    def create_category_repository(self) -> CategoryRepository:
        """
        创建分类仓储。

        Returns:
            分类仓储实例
        """
        if not self._category_repository:
            self._category_repository = InMemoryCategoryRepository()

        return self._category_repository

    def create_event_bus(self) -> EventBus:
        """
        创建事件总线，线程池大小读取配置。

        Returns:
            事件总线实例
        """
        if not self._event_bus:
            self._event_bus = InMemoryEventBus(
                max_workers=int(get_product_setting('EVENT_BUS_MAX_WORKERS'))
            )
            self._owns_event_bus = True

        return self._event_bus

    def create_inventory_lock_service(self) -> InventoryLockService:
        """
        创建库存锁定服务。

        Returns:
            库存锁定服务实例
        """
        if not self._inventory_lock_service:
            self._inventory_lock_service = InProcessInventoryLockService()

        return self._inventory_lock_service

    def create_sku_service(self) -> ProductSkuService:
        if not self._sku_service:
            self._sku_service = ProductSkuService(self.create_product_repository())

        return self._sku_service

    # ==================== 用例 ====================

    def create_product_use_case(self) -> CreateProductUseCase:
        return CreateProductUseCase(
            product_repository=self.create_product_repository(),
            category_repository=self.create_category_repository(),
            event_bus=self.create_event_bus(),
            sku_service=self.create_sku_service(),
        )

    def update_product_use_case(self) -> UpdateProductUseCase:
        return UpdateProductUseCase(
            product_repository=self.create_product_repository(),
            category_repository=self.create_category_repository(),
            event_bus=self.create_event_bus(),
        )

    def update_product_stock_use_case(self) -> UpdateProductStockUseCase:
        return UpdateProductStockUseCase(
            product_repository=self.create_product_repository(),
            event_bus=self.create_event_bus(),
            inventory_lock_service=self.create_inventory_lock_service(),
        )

    def delete_product_use_case(self) -> DeleteProductUseCase:
        return DeleteProductUseCase(
            product_repository=self.create_product_repository(),
            event_bus=self.create_event_bus(),
        )

    def search_products_use_case(self) -> SearchProductsUseCase:
        return SearchProductsUseCase(self.create_product_repository())

    def get_product_by_id_use_case(self) -> GetProductByIdUseCase:
        return GetProductByIdUseCase(self.create_product_repository())

    def get_product_by_sku_use_case(self) -> GetProductBySkuUseCase:
        return GetProductBySkuUseCase(self.create_product_repository())

    def shutdown(self) -> None:
        """释放工厂创建的事件总线线程池，外部传入的事件总线由调用方负责关闭"""
        if self._owns_event_bus and isinstance(self._event_bus, InMemoryEventBus):
            self._event_bus.shutdown()
            self._event_bus = None
            self._owns_event_bus = False
