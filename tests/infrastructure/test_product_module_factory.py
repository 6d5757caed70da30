from core.infrastructure import InMemoryEventBus
from products.domain import ProductDeletedEvent
from products.application import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductByIdUseCase,
    GetProductBySkuUseCase,
    SearchProductsUseCase,
    UpdateProductStockUseCase,
    UpdateProductUseCase,
)
from products.infrastructure.factory import ProductModuleFactory
from products.infrastructure.repositories import InMemoryCategoryRepository, InMemoryProductRepository
from products.infrastructure.services import InProcessInventoryLockService


class TestProductModuleFactory:
    def test_defaults_are_in_memory_and_cached(self):
        factory = ProductModuleFactory()
        try:
            assert isinstance(factory.create_product_repository(), InMemoryProductRepository)
            assert isinstance(factory.create_category_repository(), InMemoryCategoryRepository)
            assert isinstance(factory.create_event_bus(), InMemoryEventBus)
            assert isinstance(factory.create_inventory_lock_service(), InProcessInventoryLockService)

            assert factory.create_product_repository() is factory.create_product_repository()
            assert factory.create_event_bus() is factory.create_event_bus()
            assert factory.create_sku_service() is factory.create_sku_service()
        finally:
            factory.shutdown()

    def test_use_cases_share_dependencies(self, factory, product_repository, event_bus):
        create = factory.create_product_use_case()
        stock = factory.update_product_stock_use_case()

        assert create.product_repository is product_repository
        assert stock.product_repository is product_repository
        assert create.event_bus is event_bus
        assert stock.inventory_lock_service is factory.update_product_stock_use_case().inventory_lock_service
        assert create.sku_service.product_repository is product_repository

    def test_builds_every_use_case(self, factory):
        assert isinstance(factory.create_product_use_case(), CreateProductUseCase)
        assert isinstance(factory.update_product_use_case(), UpdateProductUseCase)
        assert isinstance(factory.update_product_stock_use_case(), UpdateProductStockUseCase)
        assert isinstance(factory.delete_product_use_case(), DeleteProductUseCase)
        assert isinstance(factory.search_products_use_case(), SearchProductsUseCase)
        assert isinstance(factory.get_product_by_id_use_case(), GetProductByIdUseCase)
        assert isinstance(factory.get_product_by_sku_use_case(), GetProductBySkuUseCase)

    def test_shutdown_leaves_injected_event_bus_running(self, event_bus):
        received = []
        event_bus.subscribe(ProductDeletedEvent, received.append)
        factory = ProductModuleFactory(event_bus=event_bus)

        factory.shutdown()
        event_bus.publish(ProductDeletedEvent("id-1", "WM-001"))

        assert len(received) == 1
        assert factory.create_event_bus() is event_bus

    def test_shutdown_releases_owned_event_bus(self):
        factory = ProductModuleFactory()
        owned = factory.create_event_bus()

        factory.shutdown()
        replacement = factory.create_event_bus()
        try:
            assert replacement is not owned
        finally:
            factory.shutdown()
