from decimal import Decimal
import threading
import uuid

import pytest

from core.application import ErrorCode
from products.application import (
    DeleteProductCommand,
    UpdateProductCommand,
    UpdateProductStockCommand,
    UpdateProductStockUseCase,
)
from products.infrastructure.services import InProcessInventoryLockService


def adjust(factory, product_id, operation, quantity, **fields):
    command = UpdateProductStockCommand(product_id=product_id, operation=operation, quantity=quantity, **fields)
    return factory.update_product_stock_use_case().execute(command)


class TestUpdateProductStock:
    def test_add(self, factory, create_product, recorder):
        product = create_product()
        result = adjust(factory, product.id, "add", 5, reason="restock")

        assert result.success
        assert (result.data.previous_stock, result.data.new_stock) == (10, 15)
        assert result.data.product.stock_quantity == 15
        assert result.data.product.version == 1
        assert recorder.types() == ["ProductCreated", "ProductUpdated"]

    def test_remove(self, factory, create_product, product_repository):
        product = create_product()
        result = adjust(factory, product.id, "remove", 4)

        assert result.data.new_stock == 6
        assert product_repository.find_by_id(uuid.UUID(product.id)).stock_quantity == 6

    def test_set(self, factory, create_product):
        product = create_product()
        assert adjust(factory, product.id, "set", 0).data.new_stock == 0
        assert adjust(factory, product.id, "set", 42).data.new_stock == 42

    def test_whole_float_quantity_is_accepted(self, factory, create_product):
        product = create_product()
        assert adjust(factory, product.id, "add", 5.0).data.new_stock == 15

    def test_insufficient_stock(self, factory, create_product, product_repository):
        product = create_product(stock_quantity=3)
        result = adjust(factory, product.id, "remove", 5)

        assert result.error_code == ErrorCode.STOCK_INSUFFICIENT
        assert result.error == "Insufficient stock quantity: requested 5, available 3"
        stored = product_repository.find_by_id(uuid.UUID(product.id))
        assert stored.stock_quantity == 3
        assert stored.version == 0

    @pytest.mark.parametrize(
        "operation, quantity, message",
        [
            ("multiply", 1, "Invalid operation. Must be one of: add, remove, set"),
            ("add", "5", "Quantity must be a valid number"),
            ("add", float("nan"), "Quantity must be a valid number"),
            ("add", float("inf"), "Quantity must be a valid number"),
            ("set", float("-inf"), "Quantity must be a valid number"),
            ("add", Decimal("Infinity"), "Quantity must be a valid number"),
            ("add", True, "Quantity must be a valid number"),
            ("add", -1, "Quantity cannot be negative"),
            ("add", 1.5, "Quantity must be a whole number"),
            ("add", 0, "Quantity must be greater than 0 for add/remove operations"),
            ("remove", 0, "Quantity must be greater than 0 for add/remove operations"),
        ],
    )
    def test_invalid_requests(self, factory, create_product, operation, quantity, message):
        product = create_product()
        result = adjust(factory, product.id, operation, quantity)

        assert result.error_code == ErrorCode.VALIDATION
        assert result.error == message

    def test_malformed_product_id(self, factory):
        assert adjust(factory, "abc", "add", 1).error == "Invalid product ID format"

    def test_missing_product(self, factory):
        result = adjust(factory, str(uuid.uuid4()), "add", 1)
        assert result.error_code == ErrorCode.NOT_FOUND

    def test_inactive_product(self, factory, create_product):
        product = create_product(status="draft")
        result = adjust(factory, product.id, "add", 1)

        assert result.error_code == ErrorCode.BUSINESS_RULE
        assert result.error == "Cannot update stock for inactive product"

    def test_out_of_stock_product_can_be_restocked(self, factory, create_product):
        product = create_product(stock_quantity=0)
        factory.update_product_use_case().execute(UpdateProductCommand(id=product.id, status="out_of_stock"))

        result = adjust(factory, product.id, "add", 3)
        assert result.success
        assert result.data.product.status == "out_of_stock"

    def test_deleted_product(self, factory, create_product):
        product = create_product()
        factory.delete_product_use_case().execute(DeleteProductCommand(id=product.id, force=True))

        result = adjust(factory, product.id, "add", 1)
        assert result.error_code == ErrorCode.BUSINESS_RULE
        assert result.error == "Cannot update stock for deleted product"

    def test_concurrent_adjustments_are_not_lost(self, factory, create_product, product_repository):
        product = create_product()
        use_case = factory.update_product_stock_use_case()
        barrier = threading.Barrier(2)
        results = []

        def add_five():
            barrier.wait()
            results.append(use_case.execute(UpdateProductStockCommand(product.id, "add", 5)))

        threads = [threading.Thread(target=add_five) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(result.success for result in results)
        stored = product_repository.find_by_id(uuid.UUID(product.id))
        assert stored.stock_quantity == 20
        assert stored.version == 2

    def test_many_concurrent_removals_never_oversell(self, factory, create_product, product_repository):
        product = create_product(stock_quantity=5)
        use_case = factory.update_product_stock_use_case()
        results = []
        lock = threading.Lock()

        def remove_one():
            result = use_case.execute(UpdateProductStockCommand(product.id, "remove", 1))
            with lock:
                results.append(result)

        threads = [threading.Thread(target=remove_one) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for result in results if result.success) == 5
        assert sum(1 for result in results if result.error_code == ErrorCode.STOCK_INSUFFICIENT) == 3
        assert product_repository.find_by_id(uuid.UUID(product.id)).stock_quantity == 0

    def test_lock_timeout(self, create_product, product_repository, event_bus):
        product = create_product()
        lock_service = InProcessInventoryLockService(lock_timeout_seconds=0.05)
        use_case = UpdateProductStockUseCase(product_repository, event_bus, lock_service)
        acquired = threading.Event()
        release = threading.Event()

        def hold_lock():
            with lock_service.lock_inventory(uuid.UUID(product.id)):
                acquired.set()
                release.wait(5)

        holder = threading.Thread(target=hold_lock)
        holder.start()
        try:
            assert acquired.wait(5)
            result = use_case.execute(UpdateProductStockCommand(product.id, "add", 1))
        finally:
            release.set()
            holder.join()

        assert result.error_code == ErrorCode.LOCK_TIMEOUT
        assert result.error.startswith(f"Could not acquire lock for 'inventory:{product.id}'")
        assert product_repository.find_by_id(uuid.UUID(product.id)).stock_quantity == 10
