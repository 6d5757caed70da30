import re
import threading
import uuid

from core.application import ErrorCode
from products.application import CreateProductUseCase
from products.domain import ProductCreatedEvent, ProductSearchFilters, ProductSku
from products.infrastructure.repositories import InMemoryProductRepository


class BrokenEventBus:
    def publish(self, event):
        raise RuntimeError("broker unavailable")


class GatedProductRepository(InMemoryProductRepository):
    """Holds callers after the business-rule check until all of them have passed it."""

    def __init__(self, parties):
        super().__init__()
        self.gate = threading.Barrier(parties, timeout=5)

    def validate_business_rules(self, product):
        errors = super().validate_business_rules(product)
        self.gate.wait()
        return errors


class TestCreateProduct:
    def test_creates_product(self, factory, create_command, product_repository, recorder, category):
        result = factory.create_product_use_case().execute(create_command())

        assert result.success
        assert result.error_code == ErrorCode.SUCCESS
        product = result.data
        assert product.name == "Wireless Mouse"
        assert product.sku == "WM-001"
        assert product.price == {"amount": "29.99", "currency": "USD"}
        assert product.cost == {"amount": "12.50", "currency": "USD"}
        assert product.category_id == str(category.id)
        assert product.stock_quantity == 10
        assert product.status == "active"
        assert product.version == 0
        assert product.is_available_for_sale

        assert product_repository.exists(uuid.UUID(product.id))
        assert recorder.types() == ["ProductCreated"]
        assert recorder.events[0].aggregate_id == uuid.UUID(product.id)

    def test_status_defaults_to_draft(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(status=None))
        assert result.data.status == "draft"

    def test_max_stock_level_defaults_from_settings(self, factory, create_command, settings):
        settings.PRODUCT_SETTINGS = {**settings.PRODUCT_SETTINGS, "DEFAULT_MAX_STOCK_LEVEL": 250}
        result = factory.create_product_use_case().execute(create_command())
        assert result.data.max_stock_level == 250

    def test_sku_is_normalised(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(sku=" wm-002 "))
        assert result.data.sku == "WM-002"

    def test_sku_is_generated_from_name(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(sku=None))

        assert result.success
        assert re.fullmatch(r"[A-Z0-9_-]+", result.data.sku)
        assert re.fullmatch(r"WIRELESS-MOUSE-\d{6}", result.data.sku)

    def test_optional_fields(self, factory, create_command):
        result = factory.create_product_use_case().execute(
            create_command(
                barcode="0123456789012",
                description="Ergonomic mouse with silent buttons.",
                currency="EUR",
                weight={"value": 0.2, "unit": "kg"},
                dimensions={"length": 12, "width": 6, "height": 4, "unit": "cm"},
                min_stock_level=2,
                reorder_level=5,
                tags=["office"],
                specifications={"dpi": 1600},
                created_by=str(uuid.uuid4()),
            )
        )

        product = result.data
        assert product.barcode == "0123456789012"
        assert product.description == "Ergonomic mouse with silent buttons."
        assert product.price["currency"] == "EUR"
        assert product.cost["currency"] == "EUR"
        assert product.weight == {"value": "0.200", "unit": "kg"}
        assert product.dimensions["unit"] == "cm"
        assert (product.min_stock_level, product.reorder_level) == (2, 5)
        assert product.tags == ["office"]
        assert product.specifications == {"dpi": 1600}
        assert product.created_by is not None

    def test_validation_errors_are_collected(self, factory, create_command, product_repository, recorder):
        result = factory.create_product_use_case().execute(
            create_command(name="  ", category_id=None, price=-1, cost="12", stock_quantity=-5)
        )

        assert not result.success
        assert result.error_code == ErrorCode.VALIDATION
        assert result.errors == [
            "Product name is required",
            "Category ID is required",
            "Price must be a non-negative number",
            "Cost must be a non-negative number",
            "Stock quantity must be a non-negative number",
        ]
        assert result.error == "; ".join(result.errors)
        assert product_repository.count() == 0
        assert recorder.events == []

    def test_unknown_category(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(category_id=str(uuid.uuid4())))
        assert result.errors == ["Category does not exist"]

    def test_malformed_category_id(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(category_id="electronics"))
        assert result.errors == ["Invalid category ID format"]

    def test_invalid_weight_status_and_currency(self, factory, create_command):
        result = factory.create_product_use_case().execute(
            create_command(weight={"value": -1}, status="archived", currency="XYZ")
        )
        assert result.errors == [
            "Weight value must be a non-negative number",
            "Weight unit is required when weight is specified",
            "Invalid product status",
            "Invalid currency code",
        ]

    def test_invalid_name_content(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(name="Mouse <b>"))
        assert result.error_code == ErrorCode.VALIDATION
        assert result.error == "Product name cannot contain invalid characters (<, >, \", ', &)"

    def test_invalid_sku_format(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(sku="WM 001"))
        assert result.error_code == ErrorCode.VALIDATION
        assert result.error == "Product SKU can only contain uppercase letters, numbers, underscores, and hyphens"

    def test_duplicate_sku(self, factory, create_command, create_product):
        create_product()
        result = factory.create_product_use_case().execute(create_command(name="Other Mouse", sku="wm-001"))

        assert result.error_code == ErrorCode.CONFLICT
        assert result.error == "Product with SKU WM-001 already exists"

    def test_duplicate_barcode(self, factory, create_command, create_product):
        create_product(barcode="0123456789012")
        result = factory.create_product_use_case().execute(create_command(sku="WM-002", barcode="0123456789012"))

        assert result.error_code == ErrorCode.CONFLICT
        assert result.error == "Product with barcode 0123456789012 already exists"

    def test_reorder_level_above_maximum(self, factory, create_command):
        result = factory.create_product_use_case().execute(create_command(reorder_level=50, max_stock_level=10))
        assert result.error_code == ErrorCode.VALIDATION
        assert result.errors == ["Reorder level cannot exceed maximum stock level"]

    def test_works_without_event_bus(self, product_repository, category_repository, create_command):
        use_case = CreateProductUseCase(product_repository, category_repository)
        result = use_case.execute(create_command())
        assert result.success
        assert product_repository.find_by_sku(ProductSku("WM-001")) is not None

    def test_event_publish_failure_does_not_fail_the_write(self, product_repository, category_repository, create_command):
        use_case = CreateProductUseCase(product_repository, category_repository, event_bus=BrokenEventBus())
        result = use_case.execute(create_command())
        assert result.success
        assert product_repository.count() == 1

    def test_failing_handler_does_not_fail_the_write(self, factory, create_command, event_bus, recorder):
        def broken_handler(event):
            raise RuntimeError("handler failed")

        event_bus.subscribe(ProductCreatedEvent, broken_handler)
        result = factory.create_product_use_case().execute(create_command())

        assert result.success
        assert recorder.types() == ["ProductCreated"]

    def test_unexpected_error_returns_generic_message(self, category_repository, create_command):
        class ExplodingRepository:
            def exists_by_sku(self, sku):
                raise RuntimeError("connection reset")

        use_case = CreateProductUseCase(ExplodingRepository(), category_repository)
        result = use_case.execute(create_command())

        assert result.error_code == ErrorCode.UNEXPECTED
        assert result.error == "An unexpected error occurred"


class TestConcurrentCreate:
    def test_same_sku_is_stored_once(self, category_repository, create_command):
        repository = GatedProductRepository(parties=2)
        use_case = CreateProductUseCase(repository, category_repository)
        results = []

        def create(name):
            results.append(use_case.execute(create_command(name=name, sku="DUP-1")))

        threads = [threading.Thread(target=create, args=(name,)) for name in ("Mouse A", "Mouse B")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(result.success for result in results) == [False, True]
        failed = next(result for result in results if not result.success)
        assert failed.error_code == ErrorCode.CONFLICT
        assert failed.error == "Product with SKU DUP-1 already exists"
        assert repository.count(ProductSearchFilters(sku="DUP-1")) == 1

    def test_same_barcode_is_stored_once(self, category_repository, create_command):
        repository = GatedProductRepository(parties=2)
        use_case = CreateProductUseCase(repository, category_repository)
        results = []

        def create(sku):
            results.append(use_case.execute(create_command(sku=sku, barcode="0123456789012")))

        threads = [threading.Thread(target=create, args=(sku,)) for sku in ("WM-A", "WM-B")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(result.success for result in results) == [False, True]
        failed = next(result for result in results if not result.success)
        assert failed.error == "Product with barcode 0123456789012 already exists"
        assert repository.count() == 1
