from datetime import datetime, timedelta
from decimal import Decimal
import uuid

import pytest

from core.domain import ConcurrencyException, ConflictException, EntityNotFoundException, Money
from products.domain import (
    Product,
    ProductName,
    ProductSearchFilters,
    ProductSearchOptions,
    ProductSku,
    ProductStatus,
)
from products.infrastructure.repositories import InMemoryCategoryRepository


def build(sku="WM-001", name="Wireless Mouse", price=30, cost=20, currency="USD", **options):
    options.setdefault("stock_quantity", 10)
    return Product.create(ProductName(name), ProductSku(sku), Money(price, currency), Money(cost, currency), **options)


class TestWrites:
    def test_save_and_find(self, product_repository):
        product = product_repository.save(build())

        found = product_repository.find_by_id(product.id)
        assert found == product
        assert found is not product
        assert found.version == 0
        assert product_repository.find_by_id(str(product.id)) == product

    def test_stored_copy_is_isolated(self, product_repository):
        product = product_repository.save(build())
        product.add_stock(5)
        assert product_repository.find_by_id(product.id).stock_quantity == 10

    def test_save_duplicate_id(self, product_repository):
        product = product_repository.save(build())
        with pytest.raises(ConflictException):
            product_repository.save(product)

    def test_save_rejects_taken_sku_and_barcode(self, product_repository):
        product_repository.save(build(barcode="123"))

        with pytest.raises(ConflictException) as exc:
            product_repository.save(build(name="Other Mouse"))
        assert exc.value.message == "Product with SKU WM-001 already exists"

        with pytest.raises(ConflictException) as exc:
            product_repository.save(build("WM-002", barcode="123"))
        assert exc.value.message == "Product with barcode 123 already exists"
        assert product_repository.count() == 1

    def test_update_rejects_taken_sku(self, product_repository):
        product_repository.save(build("WM-001"))
        other = product_repository.save(build("WM-002"))
        other = product_repository.find_by_id(other.id)
        other.update_sku(ProductSku("WM-001"))

        with pytest.raises(ConflictException):
            product_repository.update(other)
        assert product_repository.find_by_id(other.id).sku.value == "WM-002"

    def test_deleted_rows_do_not_hold_sku(self, product_repository):
        deleted = product_repository.save(build(barcode="123"))
        deleted.delete()
        product_repository.update(deleted)

        product_repository.save(build(barcode="123"))
        assert product_repository.count() == 1

    def test_update_increments_version(self, product_repository):
        product_repository.save(build())
        product = product_repository.find_by_sku(ProductSku("WM-001"))
        product.add_stock(1)
        product_repository.update(product)

        assert product.version == 1
        assert product_repository.find_by_id(product.id).version == 1

    def test_stale_update_is_rejected(self, product_repository):
        saved = product_repository.save(build())
        first = product_repository.find_by_id(saved.id)
        second = product_repository.find_by_id(saved.id)

        first.add_stock(1)
        product_repository.update(first)
        second.add_stock(2)
        with pytest.raises(ConcurrencyException):
            product_repository.update(second)

        assert product_repository.find_by_id(saved.id).stock_quantity == 11

    def test_update_missing(self, product_repository):
        with pytest.raises(EntityNotFoundException):
            product_repository.update(build())

    def test_hard_delete(self, product_repository):
        product = product_repository.save(build())
        product_repository.delete(product.id)
        assert product_repository.find_by_id(product.id, include_deleted=True) is None
        with pytest.raises(EntityNotFoundException):
            product_repository.delete(product.id)


class TestLookups:
    def test_soft_deleted_products_are_hidden(self, product_repository):
        product = product_repository.save(build(barcode="123"))
        product.delete()
        product_repository.update(product)

        assert product_repository.find_by_id(product.id) is None
        assert product_repository.find_by_sku(ProductSku("WM-001")) is None
        assert product_repository.find_by_barcode("123") is None
        assert product_repository.find_by_sku(ProductSku("WM-001"), include_deleted=True).is_deleted
        assert not product_repository.exists(product.id)
        assert not product_repository.exists_by_sku(ProductSku("WM-001"))
        assert not product_repository.exists_by_barcode("123")
        assert product_repository.count() == 0

    def test_exists(self, product_repository):
        product = product_repository.save(build(barcode="123"))
        assert product_repository.exists(product.id)
        assert product_repository.exists_by_sku(ProductSku("wm-001"))
        assert product_repository.exists_by_barcode("123")
        assert not product_repository.exists(uuid.uuid4())


class TestSearch:
    @pytest.fixture()
    def stocked(self, product_repository):
        products = [
            build("A-1", "Alpha Lamp", price=10, stock_quantity=0, tags=["home"]),
            build("B-1", "Beta Lamp", price=20, stock_quantity=5, status=ProductStatus.INACTIVE),
            build("C-1", "Gamma Desk", price=30, stock_quantity=50),
            build("D-1", "Delta Desk", price=40, cost=10, currency="EUR"),
        ]
        for product in products:
            product_repository.save(product)
        return products

    def test_filters_combine(self, product_repository, stocked):
        result = product_repository.search(ProductSearchFilters(name="lamp", in_stock=True))
        assert [product.sku.value for product in result.products] == ["B-1"]

    def test_price_filters_respect_currency(self, product_repository, stocked):
        result = product_repository.search(ProductSearchFilters(min_price=Money(25)))
        assert [product.sku.value for product in result.products] == ["C-1"]

    def test_sorting_and_paging(self, product_repository, stocked):
        options = ProductSearchOptions(sort_by="price", sort_order="desc", limit=2, offset=1)
        result = product_repository.search(ProductSearchFilters(), options)

        assert [product.sku.value for product in result.products] == ["C-1", "B-1"]
        assert result.total == 4
        assert result.has_more

    def test_count_with_filters(self, product_repository, stocked):
        assert product_repository.count() == 4
        assert product_repository.count(ProductSearchFilters(status=ProductStatus.INACTIVE)) == 1

    def test_find_by_category(self, product_repository):
        category_id = uuid.uuid4()
        product_repository.save(build(category_id=category_id))
        product_repository.save(build("X-1"))

        result = product_repository.find_by_category(category_id)
        assert [product.sku.value for product in result.products] == ["WM-001"]

    def test_stock_queries(self, product_repository, stocked):
        assert [p.sku.value for p in product_repository.find_out_of_stock_products().products] == ["A-1"]
        low = product_repository.find_low_stock_products()
        assert sorted(p.sku.value for p in low.products) == ["A-1", "B-1", "D-1"]
        assert sorted(p.sku.value for p in product_repository.find_low_stock_products(threshold=0).products) == ["A-1"]

    def test_reorder_and_attention(self, product_repository):
        product_repository.save(build("R-1", reorder_level=10))
        product_repository.save(build("R-2", reorder_level=10, status=ProductStatus.DISCONTINUED))
        product_repository.save(build("P-1", status=ProductStatus.PENDING_APPROVAL))
        product_repository.save(build("OK-1", reorder_level=1))

        assert [p.sku.value for p in product_repository.find_products_requiring_reorder()] == ["R-1"]
        attention = sorted(p.sku.value for p in product_repository.find_products_needing_attention())
        assert attention == ["P-1", "R-1", "R-2"]


class TestBusinessRules:
    def test_duplicate_sku_and_barcode(self, product_repository):
        product_repository.save(build(barcode="123"))
        errors = product_repository.validate_business_rules(build(barcode="123"))
        assert errors == ["SKU already exists", "Barcode already exists"]

    def test_product_does_not_conflict_with_itself(self, product_repository):
        product = product_repository.save(build(barcode="123"))
        assert product_repository.validate_business_rules(product) == []

    def test_reorder_level_above_maximum(self, product_repository):
        errors = product_repository.validate_business_rules(build(reorder_level=20, max_stock_level=10))
        assert errors == ["Reorder level cannot exceed maximum stock level"]
        assert product_repository.validate_business_rules(build(reorder_level=20, max_stock_level=0)) == []


class TestStatistics:
    def test_get_statistics(self, product_repository):
        product_repository.save(build("A-1", price=10, cost=5, stock_quantity=0))
        product_repository.save(build("B-1", price=20, cost=8, stock_quantity=4, status=ProductStatus.INACTIVE))
        product_repository.save(build("C-1", price=99, cost=50, currency="EUR", stock_quantity=50))
        deleted = build("D-1")
        product_repository.save(deleted)
        deleted.delete()
        product_repository.update(deleted)

        stats = product_repository.get_statistics()
        assert stats.total_products == 3
        assert stats.active_products == 2
        assert stats.inactive_products == 1
        assert stats.out_of_stock_products == 1
        assert stats.low_stock_products == 2
        assert stats.average_price == Money(15)
        assert stats.total_value == Money(32)
        assert stats.to_dict()["total_value"] == {"amount": "32.00", "currency": "USD"}

    def test_empty_statistics(self, product_repository):
        stats = product_repository.get_statistics()
        assert stats.total_products == 0
        assert stats.average_price.amount == Decimal("0.00")

    def test_get_product_trends(self, product_repository):
        start = datetime.now() - timedelta(seconds=1)
        product_repository.save(build("A-1"))
        product = product_repository.save(build("B-1"))
        product.add_stock(1)
        product_repository.update(product)
        product.discontinue()
        product_repository.update(product)

        trends = product_repository.get_product_trends(start, datetime.now() + timedelta(seconds=1))
        assert trends.new_products == 2
        assert trends.updated_products == 1
        assert trends.discontinued_products == 1
        assert trends.stock_changes == 1

        past = product_repository.get_product_trends(start - timedelta(days=2), start - timedelta(days=1))
        assert (past.new_products, past.stock_changes) == (0, 0)

    def test_clear(self, product_repository):
        product_repository.save(build())
        product_repository.clear()
        assert product_repository.count() == 0


class TestInMemoryCategoryRepository:
    def test_lookup(self, category):
        repository = InMemoryCategoryRepository([category])
        assert repository.exists(category.id)
        assert repository.exists(str(category.id))
        assert repository.find_by_id(category.id).name == "Electronics"
        assert repository.find_by_id(uuid.uuid4()) is None

    def test_add(self, category):
        repository = InMemoryCategoryRepository()
        repository.add(category)
        assert repository.exists(category.id)
