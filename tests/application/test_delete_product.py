import uuid

from core.application import ErrorCode
from products.application import DeleteProductCommand, GetProductByIdQuery


def delete(factory, product_id, **fields):
    return factory.delete_product_use_case().execute(DeleteProductCommand(id=product_id, **fields))


class TestDeleteProduct:
    def test_soft_deletes_product(self, factory, create_product, product_repository, recorder):
        product = create_product(stock_quantity=0, status="inactive")
        deleted_by = str(uuid.uuid4())
        result = delete(factory, product.id, deleted_by=deleted_by)

        assert result.success
        assert result.data.is_deleted
        assert str(result.data.deleted_by) == deleted_by
        assert recorder.types() == ["ProductCreated", "ProductDeleted"]
        assert recorder.of_type("ProductDeleted")[0].product_sku == "WM-001"

        stored = product_repository.find_by_id(uuid.UUID(product.id), include_deleted=True)
        assert stored.is_deleted
        assert product_repository.find_by_id(uuid.UUID(product.id)) is None

    def test_deleted_product_is_hidden_from_reads(self, factory, create_product):
        product = create_product(stock_quantity=0, status="inactive")
        delete(factory, product.id)

        get_product = factory.get_product_by_id_use_case()
        assert get_product.execute(GetProductByIdQuery(product.id)).error_code == ErrorCode.NOT_FOUND
        assert get_product.execute(GetProductByIdQuery(product.id, include_deleted=True)).success

    def test_stocked_active_product_is_protected(self, factory, create_product, product_repository):
        product = create_product()
        result = delete(factory, product.id)

        assert result.error_code == ErrorCode.BUSINESS_RULE
        assert result.errors == [
            "Cannot delete product with stock quantity greater than 0",
            "Cannot delete active product. Change status first",
        ]
        assert not product_repository.find_by_id(uuid.UUID(product.id)).is_deleted

    def test_force_skips_protection(self, factory, create_product):
        product = create_product()
        assert delete(factory, product.id, force=True).success

    def test_already_deleted(self, factory, create_product):
        product = create_product()
        delete(factory, product.id, force=True)

        result = delete(factory, product.id, force=True)
        assert result.error_code == ErrorCode.BUSINESS_RULE
        assert result.error == "Product is already deleted"

    def test_sku_can_be_reused_after_deletion(self, factory, create_product):
        product = create_product()
        delete(factory, product.id, force=True)

        replacement = create_product()
        assert replacement.sku == product.sku
        assert replacement.id != product.id

    def test_missing_product(self, factory):
        result = delete(factory, str(uuid.uuid4()))
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.error == "Product not found"

    def test_malformed_id(self, factory):
        result = delete(factory, "12345")
        assert result.error_code == ErrorCode.VALIDATION
        assert result.error == "Invalid product ID format"
