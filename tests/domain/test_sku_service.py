import pytest

from core.domain import ConflictException
from products.domain import ProductSku, ProductSkuService


class TakenSkuRepository:
    """Answers exists_by_sku from a fixed set of taken values."""

    def __init__(self, taken=()):
        self.taken = set(taken)
        self.checked = []

    def exists_by_sku(self, sku):
        self.checked.append(sku.value)
        return sku.value in self.taken


@pytest.fixture()
def frozen_clock(monkeypatch):
    monkeypatch.setattr("products.domain.value_objects.time.time", lambda: 1700000123.4565)


class TestProductSkuService:
    def test_ensure_unique_returns_free_sku(self):
        service = ProductSkuService(TakenSkuRepository())
        assert service.ensure_unique(ProductSku("WM-001")) == ProductSku("WM-001")

    def test_ensure_unique_rejects_taken_sku(self):
        service = ProductSkuService(TakenSkuRepository({"WM-001"}))
        with pytest.raises(ConflictException) as exc:
            service.ensure_unique(ProductSku("WM-001"))
        assert exc.value.message == "Product with SKU WM-001 already exists"

    def test_generate_unique_uses_base_when_free(self, frozen_clock):
        service = ProductSkuService(TakenSkuRepository())
        assert service.generate_unique("Wireless Mouse").value == "WIRELESS-MOUSE-123456"

    def test_generate_unique_appends_counter(self, frozen_clock):
        repository = TakenSkuRepository({"WIRELESS-MOUSE-123456", "WIRELESS-MOUSE-123456-1"})
        service = ProductSkuService(repository)

        assert service.generate_unique("Wireless Mouse").value == "WIRELESS-MOUSE-123456-2"
        assert repository.checked == [
            "WIRELESS-MOUSE-123456",
            "WIRELESS-MOUSE-123456-1",
            "WIRELESS-MOUSE-123456-2",
        ]

    def test_generate_unique_gives_up_after_max_attempts(self, frozen_clock):
        taken = {"WIRELESS-MOUSE-123456"} | {f"WIRELESS-MOUSE-123456-{n}" for n in range(1, 4)}
        service = ProductSkuService(TakenSkuRepository(taken), max_attempts=3)

        with pytest.raises(ConflictException) as exc:
            service.generate_unique("Wireless Mouse")
        assert exc.value.message == "Could not generate unique SKU for product 'Wireless Mouse' after 3 attempts"

    def test_max_attempts_defaults_from_settings(self, settings):
        settings.PRODUCT_SETTINGS = {"SKU_GENERATION_MAX_ATTEMPTS": 7}
        assert ProductSkuService(TakenSkuRepository()).max_attempts == 7

    def test_long_names_leave_room_for_counter(self, frozen_clock):
        repository = TakenSkuRepository()
        service = ProductSkuService(repository, max_attempts=100)
        base = service.generate_unique("Mouse " * 40)
        repository.taken.add(base.value)

        candidate = service.generate_unique("Mouse " * 40)
        assert candidate.value == f"{base.value}-1"
        assert len(base.value) == 96
        assert len(base.with_counter(100).value) == 100

    def test_long_names_report_every_attempt(self, frozen_clock):
        repository = TakenSkuRepository()
        service = ProductSkuService(repository, max_attempts=3)
        base = service.generate_unique("Keyboard " * 30)
        repository.taken.update([base.value] + [f"{base.value}-{n}" for n in range(1, 4)])
        repository.checked.clear()

        with pytest.raises(ConflictException) as exc:
            service.generate_unique("Keyboard " * 30)
        assert exc.value.message.endswith("after 3 attempts")
        assert len(repository.checked) == 4
