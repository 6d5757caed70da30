import threading
from pathlib import Path

import pytest

from core.infrastructure import InMemoryEventBus
from products.application import CreateProductCommand
from products.domain import Category, ProductCreatedEvent, ProductDeletedEvent, ProductStatusChangedEvent, ProductUpdatedEvent
from products.infrastructure.factory import ProductModuleFactory
from products.infrastructure.repositories import InMemoryCategoryRepository, InMemoryProductRepository


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))
        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/infrastructure/" in test_path:
            item.add_marker(pytest.mark.infrastructure)


class EventRecorder:
    """Thread-safe handler collecting every event it receives."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def __call__(self, event):
        with self._lock:
            self.events.append(event)

    def types(self):
        return [event.event_type for event in self.events]

    def of_type(self, event_type):
        return [event for event in self.events if event.event_type == event_type]


@pytest.fixture()
def category():
    return Category(name="Electronics", description="Gadgets and devices")


@pytest.fixture()
def product_repository():
    return InMemoryProductRepository()


@pytest.fixture()
def category_repository(category):
    return InMemoryCategoryRepository([category])


@pytest.fixture()
def event_bus():
    bus = InMemoryEventBus(max_workers=2)
    yield bus
    bus.shutdown()


@pytest.fixture()
def recorder(event_bus):
    recorder = EventRecorder()
    for event_class in (ProductCreatedEvent, ProductUpdatedEvent, ProductStatusChangedEvent, ProductDeletedEvent):
        event_bus.subscribe(event_class, recorder)
    return recorder


@pytest.fixture()
def factory(product_repository, category_repository, event_bus):
    factory = ProductModuleFactory(
        product_repository=product_repository,
        category_repository=category_repository,
        event_bus=event_bus,
    )
    yield factory
    factory.shutdown()


@pytest.fixture()
def create_command(category):
    """Builds a valid create command; keyword arguments override fields."""

    def build(**overrides):
        fields = dict(
            name="Wireless Mouse",
            category_id=str(category.id),
            price=29.99,
            cost=12.5,
            sku="WM-001",
            stock_quantity=10,
            status="active",
        )
        fields.update(overrides)
        return CreateProductCommand(**fields)

    return build


@pytest.fixture()
def create_product(factory, create_command):
    """Creates a product through the use case and returns its DTO."""

    def create(**overrides):
        result = factory.create_product_use_case().execute(create_command(**overrides))
        assert result.success, result.errors
        return result.data

    return create
