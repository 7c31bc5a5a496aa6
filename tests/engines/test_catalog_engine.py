"""
Tests for engines.catalog: product CRUD and stock decrements.
"""

import logging
from dataclasses import replace

import pytest

from core.errors import NotFound, ValidationError
from core.events.publisher import EventPublisher
from core.identity.ids import SequentialIdProvider
from engines.catalog.commands import AddProductRequest
from engines.catalog.events import (
    CATALOG_PRODUCT_ADDED_V1,
    CATALOG_PRODUCT_DELETED_V1,
    CATALOG_PRODUCT_UPDATED_V1,
    CATALOG_STOCK_DECREMENTED_V1,
)
from engines.catalog.services import CatalogService


def _service():
    publisher = EventPublisher()
    heard = []
    publisher.subscribe(heard.append)
    service = CatalogService(
        publisher=publisher, id_provider=SequentialIdProvider("prod"),
    )
    return service, heard


def _add(service, name="Coffee", price=10.0, stock=20, **kw):
    return service.add(AddProductRequest(name=name, price=price, stock=stock, **kw))


class TestAddProductRequest:
    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(name="", price=1.0, stock=1),
            dict(name="Tea", price=-0.01, stock=1),
            dict(name="Tea", price=1.0, stock=-1),
            dict(name="Tea", price=1.0, stock=1.5),
            dict(name="Tea", price="1", stock=1),
        ],
    )
    def test_rejects_invalid_input(self, kwargs):
        with pytest.raises(ValidationError):
            AddProductRequest(**kwargs)


class TestCatalogCommands:
    def test_add_assigns_ids(self):
        service, heard = _service()
        first = _add(service)
        second = _add(service, name="Tea")
        assert (first.product_id, second.product_id) == ("prod-1", "prod-2")
        assert [e.event_type for e in heard] == [CATALOG_PRODUCT_ADDED_V1] * 2

    def test_list_keeps_insertion_order(self):
        service, _ = _service()
        for name in ("B", "A", "C"):
            _add(service, name=name)
        assert [p.name for p in service.list()] == ["B", "A", "C"]

    def test_update_replaces_by_id(self):
        service, heard = _service()
        product = _add(service)
        updated = service.update(replace(product, price=12.0, stock=-4))
        assert service.get(product.product_id) == updated
        assert heard[-1].event_type == CATALOG_PRODUCT_UPDATED_V1
        assert heard[-1].payload["previous_price"] == 10.0

    def test_update_unknown_raises_not_found(self):
        service, _ = _service()
        product = _add(service)
        with pytest.raises(NotFound):
            service.update(replace(product, product_id="ghost"))

    def test_update_rejects_negative_price(self):
        service, _ = _service()
        product = _add(service)
        with pytest.raises(ValidationError, match="price"):
            service.update(replace(product, price=-1))
        assert service.get(product.product_id).price == 10.0

    def test_delete(self):
        service, heard = _service()
        product = _add(service)
        assert service.delete(product.product_id) is True
        assert service.find(product.product_id) is None
        assert heard[-1].event_type == CATALOG_PRODUCT_DELETED_V1

    def test_delete_absent_is_noop(self):
        service, heard = _service()
        assert service.delete("ghost") is False
        assert heard == []


class TestStockDecrements:
    def test_decrements_without_floor(self, caplog):
        service, heard = _service()
        product = _add(service, stock=2)
        with caplog.at_level(logging.WARNING, logger="pdv.catalog"):
            result = service.apply_stock_decrements({product.product_id: 5})
        assert result == {product.product_id: -3}
        assert service.get(product.product_id).stock == -3
        assert "Negative stock" in caplog.text
        assert heard[-1].event_type == CATALOG_STOCK_DECREMENTED_V1

    def test_skips_deleted_products(self):
        service, _ = _service()
        product = _add(service, stock=5)
        result = service.apply_stock_decrements({product.product_id: 1, "gone": 3})
        assert result == {product.product_id: 4}


class TestCatalogQueries:
    def test_get_unknown_raises(self):
        service, _ = _service()
        with pytest.raises(NotFound):
            service.get("ghost")

    def test_find_by_name_is_case_insensitive(self):
        service, _ = _service()
        _add(service, name="Café Espresso")
        _add(service, name="Green Tea")
        assert [p.name for p in service.find_by_name("  ESPRESSO ")] == ["Café Espresso"]

    def test_low_stock(self):
        service, _ = _service()
        _add(service, name="Low", stock=3)
        _add(service, name="Enough", stock=10)
        assert [p.name for p in service.low_stock(10)] == ["Low"]
