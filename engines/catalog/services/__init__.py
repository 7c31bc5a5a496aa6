"""
PDV Catalog Engine - Application Service
==========================================
Product CRUD with stock as a mutable quantity.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from core.errors import raise_for_rejection
from core.events.publisher import EventPublisher
from core.identity.ids import IdProvider, UuidIdProvider
from core.primitives.item import Product
from engines.catalog.commands import AddProductRequest
from engines.catalog.events import (
    CATALOG_PRODUCT_ADDED_V1,
    CATALOG_PRODUCT_DELETED_V1,
    CATALOG_PRODUCT_UPDATED_V1,
    CATALOG_STOCK_DECREMENTED_V1,
    build_product_added_payload,
    build_product_deleted_payload,
    build_product_updated_payload,
    build_stock_decremented_payload,
)
from engines.catalog.policies import (
    product_must_exist_policy,
    product_update_valid_policy,
)

logger = logging.getLogger("pdv.catalog")


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

class CatalogStore:
    """In-memory product collection, insertion ordered."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: Dict[str, Product] = {}
        self.restore(products)

    def put(self, product: Product) -> None:
        self._products[product.product_id] = product

    def remove(self, product_id: str) -> Optional[Product]:
        return self._products.pop(product_id, None)

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def all(self) -> Tuple[Product, ...]:
        return tuple(self._products.values())

    def restore(self, products: Iterable[Product]) -> None:
        self._products = {p.product_id: p for p in products}

    def __len__(self) -> int:
        return len(self._products)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class CatalogService:
    """Catalog Engine application service."""

    def __init__(
        self,
        *,
        store: CatalogStore | None = None,
        publisher: EventPublisher | None = None,
        id_provider: IdProvider | None = None,
    ):
        self._store = store or CatalogStore()
        self._publisher = publisher or EventPublisher()
        self._id_provider = id_provider or UuidIdProvider()

    # ── Commands ──────────────────────────────────────────────

    def add(self, request: AddProductRequest) -> Product:
        product = Product(
            product_id=self._id_provider.new_id(),
            name=request.name,
            price=request.price,
            stock=request.stock,
            category=request.category,
            description=request.description,
            barcode=request.barcode,
            image_url=request.image_url,
        )
        self._store.put(product)
        logger.info(f"Product added: {product.product_id} ({product.name})")
        self._publisher.publish(
            CATALOG_PRODUCT_ADDED_V1, build_product_added_payload(product),
        )
        return product

    def update(self, product: Product) -> Product:
        raise_for_rejection(
            product_must_exist_policy(product.product_id, self._store.get)
        )
        raise_for_rejection(product_update_valid_policy(product))

        previous = self._store.get(product.product_id)
        self._store.put(product)
        logger.info(f"Product updated: {product.product_id} ({product.name})")
        self._publisher.publish(
            CATALOG_PRODUCT_UPDATED_V1,
            build_product_updated_payload(previous, product),
        )
        return product

    def delete(self, product_id: str) -> bool:
        """Remove a product. Deleting an absent id is a no-op."""
        removed = self._store.remove(product_id)
        if removed is None:
            return False
        logger.info(f"Product deleted: {product_id} ({removed.name})")
        self._publisher.publish(
            CATALOG_PRODUCT_DELETED_V1, build_product_deleted_payload(removed),
        )
        return True

    def apply_stock_decrements(self, quantities: Dict[str, int]) -> Dict[str, int]:
        """
        Subtract sold quantities from stock, no floor at zero.

        Ids no longer in the catalog are skipped. Returns the
        resulting stock per decremented product.
        """
        resulting: Dict[str, int] = {}
        for product_id, quantity in quantities.items():
            product = self._store.get(product_id)
            if product is None:
                logger.warning(
                    f"Stock decrement skipped: product {product_id} "
                    f"is no longer in the catalog."
                )
                continue
            updated = product.with_stock(product.stock - quantity)
            self._store.put(updated)
            resulting[product_id] = updated.stock
            if updated.stock < 0:
                logger.warning(
                    f"Negative stock: {product_id} ({product.name}) "
                    f"now at {updated.stock}."
                )

        if resulting:
            self._publisher.publish(
                CATALOG_STOCK_DECREMENTED_V1,
                build_stock_decremented_payload(quantities, resulting),
            )
        return resulting

    def restore(self, products: Iterable[Product]) -> None:
        self._store.restore(products)

    # ── Queries ───────────────────────────────────────────────

    def list(self) -> Tuple[Product, ...]:
        return self._store.all()

    def find(self, product_id: str) -> Optional[Product]:
        return self._store.get(product_id)

    def get(self, product_id: str) -> Product:
        raise_for_rejection(product_must_exist_policy(product_id, self._store.get))
        return self._store.get(product_id)

    def find_by_name(self, text: str) -> List[Product]:
        needle = text.strip().casefold()
        return [p for p in self._store.all() if needle in p.name.casefold()]

    def low_stock(self, threshold: int) -> List[Product]:
        return [p for p in self._store.all() if p.is_low_stock(threshold)]

    @property
    def store(self) -> CatalogStore:
        return self._store
