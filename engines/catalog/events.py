"""
PDV Catalog Engine - Event Types and Payload Builders
=======================================================
Catalog owns the product collection. Stock changes only
through explicit updates or the sale finalization flow.
"""

from __future__ import annotations

from typing import Dict

from core.primitives.item import Product


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

CATALOG_PRODUCT_ADDED_V1 = "catalog.product.added.v1"
CATALOG_PRODUCT_UPDATED_V1 = "catalog.product.updated.v1"
CATALOG_PRODUCT_DELETED_V1 = "catalog.product.deleted.v1"
CATALOG_STOCK_DECREMENTED_V1 = "catalog.stock.decremented.v1"

CATALOG_EVENT_TYPES = (
    CATALOG_PRODUCT_ADDED_V1,
    CATALOG_PRODUCT_UPDATED_V1,
    CATALOG_PRODUCT_DELETED_V1,
    CATALOG_STOCK_DECREMENTED_V1,
)


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def build_product_added_payload(product: Product) -> dict:
    return {"product": product.to_dict()}


def build_product_updated_payload(previous: Product, product: Product) -> dict:
    return {
        "product": product.to_dict(),
        "previous_price": previous.price,
        "previous_stock": previous.stock,
    }


def build_product_deleted_payload(product: Product) -> dict:
    return {"product_id": product.product_id, "name": product.name}


def build_stock_decremented_payload(
    quantities: Dict[str, int], resulting_stock: Dict[str, int],
) -> dict:
    return {
        "decrements": [
            {
                "product_id": product_id,
                "quantity": quantity,
                "stock": resulting_stock[product_id],
            }
            for product_id, quantity in quantities.items()
            if product_id in resulting_stock
        ],
    }
