"""
PDV Reporting Engine - Sales Report
=====================================
Read-side figures computed from the ledger and catalog on demand.
Nothing is recorded or cached; a report is a pure function of the
sales and products it is given.

Cancelled sales stay in history, so every figure is split into a
completed part (completed + edited) and a cancelled part.

Text rendering is left to the presentation layer.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from core.config.fees import PaymentMethod
from core.primitives.item import Product
from engines.pricing.calculator import compute_line_discount
from engines.sales.models import Sale

TOP_SELLERS_LIMIT = 5
DEFAULT_LOW_STOCK_THRESHOLD = 10


def _zero_by_method() -> Dict[str, float]:
    return {method.value: 0.0 for method in PaymentMethod}


def sale_day(sale: Sale) -> date:
    """UTC calendar day a sale belongs to."""
    return sale.created_at.astimezone(timezone.utc).date()


# ══════════════════════════════════════════════════════════════
# REPORT TYPES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BestSeller:
    product_id: str
    name: str
    quantity: int
    gross: float
    discount: float

    @property
    def net(self) -> float:
        return self.gross - self.discount

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "gross": self.gross,
            "discount": self.discount,
            "net": self.net,
        }


@dataclass(frozen=True)
class SalesReport:
    day: Optional[date]
    completed_count: int
    cancelled_count: int
    completed_total: float
    cancelled_total: float
    total_discounts: float
    completed_by_method: Dict[str, float] = field(default_factory=_zero_by_method)
    cancelled_by_method: Dict[str, float] = field(default_factory=_zero_by_method)
    best_sellers: Tuple[BestSeller, ...] = ()
    low_stock: Tuple[Product, ...] = ()
    total_stock: int = 0

    @property
    def gross_total(self) -> float:
        """Completed revenue before discounts."""
        return self.completed_total + self.total_discounts

    @property
    def average_ticket(self) -> float:
        if self.completed_count == 0:
            return 0.0
        return self.completed_total / self.completed_count

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat() if self.day else None,
            "completed_count": self.completed_count,
            "cancelled_count": self.cancelled_count,
            "completed_total": self.completed_total,
            "cancelled_total": self.cancelled_total,
            "total_discounts": self.total_discounts,
            "gross_total": self.gross_total,
            "average_ticket": self.average_ticket,
            "completed_by_method": dict(self.completed_by_method),
            "cancelled_by_method": dict(self.cancelled_by_method),
            "best_sellers": [b.to_dict() for b in self.best_sellers],
            "low_stock": [p.to_dict() for p in self.low_stock],
            "total_stock": self.total_stock,
        }


# ══════════════════════════════════════════════════════════════
# GROUPING
# ══════════════════════════════════════════════════════════════

def group_sales_by_day(sales: Iterable[Sale]) -> Dict[date, List[Sale]]:
    grouped: Dict[date, List[Sale]] = OrderedDict()
    for sale in sales:
        grouped.setdefault(sale_day(sale), []).append(sale)
    return grouped


def available_days(sales: Iterable[Sale]) -> List[date]:
    """Days that have at least one sale, newest first."""
    return sorted(group_sales_by_day(sales), reverse=True)


# ══════════════════════════════════════════════════════════════
# REPORT
# ══════════════════════════════════════════════════════════════

def best_sellers(
    sales: Iterable[Sale], limit: int = TOP_SELLERS_LIMIT,
) -> Tuple[BestSeller, ...]:
    """
    Products ranked by units sold across the given sales.

    Figures use the product snapshot stored on each line, so a
    later price change or delete does not rewrite the ranking.
    Ties keep first-sold order.
    """
    acc: Dict[str, dict] = OrderedDict()
    for sale in sales:
        for line in sale.items:
            gross = line.product.price * line.quantity
            entry = acc.setdefault(line.product_id, {
                "name": line.product.name, "quantity": 0,
                "gross": 0.0, "discount": 0.0,
            })
            entry["quantity"] += line.quantity
            entry["gross"] += gross
            entry["discount"] += compute_line_discount(line)

    ranked = sorted(acc.items(), key=lambda kv: kv[1]["quantity"], reverse=True)
    return tuple(
        BestSeller(product_id=pid, **data) for pid, data in ranked[:limit]
    )


def build_sales_report(
    sales: Iterable[Sale],
    products: Iterable[Product],
    day: Optional[date] = None,
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> SalesReport:
    """Report over every sale, or over one UTC day when ``day`` is given."""
    sales = list(sales)
    products = list(products)
    if day is not None:
        sales = [s for s in sales if sale_day(s) == day]

    completed = [s for s in sales if not s.is_cancelled]
    cancelled = [s for s in sales if s.is_cancelled]

    completed_by_method = _zero_by_method()
    for sale in completed:
        completed_by_method[sale.payment_method.value] += sale.total
    cancelled_by_method = _zero_by_method()
    for sale in cancelled:
        cancelled_by_method[sale.payment_method.value] += sale.total

    return SalesReport(
        day=day,
        completed_count=len(completed),
        cancelled_count=len(cancelled),
        completed_total=sum((s.total for s in completed), 0.0),
        cancelled_total=sum((s.total for s in cancelled), 0.0),
        total_discounts=sum((s.total_discount for s in completed), 0.0),
        completed_by_method=completed_by_method,
        cancelled_by_method=cancelled_by_method,
        best_sellers=best_sellers(completed),
        low_stock=tuple(p for p in products if p.is_low_stock(low_stock_threshold)),
        total_stock=sum(p.stock for p in products),
    )
