"""
PDV Store - Django State Store
================================
StateStore backed by the pdv_store tables.

save_all() replaces every collection inside one transaction, so
a reader never sees half of a save.
"""

from __future__ import annotations

import logging

from django.db import transaction

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeSchedule
from core.pdv_store.models import (
    CashRegisterRecord,
    ProductRecord,
    SaleRecord,
    SettingsRecord,
)
from core.persistence.snapshot import PdvState
from core.primitives.item import LineItem, Product
from engines.cash.models import CashRegisterSession
from engines.sales.models import Sale

logger = logging.getLogger("pdv.persistence")

FEE_SCHEDULE_KEY = "fee_schedule"
CART_KEY = "cart"


class DjangoStateStore:
    def load_all(self) -> PdvState:
        settings = {r.key: r.value for r in SettingsRecord.objects.all()}
        fee_data = settings.get(FEE_SCHEDULE_KEY)
        return PdvState(
            products=tuple(
                Product.from_dict(r.payload) for r in ProductRecord.objects.all()
            ),
            sales=tuple(Sale.from_dict(r.payload) for r in SaleRecord.objects.all()),
            cash_registers=tuple(
                CashRegisterSession.from_dict(r.payload)
                for r in CashRegisterRecord.objects.all()
            ),
            fee_schedule=(
                FeeSchedule.from_dict(fee_data) if fee_data else DEFAULT_FEE_SCHEDULE
            ),
            cart=tuple(LineItem.from_dict(line) for line in settings.get(CART_KEY, ())),
        )

    def save_all(self, state: PdvState) -> None:
        with transaction.atomic():
            ProductRecord.objects.all().delete()
            SaleRecord.objects.all().delete()
            CashRegisterRecord.objects.all().delete()

            ProductRecord.objects.bulk_create([
                ProductRecord(
                    product_id=product.product_id,
                    position=position,
                    name=product.name,
                    stock=product.stock,
                    payload=product.to_dict(),
                )
                for position, product in enumerate(state.products)
            ])
            SaleRecord.objects.bulk_create([
                SaleRecord(
                    sale_id=sale.sale_id,
                    position=position,
                    created_at=sale.created_at,
                    status=sale.status.value,
                    total=sale.total,
                    payload=sale.to_dict(),
                )
                for position, sale in enumerate(state.sales)
            ])
            CashRegisterRecord.objects.bulk_create([
                CashRegisterRecord(
                    session_id=session.session_id,
                    position=position,
                    opened_at=session.opened_at,
                    status=session.status.value,
                    payload=session.to_dict(),
                )
                for position, session in enumerate(state.cash_registers)
            ])
            SettingsRecord.objects.update_or_create(
                key=FEE_SCHEDULE_KEY,
                defaults={"value": state.fee_schedule.to_dict()},
            )
            SettingsRecord.objects.update_or_create(
                key=CART_KEY,
                defaults={"value": [line.to_dict() for line in state.cart]},
            )

        logger.debug(
            f"State saved to database: {len(state.products)} products, "
            f"{len(state.sales)} sales, {len(state.cash_registers)} sessions"
        )
