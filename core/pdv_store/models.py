"""
PDV Store - Relational State
==============================
One table per collection. Each row keeps the record's full
encoded form in ``payload`` (the same dict the JSON snapshot
uses) so reads are exact; the other columns exist for lookup.

    products        indexed by name
    sales           indexed by created_at
    cash_registers  indexed by opened_at
    settings        key → JSON value (fee schedule)

``position`` preserves insertion order across a save/load.
"""

from __future__ import annotations

from django.db import models


class ProductRecord(models.Model):
    product_id = models.CharField(primary_key=True, max_length=64)
    position = models.PositiveIntegerField()
    name = models.CharField(max_length=255, db_index=True)
    stock = models.IntegerField()
    payload = models.JSONField()

    class Meta:
        db_table = "pdv_products"
        ordering = ["position"]

    def __str__(self) -> str:
        return f"{self.product_id} ({self.name})"


class SaleRecord(models.Model):
    sale_id = models.CharField(primary_key=True, max_length=64)
    position = models.PositiveIntegerField()
    created_at = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=16)
    total = models.FloatField()
    payload = models.JSONField()

    class Meta:
        db_table = "pdv_sales"
        ordering = ["position"]

    def __str__(self) -> str:
        return f"{self.sale_id} ({self.status})"


class CashRegisterRecord(models.Model):
    session_id = models.CharField(primary_key=True, max_length=64)
    position = models.PositiveIntegerField()
    opened_at = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=16)
    payload = models.JSONField()

    class Meta:
        db_table = "pdv_cash_registers"
        ordering = ["position"]

    def __str__(self) -> str:
        return f"{self.session_id} ({self.status})"


class SettingsRecord(models.Model):
    key = models.CharField(primary_key=True, max_length=64)
    value = models.JSONField()

    class Meta:
        db_table = "pdv_settings"
        ordering = ["key"]

    def __str__(self) -> str:
        return self.key
