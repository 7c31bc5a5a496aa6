"""
PDV Store - App Configuration
===============================
Relational home for the PDV state: products, sales, cash register
sessions and settings.
"""

from django.apps import AppConfig


class PdvStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.pdv_store"
    label = "pdv_store"
    verbose_name = "PDV Store"
