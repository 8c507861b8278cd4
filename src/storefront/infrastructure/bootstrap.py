"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.infrastructure import settings
from storefront.infrastructure.payment.cash_payment import CashPayment
from storefront.infrastructure.payment.payment_router import PaymentRouter
from storefront.infrastructure.payment.sandbox_processor import SandboxProcessor
from storefront.infrastructure.persistence.json_address_repository import JsonAddressRepository
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.sqlite_stock_repository import SqliteStockRepository


def catalog_repository() -> JsonCatalogRepository:
    return JsonCatalogRepository(settings.DATA_DIR / "catalog.json")


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(settings.DATA_DIR / "carts.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings.DATA_DIR / "orders.json")


def address_repository() -> JsonAddressRepository:
    return JsonAddressRepository(settings.DATA_DIR / "addresses.json")


def stock_repository() -> SqliteStockRepository:
    return SqliteStockRepository(settings.STOCK_DB, timeout=settings.SQLITE_TIMEOUT_SECONDS)


def inventory_ledger() -> InventoryLedger:
    return InventoryLedger(catalog_repository(), stock_repository())


def payment_gateway() -> PaymentRouter:
    return PaymentRouter([CashPayment(), SandboxProcessor()], enabled=settings.PAYMENT_METHODS)
