"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON and SQLite
repositories but keep everything in dicts. No file I/O, no side effects.
Aggregates are copied on the way in and out so a test only sees what was
actually saved.
"""

from __future__ import annotations

import copy
import threading

from storefront.domain.exceptions import StockLedgerError
from storefront.domain.model.address import Address
from storefront.domain.model.cart import Cart
from storefront.domain.model.catalog import OptionType, OptionValue, Product
from storefront.domain.model.order import Order, PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money, StockKey
from storefront.domain.repository.address_repository import AddressRepository
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import (
    OrderFilter,
    OrderRepository,
    check_version,
)
from storefront.domain.repository.stock_repository import StockRepository
from storefront.domain.service.payment_gateway import (
    CaptureResult,
    PaymentGateway,
    PaymentGatewayTimeout,
    RefundResult,
)


class FakeCatalogRepository(CatalogRepository):

    def __init__(
        self,
        products: list[Product] | None = None,
        option_types: list[OptionType] | None = None,
        option_values: list[OptionValue] | None = None,
    ) -> None:
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.option_types: dict[str, OptionType] = {t.id: t for t in option_types or []}
        self.option_values: dict[str, OptionValue] = {v.id: v for v in option_values or []}

    def get_product(self, product_id: str) -> Product | None:
        return self.products.get(product_id)

    def get_option_value(self, option_value_id: str) -> OptionValue | None:
        return self.option_values.get(option_value_id)

    def get_option_types_for_product(self, product_id: str) -> list[OptionType]:
        return [t for t in self.option_types.values() if t.product_id == product_id]


class FakeStockRepository(StockRepository):

    def __init__(self, levels: dict[StockKey, int] | None = None) -> None:
        self._levels: dict[StockKey, int] = dict(levels or {})
        self._lock = threading.Lock()
        self.fail_increments = False

    def get_levels(self, keys: list[StockKey]) -> dict[StockKey, int]:
        with self._lock:
            return {k: self._levels[k] for k in keys if k in self._levels}

    def decrement_all(self, quantities: dict[StockKey, int]) -> dict[StockKey, int] | None:
        with self._lock:
            if any(self._levels.get(k, -1) < q for k, q in quantities.items()):
                return {k: self._levels[k] for k in quantities if k in self._levels}
            for k, q in quantities.items():
                self._levels[k] -= q
            return None

    def increment_all(self, quantities: dict[StockKey, int]) -> None:
        with self._lock:
            if self.fail_increments:
                raise StockLedgerError("Stock store unavailable")
            if any(k not in self._levels for k in quantities):
                raise StockLedgerError("Stock counter does not exist")
            for k, q in quantities.items():
                self._levels[k] += q

    def set_level(self, key: StockKey, quantity: int) -> None:
        with self._lock:
            self._levels[key] = quantity

    def list_all(self) -> dict[StockKey, int]:
        with self._lock:
            return dict(self._levels)

    def level(self, key: StockKey) -> int:
        return self._levels[key]


class FakeCartRepository(CartRepository):

    def __init__(self) -> None:
        self._store: dict[str, Cart] = {}
        self.fail_saves = False

    def get_for_customer(self, customer_id: str) -> Cart | None:
        cart = self._store.get(customer_id)
        return copy.deepcopy(cart) if cart is not None else None

    def save(self, cart: Cart) -> None:
        if self.fail_saves:
            raise OSError("cart store unavailable")
        self._store[cart.customer_id] = copy.deepcopy(cart)


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            order_id = self._next_id
            self._next_id += 1
            return order_id

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._store.get(order_id)
            return copy.deepcopy(order) if order is not None else None

    def find(self, criteria: OrderFilter) -> list[Order]:
        with self._lock:
            return [copy.deepcopy(o) for o in self._store.values() if criteria.matches(o)]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        with self._lock:
            stored = self._store.get(order.id)
            check_version(order, None if stored is None else stored.version)
            order.version += 1
            self._store[order.id] = copy.deepcopy(order)

    def all(self) -> list[Order]:
        return list(self._store.values())


class FakeAddressRepository(AddressRepository):

    def __init__(self, addresses: list[Address] | None = None) -> None:
        self._store: dict[str, Address] = {a.id: a for a in addresses or []}

    def get(self, address_id: str, customer_id: str) -> Address | None:
        address = self._store.get(address_id)
        if address is None or address.customer_id != customer_id:
            return None
        return address


class FakePaymentGateway(PaymentGateway):
    """Cash captures as pending; processor captures open an intent."""

    def __init__(self, methods: list[PaymentMethod] | None = None) -> None:
        self._methods = methods or [PaymentMethod.CASH, PaymentMethod.PROCESSOR]
        self.captures: list[tuple[str, Money, PaymentMethod]] = []
        self.refunds: list[tuple[PaymentMethod, str | None, Money]] = []
        self.capture_error: str | None = None
        self.refund_error: str | None = None
        self.refund_times_out = False

    def supported_methods(self) -> list[PaymentMethod]:
        return list(self._methods)

    def capture(self, order_ref: str, amount: Money, method: PaymentMethod) -> CaptureResult:
        self.captures.append((order_ref, amount, method))
        if self.capture_error:
            return CaptureResult(success=False, status=PaymentStatus.FAILED, error=self.capture_error)
        if method is PaymentMethod.CASH:
            return CaptureResult(success=True, status=PaymentStatus.PENDING)
        ref = f"pi_test_{order_ref}"
        return CaptureResult(
            success=True,
            status=PaymentStatus.PENDING_INTENT,
            transaction_ref=ref,
            client_secret=f"{ref}_secret",
        )

    def refund(self, method: PaymentMethod, transaction_ref: str | None, amount: Money) -> RefundResult:
        if self.refund_times_out:
            raise PaymentGatewayTimeout("gateway did not answer")
        if self.refund_error:
            return RefundResult(success=False, error=self.refund_error)
        self.refunds.append((method, transaction_ref, amount))
        return RefundResult(success=True, refund_ref=f"re_test_{len(self.refunds)}")
