"""A small wired-up store for use-case tests.

Catalog:

- ``A`` Tee, $20.00, option type Size (``m`` +0.00, ``l`` +2.00)
- ``B`` Hoodie, $40.00, option types Size (``b-s``) and Color (``red``, ``blue`` +5.00)
- ``C`` Mug, $8.00, no options
- ``D`` Poster, $5.00, soft-deleted
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.application.add_cart_item import AddCartItemHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.model.address import Address
from storefront.domain.model.catalog import OptionType, OptionValue, Product
from storefront.domain.model.value_objects import Money, StockKey
from storefront.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import (
    FakeAddressRepository,
    FakeCartRepository,
    FakeCatalogRepository,
    FakeOrderRepository,
    FakePaymentGateway,
    FakeStockRepository,
)

P = StockKey.product
O = StockKey.option


def sample_catalog() -> FakeCatalogRepository:
    return FakeCatalogRepository(
        products=[
            Product(id="A", name="Tee", price=Money.of("20.00")),
            Product(id="B", name="Hoodie", price=Money.of("40.00")),
            Product(id="C", name="Mug", price=Money.of("8.00")),
            Product(id="D", name="Poster", price=Money.of("5.00"), is_deleted=True),
        ],
        option_types=[
            OptionType(id="a-size", product_id="A", name="Size"),
            OptionType(id="b-size", product_id="B", name="Size"),
            OptionType(id="b-color", product_id="B", name="Color"),
        ],
        option_values=[
            OptionValue(id="m", option_type_id="a-size", value="M"),
            OptionValue(id="l", option_type_id="a-size", value="L", price_delta=Decimal("2.00")),
            OptionValue(id="b-s", option_type_id="b-size", value="S"),
            OptionValue(id="red", option_type_id="b-color", value="Red"),
            OptionValue(id="blue", option_type_id="b-color", value="Blue", price_delta=Decimal("5.00")),
        ],
    )


def sample_levels() -> dict[StockKey, int]:
    return {
        P("A"): 5, O("m"): 3, O("l"): 3,
        P("B"): 10, O("b-s"): 5, O("red"): 5, O("blue"): 5,
        P("C"): 2,
        P("D"): 10,
    }


@dataclass
class Store:
    catalog: FakeCatalogRepository = field(default_factory=sample_catalog)
    stock: FakeStockRepository = field(default_factory=lambda: FakeStockRepository(sample_levels()))
    carts: FakeCartRepository = field(default_factory=FakeCartRepository)
    orders: FakeOrderRepository = field(default_factory=FakeOrderRepository)
    addresses: FakeAddressRepository = field(
        default_factory=lambda: FakeAddressRepository([
            Address(id="home", customer_id="alice", street="1 Main St",
                    city="Springfield", state="IL", zip_code="62701"),
            Address(id="work", customer_id="bob", street="9 Elm Ave",
                    city="Shelbyville", state="IL", zip_code="62565"),
        ])
    )
    gateway: FakePaymentGateway = field(default_factory=FakePaymentGateway)

    @property
    def ledger(self) -> InventoryLedger:
        return InventoryLedger(self.catalog, self.stock)

    # --- Handlers -------------------------------------------------------------

    def add_item(self) -> AddCartItemHandler:
        return AddCartItemHandler(self.carts, self.catalog, self.ledger)

    def create_order(self) -> CreateOrderHandler:
        return CreateOrderHandler(
            self.orders, self.carts, self.catalog, self.addresses, self.ledger, self.gateway
        )

    def cancel_order(self) -> CancelOrderHandler:
        return CancelOrderHandler(self.orders, self.ledger, self.gateway)

    def update_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.orders, self.cancel_order())

    # --- Shortcuts ------------------------------------------------------------

    def place(
        self,
        customer: str = "alice",
        lines: list[tuple[str, list[str], int]] | None = None,
        method: str = "cash",
        address: str = "home",
    ) -> int:
        """Fill the customer's cart and check out. Returns the order id."""
        for product_id, options, qty in lines or [("A", ["m"], 1)]:
            self.add_item().handle(customer, product_id, options, qty)
        return self.create_order().handle(customer, address, method).order.id
