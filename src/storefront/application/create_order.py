"""Application service: Create Order use case (checkout).

Turns a customer's cart into a persisted order:

1. Load the cart (fail on empty).
2. Re-check every line against the catalog and the inventory ledger.
3. Reserve stock for all lines as one atomic batch.
4. Snapshot prices (base price + option deltas) into order items.
5. Capture payment and persist the order.
6. Drain the cart.

Every step after the reservation is covered by a compensation list, so a
failure anywhere releases exactly what was reserved in this call.
A processor intent opened in step 5 is logged for reconciliation when a
later step fails.
"""

from __future__ import annotations

import structlog

from storefront.application.compensation import Compensations
from storefront.application.dto import PlacedOrderDTO, order_to_dto
from storefront.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    PaymentFailedError,
    ValidationError,
)
from storefront.domain.model.actor import Actor
from storefront.domain.model.cart import CartItem
from storefront.domain.model.catalog import OptionType, OptionValue, Product
from storefront.domain.model.order import Order, OrderItem, Payment, PaymentMethod, SelectedOption
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.address_repository import AddressRepository
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_ledger import InventoryLedger, StockLine
from storefront.domain.service.option_validator import OptionValidator
from storefront.domain.service.payment_gateway import CaptureResult, PaymentGateway

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        catalog: CatalogRepository,
        address_repo: AddressRepository,
        ledger: InventoryLedger,
        gateway: PaymentGateway,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._catalog = catalog
        self._address_repo = address_repo
        self._ledger = ledger
        self._gateway = gateway
        self._options = OptionValidator(catalog)

    def handle(self, customer_id: str, address_id: str, payment_method: str) -> PlacedOrderDTO:
        method = self._parse_method(payment_method)

        address = self._address_repo.get(address_id, customer_id)
        if address is None:
            raise EntityNotFoundError("Address not found")

        # Step 1
        cart = self._cart_repo.get_for_customer(customer_id)
        if cart is None or cart.is_empty:
            raise EmptyCartError("Cart is empty")

        # Step 2: nothing has been written yet, failures simply propagate.
        resolved = [self._revalidate(item) for item in cart.items]
        lines = [
            StockLine(item.product_id, item.options, item.quantity.value, label=product.name)
            for item, product, _ in resolved
        ]

        with Compensations("create_order") as saga:
            # Step 3
            self._ledger.reserve_batch(lines)
            saga.push("release reserved stock", lambda: self._ledger.release_batch(lines))

            # Step 4
            items = [self._snapshot(item, product, pairs) for item, product, pairs in resolved]
            total = Money.zero()
            for order_item in items:
                total = total + order_item.line_total
            total = total.rounded()

            # Step 5
            order_id = self._order_repo.next_id()
            capture = self._gateway.capture(str(order_id), total, method)
            if not capture.success:
                raise PaymentFailedError(capture.error or "Payment processing failed")
            if capture.transaction_ref:
                saga.push("abandon payment intent", lambda: self._abandon(order_id, capture))

            order = Order.place(
                customer_id=customer_id,
                items=items,
                address_id=address.id,
                shipping_address=address.formatted(),
                payment=Payment(
                    method=method,
                    status=capture.status,
                    amount=total,
                    transaction_ref=capture.transaction_ref,
                ),
            )
            order.id = order_id
            self._order_repo.save(order)
            saga.push("void persisted order", lambda: self._void(order))

            # Step 6
            cart.drain()
            self._cart_repo.save(cart)

        logger.info(
            "Order created",
            order_id=order.id,
            customer_id=customer_id,
            total=str(total),
            payment_method=method.value,
            payment_status=order.payment.status.value,
        )
        return PlacedOrderDTO(order=order_to_dto(order), client_secret=capture.client_secret)

    # --- Internal helpers -----------------------------------------------------

    def _parse_method(self, raw: str) -> PaymentMethod:
        supported = self._gateway.supported_methods()
        try:
            method = PaymentMethod(raw.strip().lower())
        except ValueError:
            method = None
        if method not in supported:
            names = ", ".join(m.value for m in supported)
            raise ValidationError(
                f"Payment method '{raw}' is not available. Available methods: {names}"
            )
        return method

    def _revalidate(
        self, item: CartItem
    ) -> tuple[CartItem, Product, list[tuple[OptionType, OptionValue]]]:
        product = self._catalog.get_product(item.product_id)
        label = product.name if product is not None else item.product_id
        availability = self._ledger.check_availability(
            item.product_id, item.options, item.quantity.value
        )
        availability.raise_for_outcome(item=label)
        # Option types may have changed since the item was added.
        pairs = self._options.resolve(product, item.options)
        return item, product, pairs

    @staticmethod
    def _snapshot(
        item: CartItem,
        product: Product,
        pairs: list[tuple[OptionType, OptionValue]],
    ) -> OrderItem:
        unit_price = product.price
        options = []
        for option_type, value in pairs:
            unit_price = unit_price.adjusted(value.price_delta)
            options.append(
                SelectedOption(
                    option_value_id=value.id,
                    option_type_name=option_type.name,
                    value=value.value,
                    price_delta=value.price_delta,
                )
            )
        return OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=item.quantity,
            unit_price=unit_price,
            options=tuple(options),
        )

    @staticmethod
    def _abandon(order_id: int, capture: CaptureResult) -> None:
        # The processor has no void call; an operator closes the intent.
        logger.error(
            "Payment intent left open after failed checkout",
            order_id=order_id,
            transaction_ref=capture.transaction_ref,
            reconcile=True,
        )

    def _void(self, order: Order) -> None:
        """Close an order whose checkout could not finish."""
        order.cancel(Actor.admin(), refunded=False)
        self._order_repo.save(order)
        logger.warning("Order voided after failed checkout", order_id=order.id)
