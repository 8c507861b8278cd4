"""Application service: View Cart use case (query).

The cart is created lazily on first access.  Every line is re-checked
against the live catalog and inventory ledger; lines whose product was
deleted or whose stock dropped are flagged unavailable rather than removed,
and are left out of the cart total.
"""

from __future__ import annotations

from storefront.application.dto import TIMESTAMP_FORMAT, CartDTO, CartItemDTO
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.inventory_ledger import InventoryLedger


def load_or_create_cart(cart_repo: CartRepository, customer_id: str) -> Cart:
    cart = cart_repo.get_for_customer(customer_id)
    if cart is None:
        cart = Cart(customer_id=customer_id)
        cart_repo.save(cart)
    return cart


class CartPresenter:
    """Builds a CartDTO with live prices and availability."""

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    def present(self, cart: Cart) -> CartDTO:
        items: list[CartItemDTO] = []
        total = Money.zero()
        for item in cart.items:
            dto, subtotal = self._present_item(item)
            if dto.is_available:
                total = total + subtotal
            items.append(dto)
        return CartDTO(
            customer_id=cart.customer_id,
            items=items,
            count=len(items),
            total_amount=str(total.rounded()),
            updated_at=cart.updated_at.strftime(TIMESTAMP_FORMAT),
        )

    def _present_item(self, item: CartItem) -> tuple[CartItemDTO, Money]:
        product = self._catalog.get_product(item.product_id)
        availability = self._ledger.check_availability(
            item.product_id, item.options, item.quantity.value
        )
        type_names = {
            t.id: t.name for t in self._catalog.get_option_types_for_product(item.product_id)
        }

        unit_price = product.price if product is not None else Money.zero()
        labels: list[str] = []
        for option_id in item.options:
            value = self._catalog.get_option_value(option_id)
            if value is None:
                labels.append(f"{option_id} (unavailable)")
                continue
            unit_price = unit_price.adjusted(value.price_delta)
            labels.append(f"{type_names.get(value.option_type_id, '?')}: {value.value}")

        subtotal = unit_price * item.quantity.value
        dto = CartItemDTO(
            product_id=item.product_id,
            product_name=product.name if product is not None else item.product_id,
            option_value_ids=list(item.options.ids),
            option_labels=labels,
            quantity=item.quantity.value,
            unit_price=str(unit_price),
            subtotal=str(subtotal),
            available=availability.available,
            is_available=availability.ok,
        )
        return dto, subtotal


class ViewCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: CatalogRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._presenter = CartPresenter(catalog, ledger)

    def handle(self, customer_id: str) -> CartDTO:
        cart = load_or_create_cart(self._cart_repo, customer_id)
        return self._presenter.present(cart)
