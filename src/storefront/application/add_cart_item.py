"""Application service: Add Cart Item use case.

Validates the product, the option selection and the stock for the total
quantity the line would hold, then inserts the line or merges it into an
existing line with the same (product, option set) key.  The inventory
ledger is only read here; reservation happens at checkout.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import CartDTO
from storefront.application.view_cart import CartPresenter, load_or_create_cart
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import OptionSelection, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.option_validator import OptionValidator

logger = structlog.get_logger(__name__)


class AddCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: CatalogRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog = catalog
        self._ledger = ledger
        self._options = OptionValidator(catalog)
        self._presenter = CartPresenter(catalog, ledger)

    def handle(
        self,
        customer_id: str,
        product_id: str,
        option_value_ids: list[str],
        quantity: int,
    ) -> CartDTO:
        qty = Quantity(quantity)
        selection = OptionSelection.of(option_value_ids)

        product = self._catalog.get_product(product_id)
        if product is None or product.is_deleted:
            raise EntityNotFoundError("Product not found or has been deleted")

        self._options.resolve(product, selection)

        cart = load_or_create_cart(self._cart_repo, customer_id)
        # Merged quantity must itself be a valid line quantity.
        total = Quantity(cart.quantity_of(product_id, selection) + qty.value)

        availability = self._ledger.check_availability(product_id, selection, total.value)
        availability.raise_for_outcome()

        cart.add(product_id, selection, qty)
        self._cart_repo.save(cart)

        logger.info(
            "Cart item added",
            customer_id=customer_id,
            product_id=product_id,
            options=str(selection),
            quantity=total.value,
        )
        return self._presenter.present(cart)
