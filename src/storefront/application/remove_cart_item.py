"""Application service: Remove Cart Item use case."""

from __future__ import annotations

from storefront.application.dto import CartDTO
from storefront.application.view_cart import CartPresenter
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import OptionSelection
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.inventory_ledger import InventoryLedger


class RemoveCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: CatalogRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._presenter = CartPresenter(catalog, ledger)

    def handle(self, customer_id: str, product_id: str, option_value_ids: list[str]) -> CartDTO:
        selection = OptionSelection.of(option_value_ids)

        cart = self._cart_repo.get_for_customer(customer_id)
        if cart is None:
            raise EntityNotFoundError("Product is not in cart")

        cart.remove(product_id, selection)
        self._cart_repo.save(cart)
        return self._presenter.present(cart)
