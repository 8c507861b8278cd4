"""Integration tests for the cart use cases.

Uses in-memory fakes — no file I/O.
"""

import pytest

from storefront.application.remove_cart_item import RemoveCartItemHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.view_cart import ViewCartHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    OptionMismatchError,
    ValidationError,
)
from storefront.domain.model.catalog import Product
from storefront.domain.model.value_objects import Money
from tests.builders import P, Store


def _view(store: Store, customer: str = "alice"):
    return ViewCartHandler(store.carts, store.catalog, store.ledger).handle(customer)


class TestAddItem:

    def test_adds_line_with_option_price(self):
        store = Store()
        dto = store.add_item().handle("alice", "A", ["l"], 2)
        assert dto.count == 1
        assert dto.items[0].unit_price == "$22.00"
        assert dto.items[0].option_labels == ["Size: L"]
        assert dto.total_amount == "$44.00"

    def test_identical_selection_merges(self):
        store = Store()
        store.add_item().handle("alice", "B", ["b-s", "red"], 1)
        dto = store.add_item().handle("alice", "B", ["red", "b-s"], 2)
        assert dto.count == 1
        assert dto.items[0].quantity == 3

    def test_missing_option_type_rejected(self):
        store = Store()
        with pytest.raises(OptionMismatchError, match="Color"):
            store.add_item().handle("alice", "B", ["b-s"], 1)

    def test_merged_quantity_checked_against_stock(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 2)
        with pytest.raises(InsufficientStockError, match="Available: 3, Requested: 4"):
            store.add_item().handle("alice", "A", ["m"], 2)
        assert store.carts.get_for_customer("alice").items[0].quantity.value == 2

    def test_deleted_product_rejected(self):
        store = Store()
        with pytest.raises(EntityNotFoundError, match="not found or has been deleted"):
            store.add_item().handle("alice", "D", [], 1)

    def test_unknown_product_rejected(self):
        store = Store()
        with pytest.raises(EntityNotFoundError):
            store.add_item().handle("alice", "Z", [], 1)

    def test_quantity_out_of_range_rejected(self):
        store = Store()
        with pytest.raises(ValidationError):
            store.add_item().handle("alice", "C", [], 0)

    def test_does_not_touch_stock(self):
        store = Store()
        store.add_item().handle("alice", "C", [], 2)
        assert store.stock.level(P("C")) == 2


class TestUpdateAndRemove:

    def test_update_replaces_quantity(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 1)
        dto = UpdateCartItemHandler(store.carts, store.catalog, store.ledger).handle(
            "alice", "A", ["m"], 3
        )
        assert dto.items[0].quantity == 3

    def test_update_beyond_stock_rejected(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 1)
        with pytest.raises(InsufficientStockError):
            UpdateCartItemHandler(store.carts, store.catalog, store.ledger).handle(
                "alice", "A", ["m"], 4
            )

    def test_update_requires_exact_option_match(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 1)
        with pytest.raises(EntityNotFoundError, match="not in cart"):
            UpdateCartItemHandler(store.carts, store.catalog, store.ledger).handle(
                "alice", "A", ["l"], 1
            )

    def test_remove_line(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 1)
        store.add_item().handle("alice", "C", [], 1)
        dto = RemoveCartItemHandler(store.carts, store.catalog, store.ledger).handle(
            "alice", "A", ["m"]
        )
        assert [i.product_id for i in dto.items] == ["C"]

    def test_remove_from_missing_cart(self):
        store = Store()
        with pytest.raises(EntityNotFoundError, match="not in cart"):
            RemoveCartItemHandler(store.carts, store.catalog, store.ledger).handle("alice", "A", ["m"])


class TestViewCart:

    def test_cart_created_on_first_view(self):
        store = Store()
        dto = _view(store)
        assert dto.count == 0
        assert dto.total_amount == "$0.00"
        assert store.carts.get_for_customer("alice") is not None

    def test_unavailable_lines_flagged_and_excluded_from_total(self):
        store = Store()
        store.add_item().handle("alice", "A", ["m"], 1)
        store.add_item().handle("alice", "C", [], 2)
        store.stock.set_level(P("C"), 1)

        dto = _view(store)

        mug = next(i for i in dto.items if i.product_id == "C")
        assert not mug.is_available
        assert mug.available == 1
        assert dto.count == 2
        assert dto.total_amount == "$20.00"

    def test_deleted_product_flagged(self):
        store = Store()
        store.add_item().handle("alice", "C", [], 1)
        store.catalog.products["C"] = Product(id="C", name="Mug", price=Money.of("8.00"), is_deleted=True)

        dto = _view(store)

        assert not dto.items[0].is_available
        assert dto.total_amount == "$0.00"

    def test_live_price_shown(self):
        store = Store()
        store.add_item().handle("alice", "C", [], 1)
        store.catalog.products["C"] = Product(id="C", name="Mug", price=Money.of("9.50"))
        assert _view(store).total_amount == "$9.50"
