"""Integration tests for order listings (customer and admin)."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.application.list_orders import ListOrdersHandler
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderFilter
from tests.builders import Store


def _setup() -> tuple[Store, ListOrdersHandler]:
    """Alice: $20 Tee, $8 Mug (cancelled). Bob: $90 Hoodies."""
    store = Store()
    store.place("alice", [("A", ["m"], 1)])
    mug = store.place("alice", [("C", [], 1)])
    store.place("bob", [("B", ["b-s", "blue"], 2)], address="work")
    store.cancel_order().handle(mug, Actor.customer("alice"))
    return store, ListOrdersHandler(store.orders)


class TestFilters:

    def test_customer_sees_only_own_orders(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(customer_id="alice"))
        assert {o.customer_id for o in page.orders} == {"alice"}
        assert page.total == 2

    def test_status_filter(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(status=OrderStatus.CANCELLED))
        assert [o.total for o in page.orders] == ["$8.00"]

    def test_total_range(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(min_total=Decimal("10"), max_total=Decimal("50")))
        assert [o.total for o in page.orders] == ["$20.00"]

    def test_search_matches_shipping_address(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(search="shelbyville"))
        assert [o.customer_id for o in page.orders] == ["bob"]

    def test_date_range(self):
        _, handler = _setup()
        now = datetime.now(timezone.utc)
        assert handler.handle(OrderFilter(created_from=now - timedelta(hours=1))).total == 3
        assert handler.handle(OrderFilter(created_to=now - timedelta(hours=1))).total == 0


class TestSortingAndPaging:

    def test_sort_by_total(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(), sort_by="total", sort_order="asc")
        assert [o.total for o in page.orders] == ["$8.00", "$20.00", "$90.00"]

    def test_default_is_newest_first(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter())
        assert [o.id for o in page.orders] == [3, 2, 1]

    def test_unknown_sort_field_falls_back(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(), sort_by="colour", sort_order="asc")
        assert [o.id for o in page.orders] == [3, 2, 1]

    def test_pagination(self):
        _, handler = _setup()
        page = handler.handle(OrderFilter(), page=2, limit=2)
        assert len(page.orders) == 1
        assert page.total_pages == 2
        assert page.has_prev and not page.has_next

    def test_invalid_paging_rejected(self):
        _, handler = _setup()
        with pytest.raises(ValidationError, match="Page must be"):
            handler.handle(OrderFilter(), page=0)
        with pytest.raises(ValidationError, match="Limit must be between 1 and 100"):
            handler.handle(OrderFilter(), limit=101)


class TestStats:

    def test_revenue_and_breakdown(self):
        _, handler = _setup()
        stats = handler.handle(OrderFilter(), with_stats=True).stats
        assert stats.total_orders == 3
        assert stats.total_revenue == "$118.00"
        assert stats.avg_order_value == "$39.33"
        assert stats.status_breakdown["pending"] == 2
        assert stats.status_breakdown["cancelled"] == 1
        assert stats.status_breakdown["shipped"] == 0

    def test_stats_omitted_by_default(self):
        _, handler = _setup()
        assert handler.handle(OrderFilter()).stats is None
