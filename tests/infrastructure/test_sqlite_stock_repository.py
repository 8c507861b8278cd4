"""Tests for the SQLite stock counters, against a real database file."""

import threading

import pytest

from storefront.domain.exceptions import InsufficientStockError, StockLedgerError
from storefront.domain.model.value_objects import OptionSelection, StockKey
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.infrastructure.persistence.sqlite_stock_repository import SqliteStockRepository
from tests.builders import sample_catalog

P = StockKey.product
O = StockKey.option


@pytest.fixture
def repo(tmp_path):
    repo = SqliteStockRepository(tmp_path / "stock.sqlite3")
    repo.set_level(P("A"), 5)
    repo.set_level(O("m"), 3)
    return repo


class TestSqliteStockRepository:

    def test_levels_omit_missing_keys(self, repo):
        assert repo.get_levels([P("A"), P("Z")]) == {P("A"): 5}

    def test_decrement_all(self, repo):
        assert repo.decrement_all({P("A"): 2, O("m"): 1}) is None
        assert repo.list_all() == {P("A"): 3, O("m"): 2}

    def test_failed_decrement_rolls_back_every_counter(self, repo):
        observed = repo.decrement_all({P("A"): 2, O("m"): 4})
        assert observed == {P("A"): 5, O("m"): 3}
        assert repo.list_all() == {P("A"): 5, O("m"): 3}

    def test_decrement_of_missing_counter_fails(self, repo):
        observed = repo.decrement_all({P("A"): 1, P("Z"): 1})
        assert observed == {P("A"): 5}
        assert repo.get_levels([P("A")]) == {P("A"): 5}

    def test_increment_all(self, repo):
        repo.increment_all({P("A"): 1, O("m"): 2})
        assert repo.list_all() == {P("A"): 6, O("m"): 5}

    def test_increment_of_missing_counter_raises(self, repo):
        with pytest.raises(StockLedgerError, match="does not exist"):
            repo.increment_all({P("A"): 1, P("Z"): 1})
        assert repo.get_levels([P("A")]) == {P("A"): 5}

    def test_set_level_overwrites(self, repo):
        repo.set_level(P("A"), 9)
        assert repo.get_levels([P("A")]) == {P("A"): 9}

    def test_negative_level_rejected_by_schema(self, repo):
        with pytest.raises(StockLedgerError):
            repo.set_level(P("A"), -1)

    def test_survives_reopen(self, repo, tmp_path):
        repo.decrement_all({P("A"): 1})
        assert SqliteStockRepository(tmp_path / "stock.sqlite3").list_all()[P("A")] == 4


class TestLastUnitRace:

    def test_exactly_one_reservation_wins(self, tmp_path):
        db = tmp_path / "race.sqlite3"
        SqliteStockRepository(db).set_level(P("C"), 1)
        results: list[str] = []
        barrier = threading.Barrier(6)

        def attempt():
            # One repository per thread, like separate service instances.
            ledger = InventoryLedger(sample_catalog(), SqliteStockRepository(db))
            barrier.wait()
            try:
                ledger.reserve("C", OptionSelection.of([]), 1)
                results.append("ok")
            except InsufficientStockError:
                results.append("insufficient")

        threads = [threading.Thread(target=attempt) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("insufficient") == 5
        assert SqliteStockRepository(db).list_all() == {P("C"): 0}
