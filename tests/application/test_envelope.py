"""Tests for the result envelope and its status-code mapping."""

import pytest

from storefront.application.envelope import run_in_envelope, status_code_for
from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    EmptyCartError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    OptionMismatchError,
    ProductDeletedError,
    RefundFailedError,
    StockLedgerError,
    UnauthorizedError,
)


def _raise(exc: Exception):
    def call():
        raise exc
    return call


class TestStatusCodes:

    @pytest.mark.parametrize(
        "exc, code",
        [
            (InsufficientStockError(5, 10), 400),
            (OptionMismatchError("Missing selection"), 400),
            (EmptyCartError("Cart is empty"), 400),
            (RefundFailedError("Refund failed"), 400),
            (UnauthorizedError("nope"), 403),
            (EntityNotFoundError("Order #1 not found"), 404),
            (ProductDeletedError("gone"), 404),
            (InvalidTransitionError("cancelled", "cancelled"), 409),
            (ConcurrentUpdateError("Order #1 was changed"), 409),
            (StockLedgerError("disk full"), 500),
        ],
    )
    def test_mapping(self, exc, code):
        assert status_code_for(exc) == code


class TestRunInEnvelope:

    def test_success_carries_payload(self):
        envelope = run_in_envelope(lambda: {"id": 1}, message="Order created", status_code=201)
        assert envelope.success
        assert envelope.payload == {"id": 1}
        assert envelope.status_code == 201

    def test_business_failure_keeps_message(self):
        envelope = run_in_envelope(_raise(InsufficientStockError(5, 10)))
        assert not envelope.success
        assert envelope.status_code == 400
        assert envelope.message == "Insufficient stock. Available: 5, Requested: 10"

    def test_ledger_failure_is_hidden(self):
        envelope = run_in_envelope(_raise(StockLedgerError("disk full")))
        assert envelope.status_code == 500
        assert envelope.message == "Internal server error"

    def test_unexpected_error_becomes_500(self):
        envelope = run_in_envelope(_raise(KeyError("boom")))
        assert not envelope.success
        assert envelope.status_code == 500
