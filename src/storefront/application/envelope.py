"""Standard result envelope for the API layer.

Wraps a use-case call and maps its outcome to ``success``, ``message``,
``payload`` and an HTTP-style status code.  Expected business failures are
returned as-is; anything unexpected becomes a 500 and is logged.

This is the seam an HTTP front end calls into; the bundled CLI reports the
same status codes through ``status_code_for``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import structlog

from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    DomainException,
    EntityNotFoundError,
    InvalidTransitionError,
    PaymentFailedError,
    RefundFailedError,
    StockLedgerError,
    UnauthorizedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Checked in order; the first matching base class wins.
STATUS_CODES: list[tuple[type[DomainException], int]] = [
    (ValidationError, 400),
    (PaymentFailedError, 400),
    (RefundFailedError, 400),
    (UnauthorizedError, 403),
    (EntityNotFoundError, 404),
    (InvalidTransitionError, 409),
    (ConcurrentUpdateError, 409),
    (StockLedgerError, 500),
]


@dataclass(frozen=True)
class Envelope:
    success: bool
    message: str
    payload: Any = None
    status_code: int = 200


def status_code_for(exc: DomainException) -> int:
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 500


def run_in_envelope(
    call: Callable[[], Any],
    message: str = "Success",
    status_code: int = 200,
) -> Envelope:
    try:
        payload = call()
    except DomainException as exc:
        code = status_code_for(exc)
        if code >= 500:
            logger.error("Operation failed", error=str(exc), reconcile=True)
            return Envelope(success=False, message="Internal server error", status_code=code)
        return Envelope(success=False, message=str(exc), status_code=code)
    except Exception:
        logger.exception("Unexpected error")
        return Envelope(success=False, message="Internal server error", status_code=500)
    return Envelope(success=True, message=message, payload=payload, status_code=status_code)
