"""Payment gateway port.

The core never speaks a processor's wire protocol. It asks a gateway to
capture or refund and consumes the result. Concrete strategies (cash,
external processor) live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money


class PaymentGatewayTimeout(Exception):
    """The gateway did not answer in time; the outcome is unknown."""


@dataclass(frozen=True)
class CaptureResult:
    success: bool
    status: PaymentStatus
    transaction_ref: str | None = None
    client_secret: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class RefundResult:
    success: bool
    refund_ref: str | None = None
    error: str | None = None


class PaymentGateway(ABC):

    @abstractmethod
    def supported_methods(self) -> list[PaymentMethod]:
        """Payment methods this gateway can capture."""

    @abstractmethod
    def capture(self, order_ref: str, amount: Money, method: PaymentMethod) -> CaptureResult:
        """Start a payment for an order."""

    @abstractmethod
    def refund(self, method: PaymentMethod, transaction_ref: str | None, amount: Money) -> RefundResult:
        """Refund a completed payment.

        May raise PaymentGatewayTimeout when the outcome is unknown.
        """
