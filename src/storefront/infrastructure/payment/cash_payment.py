"""Cash on delivery: nothing is captured up front."""

from __future__ import annotations

from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.service.payment_gateway import CaptureResult, PaymentGateway, RefundResult


class CashPayment(PaymentGateway):

    def supported_methods(self) -> list[PaymentMethod]:
        return [PaymentMethod.CASH]

    def capture(self, order_ref: str, amount: Money, method: PaymentMethod) -> CaptureResult:
        # Collected by the courier; the order completes the payment.
        return CaptureResult(success=True, status=PaymentStatus.PENDING)

    def refund(self, method: PaymentMethod, transaction_ref: str | None, amount: Money) -> RefundResult:
        # Cash is handed back offline.
        return RefundResult(success=True, refund_ref=None)
