"""Offline stand-in for an external card processor.

Capture opens a payment intent that the customer still has to confirm,
so orders start with payment status ``pending-intent`` and move to
``completed`` only through the confirm-payment use case.
"""

from __future__ import annotations

import secrets

import structlog

from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.service.payment_gateway import CaptureResult, PaymentGateway, RefundResult

logger = structlog.get_logger(__name__)

INTENT_PREFIX = "pi_"


class SandboxProcessor(PaymentGateway):

    def supported_methods(self) -> list[PaymentMethod]:
        return [PaymentMethod.PROCESSOR]

    def capture(self, order_ref: str, amount: Money, method: PaymentMethod) -> CaptureResult:
        if amount.amount <= 0:
            return CaptureResult(
                success=False,
                status=PaymentStatus.FAILED,
                error="Amount must be greater than zero",
            )
        intent_id = f"{INTENT_PREFIX}{secrets.token_hex(12)}"
        logger.info("Payment intent created", order_ref=order_ref, intent=intent_id, amount=str(amount))
        return CaptureResult(
            success=True,
            status=PaymentStatus.PENDING_INTENT,
            transaction_ref=intent_id,
            client_secret=f"{intent_id}_secret_{secrets.token_hex(8)}",
        )

    def refund(self, method: PaymentMethod, transaction_ref: str | None, amount: Money) -> RefundResult:
        if not transaction_ref or not transaction_ref.startswith(INTENT_PREFIX):
            return RefundResult(success=False, error="No such payment intent")
        refund_ref = f"re_{secrets.token_hex(12)}"
        logger.info("Refund created", intent=transaction_ref, refund=refund_ref, amount=str(amount))
        return RefundResult(success=True, refund_ref=refund_ref)
