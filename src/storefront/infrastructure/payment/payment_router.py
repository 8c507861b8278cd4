"""Dispatches payment calls to the strategy registered for each method."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import PaymentMethod
from storefront.domain.model.value_objects import Money
from storefront.domain.service.payment_gateway import CaptureResult, PaymentGateway, RefundResult


class PaymentRouter(PaymentGateway):

    def __init__(self, strategies: list[PaymentGateway], enabled: list[str] | None = None) -> None:
        self._strategies: dict[PaymentMethod, PaymentGateway] = {}
        for strategy in strategies:
            for method in strategy.supported_methods():
                if enabled is None or method.value in enabled:
                    self._strategies[method] = strategy

    def supported_methods(self) -> list[PaymentMethod]:
        return list(self._strategies)

    def capture(self, order_ref: str, amount: Money, method: PaymentMethod) -> CaptureResult:
        return self._strategy_for(method).capture(order_ref, amount, method)

    def refund(self, method: PaymentMethod, transaction_ref: str | None, amount: Money) -> RefundResult:
        return self._strategy_for(method).refund(method, transaction_ref, amount)

    def _strategy_for(self, method: PaymentMethod) -> PaymentGateway:
        strategy = self._strategies.get(method)
        if strategy is None:
            names = ", ".join(m.value for m in self._strategies)
            raise ValidationError(
                f"Unsupported payment method: {method.value}. Supported methods: {names}"
            )
        return strategy
