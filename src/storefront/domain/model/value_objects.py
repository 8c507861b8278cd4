"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from storefront.domain.exceptions import ValidationError

MAX_LINE_QUANTITY = 999


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def adjusted(self, delta: Decimal) -> Money:
        """Apply a signed price delta, e.g. an option value surcharge."""
        result = self.amount + delta
        if result < Decimal("0"):
            raise ValidationError(
                f"Price adjustment {delta} would make {self} negative"
            )
        return Money(result, self.currency)

    def rounded(self) -> Money:
        return Money(self.amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP), self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """A line-item quantity between 1 and 999 units."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_LINE_QUANTITY:
            raise ValidationError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OptionSelection:
    """A set of selected option-value ids, normalized to a sorted tuple.

    Two selections with the same ids in a different order are equal, so
    the tuple can be used directly as part of a cart line key.
    """

    ids: tuple[str, ...] = ()

    @staticmethod
    def of(option_value_ids: Iterable[str] | None) -> OptionSelection:
        ids = [str(i).strip() for i in option_value_ids or ()]
        if any(not i for i in ids):
            raise ValidationError("Option value ids cannot be blank")
        if len(set(ids)) != len(ids):
            raise ValidationError("The same option value was selected twice")
        return OptionSelection(tuple(sorted(ids)))

    def __iter__(self):
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __str__(self) -> str:
        return ",".join(self.ids) if self.ids else "-"


@dataclass(frozen=True)
class StockKey:
    """Address of one stock counter in the inventory ledger."""

    kind: str  # "product" or "option"
    entity_id: str

    def __post_init__(self) -> None:
        if self.kind not in ("product", "option"):
            raise ValidationError(f"Unknown stock counter kind: {self.kind!r}")

    @staticmethod
    def product(product_id: str) -> StockKey:
        return StockKey("product", product_id)

    @staticmethod
    def option(option_value_id: str) -> StockKey:
        return StockKey("option", option_value_id)

    @staticmethod
    def parse(raw: str) -> StockKey:
        kind, sep, entity_id = raw.partition(":")
        if not sep or not entity_id:
            raise ValidationError(f"Invalid stock key {raw!r}, expected 'kind:id'")
        return StockKey(kind, entity_id)

    def __str__(self) -> str:
        return f"{self.kind}:{self.entity_id}"
