"""Catalog read models: products, option types and option values.

The catalog is owned by an external collaborator. Carts and orders only
read it; stock counts for these entities live in the inventory ledger,
never on the catalog records themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:
    """A product as seen by the cart and order core."""

    id: str
    name: str
    price: Money  # base price, before option deltas
    is_deleted: bool = False


@dataclass(frozen=True)
class OptionType:
    """A product-defined attribute category such as "Size"."""

    id: str
    product_id: str
    name: str


@dataclass(frozen=True)
class OptionValue:
    """A concrete choice within an option type, e.g. Size=M.

    ``price_delta`` is signed and added to the product's base price.
    """

    id: str
    option_type_id: str
    value: str
    price_delta: Decimal = Decimal("0")
