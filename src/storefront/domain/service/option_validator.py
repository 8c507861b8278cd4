"""Domain service: option selection validation.

A selection is valid when it names exactly one value for every option
type the product defines, and nothing else.
"""

from __future__ import annotations

from storefront.domain.exceptions import OptionMismatchError
from storefront.domain.model.catalog import OptionType, OptionValue, Product
from storefront.domain.model.value_objects import OptionSelection
from storefront.domain.repository.catalog_repository import CatalogRepository


class OptionValidator:

    def __init__(self, catalog: CatalogRepository) -> None:
        self._catalog = catalog

    def resolve(self, product: Product, selection: OptionSelection) -> list[tuple[OptionType, OptionValue]]:
        """Validate ``selection`` for ``product`` and return (type, value) pairs.

        Pairs come back in the product's option type order.
        """
        option_types = self._catalog.get_option_types_for_product(product.id)
        if not option_types:
            if len(selection):
                raise OptionMismatchError(
                    f"Product '{product.name}' has no options, but options were selected"
                )
            return []

        types_by_id = {t.id: t for t in option_types}
        chosen: dict[str, OptionValue] = {}
        for option_id in selection:
            value = self._catalog.get_option_value(option_id)
            if value is None:
                raise OptionMismatchError(f"Option value '{option_id}' not found")
            option_type = types_by_id.get(value.option_type_id)
            if option_type is None:
                raise OptionMismatchError(
                    f"Option value '{value.value}' does not belong to product '{product.name}'"
                )
            if option_type.id in chosen:
                raise OptionMismatchError(
                    f"Only one value may be selected for '{option_type.name}'"
                )
            chosen[option_type.id] = value

        missing = [t.name for t in option_types if t.id not in chosen]
        if missing:
            raise OptionMismatchError(
                f"Missing selection for option type(s): {', '.join(missing)}"
            )

        return [(t, chosen[t.id]) for t in option_types]
