"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.cancel_order import load_order_for
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.model.actor import Actor
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        return order_to_dto(load_order_for(self._order_repo, order_id, actor))
