"""Application service: Update Shipment Status use case."""

from __future__ import annotations

import logging

from bookstore.application.dto import ShipmentDTO, shipment_to_dto
from bookstore.application.lookups import load_order
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateShipmentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, shipment_id: int, new_status: str) -> ShipmentDTO:
        order = load_order(self._order_repo, order_id)

        shipment = order.update_shipment_status(shipment_id, new_status.strip().upper())
        self._order_repo.save(order)

        logger.info(
            "Order %s: shipment #%d is now %s",
            order_id, shipment_id, shipment.status.value,
        )
        return shipment_to_dto(shipment)
