"""Order service - Business logic for order intake and lifecycle"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import HTTPException

from ...exceptions import NotionAPIError
from ...services.notion_client import NotionClient
from ..catalog.repository import CatalogRepository
from .constants import KNOWN_STATUSES
from .order_ids import next_order_id
from .repository import OrderRepository
from .schemas import Order, OrderCreate, OrderCreated, ScheduleRequest, StatusUpdate

logger = logging.getLogger(__name__)


@contextmanager
def order_not_found_as_404():
    """
    Report Notion's "no such page" answers as a 404 for the order.

    Notion returns 404 for unknown or unshared pages and a 400 naming the
    request path when the page id is malformed. Other 400s (bad property
    payloads) still propagate.
    """
    try:
        yield
    except NotionAPIError as e:
        if e.status_code == 404 or (e.status_code == 400 and "path" in (e.message or "")):
            raise HTTPException(status_code=404, detail="Order not found") from e
        raise


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, notion: NotionClient):
        self.notion = notion
        self.repo = OrderRepository()
        self.catalog = CatalogRepository()

    async def create_order(self, data: OrderCreate, user_id: str) -> OrderCreated:
        """Create an order with the next year-scoped id and the looked-up price"""
        logger.info(f"📥 Creating order for client {data.clientId} (requested by {user_id})")

        existing_ids, price = await asyncio.gather(
            self.repo.list_order_ids(self.notion),
            self.catalog.lookup_price(
                self.notion, data.clientId, data.truckModelId, data.glassPosition.value
            ),
        )
        # Scan-then-create: two concurrent requests can both pick the same id
        order_id = next_order_id(existing_ids)

        page_id = await self.repo.create_order(
            self.notion,
            order_id=order_id,
            client_id=data.clientId,
            unit_number=data.unitNumber,
            truck_model_id=data.truckModelId,
            glass_position=data.glassPosition.value,
            price=price,
            notes=data.notes,
        )

        if price is None:
            logger.warning(f"⚠️ Order {order_id} created without a price (no pricing row matched)")
        logger.info(f"✅ Order {order_id} created (page {page_id})")
        return OrderCreated(orderId=order_id, notionPageId=page_id, price=price)

    async def list_orders(self, status: Optional[str] = None, client_id: Optional[str] = None) -> list[Order]:
        return await self.repo.list_orders(self.notion, status=status, client_id=client_id)

    async def get_order(self, page_id: str) -> Order:
        with order_not_found_as_404():
            return await self.repo.get_order(self.notion, page_id)

    async def update_status(self, data: StatusUpdate) -> str:
        """Write the submitted status verbatim; no transition rules are applied"""
        if data.status not in KNOWN_STATUSES:
            logger.warning(f"⚠️ Order {data.orderId} set to unrecognised status '{data.status}'")

        with order_not_found_as_404():
            page_id = await self.repo.update_status(self.notion, data.orderId, data.status, data.note)
        logger.info(f"✅ Order {page_id} status -> {data.status}")
        return page_id

    async def preview_price(self, client_id: str, truck_model_id: str, glass_position: str) -> Optional[float]:
        return await self.catalog.lookup_price(self.notion, client_id, truck_model_id, glass_position)

    async def schedule(self, data: ScheduleRequest) -> str:
        with order_not_found_as_404():
            page_id = await self.repo.schedule(self.notion, data.orderId, data.crewId, data.scheduleDate)
        logger.info(f"📅 Order {page_id} scheduled for {data.scheduleDate} with crew {data.crewId}")
        return page_id
