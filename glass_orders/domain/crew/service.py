"""Crew service - field job listing, progress autosave and completion"""

import asyncio
import logging
from typing import Optional

from fastapi import HTTPException

from ...services.clerk_service import ClerkService
from ...services.notion_client import NotionClient
from ...shared.validators import format_notion_id
from ..catalog.repository import CatalogRepository
from ..orders.progress import serialize_progress
from ..orders.repository import OrderRepository
from ..orders.schemas import Order
from ..orders.service import order_not_found_as_404
from .schemas import CompleteJobRequest, CrewJob, SaveProgressRequest

logger = logging.getLogger(__name__)


class CrewService:
    """Service layer for crew field work"""

    def __init__(self, notion: NotionClient, clerk: ClerkService):
        self.notion = notion
        self.clerk = clerk
        self.repo = OrderRepository()
        self.catalog = CatalogRepository()

    async def get_crew_id(self, user_id: str) -> str:
        """Crew linked to the user in Clerk; users without one are not crew members"""
        crew_id: Optional[str] = await self.clerk.get_crew_id(user_id)
        if not crew_id:
            logger.warning(f"⚠️ User {user_id} has no crew assignment")
            raise HTTPException(status_code=403, detail="No crew assigned to this user")
        return format_notion_id(crew_id)

    async def _name_maps(self) -> tuple[dict[str, str], dict[str, str]]:
        clients, truck_models = await asyncio.gather(
            self.catalog.get_clients(self.notion),
            self.catalog.get_truck_models(self.notion),
        )
        return (
            {c.id: c.name for c in clients},
            {t.id: t.model for t in truck_models},
        )

    @staticmethod
    def _to_crew_job(order: Order, client_names: dict, truck_names: dict) -> CrewJob:
        return CrewJob(
            id=order.id,
            orderId=order.orderId,
            clientName=client_names.get(order.clientId, "Unknown Client"),
            unitNumber=order.unitNumber,
            truckModelName=truck_names.get(order.truckModelId, "Unknown Model"),
            glassPosition=order.glassPosition,
            scheduleDate=order.scheduleDate,
            notes=order.notes,
            jobProgress=order.jobProgress,
        )

    async def list_jobs(self, crew_id: str) -> list[CrewJob]:
        """Scheduled jobs for the crew, with client and truck model names"""
        orders, (client_names, truck_names) = await asyncio.gather(
            self.repo.list_crew_jobs(self.notion, crew_id),
            self._name_maps(),
        )
        return [self._to_crew_job(order, client_names, truck_names) for order in orders]

    async def get_job(self, crew_id: str, page_id: str) -> CrewJob:
        """One job with its saved progress, only if it is assigned to the crew"""
        with order_not_found_as_404():
            order, (client_names, truck_names) = await asyncio.gather(
                self.repo.get_order(self.notion, page_id),
                self._name_maps(),
            )

        if order.assignedCrewId != crew_id:
            raise HTTPException(status_code=403, detail="This job is not assigned to your crew")
        return self._to_crew_job(order, client_names, truck_names)

    async def save_progress(self, data: SaveProgressRequest) -> str:
        """Overwrite the order's progress snapshot (last write wins)"""
        blob = serialize_progress(data.model_dump(exclude={"orderId"}))
        with order_not_found_as_404():
            page_id = await self.repo.save_progress(self.notion, data.orderId, blob)
        logger.info(f"💾 Saved progress for order {page_id} (step {data.currentStep})")
        return page_id

    async def complete_job(self, data: CompleteJobRequest, user_id: str) -> str:
        gps = f"{data.gpsLocation.lat},{data.gpsLocation.lng}"
        with order_not_found_as_404():
            page_id = await self.repo.complete_job(
                self.notion,
                data.orderId,
                before_photos=data.beforePhotos,
                after_photos=data.afterPhotos,
                signature_url=data.signatureUrl,
                customer_name=data.customerName,
                gps_location=gps,
                completed_by=user_id,
            )
        logger.info(f"✅ Job {page_id} completed by {user_id} at {gps}")
        return page_id
