"""Catalog router - reference data for the intake and scheduling forms"""

from fastapi import APIRouter, Depends

from ...auth import AuthenticatedUser, get_current_user
from ...services.notion_client import NotionClient, get_notion
from ..orders.constants import GLASS_POSITIONS
from .repository import CatalogRepository

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/clients")
async def get_clients(
    current_user: AuthenticatedUser = Depends(get_current_user),
    notion: NotionClient = Depends(get_notion),
):
    clients = await CatalogRepository.get_clients(notion)
    return {"success": True, "clients": clients}


@router.get("/truck-models")
async def get_truck_models(
    current_user: AuthenticatedUser = Depends(get_current_user),
    notion: NotionClient = Depends(get_notion),
):
    truck_models = await CatalogRepository.get_truck_models(notion)
    return {"success": True, "truckModels": truck_models}


@router.get("/crews")
async def get_crews(
    current_user: AuthenticatedUser = Depends(get_current_user),
    notion: NotionClient = Depends(get_notion),
):
    crews = await CatalogRepository.get_crews(notion)
    return {"success": True, "crews": crews}


@router.get("/glass-positions")
async def get_glass_positions(current_user: AuthenticatedUser = Depends(get_current_user)):
    return {"success": True, "glassPositions": GLASS_POSITIONS}
