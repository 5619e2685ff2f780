"""Order router - FastAPI endpoints for order intake and status changes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import AuthenticatedUser, get_current_user
from ...services.notion_client import NotionClient, get_notion
from .schemas import (
    OrderCreate,
    OrderCreated,
    OrderDetailResponse,
    OrderListResponse,
    PageUpdated,
    PricePreviewRequest,
    PricePreviewResponse,
    ScheduleRequest,
    StatusUpdate,
)
from .service import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


def get_order_service(notion: NotionClient = Depends(get_notion)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(notion)


@router.post("/create", response_model=OrderCreated)
async def create_order(
    data: OrderCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Create a new order (status Pendiente) with its price looked up"""
    return await service.create_order(data, current_user.user_id)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[str] = Query(None),
    clientId: Optional[str] = Query(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """List orders, newest first"""
    orders = await service.list_orders(status=status, client_id=clientId)
    return OrderListResponse(orders=orders, total=len(orders))


@router.get("/{page_id}", response_model=OrderDetailResponse)
async def get_order(
    page_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get one order, including its saved job progress"""
    return OrderDetailResponse(order=await service.get_order(page_id))


@router.post("/update-status", response_model=PageUpdated)
async def update_status(
    data: StatusUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Set an order's status; an optional note is kept as the inventory note"""
    page_id = await service.update_status(data)
    return PageUpdated(pageId=page_id)


@router.post("/preview-price", response_model=PricePreviewResponse)
async def preview_price(
    data: PricePreviewRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Look up the price an order would get, without creating it"""
    price = await service.preview_price(data.clientId, data.truckModelId, data.glassPosition.value)
    return PricePreviewResponse(price=price, found=price is not None)


@router.post("/schedule", response_model=PageUpdated)
async def schedule_order(
    data: ScheduleRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Assign a crew and date; the order moves to Programado"""
    page_id = await service.schedule(data)
    return PageUpdated(pageId=page_id)
