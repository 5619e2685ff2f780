"""Order domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_iso_date
from .constants import GlassPosition


def _required(value: str) -> str:
    if value is None or not value.strip():
        raise ValueError("Field is required")
    return value.strip()


class OrderCreate(BaseModel):
    """Schema for order intake"""

    clientId: str
    unitNumber: str
    truckModelId: str
    glassPosition: GlassPosition
    notes: Optional[str] = None

    @field_validator("clientId", "unitNumber", "truckModelId")
    @classmethod
    def validate_required(cls, v):
        return _required(v)


class OrderCreated(BaseModel):
    success: bool = True
    orderId: str
    notionPageId: str
    price: Optional[float] = None


class StatusUpdate(BaseModel):
    """Schema for a status change; the status string is stored as given"""

    orderId: str
    status: str
    note: Optional[str] = None

    @field_validator("orderId", "status")
    @classmethod
    def validate_required(cls, v):
        return _required(v)


class ScheduleRequest(BaseModel):
    orderId: str
    crewId: str
    scheduleDate: str

    @field_validator("orderId", "crewId")
    @classmethod
    def validate_required(cls, v):
        return _required(v)

    @field_validator("scheduleDate")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(_required(v))


class PricePreviewRequest(BaseModel):
    clientId: str
    truckModelId: str
    glassPosition: GlassPosition

    @field_validator("clientId", "truckModelId")
    @classmethod
    def validate_required(cls, v):
        return _required(v)


class PricePreviewResponse(BaseModel):
    success: bool = True
    price: Optional[float] = None
    found: bool


class PageUpdated(BaseModel):
    success: bool = True
    pageId: str


class Order(BaseModel):
    """An order as stored in the Orders data source"""

    id: str
    orderId: str
    clientId: Optional[str] = None
    unitNumber: str = ""
    truckModelId: Optional[str] = None
    glassPosition: str = ""
    status: str
    price: Optional[float] = None
    notes: str = ""
    inventoryNote: str = ""
    createdAt: Optional[datetime] = None
    assignedCrewId: Optional[str] = None
    scheduleDate: Optional[str] = None
    jobProgress: Optional[dict] = None
    beforePhotos: list[str] = []
    afterPhotos: list[str] = []
    signatureUrl: Optional[str] = None
    customerName: str = ""
    gpsLocation: Optional[str] = None
    completedAt: Optional[str] = None
    completedBy: Optional[str] = None
    invoiceNumber: Optional[str] = None
    invoiceDate: Optional[str] = None
    invoicePdfUrl: Optional[str] = None
    invoiceSentDate: Optional[str] = None


class OrderListResponse(BaseModel):
    success: bool = True
    orders: list[Order]
    total: int


class OrderDetailResponse(BaseModel):
    success: bool = True
    order: Order
