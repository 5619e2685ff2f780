"""Invoicing schemas - invoice generation and WhatsApp delivery"""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_iso_date


class GenerateInvoiceRequest(BaseModel):
    """Invoice every completed order of a client, optionally within a completion date range"""

    clientId: str
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    orderIds: Optional[list[str]] = None

    @field_validator("clientId")
    @classmethod
    def validate_client_id(cls, v):
        if not v or not v.strip():
            raise ValueError("Missing clientId")
        return v.strip()

    @field_validator("startDate", "endDate")
    @classmethod
    def validate_dates(cls, v):
        if v is None or not v.strip():
            return None
        return validate_iso_date(v.strip())

    @model_validator(mode="after")
    def validate_range(self):
        if self.startDate and self.endDate and self.startDate > self.endDate:
            raise ValueError("startDate must be on or before endDate")
        return self


class InvoiceLineItem(BaseModel):
    pageId: str
    orderId: str
    description: str
    unitNumber: str = ""
    glassPosition: str = ""
    price: float = 0


class GenerateInvoiceResponse(BaseModel):
    success: bool = True
    invoiceNumber: str
    pdfUrl: str
    total: float
    orderCount: int
    clientName: str
    clientPhone: str = ""


class SendWhatsAppRequest(BaseModel):
    clientPhone: str
    pdfUrl: str
    invoiceNumber: Optional[str] = None
    clientName: Optional[str] = None

    @field_validator("clientPhone", "pdfUrl")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Missing phone number or PDF URL")
        return v.strip()


class SendWhatsAppResponse(BaseModel):
    success: bool = True
    messageId: Optional[str] = None
    status: Optional[str] = None
    sentTo: str
