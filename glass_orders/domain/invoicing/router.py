"""Invoicing router - invoice generation and delivery endpoints"""

from fastapi import APIRouter, Depends

from ...auth import AuthenticatedUser, get_current_user
from ...services.cloudinary_service import CloudinaryService, get_cloudinary_service
from ...services.notion_client import NotionClient, get_notion
from ...services.twilio_service import TwilioWhatsAppService, get_twilio_service
from .schemas import (
    GenerateInvoiceRequest,
    GenerateInvoiceResponse,
    SendWhatsAppRequest,
    SendWhatsAppResponse,
)
from .service import InvoiceService

router = APIRouter(prefix="/api/orders", tags=["Invoicing"])


def get_invoice_service(
    notion: NotionClient = Depends(get_notion),
    cloudinary: CloudinaryService = Depends(get_cloudinary_service),
    twilio: TwilioWhatsAppService = Depends(get_twilio_service),
) -> InvoiceService:
    """Dependency injection for InvoiceService"""
    return InvoiceService(notion, cloudinary, twilio)


@router.post("/generate-invoice", response_model=GenerateInvoiceResponse)
async def generate_invoice(
    data: GenerateInvoiceRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Invoice a client's completed orders and mark them Facturado"""
    return await service.generate_invoice(data)


@router.post("/send-invoice-whatsapp", response_model=SendWhatsAppResponse)
async def send_invoice_whatsapp(
    data: SendWhatsAppRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Send the invoice PDF link to the client over WhatsApp"""
    return await service.send_invoice_whatsapp(data)
