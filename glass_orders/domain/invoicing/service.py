"""Invoicing service - invoice generation and WhatsApp delivery"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException

from ...exceptions import TwilioError
from ...services.cloudinary_service import CloudinaryService
from ...services.notion_client import NotionClient
from ...services.twilio_service import TwilioWhatsAppService
from ...shared.validators import format_whatsapp_number
from ..catalog.repository import CatalogRepository
from ..catalog.schemas import ClientRecord
from ..orders.repository import OrderRepository
from ..orders.schemas import Order
from .numbering import next_invoice_number
from .pdf import InvoicePDFGenerator
from .schemas import (
    GenerateInvoiceRequest,
    GenerateInvoiceResponse,
    InvoiceLineItem,
    SendWhatsAppRequest,
    SendWhatsAppResponse,
)

logger = logging.getLogger(__name__)


def _normalize_id(value: Optional[str]) -> str:
    return (value or "").replace("-", "").lower()


def build_whatsapp_message(invoice_number: Optional[str], pdf_url: str, client_name: Optional[str]) -> str:
    """Spanish message body carrying the PDF link"""
    return (
        f"Hola {client_name or 'cliente'},\n\n"
        f"Adjuntamos su factura #{invoice_number or ''}.\n\n"
        f"📄 Descargar PDF:\n{pdf_url}\n\n"
        "Gracias por su confianza."
    )


def describe_twilio_error(error: TwilioError) -> str:
    """Turn common Twilio failures into something the office can act on"""
    message = error.message
    if "Channel" in message:
        return (
            "WhatsApp channel not available. Make sure the recipient joined the Twilio "
            f"WhatsApp sandbox or that the sender is approved. ({message})"
        )
    if "not a valid" in message:
        return f"Invalid phone number. Include the country code, e.g. +52... ({message})"
    return f"Failed to send WhatsApp message: {message}"


class InvoiceService:
    """Service layer for invoicing completed orders"""

    def __init__(
        self,
        notion: NotionClient,
        cloudinary: Optional[CloudinaryService] = None,
        twilio: Optional[TwilioWhatsAppService] = None,
    ):
        self.notion = notion
        self.cloudinary = cloudinary
        self.twilio = twilio
        self.repo = OrderRepository()
        self.catalog = CatalogRepository()

    @staticmethod
    def _line_items(orders: list[Order], truck_names: dict[str, str]) -> list[InvoiceLineItem]:
        items = []
        for order in orders:
            truck_name = truck_names.get(order.truckModelId, "Unknown Model")
            items.append(
                InvoiceLineItem(
                    pageId=order.id,
                    orderId=order.orderId,
                    description=f"{order.orderId} - {truck_name}",
                    unitNumber=order.unitNumber,
                    glassPosition=order.glassPosition,
                    # Orders without a price are invoiced at 0
                    price=order.price or 0,
                )
            )
        return items

    async def generate_invoice(
        self, data: GenerateInvoiceRequest, now: Optional[datetime] = None
    ) -> GenerateInvoiceResponse:
        """
        Invoice the client's completed orders.

        Renders the PDF, uploads it to Cloudinary and moves every included
        order to Facturado. A failure after the upload can leave only some
        of the orders marked.
        """
        now = now or datetime.now(timezone.utc)
        logger.info(f"🧾 Generating invoice for client {data.clientId}")

        orders, clients, truck_models, existing_numbers = await asyncio.gather(
            self.repo.list_completed_by_client(
                self.notion, client_id=data.clientId, start_date=data.startDate, end_date=data.endDate
            ),
            self.catalog.get_clients(self.notion),
            self.catalog.get_truck_models(self.notion),
            self.repo.list_invoice_numbers(self.notion),
        )

        if data.orderIds:
            wanted = {_normalize_id(page_id) for page_id in data.orderIds}
            orders = [order for order in orders if _normalize_id(order.id) in wanted]

        if not orders:
            raise HTTPException(status_code=404, detail="No completed orders found for this client")

        client: Optional[ClientRecord] = next(
            (c for c in clients if _normalize_id(c.id) == _normalize_id(data.clientId)), None
        )
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")

        items = self._line_items(orders, {t.id: t.model for t in truck_models})
        invoice_number = next_invoice_number(existing_numbers, now)

        generator = InvoicePDFGenerator(invoice_number, client, items, issued_at=now)
        pdf_bytes = generator.generate()
        pdf_url = await self.cloudinary.upload_invoice_pdf(pdf_bytes, data.clientId, f"{invoice_number}.pdf")

        await asyncio.gather(
            *(self.repo.mark_invoiced(self.notion, order.id, invoice_number, pdf_url, now) for order in orders)
        )

        logger.info(f"✅ Invoice {invoice_number} issued for {client.name}: {len(orders)} orders, total {generator.total}")
        return GenerateInvoiceResponse(
            invoiceNumber=invoice_number,
            pdfUrl=pdf_url,
            total=generator.total,
            orderCount=len(orders),
            clientName=client.name,
            clientPhone=client.phone,
        )

    async def send_invoice_whatsapp(self, data: SendWhatsAppRequest) -> SendWhatsAppResponse:
        if not self.twilio.is_configured():
            logger.error("❌ Twilio WhatsApp credentials are not configured")
            raise HTTPException(
                status_code=500,
                detail="Twilio not configured. Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_WHATSAPP_NUMBER",
            )

        try:
            to = format_whatsapp_number(data.clientPhone)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        body = build_whatsapp_message(data.invoiceNumber, data.pdfUrl, data.clientName)
        try:
            result = await self.twilio.send_message(to, body)
        except TwilioError as e:
            raise HTTPException(status_code=500, detail=describe_twilio_error(e)) from e

        logger.info(f"✅ Invoice {data.invoiceNumber} sent to {to}")
        return SendWhatsAppResponse(messageId=result.get("sid"), status=result.get("status"), sentTo=to)
