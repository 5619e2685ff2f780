"""
Invoice PDF Generator
Renders a one-client invoice (FACTURA) listing the invoiced installations
"""

import io
import logging
from datetime import datetime, timezone
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ... import config
from ..catalog.schemas import ClientRecord
from .schemas import InvoiceLineItem

logger = logging.getLogger(__name__)


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


class InvoicePDFGenerator:
    """Generate invoice PDFs"""

    def __init__(
        self,
        invoice_number: str,
        client: ClientRecord,
        items: list[InvoiceLineItem],
        issued_at: Optional[datetime] = None,
    ):
        self.invoice_number = invoice_number
        self.client = client
        self.items = items
        self.issued_at = issued_at or datetime.now(timezone.utc)
        self.company_name = config.INVOICE_COMPANY_NAME
        self.currency = config.INVOICE_CURRENCY

        # PDF settings
        self.page_width, self.page_height = letter
        self.margin = 0.75 * inch

        self.brand_color = colors.HexColor("#0f4c81")
        self.dark_gray = colors.HexColor("#1e293b")
        self.light_gray = colors.HexColor("#f1f5f9")

    @property
    def total(self) -> float:
        return sum(item.price for item in self.items)

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating invoice PDF {self.invoice_number} ({len(self.items)} items)")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Factura {self.invoice_number}",
        )

        story = []
        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=24,
            textColor=self.brand_color,
            spaceAfter=6,
            alignment=1,
        )
        body_style = ParagraphStyle(
            "InvoiceBody",
            parent=styles["Normal"],
            fontSize=10,
            textColor=self.dark_gray,
            spaceAfter=6,
        )

        story.append(Paragraph("FACTURA", title_style))
        story.append(Paragraph(escape(self.company_name), ParagraphStyle("Company", parent=body_style, alignment=1)))
        story.append(Spacer(1, 0.3 * inch))

        info_data = [
            ["Folio:", self.invoice_number],
            ["Fecha:", self.issued_at.strftime("%d/%m/%Y")],
            ["Cliente:", self.client.name],
        ]
        if self.client.address:
            info_data.append(["Dirección:", self.client.address])
        if self.client.phone:
            info_data.append(["Teléfono:", self.client.phone])

        info_table = Table(info_data, colWidths=[1.3 * inch, 4.7 * inch])
        info_table.setStyle(
            TableStyle(
                [
                    ("FONT", (0, 0), (0, -1), "Helvetica-Bold", 10),
                    ("FONT", (1, 0), (1, -1), "Helvetica", 10),
                    ("TEXTCOLOR", (0, 0), (-1, -1), self.dark_gray),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        story.append(info_table)
        story.append(Spacer(1, 0.3 * inch))

        table_data = [["Descripción", "Unidad", "Vidrio", "Precio"]]
        for item in self.items:
            table_data.append([item.description, item.unitNumber, item.glassPosition, format_money(item.price)])
        table_data.append(["", "", "TOTAL", f"{format_money(self.total)} {self.currency}"])

        items_table = Table(
            table_data,
            colWidths=[3.0 * inch, 1.0 * inch, 1.2 * inch, 1.5 * inch],
            repeatRows=1,
        )
        items_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), self.brand_color),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 10),
                    ("TOPPADDING", (0, 0), (-1, 0), 8),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                    # Line items
                    ("FONT", (0, 1), (-1, -2), "Helvetica", 9),
                    ("TEXTCOLOR", (0, 1), (-1, -1), self.dark_gray),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -2), [colors.white, self.light_gray]),
                    ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
                    ("ALIGN", (3, 0), (3, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    # Total row
                    ("FONT", (0, -1), (-1, -1), "Helvetica-Bold", 11),
                    ("LINEABOVE", (2, -1), (-1, -1), 1, self.brand_color),
                    ("TOPPADDING", (0, -1), (-1, -1), 10),
                ]
            )
        )
        story.append(items_table)

        story.append(Spacer(1, 0.5 * inch))
        story.append(
            Paragraph(
                f"<i>Gracias por su preferencia. Generado el {self.issued_at.strftime('%d/%m/%Y %H:%M')}</i>",
                ParagraphStyle("Footer", parent=body_style, fontSize=8, textColor=colors.grey, alignment=1),
            )
        )

        doc.build(story, onFirstPage=self._add_page_number, onLaterPages=self._add_page_number)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"✅ Generated invoice PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def _add_page_number(self, canvas_obj, doc):
        """Add page numbers to PDF"""
        canvas_obj.setFont("Helvetica", 9)
        canvas_obj.setFillColor(colors.grey)
        canvas_obj.drawRightString(
            self.page_width - self.margin, self.margin / 2, f"Página {canvas_obj.getPageNumber()}"
        )
