"""Invoice generation and WhatsApp delivery"""

from datetime import datetime, timezone

import pytest

from conftest import CLIENT_ID, OTHER_CLIENT_ID, order_properties
from glass_orders import config
from glass_orders.exceptions import TwilioError
from glass_orders.shared import notion_properties as props

PDF_URL = "https://res.cloudinary.com/demo/raw/upload/invoice.pdf"


def _current_period() -> str:
    now = datetime.now(timezone.utc)
    return f"{now.year:04d}{now.month:02d}"


def _completed(notion, order_id, price=None, client_id=CLIENT_ID, completion_time="2026-05-10T15:00:00+00:00"):
    return notion.add_page(
        config.NOTION_ORDERS_DB_ID,
        order_properties(
            order_id=order_id,
            client_id=client_id,
            status="Completado",
            price=price,
            completion_time=completion_time,
        ),
    )


class TestGenerateInvoice:
    def test_invoices_completed_orders(self, client, notion, cloudinary):
        first = _completed(notion, "ORD-2026-0001", price=2500)
        second = _completed(notion, "ORD-2026-0002", price=1200.5)
        other_client = _completed(notion, "ORD-2026-0003", price=999, client_id=OTHER_CLIENT_ID)

        response = client.post("/api/orders/generate-invoice", json={"clientId": CLIENT_ID})

        body = response.json()
        assert response.status_code == 200
        assert body["invoiceNumber"] == f"INV-{_current_period()}-0001"
        assert body["pdfUrl"] == PDF_URL
        assert body["total"] == 3700.5
        assert body["orderCount"] == 2
        assert body["clientName"] == "Transportes del Norte"
        assert body["clientPhone"] == "+52 81 1234 5678"

        for page in (first, second):
            assert props.read_select(page, "Status") == "Facturado"
            assert props.read_text(page, "Invoice Number") == body["invoiceNumber"]
            assert props.read_url(page, "Invoice PDF URL") == PDF_URL
            assert props.read_date(page, "Invoice Date")
            assert props.read_date(page, "Invoice Sent Date")
        assert props.read_select(other_client, "Status") == "Completado"

    def test_uploads_a_pdf_to_the_client_invoice_folder(self, client, notion, cloudinary):
        _completed(notion, "ORD-2026-0001", price=2500)

        response = client.post("/api/orders/generate-invoice", json={"clientId": CLIENT_ID})

        pdf_bytes, client_id, filename = cloudinary.upload_invoice_pdf.call_args.args
        assert pdf_bytes.startswith(b"%PDF")
        assert client_id == CLIENT_ID
        assert filename == f"{response.json()['invoiceNumber']}.pdf"

    def test_missing_prices_count_as_zero(self, client, notion):
        _completed(notion, "ORD-2026-0001", price=2500)
        _completed(notion, "ORD-2026-0002")

        body = client.post("/api/orders/generate-invoice", json={"clientId": CLIENT_ID}).json()

        assert body["total"] == 2500
        assert body["orderCount"] == 2

    def test_continues_the_monthly_sequence(self, client, notion):
        period = _current_period()
        notion.add_page(
            config.NOTION_ORDERS_DB_ID,
            order_properties(status="Facturado", invoice_number=f"INV-{period}-0007"),
        )
        _completed(notion, "ORD-2026-0002", price=100)

        body = client.post("/api/orders/generate-invoice", json={"clientId": CLIENT_ID}).json()

        assert body["invoiceNumber"] == f"INV-{period}-0008"

    def test_no_completed_orders_is_a_404_without_upload(self, client, notion, cloudinary):
        notion.add_page(config.NOTION_ORDERS_DB_ID, order_properties(status="Programado"))

        response = client.post("/api/orders/generate-invoice", json={"clientId": CLIENT_ID})

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "No completed orders found for this client"}
        cloudinary.upload_invoice_pdf.assert_not_called()
        assert notion.updates == []

    def test_date_range_filters_on_completion_time(self, client, notion):
        _completed(notion, "ORD-2026-0001", price=100, completion_time="2026-04-30T23:00:00+00:00")
        in_range = _completed(notion, "ORD-2026-0002", price=200, completion_time="2026-05-02T09:00:00+00:00")

        body = client.post(
            "/api/orders/generate-invoice",
            json={"clientId": CLIENT_ID, "startDate": "2026-05-01", "endDate": "2026-05-31"},
        ).json()

        assert body["orderCount"] == 1
        assert body["total"] == 200
        assert props.read_select(in_range, "Status") == "Facturado"

    def test_order_ids_restrict_the_invoice(self, client, notion):
        wanted = _completed(notion, "ORD-2026-0001", price=100)
        skipped = _completed(notion, "ORD-2026-0002", price=200)

        body = client.post(
            "/api/orders/generate-invoice",
            json={"clientId": CLIENT_ID, "orderIds": [wanted["id"].replace("-", "")]},
        ).json()

        assert body["orderCount"] == 1
        assert props.read_select(skipped, "Status") == "Completado"

    def test_reversed_date_range_is_a_400(self, client):
        response = client.post(
            "/api/orders/generate-invoice",
            json={"clientId": CLIENT_ID, "startDate": "2026-06-01", "endDate": "2026-05-01"},
        )
        assert response.status_code == 400

    def test_missing_client_id_is_a_400(self, client):
        response = client.post("/api/orders/generate-invoice", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing clientId"


class TestSendInvoiceWhatsApp:
    def _payload(self, **overrides):
        payload = {
            "clientPhone": "+52 81 1234 5678",
            "pdfUrl": PDF_URL,
            "invoiceNumber": "INV-202605-0001",
            "clientName": "Transportes del Norte",
        }
        payload.update(overrides)
        return payload

    def test_sends_the_pdf_link(self, client, twilio):
        response = client.post("/api/orders/send-invoice-whatsapp", json=self._payload())

        assert response.json() == {
            "success": True,
            "messageId": "SM123",
            "status": "queued",
            "sentTo": "whatsapp:+528112345678",
        }
        to, body = twilio.send_message.call_args.args
        assert to == "whatsapp:+528112345678"
        assert body.startswith("Hola Transportes del Norte,")
        assert "#INV-202605-0001" in body
        assert PDF_URL in body

    def test_twilio_not_configured(self, client, twilio):
        twilio.is_configured.return_value = False

        response = client.post("/api/orders/send-invoice-whatsapp", json=self._payload())

        assert response.status_code == 500
        assert "Twilio not configured" in response.json()["error"]
        twilio.send_message.assert_not_called()

    @pytest.mark.parametrize(
        "twilio_message, expected",
        [
            ("Twilio could not find a Channel with the specified From address", "WhatsApp channel not available"),
            ("The 'To' number whatsapp:+52 is not a valid phone number.", "Invalid phone number"),
            ("Authenticate", "Failed to send WhatsApp message: Authenticate"),
        ],
    )
    def test_twilio_errors_are_explained(self, client, twilio, twilio_message, expected):
        twilio.send_message.side_effect = TwilioError(twilio_message, status_code=400, code="63007")

        response = client.post("/api/orders/send-invoice-whatsapp", json=self._payload())

        assert response.status_code == 500
        assert response.json()["error"].startswith(expected)

    def test_phone_and_pdf_url_are_required(self, client):
        response = client.post("/api/orders/send-invoice-whatsapp", json=self._payload(pdfUrl=""))
        assert response.status_code == 400
