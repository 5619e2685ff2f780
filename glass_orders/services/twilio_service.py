"""
Twilio WhatsApp Service
Delivers invoice links to clients over WhatsApp
"""

import logging
from typing import Optional

import httpx

from .. import config
from ..exceptions import TwilioError

logger = logging.getLogger(__name__)


class TwilioWhatsAppService:
    """Service for sending WhatsApp messages through the Twilio Messages API"""

    BASE_URL = "https://api.twilio.com/2010-04-01"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.account_sid = config.TWILIO_ACCOUNT_SID
        self.auth_token = config.TWILIO_AUTH_TOKEN
        self.from_number = config.TWILIO_WHATSAPP_NUMBER
        self.transport = transport

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    @property
    def sender(self) -> str:
        if self.from_number and not self.from_number.startswith("whatsapp:"):
            return f"whatsapp:{self.from_number}"
        return self.from_number or ""

    async def send_message(self, to: str, body: str) -> dict:
        """
        Send a WhatsApp message.

        Args:
            to: Recipient in ``whatsapp:+<digits>`` form
            body: Message text

        Returns:
            dict with the Twilio message ``sid`` and ``status``
        """
        logger.info(f"📱 Sending WhatsApp message: from={self.sender}, to={to}")
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=config.HTTP_TIMEOUT) as client:
                response = await client.post(
                    f"{self.BASE_URL}/Accounts/{self.account_sid}/Messages.json",
                    auth=(self.account_sid, self.auth_token),
                    data={"From": self.sender, "To": to, "Body": body},
                )
        except httpx.HTTPError as e:
            logger.error(f"Twilio API error: {str(e)}")
            raise TwilioError(str(e)) from e

        logger.info(f"📡 Twilio API response status: {response.status_code}")

        if response.status_code in [200, 201]:
            result = response.json()
            logger.info(f"✅ WhatsApp message queued (SID: {result.get('sid')})")
            return {"sid": result.get("sid"), "status": result.get("status")}

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message", response.text or "Unknown error")
        error_code = error_data.get("code")
        logger.error(f"❌ Twilio API error [{error_code}]: {error_message}")
        raise TwilioError(
            error_message,
            status_code=response.status_code,
            code=str(error_code) if error_code is not None else None,
        )


def get_twilio_service() -> TwilioWhatsAppService:
    """Dependency injection for TwilioWhatsAppService"""
    return TwilioWhatsAppService()
