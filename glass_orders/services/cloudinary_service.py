"""
Cloudinary Service
Uploads job photos, customer signatures and invoice PDFs to Cloudinary
"""

import hashlib
import logging
import time
from typing import Optional

import httpx

from .. import config
from ..exceptions import CloudinaryError

logger = logging.getLogger(__name__)

ORDERS_FOLDER = "glass-orders"
ACCESS_CHECK_TIMEOUT = 5.0


def build_signature(params: dict, api_secret: str) -> str:
    """Cloudinary request signature: sha1 of the sorted params joined with & plus the secret"""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324 - required by Cloudinary


def format_context(context: dict) -> str:
    return "|".join(f"{key}={value}" for key, value in context.items())


class CloudinaryService:
    """Service for uploading assets to Cloudinary"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = config.CLOUDINARY_CLOUD_NAME
        self.upload_preset = config.CLOUDINARY_UPLOAD_PRESET
        self.api_key = config.CLOUDINARY_API_KEY
        self.api_secret = config.CLOUDINARY_API_SECRET
        self.transport = transport

    @property
    def signed(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def _form_fields(self, folder: str, context: Optional[dict], signed: Optional[bool] = None) -> dict:
        """Upload form fields; ``signed`` forces a mode, otherwise signed uploads win when keys are set"""
        use_signed = self.signed if signed is None else signed
        fields = {"folder": folder}
        if context:
            fields["context"] = format_context(context)

        if use_signed:
            if not self.signed:
                raise CloudinaryError("Signed upload needs CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET")
            fields["timestamp"] = str(int(time.time()))
            fields["signature"] = build_signature(fields, self.api_secret)
            fields["api_key"] = self.api_key
        elif self.upload_preset:
            fields["upload_preset"] = self.upload_preset
        elif signed is False:
            raise CloudinaryError("Unsigned upload needs CLOUDINARY_UPLOAD_PRESET")
        else:
            raise CloudinaryError(
                "Cloudinary not configured. Set CLOUDINARY_API_KEY/CLOUDINARY_API_SECRET or CLOUDINARY_UPLOAD_PRESET"
            )
        return fields

    async def upload_asset(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
        context: Optional[dict] = None,
        resource_type: str = "image",
        signed: Optional[bool] = None,
    ) -> dict:
        """
        Upload a file and return Cloudinary's upload response.

        The response carries ``secure_url``, ``public_id``, ``resource_type``
        and ``bytes`` among others.
        """
        if not self.cloud_name:
            raise CloudinaryError("Cloudinary not configured. Please set CLOUDINARY_CLOUD_NAME in .env")

        url = f"https://api.cloudinary.com/v1_1/{self.cloud_name}/{resource_type}/upload"
        fields = self._form_fields(folder, context, signed)

        logger.info(f"📤 Uploading {filename} ({len(content)} bytes) to Cloudinary folder {folder}")
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=config.HTTP_TIMEOUT) as client:
                response = await client.post(
                    url,
                    data=fields,
                    files={"file": (filename, content, content_type)},
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Cloudinary upload failed: {e}")
            raise CloudinaryError(f"Upload failed: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = None
            message = message or f"Upload failed: HTTP {response.status_code}"
            logger.error(f"❌ Cloudinary API error [{response.status_code}]: {message}")
            raise CloudinaryError(message, status_code=response.status_code)

        result = response.json()
        if not result.get("secure_url"):
            raise CloudinaryError("Cloudinary response did not include a secure_url")

        logger.info(f"✅ Uploaded to Cloudinary: {result['secure_url']}")
        return result

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
        context: Optional[dict] = None,
        resource_type: str = "image",
    ) -> str:
        """Upload a file and return its HTTPS URL"""
        result = await self.upload_asset(content, filename, content_type, folder, context, resource_type)
        return result["secure_url"]

    async def check_access(self, url: str, timeout: float = ACCESS_CHECK_TIMEOUT) -> str:
        """Fetch a delivered asset server-side; returns ``OK (<status>)`` or ``FAILED: <reason>``"""
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=timeout, follow_redirects=True) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ Could not fetch {url}: {e}")
            return f"FAILED: {e}"

        if response.is_error:
            logger.warning(f"⚠️ Fetching {url} returned HTTP {response.status_code}")
            return f"FAILED: HTTP {response.status_code}"

        content_type = response.headers.get("content-type")
        return f"OK ({response.status_code}) - {content_type}" if content_type else f"OK ({response.status_code})"

    async def upload_job_asset(
        self, content: bytes, filename: str, content_type: str, order_id: str, photo_type: str
    ) -> str:
        """Upload a photo or signature for an order"""
        return await self.upload(
            content,
            filename,
            content_type,
            folder=f"{ORDERS_FOLDER}/{order_id}",
            context={"order_id": order_id, "type": photo_type},
        )

    async def upload_invoice_pdf(self, pdf_bytes: bytes, client_id: str, filename: str) -> str:
        """Upload an invoice PDF as a raw asset"""
        return await self.upload(
            pdf_bytes,
            filename,
            "application/pdf",
            folder=f"{ORDERS_FOLDER}/{client_id}/invoices",
            context={"client_id": client_id, "type": "invoice"},
            resource_type="raw",
        )


def get_cloudinary_service() -> CloudinaryService:
    """Dependency injection for CloudinaryService"""
    return CloudinaryService()
