"""Diagnostic endpoints for checking the Notion and Cloudinary setup"""

import asyncio
import base64
import io
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from reportlab.pdfgen import canvas

from ..auth import AuthenticatedUser, get_current_user
from ..domain.catalog.repository import CatalogRepository
from ..domain.catalog.schemas import PricingDebugResponse, PricingDebugRow
from ..services.cloudinary_service import CloudinaryService, get_cloudinary_service
from ..services.notion_client import NotionClient, get_notion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/debug", tags=["Debug"])

DEBUG_FOLDER = "debug-test"

# 1x1 red PNG
RED_PIXEL_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwADhQGAWjR9awAAAABJRU5ErkJggg=="
)


class CloudinaryDebugRequest(BaseModel):
    """Which kind of test file to upload; ``mode`` defaults to whatever credentials are configured"""

    type: Literal["image", "pdf"] = "image"
    mode: Optional[Literal["signed", "unsigned"]] = None


def build_test_pdf() -> bytes:
    """One tiny page, enough for Cloudinary to store it as a PDF"""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(72, 72))
    pdf.drawString(8, 32, "test")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@router.get("/pricing", response_model=PricingDebugResponse)
async def debug_pricing(
    current_user: AuthenticatedUser = Depends(get_current_user),
    notion: NotionClient = Depends(get_notion),
):
    """Every pricing row with client and truck names, grouped by client"""
    rows, clients, truck_models = await asyncio.gather(
        CatalogRepository.get_pricing_rows(notion),
        CatalogRepository.get_clients(notion),
        CatalogRepository.get_truck_models(notion),
    )
    client_names = {c.id: c.name for c in clients}
    truck_names = {t.id: t.model for t in truck_models}

    raw = [
        PricingDebugRow(
            id=row.id,
            client=client_names.get(row.clientId, "Unknown"),
            clientId=row.clientId,
            truckModel=truck_names.get(row.truckModelId, "Unknown"),
            truckId=row.truckModelId,
            glassPosition=row.glassPosition or "",
            price=row.price,
        )
        for row in rows
    ]

    grouped: dict[str, list[PricingDebugRow]] = {}
    for row in raw:
        grouped.setdefault(row.client, []).append(row)

    logger.info(f"🔍 Pricing table has {len(raw)} rows across {len(grouped)} clients")
    return PricingDebugResponse(total=len(raw), grouped=grouped, raw=raw)


@router.get("/notion-databases")
async def debug_notion_databases(
    current_user: AuthenticatedUser = Depends(get_current_user),
    notion: NotionClient = Depends(get_notion),
):
    """Data sources shared with the integration, to copy their ids into .env"""
    results = await notion.search_data_sources()
    data_sources = [
        {
            "id": item.get("id"),
            "title": "".join(t.get("plain_text", "") for t in item.get("title") or []) or "Untitled",
            "url": item.get("url"),
        }
        for item in results
    ]
    return {"success": True, "total": len(data_sources), "dataSources": data_sources}


@router.post("/cloudinary")
async def debug_cloudinary(
    data: CloudinaryDebugRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    cloudinary: CloudinaryService = Depends(get_cloudinary_service),
):
    """Upload a small test file, then fetch it back from the delivery URL"""
    signed = None if data.mode is None else data.mode == "signed"
    mode = data.mode or ("signed" if cloudinary.signed else "unsigned")

    if data.type == "pdf":
        result = await cloudinary.upload_asset(
            build_test_pdf(),
            "test.pdf",
            "application/pdf",
            folder=f"{DEBUG_FOLDER}/pdfs",
            resource_type="raw",
            signed=signed,
        )
    else:
        result = await cloudinary.upload_asset(
            RED_PIXEL_PNG,
            "test.png",
            "image/png",
            folder=f"{DEBUG_FOLDER}/images",
            signed=signed,
        )

    url = result["secure_url"]
    server_access = await cloudinary.check_access(url)
    logger.info(f"🔍 Cloudinary {mode} {data.type} test upload: {url} ({server_access})")

    return {
        "success": True,
        "fileType": data.type,
        "mode": mode,
        "url": url,
        "public_id": result.get("public_id"),
        "resource_type": result.get("resource_type"),
        "bytes": result.get("bytes"),
        "serverAccess": server_access,
    }
