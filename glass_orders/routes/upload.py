import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..auth import AuthenticatedUser, get_current_user
from ..services.cloudinary_service import CloudinaryService, get_cloudinary_service
from ..shared.images import compress_photo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["Upload"])

PHOTO_TYPES = ["before_1", "before_2", "before_3", "after", "signature"]

# Allowed image types for job photos
ALLOWED_IMAGE_TYPES = [
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
]

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def _validate_filename(filename: str):
    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise HTTPException(status_code=400, detail=f"Invalid filename - contains dangerous character '{char}'")


@router.post("/{order_id}")
async def upload_job_photo(
    order_id: str,
    photo_type: str = Form(..., alias="photoType"),
    file: UploadFile = File(...),
    current_user: AuthenticatedUser = Depends(get_current_user),
    cloudinary: CloudinaryService = Depends(get_cloudinary_service),
):
    """Upload a before/after photo or the customer signature for an order"""
    logger.info(f"📤 Uploading {photo_type} for order {order_id}")

    # order_id becomes part of the Cloudinary folder
    if not order_id or len(order_id) > 64 or not order_id.replace("-", "").replace("_", "").isalnum():
        raise HTTPException(status_code=400, detail="Invalid order identifier")

    if photo_type not in PHOTO_TYPES:
        raise HTTPException(
            status_code=400, detail=f"Invalid photo type. Expected one of: {', '.join(PHOTO_TYPES)}"
        )

    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PNG, JPEG and WebP images are allowed.",
        )

    if file.filename:
        _validate_filename(file.filename)

    contents = await file.read()
    await file.close()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty file")

    if photo_type == "signature" and file.content_type == "image/png":
        # Signature pads export transparent PNGs; keep them as they are
        content, filename, content_type = contents, f"{photo_type}.png", "image/png"
    else:
        try:
            content = compress_photo(contents)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        filename, content_type = f"{photo_type}.jpg", "image/jpeg"

    url = await cloudinary.upload_job_asset(content, filename, content_type, order_id, photo_type)
    return {"success": True, "url": url, "photoType": photo_type}
