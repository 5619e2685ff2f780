"""Image helpers for field photos"""

import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_IMAGE_WIDTH = 1920
JPEG_QUALITY = 85


def compress_photo(content: bytes) -> bytes:
    """
    Downscale a photo to at most MAX_IMAGE_WIDTH wide and re-encode it as JPEG.

    Phone cameras store rotation in EXIF, so the orientation is applied before
    the metadata is dropped.

    Raises:
        ValueError: If the bytes are not an image Pillow can read
    """
    try:
        image = Image.open(BytesIO(content))
        image = ImageOps.exif_transpose(image)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError("File is not a valid image") from e

    if image.width > MAX_IMAGE_WIDTH:
        height = round(image.height * MAX_IMAGE_WIDTH / image.width)
        image = image.resize((MAX_IMAGE_WIDTH, height), Image.LANCZOS)

    # JPEG has no alpha channel
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    output = BytesIO()
    image.save(output, "JPEG", quality=JPEG_QUALITY, optimize=True)
    compressed = output.getvalue()
    logger.info(f"🗜️ Compressed photo {len(content)} -> {len(compressed)} bytes ({image.width}x{image.height})")
    return compressed
