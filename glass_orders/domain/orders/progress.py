"""Job progress blob - the autosaved field-work snapshot stored on an order"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def serialize_progress(progress: dict, now: Optional[datetime] = None) -> str:
    """Stamp the snapshot with lastUpdated and encode it for storage"""
    now = now or datetime.now(timezone.utc)
    data = {**progress, "lastUpdated": now.isoformat()}
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def parse_progress(text: Optional[str]) -> Optional[dict]:
    """Decode a stored snapshot; empty or unreadable blobs read back as None"""
    if not text:
        return None
    try:
        data = json.loads(text)
    except ValueError:
        logger.warning("⚠️ Stored job progress is not valid JSON, ignoring it")
        return None
    return data if isinstance(data, dict) else None
