"""Invoice numbers: INV-<yyyymm>-<nnnn>, sequence restarting every month"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from ..orders.order_ids import next_sequence_id

INVOICE_PREFIX = "INV"


def next_invoice_number(existing_numbers: Iterable[str], now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return next_sequence_id(INVOICE_PREFIX, f"{now.year:04d}{now.month:02d}", existing_numbers)
