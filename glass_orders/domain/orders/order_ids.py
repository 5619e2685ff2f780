"""
Human-readable, period-scoped sequence identifiers.

Orders use ``ORD-<yyyy>-<nnnn>`` (sequence resets every calendar year) and
invoices use ``INV-<yyyymm>-<nnnn>`` (sequence resets every month). The next
identifier is computed from the ones already stored, so two requests that scan
at the same time can hand out the same identifier. There is no lock around it.
"""

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from .constants import ORDER_ID_PREFIX

SEQUENCE_WIDTH = 4


def next_sequence_id(prefix: str, period: str, existing_ids: Iterable[str]) -> str:
    """
    Return ``<prefix>-<period>-<max+1>`` zero-padded to four digits.

    Identifiers of other prefixes or periods, and anything not matching the
    pattern, are ignored. Starts at ``0001``.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)-(\d+)$")
    max_seq = 0
    for identifier in existing_ids:
        match = pattern.match((identifier or "").strip())
        if not match or match.group(1) != period:
            continue
        max_seq = max(max_seq, int(match.group(2)))

    return f"{prefix}-{period}-{max_seq + 1:0{SEQUENCE_WIDTH}d}"


def next_order_id(existing_ids: Iterable[str], now: Optional[datetime] = None) -> str:
    """Next order id for the current calendar year, e.g. ORD-2026-0042"""
    now = now or datetime.now(timezone.utc)
    return next_sequence_id(ORDER_ID_PREFIX, f"{now.year:04d}", existing_ids)
