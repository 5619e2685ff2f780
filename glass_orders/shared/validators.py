"""Shared validation utilities"""

import re
import uuid
from datetime import datetime
from typing import Optional


def validate_notion_id(value: str) -> str:
    """
    Validate a Notion page / data source id.

    Notion accepts ids with or without hyphens; both are UUIDs.

    Raises:
        ValueError: If the value is not a UUID
    """
    try:
        uuid.UUID(value.strip())
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid Notion id: {value!r}") from e
    return value.strip()


def format_notion_id(value: str) -> str:
    """Hyphenate a 32-character Notion id (as copied from a Notion URL); other values pass through"""
    raw = value.strip()
    if re.fullmatch(r"[0-9a-fA-F]{32}", raw):
        return str(uuid.UUID(raw))
    return raw


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_iso_date(value: str) -> str:
    """Validate a calendar date in YYYY-MM-DD form (compact and week dates are rejected)"""
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError) as e:
        raise ValueError("Date must be in YYYY-MM-DD format") from e
    # strptime tolerates single-digit months and days
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def format_whatsapp_number(phone: str) -> str:
    """
    Normalize a phone number to Twilio's WhatsApp address format.

    Numbers already prefixed with ``whatsapp:`` are returned unchanged,
    anything else is reduced to its digits: ``+52 (55) 1234-5678`` becomes
    ``whatsapp:+525512345678``. The country code must be part of the input.
    """
    if phone.startswith("whatsapp:"):
        return phone

    digits = re.sub(r"\D", "", phone)
    if not digits:
        raise ValueError("Phone number has no digits")
    return f"whatsapp:+{digits}"
