"""Builders and readers for Notion page property values"""

from typing import Optional

# Notion rejects a single rich text object longer than this
RICH_TEXT_LIMIT = 2000


def _chunks(text: str, size: int = RICH_TEXT_LIMIT) -> list[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


# ============================================================================
# BUILDERS
# ============================================================================


def title(text: str) -> dict:
    return {"title": [{"text": {"content": chunk}} for chunk in _chunks(text)]}


def rich_text(text: Optional[str]) -> dict:
    """Rich text value; long strings are split over several text objects, None/"" clears it"""
    if not text:
        return {"rich_text": []}
    return {"rich_text": [{"text": {"content": chunk}} for chunk in _chunks(text)]}


def select(name: str) -> dict:
    return {"select": {"name": name}}


def relation(*page_ids: str) -> dict:
    return {"relation": [{"id": page_id} for page_id in page_ids if page_id]}


def number(value: Optional[float]) -> dict:
    return {"number": value}


def date(start: str) -> dict:
    return {"date": {"start": start}}


def url(value: Optional[str]) -> dict:
    return {"url": value}


def external_files(urls: list[str], names: list[str]) -> dict:
    return {
        "files": [
            {"type": "external", "name": name, "external": {"url": file_url}}
            for file_url, name in zip(urls, names)
        ]
    }


# ============================================================================
# READERS
# ============================================================================


def _prop(page: dict, name: str) -> dict:
    return (page.get("properties") or {}).get(name) or {}


def read_text(page: dict, name: str, default: str = "") -> str:
    """Concatenated plain text of a title or rich_text property"""
    prop = _prop(page, name)
    segments = prop.get("title") if "title" in prop else prop.get("rich_text")
    if not segments:
        return default
    return "".join(segment.get("plain_text") or segment.get("text", {}).get("content", "") for segment in segments)


def read_select(page: dict, name: str, default: Optional[str] = None) -> Optional[str]:
    value = _prop(page, name).get("select")
    return value.get("name") if value else default


def read_relation_ids(page: dict, name: str) -> list[str]:
    return [item["id"] for item in _prop(page, name).get("relation") or [] if item.get("id")]


def read_first_relation(page: dict, name: str) -> Optional[str]:
    ids = read_relation_ids(page, name)
    return ids[0] if ids else None


def read_number(page: dict, name: str) -> Optional[float]:
    return _prop(page, name).get("number")


def read_date(page: dict, name: str) -> Optional[str]:
    value = _prop(page, name).get("date")
    return value.get("start") if value else None


def read_url(page: dict, name: str) -> Optional[str]:
    return _prop(page, name).get("url")


def read_file_urls(page: dict, name: str) -> list[str]:
    urls = []
    for item in _prop(page, name).get("files") or []:
        kind = item.get("type", "external")
        file_url = (item.get(kind) or {}).get("url")
        if file_url:
            urls.append(file_url)
    return urls


def read_phone(page: dict, name: str) -> str:
    """Phone stored either as a phone_number property or as plain text"""
    prop = _prop(page, name)
    if prop.get("phone_number"):
        return prop["phone_number"]
    return read_text(page, name)
