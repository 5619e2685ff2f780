"""
Shared fixtures: an in-memory Notion workspace, mocked Cloudinary / Clerk /
Twilio services and a TestClient with the app's dependencies overridden.
"""

import os
import uuid
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

# Data source ids must exist before the app reads its configuration
os.environ.setdefault("NOTION_API_KEY", "secret_test")
os.environ.setdefault("NOTION_ORDERS_DB_ID", "orders-ds")
os.environ.setdefault("NOTION_CLIENTS_DB_ID", "clients-ds")
os.environ.setdefault("NOTION_TRUCK_MODELS_DB_ID", "trucks-ds")
os.environ.setdefault("NOTION_CREWS_DB_ID", "crews-ds")
os.environ.setdefault("NOTION_PRICING_DB_ID", "pricing-ds")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from glass_orders import config  # noqa: E402
from glass_orders.auth import AuthenticatedUser, get_current_user  # noqa: E402
from glass_orders.exceptions import NotionAPIError  # noqa: E402
from glass_orders.main import app  # noqa: E402
from glass_orders.services.clerk_service import get_clerk_service  # noqa: E402
from glass_orders.services.cloudinary_service import get_cloudinary_service  # noqa: E402
from glass_orders.services.notion_client import get_notion  # noqa: E402
from glass_orders.services.twilio_service import get_twilio_service  # noqa: E402
from glass_orders.shared import notion_properties as props  # noqa: E402

CLIENT_ID = "11111111-1111-1111-1111-111111111111"
OTHER_CLIENT_ID = "22222222-2222-2222-2222-222222222222"
TRUCK_ID = "33333333-3333-3333-3333-333333333333"
CREW_ID = "44444444-4444-4444-4444-444444444444"
OTHER_CREW_ID = "55555555-5555-5555-5555-555555555555"

TEST_USER_ID = "user_test123"


def _matches(page: dict, condition: Optional[dict]) -> bool:
    """Evaluate the subset of Notion's filter language the app uses"""
    if not condition:
        return True
    if "and" in condition:
        return all(_matches(page, c) for c in condition["and"])
    if "or" in condition:
        return any(_matches(page, c) for c in condition["or"])

    name = condition["property"]
    if "relation" in condition:
        return condition["relation"]["contains"] in props.read_relation_ids(page, name)
    if "select" in condition:
        return props.read_select(page, name) == condition["select"]["equals"]
    if "rich_text" in condition:
        has_text = bool(props.read_text(page, name))
        return has_text if condition["rich_text"].get("is_not_empty") else not has_text
    if "date" in condition:
        value = (props.read_date(page, name) or "")[:10]
        if not value:
            return False
        rules = condition["date"]
        if "on_or_after" in rules and value < rules["on_or_after"]:
            return False
        if "on_or_before" in rules and value > rules["on_or_before"]:
            return False
        return True
    raise AssertionError(f"Unsupported filter in fake Notion: {condition}")


class FakeNotion:
    """In-memory stand-in for NotionClient; pages keep the property payloads as written"""

    def __init__(self):
        self.pages: dict[str, dict] = {}
        self.queries: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.data_sources: list[dict] = []

    def add_page(self, data_source_id: str, properties: dict, created_time: str = None) -> dict:
        page = {
            "object": "page",
            "id": str(uuid.uuid4()),
            "created_time": created_time or datetime.now(timezone.utc).isoformat(),
            "parent": {"type": "data_source_id", "data_source_id": data_source_id},
            "properties": dict(properties),
        }
        self.pages[page["id"]] = page
        return page

    def in_source(self, data_source_id: str) -> list[dict]:
        return [p for p in self.pages.values() if p["parent"]["data_source_id"] == data_source_id]

    async def query_data_source(self, data_source_id, filter=None, sorts=None, page_size=100):
        self.queries.append({"data_source_id": data_source_id, "filter": filter, "sorts": sorts})
        results = [p for p in self.in_source(data_source_id) if _matches(p, filter)]
        for sort in reversed(sorts or []):
            results.sort(key=lambda p: p[sort["timestamp"]], reverse=sort["direction"] == "descending")
        return results

    async def retrieve_page(self, page_id):
        if page_id not in self.pages:
            raise NotionAPIError(f"Could not find page with ID: {page_id}.", status_code=404, code="object_not_found")
        return self.pages[page_id]

    async def create_page(self, data_source_id, properties):
        return self.add_page(data_source_id, properties)

    async def update_page(self, page_id, properties):
        page = await self.retrieve_page(page_id)
        self.updates.append((page_id, properties))
        page["properties"].update(properties)
        return page

    async def search_data_sources(self):
        return self.data_sources


class FakeClerk:
    """Users keyed by id, each with an email and unsafe_metadata"""

    def __init__(self):
        self.users: dict[str, dict] = {}

    def add_user(self, user_id: str, email: str, crew_id: str = None):
        metadata = {"notion_crew_id": crew_id} if crew_id else {}
        self.users[user_id] = {"id": user_id, "email": email, "unsafe_metadata": metadata}

    async def get_crew_id(self, user_id):
        user = self.users.get(user_id) or {}
        return (user.get("unsafe_metadata") or {}).get("notion_crew_id")

    async def find_users_by_email(self, email):
        return [u for u in self.users.values() if u["email"] == email]

    async def update_unsafe_metadata(self, user_id, metadata):
        user = self.users[user_id]
        for key, value in metadata.items():
            if value is None:
                user["unsafe_metadata"].pop(key, None)
            else:
                user["unsafe_metadata"][key] = value
        return user


# ============================================================================
# PAGE FACTORIES
# ============================================================================


def order_properties(
    order_id="ORD-2026-0001",
    client_id=CLIENT_ID,
    truck_id=TRUCK_ID,
    glass_position="Parabrisas",
    status="Pendiente",
    price=None,
    unit_number="U-100",
    crew_id=None,
    schedule_date=None,
    completion_time=None,
    invoice_number=None,
) -> dict:
    properties = {
        "Order ID": props.title(order_id),
        "Client": props.relation(client_id),
        "Unit Number": props.rich_text(unit_number),
        "Truck Model": props.relation(truck_id),
        "Glass Position": props.select(glass_position),
        "Status": props.select(status),
    }
    if price is not None:
        properties["Price"] = props.number(price)
    if crew_id:
        properties["Assigned Crew"] = props.relation(crew_id)
    if schedule_date:
        properties["Schedule Date"] = props.date(schedule_date)
    if completion_time:
        properties["Completion Time"] = props.date(completion_time)
    if invoice_number:
        properties["Invoice Number"] = props.rich_text(invoice_number)
    return properties


def _add_with_id(notion: FakeNotion, page_id: str, data_source_id: str, properties: dict) -> dict:
    page = notion.add_page(data_source_id, properties)
    del notion.pages[page["id"]]
    page["id"] = page_id
    notion.pages[page_id] = page
    return page


@pytest.fixture
def notion():
    """Workspace with two clients, one truck model, two crews and a pricing row"""
    fake = FakeNotion()
    _add_with_id(
        fake,
        CLIENT_ID,
        config.NOTION_CLIENTS_DB_ID,
        {
            "Company Name": props.title("Transportes del Norte"),
            "Phone": {"phone_number": "+52 81 1234 5678"},
            "Address": props.rich_text("Av. Industrial 100, Monterrey"),
        },
    )
    _add_with_id(fake, OTHER_CLIENT_ID, config.NOTION_CLIENTS_DB_ID, {"Company Name": props.title("Fletes Sur")})
    _add_with_id(
        fake,
        TRUCK_ID,
        config.NOTION_TRUCK_MODELS_DB_ID,
        {"Model Name": props.title("Cascadia"), "Manufacturer": props.select("Freightliner")},
    )
    _add_with_id(fake, CREW_ID, config.NOTION_CREWS_DB_ID, {"Crew Name": props.title("Equipo A")})
    _add_with_id(fake, OTHER_CREW_ID, config.NOTION_CREWS_DB_ID, {"Crew Name": props.title("Equipo B")})
    fake.add_page(
        config.NOTION_PRICING_DB_ID,
        {
            "Client": props.relation(CLIENT_ID),
            "Truck Model": props.relation(TRUCK_ID),
            "Glass Position": props.select("Parabrisas"),
            "Price": props.number(2500),
        },
    )
    return fake


@pytest.fixture
def clerk():
    fake = FakeClerk()
    fake.add_user(TEST_USER_ID, "installer@test.com", crew_id=CREW_ID)
    return fake


@pytest.fixture
def cloudinary():
    service = MagicMock()
    service.upload_invoice_pdf = AsyncMock(return_value="https://res.cloudinary.com/demo/raw/upload/invoice.pdf")
    service.upload_job_asset = AsyncMock(return_value="https://res.cloudinary.com/demo/image/upload/photo.jpg")
    return service


@pytest.fixture
def twilio():
    service = MagicMock()
    service.is_configured.return_value = True
    service.send_message = AsyncMock(return_value={"sid": "SM123", "status": "queued"})
    return service


@pytest.fixture
def mock_user():
    return AuthenticatedUser(user_id=TEST_USER_ID, session_id="sess_123", claims={"sub": TEST_USER_ID})


@pytest.fixture
def client(notion, clerk, cloudinary, twilio, mock_user):
    """Authenticated HTTP client against the in-memory services"""
    app.dependency_overrides[get_notion] = lambda: notion
    app.dependency_overrides[get_clerk_service] = lambda: clerk
    app.dependency_overrides[get_cloudinary_service] = lambda: cloudinary
    app.dependency_overrides[get_twilio_service] = lambda: twilio
    app.dependency_overrides[get_current_user] = lambda: mock_user

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(notion):
    """HTTP client without the authentication override"""
    app.dependency_overrides[get_notion] = lambda: notion

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
