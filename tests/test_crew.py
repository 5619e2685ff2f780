"""Crew job listing, progress autosave and job completion"""

import pytest

from conftest import CREW_ID, OTHER_CREW_ID, TEST_USER_ID, order_properties
from glass_orders import config
from glass_orders.domain.orders.progress import parse_progress
from glass_orders.shared import notion_properties as props

BEFORE = [f"https://res.cloudinary.com/demo/image/upload/before_{i}.jpg" for i in range(1, 4)]
AFTER = ["https://res.cloudinary.com/demo/image/upload/after.jpg"]
SIGNATURE = "https://res.cloudinary.com/demo/image/upload/signature.png"
UNKNOWN_PAGE_ID = "99999999-9999-9999-9999-999999999999"


@pytest.fixture
def scheduled_order(notion):
    return notion.add_page(
        config.NOTION_ORDERS_DB_ID,
        order_properties(status="Programado", crew_id=CREW_ID, schedule_date="2026-06-15"),
    )


def _completion(order_page_id, **overrides):
    payload = {
        "orderId": order_page_id,
        "beforePhotos": BEFORE,
        "afterPhotos": AFTER,
        "signatureUrl": SIGNATURE,
        "customerName": "Juan Pérez",
        "gpsLocation": {"lat": 25.6866, "lng": -100.3161},
    }
    payload.update(overrides)
    return payload


class TestCrewJobs:
    def test_lists_only_scheduled_jobs_of_the_callers_crew(self, client, notion, scheduled_order):
        notion.add_page(
            config.NOTION_ORDERS_DB_ID,
            order_properties(order_id="ORD-2026-0002", status="Programado", crew_id=CREW_ID, schedule_date="2026-06-01"),
        )
        notion.add_page(
            config.NOTION_ORDERS_DB_ID,
            order_properties(order_id="ORD-2026-0003", status="Completado", crew_id=CREW_ID),
        )
        notion.add_page(
            config.NOTION_ORDERS_DB_ID,
            order_properties(order_id="ORD-2026-0004", status="Programado", crew_id=OTHER_CREW_ID),
        )

        response = client.get("/api/crew/jobs")

        body = response.json()
        assert response.status_code == 200
        assert body["crewId"] == CREW_ID
        # Soonest first
        assert [job["orderId"] for job in body["jobs"]] == ["ORD-2026-0002", "ORD-2026-0001"]
        assert body["jobs"][0]["clientName"] == "Transportes del Norte"
        assert body["jobs"][0]["truckModelName"] == "Cascadia"

    def test_compact_crew_ids_are_hyphenated(self, client, clerk, scheduled_order):
        clerk.users[TEST_USER_ID]["unsafe_metadata"]["notion_crew_id"] = CREW_ID.replace("-", "")

        response = client.get("/api/crew/jobs")

        assert response.json()["crewId"] == CREW_ID
        assert len(response.json()["jobs"]) == 1

    def test_user_without_crew_is_forbidden(self, client, clerk):
        clerk.users[TEST_USER_ID]["unsafe_metadata"] = {}

        response = client.get("/api/crew/jobs")

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "No crew assigned to this user"}

    def test_job_of_another_crew_is_forbidden(self, client, notion):
        page = notion.add_page(
            config.NOTION_ORDERS_DB_ID, order_properties(status="Programado", crew_id=OTHER_CREW_ID)
        )

        response = client.get(f"/api/crew/jobs/{page['id']}")

        assert response.status_code == 403

    def test_unknown_job_is_a_404(self, client):
        response = client.get(f"/api/crew/jobs/{UNKNOWN_PAGE_ID}")

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"


class TestSaveProgress:
    def test_progress_is_stored_and_read_back(self, client, notion, scheduled_order):
        payload = {
            "orderId": scheduled_order["id"],
            "currentStep": 2,
            "beforePhotos": BEFORE[:2],
            "customerName": "Juan",
        }

        response = client.post("/api/crew/save-progress", json=payload)

        assert response.json() == {"success": True, "pageId": scheduled_order["id"]}
        saved = parse_progress(props.read_text(scheduled_order, "Job Progress"))
        assert saved["currentStep"] == 2
        assert saved["beforePhotos"] == BEFORE[:2]
        assert saved["gpsLocation"] == {"lat": 0, "lng": 0}
        assert "lastUpdated" in saved
        assert "orderId" not in saved

        job = client.get(f"/api/crew/jobs/{scheduled_order['id']}").json()["job"]
        assert job["jobProgress"]["currentStep"] == 2

    def test_last_write_wins(self, client, scheduled_order):
        client.post("/api/crew/save-progress", json={"orderId": scheduled_order["id"], "currentStep": 3})
        client.put("/api/crew/save-progress", json={"orderId": scheduled_order["id"], "currentStep": 1})

        saved = parse_progress(props.read_text(scheduled_order, "Job Progress"))
        assert saved["currentStep"] == 1

    def test_step_must_be_an_integer(self, client, scheduled_order):
        response = client.post(
            "/api/crew/save-progress", json={"orderId": scheduled_order["id"], "currentStep": "two"}
        )
        assert response.status_code == 400

    def test_missing_order_id(self, client):
        response = client.post("/api/crew/save-progress", json={"orderId": " ", "currentStep": 1})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing orderId"

    def test_unknown_order_is_a_404(self, client, notion):
        response = client.post("/api/crew/save-progress", json={"orderId": UNKNOWN_PAGE_ID, "currentStep": 1})

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Order not found"}
        assert notion.updates == []


class TestCompleteJob:
    def test_records_evidence_and_completes(self, client, notion, scheduled_order):
        client.post("/api/crew/save-progress", json={"orderId": scheduled_order["id"], "currentStep": 5})

        response = client.post("/api/crew/complete-job", json=_completion(scheduled_order["id"]))

        assert response.status_code == 200
        page = scheduled_order
        assert props.read_select(page, "Status") == "Completado"
        assert props.read_file_urls(page, "Before Photos") == BEFORE
        assert [f["name"] for f in page["properties"]["Before Photos"]["files"]] == [
            "before_1.jpg",
            "before_2.jpg",
            "before_3.jpg",
        ]
        assert props.read_file_urls(page, "After Photos") == AFTER
        assert props.read_file_urls(page, "Customer Signature") == [SIGNATURE]
        assert props.read_text(page, "Customer Name") == "Juan Pérez"
        assert props.read_text(page, "GPS Location") == "25.6866,-100.3161"
        assert props.read_text(page, "Completed By") == TEST_USER_ID
        assert props.read_date(page, "Completion Time")
        assert props.read_text(page, "Job Progress") == ""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"beforePhotos": BEFORE[:2]}, "Exactly 3 before photos are required"),
            ({"afterPhotos": []}, "Exactly 1 after photo is required"),
            ({"signatureUrl": ""}, "Customer signature is required"),
            ({"customerName": "  "}, "Customer name is required"),
            ({"gpsLocation": {"lat": "19.4", "lng": "-99.1"}}, "gpsLocation.lat: Input should be a valid number"),
            ({"gpsLocation": {"lat": 19.4, "lng": True}}, "gpsLocation.lng: Input should be a valid number"),
        ],
    )
    def test_incomplete_evidence_is_rejected(self, client, notion, scheduled_order, overrides, message):
        response = client.post("/api/crew/complete-job", json=_completion(scheduled_order["id"], **overrides))

        assert response.status_code == 400
        assert response.json()["error"] == message
        assert props.read_select(scheduled_order, "Status") == "Programado"
        assert notion.updates == []

    def test_whole_degree_coordinates_are_accepted(self, client, scheduled_order):
        response = client.post(
            "/api/crew/complete-job", json=_completion(scheduled_order["id"], gpsLocation={"lat": 19, "lng": -99})
        )

        assert response.status_code == 200
        assert props.read_text(scheduled_order, "GPS Location") == "19,-99"

    def test_unknown_order_is_a_404(self, client):
        response = client.post("/api/crew/complete-job", json=_completion(UNKNOWN_PAGE_ID))

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Order not found"}
