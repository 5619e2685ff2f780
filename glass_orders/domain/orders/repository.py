"""Order repository - maps order fields to and from the Notion Orders data source"""

from datetime import datetime, timezone
from typing import Optional

from ... import config
from ...services.notion_client import NotionClient
from ...shared import notion_properties as props
from .constants import (
    PROP_AFTER_PHOTOS,
    PROP_ASSIGNED_CREW,
    PROP_BEFORE_PHOTOS,
    PROP_CLIENT,
    PROP_COMPLETED_BY,
    PROP_COMPLETION_TIME,
    PROP_CUSTOMER_NAME,
    PROP_GLASS_POSITION,
    PROP_GPS_LOCATION,
    PROP_INVENTORY_NOTE,
    PROP_INVOICE_DATE,
    PROP_INVOICE_NUMBER,
    PROP_INVOICE_PDF_URL,
    PROP_INVOICE_SENT_DATE,
    PROP_JOB_PROGRESS,
    PROP_NOTES,
    PROP_ORDER_ID,
    PROP_PRICE,
    PROP_SCHEDULE_DATE,
    PROP_SIGNATURE,
    PROP_STATUS,
    PROP_TRUCK_MODEL,
    PROP_UNIT_NUMBER,
    OrderStatus,
)
from .progress import parse_progress
from .schemas import Order


def page_to_order(page: dict) -> Order:
    """Build an Order from a Notion page"""
    signature_urls = props.read_file_urls(page, PROP_SIGNATURE)
    return Order(
        id=page["id"],
        orderId=props.read_text(page, PROP_ORDER_ID),
        clientId=props.read_first_relation(page, PROP_CLIENT),
        unitNumber=props.read_text(page, PROP_UNIT_NUMBER),
        truckModelId=props.read_first_relation(page, PROP_TRUCK_MODEL),
        glassPosition=props.read_select(page, PROP_GLASS_POSITION, ""),
        status=props.read_select(page, PROP_STATUS, OrderStatus.PENDIENTE.value),
        price=props.read_number(page, PROP_PRICE),
        notes=props.read_text(page, PROP_NOTES),
        inventoryNote=props.read_text(page, PROP_INVENTORY_NOTE),
        createdAt=page.get("created_time"),
        assignedCrewId=props.read_first_relation(page, PROP_ASSIGNED_CREW),
        scheduleDate=props.read_date(page, PROP_SCHEDULE_DATE),
        jobProgress=parse_progress(props.read_text(page, PROP_JOB_PROGRESS)),
        beforePhotos=props.read_file_urls(page, PROP_BEFORE_PHOTOS),
        afterPhotos=props.read_file_urls(page, PROP_AFTER_PHOTOS),
        signatureUrl=signature_urls[0] if signature_urls else None,
        customerName=props.read_text(page, PROP_CUSTOMER_NAME),
        gpsLocation=props.read_text(page, PROP_GPS_LOCATION) or None,
        completedAt=props.read_date(page, PROP_COMPLETION_TIME),
        completedBy=props.read_text(page, PROP_COMPLETED_BY) or None,
        invoiceNumber=props.read_text(page, PROP_INVOICE_NUMBER) or None,
        invoiceDate=props.read_date(page, PROP_INVOICE_DATE),
        invoicePdfUrl=props.read_url(page, PROP_INVOICE_PDF_URL),
        invoiceSentDate=props.read_date(page, PROP_INVOICE_SENT_DATE),
    )


def _combine(filters: list[dict]) -> Optional[dict]:
    if not filters:
        return None
    if len(filters) == 1:
        return filters[0]
    return {"and": filters}


class OrderRepository:
    """Repository for order operations against Notion"""

    @staticmethod
    async def list_orders(
        notion: NotionClient, status: Optional[str] = None, client_id: Optional[str] = None
    ) -> list[Order]:
        """Get all orders, newest first, optionally filtered by status and client"""
        filters = []
        if status:
            filters.append({"property": PROP_STATUS, "select": {"equals": status}})
        if client_id:
            filters.append({"property": PROP_CLIENT, "relation": {"contains": client_id}})

        pages = await notion.query_data_source(
            config.NOTION_ORDERS_DB_ID,
            filter=_combine(filters),
            sorts=[{"timestamp": "created_time", "direction": "descending"}],
        )
        return [page_to_order(page) for page in pages]

    @staticmethod
    async def list_order_ids(notion: NotionClient) -> list[str]:
        """Every stored order identifier, across all pages of the data source"""
        pages = await notion.query_data_source(config.NOTION_ORDERS_DB_ID)
        return [props.read_text(page, PROP_ORDER_ID) for page in pages]

    @staticmethod
    async def get_order(notion: NotionClient, page_id: str) -> Order:
        page = await notion.retrieve_page(page_id)
        return page_to_order(page)

    @staticmethod
    async def create_order(
        notion: NotionClient,
        order_id: str,
        client_id: str,
        unit_number: str,
        truck_model_id: str,
        glass_position: str,
        price: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> str:
        """Create the order page and return its Notion page id"""
        properties = {
            PROP_ORDER_ID: props.title(order_id),
            PROP_CLIENT: props.relation(client_id),
            PROP_UNIT_NUMBER: props.rich_text(unit_number),
            PROP_TRUCK_MODEL: props.relation(truck_model_id),
            PROP_GLASS_POSITION: props.select(glass_position),
            PROP_STATUS: props.select(OrderStatus.PENDIENTE.value),
        }
        if price is not None:
            properties[PROP_PRICE] = props.number(price)
        if notes:
            properties[PROP_NOTES] = props.rich_text(notes)

        page = await notion.create_page(config.NOTION_ORDERS_DB_ID, properties)
        return page["id"]

    @staticmethod
    async def update_status(
        notion: NotionClient, page_id: str, status: str, note: Optional[str] = None
    ) -> str:
        properties = {PROP_STATUS: props.select(status)}
        if note:
            properties[PROP_INVENTORY_NOTE] = props.rich_text(note)

        page = await notion.update_page(page_id, properties)
        return page["id"]

    @staticmethod
    async def schedule(notion: NotionClient, page_id: str, crew_id: str, schedule_date: str) -> str:
        page = await notion.update_page(
            page_id,
            {
                PROP_ASSIGNED_CREW: props.relation(crew_id),
                PROP_SCHEDULE_DATE: props.date(schedule_date),
                PROP_STATUS: props.select(OrderStatus.PROGRAMADO.value),
            },
        )
        return page["id"]

    @staticmethod
    async def list_crew_jobs(notion: NotionClient, crew_id: str) -> list[Order]:
        """Scheduled orders assigned to a crew, soonest first"""
        pages = await notion.query_data_source(
            config.NOTION_ORDERS_DB_ID,
            filter={
                "and": [
                    {"property": PROP_ASSIGNED_CREW, "relation": {"contains": crew_id}},
                    {"property": PROP_STATUS, "select": {"equals": OrderStatus.PROGRAMADO.value}},
                ]
            },
        )
        orders = [page_to_order(page) for page in pages]
        return sorted(orders, key=lambda o: o.scheduleDate or "")

    @staticmethod
    async def save_progress(notion: NotionClient, page_id: str, blob: str) -> str:
        """Overwrite the stored progress blob"""
        page = await notion.update_page(page_id, {PROP_JOB_PROGRESS: props.rich_text(blob)})
        return page["id"]

    @staticmethod
    async def complete_job(
        notion: NotionClient,
        page_id: str,
        before_photos: list[str],
        after_photos: list[str],
        signature_url: str,
        customer_name: str,
        gps_location: str,
        completed_by: str,
        completed_at: Optional[datetime] = None,
    ) -> str:
        completed_at = completed_at or datetime.now(timezone.utc)
        page = await notion.update_page(
            page_id,
            {
                PROP_BEFORE_PHOTOS: props.external_files(
                    before_photos, [f"before_{i + 1}.jpg" for i in range(len(before_photos))]
                ),
                PROP_AFTER_PHOTOS: props.external_files(
                    after_photos, [f"after_{i + 1}.jpg" for i in range(len(after_photos))]
                ),
                PROP_SIGNATURE: props.external_files([signature_url], ["signature.png"]),
                PROP_GPS_LOCATION: props.rich_text(gps_location),
                PROP_COMPLETION_TIME: props.date(completed_at.isoformat()),
                PROP_COMPLETED_BY: props.rich_text(completed_by),
                PROP_CUSTOMER_NAME: props.rich_text(customer_name),
                PROP_STATUS: props.select(OrderStatus.COMPLETADO.value),
                # Progress is only meaningful while the job is open
                PROP_JOB_PROGRESS: props.rich_text(None),
            },
        )
        return page["id"]

    @staticmethod
    async def list_completed_by_client(
        notion: NotionClient,
        client_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[Order]:
        """Completed (not yet invoiced) orders, optionally by client and completion date range"""
        filters = [{"property": PROP_STATUS, "select": {"equals": OrderStatus.COMPLETADO.value}}]
        if client_id:
            filters.append({"property": PROP_CLIENT, "relation": {"contains": client_id}})
        # Notion takes one condition per date filter
        if start_date:
            filters.append({"property": PROP_COMPLETION_TIME, "date": {"on_or_after": start_date}})
        if end_date:
            filters.append({"property": PROP_COMPLETION_TIME, "date": {"on_or_before": end_date}})

        pages = await notion.query_data_source(config.NOTION_ORDERS_DB_ID, filter=_combine(filters))
        return [page_to_order(page) for page in pages]

    @staticmethod
    async def list_invoice_numbers(notion: NotionClient) -> list[str]:
        """Invoice numbers already written to orders"""
        pages = await notion.query_data_source(
            config.NOTION_ORDERS_DB_ID,
            filter={"property": PROP_INVOICE_NUMBER, "rich_text": {"is_not_empty": True}},
        )
        return sorted({props.read_text(page, PROP_INVOICE_NUMBER) for page in pages})

    @staticmethod
    async def mark_invoiced(
        notion: NotionClient,
        page_id: str,
        invoice_number: str,
        pdf_url: str,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or datetime.now(timezone.utc)
        page = await notion.update_page(
            page_id,
            {
                PROP_STATUS: props.select(OrderStatus.FACTURADO.value),
                PROP_INVOICE_NUMBER: props.rich_text(invoice_number),
                PROP_INVOICE_DATE: props.date(now.date().isoformat()),
                PROP_INVOICE_PDF_URL: props.url(pdf_url),
                PROP_INVOICE_SENT_DATE: props.date(now.isoformat()),
            },
        )
        return page["id"]
