"""Catalog repository - clients, truck models, crews and pricing rows in Notion"""

import logging
from typing import Optional

from ... import config
from ...services.notion_client import NotionClient
from ...shared import notion_properties as props
from .schemas import ClientRecord, Crew, PricingRow, TruckModel

logger = logging.getLogger(__name__)


def page_to_client(page: dict) -> ClientRecord:
    return ClientRecord(
        id=page["id"],
        name=props.read_text(page, "Company Name", "Unnamed"),
        phone=props.read_phone(page, "Phone"),
        address=props.read_text(page, "Address"),
    )


def page_to_truck_model(page: dict) -> TruckModel:
    return TruckModel(
        id=page["id"],
        model=props.read_text(page, "Model Name", "Unnamed"),
        manufacturer=props.read_select(page, "Manufacturer", ""),
    )


def page_to_crew(page: dict) -> Crew:
    return Crew(
        id=page["id"],
        name=props.read_text(page, "Crew Name", "Unnamed"),
        leadInstaller=props.read_text(page, "Lead Installer"),
        phone=props.read_phone(page, "Phone"),
        status=props.read_select(page, "Status", "Available"),
    )


def page_to_pricing_row(page: dict) -> PricingRow:
    return PricingRow(
        id=page["id"],
        clientId=props.read_first_relation(page, "Client"),
        truckModelId=props.read_first_relation(page, "Truck Model"),
        glassPosition=props.read_select(page, "Glass Position"),
        price=props.read_number(page, "Price"),
    )


class CatalogRepository:
    """Repository for the reference tables"""

    @staticmethod
    async def get_clients(notion: NotionClient) -> list[ClientRecord]:
        pages = await notion.query_data_source(config.NOTION_CLIENTS_DB_ID)
        return [page_to_client(page) for page in pages]

    @staticmethod
    async def get_truck_models(notion: NotionClient) -> list[TruckModel]:
        pages = await notion.query_data_source(config.NOTION_TRUCK_MODELS_DB_ID)
        return [page_to_truck_model(page) for page in pages]

    @staticmethod
    async def get_crews(notion: NotionClient) -> list[Crew]:
        pages = await notion.query_data_source(config.NOTION_CREWS_DB_ID)
        return [page_to_crew(page) for page in pages]

    @staticmethod
    async def get_pricing_rows(notion: NotionClient) -> list[PricingRow]:
        pages = await notion.query_data_source(config.NOTION_PRICING_DB_ID)
        return [page_to_pricing_row(page) for page in pages]

    @staticmethod
    async def lookup_price(
        notion: NotionClient, client_id: str, truck_model_id: str, glass_position: str
    ) -> Optional[float]:
        """
        Price for an exact (client, truck model, glass position) match.

        Returns the first matching row's price, or None when no row matches all
        three keys. There is no fallback to a default price.
        """
        logger.info(
            f"🔍 Pricing lookup: client={client_id}, truck_model={truck_model_id}, position={glass_position}"
        )
        pages = await notion.query_data_source(
            config.NOTION_PRICING_DB_ID,
            filter={
                "and": [
                    {"property": "Client", "relation": {"contains": client_id}},
                    {"property": "Truck Model", "relation": {"contains": truck_model_id}},
                    {"property": "Glass Position", "select": {"equals": glass_position}},
                ]
            },
        )
        if not pages:
            logger.info("ℹ️ No pricing row matched")
            return None

        price = props.read_number(pages[0], "Price")
        logger.info(f"✅ Price found: {price}")
        return price
