"""Catalog schemas - reference tables kept in Notion"""

from typing import Optional

from pydantic import BaseModel


class ClientRecord(BaseModel):
    id: str
    name: str
    phone: str = ""
    address: str = ""


class TruckModel(BaseModel):
    id: str
    model: str
    manufacturer: str = ""


class Crew(BaseModel):
    id: str
    name: str
    leadInstaller: str = ""
    phone: str = ""
    status: str = "Available"


class PricingRow(BaseModel):
    id: str
    clientId: Optional[str] = None
    truckModelId: Optional[str] = None
    glassPosition: Optional[str] = None
    price: Optional[float] = None


class PricingDebugRow(BaseModel):
    id: str
    client: str
    clientId: Optional[str] = None
    truckModel: str
    truckId: Optional[str] = None
    glassPosition: str
    price: Optional[float] = None


class PricingDebugResponse(BaseModel):
    success: bool = True
    total: int
    grouped: dict[str, list[PricingDebugRow]]
    raw: list[PricingDebugRow]
