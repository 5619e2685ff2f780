"""Crew domain schemas - field job execution"""

from typing import Optional

from pydantic import BaseModel, StrictFloat, StrictInt, field_validator

BEFORE_PHOTO_COUNT = 3
AFTER_PHOTO_COUNT = 1


class GpsLocation(BaseModel):
    lat: StrictFloat
    lng: StrictFloat


class JobProgress(BaseModel):
    """Snapshot of an in-progress job; stored as-is on every autosave"""

    currentStep: StrictInt
    beforePhotos: list[str] = []
    afterPhotos: list[str] = []
    signatureUrl: str = ""
    customerName: str = ""
    gpsLocation: GpsLocation = GpsLocation(lat=0, lng=0)


class SaveProgressRequest(JobProgress):
    orderId: str

    @field_validator("orderId")
    @classmethod
    def validate_order_id(cls, v):
        if not v.strip():
            raise ValueError("Missing orderId")
        return v.strip()


class CompleteJobRequest(BaseModel):
    orderId: str
    beforePhotos: list[str]
    afterPhotos: list[str]
    signatureUrl: str
    customerName: str
    gpsLocation: GpsLocation

    @field_validator("orderId")
    @classmethod
    def validate_order_id(cls, v):
        if not v.strip():
            raise ValueError("Missing orderId")
        return v.strip()

    @field_validator("beforePhotos")
    @classmethod
    def validate_before_photos(cls, v):
        if len(v) != BEFORE_PHOTO_COUNT:
            raise ValueError(f"Exactly {BEFORE_PHOTO_COUNT} before photos are required")
        return v

    @field_validator("afterPhotos")
    @classmethod
    def validate_after_photos(cls, v):
        if len(v) != AFTER_PHOTO_COUNT:
            raise ValueError(f"Exactly {AFTER_PHOTO_COUNT} after photo is required")
        return v

    @field_validator("signatureUrl")
    @classmethod
    def validate_signature(cls, v):
        if not v.strip():
            raise ValueError("Customer signature is required")
        return v.strip()

    @field_validator("customerName")
    @classmethod
    def validate_customer_name(cls, v):
        if not v.strip():
            raise ValueError("Customer name is required")
        return v.strip()


class CrewJob(BaseModel):
    id: str
    orderId: str
    clientName: str
    unitNumber: str
    truckModelName: str
    glassPosition: str
    scheduleDate: Optional[str] = None
    notes: str = ""
    jobProgress: Optional[dict] = None


class CrewJobsResponse(BaseModel):
    success: bool = True
    crewId: str
    jobs: list[CrewJob]


class CrewJobResponse(BaseModel):
    success: bool = True
    job: CrewJob
