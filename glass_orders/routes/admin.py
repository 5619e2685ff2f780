import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator

from ..auth import AuthenticatedUser, get_current_user
from ..services.clerk_service import CREW_METADATA_KEY, ClerkService, get_clerk_service
from ..shared.validators import format_notion_id, validate_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


class AssignCrewRequest(BaseModel):
    userEmail: str
    crewId: Optional[str] = None

    @field_validator("userEmail")
    @classmethod
    def validate_user_email(cls, v):
        if not v or not v.strip():
            raise ValueError("Missing userEmail")
        return validate_email(v)

    @field_validator("crewId")
    @classmethod
    def validate_crew_id(cls, v):
        if v is None or not v.strip():
            return None
        return format_notion_id(v)


@router.post("/assign-crew")
async def assign_crew(
    data: AssignCrewRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    clerk: ClerkService = Depends(get_clerk_service),
):
    """Link a Clerk user to a Notion crew page, or unlink when crewId is empty"""
    users = await clerk.find_users_by_email(data.userEmail)
    if not users:
        raise HTTPException(status_code=404, detail=f"No user found with email {data.userEmail}")

    user_id = users[0]["id"]
    # Clerk merges metadata, so a null value is what removes the key
    await clerk.update_unsafe_metadata(user_id, {CREW_METADATA_KEY: data.crewId})

    if data.crewId:
        logger.info(f"👷 {current_user.user_id} assigned {data.userEmail} to crew {data.crewId}")
    else:
        logger.info(f"👷 {current_user.user_id} removed crew assignment from {data.userEmail}")

    return {"success": True, "userId": user_id, "crewId": data.crewId}
