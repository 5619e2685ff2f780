"""Crew router - endpoints used by installers in the field"""

from fastapi import APIRouter, Depends

from ...auth import AuthenticatedUser, get_current_user
from ...services.clerk_service import ClerkService, get_clerk_service
from ...services.notion_client import NotionClient, get_notion
from ..orders.schemas import PageUpdated
from .schemas import CompleteJobRequest, CrewJobResponse, CrewJobsResponse, SaveProgressRequest
from .service import CrewService

router = APIRouter(prefix="/api/crew", tags=["Crew"])


def get_crew_service(
    notion: NotionClient = Depends(get_notion),
    clerk: ClerkService = Depends(get_clerk_service),
) -> CrewService:
    """Dependency injection for CrewService"""
    return CrewService(notion, clerk)


@router.get("/jobs", response_model=CrewJobsResponse)
async def get_crew_jobs(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: CrewService = Depends(get_crew_service),
):
    """Scheduled jobs for the caller's crew"""
    crew_id = await service.get_crew_id(current_user.user_id)
    jobs = await service.list_jobs(crew_id)
    return CrewJobsResponse(crewId=crew_id, jobs=jobs)


@router.get("/jobs/{page_id}", response_model=CrewJobResponse)
async def get_crew_job(
    page_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: CrewService = Depends(get_crew_service),
):
    """One job with saved progress, so the wizard can resume where it stopped"""
    crew_id = await service.get_crew_id(current_user.user_id)
    return CrewJobResponse(job=await service.get_job(crew_id, page_id))


@router.api_route("/save-progress", methods=["POST", "PUT"], response_model=PageUpdated)
async def save_progress(
    data: SaveProgressRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: CrewService = Depends(get_crew_service),
):
    """Autosave the job wizard state"""
    page_id = await service.save_progress(data)
    return PageUpdated(pageId=page_id)


@router.post("/complete-job", response_model=PageUpdated)
async def complete_job(
    data: CompleteJobRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: CrewService = Depends(get_crew_service),
):
    """Record photos, signature and GPS; the order moves to Completado"""
    page_id = await service.complete_job(data, current_user.user_id)
    return PageUpdated(pageId=page_id)
