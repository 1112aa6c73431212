# routers/sites.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from schemas.site import SiteCreate, SiteListResponse, SiteResponse
from services import SiteService
from services.auth_service import UserSession

router = APIRouter(prefix="/api/sites", tags=["sites"])


@router.get("", response_model=SiteListResponse, summary="List visible sites")
def list_sites(
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     sites = SiteService.list_sites(db, session.user)
     return SiteListResponse(sites=[SiteResponse.model_validate(s) for s in sites], total=len(sites))


@router.post("", response_model=SiteResponse, status_code=status.HTTP_201_CREATED, summary="Create a site")
def create_site(
     body: SiteCreate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     site = SiteService.create_site(db, session.user, body.name)
     return SiteResponse.model_validate(site)
