# routers/stats.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from schemas.metrics import FaultSummaryResponse, TeamPerformanceResponse
from services import FaultService, SiteService, UserService
from services.auth_service import UserSession
from services.authorization import require_manage
from services.metrics_service import summarize, summarize_by_site, team_performance

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/summary", response_model=FaultSummaryResponse, summary="Fault counts and resolution metrics")
def fault_summary(
     site_id: Optional[str] = Query(None, description="Restrict to one site"),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     """
     Computed over the faults the caller can see. Without a site filter the
     response also carries a breakdown for every visible site.
     """
     site_id = site_id or None
     faults = FaultService.list_faults(db, session.user, site_id=site_id)

     sites = []
     if site_id is None:
          site_names = {site.id: site.name for site in SiteService.list_sites(db, session.user)}
          sites = summarize_by_site(faults, site_names)
     return FaultSummaryResponse(site_id=site_id, sites=sites, **summarize(faults))


@router.get("/performance", response_model=TeamPerformanceResponse, summary="Per technician/engineer performance")
def performance(
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     require_manage(session.user)
     users = UserService.list_team(db)
     faults = FaultService.list_faults(db, session.user)
     return TeamPerformanceResponse(**team_performance(users, faults))
