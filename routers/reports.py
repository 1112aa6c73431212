# routers/reports.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from services import FaultService, SiteService
from services.auth_service import UserSession
from services.report_service import ReportPeriod, date_range_for, export_faults_csv, report_filename
from utils.timeutils import to_local, utcnow

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/faults.csv", summary="Download the filtered fault list as CSV")
def export_faults(
     site_id: Optional[str] = Query(None),
     period: ReportPeriod = Query(ReportPeriod.ALL),
     start: Optional[date] = Query(None),
     end: Optional[date] = Query(None),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     now = utcnow()
     window = date_range_for(period, now, start, end)
     created_from, created_to = window if window else (None, None)

     faults = FaultService.list_faults(
          db, session.user, site_id=site_id, created_from=created_from, created_to=created_to
     )
     content = export_faults_csv(faults, SiteService.site_name_map(db, {f.site_id for f in faults}))
     filename = report_filename(to_local(now).date())
     return Response(
          content=content,
          media_type="text/csv; charset=utf-8",
          headers={"Content-Disposition": f'attachment; filename="{filename}"'},
     )
