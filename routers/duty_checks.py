# routers/duty_checks.py
"""
Guard patrol routes. Guards log checks during a scheduled slot; managers
review every check, guards their own.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from models import DutyCheckStatus
from schemas.duty_check import (
     ActiveSlotResponse,
     DutyCheckCreate,
     DutyCheckListResponse,
     DutyCheckResponse,
)
from services import DutyCheckService
from services.auth_service import UserSession
from services.duty_check_service import ALL_SLOTS

router = APIRouter(prefix="/api/duty-checks", tags=["duty-checks"])


@router.get("/active-slot", response_model=ActiveSlotResponse, summary="Slot open for logging right now")
def active_slot(session: UserSession = Depends(get_user_session)):
     return ActiveSlotResponse(slot=DutyCheckService.current_slot(), slots=list(ALL_SLOTS))


@router.get("", response_model=DutyCheckListResponse, summary="List duty checks")
def list_duty_checks(
     site_id: Optional[str] = Query(None),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     checks = DutyCheckService.list_duty_checks(db, session.user, site_id=site_id)
     return DutyCheckListResponse(
          checks=[DutyCheckResponse.model_validate(c) for c in checks],
          total=len(checks),
     )


@router.post("", response_model=DutyCheckResponse, status_code=status.HTTP_201_CREATED, summary="Log a duty check")
def create_duty_check(
     site_id: str = Form(...),
     latitude: float = Form(..., ge=-90, le=90),
     longitude: float = Form(..., ge=-180, le=180),
     check_status: DutyCheckStatus = Form(DutyCheckStatus.NORMAL, alias="status"),
     description: str = Form(""),
     photos: List[UploadFile] = File([]),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     data = DutyCheckCreate(
          site_id=site_id,
          status=check_status,
          description=description,
          latitude=latitude,
          longitude=longitude,
     )
     check = DutyCheckService.create_duty_check(db, session.user, data, photos)
     return DutyCheckResponse.model_validate(check)
