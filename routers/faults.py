# routers/faults.py
"""
Fault API routes.

Photo-carrying actions (create, resolve, resolution edit, photo append)
take multipart form data; the general edit and comments take JSON.
Role-based access:
- Technician / Engineer / Manager: create, edit, resolve, delete, comment
- Customer: view and comment on faults of their own sites
"""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from models import Fault, FaultPriority, FaultStatus
from schemas.fault import (
     CommentCreate,
     CommentResponse,
     DurationResponse,
     FaultCreate,
     FaultListResponse,
     FaultPermissions,
     FaultResponse,
     FaultUpdate,
     ResolutionInput,
     ResolutionResponse,
     ResolutionUpdate,
)
from services import FaultService, SiteService
from services.auth_service import UserSession
from services.authorization import can_manage, capability_flags
from services.metrics_service import elapsed_duration, format_duration
from services.report_service import ReportPeriod, date_range_for
from utils.timeutils import utcnow

router = APIRouter(prefix="/api/faults", tags=["faults"])


# ---------------------------------------------------------------------------
# Response building
# ---------------------------------------------------------------------------

def build_fault_response(fault: Fault, user, site_names: dict[str, str], now: datetime) -> FaultResponse:
     duration = elapsed_duration(fault, now)
     return FaultResponse(
          id=fault.id,
          short_id=fault.short_id,
          title=fault.title,
          description=fault.description or "",
          location=fault.location or "",
          site_id=fault.site_id,
          site_name=site_names.get(fault.site_id),
          status=fault.status,
          priority=fault.priority,
          created_at=fault.created_at,
          updated_at=fault.updated_at,
          created_by=fault.created_by if can_manage(user) else None,
          assigned_to=fault.assigned_to,
          photos=list(fault.photos or []),
          comments=[CommentResponse.model_validate(c) for c in fault.comments],
          resolution=ResolutionResponse.model_validate(fault.resolution) if fault.resolution is not None else None,
          elapsed=DurationResponse(
               total_hours=duration.total_hours,
               days=duration.days,
               hours=duration.hours,
               label=format_duration(duration),
               resolved=fault.is_resolved,
          ),
          permissions=FaultPermissions(**capability_flags(user, fault)),
     )


def _single_response(db: Session, fault: Fault, user) -> FaultResponse:
     site_names = SiteService.site_name_map(db, [fault.site_id])
     return build_fault_response(fault, user, site_names, utcnow())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("", response_model=FaultListResponse, summary="List visible faults")
def list_faults(
     site_id: Optional[str] = Query(None, description="Filter by site"),
     fault_status: Optional[FaultStatus] = Query(None, alias="status", description="Filter by status"),
     period: ReportPeriod = Query(ReportPeriod.ALL, description="Creation date window"),
     start: Optional[date] = Query(None, description="First day for period=custom"),
     end: Optional[date] = Query(None, description="Last day for period=custom"),
     q: Optional[str] = Query(None, description="Search in title and description"),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     """
     List faults visible to the caller, newest first.

     Customers only receive faults on their own sites. **q** matches the
     title or description, ignoring case.
     """
     now = utcnow()
     window = date_range_for(period, now, start, end)
     created_from, created_to = window if window else (None, None)

     faults = FaultService.list_faults(
          db,
          session.user,
          site_id=site_id,
          status=fault_status,
          created_from=created_from,
          created_to=created_to,
          search=q,
     )
     site_names = SiteService.site_name_map(db, {f.site_id for f in faults})
     return FaultListResponse(
          faults=[build_fault_response(f, session.user, site_names, now) for f in faults],
          total=len(faults),
     )


@router.post(
     "",
     response_model=FaultResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new fault"
)
def create_fault(
     title: str = Form(..., max_length=255),
     site_id: str = Form(...),
     description: str = Form(""),
     location: str = Form("", max_length=500),
     priority: FaultPriority = Form(FaultPriority.MEDIUM),
     fault_status: FaultStatus = Form(FaultStatus.OPEN, alias="status"),
     assigned_to: Optional[str] = Form(None),
     created_at: Optional[datetime] = Form(None),
     resolution_description: Optional[str] = Form(None),
     resolution_materials: List[str] = Form([]),
     resolution_completed_at: Optional[datetime] = Form(None),
     photos: List[UploadFile] = File([]),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     """
     Create a fault with optional photos.

     - **status**: defaults to open; resolved requires **resolution_description**
     - **assigned_to**: technician or engineer id
     """
     resolution = None
     if resolution_description is not None:
          resolution = ResolutionInput(
               description=resolution_description,
               materials=resolution_materials,
               completed_at=resolution_completed_at,
          )

     data = FaultCreate(
          title=title,
          description=description,
          location=location,
          site_id=site_id,
          priority=priority,
          status=fault_status,
          assigned_to=assigned_to or None,
          created_at=created_at,
          resolution=resolution,
     )
     fault = FaultService.create_fault(db, session.user, data, photos)
     return _single_response(db, fault, session.user)


@router.get("/{fault_id}", response_model=FaultResponse, summary="Get one fault")
def get_fault(
     fault_id: str,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     fault = FaultService.get_fault(db, session.user, fault_id)
     return _single_response(db, fault, session.user)


@router.patch("/{fault_id}", response_model=FaultResponse, summary="Edit a fault")
def update_fault(
     fault_id: str,
     body: FaultUpdate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     """Only the fields present in the body are changed."""
     fault = FaultService.update_fault(db, session.user, fault_id, body.model_dump(exclude_unset=True))
     return _single_response(db, fault, session.user)


@router.delete("/{fault_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a fault")
def delete_fault(
     fault_id: str,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     FaultService.delete_fault(db, session.user, fault_id)


@router.post("/{fault_id}/photos", response_model=FaultResponse, summary="Append photos")
def add_photos(
     fault_id: str,
     photos: List[UploadFile] = File(...),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     fault = FaultService.add_photos(db, session.user, fault_id, photos)
     return _single_response(db, fault, session.user)


@router.delete("/{fault_id}/photos/{index}", response_model=FaultResponse, summary="Remove one photo")
def remove_photo(
     fault_id: str,
     index: int,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     fault = FaultService.remove_photo(db, session.user, fault_id, index)
     return _single_response(db, fault, session.user)


@router.post("/{fault_id}/resolve", response_model=FaultResponse, summary="Resolve a fault")
def resolve_fault(
     fault_id: str,
     description: str = Form(...),
     materials: List[str] = Form([]),
     completed_at: Optional[datetime] = Form(None),
     photos: List[UploadFile] = File([]),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     """
     Move a fault to resolved.

     - **description**: required, must not be blank
     - **materials**: repeated field; blank entries are dropped
     - **completed_at**: defaults to now
     """
     data = ResolutionInput(description=description, materials=materials, completed_at=completed_at)
     fault = FaultService.resolve_fault(db, session.user, fault_id, data, photos)
     return _single_response(db, fault, session.user)


@router.patch("/{fault_id}/resolution", response_model=FaultResponse, summary="Edit a resolution")
def update_resolution(
     fault_id: str,
     description: Optional[str] = Form(None),
     materials: Optional[List[str]] = Form(None),
     completed_at: Optional[datetime] = Form(None),
     photos: List[UploadFile] = File([]),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     data = ResolutionUpdate(description=description, materials=materials, completed_at=completed_at)
     fault = FaultService.update_resolution(db, session.user, fault_id, data, photos)
     return _single_response(db, fault, session.user)


@router.post(
     "/{fault_id}/comments",
     response_model=CommentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Append a comment"
)
def add_comment(
     fault_id: str,
     body: CommentCreate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     comment = FaultService.add_comment(db, session.user, fault_id, body.message)
     return CommentResponse.model_validate(comment)
