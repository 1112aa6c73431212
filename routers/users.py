# routers/users.py
"""
Team member, customer and profile routes. Creating and deleting profiles
is restricted to managers; any user may edit their own basic profile.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from schemas.user import CustomerCreate, TeamMemberCreate, UserListResponse, UserResponse, UserUpdate
from services import UserService
from services.auth_service import UserSession
from services.authorization import require_manage, require_manager

router = APIRouter(prefix="/api", tags=["users"])


def _user_list(users) -> UserListResponse:
     return UserListResponse(users=[UserResponse.model_validate(u) for u in users], total=len(users))


@router.get("/team", response_model=UserListResponse, summary="List team members")
def list_team(
     include_guards: bool = Query(False, description="Also list guards"),
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     require_manage(session.user)
     return _user_list(UserService.list_team(db, include_guards=include_guards))


@router.get("/team/assignable", response_model=UserListResponse, summary="Technicians and engineers")
def list_assignable(
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     require_manage(session.user)
     return _user_list(UserService.list_assignable(db))


@router.post("/team", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Create a team member")
def create_team_member(
     body: TeamMemberCreate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     return UserResponse.model_validate(UserService.create_team_member(db, session.user, body))


@router.get("/customers", response_model=UserListResponse, summary="List customers")
def list_customers(
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     require_manager(session.user)
     return _user_list(UserService.list_customers(db))


@router.post("/customers", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Create a customer")
def create_customer(
     body: CustomerCreate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     return UserResponse.model_validate(UserService.create_customer(db, session.user, body))


@router.patch("/users/{user_id}", response_model=UserResponse, summary="Edit a profile")
def update_user(
     user_id: str,
     body: UserUpdate,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     return UserResponse.model_validate(UserService.update_profile(db, session.user, user_id, body))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a profile")
def delete_user(
     user_id: str,
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     UserService.delete_profile(db, session.user, user_id)
