# routers/auth.py
"""
Authentication routes: login, logout and the current profile.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_user_session
from schemas.user import CapabilitiesResponse, LoginRequest, LoginResponse, MeResponse, UserResponse
from services import auth_service
from services.auth_service import UserSession
from services.authorization import resolve_capabilities

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse, summary="Log in with email and password")
def login(body: LoginRequest, db: Session = Depends(get_session)):
     token, user = auth_service.login(db, body.email, body.password)
     return LoginResponse(
          token=token,
          user=UserResponse.model_validate(user),
          capabilities=CapabilitiesResponse(**resolve_capabilities(user).to_dict()),
     )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Revoke the current token")
def logout(
     db: Session = Depends(get_session),
     session: UserSession = Depends(get_user_session),
):
     session.dispose(db)


@router.get("/me", response_model=MeResponse, summary="Current profile and capability flags")
def me(session: UserSession = Depends(get_user_session)):
     return MeResponse(
          user=UserResponse.model_validate(session.user),
          capabilities=CapabilitiesResponse(**session.capabilities.to_dict()),
     )
