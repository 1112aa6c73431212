# dependencies.py
"""
Shared FastAPI dependencies: the bearer token and the per-request UserSession.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from database import get_session
from services.auth_service import UserSession


def bearer_token(request: Request) -> Optional[str]:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          return None
     return auth.split(" ", 1)[1].strip() or None


def get_user_session(
     token: Optional[str] = Depends(bearer_token),
     db: Session = Depends(get_session),
) -> UserSession:
     """Resolve the caller's profile before the route runs."""
     return UserSession.init(db, token)
