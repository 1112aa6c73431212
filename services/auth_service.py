# services/auth_service.py
"""
Authentication and the per-request user session.

Credentials are email + bcrypt password hashes stored on the profile row;
sessions are HS256 JWTs carrying the user id, role and a token id (jti).
Logging out revokes the jti so the token can not resolve a profile again.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET
from database import check_connection
from errors import AuthenticationError, ConnectivityError
from models import RevokedToken, User
from models.base import generate_id
from services.authorization import Capabilities, resolve_capabilities
from utils.timeutils import utcnow

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
     return (email or "").strip().lower()


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
     try:
          return pwd_context.verify(plain, hashed)
     except ValueError:
          return False


def create_access_token(user: User, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
     now = datetime.now(timezone.utc)
     payload = {
          "sub": user.id,
          "role": user.role.value,
          "jti": generate_id(),
          "iat": now,
          "exp": now + timedelta(minutes=expires_minutes),
     }
     return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
     try:
          return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
     except JWTError:
          raise AuthenticationError("auth/invalid-token")


def authenticate(db: Session, email: str, password: str) -> User:
     """
     Verify an email/password pair.

     Raises:
          AuthenticationError: auth/user-not-found, auth/wrong-password or
               auth/user-disabled
     """
     user = db.query(User).filter(User.email == normalize_email(email)).first()
     if user is None:
          raise AuthenticationError("auth/user-not-found")
     if not verify_password(password, user.password_hash):
          raise AuthenticationError("auth/wrong-password")
     if not user.is_active:
          raise AuthenticationError("auth/user-disabled")
     return user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
     """Probe the store, authenticate and issue a token."""
     if not check_connection(db.get_bind()):
          raise ConnectivityError("auth/network-request-failed")

     try:
          user = authenticate(db, email, password)
     except AuthenticationError as exc:
          logger.info("login_failed", email=normalize_email(email), code=exc.code)
          raise

     logger.info("login_succeeded", user_id=user.id, role=user.role.value)
     return create_access_token(user), user


class UserSession:
     """
     The authenticated principal for one request.

     Built with UserSession.init(db, token), which resolves the profile
     before anything else may run. dispose(db) revokes the token and drops
     the profile; a disposed session refuses further use.
     """

     def __init__(self, user: User, claims: dict):
          self._user: Optional[User] = user
          self._claims = claims
          self._disposed = False

     @classmethod
     def init(cls, db: Session, token: Optional[str]) -> "UserSession":
          if not token:
               raise AuthenticationError("auth/missing-token")

          claims = decode_access_token(token)
          user_id = claims.get("sub")
          jti = claims.get("jti")
          if not user_id or not jti:
               raise AuthenticationError("auth/invalid-token")

          if db.get(RevokedToken, jti) is not None:
               raise AuthenticationError("auth/session-closed")

          user = db.get(User, user_id)
          if user is None:
               raise AuthenticationError("auth/user-not-found")
          if not user.is_active:
               raise AuthenticationError("auth/user-disabled")

          return cls(user, claims)

     @property
     def user(self) -> User:
          if self._disposed or self._user is None:
               raise AuthenticationError("auth/session-closed")
          return self._user

     @property
     def capabilities(self) -> Capabilities:
          return resolve_capabilities(self.user)

     @property
     def site_ids(self) -> frozenset:
          return self.user.site_set

     @property
     def disposed(self) -> bool:
          return self._disposed

     def dispose(self, db: Session) -> None:
          """Revoke this session's token. Runs to completion before returning."""
          if self._disposed:
               return

          expires_at = datetime.fromtimestamp(self._claims["exp"], tz=timezone.utc).replace(tzinfo=None)
          user_id = self._user.id if self._user is not None else self._claims.get("sub")
          # revocations outlive their token only until it expires
          pruned = (
               db.query(RevokedToken)
               .filter(RevokedToken.expires_at < utcnow())
               .delete(synchronize_session=False)
          )
          db.add(RevokedToken(jti=self._claims["jti"], user_id=user_id, expires_at=expires_at))
          db.flush()

          self._user = None
          self._disposed = True
          logger.info("logout", user_id=user_id, pruned_revocations=pruned)
