# models/base.py
import uuid

from sqlalchemy.orm import DeclarativeBase


def generate_id() -> str:
     """Primary keys are opaque UUID strings, like document ids in the original store."""
     return str(uuid.uuid4())


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.

     Table names are declared explicitly on every model and keep the
     collection names used by the application (kullanicilar, arizalar, ...).
     """
