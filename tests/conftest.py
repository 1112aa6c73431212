# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("ADMIN_EMAIL", None)

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import azure_blob
from database import get_session
from main import app
from models import Base, Role, Site, User
from services.auth_service import create_access_token, hash_password

PASSWORD = "gizli123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
     engine = create_engine(
          "sqlite://",
          connect_args={"check_same_thread": False},
          poolclass=StaticPool,
     )
     Base.metadata.create_all(bind=engine)
     yield engine
     Base.metadata.drop_all(bind=engine)
     engine.dispose()


@pytest.fixture
def session_factory(engine):
     return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
     session = session_factory()
     yield session
     session.close()


@pytest.fixture
def uploads(monkeypatch):
     """Replace blob storage with an in-memory record of uploaded paths."""
     store = SimpleNamespace(uploaded=[], deleted=[])

     def fake_upload(data, path, content_type=None):
          store.uploaded.append(path)
          return f"https://test.blob.core.windows.net/photos/{path}"

     def fake_delete(url):
          store.deleted.append(url)

     monkeypatch.setattr(azure_blob, "upload_bytes", fake_upload)
     monkeypatch.setattr(azure_blob, "delete_blob", fake_delete)
     return store


def _make_user(db, email, role, name, site_ids=None):
     user = User(
          email=email,
          password_hash=PASSWORD_HASH,
          role=role,
          name=name,
          site_ids=site_ids,
     )
     db.add(user)
     return user


@pytest.fixture
def seed(db):
     """Two sites and one user per role; the customer only belongs to site one."""
     site_one = Site(name="Konya GES")
     site_two = Site(name="Karaman GES")
     db.add_all([site_one, site_two])
     db.flush()

     data = SimpleNamespace(
          site_one=site_one,
          site_two=site_two,
          manager=_make_user(db, "yonetici@example.com", Role.MANAGER, "Zeynep Yönetici"),
          technician=_make_user(db, "tekniker@example.com", Role.TECHNICIAN, "Ali Tekniker"),
          engineer=_make_user(db, "muhendis@example.com", Role.ENGINEER, "Can Mühendis"),
          customer=_make_user(db, "musteri@example.com", Role.CUSTOMER, "Ayşe Müşteri", [site_one.id]),
          lonely_customer=_make_user(db, "bos@example.com", Role.CUSTOMER, "Boş Müşteri", []),
          guard=_make_user(db, "bekci@example.com", Role.GUARD, "Hasan Bekçi"),
     )
     db.commit()
     return data


@pytest.fixture
def client(session_factory, uploads):
     def override_get_session():
          session = session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     app.dependency_overrides[get_session] = override_get_session
     yield TestClient(app)
     app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
     def build(user):
          return {"Authorization": f"Bearer {create_access_token(user)}"}
     return build
