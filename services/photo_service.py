# services/photo_service.py
import os
import time
import uuid
from typing import Iterable

import structlog
from azure.core.exceptions import AzureError
from sqlalchemy import event
from sqlalchemy.orm import Session

import azure_blob
from errors import StorageError

logger = structlog.get_logger(__name__)

FAULT_PHOTO_PREFIX = "arizalar"
RESOLUTION_PHOTO_PREFIX = "cozumler"
DUTY_CHECK_PHOTO_PREFIX = "kontroller"

PENDING_DELETES_KEY = "pending_photo_deletes"


def build_blob_path(prefix: str, filename: str | None) -> str:
     ext = os.path.splitext(filename or "")[1].lower()
     return f"{prefix}/{int(time.time() * 1000)}_{uuid.uuid4().hex}{ext}"


def upload_photos(files: Iterable, prefix: str) -> list[str]:
     """
     Upload every file under prefix and return the URLs in input order.

     Uploads happen before any record is written, so a failure here leaves
     the database untouched.
     """
     urls = []
     for upload in files or []:
          if upload is None or not getattr(upload, "filename", None):
               continue
          data = upload.file.read()
          path = build_blob_path(prefix, upload.filename)
          try:
               urls.append(azure_blob.upload_bytes(data, path, getattr(upload, "content_type", None)))
          except (AzureError, RuntimeError) as e:
               logger.warning("photo_upload_failed", path=path, error=str(e))
               raise StorageError()
     return urls


def schedule_delete(db: Session, urls: Iterable[str]) -> None:
     """
     Queue stored photos for deletion. The blobs are removed only after the
     session commits, so a failed write never leaves a reference to a
     deleted photo.
     """
     pending = db.info.setdefault(PENDING_DELETES_KEY, [])
     pending.extend(url for url in urls or [] if url)


@event.listens_for(Session, "after_commit")
def _delete_committed_photos(session: Session) -> None:
     for url in session.info.pop(PENDING_DELETES_KEY, []):
          try:
               azure_blob.delete_blob(url)
          except (AzureError, RuntimeError) as e:
               # the row is already gone; an orphaned blob is only wasted space
               logger.warning("photo_delete_failed", url=url, error=str(e))


@event.listens_for(Session, "after_rollback")
def _discard_pending_deletes(session: Session) -> None:
     session.info.pop(PENDING_DELETES_KEY, None)
