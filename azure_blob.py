# azure_blob.py
from typing import Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from config import AZURE_STORAGE_ACCOUNT, AZURE_STORAGE_CONTAINER, AZURE_STORAGE_KEY

_blob_service: Optional[BlobServiceClient] = None


def _get_blob_service() -> BlobServiceClient:
     global _blob_service
     if _blob_service is None:
          if not AZURE_STORAGE_ACCOUNT or not AZURE_STORAGE_KEY:
               raise RuntimeError("AZURE_STORAGE_ACCOUNT and AZURE_STORAGE_KEY must be set")
          _blob_service = BlobServiceClient.from_connection_string(
               f"DefaultEndpointsProtocol=https;"
               f"AccountName={AZURE_STORAGE_ACCOUNT};"
               f"AccountKey={AZURE_STORAGE_KEY};"
               f"EndpointSuffix=core.windows.net"
          )
     return _blob_service


def blob_url(path: str, container: str = AZURE_STORAGE_CONTAINER) -> str:
     return f"https://{AZURE_STORAGE_ACCOUNT}.blob.core.windows.net/{container}/{path}"


def upload_bytes(data: bytes, path: str, content_type: Optional[str] = None) -> str:
     """
     Upload one file as a single blob and return its durable URL.
     All-or-nothing per file: either the blob is written or an error is raised.
     """
     blob_client = _get_blob_service().get_blob_client(container=AZURE_STORAGE_CONTAINER, blob=path)
     blob_client.upload_blob(
          data,
          overwrite=True,
          content_settings=ContentSettings(content_type=content_type or "application/octet-stream"),
     )
     return blob_url(path)


def delete_blob(url: str) -> None:
     """Delete the blob behind a URL returned by upload_bytes. Missing blobs are ignored."""
     prefix = blob_url("")
     if not url.startswith(prefix):
          return
     blob_client = _get_blob_service().get_blob_client(container=AZURE_STORAGE_CONTAINER, blob=url[len(prefix):])
     try:
          blob_client.delete_blob()
     except ResourceNotFoundError:
          pass
