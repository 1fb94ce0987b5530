"""
Object storage backends for published deliverables.

SupabaseStorage talks to the Supabase Storage REST API; LocalStorage writes
under MEDIA_ROOT for development, served by the app's /media static mount.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from careerpath.core.config import STORAGE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an upload or URL resolution fails."""


class StorageBackend(ABC):
    """Abstract base class for object storage."""

    @abstractmethod
    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """
        Store `data` at `bucket/path`.

        Args:
            bucket: Bucket name
            path: Object path inside the bucket
            data: Object bytes
            content_type: MIME type recorded with the object
            upsert: Overwrite an existing object at the same path

        Returns:
            The stored object path

        Raises:
            StorageError: If the object could not be stored
        """
        pass

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str:
        pass

    @abstractmethod
    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        pass

    def close(self) -> None:
        pass


class SupabaseStorage(StorageBackend):
    """Supabase Storage over its REST API, authenticated with the service role key."""

    def __init__(self, url: str, service_key: str, client: Optional[httpx.Client] = None):
        if not url or not service_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for Supabase storage")
        self.base_url = url.rstrip("/") + "/storage/v1"
        self.client = client or httpx.Client(
            timeout=STORAGE_TIMEOUT_SECONDS,
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
        )
        logger.info("Supabase storage initialized")

    @staticmethod
    def _object_path(bucket: str, path: str) -> str:
        return f"{quote(bucket)}/{quote(path)}"

    def upload(self, bucket, path, data, content_type, upsert=False):
        try:
            resp = self.client.post(
                f"{self.base_url}/object/{self._object_path(bucket, path)}",
                content=data,
                headers={
                    "Content-Type": content_type,
                    "x-upsert": "true" if upsert else "false",
                    "cache-control": "max-age=3600",
                },
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Upload request failed for {bucket}/{path}: {e}") from e

        if resp.status_code not in (200, 201):
            raise StorageError(f"Upload rejected for {bucket}/{path}: status={resp.status_code}, body={resp.text[:200]}")

        logger.info(f"Uploaded object: bucket={bucket}, path={path}, bytes={len(data)}")
        return path

    def get_public_url(self, bucket, path):
        return f"{self.base_url}/object/public/{self._object_path(bucket, path)}"

    def create_signed_url(self, bucket, path, expires_in):
        try:
            resp = self.client.post(
                f"{self.base_url}/object/sign/{self._object_path(bucket, path)}",
                json={"expiresIn": expires_in},
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Signed URL request failed for {bucket}/{path}: {e}") from e

        if resp.status_code != 200:
            raise StorageError(f"Signed URL rejected for {bucket}/{path}: status={resp.status_code}")

        signed = resp.json().get("signedURL")
        if not signed:
            raise StorageError(f"Signed URL missing in response for {bucket}/{path}")
        return f"{self.base_url}{signed}"

    def close(self):
        self.client.close()


class LocalStorage(StorageBackend):
    """Filesystem storage for development. URLs point at the /media mount."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Path escapes storage root: {bucket}/{path}")
        return target

    def upload(self, bucket, path, data, content_type, upsert=False):
        target = self._resolve(bucket, path)
        if target.exists() and not upsert:
            raise StorageError(f"Object already exists: {bucket}/{path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write {bucket}/{path}: {e}") from e
        logger.info(f"Stored object locally: bucket={bucket}, path={path}, bytes={len(data)}")
        return path

    def get_public_url(self, bucket, path):
        return f"{self.base_url}/media/{bucket}/{path}"

    def create_signed_url(self, bucket, path, expires_in):
        # No signing on local disk; the media mount serves every object.
        if not self._resolve(bucket, path).exists():
            raise StorageError(f"Object not found: {bucket}/{path}")
        return self.get_public_url(bucket, path)
