"""
Asset publisher: uploads generated deliverables and resolves durable URLs.
"""
import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from careerpath.core.config import (
    RESUME_BUCKET,
    RESUME_BUCKET_PUBLIC,
    ROADMAP_BUCKET,
    ROADMAP_BUCKET_PUBLIC,
    SIGNED_URL_TTL_SECONDS,
    STORAGE_TIMEOUT_SECONDS,
)
from careerpath.services.storage import StorageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bucket:
    name: str
    public: bool


RESUME_ASSETS = Bucket(RESUME_BUCKET, RESUME_BUCKET_PUBLIC)
ROADMAP_ASSETS = Bucket(ROADMAP_BUCKET, ROADMAP_BUCKET_PUBLIC)


def build_asset_path(user_id: str, kind: str, ext: str, timestamp_ms: Optional[int] = None) -> str:
    """Object path `{user_id}/{kind}-{ms_timestamp}.{ext}`, namespaced per user."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{user_id}/{kind}-{timestamp_ms}.{ext}"


def _decode_data_url(data_url: str) -> bytes:
    header, sep, encoded = data_url.partition(",")
    if not sep:
        raise ValueError("Malformed data URL")
    if ";base64" in header:
        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 in data URL: {e}") from e
    return encoded.encode("utf-8")


def _load_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if data.startswith("data:"):
        return _decode_data_url(data)
    resp = httpx.get(data, timeout=STORAGE_TIMEOUT_SECONDS, follow_redirects=True)
    resp.raise_for_status()
    return resp.content


def publish_asset(
    storage: StorageBackend,
    bucket: Bucket,
    data: Union[bytes, str],
    user_id: str,
    kind: str,
    ext: str = "png",
    content_type: str = "image/png",
) -> str:
    """
    Upload an asset and return a URL the user can open.

    Args:
        storage: Storage backend
        bucket: Target bucket; public buckets get a public URL, private ones a
            signed URL valid for SIGNED_URL_TTL_SECONDS
        data: Raw bytes, a `data:` URL, or a remote URL to fetch
        user_id: Owner, used as the path prefix
        kind: Asset kind used in the file name (e.g. "resume", "infographic")
        ext: File extension
        content_type: MIME type

    Returns:
        Durable URL of the stored object. When `data` was given as a URL and
        publishing fails, that URL is returned unchanged.

    Raises:
        Exception: Any publishing failure when `data` was bytes
    """
    path = build_asset_path(user_id, kind, ext)
    try:
        payload = _load_bytes(data)
        storage.upload(bucket.name, path, payload, content_type, upsert=False)
        if bucket.public:
            url = storage.get_public_url(bucket.name, path)
        else:
            url = storage.create_signed_url(bucket.name, path, SIGNED_URL_TTL_SECONDS)
        logger.info(f"Published asset: user_id={user_id}, bucket={bucket.name}, path={path}")
        return url
    except Exception as e:
        logger.error(f"Asset publish failed: user_id={user_id}, bucket={bucket.name}, kind={kind}, error={e}", exc_info=True)
        if isinstance(data, str):
            return data
        raise
