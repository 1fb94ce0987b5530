"""
Tests for asset publishing and the storage backends.
"""
import base64
import json

import httpx
import pytest

from careerpath.services import asset_publisher
from careerpath.services.asset_publisher import Bucket, build_asset_path, publish_asset
from careerpath.services.storage import LocalStorage, StorageError, SupabaseStorage

from conftest import FakeStorage

PUBLIC = Bucket("roadmaps", True)
PRIVATE = Bucket("resume-assets", False)


def test_build_asset_path():
    assert build_asset_path("u1", "infographic", "png", timestamp_ms=1700000000000) == "u1/infographic-1700000000000.png"


def test_build_asset_path_defaults_to_now():
    path = build_asset_path("u1", "resume", "pdf")
    assert path.startswith("u1/resume-")
    assert path.endswith(".pdf")


def test_publish_bytes_to_public_bucket():
    storage = FakeStorage()
    url = publish_asset(storage, PUBLIC, b"png-bytes", "u1", "infographic")

    [(bucket, path)] = storage.objects.keys()
    assert bucket == "roadmaps"
    assert path.startswith("u1/infographic-")
    assert url == f"https://storage.test/public/roadmaps/{path}"


def test_publish_to_private_bucket_uses_signed_url():
    storage = FakeStorage()
    url = publish_asset(storage, PRIVATE, b"%PDF-1.4", "u1", "resume", ext="pdf", content_type="application/pdf")

    assert url.startswith("https://storage.test/signed/resume-assets/u1/resume-")
    assert url.endswith(f"expires_in={60 * 60 * 24 * 365}")


def test_publish_decodes_data_url():
    storage = FakeStorage()
    data_url = "data:image/png;base64," + base64.b64encode(b"\x89PNG-fake").decode()

    publish_asset(storage, PUBLIC, data_url, "u1", "milestone")

    [(data, content_type)] = storage.objects.values()
    assert data == b"\x89PNG-fake"
    assert content_type == "image/png"


def test_publish_downloads_remote_url(monkeypatch):
    storage = FakeStorage()

    def fake_get(url, timeout, follow_redirects):
        return httpx.Response(200, content=b"remote-image", request=httpx.Request("GET", url))

    monkeypatch.setattr(asset_publisher.httpx, "get", fake_get)
    url = publish_asset(storage, PUBLIC, "https://images.example.com/a.png", "u1", "infographic")

    [(data, _)] = storage.objects.values()
    assert data == b"remote-image"
    assert url.startswith("https://storage.test/public/roadmaps/u1/infographic-")


def test_failed_publish_returns_original_url():
    storage = FakeStorage()
    storage.fail = True
    data_url = "data:image/png;base64," + base64.b64encode(b"png").decode()

    assert publish_asset(storage, PUBLIC, data_url, "u1", "infographic") == data_url


def test_failed_publish_of_bytes_raises():
    storage = FakeStorage()
    storage.fail = True

    with pytest.raises(StorageError):
        publish_asset(storage, PUBLIC, b"png", "u1", "infographic")


def test_local_storage_roundtrip(tmp_path):
    storage = LocalStorage(str(tmp_path), "http://localhost:8000/")

    storage.upload("roadmaps", "u1/a.png", b"png", "image/png")

    assert (tmp_path / "roadmaps" / "u1" / "a.png").read_bytes() == b"png"
    assert storage.get_public_url("roadmaps", "u1/a.png") == "http://localhost:8000/media/roadmaps/u1/a.png"
    assert storage.create_signed_url("roadmaps", "u1/a.png", 60) == "http://localhost:8000/media/roadmaps/u1/a.png"


def test_local_storage_refuses_overwrite(tmp_path):
    storage = LocalStorage(str(tmp_path), "http://localhost:8000")
    storage.upload("roadmaps", "u1/a.png", b"one", "image/png")

    with pytest.raises(StorageError):
        storage.upload("roadmaps", "u1/a.png", b"two", "image/png")

    storage.upload("roadmaps", "u1/a.png", b"two", "image/png", upsert=True)
    assert (tmp_path / "roadmaps" / "u1" / "a.png").read_bytes() == b"two"


def test_local_storage_rejects_path_escape(tmp_path):
    storage = LocalStorage(str(tmp_path / "media"), "http://localhost:8000")

    with pytest.raises(StorageError):
        storage.upload("roadmaps", "../../outside.png", b"x", "image/png")


def test_local_storage_signed_url_for_missing_object(tmp_path):
    storage = LocalStorage(str(tmp_path), "http://localhost:8000")

    with pytest.raises(StorageError):
        storage.create_signed_url("resume-assets", "u1/missing.pdf", 60)


def test_supabase_storage_requests():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if "/object/sign/" in request.url.path:
            assert json.loads(request.content) == {"expiresIn": 3600}
            return httpx.Response(200, json={"signedURL": "/object/sign/resume-assets/u1/r.pdf?token=abc"})
        return httpx.Response(200, json={"Key": "resume-assets/u1/r.pdf"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    storage = SupabaseStorage("https://proj.supabase.co/", "service-key", client=client)

    storage.upload("resume-assets", "u1/r.pdf", b"%PDF", "application/pdf")
    signed = storage.create_signed_url("resume-assets", "u1/r.pdf", 3600)

    upload = seen[0]
    assert upload.method == "POST"
    assert upload.url.path == "/storage/v1/object/resume-assets/u1/r.pdf"
    assert upload.headers["x-upsert"] == "false"
    assert upload.headers["content-type"] == "application/pdf"
    assert signed == "https://proj.supabase.co/storage/v1/object/sign/resume-assets/u1/r.pdf?token=abc"
    assert storage.get_public_url("roadmaps", "u1/i.png") == "https://proj.supabase.co/storage/v1/object/public/roadmaps/u1/i.png"


def test_supabase_storage_rejected_upload():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(409, json={"error": "Duplicate"})))
    storage = SupabaseStorage("https://proj.supabase.co", "service-key", client=client)

    with pytest.raises(StorageError):
        storage.upload("roadmaps", "u1/i.png", b"png", "image/png")


def test_supabase_storage_requires_credentials():
    with pytest.raises(ValueError):
        SupabaseStorage("", "")
