"""
Tests for the operator sweep that re-runs PDF generation.
"""
from careerpath.db.models.user import User
from careerpath.db.models.resume import Resume
from scripts import retry_stuck_resumes

from conftest import FakeStorage, TestSessionLocal


def test_sweep_publishes_stuck_resumes(db_session, monkeypatch):
    storage = FakeStorage()
    monkeypatch.setattr(retry_stuck_resumes, "SessionLocal", TestSessionLocal)
    monkeypatch.setattr(retry_stuck_resumes, "build_storage", lambda: storage)

    db_session.add(User(id="u1", full_name="Jane Doe"))
    db_session.add(Resume(id="stuck", user_id="u1", title="A", status="paid", version=1, generation_status="render_failed"))
    db_session.add(Resume(id="inflight", user_id="u1", title="B", status="paid", version=2, generation_status="rendering"))
    db_session.add(Resume(id="draft", user_id="u1", title="C", status="draft", version=3))
    db_session.commit()

    published, failed = retry_stuck_resumes.retry_stuck_resumes()

    assert (published, failed) == (1, 0)
    db_session.expire_all()
    assert db_session.get(Resume, "stuck").generation_status == "published"
    assert db_session.get(Resume, "inflight").generation_status == "rendering"
    assert db_session.get(Resume, "draft").pdf_url is None


def test_sweep_can_include_rendering(db_session, monkeypatch):
    monkeypatch.setattr(retry_stuck_resumes, "SessionLocal", TestSessionLocal)
    monkeypatch.setattr(retry_stuck_resumes, "build_storage", FakeStorage)

    db_session.add(User(id="u1", full_name="Jane Doe"))
    db_session.add(Resume(id="inflight", user_id="u1", title="B", status="paid", version=1, generation_status="rendering"))
    db_session.commit()

    assert retry_stuck_resumes.retry_stuck_resumes(include_rendering=True) == (1, 0)
