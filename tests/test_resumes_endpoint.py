"""
Integration tests for /resumes endpoints.
"""
from careerpath.db.models.user import User
from careerpath.db.models.resume import Resume

from conftest import auth_headers, seed_users


def seed(db_session):
    seed_users(db_session, "u2")
    db_session.add(User(id="u1", full_name="Jane Doe"))
    db_session.add(Resume(id="r1", user_id="u1", title="Jane Doe Resume", status="paid", version=1,
                          generation_status="render_failed"))
    db_session.add(Resume(id="r2", user_id="u1", title="Jane Doe Resume", status="draft", version=2))
    db_session.add(Resume(id="r3", user_id="u2", title="Other Resume", status="paid", version=1))
    db_session.commit()


def test_list_resumes_newest_version_first(client, db_session):
    seed(db_session)

    response = client.get("/resumes", headers=auth_headers("u1"))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [r["id"] for r in body["resumes"]] == ["r2", "r1"]
    assert body["resumes"][1]["generationStatus"] == "render_failed"


def test_regenerate_pdf_recovers_failed_resume(client, db_session, storage):
    seed(db_session)

    response = client.post("/resumes/r1/regenerate-pdf", headers=auth_headers("u1"))

    assert response.status_code == 200
    body = response.json()
    assert body["resumeId"] == "r1"
    assert body["generationStatus"] == "published"
    assert body["pdfUrl"].startswith("https://storage.test/signed/resume-assets/u1/")


def test_regenerate_pdf_reports_failure(client, db_session, storage):
    seed(db_session)
    storage.fail = True

    response = client.post("/resumes/r1/regenerate-pdf", headers=auth_headers("u1"))

    assert response.status_code == 200
    assert response.json()["generationStatus"] == "render_failed"
    assert response.json()["pdfUrl"] is None


def test_regenerate_pdf_other_users_resume(client, db_session):
    seed(db_session)

    response = client.post("/resumes/r3/regenerate-pdf", headers=auth_headers("u1"))

    assert response.status_code == 404


def test_regenerate_pdf_unpaid_resume(client, db_session):
    seed(db_session)

    response = client.post("/resumes/r2/regenerate-pdf", headers=auth_headers("u1"))

    assert response.status_code == 400


def test_resumes_require_token(client):
    assert client.get("/resumes").status_code == 401
