"""
Integration tests for POST /webhooks/stripe.
"""
import json

from careerpath.db.models.user import User
from careerpath.db.models.resume import Resume
from careerpath.db.models.user_payment import UserPayment
from careerpath.db.models.subscription import Subscription

from conftest import sign_payload, stripe_event


def post_event(client, payload: str, signature: str = None):
    headers = {"Content-Type": "application/json"}
    headers["stripe-signature"] = signature if signature is not None else sign_payload(payload)
    return client.post("/webhooks/stripe", content=payload, headers=headers)


def checkout_completed(metadata: dict, session_id: str = "cs_test_1", amount_total: int = 900) -> str:
    return stripe_event("checkout.session.completed", {
        "id": session_id,
        "object": "checkout.session",
        "customer": "cus_test_1",
        "amount_total": amount_total,
        "payment_intent": "pi_test_1",
        "mode": "payment",
        "metadata": metadata,
    })


def seed_user(db_session, user_id="u1", full_name="Jane Doe"):
    user = User(id=user_id, email=f"{user_id}@example.com", full_name=full_name)
    db_session.add(user)
    db_session.commit()
    return user


def test_missing_signature_rejected_without_writes(client, db_session):
    payload = checkout_completed({"userId": "u1", "product_type": "roadmap_access"})
    response = client.post("/webhooks/stripe", content=payload, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing signature"}
    assert db_session.query(UserPayment).count() == 0


def test_invalid_signature_rejected_without_writes(client, db_session):
    payload = checkout_completed({"userId": "u1", "product_type": "roadmap_access"})
    response = post_event(client, payload, signature=sign_payload(payload, secret="whsec_wrong"))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid signature"}
    assert db_session.query(UserPayment).count() == 0
    assert db_session.query(Resume).count() == 0


def test_tampered_body_rejected(client, db_session):
    payload = checkout_completed({"userId": "u1", "product_type": "roadmap_access"})
    signature = sign_payload(payload)
    tampered = payload.replace("999", "1").replace("900", "1")

    response = post_event(client, tampered, signature=signature)

    assert response.status_code == 400
    assert db_session.query(UserPayment).count() == 0


def test_roadmap_access_payment_recorded(client, db_session):
    payload = checkout_completed({"userId": "u1", "product_type": "roadmap_access"}, amount_total=999)
    response = post_event(client, payload)

    assert response.status_code == 200
    assert response.json() == {"received": True}

    payment = db_session.query(UserPayment).filter(UserPayment.user_id == "u1").one()
    assert payment.has_paid is True
    assert float(payment.payment_amount) == 9.99
    assert payment.stripe_payment_intent_id == "pi_test_1"
    assert payment.paid_at is not None


def test_roadmap_access_redelivery_is_idempotent(client, db_session):
    payload = checkout_completed({"userId": "u1", "product_type": "roadmap_access"}, amount_total=999)

    assert post_event(client, payload).status_code == 200
    assert post_event(client, payload).status_code == 200

    assert db_session.query(UserPayment).filter(UserPayment.user_id == "u1").count() == 1


def test_roadmap_access_accepts_snake_case_user_id(client, db_session):
    payload = checkout_completed({"user_id": "u1", "product_type": "roadmap_access"}, amount_total=999)

    assert post_event(client, payload).status_code == 200
    assert db_session.query(UserPayment).filter(UserPayment.user_id == "u1").count() == 1


def test_existing_resume_marked_paid_and_published(client, db_session, storage):
    seed_user(db_session)
    resume = Resume(id="r1", user_id="u1", title="Jane Doe Resume", status="draft", version=1)
    db_session.add(resume)
    db_session.commit()

    payload = checkout_completed({"userId": "u1", "resumeId": "r1"}, session_id="cs_paid_1")
    response = post_event(client, payload)

    assert response.status_code == 200
    db_session.expire_all()
    resume = db_session.query(Resume).filter(Resume.id == "r1").one()
    assert resume.status == "paid"
    assert resume.stripe_session_id == "cs_paid_1"
    assert resume.generation_status == "published"
    assert resume.pdf_url.startswith("https://storage.test/signed/resume-assets/u1/resume-")

    [(bucket, path)] = list(storage.objects.keys())
    data, content_type = storage.objects[(bucket, path)]
    assert bucket == "resume-assets"
    assert content_type == "application/pdf"
    assert data.startswith(b"%PDF")


def test_resume_of_another_user_is_not_touched(client, db_session):
    seed_user(db_session, "u1")
    seed_user(db_session, "u2", "Other Person")
    db_session.add(Resume(id="r2", user_id="u2", title="Other Person Resume", status="draft", version=1))
    db_session.commit()

    payload = checkout_completed({"userId": "u1", "resumeId": "r2"})
    response = post_event(client, payload)

    assert response.status_code == 200
    db_session.expire_all()
    resume = db_session.query(Resume).filter(Resume.id == "r2").one()
    assert resume.status == "draft"
    assert resume.stripe_session_id is None
    assert db_session.query(Resume).filter(Resume.user_id == "u1").count() == 0


def test_new_resume_gets_next_version(client, db_session):
    seed_user(db_session)
    for version in (1, 2, 3):
        db_session.add(Resume(user_id="u1", title="Old", status="paid", version=version))
    db_session.commit()

    payload = checkout_completed({"userId": "u1", "resumeId": "new-resume"}, session_id="cs_new_1")
    assert post_event(client, payload).status_code == 200

    created = db_session.query(Resume).filter(Resume.stripe_session_id == "cs_new_1").one()
    assert created.version == 4
    assert created.status == "paid"
    assert created.title == "Jane Doe Resume"
    assert created.shareable_link
    assert created.generation_status == "published"


def test_new_resume_redelivery_does_not_duplicate(client, db_session):
    seed_user(db_session)
    payload = checkout_completed({"userId": "u1"}, session_id="cs_once")

    assert post_event(client, payload).status_code == 200
    assert post_event(client, payload).status_code == 200

    assert db_session.query(Resume).filter(Resume.user_id == "u1").count() == 1


def test_resume_title_falls_back_without_name(client, db_session):
    payload = checkout_completed({"userId": "u9"}, session_id="cs_anon")
    assert post_event(client, payload).status_code == 200

    resume = db_session.query(Resume).filter(Resume.user_id == "u9").one()
    assert resume.title == "My Resume"


def test_storage_failure_keeps_entitlement(client, db_session, storage):
    seed_user(db_session)
    storage.fail = True

    payload = checkout_completed({"userId": "u1"}, session_id="cs_fail")
    response = post_event(client, payload)

    assert response.status_code == 200
    resume = db_session.query(Resume).filter(Resume.stripe_session_id == "cs_fail").one()
    assert resume.status == "paid"
    assert resume.generation_status == "render_failed"
    assert resume.pdf_url is None


def test_missing_user_id_is_acknowledged(client, db_session):
    payload = checkout_completed({"product_type": "roadmap_access"})
    response = post_event(client, payload)

    assert response.status_code == 200
    assert db_session.query(UserPayment).count() == 0
    assert db_session.query(Resume).count() == 0


def test_unknown_event_type_acknowledged(client, db_session):
    payload = stripe_event("payment_intent.created", {"id": "pi_1", "metadata": {"userId": "u1"}})
    response = post_event(client, payload)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert db_session.query(UserPayment).count() == 0


def test_verified_payload_that_is_not_an_event_fails(client):
    payload = json.dumps({"id": "evt_broken"})
    response = post_event(client, payload)

    assert response.status_code == 500
    assert response.json() == {"error": "Webhook handler failed"}


def test_subscription_created_creates_first_resume(client, db_session):
    seed_user(db_session, "u3", "Sam Lee")
    payload = stripe_event("customer.subscription.created", {
        "id": "sub_1",
        "object": "subscription",
        "customer": "cus_3",
        "status": "active",
        "current_period_start": 1760000000,
        "current_period_end": 1762600000,
        "cancel_at_period_end": False,
        "metadata": {"userId": "u3"},
    })

    assert post_event(client, payload).status_code == 200

    sub = db_session.query(Subscription).filter(Subscription.stripe_subscription_id == "sub_1").one()
    assert sub.user_id == "u3"
    assert sub.status == "active"
    assert sub.current_period_end is not None
    resumes = db_session.query(Resume).filter(Resume.user_id == "u3").all()
    assert len(resumes) == 1
    assert resumes[0].title == "Sam Lee Resume"


def test_subscription_deleted_marks_canceled(client, db_session):
    seed_user(db_session, "u3")
    db_session.add(Subscription(user_id="u3", stripe_subscription_id="sub_2", status="active"))
    db_session.commit()

    payload = stripe_event("customer.subscription.deleted", {"id": "sub_2", "object": "subscription", "status": "canceled"})
    assert post_event(client, payload).status_code == 200

    db_session.expire_all()
    sub = db_session.query(Subscription).filter(Subscription.stripe_subscription_id == "sub_2").one()
    assert sub.status == "canceled"
