"""
Billing service: entitlement updates driven by Stripe webhook events.

Handles checkout completion (roadmap access and resume purchases),
subscription lifecycle events, checkout creation and entitlement reads.
"""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

import stripe
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from careerpath.core.logging_config import format_context
from careerpath.db.base import generate_uuid, utcnow
from careerpath.db.models.resume import Resume, GENERATION_PENDING
from careerpath.db.models.subscription import Subscription
from careerpath.db.models.user import User
from careerpath.db.models.user_payment import UserPayment
from careerpath.schemas.billing import PaymentStatusResponse, SubscriptionStatusResponse
from careerpath.schemas.stripe_event import (
    StripeEvent,
    StripeEventType,
    CheckoutSession,
    SubscriptionObject,
    InvoiceObject,
)
from careerpath.services import stripe_service
from careerpath.services.fulfillment_service import fulfill_resume
from careerpath.services.storage import StorageBackend
from careerpath.services.user_service import ensure_user

logger = logging.getLogger(__name__)

NEW_RESUME_SENTINEL = "new-resume"
RESUME_VERSION_RETRIES = 3
ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")

EventHandler = Callable[[Dict[str, Any], Session, StorageBackend], None]


class ResumeVersionConflict(Exception):
    """Raised when a unique resume version could not be allocated."""


# ============================================
# ✅ ROADMAP ACCESS
# ============================================

def _upsert_insert(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


def upsert_user_payment(
    db: Session,
    user_id: str,
    amount_total: Optional[int],
    payment_intent_id: Optional[str],
) -> None:
    """
    Record a one-time roadmap payment. One row per user; re-delivery overwrites it.

    Args:
        amount_total: Amount in the smallest currency unit (cents)
    """
    ensure_user(db, user_id)
    now = utcnow()
    amount = Decimal(amount_total) / 100 if amount_total is not None else None
    changes = {
        "has_paid": True,
        "payment_amount": amount,
        "stripe_payment_intent_id": payment_intent_id,
        "paid_at": now,
        "updated_at": now,
    }

    insert = _upsert_insert(db)
    if insert is not None:
        stmt = insert(UserPayment).values(id=generate_uuid(), user_id=user_id, created_at=now, **changes)
        stmt = stmt.on_conflict_do_update(index_elements=[UserPayment.user_id], set_=changes)
        db.execute(stmt)
    else:
        payment = db.query(UserPayment).filter(UserPayment.user_id == user_id).first()
        if not payment:
            payment = UserPayment(user_id=user_id)
            db.add(payment)
        for key, value in changes.items():
            setattr(payment, key, value)
    db.commit()

    logger.info(f"Roadmap access granted: {format_context(user_id=user_id, amount=amount, payment_intent=payment_intent_id)}")


# ============================================
# ✅ RESUME PURCHASE
# ============================================

def resume_title_for(db: Session, user_id: str) -> str:
    """`"{full_name} Resume"`, or `"My Resume"` when the name is unavailable."""
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Could not load user name for resume title: user_id={user_id}, error={e}")
        return "My Resume"
    name = user.full_name if user and user.full_name else "My"
    return f"{name} Resume"


def next_resume_version(db: Session, user_id: str) -> int:
    current = db.query(func.max(Resume.version)).filter(Resume.user_id == user_id).scalar()
    return (current or 0) + 1


def mark_resume_paid(db: Session, user_id: str, resume_id: str, session_id: str) -> Optional[Resume]:
    """Unlock an existing resume. Only a resume owned by `user_id` matches."""
    resume = db.query(Resume).filter(
        Resume.id == resume_id,
        Resume.user_id == user_id
    ).first()
    if not resume:
        return None

    resume.status = "paid"
    resume.stripe_session_id = session_id
    db.commit()
    db.refresh(resume)
    logger.info(f"Resume marked paid: {format_context(user_id=user_id, resume_id=resume_id, session_id=session_id)}")
    return resume


def create_paid_resume(db: Session, user_id: str, session_id: Optional[str], title: str) -> Resume:
    """
    Insert a new paid resume with the next version number.

    A resume already carrying `session_id` is returned as-is so that webhook
    re-delivery does not create duplicates.

    Raises:
        ResumeVersionConflict: If every attempt collided on (user_id, version)
    """
    if session_id:
        existing = db.query(Resume).filter(
            Resume.user_id == user_id,
            Resume.stripe_session_id == session_id
        ).first()
        if existing:
            logger.info(f"Resume already exists for session: {format_context(user_id=user_id, resume_id=existing.id, session_id=session_id)}")
            return existing

    ensure_user(db, user_id)
    for attempt in range(1, RESUME_VERSION_RETRIES + 1):
        version = next_resume_version(db, user_id)
        resume = Resume(
            user_id=user_id,
            title=title,
            status="paid",
            shareable_link=str(uuid.uuid4()),
            stripe_session_id=session_id,
            version=version,
            generation_status=GENERATION_PENDING,
        )
        db.add(resume)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Resume version collision, retrying: user_id={user_id}, version={version}, attempt={attempt}")
            continue

        db.refresh(resume)
        logger.info(f"Resume created: {format_context(user_id=user_id, resume_id=resume.id, version=version, session_id=session_id)}")
        return resume

    raise ResumeVersionConflict(f"Could not allocate a resume version for user_id={user_id}")


def handle_checkout_session_completed(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    """
    Handle checkout.session.completed.

    Roadmap purchases upsert the user's payment row. Resume purchases unlock
    or create a resume and then run the deliverable pipeline; pipeline
    failures never undo the committed entitlement.
    """
    session = CheckoutSession.model_validate(data_object)
    user_id = session.metadata.user_id

    if not user_id:
        logger.error(f"No userId in checkout session metadata: session_id={session.id}")
        return

    if session.metadata.product_type == stripe_service.ROADMAP_PRODUCT_TYPE:
        upsert_user_payment(db, user_id, session.amount_total, session.payment_intent)
        return

    title = resume_title_for(db, user_id)
    resume_id = session.metadata.resume_id

    if resume_id and resume_id != NEW_RESUME_SENTINEL:
        resume = mark_resume_paid(db, user_id, resume_id, session.id)
        if not resume:
            logger.error(f"Resume not found for payment: {format_context(user_id=user_id, resume_id=resume_id, session_id=session.id)}")
            return
    else:
        resume = create_paid_resume(db, user_id, session.id, title)

    fulfill_resume(db, storage, resume)


def handle_checkout_session_expired(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    logger.info(f"Checkout session expired: session_id={data_object.get('id')}")


# ============================================
# ✅ SUBSCRIPTIONS
# ============================================

def _timestamp(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _resolve_subscription_user(subscription: SubscriptionObject) -> Optional[str]:
    if subscription.metadata.user_id:
        return subscription.metadata.user_id
    if not subscription.customer:
        return None
    try:
        return stripe_service.retrieve_customer_user_id(subscription.customer)
    except stripe.StripeError as e:
        logger.warning(f"Could not retrieve Stripe customer: customer_id={subscription.customer}, error={e}")
        return None


def upsert_subscription(db: Session, user_id: str, subscription: SubscriptionObject) -> Subscription:
    """Insert or update the row keyed by `stripe_subscription_id`."""
    ensure_user(db, user_id)

    record = db.query(Subscription).filter(
        Subscription.stripe_subscription_id == subscription.id
    ).first()
    if not record:
        record = Subscription(user_id=user_id, stripe_subscription_id=subscription.id)
        db.add(record)

    period_start, period_end = subscription.period_bounds()
    record.user_id = user_id
    record.stripe_customer_id = subscription.customer
    record.status = subscription.status
    record.current_period_start = _timestamp(period_start)
    record.current_period_end = _timestamp(period_end)
    record.cancel_at_period_end = subscription.cancel_at_period_end
    db.commit()
    db.refresh(record)
    return record


def _handle_subscription_change(data_object: Dict[str, Any], db: Session, storage: StorageBackend, created: bool) -> None:
    subscription = SubscriptionObject.model_validate(data_object)
    user_id = _resolve_subscription_user(subscription)
    if not user_id:
        logger.error(f"No userId for subscription: subscription_id={subscription.id}, customer_id={subscription.customer}")
        return

    upsert_subscription(db, user_id, subscription)
    logger.info(f"Subscription {'created' if created else 'updated'}: user_id={user_id}, status={subscription.status}, subscription_id={subscription.id}")

    if created and subscription.status in ACTIVE_SUBSCRIPTION_STATUSES:
        has_resume = db.query(Resume.id).filter(Resume.user_id == user_id).first()
        if not has_resume:
            resume = create_paid_resume(db, user_id, None, resume_title_for(db, user_id))
            fulfill_resume(db, storage, resume)


def handle_subscription_created(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    _handle_subscription_change(data_object, db, storage, created=True)


def handle_subscription_updated(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    _handle_subscription_change(data_object, db, storage, created=False)


def handle_subscription_deleted(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    """Mark the subscription canceled. The row is kept for history."""
    subscription_id = data_object.get("id")
    record = db.query(Subscription).filter(
        Subscription.stripe_subscription_id == subscription_id
    ).first()
    if not record:
        logger.warning(f"customer.subscription.deleted: Subscription not found for subscription_id={subscription_id}")
        return

    record.status = "canceled"
    db.commit()
    logger.info(f"Subscription canceled: user_id={record.user_id}, subscription_id={subscription_id}")


def handle_invoice_payment_succeeded(data_object: Dict[str, Any], db: Session, storage: StorageBackend) -> None:
    # Renewals are tracked by Stripe; subscription rows follow customer.subscription.updated
    invoice = InvoiceObject.model_validate(data_object)
    logger.info(f"Invoice payment succeeded: invoice_id={invoice.id}, subscription_id={invoice.subscription}, amount_paid={invoice.amount_paid}")


# ============================================
# ✅ EVENT DISPATCH
# ============================================

EVENT_HANDLERS: Dict[StripeEventType, EventHandler] = {
    StripeEventType.CHECKOUT_SESSION_COMPLETED: handle_checkout_session_completed,
    StripeEventType.CHECKOUT_SESSION_EXPIRED: handle_checkout_session_expired,
    StripeEventType.SUBSCRIPTION_CREATED: handle_subscription_created,
    StripeEventType.SUBSCRIPTION_UPDATED: handle_subscription_updated,
    StripeEventType.SUBSCRIPTION_DELETED: handle_subscription_deleted,
    StripeEventType.INVOICE_PAYMENT_SUCCEEDED: handle_invoice_payment_succeeded,
}


def process_event(event: StripeEvent, db: Session, storage: StorageBackend) -> None:
    """
    Dispatch a verified event to its handler.

    Unknown types are logged and ignored. A failing handler is logged and
    rolled back; the event is still considered delivered.
    """
    event_type = StripeEventType.lookup(event.type)
    handler = EVENT_HANDLERS.get(event_type) if event_type else None
    if handler is None:
        logger.info(f"Unhandled event type: type={event.type}, event_id={event.id}")
        return

    try:
        handler(event.data.object, db, storage)
    except Exception as e:
        db.rollback()
        logger.error(f"Webhook handler failed: type={event.type}, event_id={event.id}, error={e}", exc_info=True)


# ============================================
# ✅ CHECKOUT + ENTITLEMENT READS
# ============================================

def _user_email(db: Session, user_id: str) -> Optional[str]:
    user = db.query(User).filter(User.id == user_id).first()
    return user.email if user else None


def create_resume_checkout(
    db: Session,
    user_id: str,
    resume_id: Optional[str] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> stripe.checkout.Session:
    """
    Raises:
        LookupError: If `resume_id` names a resume the user does not own
    """
    if resume_id and resume_id != NEW_RESUME_SENTINEL:
        owned = db.query(Resume.id).filter(Resume.id == resume_id, Resume.user_id == user_id).first()
        if not owned:
            raise LookupError("Resume not found")
    return stripe_service.create_resume_checkout_session(
        user_id, _user_email(db, user_id), resume_id, success_url, cancel_url
    )


def create_roadmap_checkout(
    db: Session,
    user_id: str,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> stripe.checkout.Session:
    """
    Raises:
        ValueError: If the user already has roadmap access
    """
    payment = db.query(UserPayment).filter(UserPayment.user_id == user_id).first()
    if payment and payment.has_paid:
        raise ValueError("Roadmap access already purchased")
    return stripe_service.create_roadmap_checkout_session(
        user_id, _user_email(db, user_id), success_url, cancel_url
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_payment_status(db: Session, user_id: str) -> PaymentStatusResponse:
    payment = db.query(UserPayment).filter(UserPayment.user_id == user_id).first()
    if not payment:
        return PaymentStatusResponse(has_paid=False)
    paid_at = _as_utc(payment.paid_at)
    return PaymentStatusResponse(
        has_paid=bool(payment.has_paid),
        paid_at=paid_at.isoformat() if paid_at else None,
        amount=float(payment.payment_amount) if payment.payment_amount is not None else None,
    )


def get_subscription_status(db: Session, user_id: str) -> SubscriptionStatusResponse:
    record = db.query(Subscription).filter(
        Subscription.user_id == user_id
    ).order_by(Subscription.updated_at.desc()).first()
    if not record:
        return SubscriptionStatusResponse()

    period_end = _as_utc(record.current_period_end)
    active = (
        record.status == "active"
        and period_end is not None
        and period_end > utcnow()
        and not record.cancel_at_period_end
    )
    return SubscriptionStatusResponse(
        has_active_subscription=active,
        status=record.status,
        current_period_end=period_end.isoformat() if period_end else None,
        cancel_at_period_end=bool(record.cancel_at_period_end),
    )
