"""
Stripe service for checkout sessions and webhook verification.
"""
import json
import logging
from typing import Optional
import stripe
from careerpath.core.config import (
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    RESUME_PRICE_CENTS,
    ROADMAP_PRICE_CENTS,
    CURRENCY,
    FRONTEND_URL
)
from careerpath.schemas.stripe_event import StripeEvent

logger = logging.getLogger(__name__)

ROADMAP_PRODUCT_TYPE = "roadmap_access"

# Initialize Stripe client
if STRIPE_SECRET_KEY:
    stripe.api_key = STRIPE_SECRET_KEY
else:
    logger.warning("STRIPE_SECRET_KEY not configured - Stripe features disabled")


def _require_secret_key():
    if not STRIPE_SECRET_KEY:
        raise ValueError("Stripe not configured - STRIPE_SECRET_KEY required")


def create_resume_checkout_session(
    user_id: str,
    user_email: Optional[str],
    resume_id: Optional[str] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None
) -> stripe.checkout.Session:
    """
    Create a one-time Checkout session for a resume purchase.

    Args:
        user_id: Identity provider user id, stored as `userId` metadata
        user_email: Prefills the Checkout email field
        resume_id: Existing resume to unlock; omitted or "new-resume" creates one
        success_url: Redirect after payment (defaults to FRONTEND_URL/dashboard?payment=success)
        cancel_url: Redirect on cancel (defaults to FRONTEND_URL/builder?payment=cancelled)

    Raises:
        ValueError: If Stripe is not configured
        stripe.StripeError: If Stripe rejects the request
    """
    _require_secret_key()

    metadata = {"userId": user_id}
    if resume_id:
        metadata["resumeId"] = resume_id

    session = stripe.checkout.Session.create(
        customer_email=user_email,
        payment_method_types=["card"],
        mode="payment",
        line_items=[{
            "price_data": {
                "currency": CURRENCY,
                "product_data": {
                    "name": "Professional Resume",
                    "description": "Download-ready PDF resume",
                },
                "unit_amount": RESUME_PRICE_CENTS,
            },
            "quantity": 1,
        }],
        success_url=success_url or f"{FRONTEND_URL}/dashboard?payment=success&session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=cancel_url or f"{FRONTEND_URL}/builder?payment=cancelled",
        metadata=metadata,
    )

    logger.info(f"Created resume checkout session: user_id={user_id}, resume_id={resume_id}, session_id={session.id}")
    return session


def create_roadmap_checkout_session(
    user_id: str,
    user_email: Optional[str],
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None
) -> stripe.checkout.Session:
    """Create a one-time Checkout session unlocking career roadmaps."""
    _require_secret_key()

    session = stripe.checkout.Session.create(
        customer_email=user_email,
        payment_method_types=["card"],
        mode="payment",
        line_items=[{
            "price_data": {
                "currency": CURRENCY,
                "product_data": {
                    "name": "Career Roadmap Access",
                    "description": "Unlimited AI-generated career roadmaps",
                },
                "unit_amount": ROADMAP_PRICE_CENTS,
            },
            "quantity": 1,
        }],
        success_url=success_url or f"{FRONTEND_URL}/roadmap?payment=success",
        cancel_url=cancel_url or f"{FRONTEND_URL}/roadmap?payment=cancelled",
        metadata={
            "userId": user_id,
            "product_type": ROADMAP_PRODUCT_TYPE,
        },
    )

    logger.info(f"Created roadmap checkout session: user_id={user_id}, session_id={session.id}")
    return session


def retrieve_customer_user_id(customer_id: str) -> Optional[str]:
    """User id stored in a Stripe customer's metadata, if any."""
    customer = stripe.Customer.retrieve(customer_id)
    metadata = customer.get("metadata") or {}
    return metadata.get("userId") or metadata.get("user_id")


def verify_webhook(request_body: bytes, signature: str) -> None:
    """
    Verify a Stripe webhook signature against the raw request body.

    Args:
        request_body: Raw request body bytes, exactly as received
        signature: Stripe-Signature header value

    Raises:
        ValueError: If the secret is unset, the payload is malformed or the
            signature does not match
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise ValueError("STRIPE_WEBHOOK_SECRET not configured")

    try:
        stripe.Webhook.construct_event(request_body, signature, STRIPE_WEBHOOK_SECRET)
    except ValueError as e:
        logger.error(f"Invalid webhook payload: {e}")
        raise ValueError(f"Invalid webhook payload: {e}")
    except stripe.SignatureVerificationError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise ValueError(f"Invalid signature: {e}")


def parse_event(request_body: bytes) -> StripeEvent:
    """Parse an already verified payload into the event envelope."""
    event = StripeEvent.model_validate(json.loads(request_body))
    logger.info(f"Verified webhook event: type={event.type}, id={event.id}")
    return event
