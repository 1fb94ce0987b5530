"""
Billing endpoints: checkout creation and entitlement reads.
"""
import logging
from typing import Optional
import stripe
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from careerpath.api.deps import get_db
from careerpath.core.auth_dependency import get_current_user_id
from careerpath.schemas.billing import (
    CreateCheckoutRequest,
    CreateRoadmapCheckoutRequest,
    CheckoutSessionResponse,
    PaymentStatusResponse,
    SubscriptionStatusResponse,
)
from careerpath.services import billing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.post("/create-checkout", response_model=CheckoutSessionResponse)
def create_checkout(
    request: Optional[CreateCheckoutRequest] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Start a one-time resume purchase."""
    request = request or CreateCheckoutRequest()
    try:
        session = billing_service.create_resume_checkout(
            db, user_id, request.resume_id, request.success_url, request.cancel_url
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        logger.error(f"Checkout unavailable: user_id={user_id}, error={e}")
        raise HTTPException(status_code=400, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Stripe error creating resume checkout: user_id={user_id}, error={e}")
        raise HTTPException(status_code=502, detail="Payment provider unavailable, please try again")

    return CheckoutSessionResponse(session_id=session.id, url=session.url)


@router.post("/create-roadmap-checkout", response_model=CheckoutSessionResponse)
def create_roadmap_checkout(
    request: Optional[CreateRoadmapCheckoutRequest] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Start the roadmap access purchase. Refused when access was already bought."""
    request = request or CreateRoadmapCheckoutRequest()
    try:
        session = billing_service.create_roadmap_checkout(
            db, user_id, request.success_url, request.cancel_url
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Stripe error creating roadmap checkout: user_id={user_id}, error={e}")
        raise HTTPException(status_code=502, detail="Payment provider unavailable, please try again")

    return CheckoutSessionResponse(session_id=session.id, url=session.url)


@router.get("/payment-status", response_model=PaymentStatusResponse)
def payment_status(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return billing_service.get_payment_status(db, user_id)


@router.get("/subscription", response_model=SubscriptionStatusResponse)
def subscription_status(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return billing_service.get_subscription_status(db, user_id)
