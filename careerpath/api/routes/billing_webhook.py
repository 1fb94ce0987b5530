"""
Stripe webhook endpoint: verify, then hand the event to the billing service.
"""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from careerpath.api.deps import get_db, get_storage
from careerpath.services import billing_service, stripe_service
from careerpath.services.storage import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Billing Webhook"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Receive Stripe events.

    The raw body is verified before anything is parsed or written. Verified
    events are always acknowledged, even when a handler fails, so Stripe does
    not retry work that already committed.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    if not signature:
        logger.error(f"No Stripe signature found: has_body={bool(payload)}, body_length={len(payload)}")
        return JSONResponse(status_code=400, content={"error": "Missing signature"})

    try:
        stripe_service.verify_webhook(payload, signature)
    except ValueError as e:
        logger.error(
            f"Webhook rejected: error={e}, has_body={bool(payload)}, body_length={len(payload)}, "
            f"webhook_secret_set={bool(stripe_service.STRIPE_WEBHOOK_SECRET)}"
        )
        return JSONResponse(status_code=400, content={"error": "Invalid signature"})

    try:
        event = stripe_service.parse_event(payload)
        await run_in_threadpool(billing_service.process_event, event, db, storage)
    except Exception as e:
        logger.error(f"Webhook handler failed: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Webhook handler failed"})

    return {"received": True}
