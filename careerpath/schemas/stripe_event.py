"""
Pydantic models for the subset of Stripe webhook payloads the pipeline reads.

Events are parsed only after the signature has been verified.
"""
from enum import Enum
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, AliasChoices


class StripeEventType(str, Enum):
    """Event types with a registered handler. Anything else is logged and acknowledged."""
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"

    @classmethod
    def lookup(cls, value: str) -> Optional["StripeEventType"]:
        try:
            return cls(value)
        except ValueError:
            return None


class StripeEventData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    object: Dict[str, Any] = Field(default_factory=dict)


class StripeEvent(BaseModel):
    """Envelope of a verified webhook delivery."""
    model_config = ConfigDict(extra="ignore")

    id: str
    type: str
    data: StripeEventData


class CheckoutMetadata(BaseModel):
    # Older checkout code wrote snake_case keys; both spellings resolve.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    product_type: Optional[str] = None
    resume_id: Optional[str] = Field(None, validation_alias=AliasChoices("resumeId", "resume_id"))


class CheckoutSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    customer: Optional[str] = None
    customer_email: Optional[str] = None
    amount_total: Optional[int] = None
    payment_intent: Optional[str] = None
    mode: Optional[str] = None
    subscription: Optional[str] = None
    metadata: CheckoutMetadata = Field(default_factory=CheckoutMetadata)


class SubscriptionObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    customer: Optional[str] = None
    status: Optional[str] = None
    current_period_start: Optional[int] = None
    current_period_end: Optional[int] = None
    cancel_at_period_end: bool = False
    metadata: CheckoutMetadata = Field(default_factory=CheckoutMetadata)
    items: Optional[Dict[str, Any]] = None

    def period_bounds(self) -> tuple:
        """
        Billing period as unix timestamps.

        Recent Stripe API versions moved the period onto the subscription items,
        so fall back to the first item when the top-level fields are absent.
        """
        start, end = self.current_period_start, self.current_period_end
        if start is None or end is None:
            data: List[Dict[str, Any]] = (self.items or {}).get("data") or []
            if data:
                start = start if start is not None else data[0].get("current_period_start")
                end = end if end is not None else data[0].get("current_period_end")
        return start, end


class InvoiceObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    customer: Optional[str] = None
    subscription: Optional[str] = None
    amount_paid: Optional[int] = None
