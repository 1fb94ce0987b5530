"""
Pydantic schemas for billing endpoints.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CreateCheckoutRequest(BaseModel):
    """Request schema for the one-time resume purchase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "resumeId": "new-resume",
                "successUrl": "https://careerpath.app/dashboard?payment=success",
                "cancelUrl": "https://careerpath.app/builder?payment=cancelled"
            }
        },
    )

    resume_id: Optional[str] = Field(None, description="Resume to unlock, or 'new-resume'")
    success_url: Optional[str] = Field(None, description="URL to redirect after successful payment")
    cancel_url: Optional[str] = Field(None, description="URL to redirect if payment is canceled")


class CreateRoadmapCheckoutRequest(BaseModel):
    """Request schema for roadmap access purchase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


class CheckoutSessionResponse(BaseModel):
    """Response schema for checkout session creation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str = Field(..., description="Stripe checkout session ID")
    url: Optional[str] = Field(None, description="Stripe checkout session URL")


class PaymentStatusResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_paid: bool = False
    paid_at: Optional[str] = None
    amount: Optional[float] = None


class SubscriptionStatusResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_active_subscription: bool = False
    status: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool = False
