from sqlalchemy import Column, String, Boolean, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from careerpath.db.base import Base, generate_uuid


class UserPayment(Base):
    """One-time unlock entitlement (career roadmap access). One row per user."""
    __tablename__ = "user_payments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)

    has_paid = Column(Boolean, nullable=False, default=False)
    payment_amount = Column(Numeric(10, 2), nullable=True)
    stripe_payment_intent_id = Column(String, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
