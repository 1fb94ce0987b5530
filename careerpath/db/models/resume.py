"""
Resume model: the purchasable document deliverable.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from careerpath.db.base import Base, generate_uuid

RESUME_STATUSES = ("draft", "locked", "paid")

# pending -> rendering -> published | render_failed
GENERATION_PENDING = "pending"
GENERATION_RENDERING = "rendering"
GENERATION_PUBLISHED = "published"
GENERATION_FAILED = "render_failed"


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")  # draft | locked | paid
    shareable_link = Column(String(36), nullable=True, unique=True)
    stripe_session_id = Column(String, nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    # Deliverable state; pdf_url stays null until generation_status == "published"
    pdf_url = Column(String, nullable=True)
    generation_status = Column(String, nullable=False, default=GENERATION_PENDING)

    # LinkedIn profile content set generated from this resume
    linkedin_content = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", backref="resumes")

    __table_args__ = (
        UniqueConstraint("user_id", "version", name="uq_resumes_user_version"),
        Index("idx_resumes_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<Resume(id={self.id}, user_id={self.user_id}, version={self.version}, status='{self.status}')>"
