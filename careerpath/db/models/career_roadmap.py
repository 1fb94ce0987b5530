"""
Career roadmap model: AI-generated plan plus its two rendered images.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from careerpath.db.base import Base, generate_uuid


class CareerRoadmap(Base):
    __tablename__ = "career_roadmaps"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    career_name = Column(String, nullable=False)
    roadmap_data = Column(JSON, nullable=False)  # camelCase roadmap document returned by the LLM

    infographic_url = Column(String, nullable=True)
    milestone_roadmap_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", backref="career_roadmaps")

    __table_args__ = (
        Index("idx_roadmaps_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<CareerRoadmap(id={self.id}, career_name='{self.career_name}')>"
