from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from careerpath.db.base import Base, generate_uuid


class User(Base):
    __tablename__ = "users"

    # Mirrors the identity provider's user id
    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=True)
    full_name = Column(String, nullable=True)
    linkedin_link = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
