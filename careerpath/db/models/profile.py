"""
Builder wizard content used to render the resume document.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from careerpath.db.base import Base, generate_uuid


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)

    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    headline = Column(String, nullable=True)
    about_text = Column(Text, nullable=True)
    high_school = Column(String, nullable=True)
    graduation_year = Column(String, nullable=True)
    skills = Column(JSON, nullable=True, default=list)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="profile")


class Experience(Base):
    __tablename__ = "experiences"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    type = Column(String, nullable=False, default="job")  # job | volunteer | club | internship
    title = Column(String, nullable=False)
    organization = Column(String, nullable=False)
    description = Column(Text, nullable=True)  # one bullet per line
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)  # None means "Present"

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="experiences")


class Certification(Base):
    __tablename__ = "certifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    issuer = Column(String, nullable=True)
    date_issued = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="certifications")
