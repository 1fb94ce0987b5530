"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from careerpath.db.models.user import User
from careerpath.db.models.profile import Profile, Experience, Certification
from careerpath.db.models.resume import Resume
from careerpath.db.models.user_payment import UserPayment
from careerpath.db.models.subscription import Subscription
from careerpath.db.models.career_roadmap import CareerRoadmap

# Explicitly export all models for clarity
__all__ = [
    "User",
    "Profile",
    "Experience",
    "Certification",
    "Resume",
    "UserPayment",
    "Subscription",
    "CareerRoadmap",
]
