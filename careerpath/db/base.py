import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: Models are imported in careerpath.db.models to avoid circular imports
# All models must import Base from this module


def generate_uuid() -> str:
    """Primary keys are UUID strings, matching the identity provider's user ids."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
