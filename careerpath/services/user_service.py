"""
Local mirror of identity provider users.
"""
import logging

from sqlalchemy.orm import Session

from careerpath.db.models.user import User

logger = logging.getLogger(__name__)


def ensure_user(db: Session, user_id: str) -> None:
    """Insert a placeholder row for a user that has not been synced yet."""
    if not db.query(User.id).filter(User.id == user_id).first():
        db.add(User(id=user_id))
        db.commit()
        logger.info(f"Created placeholder user row: user_id={user_id}")
