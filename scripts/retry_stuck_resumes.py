"""
Re-run PDF generation for paid resumes that never got a PDF.
Run: python -m scripts.retry_stuck_resumes [--user-id USER_ID] [--limit N]
"""
import argparse
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from careerpath.db.session import SessionLocal
from careerpath.db.models.resume import Resume, GENERATION_RENDERING
from careerpath.main import build_storage
from careerpath.services.fulfillment_service import fulfill_resume
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_stuck_resumes(db, user_id=None, limit=100, include_rendering=False):
    """Paid resumes without a PDF, oldest first."""
    query = db.query(Resume).filter(
        Resume.status == "paid",
        Resume.pdf_url.is_(None)
    )
    if not include_rendering:
        # A resume in "rendering" may belong to a request still in flight
        query = query.filter(Resume.generation_status != GENERATION_RENDERING)
    if user_id:
        query = query.filter(Resume.user_id == user_id)
    return query.order_by(Resume.created_at.asc()).limit(limit).all()


def retry_stuck_resumes(user_id=None, limit=100, include_rendering=False):
    """Returns (published, failed) counts."""
    db = SessionLocal()
    storage = build_storage()
    published = failed = 0
    try:
        resumes = find_stuck_resumes(db, user_id, limit, include_rendering)
        logger.info(f"Found {len(resumes)} paid resumes without a PDF")

        for resume in resumes:
            url = fulfill_resume(db, storage, resume)
            if url:
                published += 1
            else:
                failed += 1
        return published, failed
    finally:
        storage.close()
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--user-id", help="Only retry resumes owned by this user")
    parser.add_argument("--limit", type=int, default=100)
    parser.add_argument("--include-rendering", action="store_true",
                        help="Also retry resumes left in 'rendering' by a crashed worker")
    args = parser.parse_args()

    published, failed = retry_stuck_resumes(args.user_id, args.limit, args.include_rendering)

    print(f"\n[DONE] published={published} failed={failed}")
    if failed:
        sys.exit(1)
