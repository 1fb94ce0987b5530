"""
Resume deliverable pipeline: render the PDF, publish it, record the URL.

State is persisted on `resumes.generation_status`:
pending | render_failed -> rendering -> published | render_failed

A forced re-render of a published resume stays `published` with its current
`pdf_url` until the replacement is uploaded; a failed re-render keeps the
previous PDF.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from careerpath.core.logging_config import format_context
from careerpath.db.models.resume import (
    Resume,
    GENERATION_RENDERING,
    GENERATION_PUBLISHED,
    GENERATION_FAILED,
)
from careerpath.services.asset_publisher import RESUME_ASSETS, publish_asset
from careerpath.services.resume_pdf import load_resume_data, render_resume_pdf
from careerpath.services.storage import StorageBackend

logger = logging.getLogger(__name__)


def fulfill_resume(db: Session, storage: StorageBackend, resume: Resume, force: bool = False) -> Optional[str]:
    """
    Produce and publish the PDF for a paid resume.

    Safe to call repeatedly: a published resume returns its URL unless
    `force` is set. Failures are logged and never raised.

    Returns:
        The new PDF URL, or None when generation failed
    """
    context = format_context(user_id=resume.user_id, resume_id=resume.id)
    published = resume.generation_status == GENERATION_PUBLISHED and bool(resume.pdf_url)

    if published and not force:
        logger.info(f"Resume already published, skipping render: {context}")
        return resume.pdf_url

    if not published:
        resume.generation_status = GENERATION_RENDERING
        resume.pdf_url = None
        db.commit()

    try:
        data = load_resume_data(db, resume.user_id)
        pdf_bytes = render_resume_pdf(data)
        url = publish_asset(
            storage,
            RESUME_ASSETS,
            pdf_bytes,
            resume.user_id,
            "resume",
            ext="pdf",
            content_type="application/pdf",
        )
    except Exception as e:
        db.rollback()
        if published:
            logger.error(f"Resume re-render failed, keeping published PDF: {context}, error={e}", exc_info=True)
            return None
        logger.error(f"Resume generation failed: {context}, error={e}", exc_info=True)
        resume.generation_status = GENERATION_FAILED
        resume.pdf_url = None
        db.commit()
        return None

    resume.pdf_url = url
    resume.generation_status = GENERATION_PUBLISHED
    db.commit()
    logger.info(f"Resume published: {context}")
    return url
