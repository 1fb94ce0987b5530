"""
Resume endpoints: list purchased resumes and re-run PDF generation.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from careerpath.api.deps import get_db, get_storage
from careerpath.core.auth_dependency import get_current_user_id
from careerpath.db.models.resume import Resume
from careerpath.schemas.resume import ResumeResponse, ResumeListResponse, RegeneratePdfResponse
from careerpath.services.fulfillment_service import fulfill_resume
from careerpath.services.storage import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resumes", tags=["Resumes"])


@router.get("", response_model=ResumeListResponse)
def list_resumes(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the current user's resumes, newest version first."""
    resumes = db.query(Resume).filter(
        Resume.user_id == user_id
    ).order_by(Resume.version.desc()).all()

    return ResumeListResponse(
        resumes=[ResumeResponse(
            id=r.id,
            title=r.title,
            status=r.status,
            version=r.version,
            shareable_link=r.shareable_link,
            pdf_url=r.pdf_url,
            generation_status=r.generation_status,
            created_at=r.created_at.isoformat() if r.created_at else None,
        ) for r in resumes],
        total=len(resumes)
    )


@router.post("/{resume_id}/regenerate-pdf", response_model=RegeneratePdfResponse)
def regenerate_pdf(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """Re-render and re-publish the PDF of a paid resume."""
    resume = db.query(Resume).filter(
        Resume.id == resume_id,
        Resume.user_id == user_id
    ).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    if resume.status != "paid":
        raise HTTPException(status_code=400, detail="Resume has not been purchased")

    logger.info(f"PDF regeneration requested: user_id={user_id}, resume_id={resume_id}")
    fulfill_resume(db, storage, resume, force=True)

    return RegeneratePdfResponse(
        resume_id=resume.id,
        generation_status=resume.generation_status,
        pdf_url=resume.pdf_url,
    )
