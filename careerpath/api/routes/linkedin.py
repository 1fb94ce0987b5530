"""
LinkedIn profile endpoints: AI generation and per-resume storage.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from careerpath.api.deps import get_db, get_llm_provider
from careerpath.core.auth_dependency import get_current_user_id
from careerpath.llm.provider import LLMProvider
from careerpath.schemas.linkedin import (
    GenerateLinkedInProfileRequest,
    LinkedInContent,
    LinkedInContentResponse,
    SaveLinkedInContentRequest,
)
from careerpath.services import linkedin_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["LinkedIn"])


@router.post("/ai/generate-linkedin-profile", response_model=LinkedInContent)
def generate_linkedin_profile(
    request: GenerateLinkedInProfileRequest = Body(...),
    user_id: str = Depends(get_current_user_id),
    llm: Optional[LLMProvider] = Depends(get_llm_provider),
):
    """Generate headline, about, experience bullets and skills for a profile."""
    if llm is None:
        return JSONResponse(status_code=500, content={"error": "OpenAI API key not configured"})

    try:
        return linkedin_service.generate_linkedin_content(llm, request)
    except Exception as e:
        logger.error(f"LinkedIn profile generation error: user_id={user_id}, error={e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e) or "Failed to generate LinkedIn profile content"})


@router.get("/resumes/{resume_id}/linkedin", response_model=LinkedInContentResponse)
def get_resume_linkedin(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    resume = linkedin_service.get_linkedin_content(db, user_id, resume_id)
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return LinkedInContentResponse(resume_id=resume.id, linkedin_content=resume.linkedin_content)


@router.post("/resumes/{resume_id}/linkedin", response_model=LinkedInContentResponse)
def save_resume_linkedin(
    resume_id: str,
    request: SaveLinkedInContentRequest = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Store a (possibly edited) content set on the user's resume."""
    resume = linkedin_service.save_linkedin_content(db, user_id, resume_id, request.linkedin_content)
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return LinkedInContentResponse(resume_id=resume.id, linkedin_content=resume.linkedin_content)
