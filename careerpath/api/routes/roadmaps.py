"""
Career roadmap endpoints: AI generation and reads.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from careerpath.api.deps import get_db, get_llm_provider, get_storage
from careerpath.core.auth_dependency import get_current_user_id
from careerpath.db.models.career_roadmap import CareerRoadmap
from careerpath.llm.provider import LLMProvider
from careerpath.schemas.roadmap import GenerateRoadmapRequest, GenerateRoadmapResponse, CareerRoadmapResponse
from careerpath.services import roadmap_service
from careerpath.services.storage import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Roadmaps"])


def _to_response(record: CareerRoadmap) -> dict:
    return CareerRoadmapResponse(
        id=record.id,
        career_name=record.career_name,
        roadmap_data=record.roadmap_data,
        infographic_url=record.infographic_url,
        milestone_roadmap_url=record.milestone_roadmap_url,
        created_at=record.created_at.isoformat() if record.created_at else None,
    ).model_dump(by_alias=True)


@router.post("/ai/generate-roadmap", response_model=GenerateRoadmapResponse)
def generate_roadmap(
    request: GenerateRoadmapRequest = Body(...),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    llm: Optional[LLMProvider] = Depends(get_llm_provider),
):
    """Generate a roadmap document and both images, then store them."""
    if not request.career_goal or not request.user_id:
        return JSONResponse(status_code=400, content={"error": "Career goal and user ID are required"})

    if llm is None:
        return JSONResponse(status_code=500, content={"error": "OpenAI API key not configured"})

    try:
        return roadmap_service.generate_career_roadmap(
            db, storage, llm, request.user_id, request.career_goal
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Roadmap generation error: user_id={request.user_id}, error={e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e) or "Failed to generate career roadmap"})


@router.get("/roadmaps")
def list_roadmaps(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the current user's roadmaps, newest first."""
    records = db.query(CareerRoadmap).filter(
        CareerRoadmap.user_id == user_id
    ).order_by(CareerRoadmap.created_at.desc()).all()
    return {"roadmaps": [_to_response(r) for r in records], "total": len(records)}


@router.get("/roadmaps/{roadmap_id}")
def get_roadmap(
    roadmap_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    record = db.query(CareerRoadmap).filter(
        CareerRoadmap.id == roadmap_id,
        CareerRoadmap.user_id == user_id
    ).first()
    if not record:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return _to_response(record)
