"""
Pydantic schemas for resume endpoints.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResumeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    status: str
    version: int
    shareable_link: Optional[str] = None
    pdf_url: Optional[str] = None
    generation_status: str
    created_at: Optional[str] = None


class ResumeListResponse(BaseModel):
    resumes: List[ResumeResponse]
    total: int


class RegeneratePdfResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    resume_id: str
    generation_status: str
    pdf_url: Optional[str] = None
