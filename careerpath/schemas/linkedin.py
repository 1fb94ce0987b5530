"""
Pydantic schemas for LinkedIn profile content.
"""
from typing import Optional, List
from pydantic import Field

from careerpath.schemas.roadmap import CamelModel


class LinkedInExperience(CamelModel):
    title: str = ""
    organization: str = ""
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class LinkedInContent(CamelModel):
    """Profile content set as returned by the LLM and stored on the resume."""
    headline: str = ""
    about: str = ""
    experiences: List[LinkedInExperience] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    copyable_text: str = ""


class GenerateLinkedInProfileRequest(CamelModel):
    headline: Optional[str] = None
    about_text: Optional[str] = None
    experiences: List[LinkedInExperience] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)


class SaveLinkedInContentRequest(CamelModel):
    linkedin_content: LinkedInContent = Field(alias="linkedInContent")


class LinkedInContentResponse(CamelModel):
    resume_id: str
    linkedin_content: Optional[LinkedInContent] = Field(default=None, alias="linkedInContent")
