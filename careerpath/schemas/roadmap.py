"""
Pydantic schemas for AI career roadmaps.

The stored roadmap document keeps the camelCase keys the LLM is asked for.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RoadmapCourse(CamelModel):
    name: str
    link: str = ""
    reason: str = ""


class RoadmapStepContent(CamelModel):
    step: int
    title: str
    description: str = ""
    hashtags: List[str] = Field(default_factory=list)


class CareerRoadmapContent(CamelModel):
    """Roadmap document as returned by the LLM and persisted in `roadmap_data`."""
    career_name: str
    key_skills: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    courses: List[RoadmapCourse] = Field(default_factory=list)
    steps: List[RoadmapStepContent] = Field(default_factory=list)
    timeline: str = ""
    starter_projects: List[str] = Field(default_factory=list)
    communities: List[str] = Field(default_factory=list)
    hashtags: List[str] = Field(default_factory=list)


class GenerateRoadmapRequest(CamelModel):
    """Request model for roadmap generation. Both fields are checked by the route."""
    career_goal: Optional[str] = Field(None, description="Target career, e.g. 'Nurse'")
    user_id: Optional[str] = Field(None, description="Identity provider user id")


class GenerateRoadmapResponse(CamelModel):
    roadmap: CareerRoadmapContent
    formatted_content: str
    infographic_url: Optional[str] = None
    milestone_roadmap_url: Optional[str] = None
    roadmap_id: str


class CareerRoadmapResponse(CamelModel):
    id: str
    career_name: str
    roadmap_data: dict
    infographic_url: Optional[str] = None
    milestone_roadmap_url: Optional[str] = None
    created_at: Optional[str] = None
