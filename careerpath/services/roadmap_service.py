"""
Career roadmap generation: LLM content, markdown rendering, images, persistence.
"""
import json
import logging
from typing import List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from careerpath.db.models.career_roadmap import CareerRoadmap
from careerpath.llm.provider import LLMProvider
from careerpath.llm.router import get_model_for_feature
from careerpath.schemas.roadmap import CareerRoadmapContent
from careerpath.services.asset_publisher import ROADMAP_ASSETS, publish_asset
from careerpath.services.roadmap_images import RoadmapStep, render_infographic, render_milestone_roadmap
from careerpath.services.storage import StorageBackend
from careerpath.services.user_service import ensure_user

logger = logging.getLogger(__name__)

ROADMAP_TEMPERATURE = 0.7
ROADMAP_MAX_TOKENS = 3000

SYSTEM_PROMPT = (
    "You are a career planning assistant. Always return valid JSON. "
    "Ensure all course links are real and accessible."
)

ROADMAP_PROMPT = """You are a career planning assistant.

The user wants to become: {career_goal}

Create a detailed career roadmap including:

1. Key skills they need to learn (list 8-12 skills)
2. Tools or software they should master (list 5-8 tools)
3. At least 5 free online courses. For each course give the name, a direct link
   (real URLs from platforms like Coursera, edX, Khan Academy, YouTube) and why it matters.
   No link may repeat.
4. A step-by-step plan of 6-10 steps. For each step give the step number, a short
   title, a detailed description and 1-3 relevant hashtags.
5. Estimated learning timeline (e.g. "6-12 months" or "1-2 years")
6. Starter projects to build experience (list 3-5 projects)
7. Communities or hashtags they could join (list 5-8)

Keep the tone confident, clear and beginner-friendly.

Return ONLY a valid JSON object with this exact structure:
{{
  "careerName": "string",
  "keySkills": ["string"],
  "tools": ["string"],
  "courses": [{{"name": "string", "link": "string", "reason": "string"}}],
  "steps": [{{"step": 1, "title": "string", "description": "string", "hashtags": ["string"]}}],
  "timeline": "string",
  "starterProjects": ["string"],
  "communities": ["string"],
  "hashtags": ["string"]
}}"""


def generate_roadmap_content(llm: LLMProvider, career_goal: str) -> CareerRoadmapContent:
    """
    Ask the LLM for a roadmap document and validate it.

    Raises:
        ValueError: If the completion is empty or not a valid roadmap document
    """
    response = llm.chat(
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": ROADMAP_PROMPT.format(career_goal=career_goal)},
        ],
        model=get_model_for_feature("career_roadmap"),
        temperature=ROADMAP_TEMPERATURE,
        max_tokens=ROADMAP_MAX_TOKENS,
        json_mode=True,
    )
    if not response.content:
        raise ValueError("No roadmap content generated")

    try:
        raw = json.loads(response.content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Roadmap response was not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError("Roadmap response was not a JSON object")

    raw.setdefault("careerName", career_goal)
    try:
        return CareerRoadmapContent.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Roadmap response did not match the expected structure: {e.error_count()} errors") from e


def _numbered(items: List[str]) -> str:
    return "".join(f"{i}. {item}\n" for i, item in enumerate(items, start=1))


def format_roadmap_content(roadmap: CareerRoadmapContent) -> str:
    """Render a roadmap document as markdown."""
    parts = [f"# {roadmap.career_name} Career Roadmap\n\n"]

    parts.append("## Key Skills to Learn\n\n")
    parts.append(_numbered(roadmap.key_skills) + "\n")

    parts.append("## Tools & Software to Master\n\n")
    parts.append(_numbered(roadmap.tools) + "\n")

    parts.append("## Recommended Free Courses\n\n")
    for i, course in enumerate(roadmap.courses, start=1):
        parts.append(f"### {i}. {course.name}\n")
        parts.append(f"**Link:** [{course.name}]({course.link})\n")
        parts.append(f"**Why it matters:** {course.reason}\n\n")

    parts.append("## Step-by-Step Plan\n\n")
    for step in roadmap.steps:
        parts.append(f"### Step {step.step}: {step.title}\n")
        parts.append(f"{step.description}\n")
        if step.hashtags:
            parts.append(f"\n**Hashtags:** {', '.join(step.hashtags)}\n")
        parts.append("\n")

    parts.append("## Estimated Timeline\n\n")
    parts.append(f"{roadmap.timeline}\n\n")

    parts.append("## Starter Projects\n\n")
    parts.append(_numbered(roadmap.starter_projects) + "\n")

    parts.append("## Communities & Hashtags\n\n")
    parts.append(_numbered(roadmap.communities))
    if roadmap.hashtags:
        parts.append(f"\n**Hashtags:** {', '.join(roadmap.hashtags)}\n")

    return "".join(parts)


def roadmap_steps(roadmap: CareerRoadmapContent) -> List[RoadmapStep]:
    return [RoadmapStep(number=s.step, title=s.title, description=s.description) for s in roadmap.steps]


def generate_career_roadmap(
    db: Session,
    storage: StorageBackend,
    llm: LLMProvider,
    user_id: str,
    career_goal: str,
) -> dict:
    """
    Full roadmap sequence: content, markdown, both images, then the stored row.

    Returns:
        Response payload with camelCase keys
    """
    logger.info(f"Generating roadmap: user_id={user_id}, career_goal={career_goal}")
    roadmap = generate_roadmap_content(llm, career_goal)
    formatted = format_roadmap_content(roadmap)
    steps = roadmap_steps(roadmap)
    ensure_user(db, user_id)

    infographic_url = publish_asset(
        storage, ROADMAP_ASSETS, render_infographic(roadmap.career_name, steps), user_id, "infographic"
    )
    milestone_url = publish_asset(
        storage, ROADMAP_ASSETS, render_milestone_roadmap(roadmap.career_name, steps), user_id, "milestone"
    )

    roadmap_data = roadmap.model_dump(by_alias=True)
    record = CareerRoadmap(
        user_id=user_id,
        career_name=roadmap.career_name,
        roadmap_data=roadmap_data,
        infographic_url=infographic_url,
        milestone_roadmap_url=milestone_url,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Roadmap saved: user_id={user_id}, roadmap_id={record.id}, steps={len(steps)}")
    return {
        "roadmap": roadmap_data,
        "formattedContent": formatted,
        "infographicUrl": infographic_url,
        "milestoneRoadmapUrl": milestone_url,
        "roadmapId": record.id,
    }
