"""
LinkedIn profile content: LLM generation and storage on the owning resume.
"""
import json
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from careerpath.db.models.resume import Resume
from careerpath.llm.provider import LLMProvider
from careerpath.llm.router import get_model_for_feature
from careerpath.schemas.linkedin import GenerateLinkedInProfileRequest, LinkedInContent

logger = logging.getLogger(__name__)

LINKEDIN_TEMPERATURE = 0.7
LINKEDIN_MAX_TOKENS = 2000

SYSTEM_PROMPT = (
    "You are a LinkedIn profile expert helping students create professional, "
    "authentic profiles. Always return valid JSON."
)

PROFILE_PROMPT = """You are a LinkedIn profile optimization expert helping high school and college students create professional LinkedIn profiles.

Given the following resume information, generate optimized LinkedIn profile content:

HEADLINE: {headline}
ABOUT: {about}
EXPERIENCES: {experiences}
SKILLS: {skills}

Generate the following sections:

1. HEADLINE (120 characters max): professional, concise, includes key interests
   or career goals, age-appropriate for students.
2. ABOUT SECTION (300-500 words): first person, authentic, highlights
   accomplishments without exaggeration, includes future goals.
3. EXPERIENCE DESCRIPTIONS: 3-4 bullet points per experience using action verbs,
   realistic for student-level work, each bullet starting with the • symbol.
4. SKILLS SUMMARY: concise, grouped into categories where it helps.

Return ONLY a valid JSON object with this exact structure:
{{
  "headline": "string",
  "about": "string",
  "experiences": [{{"title": "string", "organization": "string", "description": "string with bullet points"}}],
  "skills": ["string"],
  "copyableText": "Complete formatted text ready to paste"
}}"""


def build_profile_prompt(request: GenerateLinkedInProfileRequest) -> str:
    experiences = ", ".join(f"{e.title} at {e.organization}" for e in request.experiences)
    return PROFILE_PROMPT.format(
        headline=request.headline or "Student",
        about=request.about_text or "High school/college student",
        experiences=experiences or "None",
        skills=", ".join(request.skills) or "None",
    )


def build_copyable_text(content: LinkedInContent) -> str:
    """Plain text version of the profile, ready to paste section by section."""
    text = f"HEADLINE:\n{content.headline}\n\nABOUT:\n{content.about}\n\n"

    if content.experiences:
        text += "EXPERIENCE:\n\n"
        for exp in content.experiences:
            text += f"{exp.title} at {exp.organization}\n"
            text += f"{exp.description or ''}\n\n"

    if content.skills:
        text += f"SKILLS:\n{' • '.join(content.skills)}\n"

    return text


def generate_linkedin_content(llm: LLMProvider, request: GenerateLinkedInProfileRequest) -> LinkedInContent:
    """
    Ask the LLM for a LinkedIn profile content set.

    Raises:
        ValueError: If the completion is empty or not a valid profile document
    """
    response = llm.chat(
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_profile_prompt(request)},
        ],
        model=get_model_for_feature("linkedin_profile"),
        temperature=LINKEDIN_TEMPERATURE,
        max_tokens=LINKEDIN_MAX_TOKENS,
        json_mode=True,
    )
    if not response.content:
        raise ValueError("No content generated")

    try:
        content = LinkedInContent.model_validate(json.loads(response.content))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"LinkedIn response was not a valid profile document: {e}") from e

    if not content.copyable_text:
        content.copyable_text = build_copyable_text(content)
    return content


def _owned_resume(db: Session, user_id: str, resume_id: str) -> Optional[Resume]:
    return db.query(Resume).filter(
        Resume.id == resume_id,
        Resume.user_id == user_id
    ).first()


def save_linkedin_content(db: Session, user_id: str, resume_id: str, content: LinkedInContent) -> Optional[Resume]:
    """Attach content to a resume owned by `user_id`; None when there is no such resume."""
    resume = _owned_resume(db, user_id, resume_id)
    if not resume:
        return None

    resume.linkedin_content = content.model_dump(by_alias=True)
    db.commit()
    db.refresh(resume)
    logger.info(f"LinkedIn content saved: user_id={user_id}, resume_id={resume_id}")
    return resume


def get_linkedin_content(db: Session, user_id: str, resume_id: str) -> Optional[Resume]:
    return _owned_resume(db, user_id, resume_id)
