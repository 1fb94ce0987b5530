"""
Model router for selecting the model used by each AI feature.
"""
from careerpath.core.config import OPENAI_API_KEY

DEFAULT_MODEL = "gpt-4o-mini"

# Feature -> model mapping
MODEL_ROUTING = {
    "career_roadmap": "gpt-4o",  # Long structured JSON output
    "linkedin_profile": "gpt-4o-mini",
}


def get_model_for_feature(feature: str) -> str:
    """Model identifier for a feature, defaulting to the cheap model."""
    return MODEL_ROUTING.get(feature, DEFAULT_MODEL)


def is_model_available() -> bool:
    """Check if an LLM provider can be built (OpenAI configured)."""
    return bool(OPENAI_API_KEY)
