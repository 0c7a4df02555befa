from enum import Enum

from pydantic import BaseModel, ConfigDict


class Industry(str, Enum):
    """Industry a prompt is classified into."""
    BUSINESS = "business"
    TECHNOLOGY = "technology"
    HEALTH = "health"
    EDUCATION = "education"
    ENVIRONMENT = "environment"
    CREATIVE = "creative"
    GENERAL = "general"


class Intent(str, Enum):
    """Presentation intent driving the content strategy."""
    STRATEGIC = "strategic"
    INSTRUCTIONAL = "instructional"
    PERSUASIVE = "persuasive"
    OVERVIEW = "overview"
    INFORMATIONAL = "informational"


class PromptAnalysis(BaseModel):
    """Classification of one prompt. Derived per request, never persisted."""
    model_config = ConfigDict(frozen=True)

    industry: Industry
    subject: str
    intent: Intent
    original_prompt: str
