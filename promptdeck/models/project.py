from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from promptdeck.models.deck import Deck
from promptdeck.utils.timestamps import normalize_timestamp, utc_now


class StorageTier(str, Enum):
    """Storage location of a project record."""
    PRIMARY = "primary"
    DURABLE_LOCAL = "durable-local"
    EPHEMERAL = "ephemeral"


class DeckKind(str, Enum):
    PRESENTATION = "presentation"
    PLANNER = "planner"


class Project(BaseModel):
    """
    Persistence-layer record wrapping a deck.

    ``slideCount`` is denormalized and always recomputed from ``slideData``.
    """
    model_config = ConfigDict(extra='allow')

    id: str = Field(..., description="Tier-qualified project id")
    userId: str = Field(..., description="Owning user")
    title: str = Field("", description="Project title")
    description: str = Field("", description="Project description")
    prompt: str = Field("", description="Prompt the deck was generated from")
    slideData: Deck = Field(..., description="The deck")
    slideCount: int = Field(0, description="Number of slides in slideData")
    type: DeckKind = Field(DeckKind.PRESENTATION, description="presentation or planner")
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)
    storageTier: StorageTier = Field(StorageTier.PRIMARY)
    isLocal: Optional[bool] = None
    isTemporary: Optional[bool] = None
    # Primary id attempted before degrading to the durable-local tier
    pendingPrimaryId: Optional[str] = None

    @field_validator('createdAt', 'updatedAt', mode='before')
    @classmethod
    def _normalize_timestamps(cls, value: Any) -> datetime:
        return normalize_timestamp(value)

    @field_validator('description', mode='before')
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode='after')
    def _sync_slide_count(self) -> "Project":
        count = len(self.slideData.slides)
        if self.slideCount != count:
            self.slideCount = count
        return self

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict for storage."""
        return self.model_dump(mode='json', exclude_none=True)


class UserProfile(BaseModel):
    """Row of the ``users`` table."""
    model_config = ConfigDict(extra='allow')

    id: str
    displayName: str = ""
    email: str = ""
    photoURL: Optional[str] = None
    createdAt: datetime = Field(default_factory=utc_now)
    lastLoginAt: datetime = Field(default_factory=utc_now)
    projectCount: int = 0

    @field_validator('createdAt', 'lastLoginAt', mode='before')
    @classmethod
    def _normalize_timestamps(cls, value: Any) -> datetime:
        return normalize_timestamp(value)


class OwnerStats(BaseModel):
    totalProjects: int = 0
    totalSlides: int = 0
    presentationCount: int = 0
    plannerCount: int = 0
    recentProjects: List[Project] = Field(default_factory=list)
