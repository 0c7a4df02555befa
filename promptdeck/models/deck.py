import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from promptdeck.models.slide import Slide
from promptdeck.models.theme import Theme


class Deck(BaseModel):
    """
    Canonical unit of generated content.

    Attributes:
        title: Deck title
        description: Optional description
        theme: Theme chosen at creation time, never re-derived
        slides: Ordered slides; the first slide is the narrative opener
    """
    model_config = ConfigDict(extra='allow')

    title: str = Field(..., description="Deck title")
    description: Optional[str] = Field(None, description="Deck description")
    theme: Theme = Field(..., description="Theme stored inline with the deck")
    slides: List[Slide] = Field(..., min_length=1, description="Ordered slides")

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    def renumber(self) -> "Deck":
        """Return a copy whose slide ids match their 1-based positions."""
        slides = [
            slide if slide.id == index + 1 else slide.model_copy(update={"id": index + 1})
            for index, slide in enumerate(self.slides)
        ]
        return self.model_copy(update={"slides": slides})

    def with_slide_added(self, slide: Slide, position: Optional[int] = None) -> "Deck":
        """Insert a slide (append when position is None) and renumber."""
        slides = list(self.slides)
        if position is None or position >= len(slides):
            slides.append(slide)
        else:
            slides.insert(max(position, 0), slide)
        return self.model_copy(update={"slides": slides}).renumber()

    def with_slide_removed(self, slide_id: int) -> "Deck":
        """Remove a slide by id and renumber. The last slide cannot be removed."""
        slides = [slide for slide in self.slides if slide.id != slide_id]
        if not slides or len(slides) == len(self.slides):
            return self
        return self.model_copy(update={"slides": slides}).renumber()

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict in the shape exchanged with storage and the provider."""
        return self.model_dump(mode='json', exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_wire())

    @classmethod
    def from_json(cls, payload: str) -> "Deck":
        return cls.model_validate_json(payload)
