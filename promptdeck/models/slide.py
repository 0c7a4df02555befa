from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Slide archetypes understood by the rendering engine
SLIDE_TYPES = ("hero", "title", "split", "quote", "stats", "image-focus", "content", "section")

# Entrance animations cycled by the fallback synthesizer
ANIMATIONS = ("fadeIn", "slideInLeft", "slideInRight", "zoomIn", "bounceIn")

DEFAULT_ANIMATION = "fadeIn"


@dataclass(frozen=True)
class Bullets:
    """Ordered list content."""
    items: Tuple[str, ...]


@dataclass(frozen=True)
class Prose:
    """Single block of text content."""
    text: str


Content = Union[Bullets, Prose]


def content_from_wire(value: Any) -> Content:
    """Tag wire content (``list[str] | str``) as Bullets or Prose."""
    if isinstance(value, str):
        return Prose(value)
    if value is None:
        return Bullets(())
    return Bullets(tuple(str(item) for item in value))


def content_to_wire(content: Content) -> Union[List[str], str]:
    if isinstance(content, Prose):
        return content.text
    return list(content.items)


class SlideStyling(BaseModel):
    """Per-slide visual overrides. Unknown keys are kept."""
    model_config = ConfigDict(extra='allow')

    titleSize: Optional[str] = None
    titleWeight: Optional[str] = None
    titleColor: Optional[str] = None
    subtitleSize: Optional[str] = None
    contentSize: Optional[str] = None
    textAlign: Optional[str] = None
    padding: Optional[str] = None
    borderRadius: Optional[str] = None
    shadow: Optional[str] = None
    overlay: Optional[str] = None
    iconColor: Optional[str] = None
    bulletStyle: Optional[str] = None


class Slide(BaseModel):
    """
    Canonical slide record as stored and exchanged with the text-generation
    service. Provider-supplied extra fields are preserved.

    Attributes:
        id: 1-based position inside the deck
        type: Slide archetype (see SLIDE_TYPES); unknown types render as content
        content: Wire content, a list of bullet strings or a single string.
            Use ``body`` for the tagged form.
    """
    model_config = ConfigDict(extra='allow')

    id: int = Field(..., description="1-based sequence number within the deck")
    type: str = Field("content", description="Slide archetype")
    title: str = Field("", description="Slide title")
    subtitle: Optional[str] = Field(None, description="Optional subtitle")
    content: Union[List[str], str] = Field(default_factory=list, description="Bullets or a single text block")
    speakerNotes: str = Field("", description="Presenter notes")
    animation: str = Field(DEFAULT_ANIMATION, description="Entrance animation")
    author: Optional[str] = Field(None, description="Quote attribution")
    layout: Optional[str] = None
    backgroundStyle: Optional[str] = None
    imageUrl: Optional[str] = None
    imageDescription: Optional[str] = None
    styling: Optional[SlideStyling] = None

    @field_validator('content', mode='before')
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return value

    @field_validator('speakerNotes', 'title', mode='before')
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def body(self) -> Content:
        """Content as a tagged union."""
        return content_from_wire(self.content)

    def with_body(self, body: Content) -> "Slide":
        return self.model_copy(update={"content": content_to_wire(body)})
