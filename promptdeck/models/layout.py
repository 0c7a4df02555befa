"""
Layout descriptors produced by the slide rendering engine.

All models are frozen so that two renders of the same slide compare equal
and can be hashed or cached by a presentation surface.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Background(BaseModel):
    """Background treatment of a slide.

    kind is one of ``solid``, ``linear-gradient``, ``image`` or ``split``.
    """
    model_config = ConfigDict(frozen=True)

    kind: str
    color: Optional[str] = None
    gradient_start: Optional[str] = None
    gradient_end: Optional[str] = None
    angle: Optional[int] = None
    image_url: Optional[str] = None
    size: Optional[str] = None
    position: Optional[str] = None
    css: str = ""


class Overlay(BaseModel):
    model_config = ConfigDict(frozen=True)

    tone: str
    color: str
    opacity: float


class TextBlock(BaseModel):
    """One piece of text placed on the slide."""
    model_config = ConfigDict(frozen=True)

    role: str
    text: str = ""
    items: Tuple[str, ...] = ()
    size_class: str = "text-2xl"
    weight: Optional[str] = None
    color: Optional[str] = None
    font_family: Optional[str] = None
    align: str = "left"
    italic: bool = False
    shadow: Optional[str] = None
    bullet_color: Optional[str] = None


class StatCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    color: Optional[str] = None


class ImagePanel(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    alt: str
    fit: str = "cover"


class LayoutDescriptor(BaseModel):
    """How to present one slide."""
    model_config = ConfigDict(frozen=True)

    slide_id: int
    archetype: str
    background: Background
    overlay: Optional[Overlay] = None
    font_family: str
    text_color: str
    alignment: str = "left"
    vertical_alignment: str = "top"
    columns: int = 1
    blocks: Tuple[TextBlock, ...] = ()
    stat_cards: Tuple[StatCard, ...] = ()
    image_panel: Optional[ImagePanel] = None
    animation: Optional[str] = None
