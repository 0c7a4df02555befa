from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Theme(BaseModel):
    """
    Color and typography bundle stored inline with a deck.

    Optional fields are tolerated on input because provider decks sometimes
    omit them; decks created by promptdeck always carry a complete theme.
    """
    model_config = ConfigDict(extra='allow')

    primaryColor: str = Field(..., description="Main brand color")
    secondaryColor: str = Field(..., description="Secondary color")
    backgroundColor: str = Field("#ffffff", description="Slide background color")
    textColor: str = Field("#1f2937", description="Body text color")
    accentColor: Optional[str] = Field(None, description="Accent for bullets and stat numbers")
    gradientStart: Optional[str] = Field(None, description="Gradient start color")
    gradientEnd: Optional[str] = Field(None, description="Gradient end color")
    fontFamily: str = Field("Inter", description="Base font family")
    headingFont: Optional[str] = Field(None, description="Heading font family")
    bodyFont: Optional[str] = Field(None, description="Body font family")
    mood: Optional[str] = Field(None, description="Mood label, e.g. 'professional'")
