"""
Industry -> theme lookup.

Each industry has one fixed palette and font pairing. Callers receive a
fresh Theme on every call so the table itself can never be mutated.
"""

from typing import Any, Dict, Optional, Union

from promptdeck.models.analysis import Industry
from promptdeck.models.theme import Theme

INDUSTRY_THEMES: Dict[Industry, Dict[str, str]] = {
    Industry.BUSINESS: {
        "primaryColor": "#1e3a8a", "secondaryColor": "#3b82f6", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#d97706", "gradientStart": "#1e3a8a", "gradientEnd": "#3b82f6",
        "fontFamily": "Inter", "headingFont": "Montserrat", "bodyFont": "Open Sans", "mood": "professional",
    },
    Industry.TECHNOLOGY: {
        "primaryColor": "#6366f1", "secondaryColor": "#8b5cf6", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#06b6d4", "gradientStart": "#6366f1", "gradientEnd": "#8b5cf6",
        "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "modern",
    },
    Industry.HEALTH: {
        "primaryColor": "#0891b2", "secondaryColor": "#059669", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#10b981", "gradientStart": "#0891b2", "gradientEnd": "#059669",
        "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "clean",
    },
    Industry.EDUCATION: {
        "primaryColor": "#f97316", "secondaryColor": "#3b82f6", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#10b981", "gradientStart": "#f97316", "gradientEnd": "#3b82f6",
        "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "friendly",
    },
    Industry.ENVIRONMENT: {
        "primaryColor": "#059669", "secondaryColor": "#92400e", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#fbbf24", "gradientStart": "#059669", "gradientEnd": "#92400e",
        "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "natural",
    },
    Industry.CREATIVE: {
        "primaryColor": "#8b5cf6", "secondaryColor": "#ec4899", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#f97316", "gradientStart": "#8b5cf6", "gradientEnd": "#ec4899",
        "fontFamily": "Inter", "headingFont": "Playfair Display", "bodyFont": "Source Sans Pro", "mood": "creative",
    },
    Industry.GENERAL: {
        "primaryColor": "#6366f1", "secondaryColor": "#8b5cf6", "backgroundColor": "#ffffff",
        "textColor": "#1f2937", "accentColor": "#f59e0b", "gradientStart": "#6366f1", "gradientEnd": "#8b5cf6",
        "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "modern",
    },
}

# Fixed theme for day-planner decks
PLANNER_THEME: Dict[str, str] = {
    "primaryColor": "#059669", "secondaryColor": "#0d9488", "backgroundColor": "#ffffff",
    "textColor": "#1f2937", "accentColor": "#10b981", "gradientStart": "#059669", "gradientEnd": "#0d9488",
    "fontFamily": "Inter", "headingFont": "Poppins", "bodyFont": "Inter", "mood": "productive",
}


def resolve_theme(industry: Union[Industry, str, None]) -> Theme:
    """Theme for an industry; unknown industries get the general theme."""
    try:
        key = Industry(industry)
    except ValueError:
        key = Industry.GENERAL
    return Theme(**INDUSTRY_THEMES[key])


def planner_theme() -> Theme:
    return Theme(**PLANNER_THEME)


def complete_theme(partial: Optional[Dict[str, Any]], base: Theme) -> Theme:
    """Fill keys missing from a provider-supplied theme with the resolved theme.

    Keys the provider did supply (including extra ones) are kept as given.
    """
    merged = base.model_dump()
    if isinstance(partial, dict):
        merged.update({key: value for key, value in partial.items() if value is not None})
    return Theme.model_validate(merged)
