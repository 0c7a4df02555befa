"""
Pydantic models for decks, slides, themes, projects and layouts.
"""
