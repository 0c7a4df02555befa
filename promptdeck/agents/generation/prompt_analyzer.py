"""
Prompt analysis for the fallback pipeline.

Classifies a free-text prompt into industry, subject and presentation
intent. Matching is plain substring membership against fixed keyword
tables; the first hit in table order wins.
"""

from typing import Optional, Tuple

from promptdeck.models.analysis import Industry, Intent, PromptAnalysis

# Priority order matters: a prompt mentioning both business and technology
# is a business prompt.
INDUSTRY_KEYWORDS: Tuple[Tuple[Industry, Tuple[str, ...]], ...] = (
    (Industry.BUSINESS, ('business', 'corporate', 'finance', 'marketing')),
    (Industry.TECHNOLOGY, ('tech', 'ai', 'artificial intelligence', 'digital', 'software')),
    (Industry.HEALTH, ('health', 'medical', 'wellness', 'fitness')),
    (Industry.EDUCATION, ('education', 'learning', 'teaching', 'school')),
    (Industry.ENVIRONMENT, ('environment', 'climate', 'sustainability', 'green')),
    (Industry.CREATIVE, ('creative', 'design', 'art', 'innovation')),
)

INTENT_PHRASES: Tuple[Tuple[Intent, Tuple[str, ...]], ...] = (
    (Intent.STRATEGIC, ('strategy', 'plan', 'approach')),
    (Intent.INSTRUCTIONAL, ('how to', 'guide', 'tutorial')),
    (Intent.PERSUASIVE, ('benefits', 'advantages', 'why')),
    (Intent.OVERVIEW, ('overview', 'introduction', 'about')),
)

STOP_WORDS = frozenset({
    'create', 'make', 'generate', 'about', 'on', 'for', 'presentation',
    'slides', 'a', 'an', 'the', 'and', 'or', 'but',
})

MIN_SUBJECT_TOKEN_LENGTH = 3
MAX_SUBJECT_TOKENS = 3


def classify_industry(prompt: str) -> Industry:
    text = (prompt or '').lower()
    for industry, keywords in INDUSTRY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return industry
    return Industry.GENERAL


def classify_intent(prompt: str) -> Intent:
    text = (prompt or '').lower()
    for intent, phrases in INTENT_PHRASES:
        if any(phrase in text for phrase in phrases):
            return intent
    return Intent.INFORMATIONAL


def extract_subject(prompt: str) -> str:
    """First three meaningful words of the prompt, lower-cased."""
    words = (prompt or '').lower().split()
    meaningful = [
        word for word in words
        if word not in STOP_WORDS and len(word) >= MIN_SUBJECT_TOKEN_LENGTH
    ]
    return ' '.join(meaningful[:MAX_SUBJECT_TOKENS])


def analyze_prompt(prompt: Optional[str]) -> PromptAnalysis:
    """Classify a prompt. Never raises; degenerate input yields defaults."""
    text = prompt or ''
    return PromptAnalysis(
        industry=classify_industry(text),
        subject=extract_subject(text),
        intent=classify_intent(text),
        original_prompt=text,
    )
