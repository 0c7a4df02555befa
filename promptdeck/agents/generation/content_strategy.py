"""
Content strategies: the ordered slide plan for each presentation intent.

Order is the narrative: opening, context, core, evidence, social proof,
call to action.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from promptdeck.models.analysis import Intent

SUBJECT_PLACEHOLDER = "{subject}"


@dataclass(frozen=True)
class SlideTemplate:
    """Planned slide: archetype, title pattern and focus tag."""
    type: str
    title: str
    focus: str

    def title_for(self, subject: str) -> str:
        return self.title.replace(SUBJECT_PLACEHOLDER, subject)


ContentStrategy = Tuple[SlideTemplate, ...]

CONTENT_STRATEGIES: Dict[Intent, ContentStrategy] = {
    Intent.STRATEGIC: (
        SlideTemplate('hero', '{subject}: Strategic Approach', 'strategy'),
        SlideTemplate('content', 'Current Situation Analysis', 'analysis'),
        SlideTemplate('content', 'Strategic Objectives', 'objectives'),
        SlideTemplate('content', 'Implementation Roadmap', 'implementation'),
        SlideTemplate('stats', 'Expected Outcomes', 'results'),
        SlideTemplate('quote', 'Strategic Insight', 'inspiration'),
        SlideTemplate('image-focus', 'Next Steps', 'action'),
    ),
    Intent.INSTRUCTIONAL: (
        SlideTemplate('hero', 'How to: {subject}', 'guide'),
        SlideTemplate('content', 'Getting Started', 'basics'),
        SlideTemplate('split', 'Step-by-Step Process', 'process'),
        SlideTemplate('content', 'Best Practices', 'tips'),
        SlideTemplate('content', 'Common Mistakes to Avoid', 'pitfalls'),
        SlideTemplate('stats', 'Success Metrics', 'measurement'),
        SlideTemplate('image-focus', 'Take Action Today', 'action'),
    ),
    Intent.PERSUASIVE: (
        SlideTemplate('hero', 'Why {subject} Matters', 'importance'),
        SlideTemplate('content', 'The Problem', 'problem'),
        SlideTemplate('split', 'The Solution', 'solution'),
        SlideTemplate('stats', 'Proven Benefits', 'benefits'),
        SlideTemplate('quote', 'Success Stories', 'testimonial'),
        SlideTemplate('content', 'Implementation Steps', 'action'),
        SlideTemplate('image-focus', 'Start Your Journey', 'cta'),
    ),
    Intent.OVERVIEW: (
        SlideTemplate('hero', 'Understanding {subject}', 'introduction'),
        SlideTemplate('content', 'Key Concepts', 'concepts'),
        SlideTemplate('split', 'How It Works', 'mechanism'),
        SlideTemplate('stats', 'By the Numbers', 'data'),
        SlideTemplate('content', 'Real-World Applications', 'applications'),
        SlideTemplate('quote', 'Expert Perspective', 'authority'),
        SlideTemplate('image-focus', 'The Future', 'future'),
    ),
    Intent.INFORMATIONAL: (
        SlideTemplate('hero', '{subject}: Complete Guide', 'comprehensive'),
        SlideTemplate('content', 'Overview & Importance', 'overview'),
        SlideTemplate('split', 'Key Components', 'components'),
        SlideTemplate('content', 'Detailed Analysis', 'analysis'),
        SlideTemplate('stats', 'Facts & Figures', 'data'),
        SlideTemplate('content', 'Practical Applications', 'practical'),
        SlideTemplate('quote', 'Industry Insights', 'insights'),
        SlideTemplate('image-focus', 'Looking Forward', 'conclusion'),
    ),
}


def resolve_strategy(intent: Union[Intent, str, None]) -> ContentStrategy:
    """Template sequence for an intent; unknown intents get the informational plan."""
    try:
        key = Intent(intent)
    except ValueError:
        key = Intent.INFORMATIONAL
    return CONTENT_STRATEGIES[key]
