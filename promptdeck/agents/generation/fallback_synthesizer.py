"""
Fallback deck synthesis.

Builds a complete deck locally from the prompt analysis, the content
strategy for its intent and the industry theme. This is the offline/demo
path: it has no external dependency and never raises.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from promptdeck.agents import config as global_config
from promptdeck.agents.generation.content_strategy import SlideTemplate, resolve_strategy
from promptdeck.agents.generation.prompt_analyzer import analyze_prompt
from promptdeck.agents.generation.theme_resolver import planner_theme, resolve_theme
from promptdeck.models.analysis import PromptAnalysis
from promptdeck.models.deck import Deck
from promptdeck.models.project import DeckKind
from promptdeck.models.slide import ANIMATIONS, Bullets, Content, Prose, Slide, SlideStyling, content_to_wire
from promptdeck.setup_logging_optimized import get_logger

logger = get_logger(__name__)

DEFAULT_SUBJECT = "your topic"
QUOTE_AUTHOR = "Industry Expert"

# Background cycle by slide index modulo 3
BACKGROUND_CYCLE = ("gradient", "image", "gradient")

ContentGenerator = Callable[[str], List[str]]

CONTENT_GENERATORS: Dict[str, ContentGenerator] = {
    'strategy': lambda s: [f"Comprehensive {s} strategy", "Market analysis and positioning", "Competitive advantages", "Risk assessment and mitigation"],
    'analysis': lambda s: [f"Current market landscape for {s}", "Key challenges and opportunities", "Stakeholder impact assessment", "Resource requirements"],
    'objectives': lambda s: [f"Primary goals for {s} initiative", "Measurable success criteria", "Timeline and milestones", "Resource allocation strategy"],
    'implementation': lambda s: ["Phase 1: Foundation and planning", "Phase 2: Execution and monitoring", "Phase 3: Optimization and scaling", "Continuous improvement process"],
    'results': lambda s: ["85% improvement in efficiency", "200% increase in engagement", "50% reduction in costs", "95% user satisfaction rate"],
    'guide': lambda s: [f"Complete {s} methodology", "Proven techniques and approaches", "Expert recommendations", "Practical implementation tips"],
    'basics': lambda s: [f"Essential {s} fundamentals", "Core principles to understand", "Prerequisites and requirements", "Getting started checklist"],
    'process': lambda s: ["Step 1: Initial assessment and planning", "Step 2: Implementation and execution", "Step 3: Monitoring and adjustment", "Step 4: Evaluation and optimization"],
    'tips': lambda s: [f"Industry best practices for {s}", "Expert recommendations", "Proven strategies that work", "Common success factors"],
    'pitfalls': lambda s: [f"Avoid these common {s} mistakes", "Warning signs to watch for", "How to prevent typical failures", "Recovery strategies when things go wrong"],
    'problem': lambda s: [f"Current challenges with {s}", "Impact on stakeholders", "Cost of inaction", "Urgency for change"],
    'solution': lambda s: [f"Innovative {s} approach", "Proven methodology", "Comprehensive framework", "Scalable implementation"],
    'benefits': lambda s: [f"Immediate advantages of {s}", "Long-term strategic value", "ROI and cost savings", "Competitive differentiation"],
    'concepts': lambda s: [f"Core {s} principles", "Fundamental concepts", "Key terminology", "Theoretical framework"],
    'mechanism': lambda s: [f"How {s} functions", "Underlying processes", "System architecture", "Workflow and procedures"],
    'data': lambda s: [f"{s} market size: $2.5B", "Annual growth rate: 25%", "User adoption: 78%", "Success rate: 92%"],
    'applications': lambda s: [f"{s} in enterprise", "Consumer applications", "Industry use cases", "Emerging opportunities"],
    'components': lambda s: [f"Essential {s} elements", "Core building blocks", "Integration points", "System dependencies"],
    'practical': lambda s: [f"Real-world {s} examples", "Case studies and results", "Implementation scenarios", "Practical considerations"],
    'comprehensive': lambda s: [f"Everything you need to know about {s}", "Complete coverage of key topics", "Expert insights and analysis", "Actionable recommendations"],
    'overview': lambda s: [f"{s} landscape overview", "Current state and trends", "Key players and stakeholders", "Market dynamics"],
    'insights': lambda s: [f"Expert analysis of {s}", "Industry trends and patterns", "Future predictions", "Strategic recommendations"],
    'conclusion': lambda s: [f"The future of {s}", "Emerging trends and opportunities", "Next steps and recommendations", "Call to action"],
}


def generic_content(subject: str) -> List[str]:
    return [f"Key points about {subject}", "Important considerations", "Relevant information", "Next steps"]


def generate_focus_content(focus: str, subject: str) -> List[str]:
    """Four content items for a focus tag; unknown tags get a generic list."""
    generator = CONTENT_GENERATORS.get(focus, generic_content)
    return generator(subject)


def stock_image_url(subject: str, industry: str, focus: str) -> str:
    # Only the first space becomes a separator, matching stored decks
    query = f"{subject.replace(' ', ',', 1)},{industry},{focus}"
    return global_config.STOCK_PHOTO_URL.format(query=query)


def _shape_content(slide_type: str, items: List[str]) -> Content:
    if slide_type in ('hero', 'title'):
        return Bullets(())
    if slide_type == 'quote':
        return Prose(items[0] if items else "")
    return Bullets(tuple(items))


def _build_slide(template: SlideTemplate, analysis: PromptAnalysis, subject: str, index: int) -> Slide:
    industry = analysis.industry.value
    items = generate_focus_content(template.focus, subject)
    is_hero = template.type == 'hero'
    is_quote = template.type == 'quote'

    return Slide(
        id=index + 1,
        type=template.type,
        title=template.title_for(subject),
        subtitle=f'Based on your request: "{analysis.original_prompt}"' if is_hero else None,
        content=content_to_wire(_shape_content(template.type, items)),
        author=QUOTE_AUTHOR if is_quote else None,
        speakerNotes=(
            f"This slide covers {template.focus} aspects of {subject}. Key points include the content "
            f"shown and additional context relevant to your specific request about {analysis.original_prompt}."
        ),
        animation=ANIMATIONS[index % len(ANIMATIONS)],
        layout='split' if template.type == 'split' else 'center',
        backgroundStyle=BACKGROUND_CYCLE[index % len(BACKGROUND_CYCLE)],
        imageUrl=stock_image_url(subject, industry, template.focus),
        imageDescription=f"Visual representation of {template.focus} in {subject}",
        styling=SlideStyling(
            titleSize='6xl' if is_hero else '4xl',
            titleWeight='bold',
            subtitleSize='2xl',
            contentSize='lg',
            textAlign='center' if is_quote else 'left',
            overlay='dark' if index % 2 == 0 else 'light',
        ),
    )


def build_deck(templates: Sequence[SlideTemplate], analysis: PromptAnalysis) -> Deck:
    """Deck with one slide per template, ids 1..n in template order."""
    subject = analysis.subject or DEFAULT_SUBJECT
    if not templates:
        templates = resolve_strategy(None)

    slides = [_build_slide(template, analysis, subject, index) for index, template in enumerate(templates)]
    intent_label = analysis.intent.value.capitalize()

    return Deck(
        title=f"{subject[:1].upper()}{subject[1:]}: {intent_label} Guide",
        description=(
            f"A personalized presentation about {subject} based on your specific request: "
            f"\"{analysis.original_prompt}\""
        ),
        theme=resolve_theme(analysis.industry),
        slides=slides,
    )


def build_planner_deck(analysis: PromptAnalysis, today: datetime) -> Deck:
    subject = analysis.subject or DEFAULT_SUBJECT
    short_date = f"{today.month}/{today.day}/{today.year}"
    long_date = f"{today:%A}, {today:%B} {today.day}, {today.year}"

    hero = Slide(
        id=1,
        type='hero',
        title=f"Your {subject} Day",
        subtitle=long_date,
        content=[],
        speakerNotes=f"Today's focus: {subject}. This planner is customized based on your specific request.",
        animation='fadeIn',
        layout='center',
        backgroundStyle='gradient',
        imageUrl=global_config.STOCK_PHOTO_URL.format(query=f"{subject.replace(' ', ',', 1)},productivity,planning"),
        imageDescription=f"Productivity setup for {subject}",
        styling=SlideStyling(titleSize='5xl', titleWeight='bold', subtitleSize='2xl', textAlign='center', overlay='dark'),
    )
    return Deck(
        title=f"Personalized Daily Planner - {short_date}",
        description=f"Customized daily schedule based on: {analysis.original_prompt}",
        theme=planner_theme(),
        slides=[hero],
    )


def synthesize_deck(
    prompt: Optional[str],
    kind: DeckKind = DeckKind.PRESENTATION,
    clock: Callable[[], datetime] = datetime.now,
) -> Deck:
    """Analyze the prompt and build a complete deck without any remote call."""
    analysis = analyze_prompt(prompt)
    if DeckKind(kind) == DeckKind.PLANNER:
        logger.info(f"Synthesizing fallback planner for '{analysis.subject}'")
        return build_planner_deck(analysis, clock())

    templates = resolve_strategy(analysis.intent)
    logger.info(
        f"Synthesizing fallback deck: industry={analysis.industry.value}, "
        f"intent={analysis.intent.value}, slides={len(templates)}"
    )
    return build_deck(templates, analysis)
