"""
Remote deck generation.

Sends the prompt to the text-generation service under a deadline, parses and
validates the JSON reply, and normalizes it into a Deck. Failures surface as
typed errors; the local synthesizer only runs when offline/demo mode is
explicitly selected.
"""

import json
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from promptdeck.agents import config as global_config
from promptdeck.agents.generation.config import AIConfig, get_ai_config
from promptdeck.agents.generation.deadlines import await_with_deadline
from promptdeck.agents.generation.exceptions import (
    AIAuthError,
    AINetworkError,
    AITimeoutError,
    InvalidApiKeyError,
    InvalidSchemaError,
    MalformedResponseError,
    MissingApiKeyError,
)
from promptdeck.agents.generation.fallback_synthesizer import synthesize_deck
from promptdeck.agents.generation.prompt_analyzer import analyze_prompt
from promptdeck.agents.generation.theme_resolver import complete_theme, planner_theme, resolve_theme
from promptdeck.agents.prompts.generation.system_prompts import build_day_planner_prompt, get_system_prompt
from promptdeck.models.deck import Deck
from promptdeck.models.project import DeckKind
from promptdeck.models.slide import DEFAULT_ANIMATION
from promptdeck.services.openai_service import OpenAIService
from promptdeck.setup_logging_optimized import get_logger

logger = get_logger(__name__)


class PlannerTask(BaseModel):
    """One entry of a day-planner request."""
    time: str = Field(..., description="Start time, e.g. 09:00")
    title: str = Field(..., description="Task title")
    duration: int = Field(30, description="Duration in minutes")
    priority: str = Field("medium", description="low, medium or high")


def check_api_key(api_key: Optional[str]) -> bool:
    """Validate the key's shape. Returns True for the demo key.

    Raises:
        MissingApiKeyError: no key
        InvalidApiKeyError: key without the provider prefix
    """
    if not api_key:
        raise MissingApiKeyError()
    if api_key == global_config.DEMO_API_KEY:
        return True
    if not api_key.startswith(global_config.OPENAI_KEY_PREFIX):
        raise InvalidApiKeyError()
    return False


def slide_defaults(position: int) -> Dict[str, Any]:
    return {
        'id': position,
        'type': 'content',
        'title': f"Slide {position}",
        'subtitle': '',
        'content': [],
        'speakerNotes': '',
        'animation': DEFAULT_ANIMATION,
    }


def normalize_slides(slides: List[Any]) -> List[Dict[str, Any]]:
    """Fill missing slide keys; provider-supplied keys are kept as given."""
    normalized = []
    for index, slide in enumerate(slides):
        if not isinstance(slide, dict):
            raise InvalidSchemaError(
                f"Slide {index + 1} is not an object",
                context={'slide_index': index},
            )
        normalized.append({**slide_defaults(index + 1), **slide})
    return normalized


def parse_deck_response(content: Optional[str], base_theme) -> Deck:
    """Parse and validate the provider reply into a Deck."""
    if not content:
        raise MalformedResponseError("No content received from the AI service")

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response as JSON: {e}")
        raise MalformedResponseError("AI response is not valid JSON", cause=e)

    if not isinstance(payload, dict):
        raise InvalidSchemaError("AI response is not a JSON object")
    if not payload.get('title') or not isinstance(payload.get('slides'), list):
        raise InvalidSchemaError(
            "AI response is missing title or slides",
            context={'keys': sorted(payload.keys())},
        )

    payload['slides'] = normalize_slides(payload['slides'])

    try:
        payload['theme'] = complete_theme(payload.get('theme'), base_theme).model_dump(exclude_none=True)
        return Deck.model_validate(payload)
    except ValidationError as e:
        raise InvalidSchemaError("AI response does not match the deck shape", cause=e)


class RemoteDeckGenerator:
    """Generates decks through the text-generation service."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[AIConfig] = None,
        service_factory: Callable[[str], OpenAIService] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or get_ai_config()
        self.api_key = api_key if api_key is not None else self.config.api_key
        self._service_factory = service_factory or (lambda key: OpenAIService(api_key=key, config=self.config))
        self._service: Optional[OpenAIService] = None
        self.clock = clock

    @property
    def demo_mode(self) -> bool:
        return self.api_key == global_config.DEMO_API_KEY

    def _get_service(self) -> OpenAIService:
        if self._service is None:
            check_api_key(self.api_key)
            self._service = self._service_factory(self.api_key)
        return self._service

    async def generate(
        self,
        prompt: str,
        kind: Union[DeckKind, str] = DeckKind.PRESENTATION,
        offline: bool = False,
    ) -> Deck:
        """Generate a deck for the prompt.

        Raises:
            AITimeoutError, AINetworkError, MalformedResponseError,
            InvalidSchemaError, AIAuthError, AIRateLimitError,
            ProviderUnavailableError, AIBadRequestError
        """
        kind = DeckKind(kind)
        if offline or self.demo_mode:
            logger.info("Offline/demo mode selected - synthesizing deck locally")
            return synthesize_deck(prompt, kind, clock=self.clock)

        service = self._get_service()
        analysis = analyze_prompt(prompt)
        base_theme = planner_theme() if kind == DeckKind.PLANNER else resolve_theme(analysis.industry)

        logger.info(f"Generating {kind.value} deck remotely (industry={analysis.industry.value})")
        content = await await_with_deadline(
            service.complete_json(get_system_prompt(kind), prompt),
            self.config.timeout_seconds,
            AITimeoutError,
            description="Deck generation",
            context={'model': service.model, 'kind': kind.value},
        )

        deck = parse_deck_response(content, base_theme)
        logger.info(f"Generated deck '{deck.title}' with {deck.slide_count} slides")
        return deck

    async def generate_day_planner(self, tasks: Iterable[Union[PlannerTask, Dict[str, Any]]], date: str) -> Deck:
        entries = [PlannerTask.model_validate(task).model_dump() for task in tasks]
        return await self.generate(build_day_planner_prompt(entries, date), DeckKind.PLANNER)

    async def validate_api_key(self) -> bool:
        """Check the key against the provider.

        Returns False when the provider rejects the key. Timeouts and
        transport failures raise AINetworkError.
        """
        if check_api_key(self.api_key):
            return True

        service = self._get_service()
        try:
            await await_with_deadline(
                service.list_models(),
                self.config.key_validation_timeout_seconds,
                AITimeoutError,
                description="API key validation",
            )
        except (AITimeoutError, AINetworkError) as e:
            raise AINetworkError("Network error. Please check your internet connection.", cause=e)
        except AIAuthError as e:
            logger.warning(f"API key rejected: {e}")
            return False
        return True
