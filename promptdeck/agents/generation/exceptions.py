"""
Exception hierarchy for generation and persistence.

Provides specific exceptions for every failure kind so that callers
can pick a differentiated recovery instead of a generic error.
"""

from typing import Optional, Dict, Any


class GenerationError(Exception):
    """Base exception for all promptdeck errors"""

    user_message = "Something went wrong. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message or self.user_message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Text-generation exceptions ===

class AIGenerationError(GenerationError):
    """Text-generation service failed to produce a deck"""
    user_message = "Deck generation failed. Please try again."


class AITimeoutError(AIGenerationError):
    """Generation exceeded its deadline"""
    user_message = (
        "The AI request timed out. Please try again with a shorter prompt "
        "or check your internet connection."
    )


class AINetworkError(AIGenerationError):
    """Transport-level failure talking to the provider"""
    user_message = "Network error connecting to the AI service. Please check your internet connection."


class MalformedResponseError(AIGenerationError):
    """Provider response could not be parsed as JSON"""
    user_message = "The AI returned an invalid format. Please try rephrasing your prompt."


class InvalidSchemaError(AIGenerationError):
    """Provider JSON lacks the required deck fields"""
    user_message = "The AI response was missing the deck title or slides. Please try again."


class AIAuthError(AIGenerationError):
    """Provider rejected the credentials"""
    user_message = "Invalid API key. Please check your OpenAI API key and try again."


class MissingApiKeyError(AIAuthError):
    """No API key was configured"""
    user_message = "No API key provided. Please set your OpenAI API key."


class InvalidApiKeyError(AIAuthError):
    """API key has the wrong shape"""
    user_message = "Invalid OpenAI API key format. Please check your API key and try again."


class AIRateLimitError(AIGenerationError):
    """AI API rate limit exceeded"""
    user_message = "AI rate limit exceeded. Please wait a moment and try again."


class ProviderUnavailableError(AIGenerationError):
    """Provider returned a server-side error"""
    user_message = "The AI service is having problems. Please try again in a few minutes."


class AIBadRequestError(AIGenerationError):
    """Provider refused the request as malformed"""
    user_message = "Invalid request to the AI service. Please try a different prompt."


# === Persistence exceptions ===

class PersistenceError(GenerationError):
    """Data persistence error"""
    user_message = "Failed to access your projects. Please try again."


class UnavailableError(PersistenceError):
    """Document database is offline or unreachable"""
    user_message = "Your projects are unavailable while offline. Please check your internet connection."


class PersistenceTimeoutError(UnavailableError):
    """Document database call exceeded its deadline"""
    user_message = "The project database took too long to respond. Please try again."


class NotFoundError(PersistenceError):
    """Requested project does not exist in its tier"""
    user_message = "That project could not be found."


class PermissionDeniedError(PersistenceError):
    """Document database refused the operation"""
    user_message = "You do not have permission to access this project."


class InvalidProjectDataError(PersistenceError):
    """Project fields would not form a valid record"""
    user_message = "The project could not be saved because its content is invalid."


# === Configuration exceptions ===

class ConfigurationError(GenerationError):
    """Configuration error"""
    user_message = "The application is misconfigured."


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration missing"""
    pass


# === Recovery helpers ===

def allows_local_fallback(error: Exception) -> bool:
    """Only unavailability (timeouts included) may degrade to a local tier."""
    return isinstance(error, UnavailableError)


def is_retryable(error: Exception) -> bool:
    """Check whether a user-initiated retry is worth offering"""
    retryable_types = (
        AITimeoutError,
        AINetworkError,
        AIRateLimitError,
        ProviderUnavailableError,
        MalformedResponseError,
        InvalidSchemaError,
        UnavailableError,
    )
    return isinstance(error, retryable_types)


def user_message_for(error: Exception) -> str:
    """Human-readable message for any error surfaced to a user."""
    if isinstance(error, GenerationError):
        return error.user_message
    return GenerationError.user_message
