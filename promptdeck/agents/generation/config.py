"""
Configuration management for generation and persistence.

Centralized configuration with:
- Type safety
- Environment variable support (.env files are honoured)
- Validation
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from promptdeck.agents import config as global_config
from promptdeck.agents.generation.exceptions import InvalidConfigError

load_dotenv()


@dataclass
class AIConfig:
    """Text-generation service configuration"""
    api_key: Optional[str] = field(default_factory=lambda: os.getenv('OPENAI_API_KEY'))
    base_url: Optional[str] = field(default_factory=lambda: os.getenv('OPENAI_BASE_URL'))
    model: str = field(default_factory=lambda: os.getenv('AI_MODEL', global_config.DECK_GENERATION_MODEL))
    temperature: float = field(default_factory=lambda: float(os.getenv('AI_TEMPERATURE', str(global_config.DECK_GENERATION_TEMPERATURE))))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('AI_MAX_TOKENS', str(global_config.DECK_GENERATION_MAX_TOKENS))))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv('GENERATION_TIMEOUT', str(global_config.GENERATION_TIMEOUT_SECONDS))))
    key_validation_timeout_seconds: float = field(default_factory=lambda: float(os.getenv('API_KEY_VALIDATION_TIMEOUT', str(global_config.API_KEY_VALIDATION_TIMEOUT_SECONDS))))


@dataclass
class PersistenceConfig:
    """Document database and local tier configuration"""
    supabase_url: Optional[str] = field(default_factory=lambda: os.getenv('SUPABASE_URL'))
    # Use service key if available, otherwise fall back to anon key
    supabase_key: Optional[str] = field(default_factory=lambda: os.getenv('SUPABASE_SERVICE_KEY') or os.getenv('SUPABASE_KEY'))
    write_timeout_seconds: float = field(default_factory=lambda: float(os.getenv('PERSISTENCE_WRITE_TIMEOUT', str(global_config.PRIMARY_WRITE_TIMEOUT_SECONDS))))
    read_timeout_seconds: float = field(default_factory=lambda: float(os.getenv('PERSISTENCE_READ_TIMEOUT', str(global_config.PRIMARY_READ_TIMEOUT_SECONDS))))
    counter_timeout_seconds: float = field(default_factory=lambda: float(os.getenv('PERSISTENCE_COUNTER_TIMEOUT', str(global_config.COUNTER_UPDATE_TIMEOUT_SECONDS))))
    local_store_dir: str = field(default_factory=lambda: os.getenv('LOCAL_STORE_DIR', global_config.LOCAL_STORE_DIR))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))


@dataclass
class Config:
    """Master configuration"""
    ai: AIConfig = field(default_factory=AIConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (secrets omitted)"""
        return {
            'ai': {
                'model': self.ai.model,
                'temperature': self.ai.temperature,
                'max_tokens': self.ai.max_tokens,
                'timeout_seconds': self.ai.timeout_seconds,
                'has_api_key': bool(self.ai.api_key),
            },
            'persistence': {
                'has_supabase': bool(self.persistence.supabase_url and self.persistence.supabase_key),
                'write_timeout_seconds': self.persistence.write_timeout_seconds,
                'read_timeout_seconds': self.persistence.read_timeout_seconds,
                'counter_timeout_seconds': self.persistence.counter_timeout_seconds,
                'local_store_dir': self.persistence.local_store_dir,
            },
            'logging': {
                'level': self.logging.level,
            },
        }

    def validate(self) -> None:
        """Validate configuration values"""
        if self.ai.temperature < 0 or self.ai.temperature > 2:
            raise InvalidConfigError(f"AI temperature must be between 0 and 2, got {self.ai.temperature}")

        if self.ai.max_tokens < 100:
            raise InvalidConfigError(f"AI max_tokens must be at least 100, got {self.ai.max_tokens}")

        deadlines = {
            'timeout_seconds': self.ai.timeout_seconds,
            'write_timeout_seconds': self.persistence.write_timeout_seconds,
            'read_timeout_seconds': self.persistence.read_timeout_seconds,
            'counter_timeout_seconds': self.persistence.counter_timeout_seconds,
        }
        for name, value in deadlines.items():
            if value <= 0:
                raise InvalidConfigError(f"{name} must be positive, got {value}")


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get singleton configuration instance"""
    config = Config()
    config.validate()
    return config


def get_ai_config() -> AIConfig:
    """Get text-generation configuration"""
    return get_config().ai


def get_persistence_config() -> PersistenceConfig:
    """Get persistence configuration"""
    return get_config().persistence
