import os
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class CompletionProvider(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.getenv("LENDARIA_ENV_FILE") or None,
        env_file_encoding='utf-8',
        case_sensitive=True,
        use_enum_values=True,
        extra='ignore',
    )

    # Application
    APP_NAME: str = Field(default="Lendária Talent API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: Environment = Field(default=Environment.DEVELOPMENT, description="Environment")
    DEBUG: bool = Field(default=True, description="Debug mode")

    # Server
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port", ge=1000, le=65535)
    BACKEND_CORS_ORIGINS: str = Field(default="http://localhost:5173", description="CORS origins (comma separated)")

    # Logging
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    LOG_FORMAT: str = Field(default="text", description="Log format (json|text)")

    # Completion service
    COMPLETION_PROVIDER: CompletionProvider = Field(default=CompletionProvider.GEMINI, description="Remote completion provider")
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        description="Gemini API key",
        validation_alias=AliasChoices("GEMINI_API_KEY", "VITE_GEMINI_API_KEY"),
    )
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    DEFAULT_MODEL: str = Field(default="gemini-1.5-flash", description="Gemini model used for analysis")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="OpenAI model used for analysis")
    COMPLETION_TIMEOUT: float = Field(default=30.0, description="Completion request timeout in seconds", gt=0)

    # Record store
    SUPABASE_URL: Optional[str] = Field(
        default=None,
        description="Hosted backend URL",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_ANON_KEY: Optional[str] = Field(
        default=None,
        description="Hosted backend anonymous key",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    SUPABASE_TIMEOUT: float = Field(default=15.0, description="Record store request timeout in seconds", gt=0)

    @field_validator('OPENAI_API_KEY')
    @classmethod
    def validate_openai_key(cls, v):
        # Allow dummy values for development/testing without OpenAI
        placeholder_values = ('dummy', 'test', 'development', 'replace_me', 'your_key_here', 'sk-placeholder')
        if v and v not in placeholder_values and not v.startswith('sk-'):
            raise ValueError('Invalid OpenAI API key format')
        return v

    @field_validator('SUPABASE_URL')
    @classmethod
    def validate_supabase_url(cls, v):
        if v is None or not v.strip():
            return None
        v = v.strip().rstrip('/')
        if not v.startswith(('http://', 'https://')):
            raise ValueError('SUPABASE_URL must be an http(s) URL')
        return v

    @field_validator('GEMINI_API_KEY', 'SUPABASE_ANON_KEY')
    @classmethod
    def blank_to_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def record_store_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lazily create and cache Settings instance for DI."""
    return Settings()
