"""Application configuration using pydantic settings."""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Project info
    PROJECT_NAME: str = "HERA AI Router"
    VERSION: str = "0.1.0"

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Next.js dev server
    ]

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_COST_PER_TOKEN: float = 0.00003

    # Anthropic Claude
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-3-5-sonnet-20241022"
    CLAUDE_COST_PER_TOKEN: float = 0.000015

    # DeepSeek (OpenAI-compatible endpoint)
    DEEPSEEK_API_KEY: str = ""
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com/v1"
    DEEPSEEK_MODEL: str = "deepseek-chat"
    DEEPSEEK_COST_PER_TOKEN: float = 0.00000027

    # Ollama (local inference)
    OLLAMA_ENABLED: bool = False
    OLLAMA_BASE_URL: str = "http://localhost:11434/v1"
    OLLAMA_MODEL: str = "llama3.1:8b"

    # Routing
    AI_PROVIDER_TIMEOUT_SECONDS: float = 30.0
    AI_SIMULATE_MISSING_PROVIDERS: Optional[bool] = None  # Unset: simulate only in development
    AI_BATCH_MAX_CONCURRENCY: Optional[int] = None

    # Response cache
    AI_CACHE_BACKEND: str = "memory"  # "memory" or "redis"
    AI_CACHE_MAX_ENTRIES: int = 1000
    AI_CACHE_TTL_SECONDS: Optional[int] = 3600
    REDIS_URL: str = "redis://localhost:6379/0"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra environment variables not defined in Settings

    @property
    def simulate_missing_providers(self) -> bool:
        """Whether providers without credentials get the simulated adapter."""
        if self.AI_SIMULATE_MISSING_PROVIDERS is not None:
            return self.AI_SIMULATE_MISSING_PROVIDERS
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


# Create global settings instance
settings = get_settings()
