"""
Application configuration using Pydantic Settings
Reads from environment variables and .env file
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    environment: str = Field(default="production", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Gemini (embeddings + secondary LLM)
    # Absence of the key selects the deterministic fallback embedding and
    # skips LLM validation entirely.
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    gemini_embedding_model: str = Field(default="text-embedding-004", alias="GEMINI_EMBEDDING_MODEL")
    gemini_chat_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_CHAT_MODEL")
    # Thinking tokens share the output cap on 2.5 models; unset to omit thinkingConfig
    gemini_thinking_budget: Optional[int] = Field(default=0, alias="GEMINI_THINKING_BUDGET")

    # Groq (primary LLM for issue analysis)
    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1", alias="GROQ_BASE_URL")
    groq_chat_model: str = Field(default="llama-3.1-8b-instant", alias="GROQ_CHAT_MODEL")

    # Outbound call limits (seconds)
    llm_timeout_seconds: float = Field(default=20.0, alias="LLM_TIMEOUT_SECONDS")
    embedding_timeout_seconds: float = Field(default=10.0, alias="EMBEDDING_TIMEOUT_SECONDS")
    llm_max_tokens: int = Field(default=500, alias="LLM_MAX_TOKENS")

    # Static datasets
    categories_path: str = Field(default="data/report_categories.json", alias="CATEGORIES_PATH")
    category_embeddings_path: str = Field(
        default="data/category_embeddings.json",
        alias="CATEGORY_EMBEDDINGS_PATH",
    )
    barangay_boundaries_path: str = Field(
        default="data/baguio_barangay_boundaries.json",
        alias="BARANGAY_BOUNDARIES_PATH",
    )

    # Monitoring
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment"""
        valid_envs = ["development", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of {valid_envs}")
        return v.lower()

    @field_validator("gemini_api_key", "groq_api_key")
    @classmethod
    def blank_key_is_missing(cls, v):
        """Treat an empty credential the same as an absent one"""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("gemini_thinking_budget", mode="before")
    @classmethod
    def blank_budget_is_unset(cls, v):
        """An empty GEMINI_THINKING_BUDGET omits thinkingConfig"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
