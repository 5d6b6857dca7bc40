"""
Configuration settings for the Lawdio backend.
Loads environment variables and provides application-wide settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM / speech provider (OpenAI-compatible REST API)
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_CHAT_MODEL: str = "gpt-4o-mini"
    OPENAI_TTS_MODEL: str = "gpt-4o-mini-tts"
    OPENAI_TTS_VOICE: str = "alloy"
    OPENAI_TTS_FORMAT: str = "mp3"
    UPSTREAM_TIMEOUT: float = 60.0  # seconds, no retries

    # Speech synthesis
    TTS_ENABLED: bool = True
    # When true, a speech failure still returns the text answer with a warning
    TTS_TEXT_ONLY_FALLBACK: bool = False

    # Notes storage
    NOTES_DIR: str = "./notes"
    NOTES_BACKEND: str = "file"  # "file" or "memory"
    DEFAULT_CASE_ID: str = "lawdio-case"

    # Static front-end
    PUBLIC_DIR: str = "./public"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def llm_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)


# Global settings instance
settings = Settings()
