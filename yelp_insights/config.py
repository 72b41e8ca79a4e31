"""
Application configuration, read from environment variables and .env.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "Yelp AI Business Analyzer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # ── OpenAI ───────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TEMPERATURE: float = 0.7
    WHISPER_MODEL: str = "whisper-1"
    STT_LANGUAGE: str = "en"
    TTS_MODEL: str = "tts-1"
    TTS_VOICE: str = "alloy"

    # ── Yelp ─────────────────────────────────────────────
    YELP_API_KEY: str = ""
    YELP_API_URL: str = "https://api.yelp.com/v3"
    YELP_AI_URL: str = "https://api.yelp.com/ai/chat/v2"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ── Uploads ──────────────────────────────────────────
    MAX_AUDIO_BYTES: int = 25 * 1024 * 1024

    # ── Rate Limiting ────────────────────────────────────
    RATE_LIMIT_PER_MINUTE: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
