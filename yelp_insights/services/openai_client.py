"""
Shared AsyncOpenAI client used by the chat, transcription and speech services.
"""

from typing import Optional

import openai
from loguru import logger

from yelp_insights.config import settings
from yelp_insights.services.errors import AIServiceError

client: Optional[openai.AsyncOpenAI] = None


def _is_real_api_key(key: str) -> bool:
    """Reject empty keys and .env placeholders such as "sk-your-key-here"."""
    return bool(key) and key.startswith("sk-") and "your" not in key.lower() and len(key) >= 30


def get_client() -> openai.AsyncOpenAI:
    global client
    if client is None:
        if not _is_real_api_key(settings.OPENAI_API_KEY):
            logger.warning("OPENAI_API_KEY not set or is a placeholder")
            raise AIServiceError("OpenAI integration is not configured (OPENAI_API_KEY)")
        client = openai.AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
    return client
