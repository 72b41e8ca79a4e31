"""
GPT chat completions: free-form answers and structured JSON answers.
"""

import json
from typing import Dict, List, Optional

from loguru import logger

from yelp_insights.config import settings
from yelp_insights.services.errors import AIServiceError
from yelp_insights.services.openai_client import get_client


def _with_system(messages: List[Dict[str, str]], system_prompt: Optional[str]) -> List[Dict[str, str]]:
    if not system_prompt:
        return list(messages)
    return [{"role": "system", "content": system_prompt}, *messages]


async def chat(messages: List[Dict[str, str]], system_prompt: Optional[str] = None) -> str:
    ai_client = get_client()

    try:
        response = await ai_client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=_with_system(messages, system_prompt),
            temperature=settings.OPENAI_TEMPERATURE,
        )
    except Exception as e:
        logger.error(f"Chat completion error: {e}")
        raise AIServiceError(f"Failed to get AI response: {e}") from e

    content = response.choices[0].message.content or ""
    logger.debug(f"Chat completion -> '{content[:80]}'")
    return content.strip()


async def chat_json(messages: List[Dict[str, str]], system_prompt: str) -> dict:
    """Chat completion constrained to a JSON object; returns the parsed object."""
    ai_client = get_client()

    try:
        response = await ai_client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=_with_system(messages, system_prompt),
            temperature=settings.OPENAI_TEMPERATURE,
            response_format={"type": "json_object"},
        )
    except Exception as e:
        logger.error(f"Chat JSON completion error: {e}")
        raise AIServiceError(f"Failed to get structured AI response: {e}") from e

    content = response.choices[0].message.content or ""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Chat JSON completion returned invalid JSON: '{content[:80]}'")
        raise AIServiceError("Failed to get structured AI response: invalid JSON") from e

    if not isinstance(parsed, dict):
        raise AIServiceError("Failed to get structured AI response: expected a JSON object")
    return parsed
