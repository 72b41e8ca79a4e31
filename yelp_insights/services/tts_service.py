"""
Text-to-speech service using the OpenAI speech endpoint.
Failures are logged and reported as missing audio; callers keep the text reply.
"""

import base64
from typing import Optional

from loguru import logger

from yelp_insights.config import settings
from yelp_insights.services.openai_client import get_client


async def synthesize_speech(text: str, voice: Optional[str] = None) -> Optional[bytes]:
    """
    Convert text to speech audio bytes.
    Returns MP3 audio bytes, or None when synthesis is unavailable.
    """
    if not text:
        return None

    try:
        ai_client = get_client()
        response = await ai_client.audio.speech.create(
            model=settings.TTS_MODEL,
            voice=voice or settings.TTS_VOICE,
            input=text,
        )
        audio = response.content
        logger.info(f"TTS synthesized {len(audio)} bytes")
        return audio

    except Exception as e:
        logger.error(f"TTS failed (non-fatal): {e}")
        return None


async def synthesize_speech_base64(text: str, voice: Optional[str] = None) -> Optional[str]:
    """Return TTS audio as a base64-encoded string for the JSON response."""
    audio_bytes = await synthesize_speech(text, voice)
    if audio_bytes:
        return base64.b64encode(audio_bytes).decode("utf-8")
    return None
