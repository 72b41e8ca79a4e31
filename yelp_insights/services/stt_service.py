"""
Whisper-based speech-to-text service.
"""

import io

from loguru import logger

from yelp_insights.config import settings
from yelp_insights.services.errors import TranscriptionError
from yelp_insights.services.openai_client import get_client


async def transcribe_audio(audio_bytes: bytes, filename: str = "audio.webm") -> str:
    """
    Transcribe raw audio bytes using OpenAI Whisper.
    The filename's extension tells Whisper which container the bytes are in.
    """
    if not audio_bytes:
        raise TranscriptionError("Failed to transcribe audio: empty upload")

    ai_client = get_client()

    try:
        audio_file = io.BytesIO(audio_bytes)
        audio_file.name = filename or "audio.webm"

        kwargs = {"model": settings.WHISPER_MODEL, "file": audio_file}
        if settings.STT_LANGUAGE and settings.STT_LANGUAGE != "auto":
            kwargs["language"] = settings.STT_LANGUAGE

        transcript = await ai_client.audio.transcriptions.create(**kwargs)
    except Exception as e:
        logger.error(f"STT error: {e}")
        raise TranscriptionError(f"Failed to transcribe audio: {e}") from e

    text = transcript.text.strip()
    logger.info(f"STT transcription: '{text[:80]}'")
    return text
