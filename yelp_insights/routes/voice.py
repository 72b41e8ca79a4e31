"""
Question endpoints: recorded voice (speech-to-text) and typed text.
Both answer with text plus optional base64 MP3 audio.
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from loguru import logger

from yelp_insights.config import settings
from yelp_insights.middleware.rate_limit import QUERY_LIMIT, limiter
from yelp_insights.models.conversation import ConversationStore, get_conversation_store
from yelp_insights.models.schemas import TextMessageRequest, TurnResponse
from yelp_insights.routes.dependencies import conversation_or_404
from yelp_insights.services import stt_service, tts_service
from yelp_insights.services.conversation_service import handle_turn

router = APIRouter(prefix="/api/conversation", tags=["conversation"])


@router.post("/voice", response_model=TurnResponse)
@limiter.limit(QUERY_LIMIT)
async def voice_message(
    request: Request,
    audio: UploadFile = File(...),
    user_id: str = Form(..., min_length=1),
    conversation_id: str = Form(..., min_length=1),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Transcribe an uploaded recording, answer it, and speak the answer back."""
    conversation = conversation_or_404(store, user_id, conversation_id)

    if audio.size is not None and audio.size > settings.MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="Audio file too large")

    # One byte past the cap is enough to tell an oversized upload apart
    data = await audio.read(settings.MAX_AUDIO_BYTES + 1)
    if not data:
        raise HTTPException(status_code=422, detail="No audio file provided")
    if len(data) > settings.MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="Audio file too large")
    logger.info(f"Received {len(data)} bytes of audio ({audio.content_type})")

    transcription = await stt_service.transcribe_audio(data, audio.filename or "recording.webm")
    response, source = await handle_turn(store, conversation, transcription)
    audio_b64 = await tts_service.synthesize_speech_base64(response)

    return TurnResponse(
        conversation_id=conversation_id,
        transcription=transcription,
        response=response,
        source=source,
        audio=audio_b64,
    )


@router.post("/text", response_model=TurnResponse)
@limiter.limit(QUERY_LIMIT)
async def text_message(
    request: Request,
    req: TextMessageRequest,
    store: ConversationStore = Depends(get_conversation_store),
):
    """Typed question; same routing as voice, without transcription."""
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)

    response, source = await handle_turn(store, conversation, req.message)
    audio_b64 = await tts_service.synthesize_speech_base64(response)

    return TurnResponse(
        conversation_id=req.conversation_id,
        response=response,
        source=source,
        audio=audio_b64,
    )
