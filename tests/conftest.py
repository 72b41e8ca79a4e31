"""Shared fixtures: a fresh conversation store and fakes for Yelp / OpenAI."""

from __future__ import annotations

import copy

import pytest
from fastapi.testclient import TestClient

from yelp_insights.main import app
from yelp_insights.middleware.rate_limit import limiter
from yelp_insights.models.conversation import ConversationStore, get_conversation_store
from yelp_insights.services import ai_service, stt_service, tts_service, yelp_service

BUSINESS = {
    "id": "golden-spoon-sf",
    "name": "Golden Spoon",
    "rating": 4.5,
    "review_count": 1234,
    "price": "$$",
    "phone": "+14155550100",
    "display_phone": "(415) 555-0100",
    "url": "https://www.yelp.com/biz/golden-spoon-sf",
    "image_url": "https://example.com/spoon.jpg",
    "location": {
        "address1": "12 Market St",
        "address2": "Suite 4",
        "city": "San Francisco",
        "state": "CA",
        "zip_code": "94105",
    },
    "coordinates": {"latitude": 37.79, "longitude": -122.39},
    "categories": [{"alias": "cafes", "title": "Cafes"}],
    "hours": [
        {
            "open": [
                {"day": 0, "start": "0800", "end": "1730"},
                {"day": 5, "start": "1000", "end": "2300"},
            ]
        }
    ],
}


@pytest.fixture
def business() -> dict:
    return copy.deepcopy(BUSINESS)


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


class FakeIntegrations:
    """Records calls to the Yelp / OpenAI functions it replaces."""

    def __init__(self, business: dict):
        self.business = business
        self.ai_queries: list[tuple] = []
        self.chats: list[tuple] = []
        self.chat_reply = "Customers love the brunch."
        self.ai_answer = "Reviewers praise the coffee and the friendly staff."
        self.chat_id = "chat-123"
        self.transcript = "What do people say about the coffee?"
        self.audio = "bXAz"

    async def get_business_details(self, business_id):
        return self.business

    async def ai_query(self, query, business_id, chat_id=None, user_context=None):
        self.ai_queries.append((query, business_id, chat_id))
        return {"answer": self.ai_answer, "chat_id": self.chat_id, "entities": [], "types": [], "tags": []}

    async def chat(self, messages, system_prompt=None):
        self.chats.append((messages, system_prompt))
        return self.chat_reply

    async def transcribe_audio(self, audio_bytes, filename="audio.webm"):
        return self.transcript

    async def synthesize_speech_base64(self, text, voice=None):
        return self.audio


@pytest.fixture
def fakes(monkeypatch: pytest.MonkeyPatch, business: dict) -> FakeIntegrations:
    fake = FakeIntegrations(business)
    monkeypatch.setattr(yelp_service, "get_business_details", fake.get_business_details)
    monkeypatch.setattr(yelp_service, "ai_query", fake.ai_query)
    monkeypatch.setattr(ai_service, "chat", fake.chat)
    monkeypatch.setattr(stt_service, "transcribe_audio", fake.transcribe_audio)
    monkeypatch.setattr(tts_service, "synthesize_speech_base64", fake.synthesize_speech_base64)
    return fake


@pytest.fixture
def client(store: ConversationStore):
    app.dependency_overrides[get_conversation_store] = lambda: store
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
