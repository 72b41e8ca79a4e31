"""HTTP surface, with Yelp / OpenAI replaced by the ``fakes`` fixture."""

import pytest

from yelp_insights.config import settings
from yelp_insights.services import tts_service, yelp_service
from yelp_insights.services.errors import BusinessNotFoundError, YelpServiceError


@pytest.fixture
def conversation_id(client):
    resp = client.post(
        "/api/conversation/start",
        json={"user_id": "owner-1", "business_id": "golden-spoon-sf", "business_name": "Golden Spoon"},
    )
    assert resp.status_code == 200
    return resp.json()["conversation_id"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
    assert client.get("/health").headers["X-Request-ID"]


# ── Business search ──────────────────────────────────────

def test_search_business_single_match(client, monkeypatch, business):
    async def find_business(name, city, state, phone=None, address=None):
        assert phone == "(415) 555-0100"
        assert address is None
        return {"business": business, "source": "match"}

    monkeypatch.setattr(yelp_service, "find_business", find_business)
    resp = client.post(
        "/api/auth/search-business",
        json={"business_name": "Golden Spoon", "city": "San Francisco", "state": "CA", "phone": "(415) 555-0100"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["source"] == "match"
    assert body["business"]["id"] == "golden-spoon-sf"
    assert body["businesses"] is None


def test_search_business_not_found(client, monkeypatch):
    async def find_business(*args, **kwargs):
        raise BusinessNotFoundError("No businesses found matching your search")

    monkeypatch.setattr(yelp_service, "find_business", find_business)
    resp = client.post("/api/auth/search-business", json={"business_name": "X", "city": "Y", "state": "Z"})

    assert resp.status_code == 404
    assert resp.json() == {"detail": "No businesses found matching your search", "service": "yelp"}


def test_search_business_upstream_failure(client, monkeypatch):
    async def find_business(*args, **kwargs):
        raise YelpServiceError("Failed to search businesses: HTTP 500")

    monkeypatch.setattr(yelp_service, "find_business", find_business)
    resp = client.post("/api/auth/search-business", json={"business_name": "X", "city": "Y", "state": "Z"})

    assert resp.status_code == 502
    assert resp.json()["service"] == "yelp"


def test_search_business_requires_fields(client):
    resp = client.post("/api/auth/search-business", json={"business_name": "", "city": "Y", "state": "Z"})
    assert resp.status_code == 422


# ── Conversations ────────────────────────────────────────

def test_start_and_fetch_conversation(client, conversation_id):
    resp = client.get(f"/api/conversation/owner-1/{conversation_id}")

    assert resp.status_code == 200
    conversation = resp.json()["conversation"]
    assert conversation["business_name"] == "Golden Spoon"
    assert conversation["messages"] == []
    assert conversation["chat_id"] is None


def test_start_requires_business(client):
    resp = client.post("/api/conversation/start", json={"user_id": "owner-1", "business_name": "Golden Spoon"})
    assert resp.status_code == 422


def test_unknown_conversation_is_404(client):
    assert client.get("/api/conversation/owner-1/conv_missing").status_code == 404


def test_text_turn_records_both_messages(client, fakes, conversation_id):
    resp = client.post(
        "/api/conversation/text",
        json={"user_id": "owner-1", "conversation_id": conversation_id, "message": "How is the coffee?"},
    )

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "conversation_id": conversation_id,
        "response": fakes.ai_answer,
        "source": "yelp_ai",
        "audio": fakes.audio,
        "transcription": None,
    }
    conversation = client.get(f"/api/conversation/owner-1/{conversation_id}").json()["conversation"]
    assert [m["role"] for m in conversation["messages"]] == ["user", "assistant"]
    assert conversation["chat_id"] == "chat-123"


def test_text_turn_survives_tts_failure(client, fakes, monkeypatch, conversation_id):
    async def no_audio(text, voice=None):
        return None

    monkeypatch.setattr(tts_service, "synthesize_speech_base64", no_audio)
    resp = client.post(
        "/api/conversation/text",
        json={"user_id": "owner-1", "conversation_id": conversation_id, "message": "What is my rating?"},
    )

    assert resp.status_code == 200
    assert resp.json()["audio"] is None
    assert resp.json()["source"] == "direct"


def test_text_turn_rejects_empty_message(client, conversation_id):
    resp = client.post(
        "/api/conversation/text",
        json={"user_id": "owner-1", "conversation_id": conversation_id, "message": ""},
    )
    assert resp.status_code == 422


def test_text_turn_unknown_conversation(client, fakes):
    resp = client.post(
        "/api/conversation/text",
        json={"user_id": "owner-1", "conversation_id": "conv_missing", "message": "hi"},
    )
    assert resp.status_code == 404


def test_voice_turn(client, fakes, conversation_id):
    resp = client.post(
        "/api/conversation/voice",
        data={"user_id": "owner-1", "conversation_id": conversation_id},
        files={"audio": ("question.webm", b"\x1a\x45\xdf\xa3fake", "audio/webm")},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["transcription"] == fakes.transcript
    assert body["response"] == fakes.ai_answer
    assert body["audio"] == fakes.audio


def test_voice_turn_rejects_empty_audio(client, fakes, conversation_id):
    resp = client.post(
        "/api/conversation/voice",
        data={"user_id": "owner-1", "conversation_id": conversation_id},
        files={"audio": ("question.webm", b"", "audio/webm")},
    )
    assert resp.status_code == 422


def test_voice_turn_rejects_oversized_audio(client, fakes, monkeypatch, conversation_id):
    monkeypatch.setattr(settings, "MAX_AUDIO_BYTES", 4)
    resp = client.post(
        "/api/conversation/voice",
        data={"user_id": "owner-1", "conversation_id": conversation_id},
        files={"audio": ("question.webm", b"0123456789", "audio/webm")},
    )
    assert resp.status_code == 413


def test_voice_turn_requires_audio(client, conversation_id):
    resp = client.post(
        "/api/conversation/voice",
        data={"user_id": "owner-1", "conversation_id": conversation_id},
    )
    assert resp.status_code == 422


def test_history_active_and_delete(client, conversation_id):
    second = client.post(
        "/api/conversation/start",
        json={"user_id": "owner-1", "business_id": "golden-spoon-sf", "business_name": "Golden Spoon"},
    ).json()["conversation_id"]

    history = client.get("/api/conversation/history/owner-1").json()["conversations"]
    assert [c["id"] for c in history] == [conversation_id, second]
    assert history[0]["message_count"] == 0

    assert client.get("/api/conversation/active/owner-1").json()["conversation"]["id"] == second
    client.post(f"/api/conversation/owner-1/{conversation_id}/activate")
    assert client.get("/api/conversation/active/owner-1").json()["conversation"]["id"] == conversation_id

    resp = client.delete(f"/api/conversation/owner-1/{conversation_id}")
    assert resp.json() == {"success": True, "message": "Conversation deleted"}
    assert client.get("/api/conversation/active/owner-1").status_code == 404
    assert client.delete(f"/api/conversation/owner-1/{conversation_id}").status_code == 200
    assert [c["id"] for c in client.get("/api/conversation/history/owner-1").json()["conversations"]] == [second]


def test_history_for_unknown_user_is_empty(client):
    assert client.get("/api/conversation/history/nobody").json() == {"success": True, "conversations": []}


def test_activate_unknown_conversation(client):
    assert client.post("/api/conversation/owner-1/conv_missing/activate").status_code == 404


# ── Reports ──────────────────────────────────────────────

def _ask(client, conversation_id, message):
    client.post(
        "/api/conversation/text",
        json={"user_id": "owner-1", "conversation_id": conversation_id, "message": message},
    )


def test_shareable_report(client, fakes, conversation_id):
    _ask(client, conversation_id, "How is the coffee?")

    resp = client.post(
        "/api/report/generate-shareable-report",
        json={
            "user_id": "owner-1",
            "conversation_id": conversation_id,
            "priorities": [{"priority": "high", "title": "Keep <quality>", "action": "Train baristas"}],
            "additional_notes": "Review in May",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert "[HIGH] Keep &lt;quality&gt;" in body["html"]
    assert "Review in May" in body["html"]
    assert body["metadata"]["priority_count"] == 1
    assert body["metadata"]["conversation_length"] == 2


def test_shareable_summary(client, fakes, conversation_id):
    _ask(client, conversation_id, "How is the coffee?")

    resp = client.post(
        "/api/report/generate-shareable-summary",
        json={"user_id": "owner-1", "conversation_id": conversation_id},
    )

    assert resp.status_code == 200
    assert fakes.ai_answer in resp.json()["html"]
    assert resp.json()["metadata"]["priority_count"] == 0


def test_report_rejects_unknown_priority_level(client, conversation_id):
    resp = client.post(
        "/api/report/generate-shareable-report",
        json={
            "user_id": "owner-1",
            "conversation_id": conversation_id,
            "priorities": [{"priority": "urgent", "title": "x"}],
        },
    )
    assert resp.status_code == 422


def test_report_for_unknown_conversation(client):
    resp = client.post(
        "/api/report/generate-shareable-summary",
        json={"user_id": "owner-1", "conversation_id": "conv_missing"},
    )
    assert resp.status_code == 404


def test_priorities_for_empty_conversation(client, conversation_id):
    resp = client.post(
        "/api/report/generate-priorities",
        json={"user_id": "owner-1", "conversation_id": conversation_id},
    )

    assert resp.status_code == 200
    assert resp.json()["priorities"] == []


def test_summary_endpoint(client, fakes, conversation_id):
    _ask(client, conversation_id, "How is the coffee?")

    resp = client.post("/api/report/summary", json={"user_id": "owner-1", "conversation_id": conversation_id})

    assert resp.status_code == 200
    assert resp.json()["summary"] == fakes.chat_reply
    assert resp.json()["conversation_length"] == 2


def test_action_items_need_priorities(client):
    assert client.post("/api/report/action-items", json={"priorities": []}).status_code == 422


# ── Memory ───────────────────────────────────────────────

def test_memory_summary(client, fakes, conversation_id):
    _ask(client, conversation_id, "How is the coffee?")

    body = client.get("/api/memory/summary/owner-1").json()

    assert body["count"] == 1
    assert body["summary"][0]["topics"] == ["How is the coffee?..."]


def test_memory_compare_excludes_current(client, fakes, conversation_id):
    resp = client.post("/api/memory/compare", json={"user_id": "owner-1", "conversation_id": conversation_id})

    assert resp.status_code == 200
    assert resp.json()["conversations_analyzed"] == 0
    assert fakes.chats == []


def test_memory_insight_rejects_bad_date(client):
    resp = client.post("/api/memory/insight", json={"user_id": "owner-1", "topic": "parking", "on_date": "soon"})
    assert resp.status_code == 422


# ── Analysis ─────────────────────────────────────────────

def test_compare_businesses_needs_two(client):
    resp = client.post("/api/analysis/compare-businesses", json={"business_ids": ["a"], "query": "coffee?"})
    assert resp.status_code == 422


def test_compare_businesses(client, fakes):
    resp = client.post(
        "/api/analysis/compare-businesses",
        json={"business_ids": ["a", "b"], "query": "How is the coffee?"},
    )

    assert resp.status_code == 200
    assert resp.json()["results"] == [
        {"business_id": "a", "answer": fakes.ai_answer},
        {"business_id": "b", "answer": fakes.ai_answer},
    ]


def test_competitors_upstream_failure_is_502(client, monkeypatch):
    async def failing(business_id):
        raise YelpServiceError("Failed to get business details: HTTP 503")

    monkeypatch.setattr(yelp_service, "get_business_details", failing)
    resp = client.post("/api/analysis/competitors", json={"business_id": "golden-spoon-sf"})

    assert resp.status_code == 502
