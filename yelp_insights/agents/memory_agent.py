"""
Memory agent: answers questions about the user's earlier conversations.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from loguru import logger

from yelp_insights.models.conversation import Conversation
from yelp_insights.services import ai_service

NAME = "Memory_Agent"

MEMORY_KEYWORDS = ["last time", "previously", "before", "past conversation"]

SEARCH_PROMPT = """You are a memory retrieval assistant. Search through past conversations to find relevant information.
If found, quote the specific insight and mention when it was discussed.
If not found, clearly state it wasn't discussed."""

INSIGHT_PROMPT = """You are an insight retrieval assistant. Find the specific insight about the requested topic.
Quote the exact insight and provide context."""

COMPARE_PROMPT = """You are a trend analyst comparing current and historical business insights.
Identify what changed, what stayed the same, and notable trends."""


def is_memory_query(text: str) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in MEMORY_KEYWORDS)


def _transcript(conversations: List[Conversation], with_roles: bool = True, with_dates: bool = True) -> str:
    blocks = []
    for idx, conv in enumerate(conversations, start=1):
        lines = "\n".join(
            f"{m.role}: {m.content}" if with_roles else m.content for m in conv.messages
        )
        header = f"Conversation {idx}"
        if with_dates:
            header += f" ({conv.display_date()})"
        blocks.append(f"{header}:\n{lines}")
    return "\n\n---\n\n".join(blocks)


async def search_conversations(query: str, history: List[Conversation]) -> Dict[str, Any]:
    logger.info(f"{NAME}: searching conversations for '{query[:60]}'")

    if not history:
        return {"found": False, "message": "No past conversations found.", "source": "memory_search"}

    messages = [
        {
            "role": "user",
            "content": (
                f'Search these past conversations for: "{query}"\n\n'
                f"{_transcript(history)}\n\n"
                "What information was discussed about this topic?"
            ),
        }
    ]
    result = await ai_service.chat(messages, SEARCH_PROMPT)

    return {
        "found": True,
        "query": query,
        "result": result,
        "searched_conversations": len(history),
        "source": "memory_search",
    }


async def find_insight(topic: str, on_date: Optional[date], history: List[Conversation]) -> Dict[str, Any]:
    """Find what was said about a topic, optionally only in conversations started on one day."""
    logger.info(f"{NAME}: finding insight about '{topic}' from {on_date or 'any date'}")

    relevant = history
    if on_date:
        relevant = [conv for conv in history if conv.started_on == on_date]

    if not relevant:
        return {
            "found": False,
            "message": f"No conversations found for {on_date.isoformat() if on_date else 'that date'}.",
            "source": "insight_search",
        }

    messages = [
        {
            "role": "user",
            "content": (
                f'Find insights about "{topic}" from these conversations:\n\n'
                f"{_transcript(relevant, with_roles=False, with_dates=False)}"
            ),
        }
    ]
    insight = await ai_service.chat(messages, INSIGHT_PROMPT)

    return {
        "found": True,
        "topic": topic,
        "date": on_date.isoformat() if on_date else "unspecified",
        "insight": insight,
        "source": "insight_search",
    }


async def compare_with_history(current_insights: str, history: List[Conversation]) -> Dict[str, Any]:
    logger.info(f"{NAME}: comparing with history")

    if not history:
        return {"comparison": "No past conversations to compare.", "conversations_analyzed": 0, "source": "history_comparison"}

    recent = history[-5:]
    past = "\n\n".join(
        f"Past Session {idx} ({conv.display_date()}):\n"
        + "\n".join(m.content for m in conv.messages if m.role == "assistant")
        for idx, conv in enumerate(recent, start=1)
    )

    messages = [
        {
            "role": "user",
            "content": (
                "Compare current insights with history:\n\n"
                f"CURRENT INSIGHTS:\n{current_insights}\n\n"
                f"PAST INSIGHTS:\n{past}\n\n"
                "What trends, changes, or patterns do you see?"
            ),
        }
    ]
    comparison = await ai_service.chat(messages, COMPARE_PROMPT)

    return {"comparison": comparison, "conversations_analyzed": len(recent), "source": "history_comparison"}


def get_conversations_summary(history: List[Conversation]) -> Dict[str, Any]:
    """Date, size and opening words of each user question, per conversation."""
    if not history:
        return {"summary": "No past conversations.", "count": 0, "source": "conversations_summary"}

    summary = [
        {
            "date": conv.display_date(),
            "message_count": len(conv.messages),
            "topics": [m.content[:50] + "..." for m in conv.messages if m.role == "user"],
        }
        for conv in history
    ]
    return {"summary": summary, "count": len(history), "source": "conversations_summary"}
