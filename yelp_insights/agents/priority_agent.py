"""
Priority agent: turns the insights of a conversation into ranked action items.
"""

from typing import Any, Dict, List

from loguru import logger

from yelp_insights.models.conversation import Message
from yelp_insights.services import ai_service
from yelp_insights.services.report_service import PRIORITY_LEVELS, generated_at

NAME = "Priority_Agent"
MAX_PRIORITIES = 5

SYSTEM_PROMPT = f"""You are a business consultant helping a business owner decide what to work on first.
From the conversation about their Yelp reviews, identify the most important issues and opportunities.
Return JSON: {{"priorities": [{{"priority": "high" | "medium" | "low", "title": "...", "action": "..."}}]}}
List at most {MAX_PRIORITIES} priorities, most important first. Each action must be concrete."""


def _normalise(item: Any) -> Dict[str, str]:
    if not isinstance(item, dict):
        return {"priority": "medium", "title": str(item), "action": ""}
    level = str(item.get("priority", "")).lower()
    return {
        "priority": level if level in PRIORITY_LEVELS else "medium",
        "title": str(item.get("title") or "").strip(),
        "action": str(item.get("action") or "").strip(),
    }


async def generate_priorities(messages: List[Message], business_context: Dict[str, str]) -> Dict[str, Any]:
    if not any(m.role == "assistant" for m in messages):
        logger.info(f"{NAME}: no insights in conversation yet, skipping")
        return {"priorities": [], "generated_at": generated_at()}

    logger.info(f"{NAME}: generating priorities for {business_context.get('business_name')}")
    conversation_text = "\n".join(
        f"{'Q' if m.role == 'user' else 'A'}: {m.content}" for m in messages
    )
    result = await ai_service.chat_json(
        [
            {
                "role": "user",
                "content": (
                    f"Business: {business_context.get('business_name')}\n\n"
                    f"Conversation:\n{conversation_text}"
                ),
            }
        ],
        SYSTEM_PROMPT,
    )

    priorities = [_normalise(p) for p in result.get("priorities") or []]
    priorities = [p for p in priorities if p["title"]][:MAX_PRIORITIES]
    return {"priorities": priorities, "generated_at": generated_at()}
