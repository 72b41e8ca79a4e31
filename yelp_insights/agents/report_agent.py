"""
Report agent: executive summaries, key insights, action items and the
shareable HTML report.
"""

import json
from typing import Any, Dict, List, Optional

from loguru import logger

from yelp_insights.models.conversation import Conversation, Message
from yelp_insights.services import ai_service, report_service, yelp_service
from yelp_insights.services.errors import YelpServiceError

NAME = "Report_Agent"

SUMMARY_PROMPT = """You are a business analyst creating executive summaries.
Summarize the key insights from this conversation in a clear, professional format.
Focus on actionable insights and important findings.
Keep it concise but comprehensive."""

INSIGHTS_PROMPT = """You are an analyst extracting key insights from business intelligence data.
Return JSON with array of insights, each having: category, insight, importance (1-5)."""

ACTION_ITEMS_PROMPT = """You are a project manager creating actionable task lists.
Convert priorities into specific, measurable action items with clear next steps.
Return JSON with an "actionItems" array; each item has task, owner, deadline and success_metric."""


async def generate_summary(messages: List[Message], business_context: Dict[str, str]) -> Dict[str, Any]:
    logger.info(f"{NAME}: generating conversation summary")

    conversation_text = "\n".join(
        f"{idx}. {'Q' if m.role == 'user' else 'A'}: {m.content}"
        for idx, m in enumerate(messages, start=1)
    )
    summary = await ai_service.chat(
        [
            {
                "role": "user",
                "content": (
                    f"Business: {business_context.get('business_name')}\n\n"
                    f"Conversation:\n{conversation_text}\n\n"
                    "Create an executive summary highlighting key insights and findings."
                ),
            }
        ],
        SUMMARY_PROMPT,
    )

    return {
        "summary": summary,
        "conversation_length": len(messages),
        "generated_at": report_service.generated_at(),
        "source": "report_summary",
    }


async def extract_key_insights(messages: List[Message]) -> Dict[str, Any]:
    logger.info(f"{NAME}: extracting key insights")

    analysis = "\n\n".join(m.content for m in messages if m.role == "assistant")
    if not analysis:
        return {"insights": [], "source": "key_insights"}

    result = await ai_service.chat_json(
        [{"role": "user", "content": f"Extract 5-10 key insights from this analysis:\n\n{analysis}"}],
        INSIGHTS_PROMPT,
    )
    return {"insights": result.get("insights") or [], "source": "key_insights"}


async def _charts_for(conversation: Conversation) -> List[Dict[str, Any]]:
    if not report_service.wants_chart(conversation.messages):
        return []
    try:
        reviews = await yelp_service.get_business_reviews(conversation.business_id)
    except YelpServiceError as e:
        logger.warning(f"{NAME}: skipping chart, reviews unavailable: {e}")
        return []
    chart = report_service.build_rating_chart(reviews)
    return [chart] if chart else []


async def format_shareable_report(
    conversation: Conversation,
    priorities: Optional[List[Dict[str, Any]]],
    additional_notes: str,
    business_context: Dict[str, str],
) -> Dict[str, Any]:
    """
    Render the conversation as a standalone HTML page. With priorities the
    page also carries the action plan and notes.
    """
    logger.info(f"{NAME}: formatting shareable report")

    business_name = business_context.get("business_name") or conversation.business_name
    charts = await _charts_for(conversation)

    if priorities:
        html = report_service.format_shareable_priority_report(
            conversation, priorities, business_name, additional_notes, charts
        )
    else:
        html = report_service.format_shareable_conversation(conversation, business_name, charts)

    return {
        "html": html,
        "metadata": {
            "business_name": business_name,
            "generated_at": report_service.generated_at(),
            "conversation_length": len(conversation.messages),
            "priority_count": len(priorities or []),
            "has_notes": bool(additional_notes),
            "has_charts": bool(charts),
        },
        "source": "shareable_report",
    }


async def generate_action_items(priorities: List[Dict[str, Any]]) -> Dict[str, Any]:
    logger.info(f"{NAME}: generating action items list")

    if not priorities:
        return {"action_items": [], "source": "action_items"}

    result = await ai_service.chat_json(
        [
            {
                "role": "user",
                "content": (
                    "Convert these priorities into specific action items:\n"
                    f"{json.dumps(priorities, indent=2)}\n\n"
                    "Make each action item specific, measurable, and time-bound when possible."
                ),
            }
        ],
        ACTION_ITEMS_PROMPT,
    )
    return {"action_items": result.get("actionItems") or result.get("action_items") or [], "source": "action_items"}
