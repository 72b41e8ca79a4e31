"""
Query routing for business-owner questions.

Order of precedence:
1. temporal questions ("in 2022", "last month", ...) are answered with a
   general Yelp AI answer behind a guardrail, since reviews cannot be
   filtered by date;
2. simple fact questions (rating, hours, phone, ...) are answered straight
   from the business details;
3. everything else goes to Yelp AI.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger

from yelp_insights.services import yelp_service

# Checked in order; the first fact type with a matching keyword wins.
FACT_KEYWORDS = {
    "rating": ["rating", "stars", "star rating", "rated", "score"],
    "reviews": ["how many reviews", "review count", "number of reviews"],
    "hours": ["hours", "open", "close", "opening hours", "business hours"],
    "phone": ["phone", "phone number", "contact", "call"],
    "address": ["address", "location", "where located"],
    "price": ["price range", "how expensive", "pricing", "cost"],
}

TEMPORAL_PATTERNS = [
    re.compile(r"\b(20\d{2})\b"),
    re.compile(r"\b(last|this|previous|next)\s+(year|month|quarter|week)\b", re.IGNORECASE),
    re.compile(r"\b(since|before|after|in|during)\s+(20\d{2})\b", re.IGNORECASE),
    re.compile(r"\byear[\s-]over[\s-]year\b", re.IGNORECASE),
    re.compile(r"\byearly\b", re.IGNORECASE),
    re.compile(r"\bannual(ly)?\b", re.IGNORECASE),
    re.compile(r"\bfrom\s+\d{4}\s+to\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\bbetween\s+.+\s+and\s+.+\b", re.IGNORECASE),
    re.compile(
        r"\b(january|february|march|april|may|june|july|august|september|october|november|december)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b", re.IGNORECASE),
    re.compile(r"\bover\s+time\b", re.IGNORECASE),
    re.compile(r"\bhistorical(ly)?\b", re.IGNORECASE),
    re.compile(r"\btrend(s)?\s+(over|across|from)\b", re.IGNORECASE),
    re.compile(r"\bcompare\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\bQ[1-4]\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\bfiscal\s+year\b", re.IGNORECASE),
]

GUARDRAIL_MESSAGE = (
    "I can't reliably filter reviews or ratings by specific dates or time periods. "
    "However, I can share what I know overall: "
)


def contains_temporal_query(query: str) -> bool:
    lower = query.lower()
    return any(pattern.search(lower) for pattern in TEMPORAL_PATTERNS)


def extract_core_topic(query: str) -> str:
    """Reduce a temporal question to the topic it is about."""
    lower = query.lower()

    if "rating" in lower or "star" in lower:
        return "rating"
    if "review" in lower:
        return "reviews"
    if any(w in lower for w in ("complaint", "negative", "problem")):
        return "complaints"
    if any(w in lower for w in ("praise", "positive", "love")):
        return "positive feedback"
    if "service" in lower:
        return "service quality"
    if "food" in lower or "menu" in lower:
        return "food and menu"
    return "overall customer feedback"


def general_question_for(topic: str) -> str:
    if topic == "rating":
        return "What is the overall rating and what do customers say?"
    if topic == "reviews":
        return "What themes and trends appear in customer reviews?"
    return f"What do customers say about {topic}?"


def detect_fact_question(query: str) -> Optional[str]:
    lower = query.lower()
    for fact_type, keywords in FACT_KEYWORDS.items():
        if any(keyword in lower for keyword in keywords):
            return fact_type
    return None


def format_time(military_time: str) -> str:
    """'1730' -> '5:30 PM', '0000' -> '12:00 AM'."""
    hours = int(military_time[:2])
    minutes = military_time[2:]
    ampm = "PM" if hours >= 12 else "AM"
    if hours > 12:
        standard = hours - 12
    elif hours == 0:
        standard = 12
    else:
        standard = hours
    return f"{standard}:{minutes} {ampm}"


def _hours_answer(details: dict, today: int) -> str:
    hours = details.get("hours") or []
    if hours:
        for slot in hours[0].get("open") or []:
            if slot.get("day") == today:
                return f"Today you're open from {format_time(slot['start'])} to {format_time(slot['end'])}."
    return f"Hours information is available on your Yelp page at {details.get('url')}"


async def extract_direct_answer(fact_type: str, business_id: str, now: Optional[datetime] = None) -> Optional[str]:
    """
    Answer a fact question from the business details.
    Returns None when the answer cannot be built, so the caller falls back to Yelp AI.
    """
    try:
        details = await yelp_service.get_business_details(business_id)
        rating = details.get("rating")
        review_count = details.get("review_count") or 0

        if fact_type == "rating":
            return f"Your business has a **{rating} star rating** based on {review_count:,} reviews."

        if fact_type == "reviews":
            return f"Your business has **{review_count:,} reviews** on Yelp with an average rating of {rating} stars."

        if fact_type == "hours":
            # Yelp numbers days Monday=0 .. Sunday=6, same as datetime.weekday()
            today = (now or datetime.now()).weekday()
            return _hours_answer(details, today)

        if fact_type == "phone":
            phone = details.get("display_phone") or details.get("phone")
            return f"Your business phone number is **{phone}**."

        if fact_type == "address":
            addr = details.get("location") or {}
            street = addr.get("address1") or ""
            if addr.get("address2"):
                street += f", {addr['address2']}"
            return (
                f"Your business is located at **{street}, {addr.get('city')}, "
                f"{addr.get('state')} {addr.get('zip_code')}**."
            )

        if fact_type == "price":
            price = details.get("price") or "Not specified"
            return f"Your business is listed as **{price}** price range on Yelp."

    except Exception as e:
        logger.error(f"Direct answer extraction error: {e}")
        return None

    return None


async def query(user_query: str, business_id: str, chat_id: Optional[str] = None) -> Dict[str, Any]:
    """Route one question; returns answer, chat_id, entities and source."""
    logger.info(f"Query_Agent: processing query for business {business_id}")

    if contains_temporal_query(user_query):
        topic = extract_core_topic(user_query)
        logger.info(f"Query_Agent: temporal query detected (topic={topic}), applying guardrail")
        result = await yelp_service.ai_query(general_question_for(topic), business_id, chat_id)
        return {
            "answer": GUARDRAIL_MESSAGE + result["answer"],
            "chat_id": result.get("chat_id"),
            "entities": result.get("entities", []),
            "source": "yelp_ai_guardrail",
        }

    fact_type = detect_fact_question(user_query)
    if fact_type:
        answer = await extract_direct_answer(fact_type, business_id)
        if answer:
            logger.info(f"Query_Agent: returning direct answer for {fact_type}")
            return {"answer": answer, "chat_id": chat_id, "entities": [], "source": "direct"}

    logger.info("Query_Agent: using Yelp AI for analytical query")
    result = await yelp_service.ai_query(user_query, business_id, chat_id)
    return {
        "answer": result["answer"],
        "chat_id": result.get("chat_id"),
        "entities": result.get("entities", []),
        "source": "yelp_ai",
    }
