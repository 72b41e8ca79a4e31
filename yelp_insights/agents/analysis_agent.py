"""
Analysis agent: fans several Yelp AI questions out concurrently and asks GPT
to compare or summarise the answers.
"""

import asyncio
from typing import Any, Dict, List

from loguru import logger

from yelp_insights.services import ai_service, yelp_service

NAME = "Analysis_Agent"

TIME_PERIOD_PROMPT = """You are an analyst comparing customer feedback across time periods.
Identify trends, changes, improvements or declines. Be specific with examples."""

METRICS_PROMPT = """You are a data analyst. Extract numerical data, percentages, and metrics from the text.
Calculate changes, trends, and present findings clearly. Format as JSON with keys: metrics, trends, summary."""

PATTERNS_PROMPT = """You are a business analyst identifying patterns and themes across customer feedback.
Look for recurring issues, common praise, and actionable insights."""


async def analyze_time_periods(topic: str, business_id: str, timeframe1: str, timeframe2: str) -> Dict[str, Any]:
    logger.info(f"{NAME}: analyzing {topic} across {timeframe1} vs {timeframe2}")

    first, second = await asyncio.gather(
        yelp_service.ai_query(f"What did customers say about {topic} {timeframe1}?", business_id),
        yelp_service.ai_query(f"What did customers say about {topic} {timeframe2}?", business_id),
    )

    messages = [
        {
            "role": "user",
            "content": (
                f"Compare these two time periods for {topic}:\n\n"
                f"Period 1 ({timeframe1}): {first['answer']}\n\n"
                f"Period 2 ({timeframe2}): {second['answer']}\n\n"
                "Provide a clear analysis of what changed, improved, or declined."
            ),
        }
    ]
    analysis = await ai_service.chat(messages, TIME_PERIOD_PROMPT)

    return {
        "topic": topic,
        "timeframe1": timeframe1,
        "timeframe2": timeframe2,
        "period1_data": first["answer"],
        "period2_data": second["answer"],
        "analysis": analysis,
        "source": "temporal_comparison",
    }


async def calculate_metrics(topic: str, business_id: str) -> Dict[str, Any]:
    logger.info(f"{NAME}: calculating metrics for {topic}")

    result = await yelp_service.ai_query(
        f"What are the statistics and numbers related to {topic}?", business_id
    )
    messages = [
        {
            "role": "user",
            "content": f"Extract and analyze metrics from this data about {topic}: {result['answer']}",
        }
    ]
    metrics = await ai_service.chat_json(messages, METRICS_PROMPT)

    return {
        "topic": topic,
        "metrics": metrics.get("metrics"),
        "trends": metrics.get("trends"),
        "summary": metrics.get("summary"),
        "source": "metrics_analysis",
    }


async def identify_patterns(queries: List[str], business_id: str) -> Dict[str, Any]:
    logger.info(f"{NAME}: identifying patterns across {len(queries)} queries")

    results = await asyncio.gather(*(yelp_service.ai_query(q, business_id) for q in queries))

    combined = "\n\n".join(
        f"Query {idx}: {q}\nResponse: {r['answer']}"
        for idx, (q, r) in enumerate(zip(queries, results), start=1)
    )
    messages = [
        {
            "role": "user",
            "content": f"Identify key patterns, themes, and insights from this customer feedback:\n\n{combined}",
        }
    ]
    patterns = await ai_service.chat(messages, PATTERNS_PROMPT)

    return {
        "queries": queries,
        "patterns": patterns,
        "individual_results": [r["answer"] for r in results],
        "source": "pattern_analysis",
    }
