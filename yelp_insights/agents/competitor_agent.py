"""
Competitor agent: nearby businesses in the same category, positioning
analysis and SWOT.
"""

from typing import Any, Dict, Optional

from loguru import logger

from yelp_insights.services import ai_service, yelp_service
from yelp_insights.services.errors import YelpServiceError

DEFAULT_RADIUS_METERS = 8046.72  # 5 miles
MAX_RADIUS_METERS = 40000  # Yelp search limit
METERS_PER_MILE = 1609.34
TOP_COMPETITORS = 5


class CompetitorAnalysisError(YelpServiceError):
    pass


async def find_competitors(business_id: str, radius: float = DEFAULT_RADIUS_METERS) -> Dict[str, Any]:
    details = await yelp_service.get_business_details(business_id)

    categories = details.get("categories") or []
    category = categories[0].get("alias") if categories else None
    if not category:
        raise CompetitorAnalysisError("Cannot determine business category for competitor search")

    coordinates = details.get("coordinates") or {}
    effective_radius = int(min(radius, MAX_RADIUS_METERS))
    nearby = await yelp_service.search_nearby(
        category,
        coordinates.get("latitude"),
        coordinates.get("longitude"),
        effective_radius,
    )

    competitors = [b for b in nearby if b.get("id") != business_id][:TOP_COMPETITORS]
    logger.info(f"Found {len(competitors)} competitor(s) for {business_id} in '{category}'")

    return {
        "competitors": competitors,
        "category": category,
        "radius_miles": round(effective_radius / METERS_PER_MILE, 1),
    }


def _average_rating(competitors) -> Optional[float]:
    ratings = [c["rating"] for c in competitors if c.get("rating") is not None]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 2)


async def analyze_competition(business_id: str, query: str, radius: float = DEFAULT_RADIUS_METERS) -> Dict[str, Any]:
    details = await yelp_service.get_business_details(business_id)
    competitor_data = await find_competitors(business_id, radius)
    competitors = competitor_data["competitors"]

    competitor_summary = "\n".join(
        f"- {c.get('name')}: {c.get('rating')} stars ({c.get('review_count')} reviews), "
        f"{c.get('price') or 'N/A'} price range"
        for c in competitors
    )
    system_prompt = f"""You are analyzing competitive positioning for {details.get('name')}.

Your business:
- Rating: {details.get('rating')} stars
- Reviews: {details.get('review_count')}
- Price: {details.get('price') or 'N/A'}

Top competitors within {competitor_data['radius_miles']:.1f} miles:
{competitor_summary or '- none found'}

Provide a concise competitive analysis addressing: {query}"""

    analysis = await ai_service.chat([{"role": "user", "content": query}], system_prompt)

    return {
        "analysis": analysis,
        "competitors": competitors,
        "business_rating": details.get("rating"),
        "average_competitor_rating": _average_rating(competitors),
    }


async def generate_swot(business_id: str) -> Dict[str, Any]:
    details = await yelp_service.get_business_details(business_id)
    reviews = await yelp_service.get_business_reviews(business_id)
    competitor_data = await find_competitors(business_id)

    review_lines = "\n".join(
        f'- {r.get("rating")} stars: "{(r.get("text") or "")[:100]}..."' for r in reviews[:5]
    )
    competitor_lines = "\n".join(
        f"- {c.get('name')}: {c.get('rating')} stars" for c in competitor_data["competitors"][:3]
    )
    categories = ", ".join(c.get("title", "") for c in details.get("categories") or [])

    system_prompt = f"""Generate a SWOT analysis for {details.get('name')} based on their Yelp data.

Business Info:
- Rating: {details.get('rating')} stars ({details.get('review_count')} reviews)
- Price: {details.get('price') or 'N/A'}
- Categories: {categories}

Recent Reviews Summary:
{review_lines}

Competitors:
{competitor_lines}

Return a JSON object with this structure:
{{
  "strengths": ["strength 1", "strength 2"],
  "weaknesses": ["weakness 1", "weakness 2"],
  "opportunities": ["opportunity 1", "opportunity 2"],
  "threats": ["threat 1", "threat 2"]
}}"""

    swot = await ai_service.chat_json([{"role": "user", "content": "Generate SWOT analysis"}], system_prompt)
    return {
        key: swot[key] if isinstance(swot.get(key), list) else []
        for key in ("strengths", "weaknesses", "opportunities", "threats")
    }
