"""
Yelp Fusion + Yelp AI client.

Business search / match / details / reviews go to the Fusion API; natural
language questions go to the Yelp AI chat endpoint, which keeps multi-turn
context through a chat_id.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from yelp_insights.config import settings
from yelp_insights.services.errors import BusinessNotFoundError, YelpServiceError

_PHONE_STRIP = re.compile(r"[\s\-()]")


def _build_client() -> httpx.AsyncClient:
    if not settings.YELP_API_KEY:
        raise YelpServiceError("Yelp integration is not configured (YELP_API_KEY)")
    return httpx.AsyncClient(
        headers={"Authorization": f"Bearer {settings.YELP_API_KEY}"},
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def _error_detail(exc: Exception) -> str:
    """Prefer Yelp's own error description over the transport message."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            return f"HTTP {exc.response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            description = error.get("description")
        else:
            description = error if isinstance(error, str) else None
        return description or f"HTTP {exc.response.status_code}"
    return str(exc)


async def _get(path: str, params: Optional[dict] = None) -> dict:
    async with _build_client() as client:
        response = await client.get(f"{settings.YELP_API_URL}{path}", params=params)
        response.raise_for_status()
        return response.json()


def clean_phone(phone: str) -> str:
    return _PHONE_STRIP.sub("", phone)


# ── Business lookup ──────────────────────────────────────

async def search_businesses_by_location(business_name: str, city: str, state: str) -> List[dict]:
    """Search by name and "<city>, <state>"; returns up to ten candidates."""
    logger.info(f"Yelp business search: '{business_name}' in {city}, {state}")
    try:
        data = await _get(
            "/businesses/search",
            {"term": business_name, "location": f"{city}, {state}", "limit": 10},
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp business search error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to search businesses: {_error_detail(e)}") from e

    businesses = data.get("businesses") or []
    logger.info(f"Found {len(businesses)} business(es)")
    return businesses


async def search_business_by_match(
    business_name: str,
    city: str,
    state: str,
    phone: Optional[str] = None,
    address: Optional[str] = None,
) -> dict:
    """Business Match API: exact match on name + city + state (+ phone / address)."""
    params = {"name": business_name, "city": city, "state": state, "country": "US"}
    if phone:
        params["phone"] = f"+1{clean_phone(phone)}"
    if address:
        params["address1"] = address

    logger.info(f"Yelp business match: {params}")
    try:
        data = await _get("/businesses/matches", params)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp business match error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to match business: {_error_detail(e)}") from e

    businesses = data.get("businesses") or []
    if not businesses:
        raise BusinessNotFoundError(
            "Failed to match business: Business not found with the provided information"
        )
    logger.info(f"Matched business: {businesses[0].get('name')}")
    return businesses[0]


def _filter_candidates(businesses: List[dict], phone: Optional[str], address: Optional[str]) -> List[dict]:
    cleaned = clean_phone(phone) if phone else None
    needle = address.lower() if address else None

    def matches(business: dict) -> bool:
        phone_match = bool(cleaned and business.get("phone") and cleaned in business["phone"])
        address1 = ((business.get("location") or {}).get("address1") or "").lower()
        address_match = bool(needle and needle in address1)
        return phone_match or address_match

    return [b for b in businesses if matches(b)]


async def find_business(
    business_name: str,
    city: str,
    state: str,
    phone: Optional[str] = None,
    address: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Combined lookup: Business Match first when phone/address are known, then a
    regular search narrowed by phone/address.

    Returns {"business": {...}, "source": ...} for a single hit or
    {"businesses": [...], "source": ...} when the caller has to choose.
    """
    if phone or address:
        try:
            business = await search_business_by_match(business_name, city, state, phone, address)
            return {"business": business, "source": "match"}
        except YelpServiceError as e:
            logger.info(f"Business Match failed, falling back to search: {e}")

    businesses = await search_businesses_by_location(business_name, city, state)
    if not businesses:
        raise BusinessNotFoundError("No businesses found matching your search")

    if phone or address:
        filtered = _filter_candidates(businesses, phone, address)
        if len(filtered) == 1:
            return {"business": filtered[0], "source": "search_filtered"}
        if filtered:
            return {"businesses": filtered, "source": "search_filtered"}

    if len(businesses) == 1:
        return {"business": businesses[0], "source": "search"}
    return {"businesses": businesses, "source": "search"}


async def get_business_details(business_id: str) -> dict:
    try:
        return await _get(f"/businesses/{business_id}")
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp business details error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to get business details: {_error_detail(e)}") from e


async def get_business_reviews(business_id: str) -> List[dict]:
    try:
        data = await _get(
            f"/businesses/{business_id}/reviews",
            {"limit": 50, "sort_by": "yelp_sort"},
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp reviews error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to get reviews: {_error_detail(e)}") from e
    return data.get("reviews") or []


async def search_nearby(
    category: str,
    latitude: float,
    longitude: float,
    radius: int,
    limit: int = 10,
    sort_by: str = "rating",
) -> List[dict]:
    """Businesses in a category around a point; radius in meters."""
    try:
        data = await _get(
            "/businesses/search",
            {
                "categories": category,
                "latitude": latitude,
                "longitude": longitude,
                "radius": radius,
                "limit": limit,
                "sort_by": sort_by,
            },
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp nearby search error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to search nearby businesses: {_error_detail(e)}") from e
    return data.get("businesses") or []


# ── Yelp AI ──────────────────────────────────────────────

def _extract_answer(data: dict) -> str:
    response = data.get("response")
    if isinstance(response, dict) and response.get("text"):
        return response["text"]
    if isinstance(response, str) and response:
        return response
    return "No response available"


async def ai_query(
    query: str,
    business_id: Optional[str],
    chat_id: Optional[str] = None,
    user_context: Optional[dict] = None,
) -> Dict[str, Any]:
    """
    Ask Yelp AI a natural-language question.

    On the first turn of a chat the question is pinned to the business by
    name, address and id so Yelp AI does not ask "which location?".
    """
    payload: Dict[str, Any] = {"query": query}
    if chat_id:
        payload["chat_id"] = chat_id
    if user_context:
        payload["user_context"] = user_context

    if business_id and not chat_id:
        details = await get_business_details(business_id)
        location = details.get("location") or {}
        payload["query"] = (
            f'Answer this question about the specific business "{details.get("name")}" '
            f'located at {location.get("address1")}, {location.get("city")} '
            f"(Business ID: {business_id}): {query}"
        )
        coordinates = details.get("coordinates")
        if coordinates:
            payload["user_context"] = {
                "latitude": coordinates.get("latitude"),
                "longitude": coordinates.get("longitude"),
                "locale": "en_US",
            }

    logger.debug(f"Yelp AI request: {json.dumps(payload)}")
    try:
        async with _build_client() as client:
            response = await client.post(settings.YELP_AI_URL, json=payload)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Yelp AI query error: {_error_detail(e)}")
        raise YelpServiceError(f"Failed to query Yelp AI: {_error_detail(e)}") from e

    logger.debug(f"Yelp AI response: {json.dumps(data)[:500]}")
    response_body = data.get("response")
    return {
        "answer": _extract_answer(data),
        "chat_id": data.get("chat_id"),
        "entities": data.get("entities") or [],
        "types": data.get("types") or [],
        "tags": (response_body.get("tags") if isinstance(response_body, dict) else None) or [],
    }


async def compare_businesses(business_ids: List[str], query: str) -> List[Dict[str, Any]]:
    """Ask the same question about several businesses concurrently."""

    async def ask(business_id: str) -> Dict[str, Any]:
        details = await get_business_details(business_id)
        return await ai_query(f"Regarding {details.get('name')}: {query}", business_id)

    return list(await asyncio.gather(*(ask(b) for b in business_ids)))
