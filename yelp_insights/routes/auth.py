"""
Business lookup used at sign-in: the owner identifies their business by
name + city + state, optionally narrowed by phone or street address.
"""

from fastapi import APIRouter
from loguru import logger

from yelp_insights.models.schemas import BusinessSearchRequest, BusinessSearchResponse, BusinessSummary
from yelp_insights.services import yelp_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/search-business", response_model=BusinessSearchResponse)
async def search_business(req: BusinessSearchRequest):
    logger.info(f"Searching for business: '{req.business_name}' in {req.city}, {req.state}")

    result = await yelp_service.find_business(
        req.business_name, req.city, req.state, req.phone or None, req.address or None
    )

    if "business" in result:
        logger.info(f"Single business found: {result['business'].get('name')}")
        return BusinessSearchResponse(
            source=result["source"],
            business=BusinessSummary.model_validate(result["business"]),
        )

    logger.info(f"Multiple businesses found: {len(result['businesses'])}")
    return BusinessSearchResponse(
        source=result["source"],
        businesses=[BusinessSummary.model_validate(b) for b in result["businesses"]],
    )
