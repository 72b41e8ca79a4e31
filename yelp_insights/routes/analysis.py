"""
Deeper analysis endpoints: time-period comparison, metrics, patterns,
competitors and SWOT.
"""

from fastapi import APIRouter, Request

from yelp_insights.agents import analysis_agent, competitor_agent
from yelp_insights.middleware.rate_limit import QUERY_LIMIT, limiter
from yelp_insights.models.schemas import (
    BusinessRef,
    CompareBusinessesRequest,
    CompetitionRequest,
    CompetitorRequest,
    PatternsRequest,
    TimePeriodsRequest,
    TopicRequest,
)
from yelp_insights.services import yelp_service

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.post("/time-periods")
@limiter.limit(QUERY_LIMIT)
async def time_periods(request: Request, req: TimePeriodsRequest):
    result = await analysis_agent.analyze_time_periods(req.topic, req.business_id, req.timeframe1, req.timeframe2)
    return {"success": True, **result}


@router.post("/metrics")
@limiter.limit(QUERY_LIMIT)
async def metrics(request: Request, req: TopicRequest):
    result = await analysis_agent.calculate_metrics(req.topic, req.business_id)
    return {"success": True, **result}


@router.post("/patterns")
@limiter.limit(QUERY_LIMIT)
async def patterns(request: Request, req: PatternsRequest):
    result = await analysis_agent.identify_patterns(req.queries, req.business_id)
    return {"success": True, **result}


@router.post("/competitors")
async def competitors(req: CompetitorRequest):
    result = await competitor_agent.find_competitors(req.business_id, req.radius_meters)
    return {"success": True, **result}


@router.post("/competition")
@limiter.limit(QUERY_LIMIT)
async def competition(request: Request, req: CompetitionRequest):
    result = await competitor_agent.analyze_competition(req.business_id, req.query, req.radius_meters)
    return {"success": True, **result}


@router.post("/swot")
@limiter.limit(QUERY_LIMIT)
async def swot(request: Request, req: BusinessRef):
    return {"success": True, "swot": await competitor_agent.generate_swot(req.business_id)}


@router.post("/compare-businesses")
@limiter.limit(QUERY_LIMIT)
async def compare_businesses(request: Request, req: CompareBusinessesRequest):
    results = await yelp_service.compare_businesses(req.business_ids, req.query)
    return {
        "success": True,
        "results": [
            {"business_id": business_id, "answer": r["answer"]}
            for business_id, r in zip(req.business_ids, results)
        ],
    }
