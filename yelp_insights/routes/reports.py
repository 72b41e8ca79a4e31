"""
Report endpoints: priorities, shareable HTML reports, summaries, insights.
"""

from fastapi import APIRouter, Depends

from yelp_insights.agents import priority_agent, report_agent
from yelp_insights.models.conversation import ConversationStore, get_conversation_store
from yelp_insights.models.schemas import (
    ActionItemsRequest,
    ConversationRef,
    PrioritiesResponse,
    ReportResponse,
    ShareableReportRequest,
    SummaryResponse,
)
from yelp_insights.routes.dependencies import business_context, conversation_or_404

router = APIRouter(prefix="/api/report", tags=["report"])


@router.post("/generate-priorities", response_model=PrioritiesResponse)
async def generate_priorities(
    req: ConversationRef,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    result = await priority_agent.generate_priorities(conversation.messages, business_context(conversation))
    return PrioritiesResponse(priorities=result["priorities"], generated_at=result["generated_at"])


@router.post("/generate-shareable-summary", response_model=ReportResponse)
async def generate_shareable_summary(
    req: ConversationRef,
    store: ConversationStore = Depends(get_conversation_store),
):
    """Conversation-only report: takeaways and the question/insight list."""
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    result = await report_agent.format_shareable_report(conversation, None, "", business_context(conversation))
    return ReportResponse(html=result["html"], metadata=result["metadata"])


@router.post("/generate-shareable-report", response_model=ReportResponse)
async def generate_shareable_report(
    req: ShareableReportRequest,
    store: ConversationStore = Depends(get_conversation_store),
):
    """Full report with priorities and the owner's notes."""
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    result = await report_agent.format_shareable_report(
        conversation,
        [p.model_dump() for p in req.priorities],
        req.additional_notes,
        business_context(conversation),
    )
    return ReportResponse(html=result["html"], metadata=result["metadata"])


@router.post("/summary", response_model=SummaryResponse)
async def conversation_summary(
    req: ConversationRef,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    result = await report_agent.generate_summary(conversation.messages, business_context(conversation))
    return SummaryResponse(
        summary=result["summary"],
        conversation_length=result["conversation_length"],
        generated_at=result["generated_at"],
    )


@router.post("/insights")
async def key_insights(
    req: ConversationRef,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    result = await report_agent.extract_key_insights(conversation.messages)
    return {"success": True, "insights": result["insights"]}


@router.post("/action-items")
async def action_items(req: ActionItemsRequest):
    result = await report_agent.generate_action_items([p.model_dump() for p in req.priorities])
    return {"success": True, "action_items": result["action_items"]}
