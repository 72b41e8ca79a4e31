"""
Endpoints over the user's past conversations.
"""

from fastapi import APIRouter, Depends

from yelp_insights.agents import memory_agent
from yelp_insights.models.conversation import ConversationStore, get_conversation_store
from yelp_insights.models.schemas import ConversationRef, InsightRequest
from yelp_insights.routes.dependencies import conversation_or_404

router = APIRouter(prefix="/api/memory", tags=["memory"])


@router.post("/insight")
async def find_insight(
    req: InsightRequest,
    store: ConversationStore = Depends(get_conversation_store),
):
    result = await memory_agent.find_insight(req.topic, req.on_date, store.get_all_conversations(req.user_id))
    return {"success": True, **result}


@router.post("/compare")
async def compare_with_history(
    req: ConversationRef,
    store: ConversationStore = Depends(get_conversation_store),
):
    """Compare what this conversation found with the user's earlier ones."""
    conversation = conversation_or_404(store, req.user_id, req.conversation_id)
    current = "\n".join(m.content for m in conversation.messages if m.role == "assistant")
    history = [c for c in store.get_all_conversations(req.user_id) if c.id != conversation.id]

    result = await memory_agent.compare_with_history(current, history)
    return {"success": True, **result}


@router.get("/summary/{user_id}")
async def conversations_summary(
    user_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    return {"success": True, **memory_agent.get_conversations_summary(store.get_all_conversations(user_id))}
