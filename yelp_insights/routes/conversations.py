"""
Conversation lifecycle endpoints: start, list, fetch, activate, delete.
"""

from fastapi import APIRouter, Depends, HTTPException

from yelp_insights.models.conversation import ConversationStore, get_conversation_store
from yelp_insights.models.schemas import (
    ConversationListItem,
    ConversationResponse,
    HistoryResponse,
    StartConversationRequest,
    StartConversationResponse,
    StatusResponse,
)
from yelp_insights.routes.dependencies import conversation_or_404

router = APIRouter(prefix="/api/conversation", tags=["conversation"])


@router.post("/start", response_model=StartConversationResponse)
async def start_conversation(
    req: StartConversationRequest,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = store.create_conversation(req.user_id, req.business_id, req.business_name)
    return StartConversationResponse(conversation_id=conversation.id)


@router.get("/history/{user_id}", response_model=HistoryResponse)
async def conversation_history(
    user_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    return HistoryResponse(
        conversations=[
            ConversationListItem(
                id=conv.id,
                business_name=conv.business_name,
                timestamp=conv.timestamp,
                last_updated=conv.last_updated,
                message_count=len(conv.messages),
            )
            for conv in store.get_all_conversations(user_id)
        ]
    )


@router.get("/active/{user_id}", response_model=ConversationResponse)
async def active_conversation(
    user_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = store.get_active_conversation(user_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="No active conversation")
    return ConversationResponse(conversation=conversation)


@router.post("/{user_id}/{conversation_id}/activate", response_model=ConversationResponse)
async def activate_conversation(
    user_id: str,
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation_or_404(store, user_id, conversation_id)
    return ConversationResponse(conversation=store.set_active_conversation(user_id, conversation_id))


@router.get("/{user_id}/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    user_id: str,
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    return ConversationResponse(conversation=conversation_or_404(store, user_id, conversation_id))


@router.delete("/{user_id}/{conversation_id}", response_model=StatusResponse)
async def delete_conversation(
    user_id: str,
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    store.delete_conversation(user_id, conversation_id)
    return StatusResponse(message="Conversation deleted")
