"""
Shared route helpers.
"""

from fastapi import HTTPException

from yelp_insights.models.conversation import Conversation, ConversationStore


def conversation_or_404(store: ConversationStore, user_id: str, conversation_id: str) -> Conversation:
    conversation = store.get_conversation(user_id, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


def business_context(conversation: Conversation) -> dict:
    return {"business_name": conversation.business_name, "business_id": conversation.business_id}
