"""
One conversation turn: record the question, route it, record the answer.
"""

from typing import Tuple

from loguru import logger

from yelp_insights.agents import memory_agent, query_agent
from yelp_insights.models.conversation import Conversation, ConversationStore

NOTHING_REMEMBERED = "I couldn't find anything about that in past conversations."


async def handle_turn(store: ConversationStore, conversation: Conversation, text: str) -> Tuple[str, str]:
    """Returns (response text, source of the answer)."""
    user_id, conversation_id = conversation.user_id, conversation.id
    store.add_message(user_id, conversation_id, "user", text)

    if memory_agent.is_memory_query(text):
        history = [c for c in store.get_all_conversations(user_id) if c.id != conversation_id]
        result = await memory_agent.search_conversations(text, history)
        response = result.get("result") or result.get("message") or NOTHING_REMEMBERED
        source = result["source"]
    else:
        result = await query_agent.query(text, conversation.business_id, conversation.chat_id)
        if result.get("chat_id"):
            store.update_chat_id(user_id, conversation_id, result["chat_id"])
        response = result["answer"]
        source = result["source"]

    store.add_message(user_id, conversation_id, "assistant", response)
    logger.info(f"Turn [{conversation_id}] via {source}: '{text[:50]}' -> '{response[:50]}'")
    return response, source
