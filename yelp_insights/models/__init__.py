"""
Conversation store and API schemas.
"""
