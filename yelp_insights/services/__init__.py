"""
Integrations (Yelp, OpenAI) and report rendering.
"""
