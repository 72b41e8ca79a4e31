"""
Exceptions raised by the outbound integrations (Yelp, OpenAI).
"""


class ExternalServiceError(Exception):
    """An upstream API call failed or the integration is not configured."""

    service = "external"


class YelpServiceError(ExternalServiceError):
    service = "yelp"


class BusinessNotFoundError(YelpServiceError):
    pass


class AIServiceError(ExternalServiceError):
    service = "openai"


class TranscriptionError(AIServiceError):
    pass
