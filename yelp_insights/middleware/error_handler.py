"""
Exception handling: upstream integration failures and the global catch-all.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from yelp_insights.services.errors import BusinessNotFoundError, ExternalServiceError


async def external_service_exception_handler(request: Request, exc: ExternalServiceError):
    status_code = 404 if isinstance(exc, BusinessNotFoundError) else 502
    logger.warning(f"{exc.service} failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "service": exc.service},
    )


async def global_exception_handler(request: Request, call_next):
    """Last line of defence: anything a route lets escape becomes a logged 500."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__,
            },
        )
