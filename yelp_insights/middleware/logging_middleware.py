"""
Loguru sink setup and per-request access logging.
"""

import sys
import time
import uuid

from fastapi import Request
from loguru import logger

from yelp_insights.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[request_id]}</cyan> | {name}:{function} - <level>{message}</level>"
)


def configure_logging() -> None:
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(
        sys.stderr,
        level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper(),
        format=LOG_FORMAT,
        backtrace=settings.DEBUG,
        diagnose=settings.DEBUG,
    )


async def logging_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    client = request.client.host if request.client else "-"

    with logger.contextualize(request_id=request_id):
        start = time.perf_counter()
        logger.info(f"→ {request.method} {request.url.path} from {client}")

        response = await call_next(request)

        elapsed = round((time.perf_counter() - start) * 1000, 2)
        logger.info(f"← {request.method} {request.url.path} [{response.status_code}] {elapsed}ms")

    response.headers["X-Request-ID"] = request_id
    return response
