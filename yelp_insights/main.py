"""
Yelp AI Business Analyzer: FastAPI entry point.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from yelp_insights.config import settings
from yelp_insights.middleware.error_handler import (
    external_service_exception_handler,
    global_exception_handler,
)
from yelp_insights.middleware.logging_middleware import configure_logging, logging_middleware
from yelp_insights.middleware.rate_limit import limiter
from yelp_insights.services.errors import ExternalServiceError

# ── Routes ───────────────────────────────────────────────
from yelp_insights.routes.analysis import router as analysis_router
from yelp_insights.routes.auth import router as auth_router
from yelp_insights.routes.conversations import router as conversations_router
from yelp_insights.routes.memory import router as memory_router
from yelp_insights.routes.reports import router as reports_router
from yelp_insights.routes.voice import router as voice_router


# ── Lifespan ─────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} on {settings.HOST}:{settings.PORT}")
    if not settings.YELP_API_KEY:
        logger.warning("YELP_API_KEY not set, business lookups and Yelp AI queries will fail")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set, transcription, speech and report generation will fail")
    yield
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Ask natural-language questions about a business's Yelp reviews by voice or text",
    lifespan=lifespan,
)

# ── Rate Limiter ─────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ExternalServiceError, external_service_exception_handler)

# ── CORS ─────────────────────────────────────────────────
origins = settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Custom Middleware ────────────────────────────────────
app.middleware("http")(global_exception_handler)
app.middleware("http")(logging_middleware)

# ── Register Routers ────────────────────────────────────
app.include_router(auth_router)
app.include_router(voice_router)
app.include_router(conversations_router)
app.include_router(reports_router)
app.include_router(memory_router)
app.include_router(analysis_router)


# ── Health Check ─────────────────────────────────────────
@app.get("/health", tags=["health"])
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "integrations": {
            "yelp": bool(settings.YELP_API_KEY),
            "openai": bool(settings.OPENAI_API_KEY),
        },
    }


# ── Run ──────────────────────────────────────────────────
def run():
    import uvicorn
    uvicorn.run(
        "yelp_insights.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )


if __name__ == "__main__":
    run()
