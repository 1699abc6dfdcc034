"""
FastAPI application for the turismo access-control service.

Usage:
    uvicorn app.main:app --reload --port 3000
"""

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.admin.routes import router as admin_router
from app.auth.routes import router as auth_router
from app.errors import register_error_handlers
from turismo_core.config import settings
from turismo_core.infrastructure.rate_limiter import limiter, _rate_limit_exceeded_handler
from turismo_core.logging import setup_logging

setup_logging(settings.LOG_LEVEL, service=settings.SERVICE_NAME, json_logs=settings.LOG_JSON)

app = FastAPI(
    title="Turismo API",
    description="Authentication and role-based access control for the tourism platform",
    version="1.0.0",
)

# Rate limiter setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

register_error_handlers(app)

# NOTE: CORS must be the last middleware added so it runs FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, tags=["Auth"])
app.include_router(admin_router, tags=["Admin"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
