"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from app.api import webhooks
from app.config import settings
from app.utils.logging import setup_logging, get_logger

VERSION = "0.1.0"

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title="libphonenumber-hook",
    description="Opens a google-libphonenumber update pull request for every upstream release tag",
    version=VERSION,
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": VERSION}


# Include API routers
app.include_router(webhooks.router)


@app.on_event("startup")
async def startup_event():
    """Log effective configuration on application startup."""
    logger.info(
        "Starting libphonenumber-hook",
        extra={
            "repository": settings.downstream_repository,
            "push_enabled": settings.push_enabled,
            "signature_verification": bool(settings.webhook_secret),
        },
    )
    if settings.push_enabled and settings.github_token is None:
        logger.warning("GITHUB_TOKEN is not set, tag pushes will fail before fetching")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
