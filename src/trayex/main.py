# src/trayex/main.py
"""Main entry point for the Trayex API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from trayex.api.v1 import api_v1
from trayex.core.settings import settings
from trayex.services.pass_tokens import get_pass_token_service
from trayex.services.session_tokens import get_session_token_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Trayex API",
    description="University shuttle reservations and rotating boarding passes",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

app.include_router(api_v1, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    # Build the signing services now so a missing secret stops the process
    # before it serves any request.
    session_tokens = get_session_token_service()
    pass_tokens = get_pass_token_service()
    logger.info(
        "Signing services ready (session alg=%s, pass key ring size=%d)",
        session_tokens.algorithm,
        len(pass_tokens.key_ring),
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Trayex API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("trayex.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
