"""Promotions Service - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promotions.config import get_settings
from promotions.core.conditions import available_conditions
from promotions.core.promotion_registry import (
    PromotionRegistryError,
    initialize_promotion_registry,
)
from promotions.routers import promotions

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Registered condition plugins: {available_conditions()}")

    try:
        registry = initialize_promotion_registry(settings.promotions_dir)
        logger.info(f"Loaded {len(registry.list_promotions())} promotions")
    except PromotionRegistryError as e:
        logger.critical(f"Promotion validation failed: {e}")
        raise  # Prevent startup with invalid promotions

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Evaluates promotion conditions against orders",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(promotions.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "promotions.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
