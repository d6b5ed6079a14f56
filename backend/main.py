"""
Decision Queue FastAPI Backend

Exposes the decision post-processing pipeline to the dashboard frontend.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas mirror the frontend DecisionItem type
- The decision_queue engine does all ranking, rollup and curation

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import decisions_router
from backend.dependencies import get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: load configuration and apply its log level.
    """
    config = get_config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    logger.info("Config loaded from: %s", config.config_dir)

    yield

    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Decision Queue API",
    description="""
    Ranks, rolls up and curates decision items for the dashboard.

    ## Features

    - **Postprocess**: Deduplicate, roll up, score and order one evaluation pass
    - **Dashboard**: Curated top rows with tier and category diversity
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(decisions_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "Decision Queue API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "postprocess": "/decisions/postprocess",
            "dashboard": "/decisions/dashboard",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
