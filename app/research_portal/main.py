"""
FastAPI application for the research portal.

Provides endpoints for:
- Uploading a PDF for financial statement extraction or earnings call analysis
- Downloading extracted financial line items as a spreadsheet
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .models import HealthResponse
from .routers import export, process
from .services.ai import get_completion_client
from .services.pdf_service import get_pdf_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Research Portal API...")
    # Initialize services on startup
    get_pdf_service()
    get_completion_client()
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down Research Portal API...")


# Create FastAPI application
app = FastAPI(
    title="Research Portal API",
    description="Financial statement extraction and earnings call analysis using AI",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy", message="Research Portal API is running", version=__version__
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", message="Service is healthy", version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(process.router)
app.include_router(export.router)
