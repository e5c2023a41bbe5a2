"""Main application file for the RCM survey qualification API."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from survey_api.models.response_models import HealthResponse
from survey_api.utils.config import get_settings
from survey_api.routers import analytics, recommendations, submissions
from survey_api.services.providers import get_record_store
from survey_api.services.scoring_engine import validate_weight_tables

# Load settings
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan events.
    """
    # Startup: refuse to serve with incomplete weight tables
    validate_weight_tables()
    logger.info("%s %s starting up", settings.service_name, settings.service_version)
    try:
        get_record_store()
        logger.info("Survey store (%s) initialised", settings.storage_backend)
    except Exception as e:
        logger.error("Failed to initialise survey store at startup: %s", e)

    yield

    logger.info("%s shutting down", settings.service_name)


app = FastAPI(
    title="RCM Survey Qualification API",
    description="Lead-qualification survey scoring, storage and analytics",
    version=settings.service_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

# Include routers
app.include_router(submissions.router, prefix="/api", tags=["submissions"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])
app.include_router(recommendations.router, prefix="/api", tags=["recommendations"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.service_version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.service_name,
    )


# Must stay the last route: answers preflights and unmatched paths
@app.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def fallback(request: Request, full_path: str):
    """CORS preflight for any path, JSON 404 for everything else."""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
    logger.debug("No route for %s /%s", request.method, full_path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Not Found", "message": "API endpoint not found"},
        headers=CORS_HEADERS,
    )
