"""FastAPI application for the Aleth analysis service."""

import contextlib
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

# Load environment variables from .env file
load_dotenv()

from ..domain.errors import (
    AnalysisError,
    ConfigurationError,
    ParseError,
    RateLimitError,
    UpstreamError,
)
from ..infrastructure.dependencies import get_service_container
from .endpoints import analysis, feedback, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    RateLimitError: 429,
    ConfigurationError: 503,
    UpstreamError: 502,
    ParseError: 502,
}


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    container = get_service_container()
    container.get_rate_limiter().start_sweeper(container.config.sweep_interval_seconds)
    await container.get_analysis_service()

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Aleth API",
    description="Fact-checking for text, URLs and images with search grounded model analysis",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(analysis.router)
app.include_router(feedback.router)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    """Report each error kind with its own status code."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    content = {"error": exc.kind, "detail": exc.message}
    headers = {}

    if isinstance(exc, RateLimitError):
        content["retry_after_seconds"] = exc.retry_after_seconds
        headers["Retry-After"] = str(exc.retry_after_seconds)
    else:
        logger.error(f"❌ {type(exc).__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Invalid analysis input."""
    messages = "; ".join(error["msg"] for error in exc.errors())
    return JSONResponse(status_code=422, content={"error": "invalid_input", "detail": messages})


def serve():
    """Console script entry point for the HTTP API."""
    import uvicorn

    uvicorn.run(
        "aleth.api.app:app",
        host=os.getenv("ALETH_HOST", "0.0.0.0"),
        port=int(os.getenv("ALETH_PORT", "8000")),
        log_level="info",
    )


if __name__ == "__main__":
    serve()
