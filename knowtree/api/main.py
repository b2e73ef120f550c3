"""FastAPI application setup for the knowtree API."""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any

from knowtree.api.models import ErrorResponse
from knowtree.api.routes import imports, layout, search
from knowtree.exceptions import KnowtreeError

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Knowtree API",
    description="Import, lay out and search knowledge trees",
    version="0.1.0",
)
app.state.start_time = time.time()


def _error_body(detail: Any, error_code: str, request: Request) -> Dict[str, Any]:
    return jsonable_encoder(
        ErrorResponse(
            detail=detail,
            error_code=error_code,
            path=request.url.path,
            timestamp=datetime.now(timezone.utc),
        )
    )


# Add exception handlers
@app.exception_handler(KnowtreeError)
async def knowtree_exception_handler(request: Request, exc: KnowtreeError):
    """Handle knowtree errors raised by the core."""
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(str(exc), type(exc).__name__, request),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, f"http_{exc.status_code}", request),
        headers=exc.headers,
    )


# Add routes
app.include_router(imports.router)
app.include_router(layout.router)
app.include_router(search.router)


@app.get(
    "/health",
    summary="Health check",
    description="Check if the API is healthy",
)
async def health_check() -> Dict[str, Any]:
    """Check if the API is healthy."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.time() - app.state.start_time,
    }
