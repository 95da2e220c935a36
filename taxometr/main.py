from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import HTTPException
from dotenv import load_dotenv
import logging
import time
import uvicorn

from taxometr.core.logging import setup_logging
from taxometr.core.settings import get_settings

# Load environment variables from .env file
load_dotenv()

settings = get_settings()

# Setup logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

from taxometr.api.v1 import maps  # noqa: E402

app = FastAPI(title="Taxometr API", version="1.0.0")


@app.middleware("http")
async def log_requests_middleware(request: Request, call_next):
    """Log incoming requests and their processing time."""
    start_time = time.time()
    method = request.method
    path = request.url.path

    logger.info(f"Request: {method} {path}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f"Response: {method} {path} - Status: {response.status_code} - Duration: {process_time:.4f}s"
        )
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Error: {method} {path} - Exception: {str(e)} - Duration: {process_time:.4f}s",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error. Please check logs for more details."},
        )


# Include routers
app.include_router(maps.router, prefix="/api/v1/maps", tags=["maps"])


@app.get("/api/v1", summary="API Welcome", tags=["General"])
async def api_welcome_message():
    """Provides a welcome message and basic API information."""
    return {
        "message": "Welcome to Taxometr API v1.0",
        "version": app.version,
        "documentation_url": app.docs_url,
        "openapi_url": app.openapi_url,
    }


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


if __name__ == "__main__":
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}, environment: {settings.ENVIRONMENT}")

    uvicorn.run(
        "taxometr.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENVIRONMENT == "development",
    )
