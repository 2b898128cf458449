"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
import logging
import time
import uuid

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from kidmap.config import settings
from kidmap.core.database import create_engine, create_session_factory, init_db, close_db
from kidmap.core.exceptions import KidMapException, UpstreamError
from kidmap.core.logging import setup_logging
from kidmap.core.metrics import REQUEST_COUNT, REQUEST_DURATION
from kidmap.core.redis import init_redis, close_redis
from kidmap.schemas.response import ErrorDetail, ErrorResponse
from kidmap.api.v1.api import api_router
from kidmap.services.geocoding import NominatimGeocoder
from kidmap.services.overpass import OverpassClient, VenueSearchService
from kidmap.services.relations import FavoriteStore, VisitedStore
from kidmap.services.users import UserService

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Metrics label for requests that matched no route
UNMATCHED_ENDPOINT = "unmatched"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager: builds the shared service objects
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    engine = create_engine()
    await init_db(engine)
    session_factory = create_session_factory(engine)
    logger.info("Database connection established")

    redis_client = await init_redis()

    overpass_http = httpx.AsyncClient(timeout=settings.OVERPASS_HTTP_TIMEOUT_SECONDS)
    nominatim_http = httpx.AsyncClient(timeout=settings.NOMINATIM_TIMEOUT_SECONDS)

    app.state.session_factory = session_factory
    app.state.redis = redis_client
    app.state.venue_search = VenueSearchService(OverpassClient(overpass_http))
    app.state.geocoder = NominatimGeocoder(nominatim_http)
    app.state.favorites = FavoriteStore(session_factory)
    app.state.visited = VisitedStore(session_factory)
    app.state.users = UserService(session_factory)

    yield

    logger.info("Shutting down application")
    await overpass_http.aclose()
    await nominatim_http.aclose()
    await close_redis(redis_client)
    await close_db(engine)


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Kid-friendly venue discovery on a map",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# Request tracking middleware
@app.middleware("http")
async def track_requests(request: Request, call_next):
    """
    Track request metrics and add request ID
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    # Label by route template so path parameters don't explode cardinality
    route = request.scope.get("route")
    endpoint = getattr(route, "path", UNMATCHED_ENDPOINT)

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.labels(
        method=request.method,
        endpoint=endpoint
    ).observe(duration)

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(duration)

    return response


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# Exception handlers
@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error(
        f"Upstream {exc.provider} failure: {exc.message}",
        extra={
            "provider": exc.provider,
            "upstream_status": exc.upstream_status,
            "path": request.url.path,
            **exc.context
        }
    )
    return _error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(KidMapException)
async def kidmap_exception_handler(request: Request, exc: KidMapException):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    response = _error_response(exc.status_code, exc.code, exc.message, exc.details)
    if headers:
        response.headers.update(headers)
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return _error_response(404, "NOT_FOUND", "The requested resource was not found")


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return _error_response(500, "INTERNAL_ERROR", "An internal server error occurred")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "api_docs": "/docs" if settings.DEBUG else None
    }


app.include_router(api_router, prefix=settings.API_PREFIX)

# Mount Prometheus metrics endpoint
if settings.PROMETHEUS_ENABLED:
    app.mount("/metrics", make_asgi_app())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kidmap.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
