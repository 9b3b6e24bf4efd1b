"""
FastAPI backend for the NASA Data Explorer.
Pass-through API in front of NASA's Open APIs with validation, response
caching and a uniform response envelope.
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_config import configure_logging, get_logger
from config.settings import Settings, settings as default_settings
from nasa.adapters import NasaAdapters
from nasa.client import NasaAPIClient
from webapp.backend import docs, envelope, routes
from webapp.backend.cache import ResponseCache
from webapp.backend.middleware import RateLimiter, RequestLog, RequestLogger
from webapp.backend.validation import RequestValidationFailed

configure_logging()
logger = get_logger(__name__)


def build_adapters(app_settings: Settings) -> NasaAdapters:
    client = NasaAPIClient(
        api_key=app_settings.nasa_api_key,
        base_url=app_settings.nasa_api_base_url,
        images_base_url=app_settings.nasa_images_api_base_url,
        default_timeout=app_settings.request_timeout,
        search_timeout=app_settings.search_timeout,
    )
    return NasaAdapters(client)


def _original_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def create_app(
    app_settings: Optional[Settings] = None,
    adapters: Optional[NasaAdapters] = None,
    cache: Optional[ResponseCache] = None,
) -> FastAPI:
    """Build the application with its collaborators wired into app.state."""
    app_settings = app_settings or default_settings
    adapters = adapters or build_adapters(app_settings)
    cache = cache if cache is not None else ResponseCache(default_ttl=app_settings.cache_default_ttl)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the cache sweeper on startup and stop it on shutdown."""
        logger.info("Starting NASA Data Explorer API", environment=app_settings.environment,
                    base_url=app_settings.nasa_api_base_url)
        if app_settings.using_demo_key:
            logger.warning("NASA_API_KEY not set, using DEMO_KEY (limited API access)")
        if app_settings.cache_enabled:
            cache.start(app_settings.cache_sweep_interval)

        yield

        await cache.stop()
        cache.clear()
        logger.info("Shutting down NASA Data Explorer API")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Pass-through API for NASA's APOD, Mars Rover, EPIC, NEO and image library data",
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.adapters = adapters
    app.state.cache = cache
    app.state.request_logger = RequestLogger()
    app.state.rate_limiter = RateLimiter(app_settings.rate_limit_max_requests, app_settings.rate_limit_window)
    app.state.started_at = time.monotonic()

    @app.middleware("http")
    async def catch_exceptions_middleware(request: Request, call_next):
        """
        Catch unhandled exceptions and return a generic 500 envelope.
        Exception details are only exposed in development.
        """
        try:
            return await call_next(request)
        except Exception as e:
            logger.error("Unhandled exception", path=request.url.path, error=str(e), exc_info=True)
            message = str(e) if app_settings.debug and str(e) else "Internal Server Error"
            return envelope.error_response(500, envelope.INTERNAL_SERVER_ERROR, message)

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        limiter: RateLimiter = request.app.state.rate_limiter
        if not limiter.hit(client):
            logger.warning("Rate limited", client=client, path=request.url.path)
            retry_after = limiter.retry_after(client)
            headers = {"Retry-After": str(retry_after)} if retry_after else None
            return envelope.error_response(
                429, envelope.TOO_MANY_REQUESTS,
                "Too many requests from this IP, please try again later.", headers,
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(client))
        return response

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        entry = RequestLog(
            method=request.method,
            url=_original_url(request),
            statusCode=response.status_code,
            responseTime=elapsed_ms,
            ip=request.client.host if request.client else "unknown",
            userAgent=request.headers.get("user-agent", "unknown"),
            timestamp=envelope.utc_timestamp(),
            query=dict(request.query_params),
        )
        request.app.state.request_logger.log(entry)
        if app_settings.log_requests:
            logger.info("Request", method=entry.method, url=entry.url,
                        status=entry.statusCode, response_time_ms=elapsed_ms)
        return response

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationFailed)
    async def validation_failed_handler(request: Request, exc: RequestValidationFailed):
        return envelope.error_response(400, envelope.VALIDATION_ERROR, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))} {error.get('msg', 'is invalid')}"
            for error in exc.errors()
        ]
        return envelope.error_response(400, envelope.VALIDATION_ERROR, f"Validation failed: {', '.join(errors)}")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return envelope.error_response(404, envelope.NOT_FOUND, f"Route {_original_url(request)} not found")
        return envelope.error_response(exc.status_code, envelope.INTERNAL_SERVER_ERROR, str(exc.detail))

    @app.get("/")
    async def root():
        """Service banner with the main endpoints."""
        return {
            "message": app_settings.APP_NAME,
            "version": app_settings.APP_VERSION,
            "endpoints": {
                "apod": "/api/nasa/apod",
                "marsRovers": "/api/nasa/mars-rovers",
                "marsRoverPhotos": "/api/nasa/mars-rovers/:rover/photos",
                "epic": "/api/nasa/epic",
                "neo": "/api/nasa/neo",
                "images": "/api/nasa/images",
                "docs": "/api/docs",
            },
            "documentation": "https://api.nasa.gov/",
            "features": [
                "Input validation",
                "Response caching",
                "Request logging",
                "Rate limiting",
                "API monitoring",
            ],
        }

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "OK",
            "timestamp": envelope.utc_timestamp(),
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "environment": app_settings.environment,
        }

    app.include_router(routes.router)
    app.include_router(docs.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting NASA Data Explorer API", host=default_settings.host, port=default_settings.port)
    uvicorn.run(
        "webapp.backend.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_level=default_settings.log_level.lower(),
    )
