"""
API documentation and monitoring routes.
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from webapp.backend.envelope import success_envelope

router = APIRouter(prefix="/api/docs")


def _describe_ttl(seconds: int) -> str:
    if seconds % 3600 == 0:
        hours = seconds // 3600
        return f"{hours} hour" + ("s" if hours != 1 else "")
    minutes = seconds // 60
    return f"{minutes} minute" + ("s" if minutes != 1 else "")


@router.get("")
async def get_documentation(request: Request):
    settings = request.app.state.settings
    ttls = settings.cache_ttls()
    data = {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "A comprehensive API for exploring NASA's space data",
        "baseUrl": str(request.base_url).rstrip("/"),
        "endpoints": {
            "apod": {
                "description": "Astronomy Picture of the Day",
                "methods": ["GET"],
                "url": "/api/nasa/apod",
                "parameters": {
                    "date": "YYYY-MM-DD format (optional)",
                    "start_date": "YYYY-MM-DD format (optional)",
                    "end_date": "YYYY-MM-DD format (optional)",
                    "count": "Number of images (1-100, optional)",
                    "thumbs": "Boolean for thumbnail images (optional)",
                },
            },
            "marsRovers": {
                "description": "Mars Rover data and photos",
                "methods": ["GET"],
                "endpoints": {
                    "list": "/api/nasa/mars-rovers",
                    "photos": "/api/nasa/mars-rovers/:rover/photos",
                    "manifest": "/api/nasa/mars-rovers/:rover/manifest",
                    "cameras": "/api/nasa/mars-rovers/:rover/cameras",
                },
                "parameters": {
                    "rover": "curiosity, opportunity, spirit, or perseverance",
                    "sol": "Mars day number (optional)",
                    "earth_date": "YYYY-MM-DD format (optional)",
                    "camera": "Camera name (optional)",
                    "page": "Page number (optional)",
                },
            },
            "epic": {
                "description": "Earth imagery from DSCOVR satellite",
                "methods": ["GET"],
                "endpoints": {
                    "data": "/api/nasa/epic",
                    "dates": "/api/nasa/epic/dates",
                    "imageUrl": "/api/nasa/epic/image-url",
                },
                "parameters": {
                    "date": "YYYY-MM-DD format (optional)",
                    "identifier": "Image identifier (required for image-url)",
                    "image": "Image name (required for image-url)",
                    "enhanced": "Boolean for enhanced images (optional)",
                },
            },
            "neo": {
                "description": "Near Earth Objects data",
                "methods": ["GET"],
                "endpoints": {
                    "feed": "/api/nasa/neo",
                    "hazardous": "/api/nasa/neo/hazardous",
                    "summary": "/api/nasa/neo/summary",
                    "bySize": "/api/nasa/neo/by-size",
                    "lookup": "/api/nasa/neo/:asteroid_id",
                },
                "parameters": {
                    "start_date": "YYYY-MM-DD format (optional)",
                    "end_date": "YYYY-MM-DD format (optional)",
                    "asteroid_id": "Specific asteroid ID (optional)",
                    "min_km": "Minimum average diameter in km (by-size)",
                    "max_km": "Maximum average diameter in km (by-size)",
                },
            },
            "imageSearch": {
                "description": "NASA Image and Video Library search",
                "methods": ["GET"],
                "endpoints": {
                    "search": "/api/nasa/images",
                    "suggestions": "/api/nasa/images/suggestions",
                },
                "parameters": {
                    "q": "Search query (optional)",
                    "center": "NASA center (optional)",
                    "description": "Description search (optional)",
                    "keywords": "Keywords search (optional)",
                    "location": "Location search (optional)",
                    "nasa_id": "NASA ID (optional)",
                    "photographer": "Photographer name (optional)",
                    "title": "Title search (optional)",
                    "year_start": "Start year (optional)",
                    "year_end": "End year (optional)",
                    "media_type": "image, video, or audio (optional)",
                    "page": "Page number (optional)",
                },
            },
            "monitoring": {
                "description": "API monitoring and statistics",
                "methods": ["GET", "DELETE"],
                "endpoints": {
                    "stats": "/api/docs/stats",
                    "logs": "/api/docs/logs",
                    "cache": "/api/docs/cache",
                    "clearCache": "/api/docs/cache/clear",
                },
            },
        },
        "rateLimiting": {
            "windowSeconds": settings.rate_limit_window,
            "maxRequests": settings.rate_limit_max_requests,
        },
        "caching": {
            "enabled": settings.cache_enabled,
            "defaultTTL": _describe_ttl(settings.cache_default_ttl),
            "endpointSpecific": {
                family: _describe_ttl(ttl) for family, ttl in ttls.items() if family != "default"
            },
            "bypass": "Add ?noCache=true to any request",
        },
        "errorCodes": {
            "VALIDATION_ERROR": "400 - Input validation failed",
            "TOO_MANY_REQUESTS": "429 - Too many requests",
            "*_FETCH_ERROR": "502 - NASA API error",
            "NOT_FOUND": "404 - Endpoint not found",
            "INTERNAL_SERVER_ERROR": "500 - Internal server error",
        },
    }
    return JSONResponse(content=success_envelope(data, "API documentation retrieved successfully"))


@router.get("/stats")
async def get_request_stats(request: Request):
    stats = request.app.state.request_logger.get_stats()
    return JSONResponse(content=success_envelope(stats, "Request statistics retrieved successfully"))


@router.get("/logs")
async def get_recent_logs(request: Request, limit: int = 100):
    logs = request.app.state.request_logger.get_logs(limit)
    return JSONResponse(content=success_envelope(logs, "Recent request logs retrieved successfully"))


@router.get("/cache")
async def get_cache_stats(request: Request):
    stats = request.app.state.cache.stats()
    return JSONResponse(content=success_envelope(stats, "Cache statistics retrieved successfully"))


@router.delete("/cache/clear")
async def clear_cache(request: Request, pattern: str = ""):
    cache = request.app.state.cache
    if pattern:
        removed = cache.clear_matching(pattern)
    else:
        removed = len(cache)
        cache.clear()
    data = {"cleared": True, "pattern": pattern or "all", "removed": removed}
    return JSONResponse(content=success_envelope(data, "Cache cleared successfully"))
