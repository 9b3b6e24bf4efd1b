"""
NASA proxy routes: validate -> cache lookup -> adapter -> envelope -> cache store.
"""
from typing import Any, Awaitable, Callable, Dict, Iterable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config.logging_config import get_logger
from nasa.adapters import NasaAdapters, ResourceNotFound
from nasa.client import UpstreamError
from webapp.backend import envelope
from webapp.backend.cache import ResponseCache
from webapp.backend.validation import SCHEMAS, validate_request

logger = get_logger(__name__)

router = APIRouter(prefix="/api/nasa")

APOD_FIELDS = ("date", "start_date", "end_date", "count", "thumbs")
ROVER_PHOTO_FIELDS = ("sol", "earth_date", "camera", "page")
NEO_FIELDS = ("start_date", "end_date", "asteroid_id")
IMAGE_SEARCH_FIELDS = (
    "q", "center", "description", "keywords", "location", "nasa_id",
    "photographer", "title", "year_start", "year_end", "media_type", "page",
)


def get_adapters(request: Request) -> NasaAdapters:
    adapters = getattr(request.app.state, "adapters", None)
    if adapters is None:
        raise RuntimeError("NASA adapters not initialized. Check create_app().")
    return adapters


def get_cache(request: Request) -> ResponseCache:
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        raise RuntimeError("Response cache not initialized. Check create_app().")
    return cache


def pick(request: Request, fields: Iterable[str]) -> Dict[str, str]:
    """Known, non-empty query parameters; everything else (e.g. noCache) is dropped."""
    query = request.query_params
    return {field: query[field] for field in fields if query.get(field)}


def cache_key(request: Request) -> str:
    # Verbatim path and query string: parameter order matters.
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


async def serve(
    request: Request,
    family: str,
    error_code: str,
    fetch: Callable[[], Awaitable[Any]],
    message: str,
    failure_message: str,
) -> JSONResponse:
    settings = request.app.state.settings
    cache = get_cache(request)
    key = cache_key(request)
    use_cache = settings.cache_enabled and request.query_params.get("noCache") != "true"

    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            logger.info("Serving from cache", key=key, family=family)
            return JSONResponse(content=cached, headers={"X-Cache": "HIT"})

    try:
        data = await fetch()
    except UpstreamError as e:
        return envelope.error_response(502, error_code, e.message)
    except ResourceNotFound as e:
        return envelope.error_response(404, envelope.NOT_FOUND, str(e))
    except Exception as e:
        logger.error("Request handler failed", family=family, error=str(e), exc_info=True)
        return envelope.error_response(500, error_code, str(e) if settings.debug else failure_message)

    body = envelope.success_envelope(data, message)
    if use_cache:
        cache.set(key, body, settings.cache_ttls().get(family, settings.cache_default_ttl))
        logger.info("Cached fresh data", key=key, family=family)
    return JSONResponse(content=body, headers={"X-Cache": "MISS" if use_cache else "BYPASS"})


# APOD

@router.get("/apod", dependencies=[Depends(validate_request(SCHEMAS["apod"]))])
async def get_apod(request: Request):
    """Astronomy Picture of the Day: single date, date range or random count."""
    adapters = get_adapters(request)
    params = pick(request, APOD_FIELDS)
    return await serve(
        request, "apod", envelope.APOD_FETCH_ERROR,
        lambda: adapters.get_apod(params),
        "APOD data retrieved successfully",
        "Failed to fetch APOD data",
    )


# Mars Rovers

@router.get("/mars-rovers")
async def get_mars_rovers(request: Request):
    adapters = get_adapters(request)
    return await serve(
        request, "mars_rover", envelope.MARS_ROVERS_FETCH_ERROR,
        adapters.get_mars_rovers,
        "Mars rovers data retrieved successfully",
        "Failed to fetch Mars rovers data",
    )


@router.get("/mars-rovers/{rover}/photos", dependencies=[Depends(validate_request(SCHEMAS["mars_rover"]))])
async def get_mars_rover_photos(request: Request, rover: str):
    adapters = get_adapters(request)
    params = pick(request, ROVER_PHOTO_FIELDS)
    return await serve(
        request, "mars_rover", envelope.MARS_ROVER_FETCH_ERROR,
        lambda: adapters.get_rover_photos(rover, params),
        f"Mars rover photos for {rover} retrieved successfully",
        "Failed to fetch Mars rover photos",
    )


@router.get("/mars-rovers/{rover}/manifest", dependencies=[Depends(validate_request(SCHEMAS["mars_rover"]))])
async def get_mars_rover_manifest(request: Request, rover: str):
    adapters = get_adapters(request)
    return await serve(
        request, "mars_rover", envelope.MARS_ROVER_MANIFEST_FETCH_ERROR,
        lambda: adapters.get_rover_manifest(rover),
        f"Mars rover manifest for {rover} retrieved successfully",
        "Failed to fetch Mars rover manifest",
    )


@router.get("/mars-rovers/{rover}/cameras", dependencies=[Depends(validate_request(SCHEMAS["mars_rover"]))])
async def get_mars_rover_cameras(request: Request, rover: str):
    adapters = get_adapters(request)
    return await serve(
        request, "mars_rover", envelope.MARS_ROVERS_FETCH_ERROR,
        lambda: adapters.get_rover_cameras(rover),
        f"Cameras for {rover} retrieved successfully",
        "Failed to fetch rover cameras",
    )


# EPIC

@router.get("/epic", dependencies=[Depends(validate_request(SCHEMAS["epic"]))])
async def get_epic(request: Request):
    adapters = get_adapters(request)
    date = request.query_params.get("date") or None
    return await serve(
        request, "epic", envelope.EPIC_FETCH_ERROR,
        lambda: adapters.get_epic(date),
        "EPIC data retrieved successfully",
        "Failed to fetch EPIC data",
    )


@router.get("/epic/dates")
async def get_epic_dates(request: Request):
    adapters = get_adapters(request)
    return await serve(
        request, "epic", envelope.EPIC_FETCH_ERROR,
        adapters.get_epic_dates,
        "Available EPIC dates retrieved successfully",
        "Failed to fetch available EPIC dates",
    )


@router.get("/epic/image-url", dependencies=[Depends(validate_request(SCHEMAS["epic_image_url"]))])
async def get_epic_image_url(request: Request):
    adapters = get_adapters(request)
    query = request.query_params

    async def build() -> Dict[str, Any]:
        return adapters.epic_image_url(
            identifier=query["identifier"],
            date=query["date"],
            image=query["image"],
            enhanced=query.get("enhanced") == "true",
        )

    return await serve(
        request, "epic", envelope.EPIC_IMAGE_URL_ERROR, build,
        "EPIC image URL generated successfully",
        "Failed to generate EPIC image URL",
    )


# NEO

@router.get("/neo", dependencies=[Depends(validate_request(SCHEMAS["neo"]))])
async def get_neo(request: Request):
    adapters = get_adapters(request)
    params = pick(request, NEO_FIELDS)
    return await serve(
        request, "neo", envelope.NEO_FETCH_ERROR,
        lambda: adapters.get_neo_feed(params),
        "NEO data retrieved successfully",
        "Failed to fetch NEO data",
    )


@router.get("/neo/hazardous", dependencies=[Depends(validate_request(SCHEMAS["neo"]))])
async def get_hazardous_neos(request: Request):
    adapters = get_adapters(request)
    params = pick(request, ("start_date", "end_date"))
    return await serve(
        request, "neo", envelope.NEO_FETCH_ERROR,
        lambda: adapters.get_hazardous_neos(params),
        "Hazardous NEO data retrieved successfully",
        "Failed to fetch hazardous NEOs",
    )


@router.get("/neo/summary", dependencies=[Depends(validate_request(SCHEMAS["neo"]))])
async def get_neo_summary(request: Request):
    adapters = get_adapters(request)
    params = pick(request, ("start_date", "end_date"))
    return await serve(
        request, "neo", envelope.NEO_FETCH_ERROR,
        lambda: adapters.get_neo_summary(params),
        "NEO summary retrieved successfully",
        "Failed to get NEO summary",
    )


@router.get("/neo/by-size", dependencies=[Depends(validate_request(SCHEMAS["neo_by_size"]))])
async def get_neos_by_size(request: Request):
    adapters = get_adapters(request)
    query = request.query_params
    params = pick(request, ("start_date", "end_date"))
    min_km, max_km = float(query["min_km"]), float(query["max_km"])
    return await serve(
        request, "neo", envelope.NEO_FETCH_ERROR,
        lambda: adapters.get_neos_by_size(min_km, max_km, params),
        "NEO data filtered by size retrieved successfully",
        "Failed to get NEOs by size",
    )


@router.get("/neo/{asteroid_id}", dependencies=[Depends(validate_request(SCHEMAS["neo_lookup"]))])
async def get_asteroid(request: Request, asteroid_id: str):
    adapters = get_adapters(request)
    return await serve(
        request, "neo", envelope.NEO_FETCH_ERROR,
        lambda: adapters.get_neo(asteroid_id),
        f"Asteroid {asteroid_id} retrieved successfully",
        "Failed to fetch asteroid",
    )


# NASA Image and Video Library

@router.get("/images", dependencies=[Depends(validate_request(SCHEMAS["image_search"]))])
async def search_images(request: Request):
    adapters = get_adapters(request)
    params = pick(request, IMAGE_SEARCH_FIELDS)
    return await serve(
        request, "image_search", envelope.IMAGE_SEARCH_ERROR,
        lambda: adapters.search_images(params),
        "NASA images retrieved successfully",
        "Failed to search NASA images",
    )


@router.get("/images/suggestions")
async def get_search_suggestions(request: Request):
    adapters = get_adapters(request)
    return JSONResponse(
        content=envelope.success_envelope(
            adapters.search_suggestions(), "Search suggestions retrieved successfully"
        )
    )
