"""
Tests for the generic NASA client against a local aiohttp server.
"""
import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from nasa import resources
from nasa.client import NasaAPIClient, UpstreamError, clean_params, extract_upstream_message


async def apod_handler(request):
    return web.json_response({"title": "Pillars of Creation", "query": dict(request.query)})


async def rover_photos_handler(request):
    return web.json_response({"rover": request.match_info["rover"], "query": dict(request.query)})


async def forbidden_handler(request):
    return web.json_response({"error": {"code": "API_KEY_INVALID", "message": "An invalid api_key was supplied"}},
                             status=403)


async def html_handler(request):
    return web.Response(text="<html>maintenance</html>", content_type="text/html")


async def slow_handler(request):
    await asyncio.sleep(0.5)
    return web.json_response({})


async def search_handler(request):
    return web.json_response({"collection": {"items": []}, "query": dict(request.query)})


@pytest_asyncio.fixture
async def nasa_server():
    app = web.Application()
    app.router.add_get("/planetary/apod", apod_handler)
    app.router.add_get("/mars-photos/api/v1/rovers/{rover}/photos", rover_photos_handler)
    app.router.add_get("/neo/rest/v1/feed", forbidden_handler)
    app.router.add_get("/EPIC/api/natural/latest", html_handler)
    app.router.add_get("/EPIC/api/natural/all", slow_handler)
    app.router.add_get("/search", search_handler)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def nasa_client(nasa_server):
    base = str(nasa_server.make_url("/")).rstrip("/")
    return NasaAPIClient(api_key="SECRET", base_url=base, images_base_url=base, default_timeout=0.2)


def test_clean_params():
    assert clean_params({"a": None, "b": "", "c": 3, "d": True, "e": "x"}) == {"c": "3", "d": "true", "e": "x"}


def test_extract_upstream_message():
    assert extract_upstream_message({"error": {"message": "bad key"}}) == "bad key"
    assert extract_upstream_message({"msg": "Date must be between Jun 16, 1995 and today"}).startswith("Date")
    assert extract_upstream_message({"error_message": "Rate limited"}) == "Rate limited"
    assert extract_upstream_message("not json") is None


@pytest.mark.asyncio
async def test_fetch_attaches_api_key_and_params(nasa_client):
    data = await nasa_client.fetch(resources.APOD, params={"date": "2024-01-01", "thumbs": "", "count": None})
    assert data["title"] == "Pillars of Creation"
    assert data["query"] == {"date": "2024-01-01", "api_key": "SECRET"}


@pytest.mark.asyncio
async def test_fetch_fills_path_parameters(nasa_client):
    data = await nasa_client.fetch(resources.MARS_ROVER_PHOTOS, {"rover": "curiosity"}, {"sol": 1000})
    assert data["rover"] == "curiosity"
    assert data["query"]["sol"] == "1000"


@pytest.mark.asyncio
async def test_non_2xx_carries_upstream_message(nasa_client):
    with pytest.raises(UpstreamError) as exc_info:
        await nasa_client.fetch(resources.NEO_FEED)
    error = exc_info.value
    assert error.status == 403
    assert error.resource == "neo_feed"
    assert "403" in error.message
    assert "An invalid api_key was supplied" in error.message


@pytest.mark.asyncio
async def test_malformed_body_is_upstream_error(nasa_client):
    with pytest.raises(UpstreamError, match="malformed"):
        await nasa_client.fetch(resources.EPIC_LATEST)


@pytest.mark.asyncio
async def test_timeout_is_upstream_error(nasa_client):
    with pytest.raises(UpstreamError, match="timed out"):
        await nasa_client.fetch(resources.EPIC_DATES)


@pytest.mark.asyncio
async def test_unreachable_host_is_upstream_error():
    client = NasaAPIClient(api_key="SECRET", base_url="http://127.0.0.1:1", default_timeout=2)
    with pytest.raises(UpstreamError, match="unreachable") as exc_info:
        await client.fetch(resources.APOD)
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_image_search_uses_images_host_without_api_key(nasa_server):
    base = str(nasa_server.make_url("/")).rstrip("/")
    client = NasaAPIClient(api_key="SECRET", base_url="http://127.0.0.1:1", images_base_url=base)
    data = await client.fetch(resources.IMAGE_SEARCH, params={"q": "apollo"})
    assert data["query"] == {"media_type": "image", "q": "apollo"}


def test_timeout_selection():
    client = NasaAPIClient(api_key="K", default_timeout=7, search_timeout=20)
    assert client.timeout_for(resources.APOD) == 7
    assert client.timeout_for(resources.IMAGE_SEARCH) == 20
    assert NasaAPIClient(api_key="K").timeout_for(resources.IMAGE_SEARCH) == resources.SEARCH_TIMEOUT
