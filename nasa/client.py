"""
Generic client for NASA's Open APIs: one GET with the API key attached and
every failure translated into UpstreamError.
"""
import asyncio
import json
from typing import Any, Dict, Mapping, Optional

import aiohttp

from config.logging_config import get_logger
from nasa.resources import DEFAULT_TIMEOUT, IMAGES, Resource

logger = get_logger(__name__)


class UpstreamError(Exception):
    """A call to NASA failed: transport, timeout, non-2xx or malformed body."""

    def __init__(self, message: str, resource: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.resource = resource
        self.status = status


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop absent values and stringify the rest the way NASA expects them."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned


def extract_upstream_message(body: Any) -> Optional[str]:
    """Pull the human readable message out of NASA's assorted error bodies."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    for key in ("msg", "reason", "message", "error_message"):
        if body.get(key):
            return str(body[key])
    return None


class NasaAPIClient:
    """Issues single GET requests against NASA endpoints described by a Resource."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.nasa.gov",
        images_base_url: str = "https://images-api.nasa.gov",
        default_timeout: float = DEFAULT_TIMEOUT,
        search_timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.images_base_url = images_base_url.rstrip("/")
        self.default_timeout = default_timeout
        self.search_timeout = search_timeout

    def build_url(self, resource: Resource, path_params: Optional[Mapping[str, Any]] = None) -> str:
        base = self.images_base_url if resource.base == IMAGES else self.base_url
        return base + resource.format_path(**(path_params or {}))

    def build_params(self, resource: Resource, params: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
        merged = dict(resource.default_params)
        merged.update(clean_params(params))
        merged = clean_params(merged)
        if resource.send_api_key:
            merged["api_key"] = self.api_key
        return merged

    def timeout_for(self, resource: Resource) -> float:
        if resource.base == IMAGES and self.search_timeout is not None:
            return self.search_timeout
        return resource.timeout if resource.timeout is not None else self.default_timeout

    async def fetch(
        self,
        resource: Resource,
        path_params: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """GET the resource and return its parsed JSON body."""
        url = self.build_url(resource, path_params)
        query = self.build_params(resource, params)
        timeout = aiohttp.ClientTimeout(total=self.timeout_for(resource))

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, params=query, headers={"Accept": "application/json"}) as response:
                    text = await response.text()
                    if 200 <= response.status < 300:
                        try:
                            return json.loads(text)
                        except ValueError:
                            error_msg = f"NASA API returned a malformed response for {resource.label}"
                            logger.error("Malformed upstream body", endpoint=resource.name, status=response.status)
                            raise UpstreamError(error_msg, resource.name, response.status)

                    upstream_message = None
                    try:
                        upstream_message = extract_upstream_message(json.loads(text))
                    except ValueError:
                        pass
                    error_msg = (
                        f"Failed to fetch {resource.label}: NASA API error "
                        f"{response.status}: {upstream_message or response.reason or 'request failed'}"
                    )
                    logger.error("Upstream returned an error", endpoint=resource.name, status=response.status,
                                 upstream_message=upstream_message)
                    raise UpstreamError(error_msg, resource.name, response.status)
        except asyncio.TimeoutError:
            error_msg = f"Failed to fetch {resource.label}: NASA API request timed out"
            logger.error("Upstream timeout", endpoint=resource.name, timeout=timeout.total)
            raise UpstreamError(error_msg, resource.name)
        except aiohttp.ClientError as e:
            error_msg = f"Failed to fetch {resource.label}: NASA API unreachable: {str(e) or type(e).__name__}"
            logger.error("Upstream transport error", endpoint=resource.name, error=str(e))
            raise UpstreamError(error_msg, resource.name)

