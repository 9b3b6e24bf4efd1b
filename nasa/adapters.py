"""
Per-family operations over the generic NASA client.

Every method assembles parameters, delegates to NasaAPIClient.fetch and
returns NASA's JSON untouched, except the NEO reductions and EPIC URL
construction which are computed locally.
"""
from typing import Any, Dict, List, Mapping, Optional

from nasa import resources
from nasa.client import NasaAPIClient
from nasa.epic import build_epic_image_url
from nasa.models import RoverList
from nasa.neo import filter_by_size, filter_hazardous, summarize

VALID_ROVERS = ["curiosity", "opportunity", "spirit", "perseverance"]

SEARCH_SUGGESTIONS = [
    "mars", "moon", "earth", "satellite", "spacecraft", "galaxy", "nebula",
    "astronaut", "space station", "rocket", "launch", "solar system",
    "jupiter", "saturn", "neptune", "venus", "mercury", "pluto",
]


class ResourceNotFound(Exception):
    """The upstream call succeeded but the requested item is not in it."""


class NasaAdapters:
    """APOD, Mars Rovers, EPIC, NEO and image search on top of one client."""

    def __init__(self, client: NasaAPIClient):
        self.client = client

    # APOD

    async def get_apod(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.fetch(resources.APOD, params=params)

    # Mars Rovers

    async def get_mars_rovers(self) -> Any:
        return await self.client.fetch(resources.MARS_ROVERS)

    async def get_rover_photos(self, rover: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.fetch(resources.MARS_ROVER_PHOTOS, {"rover": rover}, params)

    async def get_rover_manifest(self, rover: str) -> Any:
        return await self.client.fetch(resources.MARS_ROVER_MANIFEST, {"rover": rover})

    async def get_rover_cameras(self, rover: str) -> List[Dict[str, Any]]:
        rover_list = RoverList.model_validate(await self.get_mars_rovers())
        for entry in rover_list.rovers:
            if entry.name.lower() == rover.lower():
                return [camera.model_dump(exclude_unset=True) for camera in entry.cameras]
        raise ResourceNotFound(f"Rover {rover} not found")

    # EPIC

    async def get_epic(self, date: Optional[str] = None) -> Any:
        if date:
            return await self.client.fetch(resources.EPIC_BY_DATE, {"date": date})
        return await self.client.fetch(resources.EPIC_LATEST)

    async def get_epic_dates(self) -> Any:
        return await self.client.fetch(resources.EPIC_DATES)

    def epic_image_url(self, identifier: str, date: str, image: str, enhanced: bool = False) -> Dict[str, Any]:
        url = build_epic_image_url(self.client.base_url, self.client.api_key, date, image, enhanced)
        return {"imageURL": url, "identifier": identifier, "enhanced": enhanced}

    # NEO

    async def get_neo_feed(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.fetch(resources.NEO_FEED, params=params)

    async def get_neo(self, asteroid_id: str) -> Any:
        return await self.client.fetch(resources.NEO_LOOKUP, {"asteroid_id": asteroid_id})

    async def get_hazardous_neos(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return filter_hazardous(await self.get_neo_feed(params))

    async def get_neos_by_size(
        self, min_km: float, max_km: float, params: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        return filter_by_size(await self.get_neo_feed(params), min_km, max_km)

    async def get_neo_summary(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        params = dict(params or {})
        feed = await self.get_neo_feed(params)
        summary = summarize(feed, params.get("start_date"), params.get("end_date"))
        return summary.model_dump(by_alias=True)

    # Image and Video Library

    async def search_images(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.fetch(resources.IMAGE_SEARCH, params=params)

    def search_suggestions(self) -> List[str]:
        return list(SEARCH_SUGGESTIONS)
