"""
Declarative descriptors for every NASA endpoint the API proxies.

Each resource names the upstream path, which base URL it lives under, the
query parameters NASA should always receive, and the outbound timeout.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

API = "api"
IMAGES = "images"

DEFAULT_TIMEOUT = 10
SEARCH_TIMEOUT = 15


class Resource(BaseModel):
    """One upstream endpoint."""
    name: str
    label: str
    path: str
    base: str = API
    default_params: Dict[str, Any] = Field(default_factory=dict)
    timeout: Optional[float] = None
    send_api_key: bool = True

    model_config = {"frozen": True}

    def format_path(self, **path_params: Any) -> str:
        return self.path.format(**path_params)


APOD = Resource(name="apod", label="APOD", path="/planetary/apod")

MARS_ROVERS = Resource(
    name="mars_rovers", label="Mars rovers", path="/mars-photos/api/v1/rovers"
)
MARS_ROVER_PHOTOS = Resource(
    name="mars_rover_photos",
    label="Mars Rover photos",
    path="/mars-photos/api/v1/rovers/{rover}/photos",
)
MARS_ROVER_MANIFEST = Resource(
    name="mars_rover_manifest",
    label="Mars Rover manifest",
    path="/mars-photos/api/v1/manifests/{rover}",
)

EPIC_LATEST = Resource(name="epic_latest", label="EPIC data", path="/EPIC/api/natural/latest")
EPIC_BY_DATE = Resource(name="epic_by_date", label="EPIC data", path="/EPIC/api/natural/date/{date}")
EPIC_DATES = Resource(name="epic_dates", label="available EPIC dates", path="/EPIC/api/natural/all")

NEO_FEED = Resource(name="neo_feed", label="NEO data", path="/neo/rest/v1/feed")
NEO_LOOKUP = Resource(name="neo_lookup", label="NEO data", path="/neo/rest/v1/neo/{asteroid_id}")

IMAGE_SEARCH = Resource(
    name="image_search",
    label="NASA images",
    path="/search",
    base=IMAGES,
    default_params={"media_type": "image"},
    timeout=SEARCH_TIMEOUT,
    send_api_key=False,
)

ALL_RESOURCES = (
    APOD,
    MARS_ROVERS,
    MARS_ROVER_PHOTOS,
    MARS_ROVER_MANIFEST,
    EPIC_LATEST,
    EPIC_BY_DATE,
    EPIC_DATES,
    NEO_FEED,
    NEO_LOOKUP,
    IMAGE_SEARCH,
)
