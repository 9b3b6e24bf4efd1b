"""
EPIC archive URL construction.

The archive URL pattern is:
    {base}/EPIC/archive/{natural|enhanced}/{YYYY}/{MM}/{DD}/png/{image}.png
"""
from datetime import date as date_type
from typing import Union
from urllib.parse import urlencode

NATURAL = "natural"
ENHANCED = "enhanced"


def parse_epic_date(value: Union[str, date_type]) -> date_type:
    """Accept 'YYYY-MM-DD', 'YYYY-MM-DD HH:MM:SS' or an ISO datetime."""
    if isinstance(value, date_type):
        return value
    return date_type.fromisoformat(value.strip()[:10])


def build_epic_image_url(
    base_url: str,
    api_key: str,
    date: Union[str, date_type],
    image: str,
    enhanced: bool = False,
) -> str:
    day = parse_epic_date(date)
    collection = ENHANCED if enhanced else NATURAL
    path = f"/EPIC/archive/{collection}/{day.year}/{day.month:02d}/{day.day:02d}/png/{image}.png"
    return f"{base_url.rstrip('/')}{path}?{urlencode({'api_key': api_key})}"
