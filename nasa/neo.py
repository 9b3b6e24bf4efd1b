"""
Client-side reductions over the date-bucketed NeoWs feed.

Filters keep the original upstream objects (dicts) so untyped fields survive;
the typed NearEarthObject view is only used to read the flags and diameters.
"""
from typing import Any, Callable, Dict, List, Optional

from nasa.models import AverageDiameter, DateRange, NearEarthObject, NeoSummary


def _filter_feed(feed: Dict[str, Any], keep: Callable[[NearEarthObject], bool]) -> Dict[str, Any]:
    buckets: Dict[str, List[Any]] = {}
    for day, objects in (feed.get("near_earth_objects") or {}).items():
        kept = [obj for obj in objects if keep(NearEarthObject.model_validate(obj))]
        if kept:
            buckets[day] = kept

    filtered = dict(feed)
    filtered["near_earth_objects"] = buckets
    filtered["element_count"] = sum(len(objects) for objects in buckets.values())
    return filtered


def filter_hazardous(feed: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only potentially hazardous objects; empty date buckets are dropped."""
    return _filter_feed(feed, lambda neo: bool(neo.is_potentially_hazardous_asteroid))


def filter_by_size(feed: Dict[str, Any], min_km: float, max_km: float) -> Dict[str, Any]:
    """Keep objects whose average estimated diameter (km) lies in [min_km, max_km]."""

    def in_range(neo: NearEarthObject) -> bool:
        diameter = neo.diameter_km()
        if diameter is None or diameter.estimated_diameter_min is None or diameter.estimated_diameter_max is None:
            return False
        average = (diameter.estimated_diameter_min + diameter.estimated_diameter_max) / 2
        return min_km <= average <= max_km

    return _filter_feed(feed, in_range)


def summarize(
    feed: Dict[str, Any],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> NeoSummary:
    total = 0
    hazardous = 0
    min_sum = 0.0
    max_sum = 0.0
    measured = 0

    for objects in (feed.get("near_earth_objects") or {}).values():
        for obj in objects:
            neo = NearEarthObject.model_validate(obj)
            total += 1
            if neo.is_potentially_hazardous_asteroid:
                hazardous += 1
            diameter = neo.diameter_km()
            if diameter and diameter.estimated_diameter_min and diameter.estimated_diameter_max:
                min_sum += diameter.estimated_diameter_min
                max_sum += diameter.estimated_diameter_max
                measured += 1

    average = AverageDiameter(min=min_sum / measured, max=max_sum / measured) if measured else AverageDiameter()
    return NeoSummary(
        total_count=total,
        hazardous_count=hazardous,
        date_range=DateRange(start=start_date or "unknown", end=end_date or "unknown"),
        average_diameter=average,
    )
