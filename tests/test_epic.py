"""
Tests for EPIC archive URL construction.
"""
from datetime import date

import pytest

from nasa.epic import build_epic_image_url

BASE = "https://api.nasa.gov"
IMAGE = "epic_1b_20210305003633"


def test_natural_image_url():
    url = build_epic_image_url(BASE, "KEY", "2021-03-05", IMAGE)
    assert url == f"{BASE}/EPIC/archive/natural/2021/03/05/png/{IMAGE}.png?api_key=KEY"


def test_enhanced_swaps_only_the_tree_segment():
    natural = build_epic_image_url(BASE, "KEY", "2021-03-05", IMAGE, enhanced=False)
    enhanced = build_epic_image_url(BASE, "KEY", "2021-03-05", IMAGE, enhanced=True)
    assert "/enhanced/" in enhanced
    assert "/natural/" not in enhanced
    assert enhanced == natural.replace("/natural/", "/enhanced/")


def test_accepts_epic_metadata_timestamps():
    url = build_epic_image_url(BASE, "KEY", "2021-03-05 00:36:33", IMAGE)
    assert "/2021/03/05/" in url


def test_pads_month_and_day():
    url = build_epic_image_url(BASE + "/", "KEY", date(2019, 1, 2), IMAGE)
    assert url.startswith(f"{BASE}/EPIC/archive/natural/2019/01/02/png/")


def test_api_key_is_url_encoded():
    url = build_epic_image_url(BASE, "a b&c", "2021-03-05", IMAGE)
    assert url.endswith("?api_key=a+b%26c")


def test_invalid_date_raises():
    with pytest.raises(ValueError):
        build_epic_image_url(BASE, "KEY", "not-a-date", IMAGE)
