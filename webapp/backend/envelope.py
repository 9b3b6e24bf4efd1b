"""
Uniform response envelope: {success, data, error?, message, timestamp}.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

APOD_FETCH_ERROR = "APOD_FETCH_ERROR"
MARS_ROVERS_FETCH_ERROR = "MARS_ROVERS_FETCH_ERROR"
MARS_ROVER_FETCH_ERROR = "MARS_ROVER_FETCH_ERROR"
MARS_ROVER_MANIFEST_FETCH_ERROR = "MARS_ROVER_MANIFEST_FETCH_ERROR"
EPIC_FETCH_ERROR = "EPIC_FETCH_ERROR"
EPIC_IMAGE_URL_ERROR = "EPIC_IMAGE_URL_ERROR"
NEO_FETCH_ERROR = "NEO_FETCH_ERROR"
IMAGE_SEARCH_ERROR = "IMAGE_SEARCH_ERROR"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def success_envelope(data: Any, message: str) -> Dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "message": message,
        "timestamp": utc_timestamp(),
    }


def error_envelope(code: str, message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "data": None,
        "error": code,
        "message": message,
        "timestamp": utc_timestamp(),
    }


def error_response(status_code: int, code: str, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_envelope(code, message), headers=headers)
