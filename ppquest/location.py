"""Device position lookup for LOCATION quests.

The position comes from an IP geolocation service. Failures are reported as
``LocationError`` with the same reason codes a browser geolocation API uses.
"""

import logging

import requests

logger = logging.getLogger(__name__)

GEOLOCATION_URL = "http://ip-api.com/json/"

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

_MESSAGES = {
    PERMISSION_DENIED: "Location denied! Enable GPS in settings.",
    POSITION_UNAVAILABLE: "Location unavailable. Move outdoors!",
    TIMEOUT: "Location timeout. Satellite search failed.",
}


class LocationError(Exception):
    """Raised when the device position cannot be determined."""

    def __init__(self, code: int, message: str = ""):
        super().__init__(message or _MESSAGES.get(code, "Unknown location error"))
        self.code = code


def describe_location_error(error: LocationError) -> str:
    """User-facing message for a location failure."""
    return _MESSAGES.get(error.code, "System error. Try again.")


def format_coordinates(lat: float, lng: float) -> str:
    return f"{lat}, {lng}"


def locate_device(consent: bool, timeout: float = 8) -> str:
    """Look up the current position as a ``"<lat>, <lng>"`` string.

    Args:
        consent: Whether the user allowed sharing their location
        timeout: Seconds to wait for the lookup

    Raises:
        LocationError: code 1 without consent, 2 when no position is
            available, 3 when the lookup times out
    """
    if not consent:
        raise LocationError(PERMISSION_DENIED)

    try:
        response = requests.get(GEOLOCATION_URL, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.Timeout as e:
        logger.warning(f"Location lookup timed out: {e}")
        raise LocationError(TIMEOUT) from e
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(f"Location lookup failed: {e}")
        raise LocationError(POSITION_UNAVAILABLE) from e

    if payload.get("status") != "success" or "lat" not in payload or "lon" not in payload:
        logger.warning(f"Location lookup returned no position: {payload}")
        raise LocationError(POSITION_UNAVAILABLE)

    return format_coordinates(payload["lat"], payload["lon"])
