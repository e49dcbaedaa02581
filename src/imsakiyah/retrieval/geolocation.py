"""Geolocation providers — where is the user?

A provider answers ``get_current_position(options)`` with ``Coordinates`` or
raises ``PositionUnavailableError``. Callers with no provider at all pass
``None`` to the resolver, which reports the platform as unsupported.
"""

import logging
import time
from typing import Protocol

import httpx

from imsakiyah.config import settings
from imsakiyah.core.errors import PositionUnavailableError
from imsakiyah.core.types import Coordinates, PositionOptions

logger = logging.getLogger(__name__)

IP_GEOLOCATION_URLS = (
    "https://ipapi.co/json/",
    "https://ipinfo.io/json",
)


def default_position_options() -> PositionOptions:
    """Position hints from settings (high accuracy, 10s timeout, no cached fixes)."""
    return PositionOptions(
        high_accuracy=settings.geolocation_high_accuracy,
        timeout_ms=settings.geolocation_timeout_ms,
        maximum_age_ms=settings.geolocation_maximum_age_ms,
    )


class GeolocationProvider(Protocol):
    async def get_current_position(self, options: PositionOptions) -> Coordinates: ...


class StaticPositionProvider:
    """Always reports the same position — coordinates given on the CLI or in a request."""

    def __init__(self, coordinates: Coordinates):
        self.coordinates = coordinates

    async def get_current_position(self, options: PositionOptions) -> Coordinates:
        lat, lon = self.coordinates.latitude, self.coordinates.longitude
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise PositionUnavailableError(f"Coordinates out of range: {lat}, {lon}")
        return self.coordinates


def _coordinates_from_ip_payload(data: dict) -> Coordinates | None:
    """Read lat/lon from an ipapi.co (latitude/longitude) or ipinfo.io ("lat,lon") payload."""
    lat = data.get("latitude")
    lon = data.get("longitude")

    if lat is None or lon is None:
        loc = data.get("loc")
        if isinstance(loc, str) and "," in loc:
            lat, lon = loc.split(",", 1)

    if lat is None or lon is None:
        return None
    try:
        return Coordinates(float(lat), float(lon))
    except (TypeError, ValueError):
        return None


class IPGeolocationProvider:
    """Approximate position from the caller's public IP address.

    City-level at best; ``high_accuracy`` cannot be honoured and is ignored.
    A fix younger than ``maximum_age_ms`` is reused instead of querying again.
    """

    def __init__(self, urls: tuple[str, ...] = IP_GEOLOCATION_URLS):
        self.urls = urls
        self._last_fix: tuple[Coordinates, float] | None = None

    async def get_current_position(self, options: PositionOptions) -> Coordinates:
        if self._last_fix and options.maximum_age_ms > 0:
            coords, fixed_at = self._last_fix
            if (time.monotonic() - fixed_at) * 1000 < options.maximum_age_ms:
                logger.info("Reusing IP position fix from %.0fs ago", time.monotonic() - fixed_at)
                return coords

        async with httpx.AsyncClient(
            timeout=options.timeout_ms / 1000,
            headers={"User-Agent": settings.http_user_agent},
        ) as client:
            for url in self.urls:
                try:
                    resp = await client.get(url)
                    resp.raise_for_status()
                    data = resp.json()
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning("IP geolocation via %s failed: %s", url, e)
                    continue

                coords = _coordinates_from_ip_payload(data) if isinstance(data, dict) else None
                if coords is None:
                    logger.warning("IP geolocation via %s returned no coordinates", url)
                    continue

                logger.info("IP position: %.4f, %.4f (via %s)", coords.latitude, coords.longitude, url)
                self._last_fix = (coords, time.monotonic())
                return coords

        raise PositionUnavailableError("Unable to detect position from IP address")
