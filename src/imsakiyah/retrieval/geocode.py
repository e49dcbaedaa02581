"""Nominatim reverse geocoding — coordinates to an OSM address record.

Returns the raw ``address`` mapping (state, county, city, town, ...) for the
field selector. Names come back in Indonesian when ``accept-language`` is
``id-ID``.

Includes an in-memory cache with 1hr TTL: Nominatim's usage policy allows
at most one request per second, and GPS fixes repeat often.
"""

import logging
import time

import httpx

from imsakiyah.config import settings
from imsakiyah.core.errors import GeocodeError
from imsakiyah.observability.tracing import trace

logger = logging.getLogger(__name__)

# In-memory reverse-geocode cache — key → (address or None, stored_at)
_geocode_cache: dict[str, tuple[dict[str, str] | None, float]] = {}

# ~1 m at the equator; finer GPS jitter maps to the same cache entry
COORD_PRECISION = 5


def _cache_key(lat: float, lon: float, language: str) -> str:
    """Generate a stable cache key from rounded coordinates and language."""
    return f"{round(lat, COORD_PRECISION)},{round(lon, COORD_PRECISION)}|{language.lower()}"


def clear_cache() -> None:
    _geocode_cache.clear()


@trace(name="reverse_geocode", span_type="TOOL")
async def reverse_geocode(lat: float, lon: float, language: str | None = None) -> dict[str, str] | None:
    """Reverse geocode a position with Nominatim.

    Returns:
        The ``address`` object of the Nominatim response, or None when the
        response carries no address (open sea, unmapped area).

    Raises:
        GeocodeError: on network failure, non-2xx status, or a non-JSON body.
    """
    language = language or settings.geocode_language

    key = _cache_key(lat, lon, language)
    if key in _geocode_cache:
        cached_result, cached_time = _geocode_cache[key]
        if time.monotonic() - cached_time < settings.geocode_cache_ttl:
            logger.info("Reverse geocode cache hit for: %.5f, %.5f", lat, lon)
            return cached_result

    logger.info("Reverse geocoding via Nominatim: lat=%.5f, lon=%.5f", lat, lon)
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout,
            headers={"User-Agent": settings.http_user_agent},
        ) as client:
            resp = await client.get(
                settings.nominatim_url,
                params={
                    "format": "json",
                    "lat": lat,
                    "lon": lon,
                    "accept-language": language,
                },
            )
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPStatusError as e:
        raise GeocodeError(f"Nominatim returned HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise GeocodeError(f"Nominatim request failed: {e}") from e
    except ValueError as e:
        raise GeocodeError(f"Nominatim returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GeocodeError(f"Unexpected Nominatim payload type: {type(data).__name__}")

    if "error" in data:
        # Nominatim answers 200 {"error": "Unable to geocode"} for unmapped points
        logger.warning("Nominatim could not geocode %.5f, %.5f: %s", lat, lon, data["error"])

    address = data.get("address")
    if not isinstance(address, dict) or not address:
        logger.warning("No address in Nominatim response for: %.5f, %.5f", lat, lon)
        result = None
    else:
        result = {k: v for k, v in address.items() if isinstance(v, str)}
        logger.info("Nominatim address fields: %s", ", ".join(sorted(result)))

    _geocode_cache[key] = (result, time.monotonic())
    return result
