"""equran.id imsakiyah API — province list, kabupaten/kota list, Ramadan schedule.

Endpoints (base ``https://equran.id/api/v2/imsakiyah``):

    GET  /provinsi                              → {"data": ["Aceh", ..., "D.I. Yogyakarta", ...]}
    POST /kabkota   {"provinsi": ...}           → {"data": ["Kab. Bantul", ..., "Kota Yogyakarta"]}
    POST /          {"provinsi": ..., "kabkota": ...}
                                                → {"data": {"provinsi", "kabkota", "hijriah",
                                                            "masehi", "imsakiyah": [...]}}

The province and city names returned here are the closed vocabulary every
resolved location must come from. Lists are cached in memory; they only
change when the ministry redraws boundaries.
"""

import logging
import time

import httpx

from imsakiyah.config import settings
from imsakiyah.core.errors import ScheduleApiError
from imsakiyah.core.types import ImsakiyahDay, ImsakiyahSchedule
from imsakiyah.observability.tracing import trace

logger = logging.getLogger(__name__)

# key → (names, stored_at); "" holds the province list, a province name its cities
_directory_cache: dict[str, tuple[list[str], float]] = {}

SCHEDULE_TIME_FIELDS = ("imsak", "subuh", "terbit", "dhuha", "dzuhur", "ashar", "maghrib", "isya")


def clear_cache() -> None:
    _directory_cache.clear()


def _cached(key: str) -> list[str] | None:
    if key in _directory_cache:
        names, stored_at = _directory_cache[key]
        if time.monotonic() - stored_at < settings.directory_cache_ttl:
            return list(names)
    return None


async def _request(method: str, path: str, payload: dict | None = None):
    """Call the imsakiyah API and return the ``data`` member of the response."""
    url = f"{settings.equran_api_base}{path}"
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout,
            headers={"User-Agent": settings.http_user_agent},
        ) as client:
            if method == "GET":
                resp = await client.get(url)
            else:
                resp = await client.post(url, json=payload)
            resp.raise_for_status()
            body = resp.json()
    except httpx.HTTPStatusError as e:
        raise ScheduleApiError(f"{method} {path or '/'} returned HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ScheduleApiError(f"{method} {path or '/'} failed: {e}") from e
    except ValueError as e:
        raise ScheduleApiError(f"{method} {path or '/'} returned invalid JSON: {e}") from e

    if not isinstance(body, dict):
        raise ScheduleApiError(f"Unexpected response type from {path or '/'}: {type(body).__name__}")
    return body.get("data")


def _names(data, what: str) -> list[str]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ScheduleApiError(f"Expected a list of {what}, got {type(data).__name__}")
    return [name for name in data if isinstance(name, str) and name.strip()]


@trace(name="list_provinces", span_type="TOOL")
async def list_provinces() -> list[str]:
    """All provinces known to the schedule API, in API order."""
    cached = _cached("")
    if cached is not None:
        return cached

    provinces = _names(await _request("GET", "/provinsi"), "provinces")
    logger.info("Loaded %d provinces", len(provinces))
    if provinces:
        _directory_cache[""] = (list(provinces), time.monotonic())
    return provinces


@trace(name="list_cities", span_type="TOOL")
async def list_cities(province: str) -> list[str]:
    """Kabupaten/kota of one province, in API order. Empty province → []."""
    if not province:
        return []

    cached = _cached(province)
    if cached is not None:
        return cached

    cities = _names(await _request("POST", "/kabkota", {"provinsi": province}), "cities")
    logger.info("Loaded %d cities for %s", len(cities), province, extra={"province": province})
    if cities:
        _directory_cache[province] = (list(cities), time.monotonic())
    return cities


def _parse_day(row: dict) -> ImsakiyahDay:
    return ImsakiyahDay(
        day=int(row["tanggal"]),
        **{f: str(row.get(f) or "") for f in SCHEDULE_TIME_FIELDS},
    )


@trace(name="fetch_schedule", span_type="TOOL")
async def fetch_schedule(province: str, city: str) -> ImsakiyahSchedule:
    """Full Ramadan imsakiyah schedule for a resolved province and kabupaten/kota."""
    data = await _request("POST", "", {"provinsi": province, "kabkota": city})
    if not isinstance(data, dict):
        raise ScheduleApiError(f"No schedule for {city}, {province}")

    try:
        days = [_parse_day(row) for row in data.get("imsakiyah") or []]
    except (KeyError, TypeError, ValueError) as e:
        raise ScheduleApiError(f"Malformed schedule row for {city}: {e}") from e

    schedule = ImsakiyahSchedule(
        province=data.get("provinsi") or province,
        city=data.get("kabkota") or city,
        hijri_year=str(data.get("hijriah") or ""),
        gregorian_year=str(data.get("masehi") or ""),
        days=sorted(days, key=lambda d: d.day),
    )
    logger.info(
        "Loaded %d-day schedule for %s, %s", len(schedule.days), schedule.city, schedule.province,
        extra={"province": schedule.province, "city": schedule.city},
    )
    return schedule


class EquranDirectory:
    """Province/city reference lists backed by the equran.id API."""

    async def list_provinces(self) -> list[str]:
        return await list_provinces()

    async def list_cities(self, province: str) -> list[str]:
        return await list_cities(province)
