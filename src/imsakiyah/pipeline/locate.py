"""Location resolution pipeline — position → equran.id (province, kabupaten/kota).

Steps:
  1. Geolocate (provider supplied by the caller; None = unsupported platform)
  2. Reverse geocode the position with Nominatim → address record
  3. Select province candidates and the raw city name from the record
  4. Resolve the province against the API's province list
  5. Fetch the province's kabupaten/kota list and resolve the city
  6. No city match → first listed city (degraded, not a failure)

Every step that can fail ends the attempt with a reason-tagged
``ResolutionFailure``; nothing here raises for an unresolvable place. The
caller decides what default location to show.

Attempts are cooperative: each one takes a generation number from the
caller-owned ``ResolutionSession``. A newer attempt (or ``session.begin()``)
makes older ones stale; a stale attempt stops at its next checkpoint,
returns None, and leaves the session untouched.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Protocol

from imsakiyah.config import settings
from imsakiyah.core.errors import GeocodeError, PositionUnavailableError, ScheduleApiError
from imsakiyah.core.types import (
    Coordinates,
    FailureReason,
    MatchKind,
    PositionOptions,
    ResolutionFailure,
    ResolutionSession,
    ResolutionState,
    ResolvedLocation,
    TraceEvent,
)
from imsakiyah.matching.address import select_candidates
from imsakiyah.matching.resolver import describe_city_entries, match_city, match_province
from imsakiyah.observability.tracing import set_tag, start_span, trace
from imsakiyah.retrieval.equran import EquranDirectory
from imsakiyah.retrieval.geocode import reverse_geocode
from imsakiyah.retrieval.geolocation import (
    GeolocationProvider,
    StaticPositionProvider,
    default_position_options,
)

logger = logging.getLogger(__name__)

ReverseGeocoder = Callable[[float, float], Awaitable[Mapping[str, object] | None]]
EventSink = Callable[[TraceEvent], None]

Outcome = ResolvedLocation | ResolutionFailure


class Directory(Protocol):
    """Reference lists of the schedule API."""

    async def list_provinces(self) -> list[str]: ...

    async def list_cities(self, province: str) -> list[str]: ...


class _Attempt:
    """One resolution attempt's view of the session."""

    def __init__(self, session: ResolutionSession, on_event: EventSink | None):
        self.session = session
        self.generation = session.begin()
        self.on_event = on_event

    @property
    def current(self) -> bool:
        return self.session.is_current(self.generation)

    def emit(self, step: str, **detail) -> None:
        if not self.current:
            return
        event = TraceEvent(step=step, detail=detail)
        self.session.events.append(event)
        logger.debug("resolve %s: %s", step, detail, extra={"step": step, "generation": self.generation})
        if self.on_event:
            try:
                self.on_event(event)
            except Exception:
                logger.warning("Resolution event sink failed on %s", step, exc_info=True)

    def transition(self, state: ResolutionState) -> bool:
        if not self.current:
            logger.info(
                "Attempt %d superseded before %s", self.generation, state.value,
                extra={"generation": self.generation},
            )
            return False
        self.session.state = state
        return True

    def fail(self, reason: FailureReason, detail: str = "") -> ResolutionFailure | None:
        if not self.transition(ResolutionState.FAILED):
            return None
        failure = ResolutionFailure(reason=reason, detail=detail)
        self.session.result = failure
        logger.warning(
            "Location resolution failed: %s%s", reason.value, f" ({detail})" if detail else "",
            extra={"reason": reason.value, "generation": self.generation},
        )
        set_tag("status", "failed")
        set_tag("failure_reason", reason.value)
        return failure

    def done(self, location: ResolvedLocation) -> ResolvedLocation | None:
        if not self.transition(ResolutionState.DONE):
            return None
        self.session.result = location
        logger.info(
            "Resolved location: %s / %s%s", location.province, location.city,
            " (degraded)" if location.degraded else "",
            extra={"province": location.province, "city": location.city, "generation": self.generation},
        )
        set_tag("status", "degraded" if location.degraded else "success")
        return location


@trace(name="resolve_location", span_type="CHAIN")
async def resolve_location(
    session: ResolutionSession,
    geolocator: GeolocationProvider | None,
    *,
    geocoder: ReverseGeocoder | None = None,
    directory: Directory | None = None,
    options: PositionOptions | None = None,
    on_event: EventSink | None = None,
) -> Outcome | None:
    """Resolve the caller's position to an equran.id (province, city) pair.

    Returns:
        ResolvedLocation on success (possibly degraded), ResolutionFailure
        with a reason otherwise, or None if a newer attempt superseded this one.
    """
    geocoder = geocoder or reverse_geocode
    directory = directory or EquranDirectory()
    options = options or default_position_options()

    attempt = _Attempt(session, on_event)
    if not attempt.transition(ResolutionState.LOCATING):
        return None

    # Step 1: Geolocate
    if geolocator is None:
        return attempt.fail(FailureReason.GEOLOCATION_UNSUPPORTED)

    try:
        coords = await geolocator.get_current_position(options)
    except PositionUnavailableError as e:
        return attempt.fail(FailureReason.POSITION_UNAVAILABLE, str(e))
    if not attempt.current:
        return None
    attempt.emit("position", latitude=coords.latitude, longitude=coords.longitude)

    # Step 2: Reverse geocode
    try:
        address = await geocoder(coords.latitude, coords.longitude)
    except GeocodeError as e:
        return attempt.fail(FailureReason.GEOCODE_FAILED, str(e))
    if not attempt.current:
        return None
    if not address:
        return attempt.fail(FailureReason.GEOCODE_FAILED, "no address in geocoder response")

    if not attempt.transition(ResolutionState.RESOLVING):
        return None

    # Step 3: Field selection
    candidates = select_candidates(address)
    attempt.emit(
        "candidates",
        provinces=list(candidates.province_candidates),
        raw_city=candidates.raw_city,
        city_type_hint=candidates.city_type_hint,
    )
    if not candidates.province_candidates:
        return attempt.fail(FailureReason.PROVINCE_NOT_FOUND, "no province fields in address")

    # Step 4: Province
    try:
        provinces = await directory.list_provinces()
    except ScheduleApiError as e:
        return attempt.fail(FailureReason.PROVINCE_LIST_UNAVAILABLE, str(e))
    if not attempt.current:
        return None
    if not provinces:
        return attempt.fail(FailureReason.PROVINCE_LIST_UNAVAILABLE, "empty province list")

    province_match = None
    with start_span(name="match_province", span_type="PARSER") as span:
        span.set_inputs({"candidates": list(candidates.province_candidates), "entries": len(provinces)})
        for candidate in candidates.province_candidates:
            province_match = match_province(candidate, provinces)
            attempt.emit(
                "province_candidate",
                candidate=candidate,
                matched=province_match.name if province_match else None,
                kind=province_match.kind.value if province_match else None,
            )
            if province_match:
                logger.info(
                    "Matched province: %r → %r (%s)", candidate, province_match.name, province_match.kind.value,
                    extra={"candidate": candidate, "province": province_match.name},
                )
                break
        span.set_outputs({"province": province_match.name if province_match else None})
    if province_match is None:
        return attempt.fail(
            FailureReason.PROVINCE_NOT_FOUND,
            f"no match for {', '.join(candidates.province_candidates)}",
        )

    # Step 5: City
    city_query = candidates.city_query()
    if city_query is None:
        return attempt.fail(FailureReason.CITY_NOT_FOUND, "no city fields in address")

    try:
        cities = await directory.list_cities(province_match.name)
    except ScheduleApiError as e:
        return attempt.fail(FailureReason.CITY_NOT_FOUND, str(e))
    if not attempt.current:
        return None
    if not cities:
        return attempt.fail(FailureReason.CITY_NOT_FOUND, f"no cities listed for {province_match.name}")

    with start_span(name="match_city", span_type="PARSER") as span:
        span.set_inputs({"query": city_query, "entries": len(cities)})
        city_match = match_city(city_query, cities)
        span.set_outputs({"city": city_match.name if city_match else None})
    if city_match:
        city, city_kind = city_match.name, city_match.kind
        attempt.emit("city", query=city_query, matched=city, kind=city_kind.value)
    else:
        # Step 6: Degraded fallback — the province is trustworthy, any city beats no schedule
        city, city_kind = cities[0], MatchKind.FALLBACK
        attempt.emit("city_fallback", query=city_query, selected=city, entries=describe_city_entries(cities))
        logger.warning(
            "No city match for %r in %s, falling back to %r", city_query, province_match.name, city,
            extra={"candidate": city_query, "province": province_match.name, "city": city},
        )

    return attempt.done(ResolvedLocation(
        province=province_match.name,
        city=city,
        province_match=province_match.kind,
        city_match=city_kind,
        coordinates=coords,
    ))


async def resolve_coordinates(
    latitude: float,
    longitude: float,
    session: ResolutionSession | None = None,
    **kwargs,
) -> Outcome | None:
    """Resolve a known position (CLI/API input) — ``resolve_location`` with a static provider."""
    session = session if session is not None else ResolutionSession()
    provider = StaticPositionProvider(Coordinates(latitude, longitude))
    return await resolve_location(session, provider, **kwargs)


def default_location() -> ResolvedLocation:
    """The configured location callers show when resolution fails."""
    return ResolvedLocation(
        province=settings.default_province,
        city=settings.default_city,
        province_match=MatchKind.FALLBACK,
        city_match=MatchKind.FALLBACK,
    )
