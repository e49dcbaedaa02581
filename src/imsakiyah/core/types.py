"""Domain types for the imsakiyah locator.

All shared dataclasses and enums live here to prevent circular imports
and establish a single source of truth for the domain model. Every
other module imports from here.
"""

import re
from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Name matching
# ---------------------------------------------------------------------------

# Raw names that already carry their own kabupaten/kota type word
_CITY_TYPE_WORD = re.compile(r"^(?:kabupaten|kab|regency|kota|city)\b", re.IGNORECASE)


class NameContext(str, Enum):
    """Which honorific vocabulary applies when normalizing a name."""

    PROVINCE = "province"
    CITY = "city"


class MatchKind(str, Enum):
    """How a reference entry was selected."""

    EXACT = "exact"
    PARTIAL = "partial"
    FALLBACK = "fallback"  # degraded: first entry of the scoped list


@dataclass(frozen=True)
class NameMatch:
    """A reference entry together with the stage that selected it."""

    name: str
    kind: MatchKind


@dataclass(frozen=True)
class AddressCandidates:
    """Province/city strings picked out of a reverse-geocoded address."""

    province_candidates: list[str] = field(default_factory=list)
    raw_city: str | None = None
    city_type_hint: str | None = None  # "Kab.", "Kota", or None

    def city_query(self) -> str | None:
        """The string handed to the city resolver: hint-prefixed when typed."""
        if not self.raw_city:
            return None
        # A type the geocoder stated itself ("Kota Bekasi") beats the field-based hint
        if self.city_type_hint and not _CITY_TYPE_WORD.match(self.raw_city):
            return f"{self.city_type_hint} {self.raw_city}"
        return self.raw_city


# ---------------------------------------------------------------------------
# Geolocation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coordinates:
    """WGS84 position."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class PositionOptions:
    """Hints passed to a geolocation provider."""

    high_accuracy: bool = True
    timeout_ms: int = 10000
    maximum_age_ms: int = 0


# ---------------------------------------------------------------------------
# Resolution outcome
# ---------------------------------------------------------------------------

class ResolutionState(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    RESOLVING = "resolving"
    FAILED = "failed"
    DONE = "done"


class FailureReason(str, Enum):
    """Why a resolution attempt ended without a location. None of these are fatal."""

    GEOLOCATION_UNSUPPORTED = "geolocation_unsupported"
    POSITION_UNAVAILABLE = "position_unavailable"
    GEOCODE_FAILED = "geocode_failed"
    PROVINCE_LIST_UNAVAILABLE = "province_list_unavailable"
    PROVINCE_NOT_FOUND = "province_not_found"
    CITY_NOT_FOUND = "city_not_found"


@dataclass(frozen=True)
class ResolvedLocation:
    """A (province, city) pair drawn verbatim from the schedule API's reference lists."""

    province: str
    city: str
    province_match: MatchKind = MatchKind.EXACT
    city_match: MatchKind = MatchKind.EXACT
    coordinates: Coordinates | None = None

    @property
    def degraded(self) -> bool:
        """True when the city came from the first-entry fallback, not a name match."""
        return self.city_match is MatchKind.FALLBACK


@dataclass(frozen=True)
class ResolutionFailure:
    """A reason-tagged failure. Callers apply their own default location."""

    reason: FailureReason
    detail: str = ""


@dataclass(frozen=True)
class TraceEvent:
    """One diagnostic step emitted during resolution. Never affects the outcome."""

    step: str
    detail: dict = field(default_factory=dict)


@dataclass
class ResolutionSession:
    """Caller-owned resolution state.

    ``state`` follows Idle → Locating → (Resolving | Failed) → Done.
    ``generation`` increases with every attempt; an attempt whose generation
    is no longer current stops writing to the session (last writer wins).
    """

    state: ResolutionState = ResolutionState.IDLE
    generation: int = 0
    result: ResolvedLocation | ResolutionFailure | None = None
    events: list[TraceEvent] = field(default_factory=list)

    def begin(self) -> int:
        """Start a new attempt, superseding any in-flight one. Returns its generation."""
        self.generation += 1
        self.state = ResolutionState.IDLE
        self.result = None
        self.events = []
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    @property
    def location(self) -> ResolvedLocation | None:
        return self.result if isinstance(self.result, ResolvedLocation) else None

    @property
    def failure(self) -> ResolutionFailure | None:
        return self.result if isinstance(self.result, ResolutionFailure) else None


# ---------------------------------------------------------------------------
# Imsakiyah schedule (equran.id)
# ---------------------------------------------------------------------------

@dataclass
class ImsakiyahDay:
    """One day of the Ramadan schedule. Times are "HH:MM" local strings."""

    day: int  # tanggal — 1-based day of Ramadan
    imsak: str = ""
    subuh: str = ""
    terbit: str = ""
    dhuha: str = ""
    dzuhur: str = ""
    ashar: str = ""
    maghrib: str = ""
    isya: str = ""


@dataclass
class ImsakiyahSchedule:
    """Full Ramadan schedule for one kabupaten/kota."""

    province: str
    city: str
    hijri_year: str = ""
    gregorian_year: str = ""
    days: list[ImsakiyahDay] = field(default_factory=list)
