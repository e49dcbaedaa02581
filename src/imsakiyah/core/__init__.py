"""Core domain types shared across all imsakiyah modules."""

from imsakiyah.core.types import (
    AddressCandidates,
    Coordinates,
    FailureReason,
    ImsakiyahDay,
    ImsakiyahSchedule,
    MatchKind,
    NameMatch,
    NameContext,
    PositionOptions,
    ResolutionFailure,
    ResolutionSession,
    ResolutionState,
    ResolvedLocation,
    TraceEvent,
)

__all__ = [
    "AddressCandidates",
    "Coordinates",
    "FailureReason",
    "ImsakiyahDay",
    "ImsakiyahSchedule",
    "MatchKind",
    "NameMatch",
    "NameContext",
    "PositionOptions",
    "ResolutionFailure",
    "ResolutionSession",
    "ResolutionState",
    "ResolvedLocation",
    "TraceEvent",
]
