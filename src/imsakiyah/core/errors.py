class ImsakiyahError(Exception):
    """Base error for imsakiyah external collaborators."""


class PositionUnavailableError(ImsakiyahError):
    """Raised when a geolocation provider cannot produce a position."""


class GeocodeError(ImsakiyahError):
    """Raised when reverse geocoding fails (network, HTTP status, or payload)."""


class ScheduleApiError(ImsakiyahError):
    """Raised when the equran.id imsakiyah API cannot be reached or parsed."""
