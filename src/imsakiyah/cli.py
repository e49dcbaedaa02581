"""Imsakiyah CLI — resolve a position to a schedule location and print the Ramadan schedule."""

import asyncio
import sys

from imsakiyah.config import settings
from imsakiyah.observability.logging import correlation_scope, setup_logging
from imsakiyah.observability.tracing import enable_async_logging, set_experiment, set_tracking_uri

USAGE = """Usage: imsakiyah --lat <lat> --lon <lon> [--schedule]
       imsakiyah <lat> <lon> [--schedule]
       imsakiyah --ip [--schedule]
  Example: imsakiyah --lat -7.7162 --lon 110.3554
  Example: imsakiyah --ip --schedule"""


def _init_mlflow() -> None:
    """Initialize MLflow tracking for the current process."""
    set_tracking_uri(settings.mlflow_tracking_uri)
    set_experiment(settings.mlflow_experiment_name)
    enable_async_logging()


def _coordinate_args(args: list[str]) -> tuple[str, str] | None:
    """Pull lat/lon from ``--lat X --lon Y`` (either order) or two positionals."""
    if "--lat" in args or "--lon" in args:
        values = {}
        rest = list(args)
        for flag in ("--lat", "--lon"):
            if flag not in rest:
                return None
            i = rest.index(flag)
            if i + 1 >= len(rest):
                return None
            values[flag] = rest[i + 1]
            del rest[i:i + 2]
        return (values["--lat"], values["--lon"]) if not rest else None
    if len(args) == 2:
        return args[0], args[1]
    return None


def main() -> None:
    """Resolve a location: imsakiyah --lat <lat> --lon <lon> | <lat> <lon> | --ip"""
    setup_logging(json_format=False, level=settings.log_level)

    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        sys.exit(0 if args else 1)

    show_schedule = "--schedule" in args
    args = [a for a in args if a != "--schedule"]
    coords = _coordinate_args(args)

    if args == ["--ip"]:
        from imsakiyah.retrieval.geolocation import IPGeolocationProvider
        provider = IPGeolocationProvider()
    elif coords:
        from imsakiyah.core.types import Coordinates
        from imsakiyah.retrieval.geolocation import StaticPositionProvider
        try:
            provider = StaticPositionProvider(Coordinates(float(coords[0]), float(coords[1])))
        except ValueError:
            print(f"Invalid coordinates: {coords[0]} {coords[1]}")
            sys.exit(1)
    else:
        print(USAGE)
        sys.exit(1)

    _init_mlflow()
    asyncio.run(_locate(provider, show_schedule))


async def _locate(provider, show_schedule: bool) -> None:
    """Geolocate → reverse geocode → province/city resolution, then optionally the schedule."""
    from imsakiyah.core.errors import ScheduleApiError
    from imsakiyah.core.types import ResolutionSession
    from imsakiyah.pipeline.locate import default_location, resolve_location
    from imsakiyah.retrieval.equran import fetch_schedule

    print("\nJadwal Imsakiyah — Location")
    print(f"{'=' * 50}")

    session = ResolutionSession()
    with correlation_scope():
        outcome = await resolve_location(session, provider)
    location = session.location

    if location:
        coords = location.coordinates
        if coords:
            print(f"Coordinates:  {coords.latitude:.5f}, {coords.longitude:.5f}")
        print(f"Province:     {location.province} ({location.province_match.value})")
        print(f"City:         {location.city} ({location.city_match.value})")
        if location.degraded:
            print("Note:         city not matched by name — first city of the province used")
    else:
        failure = session.failure or outcome
        print(f"Location not resolved: {failure.reason.value if failure else 'superseded'}")
        if failure and failure.detail:
            print(f"  {failure.detail}")
        location = default_location()
        print(f"Using default: {location.province} / {location.city}")

    if not show_schedule:
        return

    try:
        schedule = await fetch_schedule(location.province, location.city)
    except ScheduleApiError as e:
        print(f"\nCould not load schedule: {e}")
        return

    print(f"\n{'─' * 50}")
    print(f"Ramadan {schedule.hijri_year} H / {schedule.gregorian_year} — {schedule.city}, {schedule.province}")
    print(f"{'Day':>3}  {'Imsak':>5}  {'Subuh':>5}  {'Terbit':>6}  {'Dhuha':>5}  "
          f"{'Zuhur':>5}  {'Asar':>5}  {'Maghrib':>7}  {'Isya':>5}")
    for d in schedule.days:
        print(f"{d.day:>3}  {d.imsak:>5}  {d.subuh:>5}  {d.terbit:>6}  {d.dhuha:>5}  "
              f"{d.dzuhur:>5}  {d.ashar:>5}  {d.maghrib:>7}  {d.isya:>5}")


if __name__ == "__main__":
    main()
