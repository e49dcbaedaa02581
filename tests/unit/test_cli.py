"""Tests for the imsakiyah CLI."""

from unittest.mock import AsyncMock, patch

import pytest

from imsakiyah import cli
from imsakiyah.core.errors import ScheduleApiError
from imsakiyah.core.types import ImsakiyahDay, ImsakiyahSchedule, ResolutionSession
from imsakiyah.retrieval.geolocation import IPGeolocationProvider, StaticPositionProvider


@pytest.fixture(autouse=True)
def _keep_root_logger():
    with patch("imsakiyah.cli.setup_logging"):
        yield


class TestArgs:
    def test_no_args_prints_usage(self, capsys):
        with patch("sys.argv", ["imsakiyah"]):
            with pytest.raises(SystemExit) as exc:
                cli.main()

        assert exc.value.code == 1
        assert "Usage" in capsys.readouterr().out

    def test_invalid_coordinates(self, capsys):
        with patch("sys.argv", ["imsakiyah", "north", "east"]):
            with pytest.raises(SystemExit):
                cli.main()

        assert "Invalid coordinates" in capsys.readouterr().out

    def test_coordinates_use_static_provider(self):
        with (
            patch("sys.argv", ["imsakiyah", "-7.7162", "110.3554", "--schedule"]),
            patch("imsakiyah.cli._init_mlflow"),
            patch("imsakiyah.cli._locate", new_callable=AsyncMock) as locate,
        ):
            cli.main()

        provider, show_schedule = locate.await_args.args
        assert isinstance(provider, StaticPositionProvider)
        assert provider.coordinates.latitude == -7.7162
        assert show_schedule is True

    @pytest.mark.parametrize("argv", [
        ["--lat", "-7.72", "--lon", "110.36"],
        ["--lon", "110.36", "--lat", "-7.72"],
        ["--lat", "-7.72", "--lon", "110.36", "--schedule"],
    ])
    def test_lat_lon_flags(self, argv):
        with (
            patch("sys.argv", ["imsakiyah", *argv]),
            patch("imsakiyah.cli._init_mlflow"),
            patch("imsakiyah.cli._locate", new_callable=AsyncMock) as locate,
        ):
            cli.main()

        provider, show_schedule = locate.await_args.args
        assert provider.coordinates.latitude == -7.72
        assert provider.coordinates.longitude == 110.36
        assert show_schedule is ("--schedule" in argv)

    @pytest.mark.parametrize("argv", [["--lat", "-7.72"], ["--lat", "-7.72", "--lon"], ["--lat", "1", "--lon", "2", "3"]])
    def test_incomplete_flags_print_usage(self, argv, capsys):
        with patch("sys.argv", ["imsakiyah", *argv]), patch("imsakiyah.cli._locate", new_callable=AsyncMock) as locate:
            with pytest.raises(SystemExit) as exc:
                cli.main()

        assert exc.value.code == 1
        assert "Usage" in capsys.readouterr().out
        locate.assert_not_called()

    def test_ip_flag(self):
        with (
            patch("sys.argv", ["imsakiyah", "--ip"]),
            patch("imsakiyah.cli._init_mlflow"),
            patch("imsakiyah.cli._locate", new_callable=AsyncMock) as locate,
        ):
            cli.main()

        provider, show_schedule = locate.await_args.args
        assert isinstance(provider, IPGeolocationProvider)
        assert show_schedule is False


class TestLocateOutput:
    async def test_failure_prints_default(self, capsys):
        async def failing(session: ResolutionSession, provider):
            from imsakiyah.core.types import FailureReason, ResolutionFailure

            session.begin()
            session.result = ResolutionFailure(FailureReason.GEOCODE_FAILED, "Nominatim returned HTTP 503")
            return session.result

        with patch("imsakiyah.pipeline.locate.resolve_location", failing):
            await cli._locate(object(), False)

        out = capsys.readouterr().out
        assert "geocode_failed" in out
        assert "Using default: DKI Jakarta" in out

    async def test_schedule_printed(self, capsys):
        async def resolved(session: ResolutionSession, provider):
            from imsakiyah.core.types import ResolvedLocation

            session.begin()
            session.result = ResolvedLocation("D.I. Yogyakarta", "Kab. Sleman")
            return session.result

        schedule = ImsakiyahSchedule(
            "D.I. Yogyakarta", "Kab. Sleman", "1447", "2026",
            [ImsakiyahDay(day=1, imsak="04:06", maghrib="18:08")],
        )
        with (
            patch("imsakiyah.pipeline.locate.resolve_location", resolved),
            patch("imsakiyah.retrieval.equran.fetch_schedule", AsyncMock(return_value=schedule)),
        ):
            await cli._locate(object(), True)

        out = capsys.readouterr().out
        assert "Kab. Sleman (exact)" in out
        assert "18:08" in out

    async def test_schedule_error_reported(self, capsys):
        async def resolved(session: ResolutionSession, provider):
            from imsakiyah.core.types import ResolvedLocation

            session.begin()
            session.result = ResolvedLocation("Aceh", "Kab. Pidie")
            return session.result

        with (
            patch("imsakiyah.pipeline.locate.resolve_location", resolved),
            patch("imsakiyah.retrieval.equran.fetch_schedule", AsyncMock(side_effect=ScheduleApiError("HTTP 500"))),
        ):
            await cli._locate(object(), True)

        assert "Could not load schedule" in capsys.readouterr().out
