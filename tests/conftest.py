"""Shared test fixtures."""

import mlflow
import pytest


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests — no side effects, no mlruns/ writes."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear the reverse-geocode and reference-list caches around each test."""
    from imsakiyah.retrieval import equran, geocode

    geocode.clear_cache()
    equran.clear_cache()
    yield
    geocode.clear_cache()
    equran.clear_cache()


@pytest.fixture
def provinces() -> list[str]:
    """Province names as the equran.id API lists them."""
    return [
        "Aceh",
        "Sumatera Utara",
        "DKI Jakarta",
        "Jawa Barat",
        "Jawa Tengah",
        "D.I. Yogyakarta",
        "Jawa Timur",
        "Banten",
        "Kalimantan Timur",
        "Papua Barat Daya",
    ]


@pytest.fixture
def diy_cities() -> list[str]:
    return ["Kab. Bantul", "Kab. Gunungkidul", "Kab. Kulon Progo", "Kab. Sleman", "Kota Yogyakarta"]


@pytest.fixture
def jakarta_cities() -> list[str]:
    return [
        "Kab. Kepulauan Seribu",
        "Kota Administrasi Jakarta Barat",
        "Kota Administrasi Jakarta Pusat",
        "Kota Administrasi Jakarta Selatan",
        "Kota Administrasi Jakarta Timur",
        "Kota Administrasi Jakarta Utara",
    ]


@pytest.fixture
def jabar_cities() -> list[str]:
    return ["Kab. Bandung", "Kab. Bekasi", "Kab. Bogor", "Kota Bandung", "Kota Bekasi", "Kota Bogor", "Kota Depok"]
