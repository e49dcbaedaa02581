"""Pydantic request/response models for the imsakiyah API.

These are the API contract — decoupled from the internal domain dataclasses.
"""

from typing import Literal

from pydantic import BaseModel, Field

from imsakiyah.core.types import FailureReason

# Shown to users when resolution fails; the default location is applied alongside
FAILURE_MESSAGES: dict[FailureReason, str] = {
    FailureReason.GEOLOCATION_UNSUPPORTED: "Geolocation tidak didukung perangkat",
    FailureReason.POSITION_UNAVAILABLE: "Lokasi tidak terdeteksi",
    FailureReason.GEOCODE_FAILED: "Alamat lokasi tidak dapat ditentukan",
    FailureReason.PROVINCE_LIST_UNAVAILABLE: "Daftar provinsi tidak dapat dimuat",
    FailureReason.PROVINCE_NOT_FOUND: "Provinsi tidak ditemukan",
    FailureReason.CITY_NOT_FOUND: "Kabupaten/kota tidak ditemukan",
}


class LocateResponse(BaseModel):
    """Response for GET /api/v1/locate."""

    status: Literal["resolved", "degraded", "failed"]
    province: str
    city: str
    province_match: str = ""
    city_match: str = ""
    latitude: float | None = None
    longitude: float | None = None
    reason: str | None = None
    message: str | None = None
    default_applied: bool = False


class NameListResponse(BaseModel):
    data: list[str]


class ScheduleRequest(BaseModel):
    """Request body for POST /api/v1/schedule."""

    province: str = Field(..., min_length=1, max_length=100, examples=["D.I. Yogyakarta"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Kab. Sleman"])


class ImsakiyahDayResponse(BaseModel):
    day: int
    imsak: str = ""
    subuh: str = ""
    terbit: str = ""
    dhuha: str = ""
    dzuhur: str = ""
    ashar: str = ""
    maghrib: str = ""
    isya: str = ""


class ScheduleResponse(BaseModel):
    province: str
    city: str
    hijri_year: str = ""
    gregorian_year: str = ""
    days: list[ImsakiyahDayResponse] = []


class ErrorResponse(BaseModel):
    detail: str
