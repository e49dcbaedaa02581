"""Pick province and city candidates out of a Nominatim address record.

Nominatim fills different fields depending on the place type, and for
Indonesia they are not used consistently: a regency can come back as
``county``, a city as ``city``, smaller places as ``town`` or
``municipality``. The selector hides that variance behind a fixed
priority order.
"""

from collections.abc import Mapping

from imsakiyah.core.types import AddressCandidates
from imsakiyah.matching.normalize import CITY_PREFIX, REGENCY_PREFIX

# Province-level fields in priority order. `county` usually holds the
# regency, so it is only a last resort.
PROVINCE_FIELDS = ("state", "state_district", "region", "province", "county")

# (field, type hint) — first populated field wins
CITY_FIELDS: tuple[tuple[str, str | None], ...] = (
    ("county", REGENCY_PREFIX),  # kabupaten
    ("city", CITY_PREFIX),       # kota
    ("town", None),
    ("municipality", None),
)


def _field(address: Mapping[str, object], name: str) -> str | None:
    value = address.get(name)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def select_candidates(address: Mapping[str, object] | None) -> AddressCandidates:
    """Extract province candidates and the raw city name from an address record.

    >>> c = select_candidates({"county": "Sleman", "state": "Daerah Istimewa Yogyakarta"})
    >>> c.province_candidates, c.raw_city, c.city_type_hint
    (['Daerah Istimewa Yogyakarta', 'Sleman'], 'Sleman', 'Kab.')
    """
    if not address:
        return AddressCandidates()

    provinces = [v for v in (_field(address, f) for f in PROVINCE_FIELDS) if v]

    for name, hint in CITY_FIELDS:
        value = _field(address, name)
        if value:
            return AddressCandidates(
                province_candidates=provinces,
                raw_city=value,
                city_type_hint=hint,
            )

    return AddressCandidates(province_candidates=provinces)
