"""Province and kabupaten/kota resolution against the equran.id reference lists.

Pure functions — no I/O. Each resolver tries an exact match on the
prefix-stripped names first, then a bidirectional containment match, and
returns the reference entry verbatim (never geocoder text). ``None`` means
no entry matched.

Ties are broken by reference-list order: the first listed entry wins.
"""

from collections.abc import Callable, Sequence

from imsakiyah.core.types import MatchKind, NameMatch
from imsakiyah.matching.normalize import (
    city_type_of,
    normalize_city_name,
    normalize_province_name,
    strip_city_entry,
    strip_province_entry,
)


def _match(
    query: str,
    entries: Sequence[str],
    strip: Callable[[str], str],
    prefer_type: str | None = None,
) -> NameMatch | None:
    if not query:
        return None

    stripped = [(entry, strip(entry)) for entry in entries if entry]

    exact = [entry for entry, bare in stripped if bare == query]
    if exact:
        if prefer_type:
            for entry in exact:
                if city_type_of(entry) == prefer_type:
                    return NameMatch(entry, MatchKind.EXACT)
        return NameMatch(exact[0], MatchKind.EXACT)

    for entry, bare in stripped:
        # An entry that strips to nothing would be "contained" in every query
        if bare and (bare in query or query in bare):
            return NameMatch(entry, MatchKind.PARTIAL)

    return None


def match_province(raw_name: str | None, provinces: Sequence[str]) -> NameMatch | None:
    """Match a free-form province name, reporting which stage matched."""
    return _match(normalize_province_name(raw_name), provinces, strip_province_entry)


def match_city(raw_name: str | None, cities: Sequence[str]) -> NameMatch | None:
    """Match a free-form kabupaten/kota name, reporting which stage matched.

    ``raw_name`` may carry a "Kab." or "Kota" hint. When several entries
    share the same bare name ("Kab. Bogor", "Kota Bogor") the hint picks
    between them; without one the first listed entry wins.
    """
    return _match(
        normalize_city_name(raw_name),
        cities,
        strip_city_entry,
        prefer_type=city_type_of(raw_name),
    )


def resolve_province(raw_name: str | None, provinces: Sequence[str]) -> str | None:
    """Resolve a geocoder province name to an entry of ``provinces``.

    'Daerah Istimewa Yogyakarta' → 'D.I. Yogyakarta'
    'Daerah Khusus Ibukota Jakarta' → 'DKI Jakarta'
    'Jawa Tengah' → 'Jawa Tengah'
    """
    match = match_province(raw_name, provinces)
    return match.name if match else None


def resolve_city(raw_name: str | None, cities: Sequence[str]) -> str | None:
    """Resolve a geocoder city/regency name to an entry of ``cities``.

    'Kab. Sleman' → 'Kab. Sleman'
    'Kota Yogyakarta' → 'Kota Yogyakarta'
    'Jakarta Selatan' → 'Kota Administrasi Jakarta Selatan'
    """
    match = match_city(raw_name, cities)
    return match.name if match else None


def describe_city_entries(cities: Sequence[str]) -> list[dict[str, str]]:
    """Entry → bare-name pairs, for diagnosing a failed city match."""
    return [{"entry": c, "bare": strip_city_entry(c)} for c in cities if c]
