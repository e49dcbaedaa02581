"""Name matching — normalization, field selection, and province/city resolvers."""

from imsakiyah.matching.address import select_candidates
from imsakiyah.matching.normalize import normalize, normalize_city_name, normalize_province_name
from imsakiyah.matching.resolver import match_city, match_province, resolve_city, resolve_province

__all__ = [
    "match_city",
    "match_province",
    "normalize",
    "normalize_city_name",
    "normalize_province_name",
    "resolve_city",
    "resolve_province",
    "select_candidates",
]
