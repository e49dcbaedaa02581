"""Administrative-name normalization for province and kabupaten/kota matching.

Pure functions — no I/O. Two kinds of stripping live here:

* query normalization (``normalize``) for free-text names coming back from
  the reverse geocoder ("Daerah Istimewa Yogyakarta", "Kabupaten Sleman");
* reference-entry stripping for the fixed equran.id vocabulary
  ("D.I. Yogyakarta", "Kab. Sleman", "Kota Yogyakarta"), which only removes
  the official type prefix so the bare names can be compared.
"""

import re

from imsakiyah.core.types import NameContext

PROVINCE_LEADING_TOKENS = ("provinsi", "prov", "daerah", "istimewa", "khusus")
PROVINCE_EMBEDDED_TOKENS = ("daerah", "istimewa", "khusus")

CITY_TOKENS = (
    "kabupaten", "kab", "kota", "city", "daerah", "khusus",
    "district", "regency", "municipality",
)

REGENCY_PREFIX = "Kab."
CITY_PREFIX = "Kota"

_WHITESPACE = re.compile(r"\s+")


def _alternation(tokens: tuple[str, ...]) -> str:
    # Longest first so "kabupaten" is tried before "kab"
    return "|".join(sorted(tokens, key=len, reverse=True))


def _leading(tokens: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(rf"^(?:{_alternation(tokens)})\b\.?\s*", re.IGNORECASE)


def _embedded(tokens: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(rf"\s+(?:{_alternation(tokens)})\b\.?(?=\s|$)", re.IGNORECASE)


_PATTERNS: dict[NameContext, tuple[re.Pattern[str], re.Pattern[str]]] = {
    NameContext.PROVINCE: (_leading(PROVINCE_LEADING_TOKENS), _embedded(PROVINCE_EMBEDDED_TOKENS)),
    NameContext.CITY: (_leading(CITY_TOKENS), _embedded(CITY_TOKENS)),
}

# equran.id province list: "D.I. Yogyakarta", "DKI Jakarta", "Provinsi ..."
_PROVINCE_ENTRY_PREFIX = re.compile(
    r"^(?:provinsi\b|prov\b\.?|d\.\s*i\.|d\.\s*k\.\s*i\.|dki\b|daerah\b|istimewa\b)\s*",
    re.IGNORECASE,
)

# equran.id kabupaten/kota list: "Kab. Bantul", "Kota Yogyakarta"
_CITY_ENTRY_PREFIX = re.compile(r"^(?:kab\b\.?|kota\b)\s*", re.IGNORECASE)

_TYPE_WORD = re.compile(r"^(kabupaten|kab|regency|kota|city)\b\.?\s*", re.IGNORECASE)
_REGENCY_WORDS = ("kabupaten", "kab", "regency")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize(raw: str | None, context: NameContext = NameContext.PROVINCE) -> str:
    """Canonicalize a raw administrative name for comparison.

    Lower-cases, strips leading honorific/type tokens, removes the embedded
    marker tokens of the same vocabulary, and collapses whitespace.
    Stripping repeats until nothing changes, so ``normalize`` is idempotent.

    >>> normalize("Daerah Istimewa Yogyakarta")
    'yogyakarta'
    >>> normalize("Kab. Sleman", NameContext.CITY)
    'sleman'
    """
    if not raw:
        return ""
    leading, embedded = _PATTERNS[context]

    text = _collapse(raw.lower())
    while True:
        stripped = leading.sub("", text, count=1)
        if stripped == text:
            break
        text = stripped
    text = embedded.sub(" ", text)
    return _collapse(text)


def normalize_province_name(raw: str | None) -> str:
    return normalize(raw, NameContext.PROVINCE)


def normalize_city_name(raw: str | None) -> str:
    return normalize(raw, NameContext.CITY)


def strip_province_entry(entry: str) -> str:
    """Bare, lower-cased form of a province reference entry ("D.I. Yogyakarta" → "yogyakarta")."""
    text = _collapse(entry.lower())
    while True:
        stripped = _PROVINCE_ENTRY_PREFIX.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped


def strip_city_entry(entry: str) -> str:
    """Bare, lower-cased form of a city reference entry ("Kab. Sleman" → "sleman").

    Only the type prefix goes; "Kota Administrasi Jakarta Selatan" keeps
    "administrasi jakarta selatan".
    """
    return _collapse(_CITY_ENTRY_PREFIX.sub("", _collapse(entry.lower()), count=1))


def city_type_of(name: str | None) -> str | None:
    """Type prefix a name carries: "Kab.", "Kota", or None.

    Works on both reference entries ("Kab. Bogor") and raw or hint-prefixed
    queries ("Kabupaten Bogor", "Regency Bogor"). With stacked type words the
    one nearest the name wins: "Kab. Kota Bekasi" is a Kota.
    """
    if not name:
        return None
    text = name.strip()
    found = None
    while match := _TYPE_WORD.match(text):
        found = REGENCY_PREFIX if match.group(1).lower() in _REGENCY_WORDS else CITY_PREFIX
        text = text[match.end():]
    return found
