"""String helpers for ids, titles, sort keys and manifest paths."""

import re
import unicodedata
from typing import Optional, Tuple

_COMBINING_MARKS = re.compile('[\u0300-\u036f]')
_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]+')
_SEPARATORS = re.compile(r'[-_]+')
_DIGIT_RUNS = re.compile(r'(\d+)')
_URL_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')
_LEADING_DOT_SLASH = re.compile(r'^(?:\./+)+')


def strip_accents(value: str) -> str:
    """Decompose to NFKD and drop combining diacritics."""
    return _COMBINING_MARKS.sub('', unicodedata.normalize('NFKD', value))


def to_kebab_case(value: str) -> str:
    """Build a lowercase ASCII slug; may return an empty string."""
    slug = _NON_ALNUM.sub('-', strip_accents(value))
    return slug.strip('-').lower()


def to_title_case(value: str) -> str:
    """Replace ``-``/``_`` runs with spaces and capitalize each word's first letter."""
    words = _SEPARATORS.sub(' ', value).split(' ')
    return ' '.join(word[:1].upper() + word[1:] for word in words)


def natural_sort_key(value: str) -> Tuple[Tuple, str]:
    """Case- and accent-insensitive key that orders digit runs numerically.

    ``photo-2`` sorts before ``photo-10``. The raw value is the tie breaker so
    keys differing only in case or accents still order deterministically.
    """
    folded = strip_accents(value).casefold()
    parts = _DIGIT_RUNS.split(folded)
    # re.split with a capture group alternates text, digits, text, ...
    chunks = tuple(int(part) if index % 2 else part for index, part in enumerate(parts))
    return chunks, value


def to_posix_path(value: str) -> str:
    """Use forward slashes regardless of the host separator."""
    return value.replace('\\', '/')


def is_probably_url(value: str) -> bool:
    """True for ``scheme:`` values and protocol-relative ``//host`` paths."""
    return bool(_URL_SCHEME.match(value)) or value.startswith('//')


def normalize_asset_path(value: Optional[str]) -> str:
    """Make a path manifest-relative; URLs pass through unchanged."""
    if not isinstance(value, str):
        return ''
    trimmed = value.strip()
    if not trimmed:
        return ''
    if is_probably_url(trimmed):
        return trimmed

    stripped = _LEADING_DOT_SLASH.sub('', to_posix_path(trimmed))
    if stripped.startswith('assets/'):
        stripped = stripped[len('assets/'):]
    return stripped


def strip_marker(value: str, marker: str) -> str:
    """Remove the first occurrence of ``marker`` anywhere in ``value``."""
    if not marker:
        return value
    index = value.find(marker)
    if index == -1:
        return value
    return value[:index] + value[index + len(marker):]
