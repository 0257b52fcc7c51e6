"""Slug generation - the one place titles become URL slugs.

Latin-oriented locales are transliterated to ASCII. Locales listed in
Settings.unicode_slug_locales keep their own script: the text is lower-cased,
NFC-normalized, stripped of quotes, and every run of non letter/number
characters becomes a single hyphen.
"""

import re
import unicodedata
from collections.abc import Collection

from slugify import slugify

from backend.content_routing.config import get_settings
from backend.content_routing.models.common import Locale

# Straight and curly apostrophes, double quote, backtick
_QUOTE_CHARS = frozenset("\"'‘’`")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def _is_letter_or_number(ch: str) -> bool:
    return unicodedata.category(ch)[0] in ("L", "N")


def _unicode_slug(text: str) -> str:
    lowered = unicodedata.normalize("NFC", text.lower())

    out: list[str] = []
    in_gap = False
    for ch in lowered:
        if ch in _QUOTE_CHARS:
            continue
        if _is_letter_or_number(ch):
            out.append(ch)
            in_gap = False
        elif not in_gap:
            out.append("-")
            in_gap = True

    slug = "".join(out).strip("-")
    return _HYPHEN_RUNS.sub("-", slug)


def _ascii_slug(text: str) -> str:
    # python-slugify turns apostrophes into separators; drop them first so "Client's" -> "clients"
    unquoted = "".join(ch for ch in text if ch not in _QUOTE_CHARS)
    return slugify(unquoted, lowercase=True, separator="-")


def generate_slug(
    text: str,
    locale: Locale,
    unicode_locales: Collection[Locale] | None = None,
) -> str:
    """Turn a human-typed title into a URL slug for a locale.

    Pure and deterministic; never consults a datastore, so uniqueness is the
    caller's concern (see slugs.uniqueness).

    Args:
        text: Title or any free text
        locale: Target locale code
        unicode_locales: Locales that keep their native script
            (defaults to Settings.unicode_slug_locales)

    Returns:
        Slug, or "" for empty/blank input

    Examples:
        >>> generate_slug("Terms of Service", "en")
        'terms-of-service'
    """
    base = (text or "").strip()
    if not base:
        return ""

    if unicode_locales is None:
        unicode_locales = get_settings().unicode_slug_locales

    if locale in unicode_locales:
        return _unicode_slug(base)
    return _ascii_slug(base)
