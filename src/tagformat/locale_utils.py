"""Locale code helpers.

Callers pass BCP-47 tags ("pt-BR"); Babel wants POSIX identifiers
("pt_BR"). Everything that reaches Babel goes through ``get_babel_locale`` so
both spellings resolve to the same cached Locale.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from tagformat.core.babel_compat import require_babel

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "normalize_locale",
    "same_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Return the POSIX spelling of a locale code.

    Example:
        >>> normalize_locale("zh-Hant-TW")
        'zh_Hant_TW'
    """
    return locale_code.replace("-", "_")


def same_locale(first: str, second: str) -> bool:
    """Compare locale codes ignoring case and separator style.

    Example:
        >>> same_locale("en-US", "en_us")
        True
    """
    return normalize_locale(first).casefold() == normalize_locale(second).casefold()


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse a locale code into a Babel Locale (cached per spelling).

    Raises:
        babel.core.UnknownLocaleError: No CLDR data for the code
        ValueError: The code is not a well-formed identifier
        RuntimeUnavailableError: Babel is not installed
    """
    require_babel("Locale lookup")
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))
