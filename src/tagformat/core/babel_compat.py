"""Babel access layer.

Provides centralized, lazy import infrastructure for Babel so every module
that formats through CLDR data gets the same fail-fast error when the
runtime is missing its locale-formatting primitives.

Usage Pattern:
    # At module top-level (for type hints only):
    from typing import TYPE_CHECKING
    if TYPE_CHECKING:
        from babel import Locale

    # At function call site (for runtime use):
    from tagformat.core.babel_compat import get_babel_dates

    def my_function(value: datetime) -> str:
        dates = get_babel_dates()  # Raises RuntimeUnavailableError if Babel missing
        ...

Python 3.13+.
"""

from __future__ import annotations

from functools import lru_cache
from types import ModuleType

from tagformat.diagnostics import RuntimeUnavailableError

__all__ = [
    "get_babel_dates",
    "get_babel_numbers",
    "is_babel_available",
    "require_babel",
]


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    """Check if Babel is installed and ships CLDR data (computed once)."""
    try:
        from babel import localedata  # noqa: PLC0415
    except ImportError:
        return False
    return bool(localedata.exists("root"))


def is_babel_available() -> bool:
    """Check if Babel is installed.

    Returns:
        True if Babel is importable and its CLDR data is present.
    """
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Assert that Babel is available, raising RuntimeUnavailableError if not.

    Use at the entry point of constructors that depend on locale data.

    Args:
        feature: Name of the feature requiring Babel (for error message)

    Raises:
        RuntimeUnavailableError: If Babel is not installed
    """
    if not _check_babel_available():
        raise RuntimeUnavailableError(feature)


def get_babel_numbers() -> ModuleType:
    """Get the ``babel.numbers`` module.

    Raises:
        RuntimeUnavailableError: If Babel is not installed
    """
    require_babel("Number formatting")
    from babel import numbers  # noqa: PLC0415

    return numbers


def get_babel_dates() -> ModuleType:
    """Get the ``babel.dates`` module.

    Raises:
        RuntimeUnavailableError: If Babel is not installed
    """
    require_babel("Date formatting")
    from babel import dates  # noqa: PLC0415

    return dates
