"""Locale data registry.

Answers "is data available for locale L?" from Babel's CLDR data. The
formatter consults it when resolving its configuration and falls back to the
default locale when the answer is no.

Python 3.13+.
"""

from tagformat.core.babel_compat import require_babel
from tagformat.locale_utils import get_babel_locale

__all__ = ["has_locale_data"]


def has_locale_data(locale: str | None) -> bool:
    """Check whether CLDR data is available for a locale.

    Args:
        locale: BCP-47 or POSIX locale code

    Returns:
        True if Babel can load the locale, False for empty, malformed or
        unknown codes.

    Raises:
        RuntimeUnavailableError: If Babel is not installed

    Examples:
        >>> has_locale_data("en-US")
        True
        >>> has_locale_data("xx-unknown")
        False
    """
    if not locale or not isinstance(locale, str):
        return False

    require_babel("Locale data lookup")
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    try:
        get_babel_locale(locale)
    except (UnknownLocaleError, ValueError):
        return False
    return True
