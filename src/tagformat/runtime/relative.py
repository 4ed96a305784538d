"""Relative-time formatter ("3 hours ago", "in 2 days").

Formats the distance between a value and a reference time. The reference is
always passed in by the caller so that a batch of calls can share one "now".

Python 3.13+. Uses Babel's format_timedelta.
"""

from datetime import UTC, date, datetime, timedelta
from typing import Literal

from tagformat.core.babel_compat import get_babel_dates
from tagformat.diagnostics import FormattingError
from tagformat.runtime.locale_formats import load_locale, to_datetime

__all__ = ["RELATIVE_FORMAT_OPTIONS", "RelativeFormat", "to_aware_datetime"]

type RelativeStyle = Literal["long", "short", "narrow"]
type Granularity = Literal["year", "month", "week", "day", "hour", "minute", "second"]

RELATIVE_STYLES: frozenset[str] = frozenset({"long", "short", "narrow"})
GRANULARITIES: frozenset[str] = frozenset(
    {"year", "month", "week", "day", "hour", "minute", "second"}
)

RELATIVE_FORMAT_OPTIONS: tuple[str, ...] = ("style", "granularity", "threshold")


def to_aware_datetime(value: object) -> datetime:
    """Coerce a date-like value to an aware datetime (naive values are UTC)."""
    dt_value = to_datetime(value)
    if not isinstance(dt_value, datetime):
        dt_value = datetime(dt_value.year, dt_value.month, dt_value.day)
    if dt_value.tzinfo is None:
        dt_value = dt_value.replace(tzinfo=UTC)
    return dt_value


class RelativeFormat:
    """Relative-time formatter for one locale and option set.

    Examples:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime(2025, 1, 1, 12, tzinfo=UTC)
        >>> fmt = RelativeFormat("en")
        >>> fmt.format(now - timedelta(hours=3), now)
        '3 hours ago'
        >>> fmt.format(now + timedelta(days=2), now)
        'in 2 days'
    """

    __slots__ = ("_babel_locale", "granularity", "locale_code", "style", "threshold")

    def __init__(
        self,
        locale_code: str,
        *,
        style: RelativeStyle = "long",
        granularity: Granularity = "second",
        threshold: float = 0.85,
    ) -> None:
        """Initialize formatter.

        Args:
            locale_code: BCP-47 or POSIX locale code
            style: Unit display width, "long" (default), "short" or "narrow"
            granularity: Smallest unit to display (default: "second")
            threshold: Factor deciding when to switch to the next larger unit

        Raises:
            FormattingError: If the locale is unknown or an option is invalid
        """
        if style not in RELATIVE_STYLES:
            msg = f"Invalid relative style '{style}': expected one of {sorted(RELATIVE_STYLES)}"
            raise FormattingError(msg)
        if granularity not in GRANULARITIES:
            msg = f"Invalid granularity '{granularity}'"
            raise FormattingError(msg)
        if threshold <= 0:
            msg = "threshold must be positive"
            raise FormattingError(msg)

        self.locale_code = locale_code
        self._babel_locale = load_locale(locale_code)
        self.style = style
        self.granularity = granularity
        self.threshold = threshold

    def format(self, value: datetime | date | int | float | str, now: datetime) -> str:
        """Format ``value`` relative to ``now``.

        Raises:
            FormattingError: If the value is not date-like or Babel rejects it
        """
        target = to_aware_datetime(value)
        delta: timedelta = target - to_aware_datetime(now)
        try:
            return str(
                get_babel_dates().format_timedelta(
                    delta,
                    granularity=self.granularity,
                    threshold=self.threshold,
                    add_direction=True,
                    format=self.style,
                    locale=self._babel_locale,
                )
            )
        except (ValueError, TypeError, KeyError) as e:
            msg = f"Relative time formatting failed for '{target}': {e}"
            raise FormattingError(msg, fallback_value=target.isoformat()) from e

    def __repr__(self) -> str:
        return f"RelativeFormat({self.locale_code!r}, style={self.style!r})"
