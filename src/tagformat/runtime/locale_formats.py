"""Locale-sensitive date/time and number formatters.

Each formatter is constructed once per ``(locale, options)`` and then formats
any number of values. Uses Babel for CLDR-compliant number, date, and currency
formatting.

Architecture:
    - DateTimeFormat / NumberFormat: immutable after construction
    - Options validated at construction (FormattingError on bad options)
    - No dependency on Python's locale module (avoids global state)
    - Formatting failures raise FormattingError carrying a fallback value

Python 3.13+. Uses Babel for i18n.
"""

from datetime import UTC, date, datetime, time, tzinfo
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Literal

from babel.core import UnknownLocaleError

from tagformat.core.babel_compat import get_babel_dates, get_babel_numbers
from tagformat.diagnostics import FormattingError
from tagformat.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "DATE_TIME_FORMAT_OPTIONS",
    "NUMBER_FORMAT_OPTIONS",
    "DateTimeFormat",
    "NumberFormat",
    "load_locale",
    "to_datetime",
]

type DateStyle = Literal["short", "medium", "long", "full"]
type NumberStyle = Literal["decimal", "percent", "currency"]
type CurrencyDisplay = Literal["symbol", "code", "name"]

DATE_STYLES: frozenset[str] = frozenset({"short", "medium", "long", "full"})
NUMBER_STYLES: frozenset[str] = frozenset({"decimal", "percent", "currency"})
CURRENCY_DISPLAYS: frozenset[str] = frozenset({"symbol", "code", "name"})

# Option names each formatter accepts; anything else is filtered out by the engine.
DATE_TIME_FORMAT_OPTIONS: tuple[str, ...] = ("date_style", "time_style", "pattern", "timezone")
NUMBER_FORMAT_OPTIONS: tuple[str, ...] = (
    "style",
    "currency",
    "currency_display",
    "minimum_fraction_digits",
    "maximum_fraction_digits",
    "use_grouping",
    "pattern",
)


def load_locale(locale_code: str) -> "Locale":
    """Parse a locale for a formatter, raising FormattingError if unknown."""
    try:
        return get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError) as e:
        msg = f"Unknown locale '{locale_code}': {e}"
        raise FormattingError(msg) from e


def to_datetime(value: object) -> datetime | date:
    """Coerce a date-like value.

    Accepts datetime, date, epoch seconds (int/float) and ISO 8601 strings.

    Raises:
        FormattingError: If the value is not date-like
    """
    match value:
        case datetime() | date():
            return value
        case bool():
            pass
        case int() | float():
            try:
                return datetime.fromtimestamp(value, UTC)
            except (OverflowError, OSError, ValueError) as e:
                msg = f"Invalid timestamp '{value}': {e}"
                raise FormattingError(msg, fallback_value=str(value)) from e
        case str():
            try:
                return datetime.fromisoformat(value)
            except ValueError as e:
                msg = f"Invalid datetime string '{value}': not ISO 8601 format"
                raise FormattingError(msg, fallback_value=value) from e
    msg = f"Cannot format {type(value).__name__} value '{value}' as a date"
    raise FormattingError(msg, fallback_value=str(value))


class DateTimeFormat:
    """Date and time formatter for one locale and option set.

    Examples:
        >>> from datetime import datetime, UTC
        >>> dt = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)
        >>> DateTimeFormat("en-US", date_style="short").format(dt)
        '10/27/25'
        >>> DateTimeFormat("de-DE", date_style="short").format(dt)
        '27.10.25'
        >>> DateTimeFormat("en-US", pattern="yyyy-MM-dd").format(dt)
        '2025-10-27'

    CLDR Compliance:
        Uses Babel's format_date()/format_time()/format_datetime().
        Matches Intl.DateTimeFormat behavior in JavaScript.
    """

    __slots__ = ("_babel_locale", "_tzinfo", "date_style", "locale_code", "pattern", "time_style")

    def __init__(
        self,
        locale_code: str,
        *,
        date_style: DateStyle | None = None,
        time_style: DateStyle | None = None,
        pattern: str | None = None,
        timezone: str | tzinfo | None = None,
    ) -> None:
        """Initialize formatter.

        Args:
            locale_code: BCP-47 or POSIX locale code
            date_style: Date format style; defaults to "medium" when neither a
                time style nor a pattern is given
            time_style: Time format style (default: None - no time part)
            pattern: Custom CLDR datetime pattern (overrides styles)
            timezone: IANA zone name or tzinfo used to localize aware values

        Raises:
            FormattingError: If the locale is unknown or an option is invalid
        """
        for name, style in (("date_style", date_style), ("time_style", time_style)):
            if style is not None and style not in DATE_STYLES:
                msg = f"Invalid {name} '{style}': expected one of {sorted(DATE_STYLES)}"
                raise FormattingError(msg)

        self.locale_code = locale_code
        self._babel_locale = load_locale(locale_code)
        self.pattern = pattern
        self.time_style = time_style
        self.date_style = date_style
        if date_style is None and time_style is None and pattern is None:
            self.date_style = "medium"

        if isinstance(timezone, str):
            try:
                self._tzinfo: tzinfo | None = get_babel_dates().get_timezone(timezone)
            except LookupError as e:
                msg = f"Unknown timezone '{timezone}'"
                raise FormattingError(msg) from e
        else:
            self._tzinfo = timezone

    def format(self, value: datetime | date | int | float | str) -> str:
        """Format a date-like value.

        Raises:
            FormattingError: If the value is not date-like or Babel rejects it
        """
        dt_value = to_datetime(value)
        babel_dates = get_babel_dates()

        try:
            if self.pattern is not None:
                return str(
                    babel_dates.format_datetime(
                        dt_value,
                        format=self.pattern,
                        tzinfo=self._tzinfo,
                        locale=self._babel_locale,
                    )
                )

            if self.date_style is not None and self.time_style is not None:
                return self._format_combined(dt_value)

            if self.time_style is not None:
                if not isinstance(dt_value, datetime):
                    msg = f"Cannot format time of date-only value '{dt_value}'"
                    raise FormattingError(msg, fallback_value=dt_value.isoformat())
                return str(
                    babel_dates.format_time(
                        dt_value,
                        format=self.time_style,
                        tzinfo=self._tzinfo,
                        locale=self._babel_locale,
                    )
                )

            return str(
                babel_dates.format_date(
                    self._localize(dt_value),
                    format=self.date_style,
                    locale=self._babel_locale,
                )
            )

        except (ValueError, OverflowError, AttributeError, KeyError) as e:
            msg = f"DateTime formatting failed for '{dt_value}': {e}"
            raise FormattingError(msg, fallback_value=dt_value.isoformat()) from e

    def _localize(self, value: datetime | date) -> datetime | date:
        # format_date has no tzinfo parameter; shift aware values ourselves
        if isinstance(value, datetime) and self._tzinfo is not None:
            if value.tzinfo is None:
                value = value.replace(tzinfo=UTC)
            return value.astimezone(self._tzinfo)
        return value

    def _format_combined(self, value: datetime | date) -> str:
        """Join date and time parts with the locale's dateTimeFormat pattern."""
        babel_dates = get_babel_dates()
        if not isinstance(value, datetime):
            value = datetime.combine(value, time())
        date_str = babel_dates.format_date(
            self._localize(value), format=self.date_style, locale=self._babel_locale
        )
        time_str = babel_dates.format_time(
            value, format=self.time_style, tzinfo=self._tzinfo, locale=self._babel_locale
        )
        # Pattern uses {0} for time and {1} for date per CLDR
        datetime_pattern = (
            self._babel_locale.datetime_formats.get(self.date_style)
            or self._babel_locale.datetime_formats.get("medium")
            or "{1} {0}"
        )
        return str(datetime_pattern).format(time_str, date_str)

    def __repr__(self) -> str:
        return (
            f"DateTimeFormat({self.locale_code!r}, date_style={self.date_style!r}, "
            f"time_style={self.time_style!r}, pattern={self.pattern!r})"
        )


class NumberFormat:
    """Number, percent and currency formatter for one locale and option set.

    Examples:
        >>> NumberFormat("en-US").format(1234.5)
        '1,234.5'
        >>> NumberFormat("de-DE").format(1234.5)
        '1.234,5'
        >>> NumberFormat("en-US", style="percent").format(0.25)
        '25%'
        >>> NumberFormat("en-US", style="currency", currency="USD").format(1234.5)
        '$1,234.50'
        >>> NumberFormat("en-US", pattern="#,##0.00;(#,##0.00)").format(-1234.56)
        '(1,234.56)'

    CLDR Compliance:
        Uses Babel's format_decimal()/format_percent()/format_currency().
        Matches Intl.NumberFormat behavior in JavaScript.
    """

    __slots__ = (
        "_babel_locale",
        "currency",
        "currency_display",
        "locale_code",
        "maximum_fraction_digits",
        "minimum_fraction_digits",
        "pattern",
        "style",
        "use_grouping",
    )

    def __init__(
        self,
        locale_code: str,
        *,
        style: NumberStyle = "decimal",
        currency: str | None = None,
        currency_display: CurrencyDisplay = "symbol",
        minimum_fraction_digits: int = 0,
        maximum_fraction_digits: int = 3,
        use_grouping: bool = True,
        pattern: str | None = None,
    ) -> None:
        """Initialize formatter.

        Args:
            locale_code: BCP-47 or POSIX locale code
            style: "decimal" (default), "percent" or "currency"
            currency: ISO 4217 code, required for the currency style
            currency_display: "symbol" (default), "code" or "name"
            minimum_fraction_digits: Minimum decimal places (default: 0)
            maximum_fraction_digits: Maximum decimal places (default: 3)
            use_grouping: Use thousands separator (default: True)
            pattern: Custom CLDR number pattern (overrides other parameters)

        Raises:
            FormattingError: If the locale is unknown or an option is invalid
        """
        if style not in NUMBER_STYLES:
            msg = f"Invalid number style '{style}': expected one of {sorted(NUMBER_STYLES)}"
            raise FormattingError(msg)
        if style == "currency" and not currency:
            msg = "Currency style requires a currency code"
            raise FormattingError(msg)
        if currency_display not in CURRENCY_DISPLAYS:
            msg = f"Invalid currency_display '{currency_display}'"
            raise FormattingError(msg)
        if not 0 <= minimum_fraction_digits <= maximum_fraction_digits:
            msg = (
                "Fraction digits must satisfy 0 <= minimum <= maximum, got "
                f"{minimum_fraction_digits} and {maximum_fraction_digits}"
            )
            raise FormattingError(msg)

        self.locale_code = locale_code
        self._babel_locale = load_locale(locale_code)
        self.style = style
        self.currency = currency
        self.currency_display = currency_display
        self.minimum_fraction_digits = minimum_fraction_digits
        self.maximum_fraction_digits = maximum_fraction_digits
        self.use_grouping = use_grouping
        self.pattern = pattern

    def format(self, value: int | float | Decimal) -> str:
        """Format a number.

        Raises:
            FormattingError: If the value is not numeric or Babel rejects it
        """
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            msg = f"Cannot format {type(value).__name__} value '{value}' as a number"
            raise FormattingError(msg, fallback_value=str(value))

        try:
            match self.style:
                case "currency":
                    return self._format_currency(value)
                case "percent":
                    return str(
                        get_babel_numbers().format_percent(
                            value,
                            format=self.pattern or f"{self._decimal_pattern()}%",
                            locale=self._babel_locale,
                        )
                    )
                case _:
                    if self.maximum_fraction_digits == 0 and self.pattern is None:
                        value = round(value)
                    return str(
                        get_babel_numbers().format_decimal(
                            value,
                            format=self.pattern or self._decimal_pattern(),
                            locale=self._babel_locale,
                        )
                    )
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            msg = f"Number formatting failed for '{value}': {e}"
            raise FormattingError(msg, fallback_value=str(value)) from e

    def _decimal_pattern(self) -> str:
        """Build a CLDR pattern from the digit options.

        '#,##0' = integer with grouping
        '#,##0.0##' = 1-3 decimal places with grouping
        '0.00' = exactly 2 decimal places, no grouping
        """
        integer_part = "#,##0" if self.use_grouping else "0"
        if self.maximum_fraction_digits == 0:
            return integer_part
        required = "0" * self.minimum_fraction_digits
        optional = "#" * (self.maximum_fraction_digits - self.minimum_fraction_digits)
        return f"{integer_part}.{required}{optional}"

    def _format_currency(self, value: int | float | Decimal) -> str:
        babel_numbers = get_babel_numbers()
        currency = self.currency or ""

        if self.pattern is not None:
            return str(
                babel_numbers.format_currency(
                    value,
                    currency,
                    format=self.pattern,
                    locale=self._babel_locale,
                    currency_digits=True,
                )
            )

        if self.currency_display == "name":
            return str(
                babel_numbers.format_currency(
                    value,
                    currency,
                    locale=self._babel_locale,
                    currency_digits=True,
                    format_type="name",
                )
            )

        if self.currency_display == "code":
            standard_pattern = self._babel_locale.currency_formats.get("standard")
            raw_pattern = getattr(standard_pattern, "pattern", "")
            # Single U+00A4 = symbol, double U+00A4 U+00A4 = ISO code per CLDR
            if "\xa4" in raw_pattern:
                return str(
                    babel_numbers.format_currency(
                        value,
                        currency,
                        format=raw_pattern.replace("\xa4", "\xa4\xa4"),
                        locale=self._babel_locale,
                        currency_digits=True,
                    )
                )

        return str(
            babel_numbers.format_currency(
                value,
                currency,
                locale=self._babel_locale,
                currency_digits=True,
                format_type="standard",
            )
        )

    def __repr__(self) -> str:
        return f"NumberFormat({self.locale_code!r}, style={self.style!r})"
