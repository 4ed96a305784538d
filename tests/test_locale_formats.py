"""Tests for the Babel-backed date/time and number formatters.

Validates CLDR-compliant output for a few locales, option validation at
construction, value coercion, and FormattingError fallbacks.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tagformat.diagnostics import FormattingError
from tagformat.runtime.locale_formats import DateTimeFormat, NumberFormat, to_datetime

WHEN = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)


class TestToDatetime:
    """Date-like value coercion."""

    def test_datetime_passthrough(self) -> None:
        assert to_datetime(WHEN) is WHEN

    def test_date_passthrough(self) -> None:
        day = date(2025, 10, 27)
        assert to_datetime(day) is day

    def test_epoch_seconds(self) -> None:
        assert to_datetime(0) == datetime(1970, 1, 1, tzinfo=UTC)
        assert to_datetime(1.5) == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)

    def test_iso_string(self) -> None:
        assert to_datetime("2025-10-27T14:30:00+00:00") == WHEN

    def test_invalid_string(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            to_datetime("next tuesday")
        assert exc_info.value.fallback_value == "next tuesday"

    @pytest.mark.parametrize("value", [True, None, object(), [2025, 10, 27]])
    def test_non_date_values(self, value: object) -> None:
        with pytest.raises(FormattingError):
            to_datetime(value)


class TestDateTimeFormat:
    """Date and time formatting."""

    def test_default_is_medium_date(self) -> None:
        assert DateTimeFormat("en").format(WHEN) == "Oct 27, 2025"

    @pytest.mark.parametrize(
        ("locale", "style", "expected"),
        [
            ("en-US", "short", "10/27/25"),
            ("en-US", "long", "October 27, 2025"),
            ("de-DE", "short", "27.10.25"),
        ],
    )
    def test_date_styles(self, locale: str, style: str, expected: str) -> None:
        assert DateTimeFormat(locale, date_style=style).format(WHEN) == expected  # type: ignore[arg-type]

    def test_pattern_overrides_styles(self) -> None:
        fmt = DateTimeFormat("en", date_style="full", pattern="yyyy-MM-dd")
        assert fmt.format(WHEN) == "2025-10-27"

    def test_timezone_shifts_output(self) -> None:
        assert DateTimeFormat("en", pattern="HH:mm").format(WHEN) == "14:30"
        berlin = DateTimeFormat("en", pattern="HH:mm", timezone="Europe/Berlin")
        assert berlin.format(WHEN) == "15:30"

    def test_combined_date_and_time(self) -> None:
        result = DateTimeFormat("en", date_style="short", time_style="short").format(WHEN)
        assert result.startswith("10/27/25")
        assert "2:30" in result

    def test_epoch_and_iso_values(self) -> None:
        fmt = DateTimeFormat("en")
        assert fmt.format(0) == "Jan 1, 1970"
        assert fmt.format("2025-10-27") == "Oct 27, 2025"

    def test_time_of_date_only_value(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            DateTimeFormat("en", time_style="short").format(date(2025, 10, 27))
        assert exc_info.value.fallback_value == "2025-10-27"

    def test_invalid_style_rejected(self) -> None:
        with pytest.raises(FormattingError, match="date_style"):
            DateTimeFormat("en", date_style="tiny")  # type: ignore[arg-type]

    def test_unknown_timezone_rejected(self) -> None:
        with pytest.raises(FormattingError, match="timezone"):
            DateTimeFormat("en", timezone="Mars/Olympus_Mons")

    def test_unknown_locale_rejected(self) -> None:
        with pytest.raises(FormattingError, match="xx"):
            DateTimeFormat("xx-XX")

    def test_repr(self) -> None:
        assert repr(DateTimeFormat("en")).startswith("DateTimeFormat('en', date_style='medium'")


class TestNumberFormat:
    """Decimal, percent and currency formatting."""

    @pytest.mark.parametrize(
        ("locale", "expected"),
        [("en-US", "1,234.5"), ("de-DE", "1.234,5")],
    )
    def test_decimal(self, locale: str, expected: str) -> None:
        assert NumberFormat(locale).format(1234.5) == expected

    def test_decimal_value(self) -> None:
        assert NumberFormat("en").format(Decimal("1234.5")) == "1,234.5"

    def test_percent(self) -> None:
        assert NumberFormat("en", style="percent").format(0.25) == "25%"

    def test_currency_symbol(self) -> None:
        assert NumberFormat("en", style="currency", currency="USD").format(1234.5) == "$1,234.50"

    def test_currency_code(self) -> None:
        result = NumberFormat(
            "en", style="currency", currency="USD", currency_display="code"
        ).format(1234.5)
        assert "USD" in result
        assert "1,234.50" in result
        assert "$" not in result

    def test_currency_name(self) -> None:
        result = NumberFormat(
            "en", style="currency", currency="USD", currency_display="name"
        ).format(1234.5)
        assert "US dollars" in result

    def test_fraction_digits(self) -> None:
        assert NumberFormat("en", minimum_fraction_digits=2).format(5) == "5.00"
        assert NumberFormat("en", maximum_fraction_digits=0).format(1234.6) == "1,235"

    def test_without_grouping(self) -> None:
        assert NumberFormat("en", use_grouping=False).format(1234.5) == "1234.5"

    def test_custom_pattern(self) -> None:
        fmt = NumberFormat("en", pattern="#,##0.00;(#,##0.00)")
        assert fmt.format(-1234.56) == "(1,234.56)"

    @given(n=st.integers(min_value=-(10**12), max_value=10**12))
    def test_integers_without_grouping_match_str(self, n: int) -> None:
        """Property: ungrouped English integers render like str()."""
        assert NumberFormat("en", use_grouping=False).format(n) == str(n)

    @pytest.mark.parametrize("value", [True, "12", None])
    def test_non_numeric_rejected(self, value: object) -> None:
        with pytest.raises(FormattingError) as exc_info:
            NumberFormat("en").format(value)  # type: ignore[arg-type]
        assert exc_info.value.fallback_value == str(value)

    def test_currency_requires_code(self) -> None:
        with pytest.raises(FormattingError, match="currency code"):
            NumberFormat("en", style="currency")

    def test_invalid_fraction_digits(self) -> None:
        with pytest.raises(FormattingError, match="Fraction digits"):
            NumberFormat("en", minimum_fraction_digits=3, maximum_fraction_digits=1)

    def test_invalid_style(self) -> None:
        with pytest.raises(FormattingError, match="style"):
            NumberFormat("en", style="scientific")  # type: ignore[arg-type]
