"""Tests for plural category selection.

Validates CLDR categories via Babel, ordinal rules, the one/other fallback for
unknown locales, injected rule sets, and the "other" requirement.
"""

import logging
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tagformat.constants import PLURAL_CATEGORIES
from tagformat.diagnostics import FormattingError, MissingPluralCategoryError
from tagformat.runtime.plural_rules import PluralFormat, load_plural_rules


class OneOnlyRules:
    """Rule set double that defines no "other" category."""

    categories = frozenset({"one"})

    def __call__(self, n: int | float | Decimal) -> str:
        return "one"


class TestCardinalRules:
    """CLDR cardinal categories."""

    @pytest.mark.parametrize(
        ("locale", "value", "expected"),
        [
            ("en_US", 1, "one"),
            ("en_US", 0, "other"),
            ("en_US", 5, "other"),
            ("ru_RU", 1, "one"),
            ("ru_RU", 3, "few"),
            ("ru_RU", 5, "many"),
            ("ar_SA", 0, "zero"),
            ("ar_SA", 2, "two"),
            ("ja_JP", 1, "other"),
        ],
    )
    def test_categories(self, locale: str, value: int, expected: str) -> None:
        assert PluralFormat(locale).format(value) == expected

    def test_string_numbers(self) -> None:
        assert PluralFormat("en").format("1") == "one"

    def test_decimal_numbers(self) -> None:
        assert PluralFormat("en").format(Decimal("1.5")) == "other"

    @given(n=st.integers(min_value=0, max_value=10**6))
    def test_always_a_cldr_category(self, n: int) -> None:
        """Property: every result is one of the six CLDR categories."""
        assert PluralFormat("pl").format(n) in PLURAL_CATEGORIES

    def test_categories_include_other(self) -> None:
        categories = PluralFormat("ru").categories
        assert "other" in categories
        assert {"one", "few", "many"} <= categories


class TestOrdinalRules:
    """CLDR ordinal categories."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, "one"), (2, "two"), (3, "few"), (4, "other"), (11, "other"), (21, "one")],
    )
    def test_english_ordinals(self, value: int, expected: str) -> None:
        assert PluralFormat("en", style="ordinal").format(value) == expected


class TestFallbackRules:
    """Unknown locales use a one/other rule."""

    def test_unknown_locale_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="tagformat.runtime.plural_rules"):
            rules = load_plural_rules("xx-XX")
        assert "xx-XX" in caplog.text
        assert rules.categories == frozenset({"one", "other"})
        assert rules(1) == "one"
        assert rules(-1) == "one"
        assert rules(2) == "other"


class TestRequireOther:
    """Rule sets without "other" are a construction-time error."""

    def test_missing_other_rejected(self) -> None:
        with pytest.raises(MissingPluralCategoryError) as exc_info:
            PluralFormat("en", rules=OneOnlyRules())
        assert exc_info.value.locale_code == "en"
        assert exc_info.value.categories == frozenset({"one"})

    def test_missing_other_allowed_when_not_required(self) -> None:
        fmt = PluralFormat("en", rules=OneOnlyRules(), require_other=False)
        assert fmt.format(7) == "one"
        assert fmt.categories == frozenset({"one"})


class TestInvalidInput:
    """Unusable values raise FormattingError with an "other" fallback."""

    @pytest.mark.parametrize("value", [True, "many", None, object()])
    def test_non_numbers(self, value: object) -> None:
        with pytest.raises(FormattingError) as exc_info:
            PluralFormat("en").format(value)  # type: ignore[arg-type]
        assert exc_info.value.fallback_value == "other"

    def test_invalid_style(self) -> None:
        with pytest.raises(FormattingError, match="style"):
            PluralFormat("en", style="dual")  # type: ignore[arg-type]
