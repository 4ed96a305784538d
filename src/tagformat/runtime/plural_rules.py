"""CLDR plural rules using Babel.

Provides plural and ordinal category selection for all locales using Babel's
CLDR data. A rule set may also be injected, which is how alternative rule
providers (and test doubles) plug in.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

import logging
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Literal, Protocol

from babel.core import UnknownLocaleError

from tagformat.constants import PLURAL_OTHER
from tagformat.diagnostics import FormattingError, MissingPluralCategoryError
from tagformat.locale_utils import get_babel_locale

__all__ = [
    "PLURAL_FORMAT_OPTIONS",
    "BabelPluralRules",
    "PluralFormat",
    "PluralRuleSet",
    "load_plural_rules",
]

logger = logging.getLogger(__name__)

type PluralStyle = Literal["cardinal", "ordinal"]

PLURAL_FORMAT_OPTIONS: tuple[str, ...] = ("style",)


class PluralRuleSet(Protocol):
    """Rule provider interface: the categories it defines plus a selector."""

    @property
    def categories(self) -> frozenset[str]: ...

    def __call__(self, n: int | float | Decimal) -> str: ...


class BabelPluralRules:
    """Adapter exposing a Babel ``PluralRule`` as a PluralRuleSet.

    Babel returns "other" for any number no explicit rule matches, so "other"
    is always part of the category set even though ``PluralRule.tags`` omits it.
    """

    __slots__ = ("_rule",)

    def __init__(self, rule: Callable[[int | float | Decimal], str]) -> None:
        self._rule = rule

    @property
    def categories(self) -> frozenset[str]:
        return frozenset(getattr(self._rule, "tags", ())) | {PLURAL_OTHER}

    def __call__(self, n: int | float | Decimal) -> str:
        return self._rule(n)


class _OneOtherRules:
    """Fallback rule set for unknown locales: n == 1 -> "one", else "other"."""

    __slots__ = ()

    @property
    def categories(self) -> frozenset[str]:
        return frozenset({"one", PLURAL_OTHER})

    def __call__(self, n: int | float | Decimal) -> str:
        return "one" if abs(n) == 1 else PLURAL_OTHER


def load_plural_rules(locale_code: str, style: PluralStyle = "cardinal") -> PluralRuleSet:
    """Load the CLDR rule set for a locale.

    Unknown or invalid locales fall back to a simple one/other rule with a
    warning logged.
    """
    try:
        locale_obj = get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(
            "Unknown locale '%s' for plural rules: %s. Falling back to one/other rule",
            locale_code,
            e,
        )
        return _OneOtherRules()

    rule = locale_obj.ordinal_form if style == "ordinal" else locale_obj.plural_form
    return BabelPluralRules(rule)


class PluralFormat:
    """Plural category selector for one locale and style.

    Examples:
        >>> PluralFormat("en_US").format(1)
        'one'
        >>> PluralFormat("ru_RU").format(5)
        'many'
        >>> PluralFormat("ar_SA").format(2)
        'two'
        >>> PluralFormat("en", style="ordinal").format(3)
        'few'
    """

    __slots__ = ("_rules", "locale_code", "require_other", "style")

    def __init__(
        self,
        locale_code: str,
        *,
        style: PluralStyle = "cardinal",
        require_other: bool = True,
        rules: PluralRuleSet | None = None,
    ) -> None:
        """Initialize selector.

        Args:
            locale_code: BCP-47 or POSIX locale code
            style: "cardinal" (default) or "ordinal"
            require_other: Reject rule sets without an "other" category
            rules: Rule set to use instead of the locale's CLDR rules

        Raises:
            MissingPluralCategoryError: If require_other is set and the rule
                set has no "other" category
            FormattingError: If the style is invalid
        """
        if style not in ("cardinal", "ordinal"):
            msg = f"Invalid plural style '{style}': expected 'cardinal' or 'ordinal'"
            raise FormattingError(msg, fallback_value=PLURAL_OTHER)

        self.locale_code = locale_code
        self.style = style
        self.require_other = require_other
        self._rules = rules if rules is not None else load_plural_rules(locale_code, style)

        if require_other and PLURAL_OTHER not in self._rules.categories:
            msg = (
                f"Plural rules for locale '{locale_code}' ({style}) do not define "
                f"the required '{PLURAL_OTHER}' category"
            )
            raise MissingPluralCategoryError(
                msg, locale_code=locale_code, categories=self._rules.categories
            )

    @property
    def categories(self) -> frozenset[str]:
        """Categories defined by the underlying rule set."""
        return self._rules.categories

    def format(self, value: int | float | Decimal | str) -> str:
        """Select the plural category for a number.

        Returns:
            One of "zero", "one", "two", "few", "many", "other"

        Raises:
            FormattingError: If the value is not numeric
        """
        n: int | float | Decimal
        match value:
            case bool():
                msg = f"Cannot select plural category for boolean '{value}'"
                raise FormattingError(msg, fallback_value=PLURAL_OTHER)
            case int() | float() | Decimal():
                n = value
            case str():
                try:
                    n = Decimal(value)
                except InvalidOperation as e:
                    msg = f"Cannot select plural category for '{value}': not a number"
                    raise FormattingError(msg, fallback_value=PLURAL_OTHER) from e
            case _:
                msg = f"Cannot select plural category for {type(value).__name__} '{value}'"
                raise FormattingError(msg, fallback_value=PLURAL_OTHER)

        try:
            return self._rules(n)
        except (ValueError, TypeError, ArithmeticError) as e:
            msg = f"Plural rule evaluation failed for '{value}': {e}"
            raise FormattingError(msg, fallback_value=PLURAL_OTHER) from e

    def __repr__(self) -> str:
        return f"PluralFormat({self.locale_code!r}, style={self.style!r})"
