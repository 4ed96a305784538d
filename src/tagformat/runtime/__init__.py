"""Formatting runtime package.

Provides the Babel-backed locale formatters and the memoized constructors
that cache them.

Python 3.13+.
"""

from .cache import MemoizedConstructor, memoize_constructor
from .locale_formats import DateTimeFormat, NumberFormat
from .plural_rules import PluralFormat, PluralRuleSet
from .relative import RelativeFormat

__all__ = [
    "DateTimeFormat",
    "MemoizedConstructor",
    "NumberFormat",
    "PluralFormat",
    "PluralRuleSet",
    "RelativeFormat",
    "memoize_constructor",
]
