"""Formatter state: memoized formatter factories plus a reference-time accessor.

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import dataclass, fields
from datetime import datetime

from tagformat.messageformat import MessageFormat
from tagformat.runtime.cache import MemoizedConstructor, memoize_constructor
from tagformat.runtime.locale_formats import DateTimeFormat, NumberFormat
from tagformat.runtime.plural_rules import PluralFormat
from tagformat.runtime.relative import RelativeFormat

__all__ = ["FormatFactories", "FormatterState"]


@dataclass(frozen=True, slots=True)
class FormatFactories:
    """One memoized constructor per formatter kind.

    Shared between a formatter and every formatter derived from it through
    ``change_locale``, so cached formatters survive locale switches.

    Example:
        >>> factories = FormatFactories.create()
        >>> factories.number("en", style="percent") is factories.number("en", style="percent")
        True
    """

    date_time: MemoizedConstructor[DateTimeFormat]
    number: MemoizedConstructor[NumberFormat]
    message: MemoizedConstructor[MessageFormat]
    relative: MemoizedConstructor[RelativeFormat]
    plural: MemoizedConstructor[PluralFormat]

    @classmethod
    def create(cls) -> "FormatFactories":
        """Create fresh, empty caches around the default formatter classes."""
        return cls(
            date_time=memoize_constructor(DateTimeFormat),
            number=memoize_constructor(NumberFormat),
            message=memoize_constructor(MessageFormat),
            relative=memoize_constructor(RelativeFormat),
            plural=memoize_constructor(PluralFormat),
        )

    def replace(self, **factories: Callable[..., object]) -> "FormatFactories":
        """Copy with some kinds swapped for other constructors (memoized)."""
        kinds = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, constructor in factories.items():
            if name not in kinds:
                msg = f"Unknown formatter kind '{name}'"
                raise TypeError(msg)
            kinds[name] = (
                constructor
                if isinstance(constructor, MemoizedConstructor)
                else memoize_constructor(constructor)
            )
        return type(self)(**kinds)

    def get_stats(self) -> dict[str, dict[str, int | float]]:
        """Cache statistics per formatter kind."""
        return {f.name: getattr(self, f.name).get_stats() for f in fields(self)}


@dataclass(frozen=True, slots=True)
class FormatterState:
    """Factories plus the zero-argument reference-time accessor.

    Created once per formatter. ``change_locale`` carries ``factories`` into
    the derived formatter but never ``now``.
    """

    factories: FormatFactories
    now: Callable[[], datetime]
