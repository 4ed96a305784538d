"""Formatter types with caller-chosen operation names.

Templates call formatting operations constantly, so terse names pay off:

    Short = create_formatter_type()               # built-in short names
    fmt = Short("en", messages=messages)
    fmt.m({"id": "greet"}, {"name": "Ann"})       # -> formatter.message(...)
    fmt.dc(when)                                  # -> formatter.date_component(...)

The produced class wraps a Formatter by composition. Its method table is
built programmatically: one forwarder per canonical operation, named after
the alias, passing arguments through unchanged.

Python 3.13+.
"""

import keyword
from collections.abc import Callable, Mapping
from functools import update_wrapper
from types import MappingProxyType
from typing import Any, ClassVar, Unpack

from tagformat.config import Configuration, FormatterOptions
from tagformat.constants import CANONICAL_OPERATIONS, DEFAULT_LOCALE, SHORT_NAMES
from tagformat.diagnostics import InvalidConfigurationError
from tagformat.formatter import Formatter

__all__ = ["AliasedFormatter", "create_formatter_type"]


class AliasedFormatter:
    """Base of every aliased formatter type.

    Only lifecycle members live here; the formatting operations are added
    under their aliases by ``create_formatter_type``.
    """

    __slots__ = ("_formatter",)

    aliases: ClassVar[Mapping[str, str]] = SHORT_NAMES
    formatter_class: ClassVar[type[Formatter]] = Formatter

    def __init__(
        self, locale: str = DEFAULT_LOCALE, /, **options: Unpack[FormatterOptions]
    ) -> None:
        self._formatter = self.formatter_class(locale, **options)

    @classmethod
    def wrap(cls, formatter: Formatter) -> "AliasedFormatter":
        """Expose an existing formatter under this type's aliases."""
        instance = cls.__new__(cls)
        instance._formatter = formatter
        return instance

    @property
    def formatter(self) -> Formatter:
        """The wrapped formatter (canonical operation names)."""
        return self._formatter

    @property
    def options(self) -> Configuration:
        return self._formatter.options

    @property
    def locale(self) -> str:
        return self._formatter.locale

    def now(self) -> Any:
        return self._formatter.now()

    def set_now(self, initial_now: Any = None) -> None:
        self._formatter.set_now(initial_now)

    def change_locale(
        self, locale: str, **overrides: Unpack[FormatterOptions]
    ) -> "AliasedFormatter":
        """Derive a formatter for another locale, keeping this aliased type."""
        return self.wrap(self._formatter.change_locale(locale, **overrides))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(locale={self.locale!r})"


_RESERVED: frozenset[str] = frozenset(dir(AliasedFormatter))


def _forwarder(
    formatter_class: type[Formatter], operation: str, alias: str, owner: str
) -> Callable[..., object]:
    def forward(self: AliasedFormatter, *args: Any, **kwargs: Any) -> object:
        return getattr(self._formatter, operation)(*args, **kwargs)

    update_wrapper(forward, getattr(formatter_class, operation))
    forward.__name__ = alias
    forward.__qualname__ = f"{owner}.{alias}"
    return forward


def _validate_alias(operation: str, alias: object) -> None:
    if not isinstance(alias, str) or not alias.isidentifier() or keyword.iskeyword(alias):
        msg = f"Alias for '{operation}' must be a valid identifier, got {alias!r}"
        raise InvalidConfigurationError(msg)
    if alias.startswith("_") or alias in _RESERVED:
        msg = f"Alias {alias!r} for '{operation}' would shadow a formatter attribute"
        raise InvalidConfigurationError(msg)


def create_formatter_type(
    aliases: Mapping[str, str] | None = None,
    /,
    *,
    formatter_class: type[Formatter] = Formatter,
    **names: str,
) -> type[AliasedFormatter]:
    """Create a formatter type whose operations use the given names.

    Every canonical operation gets exactly one name: the caller's if given,
    otherwise its built-in short name (``SHORT_NAMES``).

    Args:
        aliases: Canonical operation name -> alias [positional-only]
        formatter_class: Formatter class to wrap (default: Formatter)
        **names: More aliases, taking precedence over ``aliases``

    Returns:
        New AliasedFormatter subclass

    Raises:
        InvalidConfigurationError: If a key is not a canonical operation, an
            alias is not a usable identifier, two operations share an alias,
            or an alias shadows a formatter attribute

    Example:
        >>> Fmt = create_formatter_type({"message": "msg", "date": "dt"})
        >>> fmt = Fmt("en", messages={"hi": "Hi {name}"})
        >>> fmt.msg({"id": "hi"}, {"name": "Ann"}) == fmt.formatter.message({"id": "hi"}, {"name": "Ann"})
        True
    """
    overrides = {**(aliases or {}), **names}
    unknown = set(overrides).difference(CANONICAL_OPERATIONS)
    if unknown:
        msg = f"Unknown formatter operation(s): {', '.join(sorted(unknown))}"
        raise InvalidConfigurationError(msg)

    table = {**SHORT_NAMES, **overrides}
    operations_by_alias: dict[str, str] = {}
    for operation, alias in table.items():
        _validate_alias(operation, alias)
        if alias in operations_by_alias:
            msg = (
                f"Alias {alias!r} is used for both '{operations_by_alias[alias]}' "
                f"and '{operation}'"
            )
            raise InvalidConfigurationError(msg)
        operations_by_alias[alias] = operation

    class_name = f"Aliased{formatter_class.__name__}"
    namespace: dict[str, Any] = {
        alias: _forwarder(formatter_class, operation, alias, class_name)
        for alias, operation in operations_by_alias.items()
    }
    namespace.update(
        __slots__=(),
        __module__=__name__,
        aliases=MappingProxyType(table),
        formatter_class=formatter_class,
    )
    return type(class_name, (AliasedFormatter,), namespace)
