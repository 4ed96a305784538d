"""Compiled message formats.

``MessageFormat`` parses a pattern once, resolves the locale formatters its
arguments need, and then interpolates any number of value mappings into a
builder produced by its builder factory.

Python 3.13+. Uses the Babel-backed formatters from ``tagformat.runtime``.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from tagformat.constants import PLURAL_OTHER
from tagformat.diagnostics import MessageFormatError
from tagformat.messageformat.builders import (
    MessageBuilder,
    MessageBuilderFactory,
    string_builder_factory,
)
from tagformat.messageformat.parser import (
    ArgumentPart,
    Pattern,
    PluralPart,
    PoundPart,
    SelectPart,
    TextPart,
    parse_message,
)
from tagformat.runtime.locale_formats import (
    DATE_TIME_FORMAT_OPTIONS,
    NUMBER_FORMAT_OPTIONS,
    DateTimeFormat,
    NumberFormat,
)
from tagformat.runtime.plural_rules import PluralFormat

__all__ = ["DEFAULT_MESSAGE_FORMATS", "MessageFormat"]

_STYLES = ("short", "medium", "long", "full")

# Named styles available to {x, number|date|time, style} in every message.
# Application formats of the same kind and name take precedence.
DEFAULT_MESSAGE_FORMATS: Mapping[str, Mapping[str, Mapping[str, Any]]] = MappingProxyType(
    {
        "number": {
            "integer": {"maximum_fraction_digits": 0},
            "percent": {"style": "percent"},
        },
        "date": {style: {"date_style": style} for style in _STYLES},
        "time": {style: {"time_style": style} for style in _STYLES},
    }
)

_DEFAULT_STYLE: Mapping[str, Mapping[str, Any]] = MappingProxyType(
    {
        "number": {},
        "date": {"date_style": "medium"},
        "time": {"time_style": "medium"},
    }
)

type _ArgumentFormatter = NumberFormat | DateTimeFormat


class MessageFormat:
    """A message pattern compiled for one locale.

    Examples:
        >>> MessageFormat("Hello, {name}!", "en").format({"name": "Ann"})
        'Hello, Ann!'
        >>> fmt = MessageFormat("{n, plural, one {# file} other {# files}}", "en")
        >>> fmt.format({"n": 1}), fmt.format({"n": 1200})
        ('1 file', '1,200 files')
    """

    __slots__ = (
        "_argument_formatters",
        "_builder_factory",
        "_number_format",
        "_pattern",
        "_plural_formats",
        "locale_code",
        "require_other",
        "source",
    )

    def __init__(
        self,
        source: str,
        locale_code: str,
        formats: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None,
        *,
        builder_factory: MessageBuilderFactory = string_builder_factory,
        require_other: bool = True,
    ) -> None:
        """Compile a message.

        Args:
            source: Message pattern
            locale_code: Locale used for plural rules and argument formatting
            formats: Named argument styles by kind ("number", "date", "time")
            builder_factory: Zero-argument factory for the output builder
            require_other: Reject plural/select arguments without "other"

        Raises:
            MessageSyntaxError: If the pattern is malformed
            MessageFormatError: If require_other is violated
            FormattingError: If an argument formatter cannot be constructed
        """
        self.source = source
        self.locale_code = locale_code
        self.require_other = require_other
        self._builder_factory = builder_factory
        self._pattern = parse_message(source)
        self._number_format = NumberFormat(locale_code)
        self._plural_formats: dict[bool, PluralFormat] = {}
        self._argument_formatters: dict[ArgumentPart, _ArgumentFormatter] = {}

        styles = self._merge_formats(formats or {})
        self._compile(self._pattern, styles)

    def format(self, values: Mapping[str, Any] | None = None) -> object:
        """Interpolate values and return whatever the builder builds.

        Raises:
            MessageFormatError: If a referenced value is missing or unusable
            FormattingError: If an argument cannot be formatted
        """
        builder = self._builder_factory()
        self._format_pattern(self._pattern, values or {}, builder, pound=None)
        return builder.build()

    def __repr__(self) -> str:
        return f"MessageFormat({self.source!r}, {self.locale_code!r})"

    @staticmethod
    def _merge_formats(
        formats: Mapping[str, Mapping[str, Mapping[str, Any]]],
    ) -> dict[str, dict[str, Mapping[str, Any]]]:
        return {
            kind: {**defaults, **formats.get(kind, {})}
            for kind, defaults in DEFAULT_MESSAGE_FORMATS.items()
        }

    def _compile(self, pattern: Pattern, styles: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> None:
        for part in pattern:
            match part:
                case ArgumentPart(kind="simple"):
                    pass
                case ArgumentPart():
                    if part not in self._argument_formatters:
                        self._argument_formatters[part] = self._argument_formatter(part, styles)
                case SelectPart() | PluralPart():
                    option_keys = {key for key, _ in part.options}
                    if self.require_other and PLURAL_OTHER not in option_keys:
                        kind = "select" if isinstance(part, SelectPart) else "plural"
                        msg = (
                            f"Missing '{PLURAL_OTHER}' option in {kind} argument "
                            f"'{part.name}' of message '{self.source}'"
                        )
                        raise MessageFormatError(msg)
                    if isinstance(part, PluralPart) and part.ordinal not in self._plural_formats:
                        self._plural_formats[part.ordinal] = PluralFormat(
                            self.locale_code,
                            style="ordinal" if part.ordinal else "cardinal",
                            require_other=False,
                        )
                    for _, option in part.options:
                        self._compile(option, styles)

    def _argument_formatter(
        self, part: ArgumentPart, styles: Mapping[str, Mapping[str, Mapping[str, Any]]]
    ) -> _ArgumentFormatter:
        if part.style is None:
            options: Mapping[str, Any] = _DEFAULT_STYLE[part.kind]
        else:
            # An unknown style name is a CLDR pattern, e.g. {d, date, yyyy-MM-dd}
            options = styles[part.kind].get(part.style) or {"pattern": part.style}

        if part.kind == "number":
            return NumberFormat(
                self.locale_code,
                **{k: v for k, v in options.items() if k in NUMBER_FORMAT_OPTIONS},
            )
        return DateTimeFormat(
            self.locale_code,
            **{k: v for k, v in options.items() if k in DATE_TIME_FORMAT_OPTIONS},
        )

    def _lookup(self, values: Mapping[str, Any], name: str) -> Any:
        try:
            return values[name]
        except KeyError:
            msg = f"The value '{name}' was not provided to the message '{self.source}'"
            raise MessageFormatError(msg) from None

    def _format_pattern(
        self,
        pattern: Pattern,
        values: Mapping[str, Any],
        builder: MessageBuilder,
        pound: int | float | Decimal | None,
    ) -> None:
        for part in pattern:
            match part:
                case TextPart(value=text):
                    builder.append_text(text)
                case PoundPart():
                    if pound is not None:
                        builder.append_value(self._number_format.format(pound))
                case ArgumentPart(kind="simple", name=name):
                    builder.append_value(self._lookup(values, name))
                case ArgumentPart(name=name):
                    formatter = self._argument_formatters[part]
                    builder.append_value(formatter.format(self._lookup(values, name)))
                case SelectPart(name=name):
                    key = str(self._lookup(values, name))
                    self._format_pattern(
                        self._choose(part, key, None), values, builder, pound
                    )
                case PluralPart(name=name):
                    number = self._to_number(self._lookup(values, name), name)
                    self._format_pattern(
                        self._select_plural(part, number), values, builder, number - part.offset
                    )

    def _to_number(self, value: Any, name: str) -> int | float | Decimal:
        if isinstance(value, str):
            try:
                value = Decimal(value)
            except InvalidOperation:
                pass
        if isinstance(value, Decimal) and not value.is_finite():
            msg = f"The value '{name}' must be a finite number, got {value!r}"
            raise MessageFormatError(msg)
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return value
        msg = f"The value '{name}' must be a number, got {value!r}"
        raise MessageFormatError(msg)

    def _select_plural(self, part: PluralPart, number: int | float | Decimal) -> Pattern:
        exact = Decimal(str(number))
        for key, option in part.options:
            if key.startswith("=") and Decimal(key[1:]) == exact:
                return option
        category = self._plural_formats[part.ordinal].format(number - part.offset)
        return self._choose(part, category, number)

    def _choose(
        self, part: SelectPart | PluralPart, key: str, number: int | float | Decimal | None
    ) -> Pattern:
        options = dict(part.options)
        if key in options:
            return options[key]
        if PLURAL_OTHER in options:
            return options[PLURAL_OTHER]
        shown = key if number is None else number
        msg = f"No option for {shown!r} in argument '{part.name}' of message '{self.source}'"
        raise MessageFormatError(msg)
