"""Parser for ICU-style message patterns.

Supported syntax (subset of ICU MessageFormat):

    Hello, {name}!
    {count, number}            {count, number, integer}    {n, number, #,##0.0}
    {when, date, short}        {when, time}                {when, date, yyyy-MM-dd}
    {count, plural, offset:1 =0 {nobody} one {# guest} other {# guests}}
    {place, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}
    {gender, select, female {she} male {he} other {they}}

Quoting follows ICU apostrophe rules: ``''`` is a literal apostrophe and an
apostrophe before ``{``, ``}`` (or ``#`` inside plural options) starts a quoted
literal that runs to the next single apostrophe.

The parser produces an immutable tuple of parts; it performs no validation
that depends on locale data or on the ``require_other`` mode.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Literal

from tagformat.constants import PLURAL_CATEGORIES
from tagformat.diagnostics import MessageSyntaxError

__all__ = [
    "ArgumentPart",
    "Part",
    "Pattern",
    "PluralPart",
    "PoundPart",
    "SelectPart",
    "TextPart",
    "parse_message",
]

type ArgumentKind = Literal["simple", "number", "date", "time"]


@dataclass(frozen=True, slots=True)
class TextPart:
    """Literal pattern text."""

    value: str


@dataclass(frozen=True, slots=True)
class PoundPart:
    """``#`` inside plural options: the plural value minus the offset."""


@dataclass(frozen=True, slots=True)
class ArgumentPart:
    """``{name}`` or ``{name, kind[, style]}``."""

    name: str
    kind: ArgumentKind = "simple"
    style: str | None = None


@dataclass(frozen=True, slots=True)
class SelectPart:
    """``{name, select, key {pattern} ...}``."""

    name: str
    options: tuple[tuple[str, Pattern], ...]


@dataclass(frozen=True, slots=True)
class PluralPart:
    """``{name, plural|selectordinal, [offset:n] selector {pattern} ...}``."""

    name: str
    options: tuple[tuple[str, Pattern], ...]
    offset: int = 0
    ordinal: bool = False


type Part = TextPart | PoundPart | ArgumentPart | SelectPart | PluralPart
type Pattern = tuple[Part, ...]

_FORMATTED_KINDS: frozenset[str] = frozenset({"number", "date", "time"})
_NAME_TERMINATORS: frozenset[str] = frozenset("{},'#")


class _Parser:
    """Recursive-descent parser over a single pattern string."""

    __slots__ = ("pos", "source")

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    @property
    def is_eof(self) -> bool:
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        return self.source[self.pos]

    def error(self, message: str) -> MessageSyntaxError:
        return MessageSyntaxError(message, position=self.pos)

    def skip_whitespace(self) -> None:
        while not self.is_eof and self.current.isspace():
            self.pos += 1

    def expect(self, char: str) -> None:
        if self.is_eof or self.current != char:
            found = "end of pattern" if self.is_eof else repr(self.current)
            raise self.error(f"Expected {char!r}, found {found}")
        self.pos += 1

    def read_word(self) -> str:
        start = self.pos
        while (
            not self.is_eof
            and not self.current.isspace()
            and self.current not in _NAME_TERMINATORS
        ):
            self.pos += 1
        return self.source[start : self.pos]

    def parse_pattern(self, *, in_plural: bool, nested: bool) -> Pattern:
        parts: list[Part] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                parts.append(TextPart("".join(text)))
                text.clear()

        while not self.is_eof:
            char = self.current
            if char == "{":
                flush()
                parts.append(self.parse_argument(in_plural=in_plural))
            elif char == "}":
                if nested:
                    break
                raise self.error("Unmatched '}'")
            elif char == "#" and in_plural:
                flush()
                parts.append(PoundPart())
                self.pos += 1
            elif char == "'":
                text.append(self.parse_quoted(in_plural=in_plural))
            else:
                text.append(char)
                self.pos += 1

        flush()
        return tuple(parts)

    def parse_quoted(self, *, in_plural: bool) -> str:
        """Consume an apostrophe sequence and return the literal text."""
        nxt = self.source[self.pos + 1] if self.pos + 1 < len(self.source) else ""
        if nxt == "'":
            self.pos += 2
            return "'"
        if nxt not in ("{", "}") and not (nxt == "#" and in_plural):
            self.pos += 1
            return "'"

        # Quoted literal: runs to the next lone apostrophe (or end of pattern)
        self.pos += 1
        chars: list[str] = []
        while not self.is_eof:
            if self.current == "'":
                if self.source.startswith("''", self.pos):
                    chars.append("'")
                    self.pos += 2
                    continue
                self.pos += 1
                break
            chars.append(self.current)
            self.pos += 1
        return "".join(chars)

    def parse_argument(self, *, in_plural: bool) -> Part:
        self.expect("{")
        self.skip_whitespace()
        name = self.read_word()
        if not name:
            raise self.error("Expected argument name")
        self.skip_whitespace()

        if not self.is_eof and self.current == "}":
            self.pos += 1
            return ArgumentPart(name)

        self.expect(",")
        self.skip_whitespace()
        kind = self.read_word()
        self.skip_whitespace()

        if kind in _FORMATTED_KINDS:
            style: str | None = None
            if not self.is_eof and self.current == ",":
                self.pos += 1
                style = self.parse_style()
            self.expect("}")
            return ArgumentPart(name, kind, style)  # type: ignore[arg-type]

        if kind in ("plural", "selectordinal"):
            self.expect(",")
            offset, options = self.parse_options(plural=True, in_plural=True)
            return PluralPart(name, options, offset=offset, ordinal=kind == "selectordinal")

        if kind == "select":
            self.expect(",")
            _, options = self.parse_options(plural=False, in_plural=in_plural)
            return SelectPart(name, options)

        raise self.error(f"Unknown argument type {kind!r} for {name!r}")

    def parse_style(self) -> str:
        start = self.pos
        while not self.is_eof and self.current not in "{}":
            self.pos += 1
        style = self.source[start : self.pos].strip()
        if not style:
            raise self.error("Expected argument style")
        return style

    def parse_options(
        self, *, plural: bool, in_plural: bool
    ) -> tuple[int, tuple[tuple[str, Pattern], ...]]:
        offset = 0
        self.skip_whitespace()
        if plural and self.source.startswith("offset:", self.pos):
            self.pos += len("offset:")
            self.skip_whitespace()
            word = self.read_word()
            if not word.isdecimal():
                raise self.error(f"Invalid plural offset {word!r}")
            offset = int(word)

        options: dict[str, Pattern] = {}
        while True:
            self.skip_whitespace()
            if self.is_eof:
                raise self.error("Unterminated argument")
            if self.current == "}":
                self.pos += 1
                break

            selector = self.read_word()
            if not selector:
                raise self.error("Expected option selector")
            if plural:
                self.validate_plural_selector(selector)
            if selector in options:
                raise self.error(f"Duplicate option {selector!r}")

            self.skip_whitespace()
            self.expect("{")
            options[selector] = self.parse_pattern(in_plural=in_plural, nested=True)
            self.expect("}")

        if not options:
            raise self.error("Expected at least one option")
        return offset, tuple(options.items())

    def validate_plural_selector(self, selector: str) -> None:
        if selector.startswith("="):
            try:
                exact = Decimal(selector[1:])
            except InvalidOperation:
                exact = None
            if exact is None or not exact.is_finite():
                raise self.error(f"Invalid exact selector {selector!r}")
        elif selector not in PLURAL_CATEGORIES:
            raise self.error(f"Invalid plural category {selector!r}")


def parse_message(source: str) -> Pattern:
    """Parse a message pattern into immutable parts.

    Raises:
        MessageSyntaxError: If the pattern is malformed

    Example:
        >>> parse_message("Hello, {name}!")
        (TextPart(value='Hello, '), ArgumentPart(name='name', kind='simple', style=None), TextPart(value='!'))
    """
    return _Parser(source).parse_pattern(in_plural=False, nested=False)
