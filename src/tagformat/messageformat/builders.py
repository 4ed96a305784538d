"""Output builders for message formatting.

A compiled message walks its parts and feeds them to a builder obtained from a
builder factory: pattern text through ``append_text`` and interpolated values
through ``append_value``. Swapping the factory changes how output is assembled
without touching the compiler.

Builders:
    StringBuilder: Plain text; values are converted with str()
    HtmlStringBuilder: Like StringBuilder, but HTML-escapes values
    FragmentBuilder: Tuple of fragments; non-string values stay as objects

Python 3.13+. Zero external dependencies.
"""

import html
from collections.abc import Callable
from typing import Protocol

__all__ = [
    "FragmentBuilder",
    "HtmlStringBuilder",
    "MessageBuilder",
    "MessageBuilderFactory",
    "StringBuilder",
    "fragment_builder_factory",
    "html_string_builder_factory",
    "string_builder_factory",
]


class MessageBuilder(Protocol):
    """Accumulates the output of one message format call."""

    def append_text(self, text: str) -> None: ...

    def append_value(self, value: object) -> None: ...

    def build(self) -> object: ...


type MessageBuilderFactory = Callable[[], MessageBuilder]


class StringBuilder:
    """Concatenates text and values into a single string."""

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append_text(self, text: str) -> None:
        self._parts.append(text)

    def append_value(self, value: object) -> None:
        self._parts.append(str(value))

    def build(self) -> str:
        return "".join(self._parts)


class HtmlStringBuilder(StringBuilder):
    """String builder that HTML-escapes interpolated values.

    Pattern text is trusted markup and is kept as written.

    Example:
        >>> builder = HtmlStringBuilder()
        >>> builder.append_text("<b>")
        >>> builder.append_value("Tom & Jerry")
        >>> builder.append_text("</b>")
        >>> builder.build()
        '<b>Tom &amp; Jerry</b>'
    """

    __slots__ = ()

    def append_value(self, value: object) -> None:
        self._parts.append(html.escape(str(value)))


class FragmentBuilder:
    """Builds a tuple of fragments for component-aware assembly.

    Adjacent strings are merged; any other value is kept as-is so callers can
    interpolate rich objects (rendered components, markup nodes).

    Example:
        >>> builder = FragmentBuilder()
        >>> builder.append_text("Hi ")
        >>> builder.append_value(icon)
        >>> builder.build()
        ('Hi ', icon)
    """

    __slots__ = ("_fragments",)

    def __init__(self) -> None:
        self._fragments: list[object] = []

    def append_text(self, text: str) -> None:
        if not text:
            return
        if self._fragments and isinstance(self._fragments[-1], str):
            self._fragments[-1] += text
        else:
            self._fragments.append(text)

    def append_value(self, value: object) -> None:
        if isinstance(value, str):
            self.append_text(value)
        else:
            self._fragments.append(value)

    def build(self) -> tuple[object, ...]:
        return tuple(self._fragments)


def string_builder_factory() -> StringBuilder:
    return StringBuilder()


def html_string_builder_factory() -> HtmlStringBuilder:
    return HtmlStringBuilder()


def fragment_builder_factory() -> FragmentBuilder:
    return FragmentBuilder()
