"""Rendering targets and tag builders.

A formatted value can be emitted as-is, wrapped in a tag, or handed to a
caller-supplied render callable. Two disciplines share one resolver:

    component: opaque results; string targets go through TagBuilder
    element:   HTML-shaped strings; string targets go through HtmlElementBuilder

Targets resolve per call with the precedence: explicit per-call target,
per-operation configured target, global default. A target that is neither a
string nor a callable is rejected when the resolver is built, never at use.

Python 3.13+. Zero external dependencies.
"""

import html
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Protocol

from tagformat.constants import RENDERABLE_OPERATIONS
from tagformat.diagnostics import InvalidConfigurationError

__all__ = [
    "ElementBuilder",
    "ElementBuilderFactory",
    "HtmlElementBuilder",
    "RenderTarget",
    "RenderingTargetResolver",
    "TagBuilder",
    "html_element_builder_factory",
    "resolve_target",
    "tag_builder_factory",
]

type RenderTarget = str | Callable[[object, Mapping[str, Any]], object]


class ElementBuilder(Protocol):
    """Assembles one rendered tag: opening tag, children, closing tag."""

    def append_opening_tag(self, tag_name: str, options: Mapping[str, Any]) -> None: ...

    def append_children(self, value: object, options: Mapping[str, Any]) -> None: ...

    def append_closing_tag(self, tag_name: str, options: Mapping[str, Any]) -> None: ...

    def build(self) -> object: ...


type ElementBuilderFactory = Callable[[], ElementBuilder]


def _children_text(value: object) -> str:
    # Fragment sequences from a fragment builder render as their concatenation
    if isinstance(value, (tuple, list)):
        return "".join(str(child) for child in value)
    return str(value)


class TagBuilder:
    """Plain string tag assembly.

    Example:
        >>> builder = TagBuilder()
        >>> builder.append_opening_tag("span", {})
        >>> builder.append_children("hello", {})
        >>> builder.append_closing_tag("span", {})
        >>> builder.build()
        '<span>hello</span>'
    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, value: str) -> None:
        self._parts.append(value)

    def append_opening_tag(self, tag_name: str, options: Mapping[str, Any] | None = None) -> None:
        self.append(f"<{tag_name}>")

    def append_children(self, value: object, options: Mapping[str, Any] | None = None) -> None:
        self.append(_children_text(value))

    def append_closing_tag(self, tag_name: str, options: Mapping[str, Any] | None = None) -> None:
        self.append(f"</{tag_name}>")

    def build(self) -> str:
        return "".join(self._parts)


class HtmlElementBuilder(TagBuilder):
    """HTML element assembly with optional attributes.

    The ``attributes`` option maps attribute names to values. Values are
    HTML-escaped; ``True`` renders a bare attribute and ``None``/``False``
    omit it. Children are inserted verbatim: they are already-formatted
    output, possibly markup from an HTML message.

    Example:
        >>> builder = HtmlElementBuilder()
        >>> builder.append_opening_tag("time", {"attributes": {"datetime": "2025-10-27"}})
        >>> builder.append_children("Oct 27, 2025", {})
        >>> builder.append_closing_tag("time", {})
        >>> builder.build()
        '<time datetime="2025-10-27">Oct 27, 2025</time>'
    """

    __slots__ = ()

    def append_opening_tag(self, tag_name: str, options: Mapping[str, Any] | None = None) -> None:
        attributes = (options or {}).get("attributes") or {}
        rendered: list[str] = []
        for name, value in attributes.items():
            if value is None or value is False:
                continue
            if value is True:
                rendered.append(f" {name}")
            else:
                rendered.append(f' {name}="{html.escape(str(value), quote=True)}"')
        self.append(f"<{tag_name}{''.join(rendered)}>")


def tag_builder_factory() -> TagBuilder:
    return TagBuilder()


def html_element_builder_factory() -> HtmlElementBuilder:
    return HtmlElementBuilder()


def resolve_target(
    target: object, default_target: object, *, discipline: str = "component"
) -> RenderTarget:
    """Pick ``target`` if set, else ``default_target``, and validate it.

    Only None and the empty string count as unset; any other value, falsy or
    not, is validated as given.

    Raises:
        InvalidConfigurationError: If the chosen target is neither a string
            nor a callable
    """
    resolved = default_target if target is None or target == "" else target
    if isinstance(resolved, str) or callable(resolved):
        return resolved  # type: ignore[return-value]

    msg = (
        f"All {discipline} targets must be either a string or a callable, "
        f"got {type(resolved).__name__}: {resolved!r}"
    )
    raise InvalidConfigurationError(msg)


class RenderingTargetResolver:
    """Per-operation rendering targets for one discipline.

    Every configured target is validated on construction. ``render`` applies
    the per-call override, if any, over the resolved table.

    Example:
        >>> resolver = RenderingTargetResolver("component", {"date": "time"}, "span", tag_builder_factory)
        >>> resolver.render("date", "Oct 27, 2025")
        '<time>Oct 27, 2025</time>'
        >>> resolver.render("number", "42", target=lambda value, options: [value])
        ['42']
    """

    __slots__ = ("_builder_factory", "_targets", "discipline")

    def __init__(
        self,
        discipline: str,
        targets: Mapping[str, object],
        default_target: object,
        builder_factory: ElementBuilderFactory,
    ) -> None:
        """Build the target table.

        Args:
            discipline: "component" or "element" (used in error messages)
            targets: Per-operation targets keyed by base operation name
            default_target: Target for operations without their own
            builder_factory: Default builder for string targets

        Raises:
            InvalidConfigurationError: If any configured target, or the
                default, is neither a string nor a callable
        """
        self.discipline = discipline
        self._builder_factory = builder_factory

        resolve_target(None, default_target, discipline=discipline)
        for target in targets.values():
            resolve_target(target, default_target, discipline=discipline)

        self._targets: Mapping[str, RenderTarget] = MappingProxyType(
            {
                operation: resolve_target(
                    targets.get(operation), default_target, discipline=discipline
                )
                for operation in RENDERABLE_OPERATIONS
            }
        )

    @property
    def targets(self) -> Mapping[str, RenderTarget]:
        """Resolved target per renderable operation (read-only)."""
        return self._targets

    def render(
        self,
        operation: str,
        value: object,
        target: object = None,
        builder_factory: ElementBuilderFactory | None = None,
        **options: Any,
    ) -> object:
        """Render a formatted value through the resolved target.

        String targets are assembled by a builder; callables receive
        ``(value, options)`` and their result is returned unchanged. The
        options always carry ``formatter_name``.

        Raises:
            ValueError: If ``operation`` has no rendering target
            InvalidConfigurationError: If the per-call target is invalid
        """
        if operation not in self._targets:
            msg = f"Operation '{operation}' has no {self.discipline} rendering target"
            raise ValueError(msg)

        resolved = resolve_target(target, self._targets[operation], discipline=self.discipline)
        render_options = {**options, "formatter_name": operation}

        if isinstance(resolved, str):
            builder = (builder_factory or self._builder_factory)()
            builder.append_opening_tag(resolved, render_options)
            builder.append_children(value, render_options)
            builder.append_closing_tag(resolved, render_options)
            return builder.build()

        return resolved(value, render_options)

    def __repr__(self) -> str:
        return f"RenderingTargetResolver({self.discipline!r})"
