"""Formatter facade.

Composes the bound operation set with two rendering-target resolvers, one
per rendering discipline:

    formatter.date(value)              -> "Oct 27, 2025"
    formatter.date_component(value)    -> component discipline ("<span>...</span>"
                                          or whatever a render callable returns)
    formatter.date_element(value)      -> element discipline (HTML string)

Formatters are immutable. ``change_locale`` returns a new formatter that
shares the memoized formatter factories of its source.

Python 3.13+. Uses Babel for i18n.
"""

import logging
import math
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Unpack

from tagformat.config import OPTION_NAMES, Configuration, FormatterOptions, resolve_config
from tagformat.constants import DEFAULT_LOCALE
from tagformat.core.babel_compat import require_babel
from tagformat.diagnostics import InvalidConfigurationError
from tagformat.engine import MessageDescriptor, bind_formatters
from tagformat.messageformat import MessageBuilderFactory
from tagformat.rendering import (
    ElementBuilderFactory,
    RenderingTargetResolver,
    tag_builder_factory,
)
from tagformat.state import FormatFactories, FormatterState

if TYPE_CHECKING:
    from tagformat.aliasing import AliasedFormatter

__all__ = ["Formatter"]

logger = logging.getLogger(__name__)

type Descriptor = MessageDescriptor | Mapping[str, Any]
type Values = Mapping[str, Any] | None


def _coerce_now(value: object) -> datetime:
    """Convert a reference-time value to a datetime."""
    match value:
        case datetime():
            return value
        case bool():
            pass
        case int() | float():
            if not math.isfinite(value):
                msg = f"initial_now must be a finite timestamp, got {value!r}"
                raise InvalidConfigurationError(msg)
            return datetime.fromtimestamp(value, UTC)
    msg = (
        "initial_now must be a datetime, an epoch timestamp or a callable, "
        f"got {type(value).__name__}"
    )
    raise InvalidConfigurationError(msg)


class Formatter:
    """Locale-aware formatter with component and element rendering.

    Examples:
        >>> fmt = Formatter("en", messages={"greet": "Hello, {name}!"})
        >>> fmt.message({"id": "greet"}, {"name": "Ann"})
        'Hello, Ann!'
        >>> fmt.message_component({"id": "greet"}, {"name": "Ann"})
        '<span>Hello, Ann!</span>'
        >>> fmt.number_element(0.25, style="percent", tag_name="b")
        '<b>25%</b>'
        >>> fmt.plural(2, style="ordinal")
        'two'

    Thread Safety:
        Immutable after construction apart from ``set_now``. The shared
        formatter caches are lock-protected.
    """

    __slots__ = ("_components", "_config", "_elements", "_formatters", "_now", "_state")

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        /,
        *,
        format_factories: FormatFactories | None = None,
        **options: Unpack[FormatterOptions],
    ) -> None:
        """Create a formatter.

        Args:
            locale: Requested locale; falls back to ``default_locale`` when
                no locale data is available [positional-only]
            format_factories: Memoized formatter constructors to share
                (default: fresh caches)
            **options: Configuration options (see FormatterOptions)

        Raises:
            RuntimeUnavailableError: If Babel is not installed
            TypeError: If an option name is unknown
            InvalidConfigurationError: If a rendering target is neither a
                string nor a callable, or initial_now is unusable
            MissingPluralCategoryError: If "other" is required but the
                locale's plural rule set does not define it
        """
        require_babel("Formatter")

        self._config = resolve_config(locale, options)
        self._components = RenderingTargetResolver(
            "component",
            self._config.components,
            self._config.default_component,
            tag_builder_factory,
        )
        self._elements = RenderingTargetResolver(
            "element",
            self._config.html_elements,
            self._config.default_html_element,
            self._config.html_element_builder_factory,
        )

        # One reference "now" per formatter so that every relative time in a
        # render pass agrees.
        self.set_now(self._config.initial_now)

        self._state = FormatterState(
            factories=format_factories if format_factories is not None else FormatFactories.create(),
            now=self.now,
        )
        self._formatters = bind_formatters(self._config, self._state)

        # Plural rules without "other" are a configuration error: surface it here
        self._state.factories.plural(self._config.locale, require_other=self._config.require_other)

        logger.info(
            "Formatter initialized for locale: %s (requested: %s, messages=%d)",
            self._config.locale,
            locale,
            len(self._config.messages),
        )

    @classmethod
    def create(
        cls, aliases: Mapping[str, str] | None = None, /, **names: str
    ) -> "type[AliasedFormatter]":
        """Create a formatter type exposing operations under short names.

        See ``tagformat.aliasing.create_formatter_type``.

        Example:
            >>> Short = Formatter.create(message="msg")
            >>> Short("en", messages={"hi": "Hi"}).msg({"id": "hi"})
            'Hi'
        """
        from tagformat.aliasing import create_formatter_type  # noqa: PLC0415

        return create_formatter_type(aliases, formatter_class=cls, **names)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def options(self) -> Configuration:
        """Effective configuration (read-only)."""
        return self._config

    @property
    def locale(self) -> str:
        """Effective locale after fallback."""
        return self._config.locale

    @property
    def formatters(self) -> Mapping[str, Callable[..., object]]:
        """Bound operation set (read-only)."""
        return self._formatters

    @property
    def format_factories(self) -> FormatFactories:
        """Memoized formatter constructors, shared with derived formatters."""
        return self._state.factories

    def __repr__(self) -> str:
        return f"{type(self).__name__}(locale={self._config.locale!r})"

    # ------------------------------------------------------------------
    # Reference time
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        """Reference time used by relative formatting."""
        return self._now()

    def set_now(
        self, initial_now: datetime | int | float | Callable[[], Any] | None = None
    ) -> None:
        """Fix the reference time.

        Args:
            initial_now: A datetime, epoch seconds, or a zero-argument
                callable returning either. None captures the current time
                once (start a new render pass).

        Raises:
            InvalidConfigurationError: If the value is not usable
        """
        if initial_now is None:
            captured = datetime.now(UTC)
            self._now: Callable[[], datetime] = lambda: captured
        elif callable(initial_now):
            provider = initial_now
            self._now = lambda: _coerce_now(provider())
        else:
            fixed = _coerce_now(initial_now)
            self._now = lambda: fixed

    # ------------------------------------------------------------------
    # Locale change
    # ------------------------------------------------------------------

    def change_locale(self, locale: str, **overrides: Unpack[FormatterOptions]) -> "Formatter":
        """Derive a formatter for another locale.

        Overrides are layered over the current effective configuration (an
        explicit None counts as an override). The new formatter shares this
        formatter's factories but gets its own reference time. This
        formatter is not modified.

        Raises:
            TypeError: If locale is not a string or an option name is unknown

        Example:
            >>> fr = fmt.change_locale("fr", formats=custom_formats)
            >>> fr.options.formats is custom_formats
            True
        """
        if not isinstance(locale, str):
            msg = f"locale must be a string, got {type(locale).__name__}"
            raise TypeError(msg)

        unknown = set(overrides).difference(OPTION_NAMES)
        if unknown:
            msg = f"Unknown formatter option(s): {', '.join(sorted(unknown))}"
            raise TypeError(msg)

        options = {
            name: overrides[name] if name in overrides else getattr(self._config, name)  # type: ignore[literal-required]
            for name in OPTION_NAMES
        }
        if "default_component" not in overrides and (
            options["text_component"] is not None or options["text_renderer"] is not None
        ):
            # Inherited deprecated options stand in for default_component.
            del options["default_component"]
        return type(self)(locale, format_factories=self._state.factories, **options)

    # ------------------------------------------------------------------
    # Base operations
    # ------------------------------------------------------------------

    def message(
        self,
        descriptor: Descriptor,
        values: Values = None,
        *,
        message_builder_factory: MessageBuilderFactory | None = None,
    ) -> object:
        return self._formatters["format_message"](
            descriptor,
            values,
            message_builder_factory or self._config.text_message_builder_factory,
        )

    def html_message(self, descriptor: Descriptor, values: Values = None) -> object:
        return self._formatters["format_html_message"](descriptor, values)

    def date(self, value: object, **options: Any) -> str:
        return self._formatters["format_date"](value, options)  # type: ignore[return-value]

    def time(self, value: object, **options: Any) -> str:
        return self._formatters["format_time"](value, options)  # type: ignore[return-value]

    def number(self, value: object, **options: Any) -> str:
        return self._formatters["format_number"](value, options)  # type: ignore[return-value]

    def relative(self, value: object, **options: Any) -> str:
        return self._formatters["format_relative"](value, options)  # type: ignore[return-value]

    def plural(self, value: object, **options: Any) -> str:
        return self._formatters["format_plural"](value, options)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Component discipline
    # ------------------------------------------------------------------

    def message_component(
        self,
        descriptor: Descriptor,
        values: Values = None,
        *,
        component: object = None,
        message_builder_factory: MessageBuilderFactory | None = None,
        **render_options: Any,
    ) -> object:
        formatted = self.message(
            descriptor,
            values,
            message_builder_factory=(
                message_builder_factory or self._config.component_message_builder_factory
            ),
        )
        return self._components.render("message", formatted, component, **render_options)

    def html_message_component(
        self,
        descriptor: Descriptor,
        values: Values = None,
        *,
        component: object = None,
        **render_options: Any,
    ) -> object:
        formatted = self.html_message(descriptor, values)
        return self._components.render("html_message", formatted, component, **render_options)

    def date_component(self, value: object, *, component: object = None, **options: Any) -> object:
        return self._components.render("date", self.date(value, **options), component)

    def time_component(self, value: object, *, component: object = None, **options: Any) -> object:
        return self._components.render("time", self.time(value, **options), component)

    def number_component(self, value: object, *, component: object = None, **options: Any) -> object:
        return self._components.render("number", self.number(value, **options), component)

    def relative_component(
        self, value: object, *, component: object = None, **options: Any
    ) -> object:
        return self._components.render("relative", self.relative(value, **options), component)

    # ------------------------------------------------------------------
    # Element discipline
    # ------------------------------------------------------------------

    def _element(
        self, operation: str, value: object, tag_name: object, attributes: Mapping[str, Any] | None
    ) -> object:
        render_options = {"attributes": attributes} if attributes is not None else {}
        return self._elements.render(operation, value, tag_name, **render_options)

    def message_element(
        self,
        descriptor: Descriptor,
        values: Values = None,
        *,
        tag_name: object = None,
        message_builder_factory: MessageBuilderFactory | None = None,
        html_element_builder_factory: ElementBuilderFactory | None = None,
        **render_options: Any,
    ) -> object:
        formatted = self.message(
            descriptor,
            values,
            message_builder_factory=(
                message_builder_factory or self._config.html_message_builder_factory
            ),
        )
        return self._elements.render(
            "message", formatted, tag_name, html_element_builder_factory, **render_options
        )

    def html_message_element(
        self,
        descriptor: Descriptor,
        values: Values = None,
        *,
        tag_name: object = None,
        html_element_builder_factory: ElementBuilderFactory | None = None,
        **render_options: Any,
    ) -> object:
        formatted = self.html_message(descriptor, values)
        return self._elements.render(
            "html_message", formatted, tag_name, html_element_builder_factory, **render_options
        )

    def date_element(
        self,
        value: object,
        *,
        tag_name: object = None,
        attributes: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> object:
        return self._element("date", self.date(value, **options), tag_name, attributes)

    def time_element(
        self,
        value: object,
        *,
        tag_name: object = None,
        attributes: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> object:
        return self._element("time", self.time(value, **options), tag_name, attributes)

    def number_element(
        self,
        value: object,
        *,
        tag_name: object = None,
        attributes: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> object:
        return self._element("number", self.number(value, **options), tag_name, attributes)

    def relative_element(
        self,
        value: object,
        *,
        tag_name: object = None,
        attributes: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> object:
        return self._element("relative", self.relative(value, **options), tag_name, attributes)
