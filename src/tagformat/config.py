"""Formatter configuration and its resolution.

Merges caller options over defaults, resolves the effective locale (falling
back to the default locale when no locale data is available) and produces an
immutable Configuration.

Architecture:
    - Configuration: frozen dataclass, never mutated after construction
    - resolve_config(): the only way options become a Configuration
    - EMPTY_MESSAGES: one shared read-only mapping used whenever no messages
      apply, so "no messages" keeps a stable identity across resolutions
    - Build mode from the TAGFORMAT_ENV environment variable

Python 3.13+.
"""

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from datetime import datetime
from types import MappingProxyType
from typing import Any, TypedDict

from tagformat.constants import (
    DEFAULT_COMPONENT,
    DEFAULT_HTML_ELEMENT,
    DEFAULT_LOCALE,
    ENVIRONMENT_VARIABLE,
    PRODUCTION,
)
from tagformat.deprecation import warn_deprecated
from tagformat.diagnostics import (
    FormatterError,
    InvalidConfigurationError,
    UnsupportedLocaleError,
)
from tagformat.locale_data import has_locale_data as _has_locale_data
from tagformat.messageformat import (
    MessageBuilderFactory,
    html_string_builder_factory,
    string_builder_factory,
)
from tagformat.rendering import ElementBuilderFactory, RenderTarget, html_element_builder_factory

__all__ = [
    "DEFAULT_OPTIONS",
    "EMPTY_MESSAGES",
    "OPTION_NAMES",
    "Configuration",
    "FormatterOptions",
    "default_error_handler",
    "is_production",
    "resolve_config",
]

logger = logging.getLogger(__name__)

type Formats = Mapping[str, Mapping[str, Mapping[str, Any]]]
type InitialNow = datetime | int | float | Callable[[], datetime | int | float] | None
type ErrorHandler = Callable[[FormatterError], None]

# Shared "no messages" value. Never copy it: consumers compare it by identity.
EMPTY_MESSAGES: Mapping[str, str] = MappingProxyType({})

_EMPTY_FORMATS: Formats = MappingProxyType({})
_EMPTY_TARGETS: Mapping[str, RenderTarget] = MappingProxyType({})

# Deprecated option -> replacement
_DEPRECATED_OPTIONS: Mapping[str, str] = MappingProxyType(
    {"text_component": "default_component", "text_renderer": "default_component"}
)
_DEPRECATION_REMOVAL_VERSION = "1.0.0"


def is_production() -> bool:
    """Check whether the process runs in production build mode.

    Production mode reports unsupported locales through ``on_error`` and
    silences deprecation warnings. Read on every call so tests and
    long-running processes observe environment changes.
    """
    return os.environ.get(ENVIRONMENT_VARIABLE, "").strip().lower() == PRODUCTION


def default_error_handler(error: FormatterError) -> None:
    """Log a recoverable formatting error."""
    logger.error("%s", error)


@dataclass(frozen=True, slots=True)
class Configuration:
    """Effective formatter configuration.

    Immutable for the lifetime of the formatter that owns it. Nested mappings
    are stored by reference so identities survive resolution; producing a new
    locale or option set always yields a new Configuration.

    Attributes:
        locale: Effective locale after fallback
        messages: Message id -> pattern (EMPTY_MESSAGES when none apply)
        formats: Named presets by kind ("date", "time", "number", "relative")
        default_locale: Locale used when the requested one has no data
        default_formats: Presets used when no formats are given
        initial_now: Fixed reference time, epoch seconds, or a provider
        require_other: Require "other" in plural rules and plural/select arguments
        text_message_builder_factory: Builder for message()
        component_message_builder_factory: Builder for message_component()
        html_message_builder_factory: Builder for html_message()
        html_element_builder_factory: Element builder for the element discipline
        default_component: Global target of the component discipline
        components: Per-operation targets of the component discipline
        default_html_element: Global target of the element discipline
        html_elements: Per-operation targets of the element discipline
        on_error: Callback receiving recoverable errors
        text_component: Deprecated, accepted without effect
        text_renderer: Deprecated, accepted without effect
    """

    locale: str
    messages: Mapping[str, str]
    formats: Formats
    default_locale: str
    default_formats: Formats
    initial_now: InitialNow
    require_other: bool
    text_message_builder_factory: MessageBuilderFactory
    component_message_builder_factory: MessageBuilderFactory
    html_message_builder_factory: MessageBuilderFactory
    html_element_builder_factory: ElementBuilderFactory
    default_component: RenderTarget
    components: Mapping[str, RenderTarget]
    default_html_element: RenderTarget
    html_elements: Mapping[str, RenderTarget]
    on_error: ErrorHandler
    text_component: object = None
    text_renderer: object = None


class FormatterOptions(TypedDict, total=False):
    """Keyword options accepted by Formatter and resolve_config."""

    messages: Mapping[str, str] | None
    formats: Formats | None
    default_locale: str
    default_formats: Formats
    initial_now: InitialNow
    require_other: bool
    text_message_builder_factory: MessageBuilderFactory
    component_message_builder_factory: MessageBuilderFactory
    html_message_builder_factory: MessageBuilderFactory
    html_element_builder_factory: ElementBuilderFactory
    default_component: RenderTarget
    components: Mapping[str, RenderTarget]
    default_html_element: RenderTarget
    html_elements: Mapping[str, RenderTarget]
    on_error: ErrorHandler
    text_component: object
    text_renderer: object


OPTION_NAMES: tuple[str, ...] = tuple(f.name for f in fields(Configuration) if f.name != "locale")

DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "messages": None,
        "formats": None,
        "default_locale": DEFAULT_LOCALE,
        "default_formats": _EMPTY_FORMATS,
        "initial_now": None,
        "require_other": True,
        "text_message_builder_factory": string_builder_factory,
        "component_message_builder_factory": string_builder_factory,
        "html_message_builder_factory": html_string_builder_factory,
        "html_element_builder_factory": html_element_builder_factory,
        "default_component": DEFAULT_COMPONENT,
        "components": _EMPTY_TARGETS,
        "default_html_element": DEFAULT_HTML_ELEMENT,
        "html_elements": _EMPTY_TARGETS,
        "on_error": default_error_handler,
        "text_component": None,
        "text_renderer": None,
    }
)


def _check_deprecated_options(merged: Mapping[str, Any], options: Mapping[str, Any]) -> None:
    """Warn about deprecated options and reject ambiguous combinations.

    A deprecated option passed together with ``default_component`` has no
    defined precedence, so the combination is rejected whatever its values.
    """
    used = [name for name in _DEPRECATED_OPTIONS if merged[name] is not None]
    if not used:
        return

    if "default_component" in options:
        msg = (
            f"Option(s) {', '.join(repr(name) for name in used)} cannot be combined "
            "with 'default_component'; use 'default_component' only"
        )
        raise InvalidConfigurationError(msg)

    if is_production():
        return
    for name in used:
        warn_deprecated(
            f"Option '{name}'",
            removal_version=_DEPRECATION_REMOVAL_VERSION,
            alternative=f"'{_DEPRECATED_OPTIONS[name]}'",
            stacklevel=5,
        )


def resolve_config(
    locale: str,
    options: Mapping[str, Any] | None = None,
    defaults: Mapping[str, Any] = DEFAULT_OPTIONS,
    *,
    has_locale_data: Callable[[str], bool] = _has_locale_data,
) -> Configuration:
    """Merge options over defaults and resolve the effective locale.

    The merge is one level deep: ``messages`` and ``formats`` replace the
    defaults wholesale.

    Args:
        locale: Requested locale
        options: Caller options (see FormatterOptions)
        defaults: Defaults layered over DEFAULT_OPTIONS
        has_locale_data: Locale data registry predicate

    Returns:
        New Configuration

    Raises:
        TypeError: If an option name is unknown
        InvalidConfigurationError: If on_error is not callable or deprecated
            options conflict with default_component

    Examples:
        >>> config = resolve_config("xx-unknown", {"messages": {"hi": "Hi"}})
        >>> config.locale, config.messages is EMPTY_MESSAGES
        ('en', True)
    """
    options = dict(options or {})
    unknown = set(options).difference(OPTION_NAMES)
    if unknown:
        msg = f"Unknown formatter option(s): {', '.join(sorted(unknown))}"
        raise TypeError(msg)

    base = {**DEFAULT_OPTIONS, **defaults}
    merged = {**base, **options}
    if not callable(merged["on_error"]):
        msg = "Option 'on_error' must be callable"
        raise InvalidConfigurationError(msg)
    _check_deprecated_options(merged, options)

    default_locale = merged["default_locale"]
    if not has_locale_data(locale):
        if is_production():
            merged["on_error"](
                UnsupportedLocaleError(
                    f'Missing locale data for locale: "{locale}". '
                    f'Using default locale: "{default_locale}" as fallback.',
                    locale_code=locale,
                    fallback_locale=default_locale,
                )
            )
        else:
            logger.debug("No locale data for %r; falling back to %r", locale, default_locale)

        # Messages are replaced by the shared empty mapping: every message
        # call is then expected to carry its own default_message.
        merged.update(
            locale=default_locale,
            formats=merged["default_formats"],
            messages=EMPTY_MESSAGES,
        )
        return Configuration(**merged)

    merged.update(
        locale=locale or default_locale,
        formats=merged["formats"] if merged["formats"] is not None else merged["default_formats"],
        messages=merged["messages"] if merged["messages"] is not None else EMPTY_MESSAGES,
    )
    return Configuration(**merged)
