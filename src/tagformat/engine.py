"""Base formatting engine.

The seven canonical operations as free functions over an explicit
``(Configuration, FormatterState)`` pair. ``bind_formatters`` closes a pair
over all of them, producing the read-only operation set a formatter delegates
to.

Error policy:
    - Per-call data errors (missing messages, malformed patterns, values that
      cannot be formatted) are reported through ``config.on_error`` and the
      call returns a best-effort fallback.
    - Configuration errors (MissingPluralCategoryError, invalid descriptors)
      propagate to the caller.

Python 3.13+.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from types import MappingProxyType
from typing import Any

from tagformat.config import Configuration
from tagformat.constants import PLURAL_OTHER
from tagformat.diagnostics import (
    FormatterError,
    FormattingError,
    InvalidConfigurationError,
    MessageFormatError,
    MissingMessageError,
)
from tagformat.locale_utils import same_locale
from tagformat.messageformat import MessageBuilderFactory
from tagformat.runtime.locale_formats import DATE_TIME_FORMAT_OPTIONS, NUMBER_FORMAT_OPTIONS
from tagformat.runtime.plural_rules import PLURAL_FORMAT_OPTIONS
from tagformat.runtime.relative import RELATIVE_FORMAT_OPTIONS, to_aware_datetime
from tagformat.state import FormatterState

__all__ = [
    "MessageDescriptor",
    "bind_formatters",
    "format_date",
    "format_html_message",
    "format_message",
    "format_number",
    "format_plural",
    "format_relative",
    "format_time",
]

_TIME_STYLE_KEYS = ("date_style", "time_style", "pattern")


@dataclass(frozen=True, slots=True)
class MessageDescriptor:
    """Identifies a message and optionally carries its source-language text.

    Attributes:
        id: Key into the configured messages (required)
        description: Context for translators; not used when formatting
        default_message: Pattern used when ``id`` has no registered message
    """

    id: str
    description: str | None = None
    default_message: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            msg = f"A message descriptor requires a non-empty string id, got {self.id!r}"
            raise InvalidConfigurationError(msg)

    @classmethod
    def coerce(cls, descriptor: "MessageDescriptor | Mapping[str, Any]") -> "MessageDescriptor":
        """Accept a descriptor or a mapping with the same keys.

        Keys other than ``id``, ``description`` and ``default_message`` are
        ignored, so extraction records can be passed through as they are.

        Raises:
            InvalidConfigurationError: If the id is missing or empty
        """
        if isinstance(descriptor, cls):
            return descriptor
        if isinstance(descriptor, Mapping):
            if "id" not in descriptor:
                msg = "A message descriptor requires an 'id'"
                raise InvalidConfigurationError(msg)
            return cls(
                id=descriptor["id"],
                description=descriptor.get("description"),
                default_message=descriptor.get("default_message"),
            )
        msg = f"Expected a MessageDescriptor or mapping, got {type(descriptor).__name__}"
        raise InvalidConfigurationError(msg)


def _report(config: Configuration, error: FormatterError, cause: BaseException | None = None) -> None:
    if cause is not None:
        error.__cause__ = cause
    config.on_error(error)


def _fallback(error: FormattingError, value: object) -> str:
    return error.fallback_value if error.fallback_value is not None else str(value)


def _resolve_options(
    config: Configuration,
    kind: str,
    options: Mapping[str, Any] | None,
    accepted: tuple[str, ...],
) -> dict[str, Any]:
    """Layer explicit options over the named preset and keep accepted names.

    ``format`` names a preset in ``config.formats[kind]``; an unknown name is
    reported and ignored.
    """
    options = options or {}
    preset: Mapping[str, Any] = {}
    name = options.get("format")
    if name is not None:
        presets = config.formats.get(kind) or {}
        if name in presets:
            preset = presets[name]
        else:
            _report(config, FormattingError(f"No {kind} format named: {name}"))
    merged = {**preset, **options}
    return {key: value for key, value in merged.items() if key in accepted}


# ============================================================================
# MESSAGES
# ============================================================================


def _format_message(
    config: Configuration,
    state: FormatterState,
    descriptor: MessageDescriptor,
    values: Mapping[str, Any] | None,
    builder_factory: MessageBuilderFactory,
) -> object:
    message_id = descriptor.id
    locale = config.locale
    default_message = descriptor.default_message
    message = config.messages.get(message_id)
    formatted: object = None

    if message:
        try:
            formatter = state.factories.message(
                message,
                locale,
                config.formats,
                builder_factory=builder_factory,
                require_other=config.require_other,
            )
            formatted = formatter.format(values)
        except (MessageFormatError, FormattingError) as e:
            suffix = ", using default message as fallback" if default_message else ""
            _report(
                config,
                MessageFormatError(
                    f'Error formatting message: "{message_id}" for locale: "{locale}"{suffix}: {e}'
                ),
                cause=e,
            )
    elif not default_message or not same_locale(locale, config.default_locale):
        # A default message in the default locale is the normal authoring
        # workflow: messages are only extracted for translation later.
        suffix = ", using default message as fallback" if default_message else ""
        _report(
            config,
            MissingMessageError(
                f'Missing message: "{message_id}" for locale: "{locale}"{suffix}',
                message_id=message_id,
                locale_code=locale,
            ),
        )

    if formatted is None and default_message:
        try:
            formatter = state.factories.message(
                default_message,
                config.default_locale,
                config.default_formats,
                builder_factory=builder_factory,
                require_other=config.require_other,
            )
            formatted = formatter.format(values)
        except (MessageFormatError, FormattingError) as e:
            _report(
                config,
                MessageFormatError(
                    f'Error formatting the default message for: "{message_id}": {e}'
                ),
                cause=e,
            )

    if formatted is None:
        source = "source" if message or default_message else "id"
        _report(
            config,
            MessageFormatError(f'Cannot format message: "{message_id}", using message {source} as fallback'),
        )
        return message or default_message or message_id

    return formatted


def format_message(
    config: Configuration,
    state: FormatterState,
    descriptor: MessageDescriptor | Mapping[str, Any],
    values: Mapping[str, Any] | None = None,
    builder_factory: MessageBuilderFactory | None = None,
) -> object:
    """Format a message by id, falling back to its default message.

    Returns the first available of: the formatted pattern, the formatted
    default message, the raw pattern, the raw default message, the id.

    Raises:
        InvalidConfigurationError: If the descriptor has no id
    """
    return _format_message(
        config,
        state,
        MessageDescriptor.coerce(descriptor),
        values,
        builder_factory or config.text_message_builder_factory,
    )


def format_html_message(
    config: Configuration,
    state: FormatterState,
    descriptor: MessageDescriptor | Mapping[str, Any],
    values: Mapping[str, Any] | None = None,
) -> object:
    """Format a message whose pattern is trusted markup.

    Interpolated values are HTML-escaped by the configured HTML builder;
    pattern text is kept as written.
    """
    return _format_message(
        config,
        state,
        MessageDescriptor.coerce(descriptor),
        values,
        config.html_message_builder_factory,
    )


# ============================================================================
# DATES, TIMES, NUMBERS
# ============================================================================


def format_date(
    config: Configuration,
    state: FormatterState,
    value: object,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Format a date-like value (``date_style`` defaults to "medium")."""
    resolved = _resolve_options(config, "date", options, DATE_TIME_FORMAT_OPTIONS)
    try:
        return state.factories.date_time(config.locale, **resolved).format(value)
    except FormattingError as e:
        _report(config, e)
        return _fallback(e, value)


def format_time(
    config: Configuration,
    state: FormatterState,
    value: object,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Format the time of a datetime (``time_style`` defaults to "short")."""
    resolved = _resolve_options(config, "time", options, DATE_TIME_FORMAT_OPTIONS)
    if not any(resolved.get(key) for key in _TIME_STYLE_KEYS):
        resolved["time_style"] = "short"
    try:
        return state.factories.date_time(config.locale, **resolved).format(value)
    except FormattingError as e:
        _report(config, e)
        return _fallback(e, value)


def format_number(
    config: Configuration,
    state: FormatterState,
    value: object,
    options: Mapping[str, Any] | None = None,
) -> str:
    resolved = _resolve_options(config, "number", options, NUMBER_FORMAT_OPTIONS)
    try:
        return state.factories.number(config.locale, **resolved).format(value)
    except FormattingError as e:
        _report(config, e)
        return _fallback(e, value)


# ============================================================================
# RELATIVE TIME, PLURALS
# ============================================================================


def _relative_fallback(value: object) -> str:
    try:
        return to_aware_datetime(value).isoformat()
    except FormattingError:
        return str(value)


def format_relative(
    config: Configuration,
    state: FormatterState,
    value: object,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Format the distance between ``value`` and the reference time.

    The reference is ``options["now"]`` when given, else the formatter's
    stable ``now``, so every call in one render pass agrees on it.
    """
    options = options or {}
    now: datetime | int | float | None = options.get("now")
    if now is None:
        try:
            reference: object = state.now()
        except FormatterError as e:
            _report(config, e)
            return _relative_fallback(value)
    else:
        reference = now
    resolved = _resolve_options(config, "relative", options, RELATIVE_FORMAT_OPTIONS)
    try:
        return state.factories.relative(config.locale, **resolved).format(value, reference)
    except FormattingError as e:
        _report(config, e)
        return _relative_fallback(value)


def format_plural(
    config: Configuration,
    state: FormatterState,
    value: object,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Select the plural category of a number.

    ``style`` is "cardinal" (default) or "ordinal"; ``require_other``
    defaults to the configured value.

    Raises:
        MissingPluralCategoryError: If "other" is required but the locale's
            rule set does not define it
    """
    options = options or {}
    require_other = options.get("require_other", config.require_other)
    resolved = {key: v for key, v in options.items() if key in PLURAL_FORMAT_OPTIONS}
    try:
        formatter = state.factories.plural(config.locale, require_other=require_other, **resolved)
        return formatter.format(value)
    except FormattingError as e:
        _report(config, e)
        return e.fallback_value or PLURAL_OTHER


# ============================================================================
# BINDING
# ============================================================================

_OPERATIONS: Mapping[str, Callable[..., object]] = MappingProxyType(
    {
        "format_message": format_message,
        "format_html_message": format_html_message,
        "format_date": format_date,
        "format_time": format_time,
        "format_number": format_number,
        "format_relative": format_relative,
        "format_plural": format_plural,
    }
)


def bind_formatters(
    config: Configuration, state: FormatterState
) -> Mapping[str, Callable[..., object]]:
    """Close ``(config, state)`` over every canonical operation.

    Example:
        >>> formatters = bind_formatters(resolve_config("en"), state)
        >>> formatters["format_number"](0.25, {"style": "percent"})
        '25%'
    """
    return MappingProxyType(
        {name: partial(operation, config, state) for name, operation in _OPERATIONS.items()}
    )
