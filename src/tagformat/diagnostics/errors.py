"""Formatter exception hierarchy.

Construction-time and configuration-time errors are raised. Per-call data
errors are built as exception objects and handed to the configured
``on_error`` callback instead, so a single bad value never aborts a render.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "FormatterError",
    "FormattingError",
    "InvalidConfigurationError",
    "MessageFormatError",
    "MessageSyntaxError",
    "MissingMessageError",
    "MissingPluralCategoryError",
    "RuntimeUnavailableError",
    "UnsupportedLocaleError",
]


class FormatterError(Exception):
    """Base exception for all formatter errors."""


class InvalidConfigurationError(FormatterError, ValueError):
    """Configuration that cannot be used.

    Raised at construction or resolution time (fail fast), e.g. a rendering
    target that is neither a string nor a callable.
    """


class MissingPluralCategoryError(InvalidConfigurationError):
    """Plural rule set lacks the ``other`` category while it is required.

    Attributes:
        locale_code: Locale of the rule set
        categories: Categories the rule set does define
    """

    def __init__(self, message: str, *, locale_code: str, categories: frozenset[str]) -> None:
        super().__init__(message)
        self.locale_code = locale_code
        self.categories = categories


class RuntimeUnavailableError(FormatterError, ImportError):
    """Locale-formatting primitives (Babel) are not available.

    Attributes:
        feature: Name of the feature that required them
    """

    def __init__(self, feature: str) -> None:
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install tagformat"
        )
        super().__init__(message)
        self.feature = feature


class UnsupportedLocaleError(FormatterError):
    """Requested locale has no registered locale data.

    Reported through ``on_error``; the formatter falls back to the default
    locale.

    Attributes:
        locale_code: The requested locale
        fallback_locale: The locale used instead
    """

    def __init__(self, message: str, *, locale_code: str, fallback_locale: str) -> None:
        super().__init__(message)
        self.locale_code = locale_code
        self.fallback_locale = fallback_locale


class MissingMessageError(FormatterError):
    """No pattern is registered for a message id.

    Attributes:
        message_id: The id that was looked up
        locale_code: Locale of the lookup
    """

    def __init__(self, message: str, *, message_id: str, locale_code: str) -> None:
        super().__init__(message)
        self.message_id = message_id
        self.locale_code = locale_code


class MessageFormatError(FormatterError):
    """A message pattern could not be compiled or interpolated."""


class MessageSyntaxError(MessageFormatError):
    """Malformed message pattern.

    Attributes:
        position: Offset in the pattern where parsing failed
    """

    def __init__(self, message: str, *, position: int) -> None:
        super().__init__(f"{message} (at position {position})")
        self.position = position


class FormattingError(FormatterError):
    """Locale-aware formatting of a date, number or relative time failed.

    Attributes:
        fallback_value: Suggested output when formatting fails, or None to
            let the caller pick one
    """

    def __init__(self, message: str, fallback_value: str | None = None) -> None:
        super().__init__(message)
        self.fallback_value = fallback_value
