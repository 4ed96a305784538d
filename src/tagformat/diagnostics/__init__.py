"""Error types reported or raised by the formatter.

Python 3.13+. Zero external dependencies.
"""

from .errors import (
    FormatterError,
    FormattingError,
    InvalidConfigurationError,
    MessageFormatError,
    MessageSyntaxError,
    MissingMessageError,
    MissingPluralCategoryError,
    RuntimeUnavailableError,
    UnsupportedLocaleError,
)

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
