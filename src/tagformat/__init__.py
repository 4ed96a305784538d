"""tagformat - locale-aware formatting with cached formatters and tag rendering.

Formats messages, dates, times, numbers, relative times and plural categories
for one locale, reusing expensive Babel-backed formatter objects across calls,
and renders results as tags, render-callable output, or HTML elements.

Public API:
    Formatter - Single-locale formatter with component and element rendering
    create_formatter_type - Formatter type with caller-chosen operation names
    MessageDescriptor - Message id plus optional default message
    resolve_config - Options -> immutable Configuration (with locale fallback)
    has_locale_data - Locale data availability check

Exceptions:
    FormatterError - Base exception class
    InvalidConfigurationError - Unusable configuration (raised)
    MissingPluralCategoryError - Plural rules without "other" (raised)
    RuntimeUnavailableError - Babel not installed (raised)
    UnsupportedLocaleError, MissingMessageError, MessageFormatError,
    FormattingError - Reported through on_error

Submodules:
    tagformat.engine - Canonical operations as free functions
    tagformat.rendering - Rendering targets, TagBuilder, HtmlElementBuilder
    tagformat.messageformat - ICU-style message compiler and output builders
    tagformat.runtime - Babel-backed formatters and memoized constructors
    tagformat.state - Formatter factories and reference time
"""

from .aliasing import AliasedFormatter, create_formatter_type
from .config import EMPTY_MESSAGES, Configuration, resolve_config
from .diagnostics import (
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
from .engine import MessageDescriptor
from .formatter import Formatter
from .locale_data import has_locale_data
from .rendering import HtmlElementBuilder, TagBuilder
from .state import FormatFactories

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("tagformat")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "0.0.0+dev"

__all__ = [
    "EMPTY_MESSAGES",
    "AliasedFormatter",
    "Configuration",
    "FormatFactories",
    "Formatter",
    "FormatterError",
    "FormattingError",
    "HtmlElementBuilder",
    "InvalidConfigurationError",
    "MessageDescriptor",
    "MessageFormatError",
    "MessageSyntaxError",
    "MissingMessageError",
    "MissingPluralCategoryError",
    "RuntimeUnavailableError",
    "TagBuilder",
    "UnsupportedLocaleError",
    "__version__",
    "create_formatter_type",
    "has_locale_data",
    "resolve_config",
]
