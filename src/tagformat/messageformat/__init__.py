"""Message compiler.

Parses ICU-style message patterns and interpolates values into pluggable
output builders.

Python 3.13+.
"""

from .builders import (
    FragmentBuilder,
    HtmlStringBuilder,
    MessageBuilder,
    MessageBuilderFactory,
    StringBuilder,
    fragment_builder_factory,
    html_string_builder_factory,
    string_builder_factory,
)
from .compiler import DEFAULT_MESSAGE_FORMATS, MessageFormat
from .parser import parse_message

__all__ = [
    "DEFAULT_MESSAGE_FORMATS",
    "FragmentBuilder",
    "HtmlStringBuilder",
    "MessageBuilder",
    "MessageBuilderFactory",
    "MessageFormat",
    "StringBuilder",
    "fragment_builder_factory",
    "html_string_builder_factory",
    "parse_message",
    "string_builder_factory",
]
