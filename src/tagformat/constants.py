"""Shared constants for tagformat.

Constants are grouped by domain:
- Defaults: locale and rendering defaults
- Build mode: environment switch for production behavior
- Operations: canonical operation names and the built-in short-name table
- Plural categories: CLDR category tokens

Python 3.13+. Zero external dependencies.
"""

from types import MappingProxyType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Defaults
    "DEFAULT_LOCALE",
    "DEFAULT_COMPONENT",
    "DEFAULT_HTML_ELEMENT",
    # Build mode
    "ENVIRONMENT_VARIABLE",
    "PRODUCTION",
    # Operations
    "BASE_OPERATIONS",
    "RENDERABLE_OPERATIONS",
    "COMPONENT_OPERATIONS",
    "ELEMENT_OPERATIONS",
    "CANONICAL_OPERATIONS",
    "BOUND_FORMATTER_NAMES",
    "SHORT_NAMES",
    # Plural categories
    "PLURAL_CATEGORIES",
    "PLURAL_OTHER",
]

# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_LOCALE: str = "en"

# Tag used by both rendering disciplines when nothing else is configured.
DEFAULT_COMPONENT: str = "span"
DEFAULT_HTML_ELEMENT: str = "span"

# ============================================================================
# BUILD MODE
# ============================================================================

# Set to "production" to report unsupported locales through on_error and to
# silence deprecation warnings.
ENVIRONMENT_VARIABLE: str = "TAGFORMAT_ENV"
PRODUCTION: str = "production"

# ============================================================================
# OPERATIONS
# ============================================================================

BASE_OPERATIONS: tuple[str, ...] = (
    "message",
    "html_message",
    "date",
    "time",
    "number",
    "relative",
    "plural",
)

# plural returns a category token, never markup
RENDERABLE_OPERATIONS: tuple[str, ...] = tuple(op for op in BASE_OPERATIONS if op != "plural")

COMPONENT_OPERATIONS: tuple[str, ...] = tuple(f"{op}_component" for op in RENDERABLE_OPERATIONS)
ELEMENT_OPERATIONS: tuple[str, ...] = tuple(f"{op}_element" for op in RENDERABLE_OPERATIONS)

CANONICAL_OPERATIONS: tuple[str, ...] = (
    BASE_OPERATIONS + COMPONENT_OPERATIONS + ELEMENT_OPERATIONS
)

BOUND_FORMATTER_NAMES: tuple[str, ...] = tuple(f"format_{op}" for op in BASE_OPERATIONS)

SHORT_NAMES: MappingProxyType[str, str] = MappingProxyType(
    {
        "message": "m",
        "html_message": "h",
        "date": "d",
        "time": "t",
        "number": "n",
        "relative": "r",
        "plural": "p",
        "message_component": "mc",
        "html_message_component": "hc",
        "date_component": "dc",
        "time_component": "tc",
        "number_component": "nc",
        "relative_component": "rc",
        "message_element": "me",
        "html_message_element": "he",
        "date_element": "de",
        "time_element": "te",
        "number_element": "ne",
        "relative_element": "re",
    }
)

# ============================================================================
# PLURAL CATEGORIES
# ============================================================================

PLURAL_CATEGORIES: frozenset[str] = frozenset({"zero", "one", "two", "few", "many", "other"})
PLURAL_OTHER: str = "other"
