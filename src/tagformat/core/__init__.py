"""Core utilities shared by the runtime and the message compiler.

Exports:
    require_babel: Fail-fast check for the locale-formatting runtime
    is_babel_available: Non-raising availability check

Python 3.13+.
"""

from .babel_compat import is_babel_available, require_babel

__all__ = ["is_babel_available", "require_babel"]
