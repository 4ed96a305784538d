"""Deprecation notices for formatter options.

Legacy options keep working until their removal version. Each use raises a
FutureWarning (visible by default, unlike DeprecationWarning) naming the
replacement, so application code configuring a formatter sees it.

Python 3.13+.
"""

import warnings

__all__ = ["warn_deprecated"]


def warn_deprecated(
    feature: str,
    *,
    removal_version: str,
    alternative: str | None = None,
    stacklevel: int = 2,
) -> None:
    """Warn that ``feature`` goes away in ``removal_version``.

    ``stacklevel`` counts frames from this function; pass enough to land on
    the line that configured the formatter.

    Example:
        >>> warn_deprecated("Option 'text_component'", removal_version="1.0.0",
        ...                 alternative="'default_component'")
        FutureWarning: Option 'text_component' is deprecated and will be removed
        in version 1.0.0. Use 'default_component' instead.
    """
    parts = [f"{feature} is deprecated and will be removed in version {removal_version}."]
    if alternative:
        parts.append(f"Use {alternative} instead.")
    warnings.warn(" ".join(parts), FutureWarning, stacklevel=stacklevel)
