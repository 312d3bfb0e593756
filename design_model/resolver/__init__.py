"""Resolver micro API.

Turns an Intent into a ResolvedView: styled nodes with a per-style
provenance trace, or diagnostics when schema or constraint checks fail.

Example:
    >>> from design_model.intent import parse_intent
    >>> from design_model.model import get_base_model
    >>> from design_model.resolver import resolve_with_model
    >>> view = resolve_with_model(parse_intent("a primary button", "demo"), get_base_model())
    >>> view.nodes[0].styles["backgroundColor"]
    '#0284c7'
"""

from .lib import (
    DISABLED_OPACITY,
    GHOST_NO_BACKGROUND,
    MAX_PRIMARY,
    ONLY_ONE_PRIMARY,
    PX_PER_REM,
    SECONDARY_BORDER,
    SECONDARY_SURFACE,
    format_number,
    max_primary_allowed,
    primary_limit,
    rem_to_px,
    resolve,
    resolve_with_model,
)

__all__ = [
    "resolve",
    "resolve_with_model",
    "primary_limit",
    "max_primary_allowed",
    "rem_to_px",
    "format_number",
    "PX_PER_REM",
    "SECONDARY_BORDER",
    # Constraint ids consulted during resolution
    "ONLY_ONE_PRIMARY",
    "MAX_PRIMARY",
    "GHOST_NO_BACKGROUND",
    "SECONDARY_SURFACE",
    "DISABLED_OPACITY",
]
