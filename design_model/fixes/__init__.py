"""Fix suggestion micro API.

Example:
    >>> from design_model.fixes import flatten_patches, suggest_fixes
    >>> fixes = suggest_fixes(intent, result.violations, {"onlyOnePrimaryPerView": True})
    >>> [p.path for p in flatten_patches(fixes)]
    ['/components/1/props/variant']
"""

from .lib import (
    REPAIRS,
    STRATEGIES,
    NodeDecision,
    PrimaryRepair,
    RepairStrategy,
    SuggestedFix,
    flatten_patches,
    select_first_primary,
    select_last_primary,
    select_second_primary,
    suggest_fixes,
)

__all__ = [
    "suggest_fixes",
    "flatten_patches",
    "SuggestedFix",
    "NodeDecision",
    "PrimaryRepair",
    "REPAIRS",
    # Strategies
    "RepairStrategy",
    "STRATEGIES",
    "select_second_primary",
    "select_first_primary",
    "select_last_primary",
]
