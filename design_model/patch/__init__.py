"""Patch applier micro API.

Example:
    >>> from design_model.patch import apply_patches
    >>> result = apply_patches(intent, patches)
    >>> [outcome.status for outcome in result.outcomes]
    [<PatchStatus.APPLIED: 'applied'>]
"""

from .lib import PatchApplication, PatchOutcome, PatchStatus, apply_fixes, apply_patches

__all__ = [
    "apply_patches",
    "apply_fixes",
    "PatchApplication",
    "PatchOutcome",
    "PatchStatus",
]
