"""Pipeline micro API.

Example:
    >>> from design_model.pipeline import run_with_auto_fix
    >>> result = run_with_auto_fix(
    ...     "Create two primary buttons", "checkout", {"onlyOnePrimaryPerView": True}
    ... )
    >>> [n.props.variant for n in result.resolved.nodes]
    ['primary', 'secondary']
"""

from .lib import AutoFixResult, run, run_with_auto_fix

__all__ = ["AutoFixResult", "run", "run_with_auto_fix"]
