"""Read-only validation of an intent against enabled constraints.

The caller's enabled-constraints map (constraint id -> bool) is overlaid
onto the base constraint set to produce the effective set; the resolver
then runs against it and only its diagnostics are kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from design_model.model import (
    KNOWN_CONSTRAINTS,
    ConstraintSet,
    DesignModel,
    NumericConstraint,
    ToggleConstraint,
)
from design_model.resolver import resolve_with_model
from design_model.schema import AppliedConstraint, Intent, Violation, to_wire

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating an intent.

    Attributes:
        valid: True iff no violations were found.
        violations: Schema errors and constraint violations.
        applied_constraints: Constraints recorded as fired (none for plain validation).
    """

    valid: bool
    violations: list[Violation] = field(default_factory=list)
    applied_constraints: list[AppliedConstraint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "valid": self.valid,
            "violations": [to_wire(v) for v in self.violations],
            "appliedConstraints": [to_wire(c) for c in self.applied_constraints],
        }


def effective_constraints(
    base: ConstraintSet, enabled: Mapping[str, bool]
) -> ConstraintSet:
    """Overlay enabled flags onto a base constraint set.

    Toggles take the flag directly. Numeric rules take their canonical value
    when enabled and become unset when disabled. Ids absent from `enabled`
    keep their base value; unknown ids are ignored.

    Args:
        base: Constraint set loaded from the rules store. Not modified.
        enabled: Constraint id -> on/off.

    Returns:
        A new ConstraintSet.
    """
    updates: dict[str, ToggleConstraint | NumericConstraint] = {}
    for rule_id, flag in enabled.items():
        definition = KNOWN_CONSTRAINTS.get(rule_id)
        if definition is None:
            logger.debug(f"Ignoring unknown constraint id '{rule_id}'")
            continue
        if definition.kind == "toggle":
            updates[rule_id] = ToggleConstraint(enabled=bool(flag))
        else:
            value = definition.canonical_value if flag else None
            updates[rule_id] = NumericConstraint(value=value)

    if not updates:
        return base
    return base.with_overrides(updates)


def validate(
    intent: Intent,
    enabled_constraints: Mapping[str, bool],
    model: DesignModel,
    constraints: ConstraintSet | None = None,
) -> ValidationResult:
    """Validate an intent without producing styles.

    Args:
        intent: Intent to check. Not modified.
        enabled_constraints: Constraint id -> on/off overlay.
        model: Design model supplying tokens, contract and base constraints.
        constraints: Precomputed effective set; computed from
            `enabled_constraints` when omitted.

    Returns:
        ValidationResult with `valid` iff there are no violations.
    """
    if constraints is None:
        constraints = effective_constraints(model.constraints, enabled_constraints)

    resolved = resolve_with_model(intent, model, constraints)
    return ValidationResult(
        valid=not resolved.violations,
        violations=list(resolved.violations),
        applied_constraints=list(resolved.applied_constraints),
    )


__all__ = [
    "ValidationResult",
    "effective_constraints",
    "validate",
]
