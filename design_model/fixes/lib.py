"""Constraint-driven repair suggestions.

For each violated constraint with a registered repair, a strategy picks
which primary buttons to downgrade and the suggester emits `replace`
patches together with per-node decisions and an applied-constraint
record. Nothing is applied here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from design_model.schema import (
    AppliedConstraint,
    ConstraintScope,
    ConstraintStatus,
    Decision,
    DecisionType,
    Intent,
    PatchOp,
    PatchOperation,
    Variant,
    Violation,
    WireModel,
    node_id_for,
)

logger = logging.getLogger(__name__)

# (primary component indices in document order, allowed maximum) -> indices to downgrade
RepairStrategy = Callable[[Sequence[int], int], list[int]]


# =============================================================================
# Strategies
# =============================================================================


def _excess(primaries: Sequence[int], limit: int) -> int:
    return max(len(primaries) - max(limit, 0), 0)


def select_second_primary(primaries: Sequence[int], limit: int) -> list[int]:
    """Downgrade the second primary first, then later ones, keeping the first."""
    ordered = list(primaries[1:]) + list(primaries[:1])
    return sorted(ordered[: _excess(primaries, limit)])


def select_first_primary(primaries: Sequence[int], limit: int) -> list[int]:
    """Downgrade from the front of the view."""
    return list(primaries[: _excess(primaries, limit)])


def select_last_primary(primaries: Sequence[int], limit: int) -> list[int]:
    """Downgrade from the end of the view."""
    count = _excess(primaries, limit)
    return list(primaries[len(primaries) - count :]) if count else []


STRATEGIES: dict[str, RepairStrategy] = {
    "second": select_second_primary,
    "first": select_first_primary,
    "last": select_last_primary,
}


# =============================================================================
# Results
# =============================================================================


class NodeDecision(WireModel):
    """A decision bound to the node it concerns."""

    node_id: str
    decision: Decision


class SuggestedFix(WireModel):
    """Patches and records produced for one violated constraint."""

    constraint_id: str
    patches: list[PatchOperation]
    decisions: list[NodeDecision]
    applied_constraint: AppliedConstraint


@dataclass(frozen=True)
class PrimaryRepair:
    """Registered repair for a primary-cardinality constraint."""

    constraint_id: str
    message: str
    resolution: str

    def build(self, targets: Sequence[int]) -> SuggestedFix:
        node_ids = [node_id_for(index) for index in targets]
        patches = [
            PatchOperation(
                op=PatchOp.REPLACE,
                path=f"/components/{index}/props/variant",
                value=Variant.SECONDARY.value,
            )
            for index in targets
        ]
        decision = Decision(
            type=DecisionType.AUTO_FIX,
            reason=f"{self.constraint_id} constraint violation",
            action="downgrade to secondary",
            details={
                "originalVariant": Variant.PRIMARY.value,
                "newVariant": Variant.SECONDARY.value,
                "constraintId": self.constraint_id,
            },
        )
        resolution = "; ".join(
            f"Downgraded {node_id} to secondary {self.resolution}" for node_id in node_ids
        )
        return SuggestedFix(
            constraint_id=self.constraint_id,
            patches=patches,
            decisions=[
                NodeDecision(node_id=node_id, decision=decision) for node_id in node_ids
            ],
            applied_constraint=AppliedConstraint(
                id=self.constraint_id,
                scope=ConstraintScope.VIEW,
                status=ConstraintStatus.TRIGGERED,
                message=self.message,
                targets=node_ids,
                resolution=resolution,
                patch=patches,
            ),
        )


REPAIRS: dict[str, PrimaryRepair] = {
    "onlyOnePrimaryPerView": PrimaryRepair(
        constraint_id="onlyOnePrimaryPerView",
        message="Only one primary button per view",
        resolution="to preserve a single primary action",
    ),
    "maxPrimaryButtonsPerView": PrimaryRepair(
        constraint_id="maxPrimaryButtonsPerView",
        message="Maximum primary buttons per view exceeded",
        resolution="to meet maximum primary button limit",
    ),
}


# =============================================================================
# Suggester
# =============================================================================


def suggest_fixes(
    intent: Intent,
    violations: Sequence[Violation],
    enabled_constraints: Mapping[str, bool],
    strategy: RepairStrategy = select_second_primary,
    max_primary: int = 1,
) -> list[SuggestedFix]:
    """Suggest repairs for the violated constraints.

    A repair fires when its constraint id appears among the violations and
    the caller has not explicitly switched the constraint off.

    Args:
        intent: Intent the violations were computed for. Not modified.
        violations: Current violations.
        enabled_constraints: Constraint id -> on/off.
        strategy: Picks which primary components to downgrade.
        max_primary: Allowed number of primaries for maxPrimaryButtonsPerView.

    Returns:
        One SuggestedFix per repaired constraint, in registry order.
    """
    violated = {v.constraint_id for v in violations if v.constraint_id}
    primaries = [
        index
        for index, component in enumerate(intent.components)
        if component.props.variant == Variant.PRIMARY.value
    ]

    for constraint_id in sorted(violated - REPAIRS.keys()):
        logger.debug(f"No repair registered for constraint '{constraint_id}'")

    fixes: list[SuggestedFix] = []
    for constraint_id, repair in REPAIRS.items():
        if constraint_id not in violated:
            continue
        if enabled_constraints.get(constraint_id) is False:
            logger.debug(f"Skipping repair for disabled constraint '{constraint_id}'")
            continue

        limit = 1 if constraint_id == "onlyOnePrimaryPerView" else max_primary
        targets = strategy(primaries, limit)
        if not targets:
            logger.debug(f"Nothing to repair for '{constraint_id}'")
            continue

        fixes.append(repair.build(targets))

    return fixes


def flatten_patches(fixes: Sequence[SuggestedFix]) -> list[PatchOperation]:
    """Concatenate per-constraint patch lists in order."""
    return [patch for fix in fixes for patch in fix.patches]


__all__ = [
    "NodeDecision",
    "PrimaryRepair",
    "REPAIRS",
    "RepairStrategy",
    "STRATEGIES",
    "SuggestedFix",
    "flatten_patches",
    "select_first_primary",
    "select_last_primary",
    "select_second_primary",
    "suggest_fixes",
]
