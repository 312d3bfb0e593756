"""End-to-end orchestration: prompt -> intent -> (repair) -> resolved view.

`run` parses and resolves. `run_with_auto_fix` validates, suggests fixes,
applies them, re-validates and resolves, recording decisions on the
repaired nodes. Both compute the effective constraint set once and use it
for every step of the invocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from design_model.fixes import (
    RepairStrategy,
    SuggestedFix,
    flatten_patches,
    select_second_primary,
    suggest_fixes,
)
from design_model.intent import parse_intent
from design_model.model import DesignModel, get_base_model
from design_model.patch import PatchOutcome, apply_patches
from design_model.resolver import max_primary_allowed, resolve_with_model
from design_model.schema import (
    AppliedConstraint,
    Decision,
    Intent,
    PatchOperation,
    ResolvedView,
    Violation,
    to_wire,
)
from design_model.validator import effective_constraints, validate

logger = logging.getLogger(__name__)


@dataclass
class AutoFixResult:
    """Every intermediate product of an auto-fix run.

    Attributes:
        intent: Intent parsed from the prompt.
        initial_violations: Violations before repair.
        suggested_fixes: Per-constraint repair suggestions.
        patches: Flattened patch list that was applied.
        patch_outcomes: One outcome per applied patch.
        applied_constraints: Constraints that fired during repair.
        node_decisions: Decisions keyed by node id.
        final_intent: Intent after patches.
        final_violations: Violations after re-validation.
        resolved: Final resolved view (node-less when still invalid).
    """

    intent: Intent
    initial_violations: list[Violation]
    suggested_fixes: list[SuggestedFix]
    patches: list[PatchOperation]
    patch_outcomes: list[PatchOutcome]
    applied_constraints: list[AppliedConstraint]
    node_decisions: dict[str, list[Decision]] = field(default_factory=dict)
    final_intent: Intent | None = None
    final_violations: list[Violation] = field(default_factory=list)
    resolved: ResolvedView | None = None

    @property
    def valid(self) -> bool:
        return not self.final_violations

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary (camelCase keys)."""
        return {
            "intent": to_wire(self.intent),
            "initialViolations": [to_wire(v) for v in self.initial_violations],
            "suggestedFixes": [to_wire(p) for p in self.patches],
            "patchOutcomes": [o.to_dict() for o in self.patch_outcomes],
            "appliedConstraints": [to_wire(c) for c in self.applied_constraints],
            "nodeDecisions": {
                node_id: [to_wire(d) for d in decisions]
                for node_id, decisions in self.node_decisions.items()
            },
            "finalIntent": to_wire(self.final_intent) if self.final_intent else None,
            "finalViolations": [to_wire(v) for v in self.final_violations],
            "resolved": to_wire(self.resolved) if self.resolved else None,
        }


def run(
    prompt: str,
    view_id: str,
    enabled_constraints: Mapping[str, bool] | None = None,
    model: DesignModel | None = None,
) -> ResolvedView:
    """Parse a prompt and resolve it under the enabled constraints."""
    model = model or get_base_model()
    constraints = effective_constraints(model.constraints, enabled_constraints or {})
    intent = parse_intent(prompt, view_id)
    resolved = resolve_with_model(intent, model, constraints)
    logger.info(
        f"Resolved view '{view_id}': {len(resolved.nodes)} node(s), "
        f"{len(resolved.violations)} violation(s)"
    )
    return resolved


def run_with_auto_fix(
    prompt: str,
    view_id: str,
    enabled_constraints: Mapping[str, bool] | None = None,
    model: DesignModel | None = None,
    strategy: RepairStrategy = select_second_primary,
) -> AutoFixResult:
    """Parse, validate, repair, re-validate and resolve a prompt.

    Args:
        prompt: Free-form request.
        view_id: Identifier of the view.
        enabled_constraints: Constraint id -> on/off overlay.
        model: Design model; the process-wide base model when omitted.
        strategy: Target selection for primary-cardinality repairs.

    Returns:
        AutoFixResult carrying every intermediate product.
    """
    model = model or get_base_model()
    enabled = dict(enabled_constraints or {})
    constraints = effective_constraints(model.constraints, enabled)

    intent = parse_intent(prompt, view_id)
    initial = validate(intent, enabled, model, constraints=constraints)

    fixes: list[SuggestedFix] = []
    patches: list[PatchOperation] = []
    outcomes: list[PatchOutcome] = []
    applied: list[AppliedConstraint] = []
    decisions: dict[str, list[Decision]] = {}
    final_intent = intent

    if initial.violations:
        max_primary = max_primary_allowed(constraints)
        fixes = suggest_fixes(
            intent, initial.violations, enabled, strategy=strategy, max_primary=max_primary
        )
        patches = flatten_patches(fixes)
        if patches:
            application = apply_patches(intent, patches)
            final_intent = application.intent
            outcomes = application.outcomes
            for fix in fixes:
                applied.append(fix.applied_constraint)
                for node_decision in fix.decisions:
                    decisions.setdefault(node_decision.node_id, []).append(
                        node_decision.decision
                    )
            if application.noops:
                logger.warning(
                    f"{len(application.noops)} suggested patch(es) had no effect on "
                    f"view '{view_id}'"
                )

    final = validate(final_intent, enabled, model, constraints=constraints)
    resolved = resolve_with_model(final_intent, model, constraints)
    if final.valid:
        resolved = resolved.model_copy(
            update={
                "nodes": [
                    node.model_copy(update={"decisions": decisions[node.id]})
                    if node.id in decisions
                    else node
                    for node in resolved.nodes
                ],
                "applied_constraints": list(applied),
            }
        )

    logger.info(
        f"Auto-fix for view '{view_id}': {len(initial.violations)} initial, "
        f"{len(final.violations)} remaining violation(s), {len(patches)} patch(es)"
    )
    return AutoFixResult(
        intent=intent,
        initial_violations=initial.violations,
        suggested_fixes=fixes,
        patches=patches,
        patch_outcomes=outcomes,
        applied_constraints=applied,
        node_decisions=decisions,
        final_intent=final_intent,
        final_violations=final.violations,
        resolved=resolved,
    )


__all__ = ["AutoFixResult", "run", "run_with_auto_fix"]
