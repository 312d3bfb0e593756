"""Unit tests for fix suggestion."""

import pytest

from design_model.fixes import (
    STRATEGIES,
    flatten_patches,
    select_first_primary,
    select_last_primary,
    select_second_primary,
    suggest_fixes,
)
from design_model.intent import parse_intent
from design_model.schema import Violation, to_wire


def _violation(constraint_id, node_ids=("button-0", "button-1")):
    return Violation(
        code="multiplePrimaryButtons",
        message="too many primaries",
        constraint_id=constraint_id,
        node_ids=node_ids,
    )


class TestStrategies:
    """Tests for target selection."""

    @pytest.mark.unit
    def test_second_primary(self):
        """The second primary is chosen first; the first is always kept."""
        assert select_second_primary([0, 1], 1) == [1]
        assert select_second_primary([0, 2, 3], 1) == [2, 3]
        assert select_second_primary([0, 2, 3], 2) == [2]

    @pytest.mark.unit
    def test_first_and_last(self):
        """Alternative tie-breaks pick from either end."""
        assert select_first_primary([0, 2, 3], 1) == [0, 2]
        assert select_last_primary([0, 2, 3], 1) == [2, 3]
        assert select_last_primary([0, 2, 3], 2) == [3]

    @pytest.mark.unit
    def test_within_limit(self):
        """Nothing to downgrade when the limit holds."""
        for strategy in STRATEGIES.values():
            assert strategy([0], 1) == []


class TestSuggestFixes:
    """Tests for suggest_fixes()."""

    @pytest.mark.unit
    def test_single_patch_for_two_primaries(self):
        """Two primaries produce one replace patch on the second."""
        intent = parse_intent("Create two primary buttons", "demo")
        fixes = suggest_fixes(
            intent, [_violation("onlyOnePrimaryPerView")], {"onlyOnePrimaryPerView": True}
        )

        (fix,) = fixes
        assert fix.constraint_id == "onlyOnePrimaryPerView"
        assert [to_wire(p) for p in flatten_patches(fixes)] == [
            {"op": "replace", "path": "/components/1/props/variant", "value": "secondary"}
        ]

        (node_decision,) = fix.decisions
        assert node_decision.node_id == "button-1"
        assert node_decision.decision.type == "autoFix"
        assert node_decision.decision.reason == "onlyOnePrimaryPerView constraint violation"
        assert node_decision.decision.details == {
            "originalVariant": "primary",
            "newVariant": "secondary",
            "constraintId": "onlyOnePrimaryPerView",
        }

        applied = fix.applied_constraint
        assert applied.status == "triggered"
        assert applied.scope == "view"
        assert applied.targets == ["button-1"]
        assert applied.resolution == (
            "Downgraded button-1 to secondary to preserve a single primary action"
        )

    @pytest.mark.unit
    def test_max_primary_repair(self):
        """maxPrimaryButtonsPerView has its own messages."""
        intent = parse_intent("Create two primary buttons", "demo")
        (fix,) = suggest_fixes(intent, [_violation("maxPrimaryButtonsPerView")], {})
        assert fix.applied_constraint.message == "Maximum primary buttons per view exceeded"
        assert fix.applied_constraint.resolution.endswith(
            "to meet maximum primary button limit"
        )

    @pytest.mark.unit
    def test_explicitly_disabled_constraint_skipped(self):
        """A constraint switched off by the caller is not repaired."""
        intent = parse_intent("Create two primary buttons", "demo")
        fixes = suggest_fixes(
            intent, [_violation("onlyOnePrimaryPerView")], {"onlyOnePrimaryPerView": False}
        )
        assert fixes == []

    @pytest.mark.unit
    def test_unregistered_constraint(self):
        """Violations without a repair yield no fixes."""
        intent = parse_intent("Create two primary buttons", "demo")
        assert suggest_fixes(intent, [_violation("somethingElse")], {}) == []
        schema_error = Violation(code="missingLabel", message="label required")
        assert suggest_fixes(intent, [schema_error], {}) == []

    @pytest.mark.unit
    def test_alternate_strategy(self):
        """Strategies are swappable without touching the suggester."""
        intent = parse_intent("Create two primary buttons", "demo")
        (fix,) = suggest_fixes(
            intent,
            [_violation("onlyOnePrimaryPerView")],
            {"onlyOnePrimaryPerView": True},
            strategy=select_first_primary,
        )
        assert fix.patches[0].path == "/components/0/props/variant"

    @pytest.mark.unit
    def test_three_primaries_downgrades_excess(self):
        """All primaries beyond the first are downgraded."""
        intent = parse_intent(
            "Create a primary button and a primary button", "demo"
        ).model_copy(deep=True)
        intent.components.append(intent.components[0].model_copy(deep=True))
        (fix,) = suggest_fixes(intent, [_violation("onlyOnePrimaryPerView")], {})
        assert [p.path for p in fix.patches] == [
            "/components/1/props/variant",
            "/components/2/props/variant",
        ]
        assert fix.applied_constraint.targets == ["button-1", "button-2"]

    @pytest.mark.unit
    def test_intent_not_modified(self):
        """Suggesting does not apply anything."""
        intent = parse_intent("Create two primary buttons", "demo")
        before = intent.model_dump()
        suggest_fixes(intent, [_violation("onlyOnePrimaryPerView")], {})
        assert intent.model_dump() == before
