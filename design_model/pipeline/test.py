"""Unit tests for pipeline orchestration."""

import pytest

from design_model.fixes import select_last_primary
from design_model.model import Contract, DesignModel, load_base_model
from design_model.pipeline import run, run_with_auto_fix


@pytest.fixture
def model():
    return load_base_model()


class TestRun:
    """Tests for run()."""

    @pytest.mark.unit
    def test_single_primary(self, model):
        """A single primary button resolves to one node."""
        view = run('Create a primary button with label "Continue"', "demo", {}, model)
        assert view.view_id == "demo"
        assert len(view.nodes) == 1
        assert view.violations == []

    @pytest.mark.unit
    def test_blocked_by_constraint(self, model):
        """Enabled constraints flow into resolution."""
        view = run("Create two primary buttons", "demo", {"onlyOnePrimaryPerView": True}, model)
        assert view.nodes == []
        assert view.enabled_constraints["onlyOnePrimaryPerView"] is True

    @pytest.mark.unit
    def test_default_model(self):
        """The base model is used when none is passed."""
        assert run("Create a button", "demo").nodes


class TestRunWithAutoFix:
    """Tests for run_with_auto_fix()."""

    @pytest.mark.unit
    def test_repairs_two_primaries(self, model):
        """The second primary is downgraded and the view resolves."""
        result = run_with_auto_fix(
            "Create two primary buttons", "demo", {"onlyOnePrimaryPerView": True}, model
        )

        assert [v.constraint_id for v in result.initial_violations] == [
            "onlyOnePrimaryPerView"
        ]
        assert [p.path for p in result.patches] == ["/components/1/props/variant"]
        assert result.final_violations == []
        assert result.valid

        first, second = result.resolved.nodes
        assert second.props.variant == "secondary"
        assert first.decisions is None
        (decision,) = second.decisions
        assert decision.type == "autoFix"
        assert [c.id for c in result.resolved.applied_constraints] == [
            "onlyOnePrimaryPerView"
        ]

    @pytest.mark.unit
    def test_original_intent_kept(self, model):
        """The parsed intent is reported unpatched."""
        result = run_with_auto_fix(
            "Create two primary buttons", "demo", {"onlyOnePrimaryPerView": True}, model
        )
        assert [c.props.variant for c in result.intent.components] == ["primary", "primary"]
        assert [c.props.variant for c in result.final_intent.components] == [
            "primary",
            "secondary",
        ]

    @pytest.mark.unit
    def test_no_violations_no_patches(self, model):
        """Valid prompts pass straight through."""
        result = run_with_auto_fix("Create a ghost button", "demo", {}, model)
        assert result.initial_violations == []
        assert result.patches == []
        assert result.suggested_fixes == []
        assert len(result.resolved.nodes) == 1

    @pytest.mark.unit
    def test_unrepairable_violation(self, model):
        """Schema violations have no repair and stay blocking."""
        narrow = DesignModel(
            tokens=model.tokens,
            contract=Contract.model_validate(
                {"component": "Button", "props": {"size": {"enum": ["md"]}}}
            ),
            constraints=model.constraints,
        )
        result = run_with_auto_fix("Create a small button", "demo", {}, narrow)
        assert result.initial_violations[0].code == "invalidSize"
        assert result.patches == []
        assert result.resolved.nodes == []
        assert not result.valid

    @pytest.mark.unit
    def test_strategy_passed_through(self, model):
        """A custom strategy changes which node is repaired."""
        result = run_with_auto_fix(
            "Create two primary buttons",
            "demo",
            {"onlyOnePrimaryPerView": True},
            model,
            strategy=select_last_primary,
        )
        assert result.node_decisions.keys() == {"button-1"}

    @pytest.mark.unit
    def test_zero_primary_limit_repaired(self, model):
        """A maximum of zero primaries downgrades the only primary."""
        strict = model.with_overrides(constraints={"maxPrimaryButtonsPerView": 0})
        result = run_with_auto_fix("Create a primary button", "demo", model=strict)

        assert [v.constraint_id for v in result.initial_violations] == [
            "maxPrimaryButtonsPerView"
        ]
        assert [p.path for p in result.patches] == ["/components/0/props/variant"]
        assert result.final_violations == []
        assert result.resolved.nodes[0].props.variant == "secondary"

    @pytest.mark.unit
    def test_to_dict(self, model):
        """Serialized result uses camelCase keys."""
        payload = run_with_auto_fix(
            "Create two primary buttons", "demo", {"onlyOnePrimaryPerView": True}, model
        ).to_dict()
        assert payload["suggestedFixes"] == [
            {"op": "replace", "path": "/components/1/props/variant", "value": "secondary"}
        ]
        assert payload["patchOutcomes"][0]["status"] == "applied"
        assert payload["nodeDecisions"]["button-1"][0]["type"] == "autoFix"
        assert payload["resolved"]["nodes"][1]["decisions"][0]["action"] == (
            "downgrade to secondary"
        )
