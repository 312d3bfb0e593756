"""Integration tests for the prompt-to-view workflow.

Walks the full repair lifecycle stage by stage:
1. Parse a prompt -> intent
2. Validate against enabled constraints -> violations
3. Suggest fixes -> patches
4. Apply patches -> repaired intent (original untouched)
5. Re-validate and resolve -> styled nodes with decisions
"""

import json

import pytest

from design_model.fixes import STRATEGIES, flatten_patches, suggest_fixes
from design_model.intent import parse_intent
from design_model.model import get_base_model, load_base_model
from design_model.patch import apply_fixes, apply_patches
from design_model.pipeline import run, run_with_auto_fix
from design_model.resolver import resolve_with_model
from design_model.schema import to_wire
from design_model.validator import effective_constraints, validate

TWO_PRIMARIES = "Create two primary buttons"
ONLY_ONE = {"onlyOnePrimaryPerView": True}


# =============================================================================
# Scenarios
# =============================================================================


@pytest.mark.integration
class TestScenarios:
    """End-to-end behavior for the reference prompts."""

    def test_single_labeled_primary(self, base_model):
        """A labeled primary with no constraints resolves to one node."""
        view = run('Create a primary button with label "Continue"', "demo", {}, base_model)

        assert view.violations == []
        (node,) = view.nodes
        assert node.props.variant == "primary"
        assert node.props.label == "Continue"
        assert node.styles["backgroundColor"] == "#0284c7"

    def test_two_primaries_blocked(self, base_model):
        """Two primaries under the one-primary rule block node output."""
        view = run(TWO_PRIMARIES, "demo", ONLY_ONE, base_model)

        assert view.nodes == []
        (violation,) = view.violations
        assert violation.constraint_id == "onlyOnePrimaryPerView"
        assert violation.node_ids == ("button-0", "button-1")

    def test_repair_by_stages(self, base_model):
        """suggest -> apply -> re-validate clears the violation."""
        intent = parse_intent(TWO_PRIMARIES, "demo")
        first = validate(intent, ONLY_ONE, base_model)
        assert not first.valid

        fixes = suggest_fixes(intent, first.violations, ONLY_ONE)
        patches = flatten_patches(fixes)
        assert [to_wire(p) for p in patches] == [
            {"op": "replace", "path": "/components/1/props/variant", "value": "secondary"}
        ]

        repaired = apply_fixes(intent, patches)
        assert validate(repaired, ONLY_ONE, base_model).valid

        constraints = effective_constraints(base_model.constraints, ONLY_ONE)
        view = resolve_with_model(repaired, base_model, constraints)
        assert [n.props.variant for n in view.nodes] == ["primary", "secondary"]

    def test_repair_records_decision(self, base_model):
        """The auto-fix run attaches one autoFix decision to the repaired node."""
        result = run_with_auto_fix(TWO_PRIMARIES, "demo", ONLY_ONE, base_model)

        first, second = result.resolved.nodes
        assert second.props.variant == "secondary"
        assert first.decisions is None
        (decision,) = second.decisions
        assert decision.type == "autoFix"

    def test_disabled_opacity(self, base_model):
        """Disabled buttons pick up the opacity rule and a not-allowed cursor."""
        view = run("Create a disabled button", "demo", {"disabledOpacity": True}, base_model)

        (node,) = view.nodes
        assert node.styles["opacity"] == 0.4
        assert node.styles["cursor"] == "not-allowed"


# =============================================================================
# Properties
# =============================================================================


PROMPTS = [
    TWO_PRIMARIES,
    "Create 2 buttons",
    'Create a primary button "Pay" and a primary button "Save"',
    "Create a primary button and a primary button, both small",
]


@pytest.mark.integration
class TestRepairProperties:
    """Properties that hold across prompts, strategies and constraint sets."""

    @pytest.mark.parametrize("prompt", PROMPTS)
    @pytest.mark.parametrize("strategy", sorted(STRATEGIES))
    @pytest.mark.parametrize(
        "enabled",
        [ONLY_ONE, {"maxPrimaryButtonsPerView": True}],
        ids=["onlyOne", "maxPrimary"],
    )
    def test_repair_is_idempotent(self, base_model, prompt, strategy, enabled):
        """Re-validation never reports a constraint that was just fixed."""
        result = run_with_auto_fix(
            prompt, "demo", enabled, base_model, strategy=STRATEGIES[strategy]
        )

        fixed = {c.id for c in result.applied_constraints}
        assert fixed
        assert not fixed & {v.constraint_id for v in result.final_violations}
        assert result.valid
        assert [n.props.variant for n in result.resolved.nodes].count("primary") == 1

    @pytest.mark.parametrize("prompt", PROMPTS)
    def test_patching_is_pure(self, base_model, prompt):
        """Applying fixes leaves the source intent untouched."""
        intent = parse_intent(prompt, "demo")
        snapshot = intent.model_dump()
        violations = validate(intent, ONLY_ONE, base_model).violations

        patches = flatten_patches(suggest_fixes(intent, violations, ONLY_ONE))
        application = apply_patches(intent, patches)

        assert intent.model_dump() == snapshot
        assert application.intent is not intent
        assert application.noops == []

    @pytest.mark.parametrize("prompt", PROMPTS + ["Create a ghost button"])
    def test_resolution_is_deterministic(self, base_model, prompt):
        """Two runs over the same inputs serialize identically."""
        first = run_with_auto_fix(prompt, "demo", ONLY_ONE, base_model).to_dict()
        second = run_with_auto_fix(prompt, "demo", ONLY_ONE, base_model).to_dict()
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)

    @pytest.mark.parametrize("prompt", PROMPTS + ["Create a small secondary button"])
    def test_every_style_has_one_trace(self, base_model, prompt):
        """Each style key is traced exactly once."""
        view = run_with_auto_fix(prompt, "demo", ONLY_ONE, base_model).resolved
        for node in view.nodes:
            keys = [entry.key for entry in node.trace]
            assert sorted(keys) == sorted(node.styles)


# =============================================================================
# Configured Model Directory
# =============================================================================


@pytest.mark.integration
class TestModelDirectory:
    """DESIGN_MODEL_DIR redirects the base model."""

    def test_custom_tokens(self, model_dir, monkeypatch):
        """Edited tokens flow through to resolved styles."""
        tokens_file = model_dir / "tokens.json"
        tokens = json.loads(tokens_file.read_text(encoding="utf-8"))
        tokens["color"]["primary"] = "#111111"
        tokens_file.write_text(json.dumps(tokens), encoding="utf-8")
        monkeypatch.setenv("DESIGN_MODEL_DIR", str(model_dir))

        view = run("Create a primary button", "demo")

        assert get_base_model().tokens.resolve("color.primary") == "#111111"
        assert view.nodes[0].styles["backgroundColor"] == "#111111"

    def test_directory_loads_like_bundle(self, model_dir, base_model):
        """An unmodified copy loads the same model."""
        assert load_base_model(model_dir) == base_model
