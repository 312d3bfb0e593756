"""Unit tests for the resolver."""

import pytest

from design_model.intent import parse_intent
from design_model.model import ConstraintSet, Contract, load_base_model
from design_model.resolver import (
    format_number,
    max_primary_allowed,
    primary_limit,
    rem_to_px,
    resolve,
)
from design_model.schema import ButtonProps, ComponentSpec, Intent, to_wire


@pytest.fixture
def model():
    return load_base_model()


def _resolve(model, intent, **rules):
    """Resolve with raw rule overrides merged onto the bundled set."""
    derived = model.with_overrides(constraints=rules) if rules else model
    return resolve(intent, derived.tokens, derived.contract, derived.constraints)


def _intent(*props, view_id="test"):
    return Intent(
        view_id=view_id,
        components=[ComponentSpec(props=ButtonProps(**p)) for p in props],
    )


class TestHelpers:
    """Tests for numeric helpers."""

    @pytest.mark.unit
    def test_rem_to_px(self):
        """rem tokens convert at 16px per rem."""
        assert rem_to_px("0.75rem") == 12
        assert rem_to_px(".5rem") == 8
        assert rem_to_px("12px") == 0

    @pytest.mark.unit
    def test_format_number(self):
        """Whole floats drop the fraction."""
        assert format_number(8.0) == "8"
        assert format_number(0.4) == "0.4"
        assert format_number(2) == "2"

    @pytest.mark.unit
    def test_primary_limit(self):
        """Explicit numeric maximum beats the boolean flag."""
        both = ConstraintSet.from_raw(
            {"onlyOnePrimaryPerView": True, "maxPrimaryButtonsPerView": 2}
        )
        assert primary_limit(both) == ("maxPrimaryButtonsPerView", 2)
        only = ConstraintSet.from_raw({"onlyOnePrimaryPerView": True})
        assert primary_limit(only) == ("onlyOnePrimaryPerView", 1)
        assert primary_limit(ConstraintSet.from_raw({})) is None

    @pytest.mark.unit
    def test_max_primary_allowed(self):
        """Repair limits keep zero and round fractional maxima down."""
        def allowed(**rules):
            return max_primary_allowed(ConstraintSet.from_raw(rules))

        assert allowed() == 1
        assert allowed(maxPrimaryButtonsPerView=0) == 0
        assert allowed(maxPrimaryButtonsPerView=2.5) == 2
        assert allowed(maxPrimaryButtonsPerView=-1) == 0


class TestStyleResolution:
    """Tests for phase 3 style output."""

    @pytest.mark.unit
    def test_primary_button(self, model):
        """A primary button resolves every style from tokens and rules."""
        intent = parse_intent('Create a primary button with label "Continue"', "demo")
        view = _resolve(model, intent)

        assert view.violations == []
        (node,) = view.nodes
        assert node.id == "button-0"
        assert node.props.variant == "primary"
        assert node.styles == {
            "backgroundColor": "#0284c7",
            "color": "#ffffff",
            "padding": "8px 12px",
            "fontSize": "0.875rem",
            "fontWeight": "600",
            "lineHeight": "1.25rem",
            "borderRadius": "0.5rem",
            "cursor": "pointer",
        }

    @pytest.mark.unit
    def test_trace_sources(self, model):
        """Trace names tokens, constraints and fixed rules."""
        (node,) = _resolve(model, _intent({"label": "Go"})).nodes
        sources = {entry.key: entry.source for entry in node.trace}
        assert sources["backgroundColor"] == "token: color.primary"
        assert sources["padding"] == (
            "constraint(active): sizeMap.md.py → token: spacing.sm → 8px, "
            "constraint(active): sizeMap.md.px → token: spacing.md → 12px"
        )
        assert sources["cursor"] == "rule: default → pointer"

    @pytest.mark.unit
    def test_small_padding(self, model):
        """Small buttons use the sm size map entry."""
        (node,) = _resolve(model, _intent({"label": "Go", "size": "sm"})).nodes
        assert node.styles["padding"] == "4px 8px"

    @pytest.mark.unit
    def test_disabled_opacity(self, model):
        """Disabled buttons take opacity from the active constraint."""
        intent = parse_intent("Create a disabled button", "demo")
        (node,) = _resolve(model, intent, disabledOpacity=0.4).nodes
        assert node.styles["opacity"] == 0.4
        assert node.styles["cursor"] == "not-allowed"
        sources = {entry.key: entry.source for entry in node.trace}
        assert sources["opacity"] == "constraint(active): disabledOpacity=0.4"

    @pytest.mark.unit
    def test_disabled_without_opacity_rule(self, model):
        """Without an opacity value only the cursor changes."""
        constraints = ConstraintSet.from_raw({"disabledOpacity": None})
        (node,) = resolve(
            _intent({"label": "Go", "disabled": True}),
            model.tokens,
            model.contract,
            constraints,
        ).nodes
        assert "opacity" not in node.styles
        assert node.styles["cursor"] == "not-allowed"

    @pytest.mark.unit
    def test_secondary_with_surface(self, model):
        """Secondary uses surface colors and a single border."""
        (node,) = _resolve(model, _intent({"label": "Back", "variant": "secondary"})).nodes
        assert node.styles["backgroundColor"] == "#f1f5f9"
        assert node.styles["color"] == "#0f172a"
        assert [e.key for e in node.trace].count("border") == 1

    @pytest.mark.unit
    def test_secondary_without_surface(self, model):
        """Without the surface rule, secondary has no colors but keeps a border."""
        intent = _intent({"label": "Back", "variant": "secondary"})
        (node,) = _resolve(model, intent, secondaryUsesSurface=False).nodes
        assert "backgroundColor" not in node.styles
        assert "color" not in node.styles
        assert node.styles["border"] == "1px solid rgba(0,0,0,0.1)"
        assert node.trace[-1].key == "border"

    @pytest.mark.unit
    def test_ghost_background(self, model):
        """Ghost is transparent only while the rule is active."""
        intent = _intent({"label": "Skip", "variant": "ghost"})
        (node,) = _resolve(model, intent).nodes
        assert node.styles["backgroundColor"] == "transparent"
        assert node.styles["color"] == "#0284c7"

        (plain,) = _resolve(model, intent, ghostHasNoBackground=False).nodes
        assert "backgroundColor" not in plain.styles

    @pytest.mark.unit
    def test_one_trace_entry_per_style(self, model):
        """Every style key has exactly one trace entry."""
        intent = _intent(
            {"label": "A", "variant": "secondary", "disabled": True},
            {"label": "B", "variant": "ghost", "size": "sm"},
            {"label": "C"},
        )
        for node in _resolve(model, intent).nodes:
            keys = [entry.key for entry in node.trace]
            assert sorted(keys) == sorted(node.styles)
            assert node.trace

    @pytest.mark.unit
    def test_deterministic(self, model):
        """Two resolutions serialize identically."""
        intent = _intent({"label": "A"}, {"label": "B", "variant": "ghost"})
        assert to_wire(_resolve(model, intent)) == to_wire(_resolve(model, intent))

    @pytest.mark.unit
    def test_intent_not_modified(self, model):
        """The caller's intent is left untouched."""
        intent = _intent({"label": "A", "disabled": True})
        before = intent.model_dump()
        _resolve(model, intent)
        assert intent.model_dump() == before


class TestSchemaValidation:
    """Tests for phase 1."""

    @pytest.mark.unit
    def test_missing_label_blocks_view(self, model):
        """One bad component blocks the whole view."""
        view = _resolve(model, _intent({"label": "Ok"}, {"label": ""}))
        assert view.nodes == []
        (violation,) = view.violations
        assert violation.code == "missingLabel"
        assert violation.node_ids == ("button-1",)
        assert view.errors[0].message == "Button requires a non-empty label"

    @pytest.mark.unit
    def test_invalid_variant_and_size(self, model):
        """Each failing component contributes one violation."""
        view = _resolve(
            model, _intent({"label": "A", "variant": "danger"}, {"label": "B", "size": "xl"})
        )
        assert [v.code for v in view.violations] == ["invalidVariant", "invalidSize"]
        assert view.is_blocked

    @pytest.mark.unit
    def test_invalid_component_type(self, model):
        """Types outside the contract are rejected."""
        intent = Intent(
            view_id="v", components=[ComponentSpec(type="Link", props=ButtonProps(label="x"))]
        )
        view = _resolve(model, intent)
        assert view.violations[0].code == "invalidComponentType"

    @pytest.mark.unit
    def test_contract_enumerations_used(self, model):
        """Allowed values come from the contract."""
        narrow = Contract.model_validate(
            {"component": "Button", "props": {"size": {"enum": ["md"]}}}
        )
        view = resolve(
            _intent({"label": "A", "size": "sm"}), model.tokens, narrow, model.constraints
        )
        assert view.violations[0].code == "invalidSize"


class TestCardinality:
    """Tests for phase 2."""

    @pytest.mark.unit
    def test_two_primaries_with_only_one_rule(self, model):
        """Two primaries violate onlyOnePrimaryPerView and yield no nodes."""
        intent = parse_intent("Create two primary buttons", "demo")
        view = _resolve(model, intent, onlyOnePrimaryPerView=True)

        assert view.nodes == []
        (violation,) = view.violations
        assert violation.constraint_id == "onlyOnePrimaryPerView"
        assert violation.code == "multiplePrimaryButtons"
        assert violation.node_ids == ("button-0", "button-1")
        assert violation.message == (
            "Constraint violation (onlyOnePrimaryPerView): Maximum 1 primary button "
            "allowed per view, but 2 found"
        )

    @pytest.mark.unit
    def test_explicit_maximum(self, model):
        """An explicit maximum is reported under its own id."""
        intent = _intent({"label": "A"}, {"label": "B"}, {"label": "C"})
        view = _resolve(model, intent, maxPrimaryButtonsPerView=2)
        (violation,) = view.violations
        assert violation.constraint_id == "maxPrimaryButtonsPerView"
        assert "Maximum 2 primary buttons" in violation.message

    @pytest.mark.unit
    def test_unbounded_without_rules(self, model):
        """No cardinality rule, no limit."""
        view = _resolve(model, parse_intent("Create two primary buttons", "demo"))
        assert len(view.nodes) == 2
        assert view.enabled_constraints["onlyOnePrimaryPerView"] is False

    @pytest.mark.unit
    def test_all_or_nothing(self, model):
        """Nodes and violations are mutually exclusive."""
        prompts = [
            "Create two primary buttons",
            'Create a ghost button "Skip"',
            "Create a primary button and a secondary button",
        ]
        for prompt in prompts:
            for only_one in (True, False):
                view = _resolve(
                    model, parse_intent(prompt, "v"), onlyOnePrimaryPerView=only_one
                )
                assert bool(view.nodes) != bool(view.violations)
