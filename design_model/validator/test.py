"""Unit tests for the validator."""

import pytest

from design_model.intent import parse_intent
from design_model.model import load_base_model
from design_model.validator import effective_constraints, validate


@pytest.fixture
def model():
    return load_base_model()


class TestEffectiveConstraints:
    """Tests for overlaying enabled flags."""

    @pytest.mark.unit
    def test_toggle_overlay(self, model):
        """Toggles take the flag as-is."""
        effective = effective_constraints(
            model.constraints, {"onlyOnePrimaryPerView": True, "ghostHasNoBackground": False}
        )
        assert effective.is_active("onlyOnePrimaryPerView")
        assert not effective.is_active("ghostHasNoBackground")

    @pytest.mark.unit
    def test_numeric_canonical_values(self, model):
        """Enabled numerics take canonical values; disabled ones are unset."""
        effective = effective_constraints(
            model.constraints,
            {"maxPrimaryButtonsPerView": True, "disabledOpacity": False},
        )
        assert effective.value("maxPrimaryButtonsPerView") == 1
        assert effective.value("disabledOpacity") is None

    @pytest.mark.unit
    def test_disabled_opacity_canonical(self, model):
        """disabledOpacity maps to 0.4 when switched on."""
        base = model.with_overrides(constraints={"disabledOpacity": 0.8}).constraints
        assert effective_constraints(base, {"disabledOpacity": True}).value(
            "disabledOpacity"
        ) == 0.4

    @pytest.mark.unit
    def test_unknown_and_absent_ids(self, model):
        """Unknown ids are ignored and absent ids keep base values."""
        effective = effective_constraints(model.constraints, {"noSuchRule": True})
        assert effective == model.constraints
        assert effective.is_active("secondaryUsesSurface")

    @pytest.mark.unit
    def test_base_not_mutated(self, model):
        """The base set is left untouched."""
        before = model.constraints.to_raw()
        effective_constraints(model.constraints, {"onlyOnePrimaryPerView": True})
        assert model.constraints.to_raw() == before


class TestValidate:
    """Tests for validate()."""

    @pytest.mark.unit
    def test_two_primaries_invalid(self, model):
        """Two primaries with onlyOnePrimaryPerView enabled are invalid."""
        intent = parse_intent("Create two primary buttons", "demo")
        result = validate(intent, {"onlyOnePrimaryPerView": True}, model)
        assert result.valid is False
        (violation,) = result.violations
        assert violation.constraint_id == "onlyOnePrimaryPerView"
        assert result.applied_constraints == []

    @pytest.mark.unit
    def test_valid_without_constraints(self, model):
        """A single primary button is valid."""
        intent = parse_intent('Create a primary button with label "Continue"', "demo")
        result = validate(intent, {}, model)
        assert result.valid is True
        assert result.violations == []

    @pytest.mark.unit
    def test_max_primary_flag(self, model):
        """maxPrimaryButtonsPerView=True enforces a limit of one."""
        intent = parse_intent("Create two primary buttons", "demo")
        result = validate(intent, {"maxPrimaryButtonsPerView": True}, model)
        assert result.violations[0].constraint_id == "maxPrimaryButtonsPerView"

    @pytest.mark.unit
    def test_inputs_not_mutated(self, model):
        """Intent and enabled map are left untouched."""
        intent = parse_intent("Create two primary buttons", "demo")
        enabled = {"onlyOnePrimaryPerView": True}
        before = intent.model_dump()
        validate(intent, enabled, model)
        assert intent.model_dump() == before
        assert enabled == {"onlyOnePrimaryPerView": True}

    @pytest.mark.unit
    def test_to_dict(self, model):
        """Wire shape uses camelCase keys."""
        intent = parse_intent("Create two primary buttons", "demo")
        payload = validate(intent, {"onlyOnePrimaryPerView": True}, model).to_dict()
        assert payload["valid"] is False
        assert payload["violations"][0]["constraintId"] == "onlyOnePrimaryPerView"
        assert payload["violations"][0]["nodeIds"] == ["button-0", "button-1"]
        assert payload["appliedConstraints"] == []
