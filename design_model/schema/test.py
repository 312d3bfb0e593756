"""Unit tests for the schema module."""

import pytest
from pydantic import ValidationError

from design_model.schema import (
    AppliedConstraint,
    ButtonProps,
    ComponentSpec,
    ConstraintScope,
    ConstraintStatus,
    Decision,
    DecisionType,
    Intent,
    PatchOp,
    PatchOperation,
    ResolvedView,
    Violation,
    node_id_for,
    to_wire,
)


class TestIntent:
    """Tests for Intent parsing from wire payloads."""

    @pytest.mark.unit
    def test_accepts_camel_case(self):
        """viewId alias populates view_id."""
        intent = Intent.model_validate(
            {
                "viewId": "checkout",
                "components": [
                    {
                        "type": "Button",
                        "props": {
                            "label": "Pay",
                            "variant": "primary",
                            "size": "md",
                            "disabled": False,
                        },
                    }
                ],
            }
        )
        assert intent.view_id == "checkout"
        assert intent.components[0].props.label == "Pay"

    @pytest.mark.unit
    def test_accepts_field_names(self):
        """Snake-case field names are accepted too."""
        intent = Intent(view_id="v", components=[ComponentSpec()])
        assert intent.view_id == "v"

    @pytest.mark.unit
    def test_view_id_required(self):
        """A missing viewId is a validation error."""
        with pytest.raises(ValidationError):
            Intent.model_validate({"components": []})

    @pytest.mark.unit
    def test_out_of_vocabulary_values_survive(self):
        """Unknown variants and types are kept for the resolver to report."""
        spec = ComponentSpec.model_validate(
            {"type": "Card", "props": {"label": "x", "variant": "tertiary"}}
        )
        assert spec.type == "Card"
        assert spec.props.variant == "tertiary"

    @pytest.mark.unit
    def test_missing_label_defaults_to_empty(self):
        """Missing label is empty, not an exception."""
        assert ButtonProps().label == ""


class TestWireSerialization:
    """Tests for to_wire output shape."""

    @pytest.mark.unit
    def test_camel_case_keys(self):
        """Serialized keys use camelCase."""
        view = ResolvedView(view_id="v", enabled_constraints={"a": True})
        data = to_wire(view)
        assert data["viewId"] == "v"
        assert data["enabledConstraints"] == {"a": True}
        assert "appliedConstraints" in data

    @pytest.mark.unit
    def test_optional_fields_dropped(self):
        """Unset optionals are excluded."""
        violation = Violation(code="missingLabel", message="Label required")
        assert to_wire(violation) == {"code": "missingLabel", "message": "Label required"}

    @pytest.mark.unit
    def test_enums_serialize_to_values(self):
        """Enum-typed fields serialize to their string values."""
        record = AppliedConstraint(
            id="onlyOnePrimaryPerView",
            scope=ConstraintScope.VIEW,
            status=ConstraintStatus.TRIGGERED,
            message="m",
        )
        data = to_wire(record)
        assert data["scope"] == "view"
        assert data["status"] == "triggered"
        decision = Decision(type=DecisionType.AUTO_FIX, reason="r", action="a")
        assert to_wire(decision)["type"] == "autoFix"

    @pytest.mark.unit
    def test_patch_from_alias(self):
        """The patch 'from' pointer round-trips through its alias."""
        patch = PatchOperation.model_validate(
            {"op": "move", "path": "/components/0", "from": "/components/1"}
        )
        assert patch.from_ == "/components/1"
        assert to_wire(patch)["from"] == "/components/1"


class TestViolation:
    """Tests for Violation immutability."""

    @pytest.mark.unit
    def test_frozen(self):
        """Violations cannot be mutated after creation."""
        violation = Violation(code="c", message="m", node_ids=("button-0",))
        with pytest.raises(ValidationError):
            violation.code = "other"

    @pytest.mark.unit
    def test_node_ids_from_list(self):
        """Lists from the wire become tuples."""
        violation = Violation.model_validate(
            {"code": "c", "message": "m", "nodeIds": ["button-0", "button-1"]}
        )
        assert violation.node_ids == ("button-0", "button-1")


class TestHelpers:
    """Tests for helper functions."""

    @pytest.mark.unit
    def test_node_id_for(self):
        """Node ids derive from position."""
        assert node_id_for(0) == "button-0"
        assert node_id_for(12) == "button-12"

    @pytest.mark.unit
    def test_patch_op_values(self):
        """All JSON-patch ops are declared."""
        assert {op.value for op in PatchOp} == {
            "add",
            "remove",
            "replace",
            "move",
            "copy",
            "test",
        }

    @pytest.mark.unit
    def test_blocked_view(self):
        """A view with violations reports itself as blocked."""
        view = ResolvedView(
            view_id="v", violations=[Violation(code="c", message="m")]
        )
        assert view.is_blocked
        assert not ResolvedView(view_id="v").is_blocked
