"""Unit tests for patch application."""

import pytest

from design_model.intent import parse_intent
from design_model.patch import PatchStatus, apply_fixes, apply_patches
from design_model.schema import PatchOperation


def _replace(path, value="secondary"):
    return PatchOperation(op="replace", path=path, value=value)


@pytest.fixture
def intent():
    return parse_intent("Create two primary buttons", "demo")


class TestApplyPatches:
    """Tests for apply_patches()."""

    @pytest.mark.unit
    def test_replace_variant(self, intent):
        """A replace on a prop path updates the copy."""
        result = apply_patches(intent, [_replace("/components/1/props/variant")])
        assert result.intent.components[1].props.variant == "secondary"
        assert result.outcomes[0].status == PatchStatus.APPLIED
        assert result.noops == []

    @pytest.mark.unit
    def test_input_not_mutated(self, intent):
        """The original intent is untouched."""
        before = intent.model_dump()
        result = apply_patches(intent, [_replace("/components/0/props/variant")])
        assert intent.model_dump() == before
        assert result.intent is not intent

    @pytest.mark.unit
    def test_unsupported_ops_are_noops(self, intent):
        """Ops other than replace are reported, not applied."""
        patches = [
            PatchOperation(op=op, path="/components/0/props/label", value="x")
            for op in ("add", "remove", "move", "copy", "test")
        ]
        result = apply_patches(intent, patches)
        assert result.intent == intent
        assert all(outcome.status == PatchStatus.NOOP for outcome in result.outcomes)
        assert result.outcomes[0].reason == "unsupported op 'add'"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("path", "reason"),
        [
            ("/components/5/props/variant", "component index 5 out of range"),
            ("/components/-1/props/variant", "invalid component index '-1'"),
            ("/components/x/props/variant", "invalid component index 'x'"),
            ("/components/²/props/variant", "invalid component index '²'"),
            ("/components/١/props/variant", "invalid component index '١'"),
            ("/components/0/props/color", "unknown prop 'color'"),
            ("/components/0/type", "unsupported path '/components/0/type'"),
            ("/components/0/props/variant/extra", "unsupported path '/components/0/props/variant/extra'"),
            ("/viewId", "unsupported path '/viewId'"),
        ],
    )
    def test_bad_paths_are_noops(self, intent, path, reason):
        """Malformed or out-of-range paths report why they did nothing."""
        result = apply_patches(intent, [_replace(path)])
        (outcome,) = result.outcomes
        assert outcome.status == PatchStatus.NOOP
        assert outcome.reason == reason
        assert result.intent == intent

    @pytest.mark.unit
    def test_ill_typed_value_is_noop(self, intent):
        """Values of the wrong type for the prop are rejected."""
        result = apply_patches(
            intent,
            [
                _replace("/components/0/props/disabled", "yes"),
                _replace("/components/0/props/label", 3),
                _replace("/components/0/props/disabled", True),
            ],
        )
        assert [o.status for o in result.outcomes] == [
            PatchStatus.NOOP,
            PatchStatus.NOOP,
            PatchStatus.APPLIED,
        ]
        assert result.intent.components[0].props.disabled is True
        assert result.intent.components[0].props.label == "Primary 1"

    @pytest.mark.unit
    def test_outcome_to_dict(self, intent):
        """Outcomes serialize with the patch in wire form."""
        result = apply_patches(intent, [_replace("/components/9/props/variant")])
        assert result.outcomes[0].to_dict() == {
            "patch": {
                "op": "replace",
                "path": "/components/9/props/variant",
                "value": "secondary",
            },
            "status": "noop",
            "reason": "component index 9 out of range",
        }


class TestApplyFixes:
    """Tests for apply_fixes()."""

    @pytest.mark.unit
    def test_returns_intent(self, intent):
        """apply_fixes returns only the patched intent."""
        patched = apply_fixes(intent, [_replace("/components/1/props/variant")])
        assert [c.props.variant for c in patched.components] == ["primary", "secondary"]
        assert [c.props.variant for c in intent.components] == ["primary", "primary"]

    @pytest.mark.unit
    def test_empty_patch_list(self, intent):
        """No patches, identical copy."""
        patched = apply_fixes(intent, [])
        assert patched == intent
        assert patched is not intent
