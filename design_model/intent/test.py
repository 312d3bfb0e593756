"""Unit tests for prompt parsing."""

import pytest

from design_model.intent import (
    DEFAULT_MATCHERS,
    CompoundMatcher,
    IntentFragment,
    Matcher,
    detect_size,
    detect_variant,
    parse_intent,
)


def _props(intent):
    return [component.props for component in intent.components]


class TestSingleButton:
    """Tests for single-component prompts."""

    @pytest.mark.unit
    def test_defaults(self):
        """A bare prompt yields one primary md button labeled Continue."""
        intent = parse_intent("Create a button", view_id="demo")
        assert intent.view_id == "demo"
        (props,) = _props(intent)
        assert props.label == "Continue"
        assert props.variant == "primary"
        assert props.size == "md"
        assert props.disabled is False
        assert intent.components[0].type == "Button"

    @pytest.mark.unit
    def test_empty_prompt(self):
        """Even an empty prompt produces one component."""
        intent = parse_intent("", view_id="empty")
        assert len(intent.components) == 1

    @pytest.mark.unit
    def test_quoted_label(self):
        """First quoted substring becomes the label."""
        intent = parse_intent('Create a primary button with label "Save"', "v")
        assert _props(intent)[0].label == "Save"

    @pytest.mark.unit
    def test_labeled_word(self):
        """`labeled <word>` names the label when nothing is quoted."""
        intent = parse_intent("Create a button labeled Submit", "v")
        assert _props(intent)[0].label == "Submit"

    @pytest.mark.unit
    def test_quoted_beats_labeled(self):
        """Quoted label has precedence over the labeled pattern."""
        intent = parse_intent('a button labeled Submit "Send"', "v")
        assert _props(intent)[0].label == "Send"

    @pytest.mark.unit
    def test_variant_priority(self):
        """secondary beats ghost beats primary."""
        assert detect_variant("primary ghost secondary") == "secondary"
        assert detect_variant("primary or ghost") == "ghost"
        assert detect_variant("PRIMARY") == "primary"
        assert detect_variant("plain") is None

    @pytest.mark.unit
    def test_disabled_small(self):
        """Disabled and small are detected by substring."""
        (props,) = _props(parse_intent("Create a small disabled ghost button", "v"))
        assert props.disabled is True
        assert props.size == "sm"
        assert props.variant == "ghost"

    @pytest.mark.unit
    def test_standalone_sm(self):
        """`sm` counts only as a standalone word."""
        assert detect_size("an sm button") == "sm"
        assert detect_size("sm") == "sm"
        assert detect_size("a smart button") == "md"


class TestRepetition:
    """Tests for count detection."""

    @pytest.mark.unit
    def test_two_primary_buttons(self):
        """Two primaries without a label get distinguishable labels."""
        intent = parse_intent("Create two primary buttons", "v")
        assert [p.label for p in _props(intent)] == ["Primary 1", "Primary 2"]
        assert all(p.variant == "primary" for p in _props(intent))

    @pytest.mark.unit
    def test_numeric_count(self):
        """Digit 2 works like the word two."""
        assert len(parse_intent("Add 2 buttons", "v").components) == 2

    @pytest.mark.unit
    def test_explicit_label_shared(self):
        """An explicit label is reused for every repetition."""
        intent = parse_intent('Create two primary buttons "Go"', "v")
        assert [p.label for p in _props(intent)] == ["Go", "Go"]

    @pytest.mark.unit
    def test_non_primary_repetition_keeps_default_label(self):
        """Synthesized labels apply to primaries only."""
        intent = parse_intent("Create two secondary buttons", "v")
        assert [p.label for p in _props(intent)] == ["Continue", "Continue"]


class TestCompound:
    """Tests for the two-clause phrasing."""

    @pytest.mark.unit
    def test_variants_and_labels(self):
        """Each clause contributes a variant; labels come from quotes in order."""
        intent = parse_intent(
            'Create one primary button "Continue" and one ghost button '
            'with label "Cancel"',
            "checkout",
        )
        props = _props(intent)
        assert [(p.variant, p.label) for p in props] == [
            ("primary", "Continue"),
            ("ghost", "Cancel"),
        ]

    @pytest.mark.unit
    def test_fallback_labels(self):
        """Missing quotes fall back to Button 1 / Button 2."""
        intent = parse_intent("Create a primary button and a secondary button", "v")
        props = _props(intent)
        assert [p.label for p in props] == ["Button 1", "Button 2"]
        assert [p.variant for p in props] == ["primary", "secondary"]

    @pytest.mark.unit
    def test_shared_flags(self):
        """Disabled and size apply to both components."""
        intent = parse_intent(
            "Create a primary button and a ghost button, both small and disabled", "v"
        )
        for props in _props(intent):
            assert props.disabled is True
            assert props.size == "sm"

    @pytest.mark.unit
    def test_compound_wins_over_count(self):
        """The compound phrasing is terminal."""
        fragment = CompoundMatcher().match("a primary button and a ghost button")
        assert fragment is not None
        assert len(fragment.components) == 2


class TestMatcherComposition:
    """Tests for custom matcher sequences."""

    @pytest.mark.unit
    def test_custom_matcher_precedes_defaults(self):
        """Earlier matchers win per field."""

        class AlwaysGhost(Matcher):
            name = "always-ghost"

            def match(self, prompt):
                return IntentFragment(variant="ghost")

        intent = parse_intent(
            "Create a primary button", "v", matchers=(AlwaysGhost(), *DEFAULT_MATCHERS)
        )
        assert _props(intent)[0].variant == "ghost"

    @pytest.mark.unit
    def test_deterministic(self):
        """Same prompt, same intent."""
        prompt = 'Create two primary buttons and a "Save" label'
        assert parse_intent(prompt, "v") == parse_intent(prompt, "v")
