"""Unit tests for the design model stores."""

import json

import pytest

from design_model.model import (
    CONSTRAINT_TEMPLATES,
    ConstraintSet,
    DesignModelError,
    NumericConstraint,
    ToggleConstraint,
    Tokens,
    enabled_from_templates,
    get_base_model,
    get_template,
    load_base_model,
    merge_deep,
    overrides_from_templates,
    validate_constraint_overrides,
    validate_token_overrides,
)


class TestTokens:
    """Tests for dotted-path token resolution."""

    @pytest.mark.unit
    def test_resolves_leaf(self):
        """Nested path resolves to the leaf string."""
        tokens = Tokens({"color": {"primary": "#0284c7"}})
        assert tokens.resolve("color.primary") == "#0284c7"

    @pytest.mark.unit
    def test_missing_segment_returns_path(self):
        """Missing segment yields the path itself."""
        tokens = Tokens({"color": {"primary": "#0284c7"}})
        assert tokens.resolve("color.accent") == "color.accent"
        assert tokens.resolve("shadow.lg") == "shadow.lg"

    @pytest.mark.unit
    def test_non_string_leaf_stringified(self):
        """Numeric leaves come back as strings."""
        tokens = Tokens({"typography": {"button": {"fontWeight": 600}}})
        assert tokens.resolve("typography.button.fontWeight") == "600"

    @pytest.mark.unit
    def test_non_leaf_returns_path(self):
        """A path stopping at a group is unresolved."""
        tokens = Tokens({"color": {"primary": "#000"}})
        assert tokens.resolve("color") == "color"
        assert not tokens.has("color")

    @pytest.mark.unit
    def test_source_mapping_not_shared(self):
        """Mutating the input after construction does not leak in."""
        data = {"color": {"primary": "#000"}}
        tokens = Tokens(data)
        data["color"]["primary"] = "#fff"
        assert tokens.resolve("color.primary") == "#000"


class TestConstraintSet:
    """Tests for typed constraint rules."""

    @pytest.mark.unit
    def test_from_raw_types_known_rules(self):
        """Known ids are typed as toggles or numerics."""
        constraints = ConstraintSet.from_raw(
            {"onlyOnePrimaryPerView": True, "disabledOpacity": 0.5}
        )
        assert constraints.rules["onlyOnePrimaryPerView"] == ToggleConstraint(
            enabled=True
        )
        assert constraints.rules["disabledOpacity"] == NumericConstraint(value=0.5)

    @pytest.mark.unit
    def test_boolean_for_numeric_is_unset(self):
        """A boolean supplied for a numeric rule leaves it inactive."""
        constraints = ConstraintSet.from_raw({"maxPrimaryButtonsPerView": True})
        assert not constraints.is_active("maxPrimaryButtonsPerView")
        assert constraints.value("maxPrimaryButtonsPerView") is None

    @pytest.mark.unit
    def test_number_for_toggle_is_disabled(self):
        """A non-boolean toggle value is treated as off."""
        constraints = ConstraintSet.from_raw({"ghostHasNoBackground": 1})
        assert not constraints.is_active("ghostHasNoBackground")

    @pytest.mark.unit
    def test_unknown_rules_typed_by_value(self):
        """Unknown ids are typed from the value; untyped values are dropped."""
        constraints = ConstraintSet.from_raw(
            {"customFlag": True, "customLimit": 3, "customText": "x"}
        )
        assert constraints.is_active("customFlag")
        assert constraints.value("customLimit") == 3
        assert "customText" not in constraints.rules

    @pytest.mark.unit
    def test_enabled_flags(self):
        """Numeric rules are enabled iff a value is set."""
        constraints = ConstraintSet.from_raw(
            {
                "onlyOnePrimaryPerView": False,
                "disabledOpacity": 0.4,
                "maxPrimaryButtonsPerView": None,
            }
        )
        assert constraints.enabled_flags() == {
            "onlyOnePrimaryPerView": False,
            "disabledOpacity": True,
            "maxPrimaryButtonsPerView": False,
        }

    @pytest.mark.unit
    def test_with_overrides_returns_new_set(self):
        """Overriding rules leaves the original untouched."""
        base = ConstraintSet.from_raw({"onlyOnePrimaryPerView": False})
        updated = base.with_overrides(
            {"onlyOnePrimaryPerView": ToggleConstraint(enabled=True)}
        )
        assert updated.is_active("onlyOnePrimaryPerView")
        assert not base.is_active("onlyOnePrimaryPerView")

    @pytest.mark.unit
    def test_catalogs_parsed(self):
        """Error messages and size map are parsed from the raw shape."""
        constraints = ConstraintSet.from_raw(
            {
                "errorMessages": {"missingLabel": "Label required"},
                "sizeMap": {"sm": {"px": "spacing.sm", "py": "spacing.xs"}},
            }
        )
        assert constraints.error_message("missingLabel", "x") == "Label required"
        assert constraints.error_message("invalidSize", "fallback") == "fallback"
        assert constraints.size_map["sm"].px == "spacing.sm"

    @pytest.mark.unit
    def test_malformed_size_map_raises(self):
        """A size entry missing a token path is a load error."""
        with pytest.raises(DesignModelError):
            ConstraintSet.from_raw({"sizeMap": {"sm": {"px": "spacing.sm"}}})

    @pytest.mark.unit
    def test_to_raw_omits_unset_numerics(self):
        """Flattening drops numerics without a value."""
        constraints = ConstraintSet.from_raw(
            {"onlyOnePrimaryPerView": True, "maxPrimaryButtonsPerView": None}
        )
        raw = constraints.to_raw()
        assert raw["onlyOnePrimaryPerView"] is True
        assert "maxPrimaryButtonsPerView" not in raw


class TestLoadBaseModel:
    """Tests for loading the stores from disk."""

    @pytest.mark.unit
    def test_bundled_model_loads(self):
        """The bundled stores load with the expected values."""
        model = load_base_model()
        assert model.tokens.resolve("color.primary") == "#0284c7"
        assert model.contract.component == "Button"
        assert model.contract.allowed("variant") == ("primary", "secondary", "ghost")
        assert model.constraints.value("disabledOpacity") == 0.4
        assert model.constraints.size_map["md"].px == "spacing.md"

    @pytest.mark.unit
    def test_get_base_model_is_cached(self):
        """Repeated calls return the same instance."""
        assert get_base_model() is get_base_model()

    @pytest.mark.unit
    def test_missing_directory_raises(self, tmp_path):
        """A directory without store files raises DesignModelError."""
        with pytest.raises(DesignModelError, match="not found"):
            load_base_model(tmp_path)

    @pytest.mark.unit
    def test_malformed_json_raises(self, tmp_path):
        """Malformed JSON raises DesignModelError."""
        (tmp_path / "tokens.json").write_text("{not json")
        with pytest.raises(DesignModelError, match="Malformed JSON"):
            load_base_model(tmp_path)

    @pytest.mark.unit
    def test_custom_directory(self, tmp_path):
        """Stores are read from an explicit directory."""
        (tmp_path / "tokens.json").write_text(json.dumps({"color": {"primary": "red"}}))
        (tmp_path / "button.json").write_text(
            json.dumps({"component": "Button", "props": {}})
        )
        (tmp_path / "button.rules.json").write_text(
            json.dumps({"onlyOnePrimaryPerView": True})
        )
        model = load_base_model(tmp_path)
        assert model.tokens.resolve("color.primary") == "red"
        assert model.constraints.is_active("onlyOnePrimaryPerView")

    @pytest.mark.unit
    def test_with_overrides(self):
        """Token and constraint overrides derive a new model."""
        base = load_base_model()
        derived = base.with_overrides(
            tokens={"color": {"primary": "#000000"}},
            constraints={"onlyOnePrimaryPerView": True},
        )
        assert derived.tokens.resolve("color.primary") == "#000000"
        assert derived.tokens.resolve("color.onPrimary") == "#ffffff"
        assert derived.constraints.is_active("onlyOnePrimaryPerView")
        assert base.tokens.resolve("color.primary") == "#0284c7"


class TestMergeDeep:
    """Tests for override merging."""

    @pytest.mark.unit
    def test_nested_merge(self):
        """Nested mappings merge key by key."""
        result = merge_deep({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        assert result == {"a": {"x": 1, "y": 3}}

    @pytest.mark.unit
    def test_lists_and_scalars_replace(self):
        """Lists and scalars replace the base value."""
        result = merge_deep({"a": [1, 2], "b": 1}, {"a": [3], "b": 2})
        assert result == {"a": [3], "b": 2}

    @pytest.mark.unit
    def test_none_skipped(self):
        """None overrides leave the base value."""
        assert merge_deep({"a": 1}, {"a": None}) == {"a": 1}

    @pytest.mark.unit
    def test_base_not_mutated(self):
        """The base mapping is left untouched."""
        base = {"a": {"x": 1}}
        merge_deep(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}


class TestOverrideValidation:
    """Tests for override type checks."""

    @pytest.mark.unit
    def test_token_overrides(self):
        """Token override groups must be mappings of the right shape."""
        assert validate_token_overrides({"color": {"primary": "#000"}})
        assert not validate_token_overrides({"color": {"primary": 1}})
        assert not validate_token_overrides({"spacing": "1rem"})
        assert not validate_token_overrides(["color"])

    @pytest.mark.unit
    def test_constraint_overrides(self):
        """Constraint overrides must match rule kinds."""
        assert validate_constraint_overrides({"onlyOnePrimaryPerView": True})
        assert validate_constraint_overrides({"disabledOpacity": 0.6})
        assert not validate_constraint_overrides({"onlyOnePrimaryPerView": "yes"})
        assert not validate_constraint_overrides({"maxPrimaryButtonsPerView": True})
        assert not validate_constraint_overrides({"disabledOpacity": 1.5})


class TestConstraintTemplates:
    """Tests for the authorable template catalog."""

    @pytest.mark.unit
    def test_catalog_ids(self):
        """Catalog exposes the four Button templates."""
        ids = [template.id for template in CONSTRAINT_TEMPLATES]
        assert ids == [
            "onlyOnePrimaryPerView",
            "ghostHasNoBackground",
            "disabledOpacity",
            "maxPrimaryButtonsPerView",
        ]

    @pytest.mark.unit
    def test_to_patch_defaults(self):
        """Patches fall back to True for toggles and the default for numerics."""
        assert get_template("onlyOnePrimaryPerView").to_patch() == {
            "onlyOnePrimaryPerView": True
        }
        assert get_template("disabledOpacity").to_patch() == {"disabledOpacity": 0.4}
        assert get_template("maxPrimaryButtonsPerView").to_patch(2) == {
            "maxPrimaryButtonsPerView": 2
        }

    @pytest.mark.unit
    def test_enabled_from_templates(self):
        """Toggles need True; numerics need any value."""
        enabled = enabled_from_templates(
            [
                ("onlyOnePrimaryPerView", True),
                ("ghostHasNoBackground", False),
                ("disabledOpacity", 0.6),
                ("maxPrimaryButtonsPerView", None),
                ("unknown", True),
            ]
        )
        assert enabled == {
            "onlyOnePrimaryPerView": True,
            "ghostHasNoBackground": False,
            "disabledOpacity": True,
            "maxPrimaryButtonsPerView": False,
        }

    @pytest.mark.unit
    def test_overrides_from_templates(self):
        """Authored values become a raw rules patch."""
        overrides = overrides_from_templates(
            [("disabledOpacity", 0.6), ("onlyOnePrimaryPerView", None)]
        )
        assert overrides == {"disabledOpacity": 0.6, "onlyOnePrimaryPerView": True}
