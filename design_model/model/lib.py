"""Design model stores: tokens, component contract and constraint rules.

The three stores are loaded once per process and treated as read-only.
Constraint rules are typed at load time into a tagged union
(`ToggleConstraint` / `NumericConstraint`) so downstream code asks
"is this rule active?" instead of sniffing value types.

Example:
    >>> from design_model.model import get_base_model
    >>> model = get_base_model()
    >>> model.tokens.resolve("color.primary")
    '#0284c7'
    >>> model.constraints.is_active("disabledOpacity")
    True
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from design_model.config import get_design_model_dir

logger = logging.getLogger(__name__)

TOKENS_FILE = "tokens.json"
CONTRACT_FILE = "button.json"
RULES_FILE = "button.rules.json"

# Keys of the raw rules file that are catalogs rather than rules
_ERROR_MESSAGES_KEY = "errorMessages"
_SIZE_MAP_KEY = "sizeMap"


class DesignModelError(Exception):
    """Raised when a design model store cannot be read or parsed."""


# =============================================================================
# Tokens
# =============================================================================


class Tokens:
    """Hierarchical token store addressed by dotted paths."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]):
        self._data = copy.deepcopy(dict(data))

    def resolve(self, path: str) -> str:
        """Resolve a dotted token path to its leaf value.

        Unresolvable paths (missing segment or non-leaf target) return the
        path itself so the gap is visible in the output. Non-string leaves
        are stringified.
        """
        value: Any = self._data
        for part in path.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return path
            value = value[part]
        if isinstance(value, Mapping):
            return path
        return value if isinstance(value, str) else str(value)

    def has(self, path: str) -> bool:
        """True when the path resolves to a leaf."""
        return self.resolve(path) != path

    def to_dict(self) -> dict[str, Any]:
        """Copy of the underlying mapping."""
        return copy.deepcopy(self._data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Tokens) and self._data == other._data

    def __repr__(self) -> str:
        return f"Tokens({sorted(self._data)})"


# =============================================================================
# Contract
# =============================================================================


class PropSchema(BaseModel):
    """Schema for a single component prop."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    enum: tuple[str, ...] | None = None
    default: Any = None
    required: bool = False


class Contract(BaseModel):
    """Per-component-type schema of allowed props and values."""

    model_config = ConfigDict(frozen=True)

    component: str
    props: dict[str, PropSchema] = Field(default_factory=dict)

    def allowed(self, prop: str) -> tuple[str, ...]:
        """Enumerated legal values for a prop (empty when unconstrained)."""
        schema = self.props.get(prop)
        if schema is None or schema.enum is None:
            return ()
        return schema.enum

    def default(self, prop: str) -> Any:
        """Default value for a prop, if declared."""
        schema = self.props.get(prop)
        return schema.default if schema else None


# =============================================================================
# Constraints (tagged union)
# =============================================================================


class ToggleConstraint(BaseModel):
    """An on/off rule."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["toggle"] = "toggle"
    enabled: bool = False

    @property
    def active(self) -> bool:
        return self.enabled


class NumericConstraint(BaseModel):
    """A parameterized rule; active when a value is set."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["numeric"] = "numeric"
    value: Union[int, float, None] = None

    @property
    def active(self) -> bool:
        return self.value is not None


Constraint = Annotated[
    Union[ToggleConstraint, NumericConstraint], Field(discriminator="kind")
]


@dataclass(frozen=True)
class ConstraintDefinition:
    """Known constraint: its kind and the value a bare "enabled" flag maps to."""

    id: str
    kind: Literal["toggle", "numeric"]
    canonical_value: Union[int, float, None] = None


KNOWN_CONSTRAINTS: dict[str, ConstraintDefinition] = {
    "onlyOnePrimaryPerView": ConstraintDefinition("onlyOnePrimaryPerView", "toggle"),
    "ghostHasNoBackground": ConstraintDefinition("ghostHasNoBackground", "toggle"),
    "secondaryUsesSurface": ConstraintDefinition("secondaryUsesSurface", "toggle"),
    "disabledOpacity": ConstraintDefinition("disabledOpacity", "numeric", 0.4),
    "maxPrimaryButtonsPerView": ConstraintDefinition(
        "maxPrimaryButtonsPerView", "numeric", 1
    ),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_rule(rule_id: str, value: Any) -> ToggleConstraint | NumericConstraint | None:
    """Type one raw rule value. Returns None for rules that cannot be typed."""
    definition = KNOWN_CONSTRAINTS.get(rule_id)
    kind = definition.kind if definition else None

    if kind is None:
        if isinstance(value, bool):
            kind = "toggle"
        elif _is_number(value):
            kind = "numeric"
        else:
            logger.warning(f"Ignoring untyped constraint rule '{rule_id}': {value!r}")
            return None

    if kind == "toggle":
        if not isinstance(value, bool):
            logger.warning(f"Toggle rule '{rule_id}' expects a boolean, got {value!r}")
            return ToggleConstraint(enabled=False)
        return ToggleConstraint(enabled=value)

    if value is not None and not _is_number(value):
        logger.warning(f"Numeric rule '{rule_id}' expects a number, got {value!r}")
        return NumericConstraint(value=None)
    return NumericConstraint(value=value)


class SizeTokens(BaseModel):
    """Token paths for horizontal and vertical padding of one size."""

    model_config = ConfigDict(frozen=True)

    px: str
    py: str


class ConstraintSet(BaseModel):
    """Typed constraint rules plus the message and size catalogs."""

    model_config = ConfigDict(frozen=True)

    rules: dict[str, Constraint] = Field(default_factory=dict)
    error_messages: dict[str, str] = Field(default_factory=dict)
    size_map: dict[str, SizeTokens] = Field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> ConstraintSet:
        """Build from the flat rules-file shape.

        Args:
            raw: Mapping of rule ids to booleans/numbers plus the
                `errorMessages` and `sizeMap` catalogs.
        """
        rules: dict[str, ToggleConstraint | NumericConstraint] = {}
        for key, value in raw.items():
            if key in (_ERROR_MESSAGES_KEY, _SIZE_MAP_KEY):
                continue
            typed = _type_rule(key, value)
            if typed is not None:
                rules[key] = typed

        try:
            return cls(
                rules=rules,
                error_messages=dict(raw.get(_ERROR_MESSAGES_KEY) or {}),
                size_map=dict(raw.get(_SIZE_MAP_KEY) or {}),
            )
        except ValidationError as e:
            raise DesignModelError(f"Invalid constraint catalog: {e}") from e

    def is_active(self, rule_id: str) -> bool:
        """True when the rule exists and is active."""
        rule = self.rules.get(rule_id)
        return rule is not None and rule.active

    def value(self, rule_id: str) -> Union[int, float, None]:
        """Value of an active numeric rule, else None."""
        rule = self.rules.get(rule_id)
        if isinstance(rule, NumericConstraint):
            return rule.value
        return None

    def with_overrides(
        self, updates: Mapping[str, ToggleConstraint | NumericConstraint]
    ) -> ConstraintSet:
        """Return a new set with the given rules replaced."""
        return self.model_copy(update={"rules": {**self.rules, **updates}})

    def enabled_flags(self) -> dict[str, bool]:
        """Boolean view of every rule (numerics: enabled iff a value is set)."""
        return {rule_id: rule.active for rule_id, rule in self.rules.items()}

    def error_message(self, code: str, fallback: str) -> str:
        """Catalog message for an error code."""
        return self.error_messages.get(code) or fallback

    def to_raw(self) -> dict[str, Any]:
        """Flatten back to the rules-file shape (unset numerics omitted)."""
        raw: dict[str, Any] = {}
        for rule_id, rule in self.rules.items():
            if isinstance(rule, ToggleConstraint):
                raw[rule_id] = rule.enabled
            elif rule.value is not None:
                raw[rule_id] = rule.value
        raw[_ERROR_MESSAGES_KEY] = dict(self.error_messages)
        raw[_SIZE_MAP_KEY] = {
            size: entry.model_dump() for size, entry in self.size_map.items()
        }
        return raw


# =============================================================================
# Design Model
# =============================================================================


@dataclass(frozen=True)
class DesignModel:
    """The three read-only stores consumed by the resolver."""

    tokens: Tokens
    contract: Contract
    constraints: ConstraintSet

    def with_overrides(
        self,
        tokens: Mapping[str, Any] | None = None,
        constraints: Mapping[str, Any] | None = None,
    ) -> DesignModel:
        """Derive a new model with token and/or raw constraint overrides merged in."""
        new_tokens = self.tokens
        if tokens:
            new_tokens = Tokens(merge_deep(self.tokens.to_dict(), tokens))
        new_constraints = self.constraints
        if constraints:
            new_constraints = ConstraintSet.from_raw(
                merge_deep(self.constraints.to_raw(), constraints)
            )
        return DesignModel(
            tokens=new_tokens, contract=self.contract, constraints=new_constraints
        )


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise DesignModelError(f"Design model file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DesignModelError(f"Malformed JSON in {path}: {e}") from e


def load_base_model(directory: Path | str | None = None) -> DesignModel:
    """Load tokens, contract and constraint rules from disk.

    Args:
        directory: Directory containing the three store files. Defaults to
            the configured or bundled design model directory.

    Returns:
        DesignModel built from the files.

    Raises:
        DesignModelError: If a file is missing or malformed.
    """
    base = get_design_model_dir(directory)
    logger.debug(f"Loading design model from {base}")

    tokens_raw = _read_json(base / TOKENS_FILE)
    if not isinstance(tokens_raw, dict):
        raise DesignModelError(f"{TOKENS_FILE} must contain an object")

    try:
        contract = Contract.model_validate(_read_json(base / CONTRACT_FILE))
    except ValidationError as e:
        raise DesignModelError(f"Invalid contract in {CONTRACT_FILE}: {e}") from e

    rules_raw = _read_json(base / RULES_FILE)
    if not isinstance(rules_raw, dict):
        raise DesignModelError(f"{RULES_FILE} must contain an object")

    return DesignModel(
        tokens=Tokens(tokens_raw),
        contract=contract,
        constraints=ConstraintSet.from_raw(rules_raw),
    )


@lru_cache(maxsize=4)
def _load_cached(directory: str) -> DesignModel:
    return load_base_model(directory)


def get_base_model() -> DesignModel:
    """Process-wide design model, loaded once per store directory."""
    return _load_cached(str(get_design_model_dir()))


# =============================================================================
# Overrides
# =============================================================================


def merge_deep(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge overrides into a copy of base.

    Nested mappings merge recursively; lists and scalars replace; None
    values in overrides are skipped.
    """
    result = copy.deepcopy(dict(base))
    for key, override in overrides.items():
        if override is None:
            continue
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(override, Mapping):
            result[key] = merge_deep(current, override)
        else:
            result[key] = copy.deepcopy(override)
    return result


_TOKEN_GROUPS = ("radius", "spacing", "typography")


def validate_token_overrides(overrides: Any) -> bool:
    """Shallow type check of token overrides against the token layout."""
    if not isinstance(overrides, Mapping):
        return False

    color = overrides.get("color")
    if color is not None:
        if not isinstance(color, Mapping):
            return False
        for key in ("primary", "onPrimary"):
            if key in color and not isinstance(color[key], str):
                return False

    for group in _TOKEN_GROUPS:
        if group in overrides and not isinstance(overrides[group], Mapping):
            return False

    return True


def validate_constraint_overrides(overrides: Any) -> bool:
    """Type check raw constraint overrides against the known rule kinds."""
    if not isinstance(overrides, Mapping):
        return False

    for rule_id, value in overrides.items():
        definition = KNOWN_CONSTRAINTS.get(rule_id)
        if definition is None or value is None:
            continue
        if definition.kind == "toggle" and not isinstance(value, bool):
            return False
        if definition.kind == "numeric" and not _is_number(value):
            return False

    opacity = overrides.get("disabledOpacity")
    if _is_number(opacity) and not 0 <= opacity <= 1:
        return False

    return True


__all__ = [
    "CONTRACT_FILE",
    "Constraint",
    "ConstraintDefinition",
    "ConstraintSet",
    "Contract",
    "DesignModel",
    "DesignModelError",
    "KNOWN_CONSTRAINTS",
    "NumericConstraint",
    "PropSchema",
    "RULES_FILE",
    "SizeTokens",
    "TOKENS_FILE",
    "ToggleConstraint",
    "Tokens",
    "get_base_model",
    "load_base_model",
    "merge_deep",
    "validate_constraint_overrides",
    "validate_token_overrides",
]
