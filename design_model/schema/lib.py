"""Authoritative wire types for the design-model pipeline.

This module is the single source of truth for the data shapes exchanged
between the parser, resolver, validator, fix suggester and patch applier,
and for what crosses the tool boundary. It provides:
- Closed vocabularies (component type, variant, size, patch ops, ...)
- Pydantic models serialized with camelCase aliases
- Helpers for stable node ids and wire serialization

Intent props are typed as plain strings on purpose: the resolver reports
out-of-vocabulary values as schema violations instead of failing at
construction time.
"""

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

StyleValue = Union[str, int, float]


# =============================================================================
# Vocabularies
# =============================================================================


class ComponentType(str, Enum):
    """Supported component types (closed vocabulary)."""

    BUTTON = "Button"


class Variant(str, Enum):
    """Visual emphasis of a button."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    GHOST = "ghost"


class Size(str, Enum):
    """Button size scale."""

    SM = "sm"
    MD = "md"


class PatchOp(str, Enum):
    """JSON-patch style operations a patch may declare."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


class ConstraintScope(str, Enum):
    """What a constraint governs."""

    COMPONENT = "component"
    VIEW = "view"
    PATTERN = "pattern"


class ConstraintStatus(str, Enum):
    """Whether a constraint fired during auto-repair."""

    TRIGGERED = "triggered"
    SKIPPED = "skipped"


class DecisionType(str, Enum):
    """Kinds of decisions recorded on repaired nodes."""

    AUTO_FIX = "autoFix"
    NORMALIZE = "normalize"
    DEFAULT_APPLIED = "defaultApplied"


class ViolationCode(str, Enum):
    """Codes for schema errors and constraint violations."""

    INVALID_COMPONENT_TYPE = "invalidComponentType"
    MISSING_LABEL = "missingLabel"
    INVALID_VARIANT = "invalidVariant"
    INVALID_SIZE = "invalidSize"
    MULTIPLE_PRIMARY_BUTTONS = "multiplePrimaryButtons"


# Fields of ButtonProps that patches may target
PROP_FIELDS: tuple[str, ...] = ("label", "variant", "size", "disabled")


# =============================================================================
# Base Model
# =============================================================================


class WireModel(BaseModel):
    """Base for models that travel over the tool boundary in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Intent
# =============================================================================


class ButtonProps(WireModel):
    """Props of a requested button."""

    label: str = Field("", description="Visible button text")
    variant: str = Field(Variant.PRIMARY.value, description="primary, secondary or ghost")
    size: str = Field(Size.MD.value, description="sm or md")
    disabled: bool = Field(False, description="Whether the button is inert")


class ComponentSpec(WireModel):
    """A single requested component."""

    type: str = Field(ComponentType.BUTTON.value, description="Component type")
    props: ButtonProps = Field(default_factory=ButtonProps)


class Intent(WireModel):
    """Structured representation of a requested view.

    Attributes:
        view_id: Caller-supplied identifier of the view.
        components: Requested components in document order.
    """

    view_id: str = Field(..., description="Identifier of the view")
    components: list[ComponentSpec] = Field(default_factory=list)


# =============================================================================
# Patches, Violations, Decisions
# =============================================================================


class PatchOperation(WireModel):
    """A structural edit targeting a field inside an Intent."""

    op: PatchOp
    path: str = Field(..., description="Slash-delimited pointer into the intent")
    value: Any = None
    from_: str | None = Field(None, alias="from")


class Violation(WireModel):
    """A detected breach of a schema rule or constraint."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    constraint_id: str | None = None
    node_ids: tuple[str, ...] | None = None


class ResolveError(WireModel):
    """An error recorded during resolution."""

    code: str
    message: str


class Decision(WireModel):
    """Traceability record attached to a node after a repair."""

    type: DecisionType
    reason: str
    action: str
    details: dict[str, Any] | None = None


class AppliedConstraint(WireModel):
    """Record of a constraint that fired during auto-repair."""

    id: str
    scope: ConstraintScope
    status: ConstraintStatus
    message: str
    targets: list[str] | None = None
    resolution: str | None = None
    patch: list[PatchOperation] | None = None


# =============================================================================
# Resolved Output
# =============================================================================


class TraceEntry(WireModel):
    """Provenance of one style value."""

    key: str
    value: StyleValue
    source: str


class ResolvedNode(WireModel):
    """A fully styled component ready for rendering."""

    id: str
    type: str
    props: ButtonProps
    styles: dict[str, StyleValue] = Field(default_factory=dict)
    trace: list[TraceEntry] = Field(default_factory=list)
    decisions: list[Decision] | None = None


class ResolvedView(WireModel):
    """Output of resolution: styled nodes, or diagnostics when blocked.

    `nodes` is non-empty only when `violations` is empty.
    """

    view_id: str
    nodes: list[ResolvedNode] = Field(default_factory=list)
    errors: list[ResolveError] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    enabled_constraints: dict[str, bool] = Field(default_factory=dict)
    applied_constraints: list[AppliedConstraint] = Field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        """True when a violation prevented node output."""
        return bool(self.violations)


# =============================================================================
# Helpers
# =============================================================================


def node_id_for(index: int) -> str:
    """Stable node id derived from component position."""
    return f"button-{index}"


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Serialize a model for the tool boundary (camelCase, no null optionals)."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "AppliedConstraint",
    "ButtonProps",
    "ComponentSpec",
    "ComponentType",
    "ConstraintScope",
    "ConstraintStatus",
    "Decision",
    "DecisionType",
    "Intent",
    "PROP_FIELDS",
    "PatchOp",
    "PatchOperation",
    "ResolveError",
    "ResolvedNode",
    "ResolvedView",
    "Size",
    "StyleValue",
    "TraceEntry",
    "Variant",
    "Violation",
    "ViolationCode",
    "WireModel",
    "node_id_for",
    "to_wire",
]
