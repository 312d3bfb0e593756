"""Schema module - wire types shared across the design-model pipeline.

Example usage:
    >>> from design_model.schema import Intent, to_wire
    >>> intent = Intent.model_validate({"viewId": "checkout", "components": []})
    >>> to_wire(intent)
    {'viewId': 'checkout', 'components': []}
"""

from .lib import (
    PROP_FIELDS,
    AppliedConstraint,
    ButtonProps,
    ComponentSpec,
    ComponentType,
    ConstraintScope,
    ConstraintStatus,
    Decision,
    DecisionType,
    Intent,
    PatchOp,
    PatchOperation,
    ResolvedNode,
    ResolvedView,
    ResolveError,
    Size,
    StyleValue,
    TraceEntry,
    Variant,
    Violation,
    ViolationCode,
    WireModel,
    node_id_for,
    to_wire,
)

__all__ = [
    # Vocabularies
    "ComponentType",
    "ConstraintScope",
    "ConstraintStatus",
    "DecisionType",
    "PatchOp",
    "Size",
    "Variant",
    "ViolationCode",
    "PROP_FIELDS",
    # Models
    "WireModel",
    "ButtonProps",
    "ComponentSpec",
    "Intent",
    "PatchOperation",
    "Violation",
    "ResolveError",
    "Decision",
    "AppliedConstraint",
    "TraceEntry",
    "ResolvedNode",
    "ResolvedView",
    "StyleValue",
    # Helpers
    "node_id_for",
    "to_wire",
]
