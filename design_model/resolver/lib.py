"""Intent resolution: schema checks, cardinality, then styles with provenance.

Resolution runs in three phases, each short-circuiting to a node-less
result carrying diagnostics:

1. Schema validation of every component against the contract.
2. View-level primary-button cardinality.
3. Style resolution in a fixed order, recording one trace entry per style.

Failures are returned as data (`errors`/`violations`), never raised.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Union

from design_model.model import ConstraintSet, Contract, DesignModel, Tokens
from design_model.schema import (
    ComponentSpec,
    Intent,
    ResolvedNode,
    ResolvedView,
    ResolveError,
    Size,
    StyleValue,
    TraceEntry,
    Variant,
    Violation,
    ViolationCode,
    node_id_for,
)

logger = logging.getLogger(__name__)

PX_PER_REM = 16
SECONDARY_BORDER = "1px solid rgba(0,0,0,0.1)"

ONLY_ONE_PRIMARY = "onlyOnePrimaryPerView"
MAX_PRIMARY = "maxPrimaryButtonsPerView"
GHOST_NO_BACKGROUND = "ghostHasNoBackground"
SECONDARY_SURFACE = "secondaryUsesSurface"
DISABLED_OPACITY = "disabledOpacity"

_REM = re.compile(r"(\d+(?:\.\d+)?|\.\d+)rem")

_FALLBACK_MESSAGES = {
    ViolationCode.MISSING_LABEL: "Button requires a non-empty label",
    ViolationCode.INVALID_VARIANT: "Button variant must be one of: primary, secondary, ghost",
    ViolationCode.INVALID_SIZE: "Button size must be one of: sm, md",
}


def format_number(value: Union[int, float]) -> str:
    """Render a number without a trailing `.0` (8.0 -> "8", 0.4 -> "0.4")."""
    return f"{value:g}"


def rem_to_px(value: str) -> float:
    """Convert a `<n>rem` token to pixels; anything else is 0."""
    found = _REM.search(value)
    if found is None:
        return 0
    return float(found.group(1)) * PX_PER_REM


# =============================================================================
# Phase 1: schema
# =============================================================================


def _schema_failure(
    component: ComponentSpec, contract: Contract, constraints: ConstraintSet
) -> tuple[ViolationCode, str] | None:
    """First schema failure of a component, if any."""
    if component.type != contract.component:
        fallback = f"Unsupported component type: {component.type}"
        return (
            ViolationCode.INVALID_COMPONENT_TYPE,
            constraints.error_message(ViolationCode.INVALID_COMPONENT_TYPE.value, fallback),
        )

    props = component.props
    if not props.label.strip():
        code = ViolationCode.MISSING_LABEL
        return code, constraints.error_message(code.value, _FALLBACK_MESSAGES[code])

    variants = contract.allowed("variant") or tuple(v.value for v in Variant)
    if props.variant not in variants:
        code = ViolationCode.INVALID_VARIANT
        return code, constraints.error_message(code.value, _FALLBACK_MESSAGES[code])

    sizes = contract.allowed("size") or tuple(s.value for s in Size)
    if props.size not in sizes:
        code = ViolationCode.INVALID_SIZE
        return code, constraints.error_message(code.value, _FALLBACK_MESSAGES[code])

    return None


# =============================================================================
# Phase 2: cardinality
# =============================================================================


def primary_limit(constraints: ConstraintSet) -> tuple[str, float] | None:
    """Active primary-cardinality constraint id and its maximum, if any."""
    explicit = constraints.value(MAX_PRIMARY)
    if explicit is not None:
        return MAX_PRIMARY, explicit
    if constraints.is_active(ONLY_ONE_PRIMARY):
        return ONLY_ONE_PRIMARY, 1
    return None


def max_primary_allowed(constraints: ConstraintSet) -> int:
    """Whole number of primaries `maxPrimaryButtonsPerView` repairs keep (1 when unset)."""
    value = constraints.value(MAX_PRIMARY)
    if value is None or not math.isfinite(value):
        return 1
    return max(math.floor(value), 0)


def _cardinality_violation(
    intent: Intent, constraints: ConstraintSet
) -> Violation | None:
    limit = primary_limit(constraints)
    if limit is None:
        return None

    constraint_id, maximum = limit
    primary_ids = [
        node_id_for(index)
        for index, component in enumerate(intent.components)
        if component.props.variant == Variant.PRIMARY.value
    ]
    if len(primary_ids) <= maximum:
        return None

    plural = "" if maximum == 1 else "s"
    message = (
        f"Constraint violation ({constraint_id}): Maximum {format_number(maximum)} "
        f"primary button{plural} allowed per view, but {len(primary_ids)} found"
    )
    return Violation(
        code=ViolationCode.MULTIPLE_PRIMARY_BUTTONS.value,
        message=message,
        constraint_id=constraint_id,
        node_ids=tuple(primary_ids),
    )


# =============================================================================
# Phase 3: styles
# =============================================================================


class _StyleSheet:
    """Ordered styles with exactly one trace entry per key."""

    def __init__(self) -> None:
        self.styles: dict[str, StyleValue] = {}
        self.trace: list[TraceEntry] = []

    def set(self, key: str, value: StyleValue, source: str) -> None:
        if key in self.styles:
            self.trace = [entry for entry in self.trace if entry.key != key]
        self.styles[key] = value
        self.trace.append(TraceEntry(key=key, value=value, source=source))

    def token(self, key: str, path: str, tokens: Tokens) -> None:
        self.set(key, tokens.resolve(path), f"token: {path}")


def _resolve_node(
    index: int, component: ComponentSpec, tokens: Tokens, constraints: ConstraintSet
) -> ResolvedNode:
    props = component.props
    sheet = _StyleSheet()

    # Variant colors
    if props.variant == Variant.PRIMARY.value:
        sheet.token("backgroundColor", "color.primary", tokens)
        sheet.token("color", "color.onPrimary", tokens)
    elif props.variant == Variant.SECONDARY.value:
        if constraints.is_active(SECONDARY_SURFACE):
            sheet.set(
                "backgroundColor",
                tokens.resolve("color.surface"),
                f"constraint(active): {SECONDARY_SURFACE} → token: color.surface",
            )
            sheet.token("color", "color.onSurface", tokens)
            sheet.set("border", SECONDARY_BORDER, "rule: secondary variant → border")
    elif props.variant == Variant.GHOST.value:
        if constraints.is_active(GHOST_NO_BACKGROUND):
            sheet.set(
                "backgroundColor",
                "transparent",
                f"constraint(active): {GHOST_NO_BACKGROUND}",
            )
        sheet.token("color", "color.primary", tokens)

    # Size padding
    size_tokens = constraints.size_map.get(props.size)
    if size_tokens is not None:
        px = rem_to_px(tokens.resolve(size_tokens.px))
        py = rem_to_px(tokens.resolve(size_tokens.py))
        sheet.set(
            "padding",
            f"{format_number(py)}px {format_number(px)}px",
            f"constraint(active): sizeMap.{props.size}.py → token: {size_tokens.py} "
            f"→ {format_number(py)}px, "
            f"constraint(active): sizeMap.{props.size}.px → token: {size_tokens.px} "
            f"→ {format_number(px)}px",
        )

    # Typography and radius
    sheet.token("fontSize", "typography.button.fontSize", tokens)
    sheet.token("fontWeight", "typography.button.fontWeight", tokens)
    sheet.token("lineHeight", "typography.button.lineHeight", tokens)
    sheet.token("borderRadius", "radius.md", tokens)

    # Interaction state
    if props.disabled:
        opacity = constraints.value(DISABLED_OPACITY)
        if opacity is not None and math.isfinite(opacity):
            sheet.set(
                "opacity",
                opacity,
                f"constraint(active): {DISABLED_OPACITY}={format_number(opacity)}",
            )
        sheet.set("cursor", "not-allowed", "rule: disabled → not-allowed")
    else:
        sheet.set("cursor", "pointer", "rule: default → pointer")

    if props.variant == Variant.SECONDARY.value and "border" not in sheet.styles:
        sheet.set("border", SECONDARY_BORDER, "rule: secondary variant → border")

    return ResolvedNode(
        id=node_id_for(index),
        type=component.type,
        props=props.model_copy(),
        styles=sheet.styles,
        trace=sheet.trace,
    )


# =============================================================================
# Entry points
# =============================================================================


def resolve(
    intent: Intent,
    tokens: Tokens,
    contract: Contract,
    constraints: ConstraintSet,
) -> ResolvedView:
    """Resolve an intent into styled nodes or diagnostics.

    Args:
        intent: Parsed or patched intent. Not modified.
        tokens: Token store.
        contract: Component contract.
        constraints: Effective constraint set.

    Returns:
        ResolvedView whose `nodes` are populated only when no violation fired.
    """
    enabled = constraints.enabled_flags()
    errors: list[ResolveError] = []
    violations: list[Violation] = []

    for index, component in enumerate(intent.components):
        failure = _schema_failure(component, contract, constraints)
        if failure is None:
            continue
        code, message = failure
        errors.append(ResolveError(code=code.value, message=message))
        violations.append(
            Violation(code=code.value, message=message, node_ids=(node_id_for(index),))
        )

    if violations:
        logger.debug(f"View '{intent.view_id}' blocked by {len(violations)} schema error(s)")
        return ResolvedView(
            view_id=intent.view_id,
            errors=errors,
            violations=violations,
            enabled_constraints=enabled,
        )

    cardinality = _cardinality_violation(intent, constraints)
    if cardinality is not None:
        logger.debug(f"View '{intent.view_id}' blocked: {cardinality.message}")
        return ResolvedView(
            view_id=intent.view_id,
            errors=[ResolveError(code=cardinality.code, message=cardinality.message)],
            violations=[cardinality],
            enabled_constraints=enabled,
        )

    nodes = [
        _resolve_node(index, component, tokens, constraints)
        for index, component in enumerate(intent.components)
    ]
    return ResolvedView(
        view_id=intent.view_id,
        nodes=nodes,
        enabled_constraints=enabled,
    )


def resolve_with_model(
    intent: Intent,
    model: DesignModel,
    constraints: ConstraintSet | None = None,
) -> ResolvedView:
    """Resolve against a design model, optionally with an effective constraint set."""
    return resolve(
        intent,
        model.tokens,
        model.contract,
        constraints if constraints is not None else model.constraints,
    )


__all__ = [
    "DISABLED_OPACITY",
    "GHOST_NO_BACKGROUND",
    "MAX_PRIMARY",
    "ONLY_ONE_PRIMARY",
    "PX_PER_REM",
    "SECONDARY_BORDER",
    "SECONDARY_SURFACE",
    "format_number",
    "max_primary_allowed",
    "primary_limit",
    "rem_to_px",
    "resolve",
    "resolve_with_model",
]
