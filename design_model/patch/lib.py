"""Pure patch application over intents.

Only `replace` operations addressing `/components/<index>/props/<field>`
are honored. Every other operation is reported as a no-op with a reason
instead of being dropped silently; nothing here raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from design_model.schema import PROP_FIELDS, Intent, PatchOp, PatchOperation, to_wire

logger = logging.getLogger(__name__)


class PatchStatus(str, Enum):
    """Outcome of one patch operation."""

    APPLIED = "applied"
    NOOP = "noop"


@dataclass(frozen=True)
class PatchOutcome:
    """Result of applying a single patch operation."""

    patch: PatchOperation
    status: PatchStatus
    reason: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == PatchStatus.APPLIED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"patch": to_wire(self.patch), "status": self.status.value}
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass
class PatchApplication:
    """A patched copy of an intent plus one outcome per operation."""

    intent: Intent
    outcomes: list[PatchOutcome] = field(default_factory=list)

    @property
    def noops(self) -> list[PatchOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.applied]


def _locate(patch: PatchOperation, component_count: int) -> tuple[int, str] | str:
    """Target (index, field) of a patch, or the reason it cannot apply."""
    if patch.op != PatchOp.REPLACE:
        return f"unsupported op '{patch.op.value}'"

    parts = [part for part in patch.path.split("/") if part]
    if len(parts) != 4 or parts[0] != "components" or parts[2] != "props":
        return f"unsupported path '{patch.path}'"

    index_part, prop = parts[1], parts[3]
    if not (index_part.isascii() and index_part.isdigit()):
        return f"invalid component index '{index_part}'"
    index = int(index_part)
    if index >= component_count:
        return f"component index {index} out of range"
    if prop not in PROP_FIELDS:
        return f"unknown prop '{prop}'"
    expected = bool if prop == "disabled" else str
    if not isinstance(patch.value, expected):
        return f"value {patch.value!r} is not a valid {prop}"
    return index, prop


def apply_patches(intent: Intent, patches: Sequence[PatchOperation]) -> PatchApplication:
    """Apply patches to a deep copy of the intent.

    Args:
        intent: Source intent. Never modified.
        patches: Operations in application order.

    Returns:
        PatchApplication with the patched copy and per-operation outcomes.
    """
    patched = intent.model_copy(deep=True)
    outcomes: list[PatchOutcome] = []

    for patch in patches:
        target = _locate(patch, len(patched.components))
        if isinstance(target, str):
            logger.debug(f"Patch {patch.op.value} {patch.path} not applied: {target}")
            outcomes.append(PatchOutcome(patch=patch, status=PatchStatus.NOOP, reason=target))
            continue

        index, prop = target
        setattr(patched.components[index].props, prop, patch.value)
        outcomes.append(PatchOutcome(patch=patch, status=PatchStatus.APPLIED))

    return PatchApplication(intent=patched, outcomes=outcomes)


def apply_fixes(intent: Intent, patches: Sequence[PatchOperation]) -> Intent:
    """Apply patches and return only the patched copy."""
    return apply_patches(intent, patches).intent


__all__ = [
    "PatchApplication",
    "PatchOutcome",
    "PatchStatus",
    "apply_fixes",
    "apply_patches",
]
