"""Tool implementations for the design-model MCP server.

Each function takes the raw JSON arguments of a tool call, validates them
into domain types and returns a JSON-compatible dict. Malformed arguments
raise `InvalidParamsError`; anything else propagates and is masked by the
server.
"""

import logging
from typing import Any, Mapping

from fastmcp.exceptions import ToolError
from pydantic import BaseModel, ValidationError

from design_model.fixes import flatten_patches, suggest_fixes
from design_model.model import DesignModel, get_base_model
from design_model.patch import apply_patches
from design_model.resolver import max_primary_allowed
from design_model.schema import Intent, PatchOperation, Violation, to_wire
from design_model.validator import effective_constraints, validate

logger = logging.getLogger(__name__)


class InvalidParamsError(ToolError):
    """A tool call was missing required arguments or carried malformed ones."""

    def __init__(self, message: str):
        super().__init__(f"Invalid params: {message}")


# =============================================================================
# Argument parsing
# =============================================================================


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "value"
    return f"{location}: {first['msg']}"


def _parse_model(name: str, value: Any, model: type[BaseModel]) -> Any:
    if value is None:
        raise InvalidParamsError(f"{name} is required")
    if not isinstance(value, Mapping):
        raise InvalidParamsError(f"{name} must be an object")
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidParamsError(f"{name} is malformed ({_describe(e)})") from e


def _parse_list(name: str, value: Any, model: type[BaseModel]) -> list[Any]:
    if value is None:
        raise InvalidParamsError(f"{name} is required")
    if not isinstance(value, list):
        raise InvalidParamsError(f"{name} must be an array")
    return [_parse_model(f"{name}[{i}]", item, model) for i, item in enumerate(value)]


def _parse_enabled(value: Any) -> dict[str, bool]:
    if value is None:
        raise InvalidParamsError("enabledConstraints is required")
    if not isinstance(value, Mapping):
        raise InvalidParamsError("enabledConstraints must be an object")
    for key, flag in value.items():
        if not isinstance(flag, bool):
            raise InvalidParamsError(f"enabledConstraints.{key} must be a boolean")
    return dict(value)


# =============================================================================
# Tools
# =============================================================================


def get_design_model(model: DesignModel | None = None) -> dict[str, Any]:
    """Tokens, contract and enabled-constraint flags of the base model."""
    model = model or get_base_model()
    return {
        "tokens": model.tokens.to_dict(),
        "contracts": model.contract.model_dump(mode="json", exclude_none=True),
        "constraints": {"enabledConstraints": model.constraints.enabled_flags()},
    }


def validate_view(
    view_spec: Any,
    enabled_constraints: Any,
    model: DesignModel | None = None,
) -> dict[str, Any]:
    """Validate a view spec; returns {valid, violations, appliedConstraints}."""
    intent = _parse_model("viewSpec", view_spec, Intent)
    enabled = _parse_enabled(enabled_constraints)
    result = validate(intent, enabled, model or get_base_model())
    logger.debug(f"validate '{intent.view_id}': {len(result.violations)} violation(s)")
    return result.to_dict()


def suggest_view_fixes(
    view_spec: Any,
    enabled_constraints: Any,
    violations: Any,
    model: DesignModel | None = None,
) -> dict[str, Any]:
    """Suggest repairs; returns the flattened patch list as {fixes}."""
    intent = _parse_model("viewSpec", view_spec, Intent)
    enabled = _parse_enabled(enabled_constraints)
    parsed = _parse_list("violations", violations, Violation)

    model = model or get_base_model()
    constraints = effective_constraints(model.constraints, enabled)
    fixes = suggest_fixes(
        intent,
        parsed,
        enabled,
        max_primary=max_primary_allowed(constraints),
    )
    return {"fixes": [to_wire(patch) for patch in flatten_patches(fixes)]}


def apply_view_fixes(view_spec: Any, fixes: Any) -> dict[str, Any]:
    """Apply patches; returns {viewSpec, outcomes}."""
    intent = _parse_model("viewSpec", view_spec, Intent)
    patches = _parse_list("fixes", fixes, PatchOperation)
    application = apply_patches(intent, patches)
    return {
        "viewSpec": to_wire(application.intent),
        "outcomes": [outcome.to_dict() for outcome in application.outcomes],
    }


__all__ = [
    "InvalidParamsError",
    "apply_view_fixes",
    "get_design_model",
    "suggest_view_fixes",
    "validate_view",
]
