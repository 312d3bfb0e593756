"""design-model: constraint-driven Button resolution with deterministic repair."""

from design_model.intent import parse_intent
from design_model.model import DesignModel, get_base_model, load_base_model
from design_model.pipeline import AutoFixResult, run, run_with_auto_fix
from design_model.resolver import resolve, resolve_with_model
from design_model.schema import Intent, ResolvedView, Violation
from design_model.validator import ValidationResult, validate

__version__ = "0.1.0"

__all__ = [
    # Model
    "DesignModel",
    "load_base_model",
    "get_base_model",
    # Types
    "Intent",
    "ResolvedView",
    "Violation",
    # Stages
    "parse_intent",
    "resolve",
    "resolve_with_model",
    "validate",
    "ValidationResult",
    # Pipeline
    "run",
    "run_with_auto_fix",
    "AutoFixResult",
]
