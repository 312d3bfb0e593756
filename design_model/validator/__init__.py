"""Validator micro API.

Example:
    >>> from design_model.intent import parse_intent
    >>> from design_model.model import get_base_model
    >>> from design_model.validator import validate
    >>> intent = parse_intent("Create two primary buttons", "demo")
    >>> validate(intent, {"onlyOnePrimaryPerView": True}, get_base_model()).valid
    False
"""

from .lib import ValidationResult, effective_constraints, validate

__all__ = ["ValidationResult", "effective_constraints", "validate"]
