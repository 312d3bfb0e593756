"""Design model micro API.

Read-only stores the resolver consumes:
    - Tokens: named design values addressed by dotted paths
    - Contract: allowed props and values for the Button component
    - ConstraintSet: typed constraint rules, error messages and size map

Example:
    >>> from design_model.model import get_base_model
    >>> model = get_base_model()
    >>> model.contract.allowed("size")
    ('sm', 'md')
"""

from .lib import (
    CONTRACT_FILE,
    KNOWN_CONSTRAINTS,
    RULES_FILE,
    TOKENS_FILE,
    Constraint,
    ConstraintDefinition,
    ConstraintSet,
    Contract,
    DesignModel,
    DesignModelError,
    NumericConstraint,
    PropSchema,
    SizeTokens,
    ToggleConstraint,
    Tokens,
    get_base_model,
    load_base_model,
    merge_deep,
    validate_constraint_overrides,
    validate_token_overrides,
)
from .templates import (
    CONSTRAINT_TEMPLATES,
    ConstraintTemplate,
    TemplateValue,
    enabled_from_templates,
    get_template,
    overrides_from_templates,
)

__all__ = [
    # Stores
    "Tokens",
    "Contract",
    "PropSchema",
    "ConstraintSet",
    "Constraint",
    "ToggleConstraint",
    "NumericConstraint",
    "SizeTokens",
    "DesignModel",
    # Loading
    "load_base_model",
    "get_base_model",
    "DesignModelError",
    "TOKENS_FILE",
    "CONTRACT_FILE",
    "RULES_FILE",
    "KNOWN_CONSTRAINTS",
    "ConstraintDefinition",
    # Overrides
    "merge_deep",
    "validate_token_overrides",
    "validate_constraint_overrides",
    # Templates
    "CONSTRAINT_TEMPLATES",
    "ConstraintTemplate",
    "TemplateValue",
    "get_template",
    "enabled_from_templates",
    "overrides_from_templates",
]
