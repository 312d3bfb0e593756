"""Constraint template catalog for the Button component.

Templates describe the constraints an author can switch on as pills:
toggles carry no value, numeric templates carry a default. Each template
turns an authored value into a raw override patch for the rules store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Union

logger = logging.getLogger(__name__)

TemplateValue = Union[bool, int, float, None]


@dataclass(frozen=True)
class ConstraintTemplate:
    """An authorable constraint.

    Attributes:
        id: Constraint id in the rules store.
        label: Short human label.
        description: What the constraint enforces.
        kind: "toggle" or "numeric".
        default_value: Value used when the author supplies none.
    """

    id: str
    label: str
    description: str
    kind: Literal["toggle", "numeric"]
    default_value: TemplateValue = None

    def to_patch(self, value: TemplateValue = None) -> dict[str, Any]:
        """Raw rules override for this template."""
        if value is None:
            value = True if self.kind == "toggle" else self.default_value
        return {self.id: value}

    def is_enabled(self, value: TemplateValue) -> bool:
        """Whether an authored value switches the constraint on."""
        if self.kind == "toggle":
            return value is True
        return value is not None and not isinstance(value, bool)


CONSTRAINT_TEMPLATES: tuple[ConstraintTemplate, ...] = (
    ConstraintTemplate(
        id="onlyOnePrimaryPerView",
        label="Only one primary button per view",
        description="Enforces that only one primary button can exist in a single view",
        kind="toggle",
    ),
    ConstraintTemplate(
        id="ghostHasNoBackground",
        label="Ghost buttons have no background",
        description="Ghost variant buttons must have transparent background",
        kind="toggle",
    ),
    ConstraintTemplate(
        id="disabledOpacity",
        label="Disabled buttons reduce opacity",
        description="Sets the opacity value for disabled buttons (0-1)",
        kind="numeric",
        default_value=0.4,
    ),
    ConstraintTemplate(
        id="maxPrimaryButtonsPerView",
        label="Max primary buttons per view",
        description="Maximum number of primary buttons allowed in a single view",
        kind="numeric",
        default_value=1,
    ),
)

_TEMPLATES_BY_ID = {template.id: template for template in CONSTRAINT_TEMPLATES}


def get_template(template_id: str) -> ConstraintTemplate | None:
    """Look up a template by constraint id."""
    return _TEMPLATES_BY_ID.get(template_id)


def enabled_from_templates(
    active: Iterable[tuple[str, TemplateValue]],
) -> dict[str, bool]:
    """Build the enabled-constraints map from authored (template id, value) pairs.

    Unknown template ids are skipped.
    """
    enabled: dict[str, bool] = {}
    for template_id, value in active:
        template = get_template(template_id)
        if template is None:
            logger.debug(f"Skipping unknown constraint template '{template_id}'")
            continue
        enabled[template_id] = template.is_enabled(value)
    return enabled


def overrides_from_templates(
    active: Iterable[tuple[str, TemplateValue]],
) -> dict[str, Any]:
    """Merge the raw rules overrides of authored (template id, value) pairs."""
    overrides: dict[str, Any] = {}
    for template_id, value in active:
        template = get_template(template_id)
        if template is not None:
            overrides.update(template.to_patch(value))
    return overrides


__all__ = [
    "CONSTRAINT_TEMPLATES",
    "ConstraintTemplate",
    "TemplateValue",
    "enabled_from_templates",
    "get_template",
    "overrides_from_templates",
]
