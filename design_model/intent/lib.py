"""Deterministic prompt-to-intent parsing.

A prompt is run through an ordered list of independent matchers. Each
matcher inspects the prompt and returns a partial `IntentFragment` (or
None). Fragments are merged first-wins per field, so earlier matchers take
precedence and new phrasings are added by inserting a matcher rather than
editing a branching function.

A matcher that returns a fragment with `components` set is terminal: its
components become the intent as-is.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Sequence

from design_model.schema import ButtonProps, ComponentSpec, Intent, Size, Variant

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "Continue"

_QUOTED = re.compile(r'"([^"]+)"')
_LABELED = re.compile(r"labeled\s+(\w+)", re.IGNORECASE)
_COUNT = re.compile(r"\b(two|2)\s+(?:\w+\s+)?buttons?\b")
_COMPOUND = re.compile(
    r'\b(?:a|one)\s+(\w+)\s+button[^"]*(?:with\s+label\s+)?(?:"([^"]+)")?'
    r'[^"]*\band\s+(?:(?:a|one)\s+)?(\w+)\s+button',
    re.IGNORECASE,
)


@dataclass(frozen=True)
class IntentFragment:
    """Partial intent produced by a single matcher.

    Unset fields (None) leave the decision to later matchers or defaults.
    """

    variant: str | None = None
    disabled: bool | None = None
    size: str | None = None
    label: str | None = None
    count: int | None = None
    components: tuple[ComponentSpec, ...] | None = None


_MERGED_FIELDS = tuple(f.name for f in fields(IntentFragment) if f.name != "components")


# =============================================================================
# Detection helpers
# =============================================================================


def detect_variant(text: str) -> str | None:
    """Variant named in text, by priority secondary > ghost > primary."""
    lowered = text.lower()
    for variant in (Variant.SECONDARY, Variant.GHOST, Variant.PRIMARY):
        if variant.value in lowered:
            return variant.value
    return None


def detect_disabled(text: str) -> bool:
    return "disabled" in text.lower()


def detect_size(text: str) -> str:
    """`small` or a standalone `sm` selects sm; anything else is md."""
    padded = f" {text.lower()} "
    if "small" in padded or " sm " in padded:
        return Size.SM.value
    return Size.MD.value


# =============================================================================
# Matchers
# =============================================================================


class Matcher(ABC):
    """A single phrasing rule.

    Subclasses set `name` and implement `match`.
    """

    name: str = "matcher"

    @abstractmethod
    def match(self, prompt: str) -> IntentFragment | None:
        """Inspect the prompt; return a fragment or None when not applicable."""


class CompoundMatcher(Matcher):
    """Two-clause "a X button ... and a Y button ..." phrasing.

    Yields exactly two components. Labels are taken positionally from the
    quoted substrings of the prompt, falling back to "Button 1"/"Button 2".
    """

    name = "compound"

    def match(self, prompt: str) -> IntentFragment | None:
        found = _COMPOUND.search(prompt)
        if found is None:
            return None

        quoted = _QUOTED.findall(prompt)
        disabled = detect_disabled(prompt)
        size = detect_size(prompt)

        components = []
        for position, word in enumerate((found.group(1), found.group(3))):
            label = quoted[position] if position < len(quoted) else f"Button {position + 1}"
            components.append(
                ComponentSpec(
                    props=ButtonProps(
                        label=label,
                        variant=detect_variant(word) or Variant.PRIMARY.value,
                        size=size,
                        disabled=disabled,
                    )
                )
            )
        return IntentFragment(components=tuple(components))


class VariantMatcher(Matcher):
    name = "variant"

    def match(self, prompt: str) -> IntentFragment | None:
        variant = detect_variant(prompt)
        return IntentFragment(variant=variant) if variant else None


class DisabledMatcher(Matcher):
    name = "disabled"

    def match(self, prompt: str) -> IntentFragment | None:
        return IntentFragment(disabled=True) if detect_disabled(prompt) else None


class SizeMatcher(Matcher):
    name = "size"

    def match(self, prompt: str) -> IntentFragment | None:
        size = detect_size(prompt)
        return IntentFragment(size=size) if size == Size.SM.value else None


class QuotedLabelMatcher(Matcher):
    """First quoted substring becomes the label."""

    name = "quoted-label"

    def match(self, prompt: str) -> IntentFragment | None:
        found = _QUOTED.search(prompt)
        return IntentFragment(label=found.group(1)) if found else None


class LabeledMatcher(Matcher):
    """`labeled <word>` names the label."""

    name = "labeled"

    def match(self, prompt: str) -> IntentFragment | None:
        found = _LABELED.search(prompt)
        return IntentFragment(label=found.group(1)) if found else None


class CountMatcher(Matcher):
    """`two`/`2` followed by button(s) requests two components."""

    name = "count"

    def match(self, prompt: str) -> IntentFragment | None:
        return IntentFragment(count=2) if _COUNT.search(prompt.lower()) else None


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    CompoundMatcher(),
    VariantMatcher(),
    DisabledMatcher(),
    SizeMatcher(),
    QuotedLabelMatcher(),
    LabeledMatcher(),
    CountMatcher(),
)


# =============================================================================
# Parser
# =============================================================================


def parse_intent(
    prompt: str,
    view_id: str,
    matchers: Sequence[Matcher] = DEFAULT_MATCHERS,
) -> Intent:
    """Parse a natural-language prompt into an Intent.

    Total and deterministic: never raises and always yields at least one
    component.

    Args:
        prompt: Free-form request, e.g. 'Create a primary button "Continue"'.
        view_id: Identifier of the view the intent describes.
        matchers: Ordered matcher rules; earlier matchers win per field.

    Returns:
        Intent with one or more Button components.

    Example:
        >>> intent = parse_intent("Create two primary buttons", view_id="checkout")
        >>> [c.props.label for c in intent.components]
        ['Primary 1', 'Primary 2']
    """
    merged: dict[str, object] = {}
    for matcher in matchers:
        fragment = matcher.match(prompt)
        if fragment is None:
            continue
        logger.debug(f"Matcher '{matcher.name}' matched: {fragment}")

        if fragment.components is not None:
            return Intent(view_id=view_id, components=list(fragment.components))

        for name in _MERGED_FIELDS:
            value = getattr(fragment, name)
            if value is not None and name not in merged:
                merged[name] = value

    variant = str(merged.get("variant", Variant.PRIMARY.value))
    explicit_label = merged.get("label")
    count = int(merged.get("count", 1))

    components = []
    for index in range(count):
        if explicit_label is not None:
            label = str(explicit_label)
        elif count > 1 and variant == Variant.PRIMARY.value:
            label = f"Primary {index + 1}"
        else:
            label = DEFAULT_LABEL

        components.append(
            ComponentSpec(
                props=ButtonProps(
                    label=label,
                    variant=variant,
                    size=str(merged.get("size", Size.MD.value)),
                    disabled=bool(merged.get("disabled", False)),
                )
            )
        )

    return Intent(view_id=view_id, components=components)


__all__ = [
    "CompoundMatcher",
    "CountMatcher",
    "DEFAULT_LABEL",
    "DEFAULT_MATCHERS",
    "DisabledMatcher",
    "IntentFragment",
    "LabeledMatcher",
    "Matcher",
    "QuotedLabelMatcher",
    "SizeMatcher",
    "VariantMatcher",
    "detect_disabled",
    "detect_size",
    "detect_variant",
    "parse_intent",
]
