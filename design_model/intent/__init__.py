"""Intent parsing micro API.

Turns a free-form prompt into a structured Intent using an ordered list
of matcher rules. No side effects, no external reads.

Example:
    >>> from design_model.intent import parse_intent
    >>> intent = parse_intent('Create a ghost button "Cancel"', view_id="demo")
    >>> intent.components[0].props.variant
    'ghost'
"""

from .lib import (
    DEFAULT_LABEL,
    DEFAULT_MATCHERS,
    CompoundMatcher,
    CountMatcher,
    DisabledMatcher,
    IntentFragment,
    LabeledMatcher,
    Matcher,
    QuotedLabelMatcher,
    SizeMatcher,
    VariantMatcher,
    detect_disabled,
    detect_size,
    detect_variant,
    parse_intent,
)

__all__ = [
    # Parser
    "parse_intent",
    "DEFAULT_MATCHERS",
    "DEFAULT_LABEL",
    # Matchers
    "Matcher",
    "IntentFragment",
    "CompoundMatcher",
    "VariantMatcher",
    "DisabledMatcher",
    "SizeMatcher",
    "QuotedLabelMatcher",
    "LabeledMatcher",
    "CountMatcher",
    # Helpers
    "detect_variant",
    "detect_disabled",
    "detect_size",
]
