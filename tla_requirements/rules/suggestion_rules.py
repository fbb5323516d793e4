"""
Suggestion Rules — deterministic improvement hints for a requirement.
At most four hints, in generation order; callers rely on hints[0].
"""

from __future__ import annotations

import logging
import re

from tla_requirements.models.enums import Kind
from tla_requirements.rules.classification_rules import ClassificationRules
from tla_requirements.services.linguistics import LinguisticTool, guard

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 4

_TEMPORAL_RE = re.compile(r"(\balways\b|\beventually\b|\buntil\b|\[\]|<>)", re.IGNORECASE)
_MODAL_RE = re.compile(r"\b(shall|must|always)\b", re.IGNORECASE)
_NAMED_PROPERTY_RE = re.compile(r"\b(Invariant|TypeOK|THEOREM|Spec)\b", re.IGNORECASE)
_BOUND_RE = re.compile(r"(under|within|<=|<|>=|>|\bms\b|\bs\b)", re.IGNORECASE)


class SuggestionRules:
    """Improvement hints conditioned on kind and linguistic features."""

    def __init__(self, classification_rules: ClassificationRules | None = None):
        self._classification = classification_rules or ClassificationRules()

    def suggest(self, sentence: str, kind: Kind, tool: LinguisticTool | None = None) -> list[str]:
        out: list[str] = []

        if kind == Kind.FUNCTIONAL:
            if not _MODAL_RE.search(sentence):
                out.append("Use a normative modal like 'shall' or 'must'.")
            if not _TEMPORAL_RE.search(sentence):
                out.append("State the temporal mode: 'always', 'eventually', or 'until'.")
            if not _NAMED_PROPERTY_RE.search(sentence):
                out.append("Tie it to a named invariant and a theorem (e.g., Spec => []Invariant).")
            nlp = guard(tool)
            verbs = nlp.verbs(sentence)
            nouns = nlp.nouns(sentence)
            if verbs and nouns:
                out.append(f"Rewrite: The system shall {verbs[0]} {' '.join(nouns[:2])}.")
        else:
            label = self._classification.detect_nfr_label(sentence)
            cluster = label.value.lower() if label is not None else "quality"
            if not _BOUND_RE.search(sentence):
                out.append("Quantify it with a bound (e.g., under 40 ms, >= 99.9% uptime).")
            out.append(f"Consider a monitor variable and an invariant recording {cluster} compliance.")
            out.append("Add testable acceptance criteria.")

        return out[:MAX_SUGGESTIONS]
