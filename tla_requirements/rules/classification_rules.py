"""
Classification Rules — kind, priority and NFR cluster for one sentence.
All matching is case-insensitive substring matching over ordered tables.
"""

from __future__ import annotations

import logging

from tla_requirements.models.enums import Kind, NFRCluster, Priority
from tla_requirements.models.schemas import KindDecision
from tla_requirements.rules.rules_config import RulesConfigStore
from tla_requirements.services.linguistics import LinguisticTool, guard

logger = logging.getLogger(__name__)

FUNCTIONAL_RATIONALE = "Uses spec cues (Init/Next/Spec/invariant/temporal) or normative verbs"
ACTION_VERB_RATIONALE = "Contains action verbs"
QUALITY_RATIONALE = "No spec cues; reads like a quality constraint"


class ClassificationRules:
    """Kind / priority decisions driven by the classification config."""

    def __init__(self, config_store: RulesConfigStore | None = None):
        self._config_store = config_store or RulesConfigStore()

    def detect_nfr_label(self, sentence: str) -> NFRCluster | None:
        """First cluster (in table order) with a cue in *sentence*, else None."""
        config = self._config_store.get_classification_config()
        low = sentence.lower()
        for rule in config.nfr_clusters:
            if any(word in low for word in rule.keywords):
                return rule.label
        return None

    def has_functional_cue(self, sentence: str) -> bool:
        config = self._config_store.get_classification_config()
        low = sentence.lower()
        return any(keyword in low for keyword in config.functional_keywords)

    def classify_kind(self, sentence: str, tool: LinguisticTool | None = None) -> KindDecision:
        """
        Decide Functional vs Non-functional.
        NFR cue without functional cue → Non-functional; functional cue →
        Functional; action verbs → Functional; otherwise Non-functional.
        """
        has_fn = self.has_functional_cue(sentence)
        nfr_label = self.detect_nfr_label(sentence)

        if nfr_label is not None and not has_fn:
            return KindDecision(
                kind=Kind.NON_FUNCTIONAL,
                rationale=f"Mentions {nfr_label.value.lower()} cues",
            )
        if has_fn:
            return KindDecision(kind=Kind.FUNCTIONAL, rationale=FUNCTIONAL_RATIONALE)

        if guard(tool).verbs(sentence):
            return KindDecision(kind=Kind.FUNCTIONAL, rationale=ACTION_VERB_RATIONALE)

        return KindDecision(kind=Kind.NON_FUNCTIONAL, rationale=QUALITY_RATIONALE)

    def score_priority(self, sentence: str) -> Priority:
        """Level of the first priority rule with a matching cue."""
        config = self._config_store.get_classification_config()
        low = sentence.lower()
        for rule in config.priority_rules:
            if any(cue in low for cue in rule.cues):
                return rule.level
        if any(cue in low for cue in config.escalation_cues):
            return Priority.HIGH
        return config.default_priority
