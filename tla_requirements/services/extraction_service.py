"""
Requirement Extraction — pull candidate requirements out of a TLA+ module.

Reads every (* ... *) annotation block plus any line carrying a spec cue,
segments them into sentences, deduplicates, then classifies and annotates
each sentence into a Requirement record.
"""

from __future__ import annotations

import logging
import re

from tla_requirements.models.enums import Kind, Priority, ProofStatus
from tla_requirements.models.schemas import Requirement
from tla_requirements.rules.classification_rules import ClassificationRules
from tla_requirements.rules.suggestion_rules import SuggestionRules
from tla_requirements.services.linguistics import LinguisticTool, guard
from tla_requirements.services.segmenter import split_sentences

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"\(\*([\s\S]*?)\*\)")  # non-greedy
_NEWLINES_RE = re.compile(r"\n+")
_STARS_ONLY_RE = re.compile(r"^\*+$")
_CUE_LINE_RE = re.compile(r"(Requirement:|Req:|Assume|THEOREM|Invariant|invariant|\[\]|<>)")

# Sentences this short are fragments, not requirements
_MIN_SENTENCE_LENGTH = 7


class RequirementExtractor:
    """Candidate extractor over raw TLA+ source text."""

    def __init__(
        self,
        tool: LinguisticTool | None = None,
        classification_rules: ClassificationRules | None = None,
        suggestion_rules: SuggestionRules | None = None,
    ):
        self.tool = guard(tool)
        self.classification = classification_rules or ClassificationRules()
        self.suggestions = suggestion_rules or SuggestionRules(self.classification)

    def extract(self, tla_text: str) -> list[Requirement]:
        # ── 1. Annotation blocks and cue lines ──────────────
        buckets = self.collect_candidate_lines(tla_text)
        logger.debug(f"[EXTRACT] {len(buckets)} candidate lines")

        # ── 2. Segment + deduplicate ────────────────────────
        sentences = [
            s.strip()
            for line in buckets
            for s in split_sentences(line, self.tool)
        ]
        unique = self._deduplicate(sentences)
        logger.debug(f"[EXTRACT] Deduplicated: {len(sentences)} → {len(unique)} sentences")

        # ── 3. Classify + annotate ──────────────────────────
        requirements = [self.annotate(s) for s in unique]

        func_count = sum(1 for r in requirements if r.kind == Kind.FUNCTIONAL)
        logger.info(
            f"[EXTRACT] {len(requirements)} requirements "
            f"(Functional: {func_count}, Non-functional: {len(requirements) - func_count})"
        )
        return requirements

    @staticmethod
    def collect_candidate_lines(tla_text: str) -> list[str]:
        """Comment bodies first, then flagged source lines, in source order."""
        buckets: list[str] = []
        for match in _COMMENT_RE.finditer(tla_text):
            body = _NEWLINES_RE.sub(" ", match.group(1)).strip()
            if body:
                buckets.append(body)

        for line in tla_text.split("\n"):
            trimmed = line.strip()
            if _STARS_ONLY_RE.match(trimmed):
                continue
            if _CUE_LINE_RE.search(trimmed):
                buckets.append(trimmed)
        return buckets

    @staticmethod
    def _deduplicate(sentences: list[str]) -> list[str]:
        """Exact-text dedup (first occurrence wins), fragments dropped."""
        seen: set[str] = set()
        unique: list[str] = []
        for sentence in sentences:
            if sentence in seen:
                continue
            seen.add(sentence)
            if len(sentence) >= _MIN_SENTENCE_LENGTH:
                unique.append(sentence)
        return unique

    def annotate(self, sentence: str) -> Requirement:
        decision = self.classification.classify_kind(sentence, self.tool)
        return Requirement(
            text=sentence,
            kind=decision.kind,
            priority=self.classification.score_priority(sentence),
            rationale=decision.rationale,
            suggestions=self.suggestions.suggest(sentence, decision.kind, self.tool),
            status=ProofStatus.UNPROVEN,
        )


def extract_candidates(tla_text: str, tool: LinguisticTool | None = None) -> list[Requirement]:
    """Extract requirement records from *tla_text*."""
    return RequirementExtractor(tool).extract(tla_text)


def new_blank_requirement() -> Requirement:
    """A user-added placeholder requirement."""
    return Requirement(
        text="The system shall ...",
        kind=Kind.FUNCTIONAL,
        priority=Priority.MEDIUM,
        rationale="User-added",
        suggestions=["Clarify actor, condition, and effect."],
        status=ProofStatus.UNPROVEN,
    )
