"""
Sentence segmentation for annotation blocks and flagged lines.
Uses the linguistic tool when it yields sentences, else a regex split.
"""

from __future__ import annotations

import re

from tla_requirements.services.linguistics import LinguisticTool, guard

_BLOCK_COMMENT_RE = re.compile(r"\(\*[\s\S]*?\*\)")
_SENTENCE_BREAK_RE = re.compile(r"[.!?\n]+")


def fallback_split(text: str) -> list[str]:
    """Drop (* ... *) comments, split on . ! ? and newline runs."""
    stripped = _BLOCK_COMMENT_RE.sub(" ", text)
    return [s.strip() for s in _SENTENCE_BREAK_RE.split(stripped) if s.strip()]


def split_sentences(text: str, tool: LinguisticTool | None = None) -> list[str]:
    """Split *text* into trimmed, non-empty sentences. Never raises."""
    sentences = guard(tool).segment(text)
    if sentences:
        return sentences
    return fallback_split(text)
