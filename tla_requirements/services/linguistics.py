"""
Linguistic tool — optional sentence / verb / noun extraction.

The analyzer works without it.  Three implementations:
  - NullLinguisticTool     → always empty; callers use their fallbacks
  - SpacyLinguisticTool    → spaCy pipeline, lazy-loaded on first use
  - GuardedLinguisticTool  → wraps any tool, turns failures into empty results
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from tla_requirements.config import get_settings

logger = logging.getLogger(__name__)


class LinguisticTool(Protocol):
    def segment(self, text: str) -> list[str]: ...

    def verbs(self, text: str) -> list[str]: ...

    def nouns(self, text: str) -> list[str]: ...


class NullLinguisticTool:
    """No linguistic capability available."""

    def segment(self, text: str) -> list[str]:
        return []

    def verbs(self, text: str) -> list[str]:
        return []

    def nouns(self, text: str) -> list[str]:
        return []


class SpacyLinguisticTool:
    """spaCy-backed tool. Verbs are returned as lemmas (infinitive form)."""

    def __init__(self, model_name: str | None = None, nlp: Any = None):
        self.model_name = model_name or get_settings().spacy_model
        self._nlp = nlp
        self._load_error: Exception | None = None

    def _load_model(self):
        """Lazy-load the spaCy pipeline on first use."""
        if self._load_error is not None:
            raise self._load_error
        if self._nlp is None:
            try:
                import spacy

                self._nlp = spacy.load(self.model_name, disable=["ner", "textcat"])
            except Exception as e:
                # Later calls re-raise this without reloading
                self._load_error = e
                logger.warning(f"[NLP] Could not load spaCy model {self.model_name}: {e}")
                raise
            logger.info(f"Loaded spaCy model: {self.model_name}")
        # Pipelines without a parser/senter still need sentence boundaries
        if not (self._nlp.has_pipe("parser") or self._nlp.has_pipe("senter") or self._nlp.has_pipe("sentencizer")):
            self._nlp.add_pipe("sentencizer")
        return self._nlp

    def segment(self, text: str) -> list[str]:
        doc = self._load_model()(text)
        return [s.text.strip() for s in doc.sents if s.text.strip()]

    def verbs(self, text: str) -> list[str]:
        doc = self._load_model()(text)
        return [t.lemma_ or t.text for t in doc if t.pos_ == "VERB"]

    def nouns(self, text: str) -> list[str]:
        doc = self._load_model()(text)
        return [t.text for t in doc if t.pos_ in ("NOUN", "PROPN")]


class GuardedLinguisticTool:
    """Any failure of the wrapped tool reads as "feature not available"."""

    def __init__(self, inner: LinguisticTool):
        self.inner = inner

    def _call(self, method: str, text: str) -> list[str]:
        try:
            result = getattr(self.inner, method)(text)
            return [str(item) for item in result or []]
        except Exception as exc:
            logger.debug(f"[NLP] {type(self.inner).__name__}.{method} unavailable: {exc}")
            return []

    def segment(self, text: str) -> list[str]:
        return self._call("segment", text)

    def verbs(self, text: str) -> list[str]:
        return self._call("verbs", text)

    def nouns(self, text: str) -> list[str]:
        return self._call("nouns", text)


def guard(tool: LinguisticTool | None) -> GuardedLinguisticTool:
    """Wrap *tool* (or the configured default) so it never raises."""
    if isinstance(tool, GuardedLinguisticTool):
        return tool
    return GuardedLinguisticTool(tool if tool is not None else get_linguistic_tool())


_tool_instance: LinguisticTool | None = None


def get_linguistic_tool() -> LinguisticTool:
    """Return the configured tool (singleton). Unknown backends mean none."""
    global _tool_instance
    if _tool_instance is not None:
        return _tool_instance

    settings = get_settings()
    backend = settings.nlp_backend.strip().lower()
    if backend == "spacy":
        _tool_instance = SpacyLinguisticTool(settings.spacy_model)
        logger.info(f"Linguistic tool: spaCy ({settings.spacy_model})")
    else:
        if backend not in ("", "none"):
            logger.warning(f"Unknown nlp_backend '{settings.nlp_backend}', running without a linguistic tool")
        _tool_instance = NullLinguisticTool()
    return _tool_instance


def reset_linguistic_tool() -> None:
    """Drop the cached tool (after settings change)."""
    global _tool_instance
    _tool_instance = None
