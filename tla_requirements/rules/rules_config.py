"""
Rules Config Store — ordered rule tables used by the classifier.

Every table is a list: match order is significant and the first match wins.
Defaults are built in; an optional JSON file (settings.rules_config_path)
may override them.  Falls back to defaults if the file is missing or bad.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from tla_requirements.config import get_settings
from tla_requirements.models.enums import NFRCluster, Priority

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class NFRClusterRule(BaseModel):
    """One quality cluster and the cue words that select it."""
    label: NFRCluster
    keywords: list[str]


class PriorityRule(BaseModel):
    level: Priority
    cues: list[str]


class ClassificationConfig(BaseModel):
    """Keyword tables for kind and priority decisions."""
    functional_keywords: list[str] = [
        "shall",
        "must",
        "will",
        "ensure",
        "if",
        "when",
        "then",
        "always",
        "eventually",
        "invariant",
        "liveness",
        "safety",
        "init",
        "next",
        "spec",
        "theorem",
    ]
    nfr_clusters: list[NFRClusterRule] = [
        NFRClusterRule(
            label=NFRCluster.PERFORMANCE,
            keywords=["latency", "throughput", "deadline", "response", "ms", "rate", "load", "time"],
        ),
        NFRClusterRule(
            label=NFRCluster.RELIABILITY,
            keywords=["fault", "recover", "availability", "retry", "crash", "robust", "mtbf", "uptime"],
        ),
        NFRClusterRule(
            label=NFRCluster.SAFETY,
            keywords=["hazard", "violation", "deadlock", "collision", "unsafe"],
        ),
        NFRClusterRule(
            label=NFRCluster.SECURITY,
            keywords=["auth", "encrypt", "integrity", "confidential", "tamper", "attack", "threat"],
        ),
        NFRClusterRule(
            label=NFRCluster.USABILITY,
            keywords=["accessible", "learn", "intuitive", "ux", "human", "operator"],
        ),
        NFRClusterRule(
            label=NFRCluster.MAINTAINABILITY,
            keywords=["log", "trace", "monitor", "debug", "observability", "maintain"],
        ),
    ]
    priority_rules: list[PriorityRule] = [
        PriorityRule(level=Priority.HIGH, cues=["must", "shall", "safety", "hazard", "deadlock", "always"]),
        PriorityRule(level=Priority.MEDIUM, cues=["should", "ensure", "reliab", "security", "eventually"]),
        PriorityRule(level=Priority.LOW, cues=["may", "could", "nice", "optional", "usability"]),
    ]
    # Consulted only when no priority rule matched
    escalation_cues: list[str] = ["deadlock", "hazard"]
    default_priority: Priority = Priority.MEDIUM


# ── Store class ──────────────────────────────────────────

class RulesConfigStore:
    """
    Loads rule configs from the optional override file, else defaults.
    Cached after first load for the lifetime of the store.
    """

    def __init__(self, config_path: str | None = None):
        self.settings = get_settings()
        self.config_path = config_path if config_path is not None else self.settings.rules_config_path
        self._cache: dict[str, BaseModel] = {}

    def _read_overrides(self) -> dict[str, Any]:
        if not self.config_path:
            return {}
        path = Path(self.config_path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Rules override {path} not usable, using defaults: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Rules override {path} is not a JSON object, using defaults")
            return {}
        return data

    def _load_config(self, rule_type: str, model_cls: type[BaseModel]) -> BaseModel:
        """Load from the override file or return defaults."""
        if rule_type in self._cache:
            return self._cache[rule_type]

        overrides = self._read_overrides().get(rule_type)
        if isinstance(overrides, dict):
            try:
                config = model_cls(**overrides)
                self._cache[rule_type] = config
                logger.info(f"Loaded {rule_type} rules from {self.config_path}")
                return config
            except ValidationError as e:
                logger.warning(f"Invalid {rule_type} rules in {self.config_path}: {e}")

        # Defaults
        config = model_cls()
        self._cache[rule_type] = config
        return config

    def get_classification_config(self) -> ClassificationConfig:
        return self._load_config("classification", ClassificationConfig)  # type: ignore[return-value]
