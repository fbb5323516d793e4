"""
Workspace Service — operations on the working set of requirements.

Every function returns a new list; records are copied, never mutated
in place.  Unknown ids raise KeyError.
"""

from __future__ import annotations

import logging

from tla_requirements.config import get_settings
from tla_requirements.models.enums import Kind, Priority, ProofStatus
from tla_requirements.models.schemas import Requirement, RequirementStats
from tla_requirements.rules.suggestion_rules import SuggestionRules
from tla_requirements.services.extraction_service import new_blank_requirement
from tla_requirements.services.linguistics import LinguisticTool
from tla_requirements.services.proof_service import mock_prove
from tla_requirements.services.temporal_rewrite import rewrite_nfr_to_temporal

logger = logging.getLogger(__name__)

ALL = "All"


def _index_of(requirements: list[Requirement], req_id: str) -> int:
    for i, req in enumerate(requirements):
        if req.id == req_id:
            return i
    raise KeyError(f"Requirement {req_id} not found")


def _replace(requirements: list[Requirement], index: int, updated: Requirement) -> list[Requirement]:
    out = list(requirements)
    out[index] = updated
    return out


def add_blank(requirements: list[Requirement]) -> list[Requirement]:
    """Insert a user-added requirement at the front."""
    return [new_blank_requirement(), *requirements]


def remove(requirements: list[Requirement], req_id: str) -> list[Requirement]:
    _index_of(requirements, req_id)
    return [r for r in requirements if r.id != req_id]


def update_text(requirements: list[Requirement], req_id: str, text: str) -> list[Requirement]:
    """Edit text only; kind, priority and rationale stay as classified."""
    i = _index_of(requirements, req_id)
    return _replace(requirements, i, requirements[i].model_copy(update={"text": text}, deep=True))


def refresh_suggestions(
    requirements: list[Requirement],
    req_id: str,
    tool: LinguisticTool | None = None,
) -> list[Requirement]:
    """Regenerate suggestions from the current text and kind."""
    i = _index_of(requirements, req_id)
    req = requirements[i]
    suggestions = SuggestionRules().suggest(req.text, req.kind, tool)
    return _replace(requirements, i, req.model_copy(update={"suggestions": suggestions}, deep=True))


def formalize(requirements: list[Requirement], req_id: str, step_ms: int | None = None) -> list[Requirement]:
    """Attach (or overwrite) the temporal rewrite of one requirement."""
    i = _index_of(requirements, req_id)
    req = requirements[i]
    spec = rewrite_nfr_to_temporal(req.text, step_ms or get_settings().step_ms)
    logger.info(f"[REWRITE] {req.id}: {spec.title}")
    return _replace(requirements, i, req.model_copy(update={"formalization": spec}, deep=True))


def prove_one(requirements: list[Requirement], req_id: str, tla: str) -> list[Requirement]:
    """Select one requirement and run the local heuristic over the set."""
    i = _index_of(requirements, req_id)
    selected = _replace(requirements, i, requirements[i].model_copy(update={"selected": True}, deep=True))
    return mock_prove(selected, tla)


def select_all(requirements: list[Requirement], value: bool) -> list[Requirement]:
    return [r.model_copy(update={"selected": value}, deep=True) for r in requirements]


def filter_requirements(
    requirements: list[Requirement],
    kind: Kind | str = ALL,
    priority: Priority | str = ALL,
    query: str = "",
) -> list[Requirement]:
    """Filter by kind, priority and a case-insensitive text query."""
    q = query.strip().lower()
    return [
        r for r in requirements
        if (kind == ALL or r.kind == kind)
        and (priority == ALL or r.priority == priority)
        and (q == "" or q in r.text.lower())
    ]


def compute_stats(requirements: list[Requirement]) -> RequirementStats:
    return RequirementStats(
        total=len(requirements),
        functional=sum(1 for r in requirements if r.kind == Kind.FUNCTIONAL),
        non_functional=sum(1 for r in requirements if r.kind == Kind.NON_FUNCTIONAL),
        high=sum(1 for r in requirements if r.priority == Priority.HIGH),
        medium=sum(1 for r in requirements if r.priority == Priority.MEDIUM),
        low=sum(1 for r in requirements if r.priority == Priority.LOW),
        proved=sum(1 for r in requirements if r.status == ProofStatus.PROVED),
        failed=sum(1 for r in requirements if r.status == ProofStatus.FAILED),
    )
