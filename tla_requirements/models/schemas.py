"""
Data schemas for the analyzer.
Requirement records flow through extraction, proof runs, formalization,
export and persistence; the Prove* models are the remote evaluation contract.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from tla_requirements.utils.ids import new_requirement_id

from .enums import Kind, Priority, ProofStatus


# ── Formalization ────────────────────────────────────────


class Formalization(BaseModel):
    """Monitor + theorem block synthesized for a non-functional requirement."""
    title: str
    tla: str
    assumptions: list[str] = []


# ── Requirement ──────────────────────────────────────────


class Requirement(BaseModel):
    """A single requirement candidate extracted from a TLA+ module."""
    id: str = Field(default_factory=new_requirement_id, frozen=True)
    text: str
    kind: Kind = Kind.FUNCTIONAL
    priority: Priority = Priority.MEDIUM
    rationale: str = ""
    suggestions: list[str] = Field(default_factory=list, max_length=4)
    status: ProofStatus = ProofStatus.UNPROVEN
    evidence: Optional[str] = None
    formalization: Optional[Formalization] = None
    selected: bool = False

    model_config = ConfigDict(validate_assignment=True)


class KindDecision(BaseModel):
    kind: Kind
    rationale: str


class RequirementStats(BaseModel):
    total: int = 0
    functional: int = 0
    non_functional: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    proved: int = 0
    failed: int = 0


# ── Prover contract ──────────────────────────────────────


class ProveRequest(BaseModel):
    """Body accepted by the authoritative /api/prove endpoint."""
    tla: str = ""
    module_name: str = Field("Module", alias="moduleName")
    invariants: list[str] = []

    model_config = ConfigDict(populate_by_name=True)


class InvariantVerdict(BaseModel):
    name: str
    status: ProofStatus


class ProveResponse(BaseModel):
    per_invariant: list[InvariantVerdict] = Field(default_factory=list, alias="perInvariant")
    evidence: str = ""

    model_config = ConfigDict(populate_by_name=True)


class ProofRunResult(BaseModel):
    """Outcome of a prove-all run, remote or fallback."""
    requirements: list[Requirement] = []
    advisory: Optional[str] = None
    used_fallback: bool = False
