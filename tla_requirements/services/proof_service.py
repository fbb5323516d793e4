"""
Proof Service — coarse proof status for invariants and requirements.

Two text heuristics, neither of them a prover:
  - decide_status()  → authoritative form used by /api/prove
  - mock_prove()     → local fallback over the requirement working set

A sentence that merely mentions a proved invariant name is marked Proved
too.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tla_requirements.models.enums import ProofStatus
from tla_requirements.models.schemas import Requirement, ProveResponse

logger = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"

_NEVER_ALLOW_RE = re.compile(r"never\s+allow", re.IGNORECASE)
_NEXT_BODY_RE = re.compile(r"Next\s*==[\s\S]+")
_DEFINITION_RE = re.compile(rf"^({_IDENT})\s*==", re.MULTILINE)
_THEOREM_LINE_RE = re.compile(rf"THEOREM[^\n]*Spec\s*=>\s*\[\]\s*({_IDENT})")
_NEXT_PARAGRAPH_RE = re.compile(r"Next\s*==[\s\S]*?\n\n")
_NEVER_ALLOW_PRED_RE = re.compile(rf"never\s+allow\s+({_IDENT})", re.IGNORECASE)


# ── Authoritative form ───────────────────────────────────


def decide_status(name: str, tla: str) -> ProofStatus:
    """
    Proved  — a theorem of the shape  THEOREM ... Spec => []<name>  exists
    Failed  — the text says "never allow" and defines a non-empty Next
    Unclear — otherwise
    """
    theorem_re = re.compile(rf"THEOREM[\s\S]*?Spec\s*=>\s*\[\]\s*{re.escape(name)}\b")
    if theorem_re.search(tla):
        return ProofStatus.PROVED

    if _NEVER_ALLOW_RE.search(tla) and _NEXT_BODY_RE.search(tla):
        return ProofStatus.FAILED

    return ProofStatus.UNCLEAR


def evaluate_invariants(tla: str, invariants: list[str], module_name: str = "Module") -> ProveResponse:
    """Authoritative verdict for every invariant name."""
    per_invariant = [
        {"name": name, "status": decide_status(name, tla)}
        for name in invariants
    ]
    return ProveResponse(
        per_invariant=per_invariant,
        evidence=f"Backend examined {module_name} with {len(invariants)} invariant(s).",
    )


# ── Local fallback form ──────────────────────────────────


@dataclass(frozen=True)
class SpecNames:
    """Names pulled out of a TLA+ module for cross-referencing."""
    invariants: list[str]
    theorems: list[str]
    next_bodies: str


def collect_spec_names(tla: str) -> SpecNames:
    return SpecNames(
        invariants=_DEFINITION_RE.findall(tla),
        theorems=_THEOREM_LINE_RE.findall(tla),
        next_bodies=" ".join(m.group(0) for m in _NEXT_PARAGRAPH_RE.finditer(tla)),
    )


def collect_theorem_invariants(tla: str) -> list[str]:
    """Invariant names concluded by  THEOREM ... Spec => []Name  lines."""
    return _THEOREM_LINE_RE.findall(tla)


def mock_prove(requirements: list[Requirement], tla: str) -> list[Requirement]:
    """
    Cross-reference requirement text against theorem conclusions,
    definitions and Next bodies.  Returns updated copies; records with
    no match keep their current status and evidence.
    """
    names = collect_spec_names(tla)
    logger.debug(
        f"[PROVE] Local heuristic: {len(names.invariants)} definitions, "
        f"{len(names.theorems)} theorem(s)"
    )

    updated: list[Requirement] = []
    for req in requirements:
        status = req.status
        evidence = req.evidence

        inv_used = next((nm for nm in names.theorems if nm in req.text), None)
        inv_defined = next((nm for nm in names.invariants if nm in req.text), None)
        never_allow = _NEVER_ALLOW_PRED_RE.search(req.text)

        if inv_used and inv_defined:
            status = ProofStatus.PROVED
            evidence = f"Theorem asserts Spec => []{inv_used} and {inv_defined} is defined."
        elif never_allow:
            pred = never_allow.group(1)
            if pred in names.next_bodies:
                status = ProofStatus.FAILED
                evidence = f"Next mentions '{pred}', contradicting 'never allow'."

        updated.append(req.model_copy(update={"status": status, "evidence": evidence}, deep=True))
    return updated


# ── Merge remote verdicts ────────────────────────────────


def apply_prover_results(requirements: list[Requirement], response: ProveResponse) -> list[Requirement]:
    """Attach per-invariant verdicts to requirements that mention the name."""
    verdicts: dict[str, ProofStatus] = {}
    for verdict in response.per_invariant:
        verdicts[verdict.name] = verdict.status

    updated: list[Requirement] = []
    for req in requirements:
        hit = next((nm for nm in verdicts if nm in req.text), None)
        if hit is None:
            updated.append(req.model_copy(deep=True))
            continue
        updated.append(req.model_copy(update={
            "status": verdicts.get(hit) or ProofStatus.UNCLEAR,
            "evidence": response.evidence,
        }, deep=True))
    return updated
