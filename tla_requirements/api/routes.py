"""
API routes — thin HTTP layer over the analyzer.

Routes:
  GET  /health          → API health check
  POST /api/prove       → authoritative proof status per invariant
  POST /api/analyze     → extract + classify requirements from TLA+ text
  POST /api/rewrite     → temporal rewrite of one NFR sentence
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tla_requirements.config import get_settings
from tla_requirements.models.schemas import Formalization, Requirement, RequirementStats
from tla_requirements.services.extraction_service import extract_candidates
from tla_requirements.services.proof_service import evaluate_invariants
from tla_requirements.services.temporal_rewrite import rewrite_nfr_to_temporal
from tla_requirements.services.workspace_service import compute_stats

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
prover_router = APIRouter()
analysis_router = APIRouter()

BAD_REQUEST_MESSAGE = "Expected { tla, moduleName, invariants[] }"


# ── Request / response schemas ───────────────────────────
class AnalyzeRequest(BaseModel):
    tla: str = ""


class AnalyzeResponse(BaseModel):
    requirements: list[Requirement] = []
    stats: RequirementStats


class RewriteRequest(BaseModel):
    text: str
    step_ms: Optional[int] = None


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Prover ───────────────────────────────────────────────

@prover_router.post("/prove")
async def prove(request: Request):
    """
    Decide Proved / Failed / Unclear for each invariant name.
    Evaluation runs off the event loop, bounded by prover_timeout_ms.
    """
    settings = get_settings()
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = None
    body = payload if isinstance(payload, dict) else {}
    tla = body.get("tla") or ""
    invariants = body.get("invariants", [])
    module_name = body.get("moduleName") or "Module"

    if not isinstance(tla, str) or not tla or not isinstance(invariants, list):
        logger.warning("[PROVER-API] Rejected malformed request")
        return JSONResponse(status_code=400, content={"error": BAD_REQUEST_MESSAGE})

    timeout_ms = settings.prover_timeout_ms
    try:
        result = await asyncio.wait_for(
            asyncio.to_thread(evaluate_invariants, tla, [str(n) for n in invariants], str(module_name)),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        logger.error(f"[PROVER-API] Timed out after {timeout_ms} ms")
        return JSONResponse(status_code=504, content={"error": f"Prover timed out after {timeout_ms} ms"})
    except Exception as e:
        logger.exception(f"[PROVER-API] Evaluation failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info(f"[PROVER-API] {result.evidence}")
    return result.model_dump(mode="json", by_alias=True)


# ── Analysis ─────────────────────────────────────────────

@analysis_router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(body: AnalyzeRequest):
    requirements = extract_candidates(body.tla)
    return AnalyzeResponse(requirements=requirements, stats=compute_stats(requirements))


@analysis_router.post("/rewrite", response_model=Formalization)
async def rewrite(body: RewriteRequest):
    step_ms = body.step_ms or get_settings().step_ms
    return rewrite_nfr_to_temporal(body.text, step_ms)
