"""
Prover Client — the single remote call in the analyzer.

POSTs {tla, moduleName, invariants} to the configured prover endpoint.
Any transport error, non-2xx answer, malformed body or timeout surfaces
as ProverUnavailableError; prove_requirements() turns that into the local
heuristic plus an advisory message.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from tla_requirements.config import get_settings
from tla_requirements.models.schemas import ProofRunResult, ProveRequest, ProveResponse, Requirement
from tla_requirements.services.proof_service import (
    apply_prover_results,
    collect_theorem_invariants,
    mock_prove,
)

logger = logging.getLogger(__name__)

FALLBACK_ADVISORY = "Prover backend unreachable. Used mock prover."


class ProverUnavailableError(RuntimeError):
    """The remote prover could not produce a usable answer."""


class ProverClient:
    """One outstanding request per call, bounded by timeout_ms."""

    def __init__(
        self,
        url: str | None = None,
        timeout_ms: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.url = url or settings.prover_url
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.prover_client_timeout_ms
        self._transport = transport

    async def prove(
        self,
        tla: str,
        invariants: list[str],
        module_name: str | None = None,
    ) -> ProveResponse:
        request = ProveRequest(tla=tla, invariants=invariants, module_name=module_name or "Module")
        payload = request.model_dump(by_alias=True)
        timeout_s = self.timeout_ms / 1000

        logger.info(f"[PROVE] POST {self.url} ({len(invariants)} invariant(s))")
        try:
            async with httpx.AsyncClient(timeout=timeout_s, transport=self._transport) as client:
                resp = await asyncio.wait_for(client.post(self.url, json=payload), timeout=timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise ProverUnavailableError(f"Prover timed out after {self.timeout_ms} ms") from exc
        except httpx.HTTPError as exc:
            raise ProverUnavailableError(f"Prover request failed: {exc}") from exc

        if not resp.is_success:
            raise ProverUnavailableError(resp.text or f"Prover answered HTTP {resp.status_code}")

        try:
            return ProveResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ProverUnavailableError(f"Malformed prover response: {exc}") from exc


async def prove_requirements(
    requirements: list[Requirement],
    tla: str,
    client: ProverClient | None = None,
    module_name: str | None = None,
) -> ProofRunResult:
    """
    Prove every THEOREM-concluded invariant remotely and merge verdicts
    into matching requirements; fall back to mock_prove() on failure.
    """
    client = client or ProverClient()
    invariants = collect_theorem_invariants(tla)

    try:
        response = await client.prove(tla, invariants, module_name)
    except ProverUnavailableError as exc:
        logger.warning(f"[PROVE] {exc}; falling back to local heuristic")
        return ProofRunResult(
            requirements=mock_prove(requirements, tla),
            advisory=FALLBACK_ADVISORY,
            used_fallback=True,
        )

    logger.info(f"[PROVE] {len(response.per_invariant)} verdict(s): {response.evidence}")
    return ProofRunResult(requirements=apply_prover_results(requirements, response))


def prove_requirements_sync(
    requirements: list[Requirement],
    tla: str,
    client: ProverClient | None = None,
    module_name: str | None = None,
) -> ProofRunResult:
    """Blocking wrapper for callers without an event loop (CLI)."""
    return asyncio.run(prove_requirements(requirements, tla, client, module_name))
