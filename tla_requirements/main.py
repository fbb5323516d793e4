"""
TLA+ Requirements Analyzer — Main Entry Point

Analyze a module (CLI):
    python -m tla_requirements path/to/Module.tla
    python -m tla_requirements                      # bundled demo module

Prove, formalize NFRs and export:
    python -m tla_requirements Module.tla --prove --formalize --export csv --out reqs.csv

Run the prover API server:
    python -m tla_requirements --serve
    # or: uvicorn tla_requirements.api:app --reload --port 8787

Or import and run programmatically:
    from tla_requirements.main import run
    requirements = run("path/to/Module.tla")
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from tla_requirements.config import get_settings
from tla_requirements.models.enums import Kind
from tla_requirements.models.schemas import Requirement
from tla_requirements.samples import DEMO_MODULE
from tla_requirements.services.export_service import to_csv, to_json
from tla_requirements.services.extraction_service import extract_candidates
from tla_requirements.services.prover_client import prove_requirements_sync
from tla_requirements.services.storage_service import StorageService, load_source
from tla_requirements.services.workspace_service import compute_stats, formalize
from tla_requirements.utils.logger import setup_logging


def run(
    file_path: str = "",
    prove: bool = False,
    formalize_nfrs: bool = False,
    save: bool = False,
) -> list[Requirement]:
    """Analyze a module and return the requirement working set."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    source = load_source(file_path) if file_path else DEMO_MODULE
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name.upper()} v{settings.app_version}")
    logger.info(f"  Source: {file_path or 'bundled demo (TrafficLight)'}")
    logger.info("=" * 60)

    requirements = extract_candidates(source)

    if formalize_nfrs:
        for req in list(requirements):
            if req.kind == Kind.NON_FUNCTIONAL:
                requirements = formalize(requirements, req.id, settings.step_ms)

    if prove:
        result = prove_requirements_sync(requirements, source)
        requirements = result.requirements
        if result.advisory:
            logger.warning(result.advisory)

    if save:
        StorageService().save_session(source, requirements)

    _print_summary(requirements)
    return requirements


def _print_summary(requirements: list[Requirement]) -> None:
    """Log a human-readable summary of the analysis."""
    logger = logging.getLogger(__name__)
    stats = compute_stats(requirements)

    logger.info("-" * 60)
    logger.info("  ANALYSIS SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Requirements:   {stats.total}")
    logger.info(f"  Functional:     {stats.functional}")
    logger.info(f"  Non-functional: {stats.non_functional}")
    logger.info(f"  Priority:       High {stats.high} | Medium {stats.medium} | Low {stats.low}")
    logger.info(f"  Proved/Failed:  {stats.proved}/{stats.failed}")
    logger.info("-" * 60)
    for req in requirements:
        logger.info(f"  [{req.status.value:<8}] {req.kind.value:<14} {req.priority.value:<6} {req.text}")
        if req.formalization:
            logger.info(f"             ↳ {req.formalization.title}")


def serve(host: str | None = None, port: int | None = None) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    host = host or settings.host
    port = port or settings.port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("tla_requirements.api:app", host=host, port=port, reload=settings.debug)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tla_requirements",
        description="Extract, classify and formalize requirements from a TLA+ module.",
    )
    parser.add_argument("file", nargs="?", default="", help=".tla or .txt module (default: bundled demo)")
    parser.add_argument("--prove", action="store_true", help="run the prover (falls back to the local heuristic)")
    parser.add_argument("--formalize", action="store_true", help="attach temporal rewrites to non-functional requirements")
    parser.add_argument("--export", choices=("csv", "json"), help="export format")
    parser.add_argument("--out", default="", help="export destination (default: stdout)")
    parser.add_argument("--save", action="store_true", help="save the session to local storage")
    parser.add_argument("--serve", action="store_true", help="start the prover API server")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.serve:
        serve()
        return 0

    try:
        requirements = run(args.file, prove=args.prove, formalize_nfrs=args.formalize, save=args.save)
    except ValueError as e:
        logging.getLogger(__name__).error(f"{args.file}: {e}")
        return 2

    if args.export:
        rendered = to_csv(requirements) if args.export == "csv" else to_json(requirements)
        if args.out:
            Path(args.out).write_text(rendered, encoding="utf-8")
            logging.getLogger(__name__).info(f"Exported {len(requirements)} requirements to {args.out}")
        else:
            print(rendered)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
