"""
Temporal Rewrite — turn a quantified non-functional requirement into a
TLA+ monitor, a safety property and a theorem.

Continuous-time bounds are approximated by discrete steps of STEP_MS
milliseconds, and every generated comparison is integer-only.  The
generated text refers to predicates (event, goal, Up, Event, Failure)
that the enclosing TLA+ module has to define; they are listed in the
assumptions.

Templates are tried in a fixed order and the first match wins:
  1. latency / recovery bound   "mode change latency under 100 ms"
  2. availability bound         "availability >= 99.9%"
  3. throughput bound           "throughput >= 50 per 10 s"
  4. MTBF bound                 "MTBF >= 300 s"
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable

from tla_requirements.models.schemas import Formalization

logger = logging.getLogger(__name__)

STEP_MS = 50  # assumed wall-clock duration of one Next step

_LATENCY_RE = re.compile(
    r"(?:latency|respond|response|recover|recovery|mode\s*change).*?"
    r"(?:under|<=|less than|within)\s*(\d+)\s*"
    r"(ms|millisecond|milliseconds|s|sec|second|seconds)",
    re.IGNORECASE,
)
_AVAILABILITY_RE = re.compile(
    r"(availability|uptime).*?(?:>=|at\s*least|not\s*less\s*than)\s*(\d+(?:\.\d+)?)\s*%",
    re.IGNORECASE,
)
_THROUGHPUT_RE = re.compile(
    r"(throughput|rate|requests).*?(?:>=|at\s*least|not\s*less\s*than)\s*(\d+)\s*"
    r"(?:per|/)\s*(\d+)\s*(s|sec|second|seconds)",
    re.IGNORECASE,
)
_MTBF_RE = re.compile(
    r"(mtbf|mean\s*time\s*between\s*failures).*?(?:>=|at\s*least|not\s*less\s*than)\s*(\d+)\s*"
    r"(s|sec|second|seconds)",
    re.IGNORECASE,
)

NO_REWRITE_HINT = (
    r"\* Try wording like: 'within 100 ms', 'availability >= 99.9%', "
    r"'throughput >= 50 per 10 s', or 'MTBF >= 300 s'."
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ceil_div(a: int, b: int) -> int:
    return (a + b - 1) // b


def _seconds_to_steps(seconds: int, step_ms: int) -> int:
    # Half-up in integer arithmetic; arbitrarily large bounds stay exact
    return max(1, (2 * seconds * 1000 + step_ms) // (2 * step_ms))


def _fmt_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


# ── Template builders ────────────────────────────────────


def _latency(match: re.Match, step_ms: int) -> Formalization:
    value = int(match.group(1))
    unit = match.group(2).lower()
    ms = value * 1000 if unit.startswith("s") else value
    k = max(1, _ceil_div(ms, step_ms))
    tla = "\n".join([
        "VARIABLE lat_req, lat_t",
        r"InitLB == /\ lat_req = FALSE /\ lat_t = 0",
        "NextLB ==",
        r"  \/ /\ event /\ lat_req' = TRUE /\ lat_t' = 0",
        r"  \/ /\ lat_req /\ ~goal /\ lat_t' = lat_t + 1 /\ UNCHANGED lat_req",
        r"  \/ /\ lat_req /\ goal /\ lat_req' = FALSE /\ lat_t' = 0",
        r"  \/ /\ ~lat_req /\ ~event /\ UNCHANGED <<lat_req, lat_t>>",
        f"LatencyBound == [] (lat_req => lat_t <= {k})",
        "THEOREM Spec => LatencyBound",
    ])
    return Formalization(
        title=f"Bounded response within {ms} ms (~{k} steps)",
        tla=tla,
        assumptions=[f"Assume ~{step_ms} ms per step; set event/goal predicates."],
    )


def _availability(match: re.Match, step_ms: int) -> Formalization:
    p = float(match.group(2))
    numer = _round_half_up(p * 10)  # per-mille
    denom = 1000
    tla = "\n".join([
        "VARIABLE upTicks, ticks",
        r"InitAvail == /\ upTicks = 0 /\ ticks = 0",
        r"NextAvail == /\ ticks' = ticks + 1 /\ upTicks' = upTicks + IF Up THEN 1 ELSE 0",
        f"AvailBound == [] ({denom} * upTicks >= {numer} * ticks)",
        "THEOREM Spec => AvailBound",
    ])
    return Formalization(
        title=f"Availability ≥ {_fmt_number(p)}% (long-run)",
        tla=tla,
        assumptions=["Define Up predicate; long-run average."],
    )


def _throughput(match: re.Match, step_ms: int) -> Formalization:
    r = int(match.group(2))
    w_sec = int(match.group(3))
    w = _seconds_to_steps(w_sec, step_ms)
    tla = "\n".join([
        "VARIABLE win, count",
        r"InitTP == /\ win = 0 /\ count = 0",
        "NextTP ==",
        f"  \\/ /\\ win < {w} - 1 /\\ win' = win + 1 /\\ count' = count + IF Event THEN 1 ELSE 0",
        f"  \\/ /\\ win = {w} - 1 /\\ win' = 0 /\\ count' = 0",
        f"TPCheck == [] (win = {w} - 1 => count >= {r})",
        "THEOREM Spec => TPCheck",
    ])
    return Formalization(
        title=f"Throughput ≥ {r} per {w_sec}s (~{w} steps)",
        tla=tla,
        assumptions=["Define Event action once per occurrence; tumbling window."],
    )


def _mtbf(match: re.Match, step_ms: int) -> Formalization:
    sec = int(match.group(2))
    k = _seconds_to_steps(sec, step_ms)
    tla = "\n".join([
        "VARIABLE sinceFail",
        f"InitMTBF == sinceFail = {k}",
        "NextMTBF ==",
        r"  \/ /\ Failure /\ sinceFail' = 0",
        r"  \/ /\ ~Failure /\ sinceFail' = sinceFail + 1",
        f"MTBFBound == [] (sinceFail >= {k})",
        "THEOREM Spec => MTBFBound",
    ])
    return Formalization(
        title=f"MTBF ≥ {sec}s (~{k} steps between failures)",
        tla=tla,
        assumptions=["Define Failure boundary action."],
    )


# Order is significant: first match wins
TEMPLATES: list[tuple[str, re.Pattern, Callable[[re.Match, int], Formalization]]] = [
    ("latency", _LATENCY_RE, _latency),
    ("availability", _AVAILABILITY_RE, _availability),
    ("throughput", _THROUGHPUT_RE, _throughput),
    ("mtbf", _MTBF_RE, _mtbf),
]


def no_rewrite() -> Formalization:
    return Formalization(title="No rewrite available", tla=NO_REWRITE_HINT, assumptions=[])


def rewrite_nfr_to_temporal(nfr_text: str, step_ms: int = STEP_MS) -> Formalization:
    """Synthesize a monitor + theorem for *nfr_text*. Never raises."""
    if step_ms < 1:
        step_ms = STEP_MS
    for name, pattern, build in TEMPLATES:
        match = pattern.search(nfr_text)
        if match:
            try:
                result = build(match, step_ms)
            except (OverflowError, ValueError) as e:
                logger.warning(f"[REWRITE] {name} bound out of range, no rewrite: {e}")
                return no_rewrite()
            logger.debug(f"[REWRITE] '{nfr_text[:60]}' matched {name}: {result.title}")
            return result
    logger.debug(f"[REWRITE] No template matched '{nfr_text[:60]}'")
    return no_rewrite()
