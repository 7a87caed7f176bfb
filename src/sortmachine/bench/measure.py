"""
Timing harness for sorting machines.

One sample = one full machine lifecycle on a fresh machine:
    insert     every value via add()
    transition change_to_extraction_mode()
    drain      remove_first() until empty

Each phase is timed separately with a monotonic high-resolution clock.
Machine construction, input copies, GC handling and output validation all
happen outside the timed blocks.

Public API (stable):
    time_machine_drain(...) -> dict

Returned dict schema:
    {
        "machine": str,
        "repeats": int,
        "insert_ns": list[int],             # one entry per completed sample
        "transition_ns": list[int],
        "drain_ns": list[int],
        "status": "ok" | "timeout" | "error" | "invalid",
        "error": str | None,                # populated for "error" / "invalid"
        "timed_out_on_repeat": int | None,  # 0-based repeat index on timeout
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Callable, Dict, List, Sequence, Tuple

from sortmachine.errors import ContractViolation
from sortmachine.machine import SortingMachine
from sortmachine.validate import first_nondecreasing_violation_index, permutation_counter_diff

logger = logging.getLogger(__name__)

__all__ = ["time_machine_drain"]


def time_machine_drain(
    *,
    machine_name: str,
    make: Callable[[], SortingMachine],
    a: Sequence[Any],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    validate: bool,
) -> Dict[str, Any]:
    """
    Time `repeats` insert/transition/drain lifecycles of machines from `make()`.

    Parameters
    ----------
    machine_name : str
        Logical name of the machine kind (for logs/records).
    make : Callable[[], SortingMachine]
        Factory returning a fresh, empty machine in insertion mode.
    a : sequence
        Values to load. Never mutated.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, run one untimed lifecycle first.
    disable_gc : bool
        If True, collect and disable the GC during the timed loop; the
        previous state is restored afterward.
    timeout_seconds : float
        Per-sample threshold on the summed phase times. A slower sample is
        kept, then status becomes "timeout" and sampling stops.
    validate : bool
        If True, check every drained output is non-decreasing under the
        machine's order and a permutation of `a`; a failure sets status to
        "invalid" and stops sampling. The permutation check counts values,
        so unhashable values end the run with status "error".

    Raises
    ------
    ContractViolation
        Re-raised as is when a machine is misused; only other exceptions
        are recorded as status "error".

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "machine": machine_name,
        "repeats": repeats,
        "insert_ns": [],
        "transition_ns": [],
        "drain_ns": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            _lifecycle(make(), a)
        except ContractViolation:
            raise
        except Exception as e:
            logger.warning("%s: warmup failed: %r", machine_name, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            m = make()
            try:
                (t_insert, t_transition, t_drain), out = _lifecycle(m, a)
                problem = _check_output(m, a, out) if validate else None
            except ContractViolation:
                raise
            except Exception as e:
                logger.warning("%s: run failed at repeat %d: %r", machine_name, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            result["insert_ns"].append(t_insert)
            result["transition_ns"].append(t_transition)
            result["drain_ns"].append(t_drain)

            if problem is not None:
                logger.warning("%s: invalid output at repeat %d: %s", machine_name, r, problem)
                result["status"] = "invalid"
                result["error"] = f"repeat {r}: {problem}"
                break

            if t_insert + t_transition + t_drain > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled.
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result


def _lifecycle(m: SortingMachine, a: Sequence[Any]) -> Tuple[Tuple[int, int, int], List[Any]]:
    add = m.add
    remove_first = m.remove_first

    t0 = time.perf_counter_ns()
    for x in a:
        add(x)
    t1 = time.perf_counter_ns()
    m.change_to_extraction_mode()
    t2 = time.perf_counter_ns()
    out = [remove_first() for _ in range(m.size())]
    t3 = time.perf_counter_ns()

    return (t1 - t0, t2 - t1, t3 - t2), out


def _check_output(m: SortingMachine, a: Sequence[Any], out: List[Any]) -> str | None:
    if m.size() != 0:
        return f"machine not empty after drain (size={m.size()})"
    i = first_nondecreasing_violation_index(out, m.order())
    if i is not None:
        return f"out of order at i={i}: {out[i]!r} > {out[i + 1]!r}"
    diff = permutation_counter_diff(out, a)
    if diff:
        return f"not a permutation of the input (count diff {diff})"
    return None
