"""
Dataset generators for sorting-machine benchmarks.

Distributions:
- "random":        integers uniform over params["range"] (inclusive, required).
- "nearly_sorted": [0..n-1] degraded by ceil(swap_frac * n) random swaps.
- "few_uniques":   up to k distinct integers, each position drawn among them.
- "small_range":   integers uniform over a small inclusive domain
                   (default [0, 255]; min_val/max_val or range override).
- "reversed":      [n-1, ..., 0]; params and RNG unused.
- "words":         random mixed-case ASCII words of params["length"] letters
                   (default 4). Pair with the "casefold" order to exercise
                   ties between distinct values.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list

Conventions:
- Returns plain Python lists (machines stay NumPy-agnostic).
- The caller supplies the RNG, seeded upstream, for reproducible runs.
- Invalid input raises ValueError.
"""

from __future__ import annotations

import string
from typing import Any, Callable, Dict, List, Tuple

import numpy as np

_LETTERS = np.array(list(string.ascii_letters))

__all__ = ["SUPPORTED_DISTS", "make_dataset"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    """
    Generate a dataset of length `n` according to `spec`.

    Parameters
    ----------
    n : int
        Number of elements. Must be >= 0.
    spec : dict
        {"dist": <name>, "params": {...}}; see the module docstring.
    rng : numpy.random.Generator
        Random number generator owned by the caller.

    Returns
    -------
    list
        Integers for every distribution except "words", which yields str.

    Raises
    ------
    ValueError
        If `n`, `spec` or its params are invalid.
    """
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist")
    if dist not in _GENERATORS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")

    # Params are validated even for n == 0 so bad configs fail early.
    return _GENERATORS[dist](int(n), params, rng)


# ------------------------- generators ------------------------- #


def _random(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    if "range" not in params:
        raise ValueError("random.params.range must be provided as [min, max] (inclusive)")
    lo, hi = _parse_range(params["range"], "random")
    return _uniform_ints(n, lo, hi, rng)


def _nearly_sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    swap_frac = params.get("swap_frac", 0.05)
    try:
        swap_frac = float(swap_frac)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {swap_frac!r}"
        ) from e
    if not 0.0 <= swap_frac <= 1.0:
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {swap_frac}")

    out = list(range(n))
    num_swaps = int(np.ceil(swap_frac * n))
    if n == 0 or num_swaps == 0:
        return out
    # i == j pairs are no-ops, so effective swaps may be fewer than requested.
    idxs = rng.integers(0, n, size=(num_swaps, 2))
    for i, j in idxs.tolist():
        out[i], out[j] = out[j], out[i]
    return out


def _few_uniques(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    k = params.get("k")
    if not isinstance(k, int) or isinstance(k, bool) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    lo, hi = _parse_range(params.get("range", (0, 4294967295)), "few_uniques")
    if n == 0:
        return []

    actual_k = min(k, n, hi - lo + 1)
    # Draw from `rng` (not the random module) so runs stay reproducible.
    chosen: Dict[int, None] = {}
    while len(chosen) < actual_k:
        need = actual_k - len(chosen)
        for v in rng.integers(lo, hi + 1, size=need * 2).tolist():
            chosen.setdefault(v)
            if len(chosen) == actual_k:
                break
    values = list(chosen)
    return [values[t] for t in rng.integers(0, actual_k, size=n).tolist()]


def _small_range(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    if "range" in params:
        lo, hi = _parse_range(params["range"], "small_range")
    else:
        lo, hi = params.get("min_val", 0), params.get("max_val", 255)
        if not _is_int_like(lo) or not _is_int_like(hi):
            raise ValueError("small_range params.min_val/max_val must be integers")
        lo, hi = int(lo), int(hi)
        if lo > hi:
            raise ValueError(f"small_range invalid: min > max ({lo} > {hi})")
    return _uniform_ints(n, lo, hi, rng)


def _reversed(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return list(range(n - 1, -1, -1))


def _words(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[str]:
    length = params.get("length", 4)
    if not _is_int_like(length) or length < 1:
        raise ValueError(f"words.params.length must be an integer >= 1; got {length!r}")
    if n == 0:
        return []
    letters = _LETTERS[rng.integers(0, len(_LETTERS), size=(n, int(length)))]
    return ["".join(row) for row in letters.tolist()]


_GENERATORS: Dict[str, Callable[[int, Dict[str, Any], np.random.Generator], List[Any]]] = {
    "random": _random,
    "nearly_sorted": _nearly_sorted,
    "few_uniques": _few_uniques,
    "small_range": _small_range,
    "reversed": _reversed,
    "words": _words,
}
SUPPORTED_DISTS = set(_GENERATORS)


# ------------------------- helpers ------------------------- #


def _uniform_ints(n: int, lo: int, hi: int, rng: np.random.Generator) -> List[int]:
    if n == 0:
        return []
    # Generator.integers is half-open; +1 makes `hi` inclusive.
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _parse_range(raw: Any, dist: str) -> Tuple[int, int]:
    """Parse an inclusive [min, max] pair."""
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{dist}.params.range must be a 2-element list/tuple [min, max]")
    lo, hi = raw
    if not _is_int_like(lo) or not _is_int_like(hi):
        raise ValueError(f"{dist}.params.range values must be integers")
    lo, hi = int(lo), int(hi)
    if lo > hi:
        raise ValueError(f"{dist}.params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _is_int_like(x: Any) -> bool:
    # Python ints and NumPy integer types; bool is not a count.
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
