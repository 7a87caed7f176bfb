"""
Experiment runner: times sorting-machine kinds over a sweep of sizes from a YAML config.

Usage (from repo root):
    sortmachine-bench experiments/configs/01_random_scaling.yaml
    python -m sortmachine.bench.runner experiments/configs/01_random_scaling.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per sample, plus status lines
    - summary.csv             # medians per phase + IQR of the total, per (machine, n)
    - (console) rich/tqdm summaries

Design notes:
- For each size n, ONE dataset is generated and loaded into every machine kind.
- Phases (insert / transition / drain) are timed separately; see measure.py.
- On timeout/error/invalid output for a machine at size n, larger sizes are
  skipped for that machine.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import functools
import json
import logging
import os
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from sortmachine.bench.measure import time_machine_drain
from sortmachine.datasets import make_dataset
from sortmachine.machine import SUPPORTED_KINDS, make_machine
from sortmachine.order import Order, resolve_order

logger = logging.getLogger(__name__)
_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "machines",
]
SUMMARY_COLUMNS = [
    "machine",
    "n",
    "samples_ok",
    "median_insert_ns",
    "median_transition_ns",
    "median_drain_ns",
    "median_total_ns",
    "iqr_total_ns",
    "min_total_ns",
    "max_total_ns",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class MachineSpec:
    name: str
    kind: str


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config must be a YAML mapping: {path}")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    suffix = 1
    while run_dir.exists():
        suffix += 1
        run_dir = base_dir / f"{_timestamp()}_{experiment_name}_{suffix}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_machines(cfg_machines: List[Any]) -> List[MachineSpec]:
    specs: List[MachineSpec] = []
    seen = set()
    for entry in cfg_machines:
        # Accept the short form `- heap` as well as `- {name: heap, kind: heap}`.
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            raise ValueError(f"Each machine must be a name or a mapping; got {entry!r}")
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Each machine must have a string 'name' field")
        if name in seen:
            raise ValueError(f"Duplicate machine name in config: {name}")
        seen.add(name)

        kind = entry.get("kind", name)
        if kind not in SUPPORTED_KINDS:
            raise ValueError(
                f"Machine '{name}': unsupported kind {kind!r}. Supported: {sorted(SUPPORTED_KINDS)}"
            )
        specs.append(MachineSpec(name=name, kind=kind))
    return specs


def _iqr_ns(group: pd.DataFrame) -> int:
    q1 = group["total_ns"].quantile(0.25)
    q3 = group["total_ns"].quantile(0.75)
    return int(q3 - q1)


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    # Status lines carry no timings.
    if "total_ns" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = df[df["total_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    agg = (
        df.groupby(["machine", "n"], as_index=False)
        .agg(
            samples_ok=("total_ns", "count"),
            median_insert_ns=("insert_ns", "median"),
            median_transition_ns=("transition_ns", "median"),
            median_drain_ns=("drain_ns", "median"),
            median_total_ns=("total_ns", "median"),
            min_total_ns=("total_ns", "min"),
            max_total_ns=("total_ns", "max"),
        )
    )
    iqr_vals = (
        df.groupby(["machine", "n"])[["total_ns"]]
        .apply(_iqr_ns)
        .rename("iqr_total_ns")
        .reset_index()
    )
    out = agg.merge(iqr_vals, on=["machine", "n"], how="left")
    int_cols = [c for c in SUMMARY_COLUMNS if c.endswith("_ns")]
    out[int_cols] = out[int_cols].astype("int64")
    out["n"] = out["n"].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["machine", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame) -> None:
    table = Table(title="Benchmark Summary (median ms: insert / transition / drain)")
    table.add_column("Machine", style="bold")
    table.add_column("n", justify="right")
    table.add_column("insert", justify="right")
    table.add_column("transition", justify="right")
    table.add_column("drain", justify="right")
    table.add_column("total ± IQR", justify="right")

    for row in summary.itertuples(index=False):
        table.add_row(
            f"[bold]{row.machine}[/]",
            str(row.n),
            f"{row.median_insert_ns / 1e6:.2f}",
            f"{row.median_transition_ns / 1e6:.2f}",
            f"{row.median_drain_ns / 1e6:.2f}",
            f"{row.median_total_ns / 1e6:.2f} ± {row.iqr_total_ns / 1e6:.2f}",
        )
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"]]
    repeats: int = int(cfg["repeats"])
    warmup: bool = bool(cfg["warmup"])
    disable_gc: bool = bool(cfg["disable_gc"])
    timeout_seconds: float = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    order_name: str = str(cfg.get("order", "natural"))
    validate: bool = bool(cfg.get("validate", True))

    if not sizes or any(n < 0 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")
    order: Order = resolve_order(order_name)
    machines = _resolve_machines(list(cfg["machines"]))
    if not machines:
        raise ValueError("Config 'machines' must list at least one machine kind")

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml({**cfg, "order": order_name, "validate": validate}, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    skipped = {m.name: False for m in machines}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Machines:[/bold] {', '.join(m.name for m in machines)}  [bold]Order:[/bold] {order_name}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        base_a = make_dataset(n, dataset_spec, rng)

        for spec in machines:
            if skipped[spec.name]:
                continue

            res = time_machine_drain(
                machine_name=spec.name,
                make=functools.partial(make_machine, order, spec.kind),
                a=base_a,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
                validate=validate,
            )

            samples = zip(res["insert_ns"], res["transition_ns"], res["drain_ns"])
            for trial_idx, (t_ins, t_tr, t_dr) in enumerate(samples):
                _append_jsonl(
                    {
                        "machine": spec.name,
                        "kind": spec.kind,
                        "n": n,
                        "dataset": dataset_spec,
                        "order": order_name,
                        "trial": trial_idx,
                        "insert_ns": t_ins,
                        "transition_ns": t_tr,
                        "drain_ns": t_dr,
                        "total_ns": t_ins + t_tr + t_dr,
                    },
                    results_path,
                )

            status = res["status"]
            if status != "ok":
                skipped[spec.name] = True
                logger.warning("%s: %s at n=%d; skipping larger sizes", spec.name, status, n)
                _append_jsonl(
                    {
                        "machine": spec.name,
                        "kind": spec.kind,
                        "n": n,
                        "status": status,
                        "error": res["error"],
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                    },
                    results_path,
                )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for path in (results_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Benchmark sorting-machine kinds from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for library messages (default: WARNING)",
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True)],
    )
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
