# bench.py
# Timed build / verify / tamper runs over generated datasets, written to CSV.
#
# Each run regenerates its dataset from (seed + run_id), so a verify or tamper
# run sees exactly the records a build run with the same seed saw.
#
# Usage:
#   merkle-bench --build 1024 --runs 10 --seed 42 --csv output_merkle.csv
#   merkle-bench --build 1024 --runs 5 --tamper file0.txt "evil" --verify file0.txt

import argparse
import csv
import logging
import random
import string
import time
import tracemalloc
from collections.abc import Callable
from typing import TypeVar

from merkle_integrity import config, display
from merkle_integrity.merkle import (
    EmptyTreeError,
    MerkleTree,
    RecordNotFoundError,
    VerifyResult,
    build_leaves,
)
from merkle_integrity.models import CSV_FIELDS, BenchConfig, BenchRow
from merkle_integrity.name_index import NameIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")

CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits + " "
DATASET_PREFIX = "file"

_RESULT_TEXT = {
    VerifyResult.INTACT: "ok",
    VerifyResult.TAMPERED: "tampered",
    VerifyResult.NOT_FOUND: "error",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_dataset(prefix: str, n: int, seed: int) -> tuple[list[str], list[str]]:
    """Deterministic names and contents: record i depends only on (seed, i)."""
    names: list[str] = []
    contents: list[str] = []
    for i in range(n):
        rng = random.Random(seed + i)
        length = 20 + rng.randrange(200)
        names.append(f"{prefix}{i}.txt")
        contents.append("".join(rng.choice(CHARSET) for _ in range(length)))
    return names, contents


def _measure(fn: Callable[[], T]) -> tuple[T, float, int]:
    """
    Run fn, returning (value, elapsed ms, peak traced bytes).

    The timed call runs untraced and its value is the one returned. fn is then
    called once more under tracemalloc for the peak only, so it must be safe to
    repeat: build, verify and rebuild all allocate the same on a second call.
    """
    t0 = time.perf_counter()
    value = fn()
    elapsed_ms = (time.perf_counter() - t0) * 1000.0

    tracemalloc.start()
    try:
        fn()
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    return value, elapsed_ms, peak


def _build_indexed(names: list[str], contents: list[str]) -> tuple[MerkleTree, NameIndex]:
    tree = build_leaves(names, contents)
    index = NameIndex.from_tree(tree)
    tree.build()
    return tree, index


def _error_row(run_id: int, n: int, seed: int, op: str, details: str) -> BenchRow:
    return BenchRow(run_id=run_id, n=n, seed=seed, op=op, op_time_ms=0.0, result="error", details=details)


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------


def run_build(run_id: int, n: int, seed: int) -> list[BenchRow]:
    """Time leaf construction, index population and tree build together."""
    names, contents = make_dataset(DATASET_PREFIX, n, seed)
    try:
        (tree, _index), ms, peak = _measure(lambda: _build_indexed(names, contents))
    except EmptyTreeError:
        logger.error("run %d: build failed, dataset is empty", run_id)
        return [_error_row(run_id, n, seed, "build", "empty tree")]

    row = BenchRow(
        run_id=run_id,
        n=n,
        seed=seed,
        op="build",
        op_time_ms=ms,
        memory_bytes=peak,
        result="ok",
        details=tree.root_hex or "no_root",
    )
    logger.info("run %d build complete: root=%s (%.3f ms)", run_id, tree.root_hex, ms)
    tree.release()
    return [row]


def run_verify(run_id: int, n: int, seed: int, target: str) -> list[BenchRow]:
    names, contents = make_dataset(DATASET_PREFIX, n, seed)
    try:
        tree, _index = _build_indexed(names, contents)
    except EmptyTreeError:
        logger.error("run %d: verify skipped, dataset is empty", run_id)
        return [_error_row(run_id, n, seed, "verify", "empty tree")]

    result, ms, peak = _measure(lambda: tree.verify(target))
    tree.release()
    return [
        BenchRow(
            run_id=run_id,
            n=n,
            seed=seed,
            op="verify",
            op_time_ms=ms,
            memory_bytes=peak,
            result=_RESULT_TEXT[result],
            details=target,
        )
    ]


def run_tamper_and_verify(
    run_id: int, n: int, seed: int, target: str, new_content: str
) -> list[BenchRow]:
    """Verify, tamper, verify again, then time a plain rebuild."""
    names, contents = make_dataset(DATASET_PREFIX, n, seed)
    try:
        tree, _index = _build_indexed(names, contents)
    except EmptyTreeError:
        logger.error("run %d: tamper skipped, dataset is empty", run_id)
        return [_error_row(run_id, n, seed, "verify_before_tamper", "empty tree")]

    rows: list[BenchRow] = []

    before, ms, peak = _measure(lambda: tree.verify(target))
    rows.append(
        BenchRow(
            run_id=run_id, n=n, seed=seed, op="verify_before_tamper",
            op_time_ms=ms, memory_bytes=peak, result=_RESULT_TEXT[before], details=target,
        )
    )

    try:
        tree.tamper(target, new_content)
    except RecordNotFoundError:
        logger.warning("run %d: cannot tamper %r, no such record", run_id, target)

    after, ms, peak = _measure(lambda: tree.verify(target))
    rows.append(
        BenchRow(
            run_id=run_id, n=n, seed=seed, op="verify_after_tamper",
            op_time_ms=ms, memory_bytes=peak, result=_RESULT_TEXT[after], details=target,
        )
    )

    _, ms, peak = _measure(tree.build)
    rows.append(
        BenchRow(
            run_id=run_id, n=n, seed=seed, op="rebuild_after_tamper",
            op_time_ms=ms, memory_bytes=peak, result="ok", details="rebuild",
        )
    )

    tree.release()
    return rows


def run_benchmark(cfg: BenchConfig) -> list[BenchRow]:
    """Run every requested op for runs 1..cfg.runs, seeding run r with seed + r."""
    rows: list[BenchRow] = []
    for run_id in range(1, cfg.runs + 1):
        seed = cfg.seed + run_id
        if cfg.build:
            rows.extend(run_build(run_id, cfg.n, seed))
        if cfg.verify_target is not None:
            rows.extend(run_verify(run_id, cfg.n, seed, cfg.verify_target))
        if cfg.tamper_target is not None:
            rows.extend(
                run_tamper_and_verify(run_id, cfg.n, seed, cfg.tamper_target, cfg.tamper_content or "")
            )
    return rows


def write_csv(rows: list[BenchRow], path: str) -> None:
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            record = row.model_dump()
            record["op_time_ms"] = f"{row.op_time_ms:.6f}"
            writer.writerow(record)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="merkle-bench",
        description="Benchmark Merkle tree build, verify and tamper detection.",
    )
    parser.add_argument("--build", type=int, metavar="N", default=None,
                        help="build trees of N records (enables the build op)")
    parser.add_argument("--runs", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--csv", dest="csv_path", default=config.BENCH_CSV)
    parser.add_argument("--verify", dest="verify_target", metavar="NAME", default=None)
    parser.add_argument("--tamper", nargs=2, metavar=("NAME", "CONTENT"), default=None)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    display.setup_logging(args.log_level)

    try:
        cfg = BenchConfig(
            n=args.build if args.build is not None else config.BENCH_N,
            runs=args.runs if args.runs is not None else config.BENCH_RUNS,
            seed=args.seed if args.seed is not None else config.BENCH_SEED,
            csv_path=args.csv_path,
            build=args.build is not None,
            verify_target=args.verify_target,
            tamper_target=args.tamper[0] if args.tamper else None,
            tamper_content=args.tamper[1] if args.tamper else None,
        )
    except ValueError as exc:
        display.halt(f"Invalid benchmark options: {exc}")
        return 1

    rows = run_benchmark(cfg)
    try:
        write_csv(rows, cfg.csv_path)
    except OSError as exc:
        display.halt(f"Cannot write {cfg.csv_path}: {exc}")
        return 1

    display.bench_summary(rows)
    display.results_written(cfg.csv_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
