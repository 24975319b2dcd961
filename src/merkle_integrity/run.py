# run.py
# Demo entry point. Sample data and wiring only, no logic lives here.
#
# Builds a tree over three records, verifies each, tampers one, and verifies
# again. Expected: math.txt reports Tampered, the others stay Intact.

import time

from merkle_integrity import config, display
from merkle_integrity.merkle import MerkleError, MerkleTree, VerifyResult, build_leaves
from merkle_integrity.models import Record
from merkle_integrity.name_index import NameIndex

SAMPLE_RECORDS = [
    Record(name="math.txt", content=b"Mathematics is the language of the universe."),
    Record(name="ai.txt", content=b"Artificial Intelligence is shaping the future."),
    Record(name="ethics.txt", content=b"Ethics keeps technology human-centered."),
]

TAMPER_TARGET = "math.txt"
TAMPER_CONTENT = "hacked content!"


def verify_all(tree: MerkleTree, names: list[str]) -> dict[str, VerifyResult]:
    results: dict[str, VerifyResult] = {}
    for name in names:
        results[name] = tree.verify(name)
        display.verify_result(name, results[name])
    return results


def demo(records: list[Record]) -> tuple[dict[str, VerifyResult], dict[str, VerifyResult]]:
    """Run the build → verify → tamper → verify cycle; returns both verify passes."""
    names, contents = Record.split(records)

    tree = build_leaves(names, contents)
    index = NameIndex.from_tree(tree)
    try:
        tree.build()
        display.merkle_committed(tree)
        display.tree_levels(tree)

        display.verify_phase("VERIFYING RECORDS")
        first = verify_all(tree, names)

        if TAMPER_TARGET in index:
            display.tampering(TAMPER_TARGET, TAMPER_CONTENT)
            tree.tamper(TAMPER_TARGET, TAMPER_CONTENT)

        display.verify_phase("VERIFYING AGAIN AFTER TAMPERING")
        second = verify_all(tree, names)
    finally:
        tree.release()

    return first, second


def main() -> int:
    display.setup_logging(config.LOG_LEVEL)
    display.banner(
        "Merkle Tree Integrity Verification",
        "SHA-256 leaves over named records, full rebuild on every verify",
    )

    start = time.perf_counter()
    try:
        demo(SAMPLE_RECORDS)
    except MerkleError as exc:
        display.halt(f"Demo aborted: {exc}")
        return 1
    display.elapsed(time.perf_counter() - start)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
