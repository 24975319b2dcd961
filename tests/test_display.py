import logging
from unittest.mock import patch

from rich.console import Console

from merkle_integrity import display
from merkle_integrity.merkle import VerifyResult, build_leaves
from merkle_integrity.models import BenchRow


def _recording_console() -> Console:
    return Console(record=True, width=160, color_system=None)


@patch("merkle_integrity.display.console", new_callable=_recording_console)
def test_merkle_committed_shows_full_root(mock_console):
    tree = build_leaves(["a.txt", "b.txt", "c.txt"], [b"1", b"2", b"3"])
    tree.build()

    display.merkle_committed(tree)
    display.tree_levels(tree)

    text = mock_console.export_text()
    assert tree.root_hex in text
    assert "a.txt" in text
    assert "(promoted)" in text


@patch("merkle_integrity.display.console", new_callable=_recording_console)
def test_verify_result_labels(mock_console):
    display.verify_result("a.txt", VerifyResult.INTACT)
    display.verify_result("b.txt", VerifyResult.TAMPERED)
    display.verify_result("c.txt", VerifyResult.NOT_FOUND)

    text = mock_console.export_text()
    assert "Intact" in text
    assert "Tampered" in text
    assert "Not found" in text


@patch("merkle_integrity.display.console", new_callable=_recording_console)
def test_tree_levels_skips_unbuilt_tree(mock_console):
    display.tree_levels(build_leaves(["a"], [b"1"]))
    assert mock_console.export_text() == ""


@patch("merkle_integrity.display.console", new_callable=_recording_console)
def test_bench_summary_lists_ops(mock_console):
    rows = [
        BenchRow(run_id=1, n=4, seed=2, op="verify_after_tamper", op_time_ms=0.25, result="tampered",
                 details="file0.txt"),
    ]
    display.bench_summary(rows)
    text = mock_console.export_text()
    assert "verify_after_tamper" in text
    assert "tampered" in text


def test_setup_logging_sets_level():
    display.setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    display.setup_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING
