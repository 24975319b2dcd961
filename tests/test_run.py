from unittest.mock import patch

from merkle_integrity import run
from merkle_integrity.merkle import VerifyResult
from merkle_integrity.models import Record


def test_demo_detects_only_the_tampered_record():
    first, second = run.demo(run.SAMPLE_RECORDS)

    assert set(first.values()) == {VerifyResult.INTACT}
    assert second == {
        "math.txt": VerifyResult.TAMPERED,
        "ai.txt": VerifyResult.INTACT,
        "ethics.txt": VerifyResult.INTACT,
    }


def test_demo_without_tamper_target_stays_intact():
    records = [Record(name="a.txt", content=b"1"), Record(name="b.txt", content=b"2")]
    first, second = run.demo(records)
    assert set(first.values()) == {VerifyResult.INTACT}
    assert set(second.values()) == {VerifyResult.INTACT}


def test_demo_releases_the_tree():
    built = []
    real_build_leaves = run.build_leaves

    def capture(names, contents):
        tree = real_build_leaves(names, contents)
        built.append(tree)
        return tree

    with patch("merkle_integrity.run.build_leaves", side_effect=capture):
        run.demo(run.SAMPLE_RECORDS)

    assert len(built) == 1
    assert built[0].leaf_count == 0
    assert built[0].root is None


def test_main_reports_failures():
    with patch("merkle_integrity.run.demo", side_effect=run.MerkleError("boom")), \
         patch("merkle_integrity.run.display.halt") as halt:
        assert run.main() == 1
    halt.assert_called_once()


def test_main_success():
    with patch("merkle_integrity.run.display.elapsed") as elapsed:
        assert run.main() == 0
    elapsed.assert_called_once()
