from dataclasses import FrozenInstanceError

import pytest

from rbsfold.foldresult import Dangles, FoldResult, InvalidDanglesError, normalize_sequence
from rbsfold.structure import MalformedStructureError


@pytest.mark.parametrize(
    "setting,code", [("all", 2), ("some", 1), ("none", 0), ("default", None)]
)
def test_dangles_codes(setting, code):
    assert Dangles(setting).code == code


@pytest.mark.parametrize("setting", ["ALL", "most", "", "2"])
def test_dangles_invalid(setting):
    with pytest.raises(InvalidDanglesError):
        Dangles(setting)


def test_dangles_default():
    assert Dangles() == Dangles("all")


def test_normalize_sequence():
    assert normalize_sequence("acgtn") == "ACGUN"
    assert normalize_sequence("ACGU") == "ACGU"


def test_mono():
    f = FoldResult.create(["GGGAAACCC"], -1.5, "(((...)))")
    assert f.kind == "mono"
    assert f.sequence == "GGGAAACCC"
    assert f.free_energy == -1.5
    assert f.openings == (1, 2, 3)
    assert f.closings == (9, 8, 7)
    assert list(f.pairs()) == [(1, 9), (2, 8), (3, 7)]
    assert f.num_pairs == 3
    assert f.lengths == (9,)

    with pytest.raises(TypeError):
        f.mrna
    with pytest.raises(TypeError):
        f.rrna


def test_co():
    f = FoldResult.create(("GGAGG", "CCUCC"), -6.0, "(((((&)))))")
    assert f.kind == "co"
    assert f.mrna == "GGAGG"
    assert f.rrna == "CCUCC"
    assert f.openings == (1, 2, 3, 4, 5)
    assert f.closings == (10, 9, 8, 7, 6)

    with pytest.raises(TypeError):
        f.sequence


@pytest.mark.parametrize("sequences", [None, [], ["A", "A", "A"]])
def test_unknown(sequences):
    f = FoldResult.create(sequences, 0.0, "...")
    assert f.kind == "unknown"
    with pytest.raises(TypeError):
        f.sequence
    with pytest.raises(TypeError):
        f.mrna


def test_immutable():
    f = FoldResult.create(["AAA"], 0.0, "...")
    with pytest.raises(FrozenInstanceError):
        f.free_energy = -1.0  # type: ignore


def test_malformed():
    with pytest.raises(MalformedStructureError):
        FoldResult.create(["AAAA"], 0.0, "((..")


def test_bad_kind():
    with pytest.raises(ValueError):
        FoldResult("triple", (), 0.0, "")  # type: ignore
