import pytest

from rbsfold.structure import (
    MalformedStructureError,
    decode,
    encode,
    strip_markers,
    unpaired_mask,
)


def _strands_for(structure):
    return ["N" * len(part) for part in structure.split("&")]


def test_multistrand_offsets():
    assert decode("(.&.)") == ((1,), (4,))
    assert encode(["AC", "AC"], [1], [4]) == "(.&.)"


def test_two_pairs_across_marker():
    assert decode("((.&.))") == ((1, 2), (6, 5))


def test_single_pair_is_one_based():
    assert decode("(...)") == ((1,), (5,))
    assert decode(".(.).") == ((2,), (4,))


def test_unpaired():
    assert decode("......") == ((), ())
    assert decode("") == ((), ())
    assert encode(["AAAA"], [], []) == "...."


@pytest.mark.parametrize(
    "structure",
    [
        "(...)",
        "((..))",
        "(((...)))..((..))",
        "((.&.))",
        "..(((&...)))..",
        "((..((...))..))",
        ".((((......))))..&..((....))",
        "..((((&))))..&..",
    ],
)
def test_round_trip(structure):
    openings, closings = decode(structure)
    assert all(x < y for x, y in zip(openings, closings))
    assert len(set(openings) | set(closings)) == 2 * len(openings)

    again = encode(_strands_for(structure), openings, closings)
    assert again == structure
    assert decode(again) == (openings, closings)


@pytest.mark.parametrize("structure", ["((..)", "(", "((&..)", "(((...))"])
def test_unmatched_opening(structure):
    with pytest.raises(MalformedStructureError):
        decode(structure)


@pytest.mark.parametrize("structure", [")", "(..))", ".)(."])
def test_unmatched_closing(structure):
    with pytest.raises(MalformedStructureError):
        decode(structure)


def test_invalid_character():
    with pytest.raises(MalformedStructureError):
        decode("((..[]))")
    # malformed structures are ValueErrors, for callers that don't care which
    with pytest.raises(ValueError):
        decode("(x)")


def test_encode_bad_coordinates():
    with pytest.raises(ValueError):
        encode(["AAAA"], [1, 2], [4])
    with pytest.raises(ValueError):
        encode(["AAAA"], [1], [5])
    with pytest.raises(ValueError):
        encode(["AAAA"], [0], [3])


def test_strip_markers():
    assert strip_markers("((.&.))") == "((..))"


def test_unpaired_mask():
    assert unpaired_mask(8, 4, 8) == "....xxxx"
    assert unpaired_mask(3, -1, 3) == "xxx"
    assert unpaired_mask(5, 3, 3) == "....."
    assert unpaired_mask(5, 2, 10) == "..xxx"
