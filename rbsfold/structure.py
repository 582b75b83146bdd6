"""Conversion between bracket-notation secondary structures and base-pair
coordinate lists.

Coordinates are 1-based positions in the concatenated sequence with strand
markers (``&``) removed, so ``"(.&.)"`` over strands ``AC`` and ``AC`` is a
single pair between positions 1 and 4.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

from typing_extensions import TypeAlias

__all__ = [
    "MalformedStructureError",
    "Pairs",
    "decode",
    "encode",
    "strip_markers",
    "unpaired_mask",
]

STRAND_BREAK = "&"

Pairs: TypeAlias = Tuple[Tuple[int, ...], Tuple[int, ...]]


class MalformedStructureError(ValueError):
    "A bracket-notation string that doesn't describe a nested pairing."


def decode(structure: str) -> Pairs:
    """Convert a bracket-notation string into (openings, closings).

    openings[i] pairs with closings[i].  Pairs are listed in the order their
    opening brackets appear.  Strand markers are not counted as positions.
    """
    openings: List[int] = []
    closings: List[int] = []
    stack: List[Tuple[int, int]] = []  # (position, index into openings)
    markers = 0

    for i, c in enumerate(structure):
        pos = i - markers + 1
        if c == ".":
            continue
        elif c == "(":
            stack.append((pos, len(openings)))
            openings.append(pos)
            closings.append(0)
        elif c == ")":
            if not stack:
                raise MalformedStructureError(
                    f"Unmatched ')' at column {i} of {structure!r}"
                )
            _, idx = stack.pop()
            closings[idx] = pos
        elif c == STRAND_BREAK:
            markers += 1
        else:
            raise MalformedStructureError(
                f"Invalid character {c!r} at column {i} of {structure!r}"
            )

    if stack:
        raise MalformedStructureError(
            f"{len(stack)} unmatched '(' in {structure!r}, "
            f"first at position {stack[0][0]}"
        )

    return tuple(openings), tuple(closings)


def encode(
    strands: Sequence[str], openings: Sequence[int], closings: Sequence[int]
) -> str:
    """Write 1-based base-pair coordinates as bracket notation over `strands`,
    with an ``&`` between consecutive strands."""
    if len(openings) != len(closings):
        raise ValueError(
            f"{len(openings)} opening positions but {len(closings)} closing positions"
        )
    total = sum(len(s) for s in strands)
    opened = {x - 1 for x in openings}
    closed = {y - 1 for y in closings}
    for p in opened | closed:
        if not 0 <= p < total:
            raise ValueError(f"Base pair position {p + 1} outside 1..{total}")

    out: List[str] = []
    offset = 0
    for strand_number, seq in enumerate(strands):
        if strand_number > 0:
            out.append(STRAND_BREAK)
        for pos in range(offset, offset + len(seq)):
            if pos in opened:
                out.append("(")
            elif pos in closed:
                out.append(")")
            else:
                out.append(".")
        offset += len(seq)

    return "".join(out)


def strip_markers(structure: str) -> str:
    return structure.replace(STRAND_BREAK, "")


def unpaired_mask(length: int, start: int, end: int) -> str:
    """A hard-constraint string of `length` forbidding pairing in [start, end).

    Uses ViennaRNA's dot-bracket constraint syntax: ``x`` marks a position that
    must stay unpaired, ``.`` leaves it unconstrained.
    """
    start = max(0, start)
    end = min(length, end)
    if end <= start:
        return "." * length
    return "." * start + "x" * (end - start) + "." * (length - end)
