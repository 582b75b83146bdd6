from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Literal, Optional, Sequence, Tuple

from .structure import decode

__all__ = [
    "Dangles",
    "FoldKind",
    "FoldResult",
    "InvalidDanglesError",
    "normalize_sequence",
]

FoldKind = Literal["mono", "co", "unknown"]

_DANGLES_CODES = {"all": 2, "some": 1, "none": 0, "default": None}


class InvalidDanglesError(ValueError):
    pass


@dataclass(frozen=True)
class Dangles:
    "Dangling-end treatment passed to the folding model."
    setting: Literal["all", "some", "none", "default"] = "all"

    def __post_init__(self):
        if self.setting not in _DANGLES_CODES:
            raise InvalidDanglesError(
                f"Invalid dangle setting {self.setting!r}; "
                f"expected one of {', '.join(_DANGLES_CODES)}"
            )

    @property
    def code(self) -> Optional[int]:
        "ViennaRNA dangles code, or None to keep the model default."
        return _DANGLES_CODES[self.setting]


def normalize_sequence(seq: str) -> str:
    "Upper-case a DNA or RNA sequence and write it as RNA."
    return seq.upper().replace("T", "U")


@dataclass(frozen=True)
class FoldResult:
    """A folded structure, tagged by how many strands were folded.

    kind is "mono" for one sequence, "co" for an (mRNA, rRNA) pair, and
    "unknown" when no sequences, or some other number, are attached.
    openings and closings are 1-based positions in the concatenated sequence.
    """

    kind: FoldKind
    sequences: Tuple[str, ...]
    free_energy: float
    "kcal/mol"
    structure: str
    openings: Tuple[int, ...] = field(default=())
    closings: Tuple[int, ...] = field(default=())

    def __post_init__(self):
        if self.kind not in ("mono", "co", "unknown"):
            raise ValueError(f"Unknown fold kind {self.kind!r}")
        if len(self.openings) != len(self.closings):
            raise ValueError("openings and closings differ in length")

    @classmethod
    def create(
        cls,
        sequences: Optional[Sequence[str]],
        free_energy: float,
        structure: str,
    ) -> FoldResult:
        """Build a fold result from folded sequences and their structure,
        decoding base-pair coordinates from the structure."""
        openings, closings = decode(structure)
        if sequences is None:
            seqs: Tuple[str, ...] = ()
            kind: FoldKind = "unknown"
        else:
            seqs = tuple(sequences)
            if len(seqs) == 1:
                kind = "mono"
            elif len(seqs) == 2:
                kind = "co"
            else:
                kind = "unknown"
        return cls(kind, seqs, float(free_energy), structure, openings, closings)

    @property
    def sequence(self) -> str:
        if self.kind == "mono":
            return self.sequences[0]
        elif self.kind == "co" or self.kind == "unknown":
            raise TypeError(f"A {self.kind} fold has no single sequence")
        else:
            raise ValueError(self.kind)

    @property
    def mrna(self) -> str:
        if self.kind == "co":
            return self.sequences[0]
        elif self.kind == "mono" or self.kind == "unknown":
            raise TypeError(f"A {self.kind} fold is not an mRNA:rRNA complex")
        else:
            raise ValueError(self.kind)

    @property
    def rrna(self) -> str:
        if self.kind == "co":
            return self.sequences[1]
        elif self.kind == "mono" or self.kind == "unknown":
            raise TypeError(f"A {self.kind} fold is not an mRNA:rRNA complex")
        else:
            raise ValueError(self.kind)

    @property
    def lengths(self) -> Tuple[int, ...]:
        return tuple(len(s) for s in self.sequences)

    def pairs(self) -> Iterator[Tuple[int, int]]:
        return zip(self.openings, self.closings)

    @property
    def num_pairs(self) -> int:
        return len(self.openings)
