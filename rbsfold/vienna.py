# Thin layer over the ViennaRNA Python bindings.  Every call builds its own
# fold compound and copies energies and structures out into FoldResults;
# compounds are never kept or shared between calls.

import logging as log
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

import RNA

from .foldresult import Dangles, FoldResult, normalize_sequence
from .params import DEFAULT_PARAMS
from .structure import MalformedStructureError, STRAND_BREAK, strip_markers

__all__ = ["FoldingError", "fold_compound", "mfe", "subopt", "eval_structure"]

DEFAULT_TEMP = DEFAULT_PARAMS.temperature
DEFAULT_DANGLES = Dangles(DEFAULT_PARAMS.dangles)


class FoldingError(RuntimeError):
    "The folding library failed, or returned something unusable, for one request."

    def __init__(self, message: str, sequences: Sequence[str], temperature: float):
        self.sequences = tuple(sequences)
        self.temperature = temperature
        super().__init__(
            f"{message} (sequences={STRAND_BREAK.join(self.sequences)!r}, "
            f"temperature={temperature})"
        )


def _strands(sequences: Sequence[str]) -> Tuple[str, ...]:
    # a bare string would otherwise fold as one strand per nucleotide
    if isinstance(sequences, str):
        raise TypeError(
            f"Expected a sequence of strands, got the string {sequences!r}; "
            "wrap a single strand in a list"
        )
    return tuple(normalize_sequence(s) for s in sequences)


def _model_details(temperature: float, dangles: Dangles):
    md = RNA.md()
    md.temperature = temperature
    md.uniq_ML = 1  # required by subopt
    if dangles.code is not None:
        md.dangles = dangles.code
    return md


@contextmanager
def fold_compound(
    sequences: Sequence[str],
    temperature: float = DEFAULT_TEMP,
    dangles: Dangles = DEFAULT_DANGLES,
    constraints: Optional[str] = None,
) -> Iterator["RNA.fold_compound"]:
    """Yield a ViennaRNA fold compound for `sequences`, joined with ``&``.

    constraints, if given, is a hard-constraint string (``x`` for unpaired,
    ``.`` for free, and so on) with one character per nucleotide of the
    concatenated sequence; strand markers in it are ignored.
    """
    seqs = _strands(sequences)
    if not seqs:
        raise ValueError("Nothing to fold")
    total = sum(len(s) for s in seqs)
    if constraints is not None:
        constraints = strip_markers(constraints)
        if len(constraints) != total:
            raise ValueError(
                f"Constraint string has {len(constraints)} positions; "
                f"sequences have {total}"
            )

    try:
        fc = RNA.fold_compound(
            STRAND_BREAK.join(seqs), _model_details(temperature, dangles)
        )
        if constraints is not None and constraints.strip("."):
            fc.hc_add_from_db(constraints, RNA.CONSTRAINT_DB_DEFAULT)
    except Exception as e:
        raise FoldingError(f"Could not set up fold compound: {e}", seqs, temperature) from e

    yield fc


def _checked(
    structure: str, sequences: Sequence[str], temperature: float
) -> str:
    if structure is None:
        raise FoldingError("No structure returned", sequences, temperature)
    if len(strip_markers(structure)) != sum(len(s) for s in sequences):
        raise FoldingError(
            f"Structure {structure!r} does not match sequence length",
            sequences,
            temperature,
        )
    return structure


def mfe(
    sequences: Sequence[str],
    constraints: Optional[str] = None,
    temperature: float = DEFAULT_TEMP,
    dangles: Dangles = DEFAULT_DANGLES,
) -> FoldResult:
    "Minimum free energy structure of one sequence, or of a two-strand complex."
    seqs = _strands(sequences)
    log.debug("mfe: {} at {}C".format(STRAND_BREAK.join(seqs), temperature))

    with fold_compound(seqs, temperature, dangles, constraints) as fc:
        try:
            if len(seqs) == 2:
                structure, energy = fc.mfe_dimer()
            else:
                structure, energy = fc.mfe()
        except Exception as e:
            raise FoldingError(f"MFE calculation failed: {e}", seqs, temperature) from e

    return FoldResult.create(seqs, energy, _checked(structure, seqs, temperature))


def _collect_subopt(structure: Optional[str], energy: float, data: List[Tuple[str, float]]):
    # ViennaRNA calls this once per structure, then once with None.
    if structure is None:
        return
    data.append((structure, energy))


def subopt(
    sequences: Sequence[str],
    energy_gap: float,
    constraints: Optional[str] = None,
    temperature: float = DEFAULT_TEMP,
    dangles: Dangles = DEFAULT_DANGLES,
) -> List[FoldResult]:
    """All structures within `energy_gap` kcal/mol of the minimum free energy,
    sorted by increasing free energy."""
    if energy_gap < 0:
        raise ValueError(f"Negative energy gap {energy_gap}")
    seqs = _strands(sequences)

    found: List[Tuple[str, float]] = []
    with fold_compound(seqs, temperature, dangles, constraints) as fc:
        try:
            # delta is in dcal/mol
            fc.subopt_cb(int(round(energy_gap * 100)), _collect_subopt, found)
        except Exception as e:
            raise FoldingError(
                f"Suboptimal enumeration failed: {e}", seqs, temperature
            ) from e

    results = [
        FoldResult.create(seqs, energy, _checked(structure, seqs, temperature))
        for structure, energy in found
    ]
    results.sort(key=lambda r: r.free_energy)
    log.debug(
        "subopt: {} structures within {} kcal/mol for {}".format(
            len(results), energy_gap, STRAND_BREAK.join(seqs)
        )
    )
    return results


def eval_structure(
    sequences: Sequence[str],
    structure: str,
    temperature: float = DEFAULT_TEMP,
    dangles: Dangles = DEFAULT_DANGLES,
) -> float:
    "Free energy of a fixed structure on `sequences`, without searching."
    seqs = _strands(sequences)
    flat = strip_markers(structure)
    if len(flat) != sum(len(s) for s in seqs):
        raise MalformedStructureError(
            f"Structure {structure!r} does not match sequence length"
        )

    with fold_compound(seqs, temperature, dangles) as fc:
        try:
            energy = fc.eval_structure(flat)
        except Exception as e:
            raise FoldingError(
                f"Could not evaluate {structure!r}: {e}", seqs, temperature
            ) from e

    return float(energy)
