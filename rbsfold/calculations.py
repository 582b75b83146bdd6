"""Energetic heuristics for ribosome binding.

These functions turn folded structures into the scalar terms used to rank
candidate start sites.  Apart from the standby-site calculation, which refolds
part of the mRNA, they do no I/O and keep no state.
"""

from __future__ import annotations
import logging as log
from typing import List, Optional, Tuple

import numpy as np

from . import vienna
from .foldresult import Dangles, FoldResult
from .params import DEFAULT_PARAMS, RBSParams
from .structure import encode, unpaired_mask

__all__ = [
    "EmptySequenceError",
    "BindingPositionError",
    "StartCodonOccludedError",
    "InsufficientBasePairsError",
    "calc_kinetic_score",
    "calc_spacing_penalty",
    "find_binding_position",
    "calc_dg_standby_site",
    "cutoff_mrna",
    "calc_dg_mrna",
]


class EmptySequenceError(ValueError):
    pass


class BindingPositionError(ValueError):
    "The ribosome can't be placed on this candidate start site."


class StartCodonOccludedError(BindingPositionError):
    pass


class InsufficientBasePairsError(BindingPositionError):
    pass


def calc_kinetic_score(fold: FoldResult) -> Tuple[float, float]:
    """Calculate a "kinetic score", a heuristic measure of the maximum time
    required for the mRNA secondary structure to form, after the RNA polymer
    model of David et al.

    This ignores cooperative folding mechanisms such as zipping or strand
    displacement, and must not be used to quantify folding kinetics.  It is
    only a filter for mRNAs that *may* fold slowly because of long-range
    pairing.

    Returns (kinetic_score, min_bp_prob).
    """
    mrnalen = len(fold.sequence)
    if mrnalen == 0:
        raise EmptySequenceError("Can't score the kinetics of an empty sequence")

    x = np.asarray(fold.openings, dtype=np.int64)
    y = np.asarray(fold.closings, dtype=np.int64)
    inside = (x <= mrnalen) & (y <= mrnalen)
    largest_range_helix = int(np.max(y[inside] - x[inside])) if np.any(inside) else 0

    kinetic_score = largest_range_helix / mrnalen
    if largest_range_helix > 0:
        min_bp_prob = float(largest_range_helix ** -1.44)
    else:
        min_bp_prob = 1.0

    return kinetic_score, min_bp_prob


def calc_spacing_penalty(
    aligned_spacing: int, params: RBSParams = DEFAULT_PARAMS
) -> float:
    "A dG-like penalty (kcal/mol) for the ribosome binding away from the optimal spacing."
    if aligned_spacing < 0:
        raise ValueError(f"Negative aligned spacing {aligned_spacing}")

    ds = float(aligned_spacing - params.optimal_spacing)
    if aligned_spacing < params.optimal_spacing:
        a, b, c, d = params.dg_spacing_push
        return float(a / (1.0 + np.exp(b * (ds + c))) ** d)
    else:
        a, b, c = params.dg_spacing_pull
        return a * ds * ds + b * ds + c


def _is_duplex_pair(mrnalen: int, x: int, y: int) -> bool:
    return x <= mrnalen < y


def find_binding_position(start_pos: int, fold: FoldResult) -> int:
    """Figure out where exactly the ribosome is binding.

    start_pos is the 1-based position of the first start codon nucleotide in
    the mRNA strand of `fold`, an (mRNA, rRNA) complex.  Returns the aligned
    spacing between the last mRNA:rRNA contact and the start codon, corrected
    for the unpaired 3' end of the rRNA.
    """
    len_mrna = len(fold.mrna)
    len_rrna = len(fold.rrna)

    for mrna_nt, rrna_nt in zip(reversed(fold.openings), reversed(fold.closings)):
        if not _is_duplex_pair(len_mrna, mrna_nt, rrna_nt):
            # mRNA backfolding, or the rRNA pairing with itself
            continue
        if mrna_nt >= start_pos:
            raise StartCodonOccludedError(
                f"Ribosome is sitting on the start codon at {start_pos} "
                f"(last bound mRNA nt {mrna_nt})"
            )
        rrna_pos = rrna_nt - len_mrna
        return (start_pos - mrna_nt) - (rrna_pos - len_rrna)

    raise InsufficientBasePairsError(
        f"Ran out of base pairs before finding an mRNA:rRNA contact in {fold.structure!r}"
    )


def calc_dg_standby_site(
    fold: FoldResult,
    dangles: Optional[Dangles] = None,
    temperature: Optional[float] = None,
    params: RBSParams = DEFAULT_PARAMS,
) -> float:
    """Calculate dG_standby from the structure of the mRNA:rRNA complex.

    To get the energy of the complex while disallowing pairing at the standby
    site, the mRNA is split into (i) a pre-sequence that may fold, (ii) the
    standby site, which may not, and (iii) the rRNA binding site and everything
    3' of it, whose pairs are kept from `fold`.  The recombined structure is
    evaluated and compared against the unconstrained complex.
    """
    if dangles is None:
        dangles = Dangles(params.dangles)
    if temperature is None:
        temperature = params.temperature

    mrna, rrna = fold.mrna, fold.rrna
    len_mrna = len(mrna)

    duplex = [x for x, y in fold.pairs() if _is_duplex_pair(len_mrna, x, y)]
    if not duplex:
        raise InsufficientBasePairsError(
            f"No mRNA:rRNA base pairs in {fold.structure!r}"
        )
    most_5p_mrna = min(duplex)

    openings: List[int] = []
    closings: List[int] = []

    # Everything upstream of the binding site, standby site included
    pre = mrna[: most_5p_mrna - 1]
    if pre:
        mask = unpaired_mask(
            len(pre), len(pre) - params.standby_site_length, len(pre)
        )
        fold_pre = vienna.mfe([pre], mask, temperature, dangles)
        openings.extend(fold_pre.openings)
        closings.extend(fold_pre.closings)

    for x, y in fold.pairs():
        if x >= most_5p_mrna:
            openings.append(x)
            closings.append(y)

    structure_after = encode((mrna, rrna), openings, closings)
    dg_after = vienna.eval_structure((mrna, rrna), structure_after, temperature, dangles)

    dg_standby = fold.free_energy - dg_after
    log.debug(
        "standby site: {} -> {} ({:.2f} kcal/mol)".format(
            fold.structure, structure_after, dg_standby
        )
    )
    return min(dg_standby, 0.0)


def cutoff_mrna(mrna: str, start_index: int, cutoff: int = DEFAULT_PARAMS.cutoff) -> Tuple[str, int]:
    """The window of `mrna` within `cutoff` nt of a 0-based start index.

    Returns (window, offset), where offset is the index of the window's first
    nucleotide in `mrna`.
    """
    begin = max(0, start_index - cutoff)
    end = min(len(mrna), start_index + cutoff)
    return mrna[begin:end], begin


def calc_dg_mrna(
    mrna: str,
    start_index: int,
    constraints: Optional[str] = None,
    dangles: Optional[Dangles] = None,
    params: RBSParams = DEFAULT_PARAMS,
) -> FoldResult:
    "Fold the mRNA window around a start codon; dG_mRNA is its free energy."
    if dangles is None:
        dangles = Dangles(params.dangles)
    window, offset = cutoff_mrna(mrna, start_index, params.cutoff)
    if constraints is not None:
        constraints = constraints[offset : offset + len(window)]
    return vienna.mfe([window], constraints, params.temperature, dangles)
