from __future__ import annotations
import logging as log
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from . import vienna
from .calculations import (
    calc_dg_mrna,
    calc_dg_standby_site,
    calc_kinetic_score,
    calc_spacing_penalty,
    cutoff_mrna,
    find_binding_position,
    BindingPositionError,
    InsufficientBasePairsError,
)
from .foldresult import Dangles, FoldResult, normalize_sequence
from .params import DEFAULT_PARAMS, RBSParams

__all__ = ["START_CODONS", "BindingEnergy", "find_start_codons", "calc_dg_total"]

START_CODONS = ("AUG", "GUG", "UUG", "CUG")


@dataclass(frozen=True)
class BindingEnergy:
    """Free energy terms (kcal/mol) for a ribosome binding at one start codon."""

    start_index: int
    "0-based index of the start codon in the mRNA"
    dg_mrna: float
    dg_rrna_mrna: float
    dg_spacing: float
    dg_standby: float
    aligned_spacing: int
    kinetic_score: float
    min_bp_prob: float
    expression: float
    "relative translation initiation rate, K exp(-beta dG_total)"

    @property
    def dg_total(self) -> float:
        return self.dg_rrna_mrna + self.dg_spacing + self.dg_standby - self.dg_mrna


def find_start_codons(mrna: str) -> List[int]:
    "0-based indices of every start codon in `mrna`, DNA or RNA."
    seq = normalize_sequence(mrna)
    return [i for i in range(len(seq) - 2) if seq[i : i + 3] in START_CODONS]


def _place_ribosome(
    candidates: List[FoldResult], start_pos: int, params: RBSParams
) -> Tuple[FoldResult, int, float]:
    """Pick the mRNA:rRNA structure with the lowest dG + spacing penalty.

    Structures that put the ribosome on the start codon, or don't bind it at
    all, are passed over.  Raises the last BindingPositionError seen if none
    of them gives a usable placement.
    """
    best = None
    error: BindingPositionError = InsufficientBasePairsError(
        "No mRNA:rRNA structures to place the ribosome on"
    )
    for fold in candidates:
        try:
            aligned_spacing = find_binding_position(start_pos, fold)
        except BindingPositionError as e:
            error = e
            continue
        dg_spacing = calc_spacing_penalty(aligned_spacing, params)
        if best is None or fold.free_energy + dg_spacing < best[0].free_energy + best[2]:
            best = (fold, aligned_spacing, dg_spacing)

    if best is None:
        raise error
    if best[2] > params.energy_cutoff:
        log.debug(
            "spacing penalty {:.2f} exceeds the {} kcal/mol search window".format(
                best[2], params.energy_cutoff
            )
        )
    return best


def calc_dg_total(
    mrna: str, start_index: int, rrna: str, params: RBSParams = DEFAULT_PARAMS
) -> BindingEnergy:
    """Score one candidate start codon.

    The mRNA is trimmed to params.cutoff nt either side of the start codon.
    The trimmed mRNA is folded alone for dG_mRNA and the kinetic score.  Every
    mRNA:rRNA structure within params.energy_cutoff of the co-fold MFE is then
    considered, and the ribosome is placed on the one with the lowest
    dG_rRNA:mRNA + dG_spacing.  Raises StartCodonOccludedError or
    InsufficientBasePairsError if no structure places it upstream of the
    start codon.
    """
    dangles = Dangles(params.dangles)

    fold_mrna = calc_dg_mrna(mrna, start_index, dangles=dangles, params=params)
    kinetic_score, min_bp_prob = calc_kinetic_score(fold_mrna)

    window, offset = cutoff_mrna(mrna, start_index, params.cutoff)
    start_in_window = start_index - offset
    candidates = vienna.subopt(
        [window, rrna],
        params.energy_cutoff,
        temperature=params.temperature,
        dangles=dangles,
    )

    try:
        fold_rrna_mrna, aligned_spacing, dg_spacing = _place_ribosome(
            candidates, start_in_window + 1, params
        )
    except BindingPositionError as e:
        log.debug("start codon at {}: {}".format(start_index, e))
        raise
    dg_standby = calc_dg_standby_site(
        fold_rrna_mrna, dangles, params.temperature, params
    )

    dg_total = fold_rrna_mrna.free_energy + dg_spacing + dg_standby - fold_mrna.free_energy
    expression = float(params.k * np.exp(-params.beta * dg_total))

    return BindingEnergy(
        start_index=start_index,
        dg_mrna=fold_mrna.free_energy,
        dg_rrna_mrna=fold_rrna_mrna.free_energy,
        dg_spacing=dg_spacing,
        dg_standby=dg_standby,
        aligned_spacing=aligned_spacing,
        kinetic_score=kinetic_score,
        min_bp_prob=min_bp_prob,
        expression=expression,
    )
