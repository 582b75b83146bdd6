from .structure import MalformedStructureError, decode, encode
from .foldresult import Dangles, FoldResult, InvalidDanglesError
from .params import DEFAULT_PARAMS, RBSParams
from .calculations import (
    BindingPositionError,
    EmptySequenceError,
    InsufficientBasePairsError,
    StartCodonOccludedError,
    calc_dg_standby_site,
    calc_kinetic_score,
    calc_spacing_penalty,
    find_binding_position,
)
from .vienna import FoldingError, eval_structure, mfe, subopt
from .binding import BindingEnergy, calc_dg_total, find_start_codons
