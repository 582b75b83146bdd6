from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, IO, Optional, Tuple, Union
from warnings import warn

import numpy as np
import yaml

from .foldresult import Dangles

__all__ = ["RBSParams", "DEFAULT_PARAMS"]


@dataclass(frozen=True)
class RBSParams:
    """Calibrated constants and folding conditions for RBS energetics."""

    temperature: float = 37.0
    "folding temperature, in degrees C"
    dangles: str = "all"
    "dangling-end treatment: all, some, none or default"
    optimal_spacing: int = 5
    "aligned spacing (nt) at which the spacing penalty is zero"
    cutoff: int = 35
    "nt kept on either side of the start codon when folding the mRNA"
    standby_site_length: int = 4
    "nt upstream of the rRNA binding site that must remain unpaired"
    energy_cutoff: float = 3.0
    "suboptimal energy gap (kcal/mol) for mRNA:rRNA enumeration"
    dg_spacing_push: Tuple[float, float, float, float] = (
        17.20965071,
        3.46341492,
        1.790848365,
        3.0,
    )
    "logistic penalty parameters for spacings shorter than optimal"
    dg_spacing_pull: Tuple[float, float, float] = (0.06422042, 0.275640836, 0.0)
    "quadratic penalty parameters for spacings longer than optimal"
    beta: float = 0.40002512
    "apparent Boltzmann factor, 1/(kcal/mol)"
    logk: float = 7.279194329

    def __post_init__(self):
        Dangles(self.dangles)

    @property
    def rt_eff(self) -> float:
        return 1.0 / self.beta

    @property
    def k(self) -> float:
        return float(np.exp(self.logk))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> RBSParams:
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for k, v in d.items():
            if k in known:
                if k in ("dg_spacing_push", "dg_spacing_pull"):
                    v = tuple(float(x) for x in v)
                kwargs[k] = v
            else:
                warn(f"Ignoring {k}={v}")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            d[f.name] = list(v) if isinstance(v, tuple) else v
        return d

    def merge(self, other: Union[Dict[str, Any], RBSParams]) -> RBSParams:
        if isinstance(other, RBSParams):
            other = other.to_dict()
        return RBSParams.from_dict({**self.to_dict(), **other})

    @classmethod
    def from_yaml(cls, file_or_handle) -> RBSParams:
        if isinstance(file_or_handle, str):
            with open(file_or_handle, "r") as f:
                d = yaml.safe_load(f)
        else:
            d = yaml.safe_load(file_or_handle)
        return cls.from_dict(d or {})

    def to_yaml(self, file_or_stream: Optional[IO[str]] = None) -> Optional[str]:
        return yaml.dump(self.to_dict(), file_or_stream, sort_keys=False)


DEFAULT_PARAMS = RBSParams()
