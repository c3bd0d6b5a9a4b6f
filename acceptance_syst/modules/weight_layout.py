"""
Bin layout of the Monte Carlo weight histograms

The generator writes one weight per variation, stored in a 111-bin histogram
(1-indexed, as in ROOT):

    bin   1        muR=1   muF=1     nominal
    bins  2-9      QCD scale variations (see QCD_SCALES)
    bins  10-109   PDF set 260001 ... 260100 (100 replicas)
    bin   110      PDF set 265000 (alpha_s down)
    bin   111      PDF set 266000 (alpha_s up)

WeightVector holds the contents of one such histogram with 1-based access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

# (muR, muF) per QCD bin
QCD_SCALES: dict[int, tuple[float, float]] = {
    1: (1.0, 1.0),
    2: (1.0, 2.0),
    3: (1.0, 0.5),
    4: (2.0, 1.0),
    5: (2.0, 2.0),
    6: (2.0, 0.5),
    7: (0.5, 1.0),
    8: (0.5, 2.0),
    9: (0.5, 0.5),
}

PDF_SET_BASE = 260000


@dataclass(frozen=True)
class WeightLayout:
    """Named indices into a weight histogram.

    Attributes:
        n_weights: Number of bins in the histogram
        nominal: Bin of the nominal weight
        qcd_down: Bin with both scales at 0.5
        qcd_up: Bin with both scales at 2.0
        pdf_first: First PDF replica bin
        pdf_last: Last PDF replica bin (inclusive)
        alpha_s: Bins of the two alpha_s variations
        alpha_s_sets: LHAPDF ids of the alpha_s variations, used as labels
    """

    n_weights: int = 111
    nominal: int = 1
    qcd_down: int = 9
    qcd_up: int = 5
    pdf_first: int = 10
    pdf_last: int = 109
    alpha_s: tuple[int, int] = (110, 111)
    alpha_s_sets: tuple[int, int] = (265000, 266000)

    def __post_init__(self) -> None:
        indices = [self.nominal, self.qcd_down, self.qcd_up,
                   self.pdf_first, self.pdf_last, *self.alpha_s]
        for index in indices:
            if not 1 <= index <= self.n_weights:
                raise ValueError(f"Bin {index} outside layout of {self.n_weights} weights")
        if self.pdf_last < self.pdf_first:
            raise ValueError(f"Empty PDF range [{self.pdf_first}, {self.pdf_last}]")

    @property
    def pdf_indices(self) -> range:
        """Closed range of PDF replica bins"""
        return range(self.pdf_first, self.pdf_last + 1)

    @property
    def n_pdf(self) -> int:
        return len(self.pdf_indices)

    def qcd_scales(self, index: int) -> tuple[float, float]:
        """Return (muR, muF) for a QCD bin"""
        if index not in QCD_SCALES:
            raise ValueError(f"Bin {index} is not a QCD scale variation")
        return QCD_SCALES[index]

    def pdf_set_id(self, index: int) -> int:
        """Return the LHAPDF id of a PDF replica bin"""
        if index not in self.pdf_indices:
            raise ValueError(f"Bin {index} is not a PDF replica")
        return PDF_SET_BASE + index - self.pdf_first + 1


DEFAULT_LAYOUT = WeightLayout()


@dataclass(frozen=True, eq=False)
class WeightVector:
    """Sums of event weights for one (sample, level, stage).

    Indexing follows the histogram convention: ``vector[1]`` is the nominal
    bin. The underlying array is read-only.
    """

    sample: str
    level: str
    stage: str
    contents: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        contents = np.array(self.contents, dtype=np.float64)
        if contents.ndim != 1:
            raise ValueError(f"Weight contents must be 1-dimensional, got shape {contents.shape}")
        contents.setflags(write=False)
        object.__setattr__(self, "contents", contents)

    @classmethod
    def from_sequence(cls, values: Sequence[float], sample: str = "",
                      level: str = "", stage: str = "gen") -> "WeightVector":
        return cls(sample=sample, level=level, stage=stage, contents=np.asarray(values))

    def __len__(self) -> int:
        return len(self.contents)

    def __getitem__(self, index: int) -> float:
        if not 1 <= index <= len(self.contents):
            raise IndexError(f"Bin {index} outside [1, {len(self.contents)}]")
        return float(self.contents[index - 1])

    def bins(self, indices: Sequence[int] | range) -> np.ndarray:
        """Return the contents of several bins as an array"""
        positions = np.asarray(indices, dtype=int)
        if positions.size and (positions.min() < 1 or positions.max() > len(self.contents)):
            raise IndexError(f"Bins outside [1, {len(self.contents)}]")
        return self.contents[positions - 1]
