"""
Acceptance uncertainties from QCD scale, PDF and alpha_s weight variations

For a variation v the acceptance changes by the double ratio

    R_v = (N_rec^v / N_rec^nominal) / (N_gen^v / N_gen^nominal)

where N are sums of event weights at generator level (gen) and after the
reconstruction-level selection (rec). The uncertainties reported are

    QCD      100 * |1 - R_v|   for v = mu 0.5 and mu 2.0
    alpha_s  100 * |1 - R_v|   for the two alpha_s sets
    PDF      100 * RMS of {(N_rec^i / N_gen^i) / (N_rec^nom / N_gen^nom)}
             over the 100 replicas i (spread about the distribution's mean)
    PDF+alpha_s  sqrt(PDF^2 + (alpha_1^2 + alpha_2^2) / 2)

Every ratio divides by a bin content; a zero or non-finite denominator raises
NumericDegenerateError instead of producing inf/NaN.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from .exceptions import NumericDegenerateError, WeightLayoutError
from .weight_layout import DEFAULT_LAYOUT, WeightLayout, WeightVector


@dataclass(frozen=True)
class UncertaintyReport:
    """Acceptance uncertainties for one (sample, level), all in percent"""

    sample: str
    label: str
    level: str
    nominal_acceptance: float
    qcd_down: float
    qcd_up: float
    alpha_s_down: float
    alpha_s_up: float
    pdf: float
    pdf_alpha: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _bin(vector: WeightVector, index: int) -> float:
    value = vector[index]
    if not math.isfinite(value):
        raise NumericDegenerateError(vector.stage, index, f"non-finite content {value}")
    return value


def _ratio_to_nominal(vector: WeightVector, index: int, layout: WeightLayout) -> float:
    nominal = _bin(vector, layout.nominal)
    if nominal == 0.0:
        raise NumericDegenerateError(vector.stage, layout.nominal, "zero nominal weight")
    return _bin(vector, index) / nominal


def check_layout(vector: WeightVector, layout: WeightLayout = DEFAULT_LAYOUT) -> None:
    """Raise WeightLayoutError unless the vector has layout.n_weights bins"""
    if len(vector) != layout.n_weights:
        raise WeightLayoutError(
            f"{vector.stage} weights for {vector.sample} {vector.level} have "
            f"{len(vector)} bins, expected {layout.n_weights}"
        )


def double_ratio(gen: WeightVector, rec: WeightVector, index: int,
                 layout: WeightLayout = DEFAULT_LAYOUT) -> float:
    """
    (rec[index] / rec[nominal]) / (gen[index] / gen[nominal])

    Args:
        gen: Generator-level weights
        rec: Reconstruction-level weights
        index: Variation bin (1-based)
        layout: Weight histogram layout

    Returns:
        The double ratio, 1.0 when the variation does not change the acceptance

    Raises:
        NumericDegenerateError: If any denominator is zero or a bin is not finite
    """
    gen_ratio = _ratio_to_nominal(gen, index, layout)
    rec_ratio = _ratio_to_nominal(rec, index, layout)
    if gen_ratio == 0.0:
        raise NumericDegenerateError(gen.stage, index, "zero weight for variation")
    return rec_ratio / gen_ratio


def qcd_deviation(gen: WeightVector, rec: WeightVector, index: int,
                  layout: WeightLayout = DEFAULT_LAYOUT) -> float:
    """Double ratio for a QCD scale variation bin"""
    layout.qcd_scales(index)
    return double_ratio(gen, rec, index, layout)


def alpha_s_deviation(gen: WeightVector, rec: WeightVector, index: int,
                      layout: WeightLayout = DEFAULT_LAYOUT) -> float:
    """Double ratio for an alpha_s variation bin"""
    if index not in layout.alpha_s:
        raise ValueError(f"Bin {index} is not an alpha_s variation")
    return double_ratio(gen, rec, index, layout)


def deviation_percent(ratio: float) -> float:
    """Unsigned deviation of a double ratio from unity, in percent"""
    return 1e2 * abs(1.0 - ratio)


def pdf_distribution(gen: WeightVector, rec: WeightVector,
                     layout: WeightLayout = DEFAULT_LAYOUT) -> np.ndarray:
    """
    Per-replica acceptance normalised to the nominal acceptance

    Returns:
        Array with one entry per PDF replica (100 for the default layout)
    """
    denominator = _acceptance(gen, rec, layout)
    if denominator == 0.0:
        raise NumericDegenerateError(rec.stage, layout.nominal, "zero nominal weight")

    indices = layout.pdf_indices
    gen_pdf = gen.bins(indices)
    rec_pdf = rec.bins(indices)

    for stage, values in ((gen.stage, gen_pdf), (rec.stage, rec_pdf)):
        bad = np.flatnonzero(~np.isfinite(values))
        if bad.size:
            raise NumericDegenerateError(stage, indices[bad[0]], f"non-finite content {values[bad[0]]}")

    empty = np.flatnonzero(gen_pdf == 0.0)
    if empty.size:
        raise NumericDegenerateError(gen.stage, indices[empty[0]], "zero weight for PDF replica")

    return (rec_pdf / gen_pdf) / denominator


def pdf_percent(distribution: np.ndarray) -> float:
    """RMS of the PDF ratio distribution about its mean, in percent"""
    values = np.asarray(distribution, dtype=np.float64)
    if values.size == 0:
        raise ValueError("Empty PDF ratio distribution")
    return 1e2 * float(np.std(values))


def combined_pdf_alpha(pdf_pct: float, alpha1_pct: float, alpha2_pct: float) -> float:
    """PDF uncertainty in quadrature with the RMS of the two alpha_s variations"""
    return math.sqrt(pdf_pct**2 + (alpha1_pct**2 + alpha2_pct**2) / 2.0)


def _acceptance(gen: WeightVector, rec: WeightVector, layout: WeightLayout) -> float:
    gen_nominal = _bin(gen, layout.nominal)
    if gen_nominal == 0.0:
        raise NumericDegenerateError(gen.stage, layout.nominal, "zero nominal weight")
    return _bin(rec, layout.nominal) / gen_nominal


def nominal_acceptance(gen: WeightVector, rec: WeightVector,
                       layout: WeightLayout = DEFAULT_LAYOUT) -> float:
    """Nominal acceptance times efficiency, in percent"""
    return 1e2 * _acceptance(gen, rec, layout)


def compute_uncertainties(
    gen: WeightVector,
    rec: WeightVector,
    label: str = "",
    layout: WeightLayout = DEFAULT_LAYOUT,
) -> tuple[UncertaintyReport, np.ndarray]:
    """
    Compute every acceptance uncertainty for one (sample, level)

    Args:
        gen: Generator-level weights
        rec: Reconstruction-level weights for the selection level
        label: Display label carried into the report
        layout: Weight histogram layout

    Returns:
        (report, pdf_ratio_distribution)

    Raises:
        WeightLayoutError: If either vector does not match the layout
        NumericDegenerateError: If any ratio is undefined
    """
    check_layout(gen, layout)
    check_layout(rec, layout)

    qcd_down = deviation_percent(qcd_deviation(gen, rec, layout.qcd_down, layout))
    qcd_up = deviation_percent(qcd_deviation(gen, rec, layout.qcd_up, layout))

    alpha_down_bin, alpha_up_bin = layout.alpha_s
    alpha_down = deviation_percent(alpha_s_deviation(gen, rec, alpha_down_bin, layout))
    alpha_up = deviation_percent(alpha_s_deviation(gen, rec, alpha_up_bin, layout))

    distribution = pdf_distribution(gen, rec, layout)
    pdf = pdf_percent(distribution)

    report = UncertaintyReport(
        sample=rec.sample,
        label=label,
        level=rec.level,
        nominal_acceptance=nominal_acceptance(gen, rec, layout),
        qcd_down=qcd_down,
        qcd_up=qcd_up,
        alpha_s_down=alpha_down,
        alpha_s_up=alpha_up,
        pdf=pdf,
        pdf_alpha=combined_pdf_alpha(pdf, alpha_down, alpha_up),
    )
    return report, distribution
