"""
QCD scale, PDF and alpha_s acceptance uncertainties from Monte Carlo weight histograms
"""

from .modules.exceptions import (
    AnalysisError,
    ConfigurationError,
    MissingFileError,
    MissingVectorError,
    NumericDegenerateError,
    WeightLayoutError,
)
from .modules.uncertainty_calculator import UncertaintyReport, compute_uncertainties
from .modules.weight_layout import DEFAULT_LAYOUT, WeightLayout, WeightVector

__version__ = "1.0.0"

__all__ = [
    "AnalysisError",
    "ConfigurationError",
    "DEFAULT_LAYOUT",
    "MissingFileError",
    "MissingVectorError",
    "NumericDegenerateError",
    "UncertaintyReport",
    "WeightLayout",
    "WeightLayoutError",
    "WeightVector",
    "compute_uncertainties",
]
