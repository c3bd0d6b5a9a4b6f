"""
Module for loading Monte Carlo weight histograms from ROOT files using uproot
"""

from __future__ import annotations

import logging
from pathlib import Path

import uproot
from uproot.deserialization import DeserializationError

from .modules.exceptions import (
    DataLoadError,
    MissingFileError,
    MissingVectorError,
    WeightLayoutError,
)
from .modules.weight_layout import DEFAULT_LAYOUT, WeightLayout, WeightVector


class WeightLoader:
    """Class for reading generator- and reconstruction-level weight sums per sample"""

    def __init__(self, input_dir, vector_prefix: str = "list_vectors_weights",
                 gen_suffix: str = "gen", layout: WeightLayout = DEFAULT_LAYOUT):
        """
        Initialize with input directory path

        Parameters:
        - input_dir: Directory containing one <sample>.root file per sample
        - vector_prefix: Prefix shared by all weight histograms
        - gen_suffix: Suffix of the generator-level histogram
        - layout: Expected bin layout
        """
        self.input_dir = Path(input_dir)
        self.vector_prefix = vector_prefix
        self.gen_suffix = gen_suffix
        self.layout = layout
        self.logger = logging.getLogger("AcceptanceSyst.WeightLoader")

    @classmethod
    def from_config(cls, config, layout: WeightLayout = DEFAULT_LAYOUT) -> "WeightLoader":
        return cls(config.input_dir, config.vector_prefix, config.gen_suffix, layout)

    def file_path(self, sample: str) -> Path:
        return self.input_dir / f"{sample}.root"

    def vector_names(self, level: str) -> tuple[str, str]:
        """Histogram names for (generator level, selection level)"""
        return (f"{self.vector_prefix}_{self.gen_suffix}",
                f"{self.vector_prefix}_{level}")

    def _read_vector(self, root_file, name: str, file_path: Path,
                     sample: str, level: str, stage: str) -> WeightVector:
        try:
            hist = root_file[name]
        except uproot.KeyInFileError:
            self.logger.error(f"Histogram {name} not found in {file_path}")
            raise MissingVectorError(name, str(file_path))

        if not isinstance(hist, uproot.behaviors.TH1.TH1):
            self.logger.error(f"Object {name} in {file_path} is not a 1D histogram")
            raise WeightLayoutError(f"'{name}' in {file_path} is not a 1D histogram")

        contents = hist.values(flow=False)
        if len(contents) != self.layout.n_weights:
            message = (f"Histogram {name} in {file_path} has {len(contents)} bins, "
                       f"expected {self.layout.n_weights}")
            self.logger.error(message)
            raise WeightLayoutError(message)

        return WeightVector(sample=sample, level=level, stage=stage, contents=contents)

    def load(self, sample: str, level: str) -> tuple[WeightVector, WeightVector]:
        """
        Load the weight histograms of one sample for one selection level

        Parameters:
        - sample: Sample name (file stem)
        - level: Selection level (suffix of the reconstruction-level histogram)

        Returns:
        - (gen, rec) WeightVectors
        """
        file_path = self.file_path(sample)
        if not file_path.exists():
            self.logger.error(f"File not found: {file_path}")
            raise MissingFileError(str(file_path))

        gen_name, rec_name = self.vector_names(level)
        self.logger.debug(f"Reading {gen_name} and {rec_name} from {file_path}")

        try:
            with uproot.open(file_path) as root_file:
                gen = self._read_vector(root_file, gen_name, file_path, sample, level, "gen")
                rec = self._read_vector(root_file, rec_name, file_path, sample, level, "rec")
        except (OSError, ValueError, DeserializationError) as e:
            self.logger.error(f"Error reading ROOT file {file_path}: {e}")
            raise DataLoadError(f"Cannot read ROOT file {file_path}: {e}") from e

        return gen, rec
