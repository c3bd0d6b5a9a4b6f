"""
TOML configuration for the acceptance uncertainty batch

One file describes where the weight histograms live, what to write and the
ordered list of (sample, label, level) triples to process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import tomli

from .exceptions import ConfigurationError

logger = logging.getLogger("AcceptanceSyst.Config")

DEFAULT_CONFIG_PATH = Path("config") / "systematics.toml"


@dataclass(frozen=True)
class SampleSpec:
    """One entry of the batch: sample name, display label and selection level"""

    sample: str
    level: str
    label: str = ""


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings passed explicitly to the loader, reporter and plotter.

    Attributes:
        input_dir: Directory containing <sample>.root
        vector_prefix: Common prefix of the weight histogram names
        gen_suffix: Suffix of the generator-level histogram
        save_figures: Write PDF ratio plots
        figures_dir: Destination of the plots
        save_tables: Write the summary table
        tables_dir: Destination of the summary table
        plot_bins: Number of histogram bins
        plot_range: Histogram x range
        plot_color: Fill/line colour
        plot_formats: File extensions to save
        samples: Ordered batch entries
    """

    input_dir: Path
    vector_prefix: str = "list_vectors_weights"
    gen_suffix: str = "gen"
    save_figures: bool = False
    figures_dir: Path = Path("figures")
    save_tables: bool = False
    tables_dir: Path = Path("tables")
    plot_bins: int = 100
    plot_range: tuple[float, float] = (0.965, 1.035)
    plot_color: str = "#cc0000"
    plot_formats: tuple[str, ...] = ("pdf", "png")
    samples: tuple[SampleSpec, ...] = field(default_factory=tuple)

    def with_overrides(self, **changes: Any) -> "AnalysisConfig":
        """Return a copy with the non-None changes applied"""
        changes = {key: value for key, value in changes.items() if value is not None}
        for key in ("input_dir", "figures_dir", "tables_dir"):
            if key in changes:
                changes[key] = Path(changes[key])
        return replace(self, **changes)


def _load_toml(config_path: Path) -> dict:
    """
    Load TOML configuration file with proper error handling

    Raises:
        ConfigurationError: If file not found, unreadable or parsing fails
    """
    try:
        with open(config_path, "rb") as f:
            return tomli.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}")
    except tomli.TOMLDecodeError as e:
        raise ConfigurationError(f"Error parsing TOML file {config_path}: {e}")


def _parse_samples(entries: Any, config_path: Path) -> tuple[SampleSpec, ...]:
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(
            f"No [[samples]] entries in {config_path}\n"
            f"Each entry needs 'sample' and 'level' (and optionally 'label')"
        )

    samples = []
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Sample entry {position} in {config_path} is not a table")
        missing = [key for key in ("sample", "level") if not entry.get(key)]
        if missing:
            raise ConfigurationError(
                f"Sample entry {position} in {config_path} is missing: {', '.join(missing)}"
            )
        samples.append(SampleSpec(sample=str(entry["sample"]),
                                  level=str(entry["level"]),
                                  label=str(entry.get("label", ""))))
    return tuple(samples)


def _parse_plot(plot: dict, config_path: Path) -> dict[str, Any]:
    bins = plot.get("bins", 100)
    value_range = plot.get("range", [0.965, 1.035])
    if not isinstance(bins, int) or bins <= 0:
        raise ConfigurationError(f"[plot] bins must be a positive integer in {config_path}")
    if (not isinstance(value_range, (list, tuple)) or len(value_range) != 2
            or not value_range[0] < value_range[1]):
        raise ConfigurationError(f"[plot] range must be [low, high] with low < high in {config_path}")
    formats = plot.get("formats", ["pdf", "png"])
    if isinstance(formats, str):
        formats = [formats]
    if (not isinstance(formats, list) or not formats
            or not all(isinstance(fmt, str) and fmt for fmt in formats)):
        raise ConfigurationError(f"[plot] formats must be a list of file extensions in {config_path}")
    return {
        "plot_bins": bins,
        "plot_range": (float(value_range[0]), float(value_range[1])),
        "plot_color": str(plot.get("color", "#cc0000")),
        "plot_formats": tuple(formats),
    }


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> AnalysisConfig:
    """
    Build an AnalysisConfig from a TOML file

    Args:
        config_path: Path to the TOML file

    Returns:
        AnalysisConfig

    Raises:
        ConfigurationError: If the file is missing, invalid or incomplete
    """
    config_path = Path(config_path)
    raw = _load_toml(config_path)

    input_section = raw.get("input", {})
    if "base_path" not in input_section:
        raise ConfigurationError(f"Missing [input] base_path in {config_path}")

    output = raw.get("output", {})
    config = AnalysisConfig(
        input_dir=Path(input_section["base_path"]),
        vector_prefix=input_section.get("vector_prefix", "list_vectors_weights"),
        gen_suffix=input_section.get("gen_suffix", "gen"),
        save_figures=bool(output.get("save_figures", False)),
        figures_dir=Path(output.get("figures_dir", "figures")),
        save_tables=bool(output.get("save_tables", False)),
        tables_dir=Path(output.get("tables_dir", "tables")),
        samples=_parse_samples(raw.get("samples"), config_path),
        **_parse_plot(raw.get("plot", {}), config_path),
    )

    logger.debug(f"Loaded {len(config.samples)} samples from {config_path}")
    return config
