#!/usr/bin/env python3
"""
Acceptance uncertainties from QCD scale, PDF and alpha_s weight variations

For every (sample, label, level) listed in the configuration this script:
1. Loads the generator-level and selection-level weight histograms
2. Computes the QCD, alpha_s, PDF and PDF+alpha_s acceptance uncertainties
3. Prints a summary block to standard output
4. Optionally saves the PDF ratio distribution as pdf/png

A missing file, missing histogram or degenerate weight skips that entry
only; the batch continues with the next one.

Usage:
    # Run the default batch (config/systematics.toml)
    acceptance-syst

    # Labelled 0-jet / 1-jet batch, saving figures
    acceptance-syst --config config/hww_jets.toml --save-figures --figures-dir figures
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from .modules.config import DEFAULT_CONFIG_PATH, AnalysisConfig, SampleSpec, load_config
from .modules.exceptions import AnalysisError, ConfigurationError
from .modules.uncertainty_calculator import UncertaintyReport, compute_uncertainties
from .modules.weight_layout import DEFAULT_LAYOUT, WeightLayout
from .plotter import PdfRatioPlotter
from .reporter import print_report, save_summary_table, summary_table
from .utils.logging_config import setup_logging, suppress_warnings
from .weight_loader import WeightLoader

logger = logging.getLogger("AcceptanceSyst")


@dataclass
class BatchResult:
    """Reports of the processed entries and the skipped ones with their reason"""

    reports: list[UncertaintyReport] = field(default_factory=list)
    failures: list[tuple[SampleSpec, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def process_sample(
    spec: SampleSpec,
    loader: WeightLoader,
    plotter: PdfRatioPlotter | None = None,
    stream: TextIO | None = None,
    layout: WeightLayout = DEFAULT_LAYOUT,
) -> UncertaintyReport:
    """
    Load, compute, print and (if a plotter is given) save one entry

    Raises:
        AnalysisError: If the entry cannot be reported in full
    """
    gen, rec = loader.load(spec.sample, spec.level)
    report, distribution = compute_uncertainties(gen, rec, label=spec.label, layout=layout)

    print_report(report, stream, layout)

    if plotter is not None:
        plotter.save(distribution, spec.sample, spec.label, spec.level)

    return report


def run_batch(config: AnalysisConfig, stream: TextIO | None = None,
              layout: WeightLayout = DEFAULT_LAYOUT) -> BatchResult:
    """
    Process every configured entry sequentially

    Args:
        config: Analysis configuration
        stream: Where the text reports go (stdout if None)
        layout: Weight histogram layout

    Returns:
        BatchResult
    """
    loader = WeightLoader.from_config(config, layout)
    plotter = PdfRatioPlotter.from_config(config) if config.save_figures else None

    result = BatchResult()
    for spec in config.samples:
        try:
            report = process_sample(spec, loader, plotter, stream, layout)
        except AnalysisError as e:
            logger.error(f"Skipping {spec.sample} {spec.level}: {e}")
            result.failures.append((spec, str(e)))
            continue
        result.reports.append(report)

    logger.info(f"Processed {len(result.reports)}/{len(config.samples)} entries")
    return result


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="QCD scale, PDF and alpha_s acceptance uncertainties",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"TOML configuration with the samples to process (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--save-figures",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Save the PDF ratio plots (default: [output] save_figures)",
    )
    parser.add_argument(
        "--figures-dir",
        default=None,
        help="Directory for the saved plots (default: [output] figures_dir)",
    )
    parser.add_argument(
        "--input-dir",
        default=None,
        help="Directory containing <sample>.root (default: [input] base_path)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point; returns the process exit code"""
    args = parse_args(argv)
    setup_logging(args.verbose)
    suppress_warnings()

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    config = config.with_overrides(
        save_figures=args.save_figures,
        figures_dir=args.figures_dir,
        input_dir=args.input_dir,
    )

    result = run_batch(config)

    if result.reports:
        table = summary_table(result.reports).to_string(index=False, float_format="{:.2f}".format)
        logger.info("Summary\n" + table)
        if config.save_tables:
            save_summary_table(result.reports, config.tables_dir)

    for spec, reason in result.failures:
        logger.warning(f"Not reported: {spec.sample} {spec.level} ({reason})")

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
