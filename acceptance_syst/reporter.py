"""
Text report and summary table of acceptance uncertainties
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, TextIO

import pandas as pd

from .modules.uncertainty_calculator import UncertaintyReport
from .modules.weight_layout import DEFAULT_LAYOUT, WeightLayout

logger = logging.getLogger("AcceptanceSyst.Reporter")

TABLE_COLUMNS = {
    "sample": "sample",
    "label": "label",
    "level": "level",
    "nominal_acceptance": "nominal acceptance * eff [%]",
    "qcd_down": "QCD mu=0.5 [%]",
    "qcd_up": "QCD mu=2.0 [%]",
    "alpha_s_down": "alpha_s down [%]",
    "alpha_s_up": "alpha_s up [%]",
    "pdf": "PDF [%]",
    "pdf_alpha": "PDF+alpha_s [%]",
}


def format_report(report: UncertaintyReport, layout: WeightLayout = DEFAULT_LAYOUT) -> str:
    """Fixed-format block for one (sample, level)"""
    alpha_down_set, alpha_up_set = layout.alpha_s_sets
    lines = [
        "",
        f" {report.sample} {report.level} acceptance uncertainties",
        "-----------------------------------------",
        f" nominal acceptance * eff      {report.nominal_acceptance:4.2f}%",
        f" QCD         mu=0.5 / mu=2.0   {report.qcd_down:4.2f}% / {report.qcd_up:4.2f}%",
        f" alpha_s     {alpha_down_set} / {alpha_up_set}   "
        f"{report.alpha_s_down:4.2f}% / {report.alpha_s_up:4.2f}%",
        f" PDF                           {report.pdf:4.2f}%",
        f" PDF+alpha_s                   {report.pdf_alpha:4.2f}%",
        "",
    ]
    return "\n".join(lines) + "\n"


def print_report(report: UncertaintyReport, stream: TextIO | None = None,
                 layout: WeightLayout = DEFAULT_LAYOUT) -> None:
    stream = sys.stdout if stream is None else stream
    stream.write(format_report(report, layout))
    stream.flush()


def summary_table(reports: Iterable[UncertaintyReport]) -> pd.DataFrame:
    """One row per report, columns in report order with readable names"""
    df = pd.DataFrame([report.as_dict() for report in reports], columns=list(TABLE_COLUMNS))
    return df.rename(columns=TABLE_COLUMNS)


def save_summary_table(reports: Iterable[UncertaintyReport], tables_dir) -> list[Path]:
    """
    Write the summary table as CSV and Markdown

    Args:
        reports: Reports to tabulate
        tables_dir: Output directory (created if needed)

    Returns:
        Paths of the written files
    """
    df = summary_table(reports)

    output_dir = Path(tables_dir)
    output_dir.mkdir(exist_ok=True, parents=True)

    csv_path = output_dir / "acceptance_uncertainties.csv"
    md_path = output_dir / "acceptance_uncertainties.md"
    df.to_csv(csv_path, index=False, float_format="%.4f")
    df.to_markdown(md_path, index=False, floatfmt=".2f")

    logger.info(f"Saved: {csv_path}")
    logger.info(f"Saved: {md_path}")
    return [csv_path, md_path]
