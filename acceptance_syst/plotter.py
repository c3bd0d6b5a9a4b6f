"""
Module for plotting the PDF replica acceptance ratios

Example usage:
    plotter = PdfRatioPlotter(output_dir="figures")
    plotter.save(distribution, "WWTo2L2Nu", "WW", "0jet")
    # -> figures/pdfacceptance_WWTo2L2Nu_0jet.pdf and .png
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import mplhep as hep
import numpy as np

# Suppress all font-related warnings
warnings.filterwarnings('ignore', category=UserWarning, module='matplotlib')
logging.getLogger('matplotlib.font_manager').setLevel(logging.ERROR)

# Configure matplotlib to use available fonts before setting style
matplotlib.rcParams['font.family'] = 'sans-serif'
matplotlib.rcParams['font.sans-serif'] = ['DejaVu Sans', 'Arial', 'Helvetica', 'sans-serif']

# Set CMS style for all plots
plt.style.use(hep.style.CMS)

# Override the style font family with the available sans-serif fonts
matplotlib.rcParams["font.family"] = "sans-serif"

X_TITLE = (r"$\frac{N_{rec}^{PDF} / N_{gen}^{PDF}}"
           r"{N_{rec}^{nominal} / N_{gen}^{nominal}}$")


class PdfRatioPlotter:
    """Class for drawing and saving the PDF ratio distribution of one sample"""

    def __init__(self, output_dir, bins: int = 100,
                 value_range: tuple[float, float] = (0.965, 1.035),
                 color: str = "#cc0000", formats=("pdf", "png")):
        """
        Initialize with output directory

        Parameters:
        - output_dir: Directory to save plots (created on first save)
        - bins: Number of histogram bins
        - value_range: Histogram x range
        - color: Fill and line colour
        - formats: File extensions written by save()
        """
        self.output_dir = Path(output_dir)
        self.bins = bins
        self.value_range = tuple(value_range)
        self.color = color
        self.formats = tuple(formats)
        self.logger = logging.getLogger("AcceptanceSyst.PdfRatioPlotter")

    @classmethod
    def from_config(cls, config) -> "PdfRatioPlotter":
        return cls(config.figures_dir, config.plot_bins, config.plot_range,
                   config.plot_color, config.plot_formats)

    def file_stem(self, sample: str, level: str) -> str:
        return f"pdfacceptance_{sample}_{level}"

    def draw(self, distribution, sample: str, label: str, level: str):
        """
        Draw the filled histogram of the per-replica ratios

        Parameters:
        - distribution: Array of PDF ratios
        - sample, label, level: Identify the plot; "<label> <level>" is drawn
          above the top-right corner of the frame

        Returns:
        - (fig, ax)
        """
        values = np.asarray(distribution, dtype=np.float64)
        counts, edges = np.histogram(values, bins=self.bins, range=self.value_range)

        fig, ax = plt.subplots(figsize=(10, 8), num=f"{sample}_{level}", clear=True)

        hep.histplot(counts, edges, histtype="fill", color=self.color, ax=ax)
        hep.histplot(counts, edges, histtype="step", color=self.color, ax=ax)

        ax.set_xlim(*self.value_range)
        ax.set_ylim(bottom=0)
        ax.set_xlabel(X_TITLE, labelpad=12)
        ax.set_ylabel("entries / bin")

        ax.text(1.0, 1.01, f"{label} {level}".strip(), transform=ax.transAxes,
                ha="right", va="bottom", fontsize=20)

        outside = int(np.sum((values < self.value_range[0]) | (values > self.value_range[1])))
        stats = f"Entries  {values.size}\nMean  {np.mean(values):.4f}\nRMS  {np.std(values):.4f}"
        if outside:
            stats += f"\nOutside  {outside}"
        ax.text(0.04, 0.96, stats, transform=ax.transAxes, ha="left", va="top",
                fontsize=14, family="monospace")

        return fig, ax

    def save(self, distribution, sample: str, label: str, level: str) -> list[Path]:
        """
        Draw and save the plot in every configured format

        Returns:
        - List of written file paths
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        fig, _ = self.draw(distribution, sample, label, level)
        paths = []
        try:
            for ext in self.formats:
                path = self.output_dir / f"{self.file_stem(sample, level)}.{ext}"
                fig.savefig(path, dpi=150, bbox_inches="tight")
                paths.append(path)
                self.logger.info(f"Created plot: {path}")
        finally:
            plt.close(fig)

        return paths
