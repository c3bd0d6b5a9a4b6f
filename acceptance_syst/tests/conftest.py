"""
Global pytest fixtures and configuration for the test suite.

Provides reusable fixtures for weight vectors, mock ROOT files and
configuration files without duplicating setup code across test modules.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from acceptance_syst.modules.weight_layout import DEFAULT_LAYOUT, WeightVector


@pytest.fixture
def tmp_test_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test operations.

    Automatically cleaned up after test completion.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix="acceptance_test_"))
    try:
        yield tmp_dir
    finally:
        if tmp_dir.exists():
            shutil.rmtree(tmp_dir)


@pytest.fixture
def input_dir(tmp_test_dir: Path) -> Path:
    input_dir = tmp_test_dir / "rootfiles"
    input_dir.mkdir(parents=True, exist_ok=True)
    return input_dir


@pytest.fixture
def known_weights() -> tuple[WeightVector, WeightVector]:
    """
    Weight pair with hand-computable uncertainties.

    gen is flat at 100. rec is flat at 50 except:
      bin 9 = 55 (QCD mu=0.5 -> 10%), bin 5 = 45 (QCD mu=2.0 -> 10%),
      bin 110 = 51 (2%), bin 111 = 49 (2%),
      PDF bins alternate 50.5 / 49.5 (ratios 1.01 / 0.99 -> RMS 1%).
    """
    gen = np.full(DEFAULT_LAYOUT.n_weights, 100.0)
    rec = np.full(DEFAULT_LAYOUT.n_weights, 50.0)
    rec[9 - 1] = 55.0
    rec[5 - 1] = 45.0
    rec[110 - 1] = 51.0
    rec[111 - 1] = 49.0
    for position, index in enumerate(DEFAULT_LAYOUT.pdf_indices):
        rec[index - 1] = 50.5 if position % 2 == 0 else 49.5

    return (
        WeightVector("KnownSample", "0jet", "gen", gen),
        WeightVector("KnownSample", "0jet", "rec", rec),
    )


@pytest.fixture
def scaled_weights() -> tuple[WeightVector, WeightVector]:
    """
    gen with nominal 100, bin 5 = 110, bin 9 = 90, PDF bins spanning 95-105,
    alpha_s 101 / 99; rec is exactly 0.9 * gen.
    """
    gen = np.full(DEFAULT_LAYOUT.n_weights, 100.0)
    gen[5 - 1] = 110.0
    gen[9 - 1] = 90.0
    gen[10 - 1:109] = np.linspace(95.0, 105.0, 100)
    gen[110 - 1] = 101.0
    gen[111 - 1] = 99.0
    return (
        WeightVector("ScaledSample", "1jet", "gen", gen),
        WeightVector("ScaledSample", "1jet", "rec", 0.9 * gen),
    )


def pytest_configure(config: pytest.Config) -> None:
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line("markers", "unit: fast tests of single functions and classes")
    config.addinivalue_line("markers", "integration: batch runs on ROOT files")
    config.addinivalue_line("markers", "validation: error handling and degenerate input")
