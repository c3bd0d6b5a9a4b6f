"""
Error handling validation tests.

Tests that degenerate weights never leak inf/NaN and that per-sample
failures skip only the affected entry:
- Zero nominal denominators
- Empty variation bins
- Non-finite bin contents
- Layout mismatches
- Batch continuation after failures
"""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
import pytest

from acceptance_syst.main import run_batch
from acceptance_syst.modules.config import AnalysisConfig, SampleSpec
from acceptance_syst.modules.exceptions import (
    AnalysisError,
    NumericDegenerateError,
    WeightLayoutError,
)
from acceptance_syst.modules.uncertainty_calculator import (
    compute_uncertainties,
    double_ratio,
    nominal_acceptance,
    pdf_distribution,
)
from acceptance_syst.modules.weight_layout import DEFAULT_LAYOUT, WeightVector
from acceptance_syst.tests.utils import (
    create_mock_sample,
    create_mock_weights_file,
    generate_gen_weights,
    generate_rec_weights,
)


def _pair(gen: np.ndarray, rec: np.ndarray) -> tuple[WeightVector, WeightVector]:
    return (WeightVector("S", "l", "gen", gen), WeightVector("S", "l", "rec", rec))


@pytest.fixture
def healthy() -> tuple[np.ndarray, np.ndarray]:
    gen = generate_gen_weights(seed=5)
    return gen, generate_rec_weights(gen, seed=6)


@pytest.mark.validation
class TestNumericDegenerate:
    """Zero or non-finite denominators raise NumericDegenerateError."""

    def test_zero_gen_nominal(self, healthy) -> None:
        gen, rec = healthy
        gen[0] = 0.0
        with pytest.raises(NumericDegenerateError) as exc_info:
            compute_uncertainties(*_pair(gen, rec))
        assert exc_info.value.stage == "gen"
        assert exc_info.value.index == 1

    def test_zero_rec_nominal(self, healthy) -> None:
        gen, rec = healthy
        rec[0] = 0.0
        with pytest.raises(NumericDegenerateError) as exc_info:
            compute_uncertainties(*_pair(gen, rec))
        assert exc_info.value.stage == "rec"
        assert exc_info.value.index == 1

    def test_zero_rec_nominal_in_pdf_distribution(self, healthy) -> None:
        gen, rec = healthy
        rec[0] = 0.0
        with pytest.raises(NumericDegenerateError):
            pdf_distribution(*_pair(gen, rec))

    def test_zero_gen_nominal_in_acceptance(self, healthy) -> None:
        gen, rec = healthy
        gen[0] = 0.0
        with pytest.raises(NumericDegenerateError):
            nominal_acceptance(*_pair(gen, rec))

    def test_zero_gen_variation(self, healthy) -> None:
        gen, rec = healthy
        gen[9 - 1] = 0.0
        with pytest.raises(NumericDegenerateError) as exc_info:
            double_ratio(*_pair(gen, rec), 9)
        assert exc_info.value.index == 9

    def test_zero_gen_pdf_replica(self, healthy) -> None:
        gen, rec = healthy
        gen[42 - 1] = 0.0
        with pytest.raises(NumericDegenerateError) as exc_info:
            pdf_distribution(*_pair(gen, rec))
        assert exc_info.value.stage == "gen"
        assert exc_info.value.index == 42

    def test_zero_rec_variation_is_allowed(self, healthy) -> None:
        """An empty selection-level bin is a 100% deviation, not a degenerate ratio."""
        gen, rec = healthy
        rec[5 - 1] = 0.0
        assert double_ratio(*_pair(gen, rec), 5) == 0.0

    @pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf])
    def test_non_finite_nominal(self, healthy, value) -> None:
        gen, rec = healthy
        gen[0] = value
        with pytest.raises(NumericDegenerateError, match="non-finite"):
            compute_uncertainties(*_pair(gen, rec))

    def test_non_finite_pdf_replica(self, healthy) -> None:
        gen, rec = healthy
        rec[77 - 1] = np.nan
        with pytest.raises(NumericDegenerateError) as exc_info:
            pdf_distribution(*_pair(gen, rec))
        assert exc_info.value.index == 77

    def test_healthy_input_is_finite(self, healthy) -> None:
        report, distribution = compute_uncertainties(*_pair(*healthy))
        assert np.all(np.isfinite(distribution))
        assert all(np.isfinite(v) for v in report.as_dict().values() if isinstance(v, float))


@pytest.mark.validation
class TestLayoutMismatch:
    """Vectors that do not match the layout are rejected before indexing."""

    def test_short_vectors(self) -> None:
        with pytest.raises(WeightLayoutError):
            compute_uncertainties(*_pair(np.ones(100), np.ones(100)))

    def test_mismatched_lengths(self) -> None:
        with pytest.raises(WeightLayoutError):
            compute_uncertainties(*_pair(np.ones(DEFAULT_LAYOUT.n_weights), np.ones(112)))

    def test_not_a_histogram(self, input_dir: Path) -> None:
        import uproot

        from acceptance_syst.weight_loader import WeightLoader

        with uproot.recreate(input_dir / "Tree.root") as file:
            file["list_vectors_weights_gen"] = {"w": np.ones(10)}
            file["list_vectors_weights_0jet"] = {"w": np.ones(10)}

        with pytest.raises(WeightLayoutError, match="not a 1D histogram"):
            WeightLoader(input_dir).load("Tree", "0jet")


@pytest.mark.validation
class TestBatchContinuation:
    """A failing entry is reported and skipped, the rest still run."""

    def test_mixed_batch(self, input_dir: Path) -> None:
        create_mock_sample(input_dir, "Good", levels=("0jet",))

        degenerate = generate_gen_weights()
        degenerate[0] = 0.0
        create_mock_weights_file(input_dir / "ZeroNominal.root", {
            "list_vectors_weights_gen": degenerate,
            "list_vectors_weights_0jet": generate_rec_weights(generate_gen_weights()),
        })

        config = AnalysisConfig(
            input_dir=input_dir,
            samples=(
                SampleSpec("Missing", "0jet"),
                SampleSpec("Good", "1jet"),
                SampleSpec("ZeroNominal", "0jet"),
                SampleSpec("Good", "0jet"),
            ),
        )
        stream = io.StringIO()

        result = run_batch(config, stream)

        assert [r.sample for r in result.reports] == ["Good"]
        assert [(s.sample, s.level) for s, _ in result.failures] == [
            ("Missing", "0jet"), ("Good", "1jet"), ("ZeroNominal", "0jet"),
        ]
        assert "not found" in result.failures[0][1]
        assert "list_vectors_weights_1jet" in result.failures[1][1]
        assert "Degenerate gen weight in bin 1" in result.failures[2][1]
        assert not result.ok

        output = stream.getvalue()
        assert output.count("acceptance uncertainties") == 1
        assert " Good 0jet acceptance uncertainties" in output
        assert "nan" not in output.lower()

    def test_unreadable_file_skipped(self, input_dir: Path) -> None:
        create_mock_sample(input_dir, "Good", levels=("0jet",))
        (input_dir / "Broken.root").write_bytes(b"")
        config = AnalysisConfig(
            input_dir=input_dir,
            samples=(SampleSpec("Broken", "0jet"), SampleSpec("Good", "0jet")),
        )

        result = run_batch(config, io.StringIO())

        assert [r.sample for r in result.reports] == ["Good"]
        assert [s.sample for s, _ in result.failures] == ["Broken"]
        assert "Broken.root" in result.failures[0][1]

    def test_failures_logged(self, input_dir: Path, caplog) -> None:
        config = AnalysisConfig(input_dir=input_dir, samples=(SampleSpec("Missing", "0jet"),))
        with caplog.at_level("ERROR"):
            run_batch(config, io.StringIO())
        assert any("Skipping Missing 0jet" in r.getMessage() for r in caplog.records)

    def test_unexpected_errors_propagate(self, input_dir: Path, monkeypatch) -> None:
        """Only AnalysisError is treated as a per-entry failure."""
        from acceptance_syst import main as main_module

        def broken(*args, **kwargs):
            raise RuntimeError("bug")

        monkeypatch.setattr(main_module, "process_sample", broken)
        config = AnalysisConfig(input_dir=input_dir, samples=(SampleSpec("S", "l"),))

        with pytest.raises(RuntimeError):
            run_batch(config, io.StringIO())

    def test_analysis_error_is_base(self) -> None:
        assert issubclass(NumericDegenerateError, AnalysisError)
