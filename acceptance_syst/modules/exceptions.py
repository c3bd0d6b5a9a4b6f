"""
Custom exceptions for the acceptance uncertainty analysis

Provides a hierarchy of exceptions for better error handling and diagnostics.
All custom exceptions inherit from AnalysisError so the batch driver can skip
a failing (sample, level) pair with a single except clause.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """
    Base exception for all acceptance analysis errors
    """

    pass


class ConfigurationError(AnalysisError):
    """
    Raised when configuration is invalid or missing required fields

    Examples:
    - Missing config file
    - Invalid TOML syntax
    - Sample entry without a level
    """

    pass


class DataLoadError(AnalysisError):
    """
    Raised when weight histograms cannot be loaded
    """

    pass


class MissingFileError(DataLoadError):
    """
    Raised when the ROOT file backing a sample does not exist
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = str(file_path)
        super().__init__(f"Input file not found: {self.file_path}")


class MissingVectorError(DataLoadError):
    """
    Raised when a weight histogram is not found in an otherwise valid file

    Examples:
    - Selection level without a stored histogram (typo in level name)
    - Wrong vector prefix in configuration
    """

    def __init__(self, vector_name: str, file_path: str | None = None) -> None:
        """
        Initialize MissingVectorError

        Args:
            vector_name: Name of the missing histogram
            file_path: Optional path to the file being read
        """
        self.vector_name = vector_name
        self.file_path = file_path

        message = f"Weight histogram '{vector_name}' not found"
        if file_path:
            message += f" in file: {file_path}"

        super().__init__(message)


class WeightLayoutError(DataLoadError):
    """
    Raised when a weight histogram does not match the expected bin layout
    """

    pass


class NumericDegenerateError(AnalysisError):
    """
    Raised when a ratio would divide by zero or a bin content is not finite

    Examples:
    - Zero nominal weight sum at generator or reconstruction level
    - Empty PDF replica bin at generator level
    """

    def __init__(self, stage: str, index: int, detail: str = "zero denominator") -> None:
        self.stage = stage
        self.index = index
        super().__init__(f"Degenerate {stage} weight in bin {index}: {detail}")
