"""
Logging and Warning Configuration Utilities

Centralized control over log output and warning messages for the
acceptance uncertainty batch.

Usage:
    from acceptance_syst.utils.logging_config import setup_logging, suppress_warnings
    setup_logging(verbose=True)
    suppress_warnings()  # Suppress library warnings by default

    # Via environment variable:
    export ACCEPTANCE_WARNINGS=on   # Show warnings
    export ACCEPTANCE_WARNINGS=off  # Suppress warnings (default)
"""

from __future__ import annotations

import logging
import os
import warnings
from typing import Literal

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging level"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return logging.getLogger("AcceptanceSyst")


def suppress_warnings(level: Literal["off", "error", "default", "all"] = "off") -> None:
    """
    Configure warning levels for the analysis.

    Args:
        level: Warning level to set
            - 'off': Suppress library warnings (default for batch runs)
            - 'error': Turn warnings into errors, except deprecations
            - 'default': Show important warnings but filter common noise
            - 'all': Show everything (useful for debugging)

    Environment variable ACCEPTANCE_WARNINGS overrides the level parameter.
    """
    env_level = os.environ.get("ACCEPTANCE_WARNINGS", "").lower()
    if env_level in ["on", "yes", "true", "1"]:
        level = "all"
    elif env_level in ["off", "no", "false", "0"]:
        level = "off"
    elif env_level in ["error", "default"]:
        level = env_level

    if level == "off":
        warnings.filterwarnings("ignore", category=DeprecationWarning)
        warnings.filterwarnings("ignore", category=FutureWarning)
        warnings.filterwarnings("ignore", category=UserWarning)

    elif level == "error":
        warnings.filterwarnings("error")
        warnings.filterwarnings("ignore", category=DeprecationWarning)
        warnings.filterwarnings("ignore", category=FutureWarning)

    elif level == "default":
        warnings.filterwarnings("default")
        warnings.filterwarnings("ignore", category=DeprecationWarning)
        warnings.filterwarnings("ignore", message=".*uproot.*")

    elif level == "all":
        warnings.filterwarnings("default")

    _suppress_library_warnings(level)


def _suppress_library_warnings(level: str) -> None:
    """Suppress known noisy warnings from specific libraries."""
    if level in ["off", "error", "default"]:
        warnings.filterwarnings("ignore", module="uproot.*")

        # Matplotlib backend and font warnings
        warnings.filterwarnings("ignore", message=".*Matplotlib.*")
        logging.getLogger("matplotlib").setLevel(logging.WARNING)
