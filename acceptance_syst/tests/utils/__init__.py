"""
Test utilities and helper functions.
"""

from .mock_data_generator import (
    create_mock_config_toml,
    create_mock_sample,
    create_mock_weights_file,
    generate_gen_weights,
    generate_rec_weights,
)

__all__ = [
    "create_mock_config_toml",
    "create_mock_sample",
    "create_mock_weights_file",
    "generate_gen_weights",
    "generate_rec_weights",
]
