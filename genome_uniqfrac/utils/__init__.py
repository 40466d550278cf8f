"""Utility functions for file handling and logging."""

from .file_utils import (
    ensure_directory,
    read_sequence,
    open_output_sink,
    open_coordinates,
)
from .logging_utils import (
    setup_logging,
    get_logger
)

__all__ = [
    'ensure_directory',
    'read_sequence',
    'open_output_sink',
    'open_coordinates',
    'setup_logging',
    'get_logger'
]
