"""
SPECTRE core: configuration, logging and errors.
"""

from .config import Config
from .logger import get_logger
from .errors import (
    SpectreError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidParameterError,
    ProviderError,
    DegenerateVectorError,
)

# Export main components
__all__ = [
    "Config",
    "get_logger",
    "SpectreError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "InvalidParameterError",
    "ProviderError",
    "DegenerateVectorError",
]
