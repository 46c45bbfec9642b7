"""Exception hierarchy for SPECTRE"""

from typing import Optional, Sequence


class SpectreError(Exception):
    """Base class for all SPECTRE errors"""


class DimensionMismatchError(SpectreError):
    """Embedding count or width disagrees with what was requested"""

    def __init__(self, message: str, expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class IndexOutOfRangeError(SpectreError, IndexError):
    """Neighbor lookup with an invalid record index or k"""


class InvalidParameterError(SpectreError, ValueError):
    """Parameter outside its valid range"""


class ProviderError(SpectreError):
    """Network, auth or HTTP failure at the embedding provider boundary"""


class DegenerateVectorError(SpectreError, ValueError):
    """Zero-norm row encountered during normalization"""

    def __init__(self, message: str, rows: Sequence[int] = ()):
        super().__init__(message)
        self.rows = list(rows)
