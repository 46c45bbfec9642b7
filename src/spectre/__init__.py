"""
SPECTRE - Semantic Projection & Embedding Comparison for Text REcords

Embeds horror movie descriptions and explores them with cosine
similarity search and principal component projection.
"""

__version__ = "0.1.0"

# Import main components
from .core.config import get_config
from .core.logger import get_logger

__all__ = [
    "get_config",
    "get_logger",
]
