"""Configuration management for SPECTRE"""

import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load .env file if exists
load_dotenv()

HORROR_MOVIES_URL = (
    "https://raw.githubusercontent.com/rfordatascience/tidytuesday/master/"
    "data/2022/2022-11-01/horror_movies.csv"
)

ZERO_VECTOR_POLICIES = ("raise", "zero")


class Config:
    """Central configuration for SPECTRE pipeline"""

    def __init__(self):
        # Embedding provider configuration
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.EMBEDDING_MODEL = os.getenv("SPECTRE_EMBEDDING_MODEL", "text-embedding-ada-002")
        self.EMBEDDING_DIM = int(os.getenv("SPECTRE_EMBEDDING_DIM", "1536"))
        self.REQUEST_TIMEOUT = float(os.getenv("SPECTRE_REQUEST_TIMEOUT", "60"))

        # Dataset configuration
        self.DATASET_PATH = os.getenv("SPECTRE_DATASET_PATH", HORROR_MOVIES_URL)
        self.SAMPLE_SIZE = int(os.getenv("SPECTRE_SAMPLE_SIZE", "1000"))
        self.RANDOM_SEED = int(os.getenv("SPECTRE_RANDOM_SEED", "42"))
        self.LANGUAGE = os.getenv("SPECTRE_LANGUAGE", "en")

        # Analysis configuration
        self.N_COMPONENTS = int(os.getenv("SPECTRE_N_COMPONENTS", "2"))
        self.TOP_K = int(os.getenv("SPECTRE_TOP_K", "5"))
        self.ZERO_VECTOR_POLICY = os.getenv("SPECTRE_ZERO_VECTOR_POLICY", "raise").lower()

        # Output
        self.OUTPUT_DIR = os.getenv("SPECTRE_OUTPUT_DIR", "./output")

        # Logging configuration
        self.LOG_LEVEL = os.getenv("SPECTRE_LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("SPECTRE_LOG_FORMAT", "json")
        self.LOG_FILE = os.getenv("SPECTRE_LOG_FILE", "./logs/spectre.log")

        # Create necessary directories
        self._create_directories()

    def _create_directories(self):
        """Create necessary directories if they don't exist"""
        Path(self.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self, api_key: Optional[str] = None) -> Optional[str]:
        """
        Get API key with fallback to environment

        Args:
            api_key: Optional explicit key

        Returns:
            Key to use (provided or from environment)
        """
        return api_key or self.OPENAI_API_KEY

    def validate(self) -> List[str]:
        """
        Validate configuration

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.OPENAI_API_KEY:
            errors.append("OPENAI_API_KEY is not set")

        if self.EMBEDDING_DIM <= 0:
            errors.append(f"SPECTRE_EMBEDDING_DIM must be positive, got {self.EMBEDDING_DIM}")

        if self.SAMPLE_SIZE <= 0:
            errors.append(f"SPECTRE_SAMPLE_SIZE must be positive, got {self.SAMPLE_SIZE}")

        if self.N_COMPONENTS <= 0:
            errors.append(f"SPECTRE_N_COMPONENTS must be positive, got {self.N_COMPONENTS}")

        if self.TOP_K < 0:
            errors.append(f"SPECTRE_TOP_K must not be negative, got {self.TOP_K}")

        if self.ZERO_VECTOR_POLICY not in ZERO_VECTOR_POLICIES:
            errors.append(
                f"SPECTRE_ZERO_VECTOR_POLICY must be one of {ZERO_VECTOR_POLICIES}, "
                f"got {self.ZERO_VECTOR_POLICY!r}"
            )

        return errors

    def __repr__(self):
        return f"<SPECTRE Config: model={self.EMBEDDING_MODEL}, sample={self.SAMPLE_SIZE}>"


# Global config instance
config = Config()

def get_config() -> Config:
    """Get global config instance"""
    return config
