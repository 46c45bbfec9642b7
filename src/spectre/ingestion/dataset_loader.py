"""
Horror movie dataset loading.

Reads the CSV (local path or URL), keeps English rows with a non-empty
description, draws a seeded sample and converts rows into Records.
"""

import time
import pandas as pd
from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field

from spectre.core.logger import get_logger
from spectre.core.config import get_config
from spectre.core.errors import InvalidParameterError
from spectre.embeddings.records import Record

logger = get_logger(__name__)

@dataclass
class DatasetConfig:
    """Column mapping and sampling for the input dataset"""
    id_column: str = "id"
    title_column: str = "title"
    text_column: str = "overview"
    language_column: str = "original_language"
    rating_column: str = "vote_average"
    metadata_columns: List[str] = field(default_factory=lambda: ["release_date", "genre_names"])

    language: Optional[str] = "en"
    sample_size: Optional[int] = 1000
    random_seed: int = 42

    @classmethod
    def from_config(cls) -> "DatasetConfig":
        config = get_config()
        return cls(
            language=config.LANGUAGE,
            sample_size=config.SAMPLE_SIZE,
            random_seed=config.RANDOM_SEED
        )

    @property
    def required_columns(self) -> List[str]:
        return [
            self.id_column,
            self.title_column,
            self.text_column,
            self.language_column,
            self.rating_column,
        ]


class DatasetLoader:
    """Loads, filters and samples the movie dataset into Records"""

    def __init__(self, config: Optional[DatasetConfig] = None):
        self.config = config or DatasetConfig()

        if self.config.sample_size is not None and self.config.sample_size <= 0:
            raise InvalidParameterError(
                f"Sample size must be positive, got {self.config.sample_size}"
            )

    def read(self, source: Union[str, Path]) -> pd.DataFrame:
        """Read the raw CSV from a path or URL"""
        start_time = time.time()
        logger.info(f"Reading dataset: {source}")

        df = pd.read_csv(source)

        missing = [column for column in self.config.required_columns if column not in df.columns]
        if missing:
            raise InvalidParameterError(f"Dataset is missing required columns: {missing}")

        logger.info(f"Read {len(df)} rows in {time.time() - start_time:.2f}s")
        return df

    def filter(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep rows in the configured language with a non-empty description"""
        text = df[self.config.text_column]
        mask = text.notna() & (text.astype(str).str.strip() != "")

        if self.config.language:
            mask &= df[self.config.language_column] == self.config.language

        filtered = df[mask]
        logger.info(f"Filtered dataset: {len(filtered)} of {len(df)} rows kept")
        return filtered

    def sample(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Seeded random sample. A sample size larger than the data takes every
        row, still shuffled with the same seed.
        """
        if self.config.sample_size is None:
            return df

        n = min(self.config.sample_size, len(df))
        if n < self.config.sample_size:
            logger.warning(
                f"Requested {self.config.sample_size} rows but only {len(df)} available"
            )
        return df.sample(n=n, random_state=self.config.random_seed)

    def to_records(self, df: pd.DataFrame) -> List[Record]:
        """Convert rows into Records, preserving row order"""
        metadata_columns = [c for c in self.config.metadata_columns if c in df.columns]

        records = []
        for row in df.to_dict(orient="records"):
            rating = row.get(self.config.rating_column)
            language = row.get(self.config.language_column)

            records.append(Record(
                id=str(row[self.config.id_column]),
                title="" if pd.isna(row[self.config.title_column]) else str(row[self.config.title_column]),
                text=str(row[self.config.text_column]).strip(),
                language=None if pd.isna(language) else str(language),
                rating=None if pd.isna(rating) else float(rating),
                metadata={
                    column: (None if pd.isna(row[column]) else row[column])
                    for column in metadata_columns
                }
            ))

        return records

    def load(self, source: Union[str, Path]) -> List[Record]:
        """Read, filter, sample and convert in one step"""
        df = self.sample(self.filter(self.read(source)))
        records = self.to_records(df)
        logger.info(f"Loaded {len(records)} records from {source}")
        return records
