"""Geography table construction from regional population and race/ethnicity data."""

import logging

import numpy as np
import pandas as pd

from pathlib import Path
from typing import Dict, Union

from ..core.data_structures import GeographyTable
from ..core.errors import InputIntegrityError


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


class GeographyBuilder:
    """Builds the frozen region table.

    Weights are population shares. The conditions score inverts the health
    ranking (rank 1 = best) and z-scores it across regions, so higher means
    better conditions.
    """

    def __init__(self, config: Dict):
        """Initialize builder.

        Args:
            config: Geography configuration from YAML
        """
        self.config = config
        self.region_column = config.get('region_column', 'state')
        self.population_column = config.get('population_column', 'population')
        self.rank_column = config.get('rank_column', 'health_rank')

    def load(self) -> GeographyTable:
        """Read both input tables from CSV and build the geography table."""
        population_path = self._resolve(self.config['population_file'])
        race_path = self._resolve(self.config['race_file'])

        for path in (population_path, race_path):
            if not path.exists():
                raise FileNotFoundError(f"Geography input not found: {path}")

        population_df = pd.read_csv(population_path)
        race_df = pd.read_csv(race_path)
        logger.info(
            "Loaded %d population rows from %s and %d race/ethnicity rows from %s",
            len(population_df), population_path, len(race_df), race_path
        )

        return self.build(population_df, race_df)

    def build(self, population_df: pd.DataFrame, race_df: pd.DataFrame) -> GeographyTable:
        """Join, validate and derive the region table from in-memory inputs."""
        population_df = self._check_keys(population_df, 'population')
        race_df = self._check_keys(race_df, 'race/ethnicity')

        population_df = self._check_numeric(
            population_df, [self.population_column, self.rank_column], 'population'
        )
        race_columns = [c for c in race_df.columns if c != self.region_column]
        if not race_columns:
            raise InputIntegrityError("Race/ethnicity table has no group columns")
        race_df = self._check_numeric(race_df, race_columns, 'race/ethnicity')

        if (population_df[self.population_column] <= 0).any():
            bad = population_df.loc[population_df[self.population_column] <= 0, self.region_column]
            raise InputIntegrityError(f"Non-positive population for regions: {list(bad)}")

        if (race_df[race_columns] < 0).any().any():
            raise InputIntegrityError("Race/ethnicity table contains negative values")

        merged = self._join(population_df, race_df)

        race_totals = merged[race_columns].sum(axis=1)
        if (race_totals <= 0).any():
            bad = merged.loc[race_totals <= 0, self.region_column]
            raise InputIntegrityError(f"Race/ethnicity rows sum to zero for regions: {list(bad)}")

        population = merged[self.population_column].to_numpy(dtype=float)
        rank = merged[self.rank_column].to_numpy(dtype=float)

        regions = pd.DataFrame({
            'state': merged[self.region_column].astype(str).to_numpy(),
            'population': population,
            'health_rank': rank,
            'weight': population / population.sum(),
            'conditions_score': self._conditions_score(rank),
        })

        race_proportions = merged[race_columns].div(race_totals, axis=0)
        race_proportions.index = regions['state'].to_numpy()
        race_proportions.index.name = 'state'

        return GeographyTable(regions=regions, race_proportions=race_proportions)

    @staticmethod
    def _conditions_score(rank: np.ndarray) -> np.ndarray:
        """Invert rank (1 = best) and z-score across regions."""
        inverted = rank.max() + 1 - rank
        sd = inverted.std()
        if sd == 0:
            return np.zeros(len(rank))
        return (inverted - inverted.mean()) / sd

    def _join(self, population_df: pd.DataFrame, race_df: pd.DataFrame) -> pd.DataFrame:
        """Inner join on the region key; unmatched keys are dropped with a warning."""
        population_keys = set(population_df[self.region_column])
        race_keys = set(race_df[self.region_column])

        only_population = sorted(population_keys - race_keys)
        only_race = sorted(race_keys - population_keys)
        if only_population:
            logger.warning(
                "Dropping %d regions without race/ethnicity data: %s",
                len(only_population), only_population
            )
        if only_race:
            logger.warning(
                "Dropping %d regions without population data: %s",
                len(only_race), only_race
            )

        merged = population_df.merge(race_df, on=self.region_column, how='inner')
        if merged.empty:
            raise InputIntegrityError("No regions left after joining population and race/ethnicity tables")

        return merged.sort_values(self.region_column).reset_index(drop=True)

    def _check_keys(self, df: pd.DataFrame, label: str) -> pd.DataFrame:
        if self.region_column not in df.columns:
            raise InputIntegrityError(f"{label} table has no '{self.region_column}' column")

        df = df.copy()
        if df[self.region_column].isnull().any():
            raise InputIntegrityError(f"{label} table has rows with a missing region identifier")
        df[self.region_column] = df[self.region_column].astype(str).str.strip()

        duplicated = df[self.region_column].duplicated()
        if duplicated.any():
            raise InputIntegrityError(
                f"{label} table has duplicated regions: {sorted(df.loc[duplicated, self.region_column])}"
            )
        return df

    def _check_numeric(self, df: pd.DataFrame, columns, label: str) -> pd.DataFrame:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise InputIntegrityError(f"{label} table is missing columns {missing}")

        df = df.copy()
        for col in columns:
            values = pd.to_numeric(df[col], errors='coerce')
            if values.isnull().any():
                bad = df.loc[values.isnull(), self.region_column]
                raise InputIntegrityError(
                    f"{label} column '{col}' has missing or non-numeric values for regions: {list(bad)}"
                )
            df[col] = values
        return df

    @staticmethod
    def _resolve(path: Union[str, Path]) -> Path:
        """Relative paths resolve against the packaged data directory when not found locally."""
        path = Path(path)
        if path.is_absolute() or path.exists():
            return path
        return DATA_DIR / path
