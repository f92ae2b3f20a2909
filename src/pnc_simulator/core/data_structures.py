"""Data structures for simulation inputs and outputs."""

import logging

import numpy as np
import pandas as pd

from dataclasses import dataclass, field
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeographyTable:
    """Per-region weights, conditions scores and race/ethnicity proportions.

    `regions` has one row per region with columns 'state', 'population',
    'health_rank', 'weight' and 'conditions_score'. `race_proportions` is
    indexed by state in the same order, one column per race/ethnicity group.
    """
    regions: pd.DataFrame
    race_proportions: pd.DataFrame

    @property
    def n_regions(self) -> int:
        return len(self.regions)

    @property
    def region_ids(self) -> np.ndarray:
        return self.regions['state'].to_numpy()

    @property
    def weights(self) -> np.ndarray:
        return self.regions['weight'].to_numpy(dtype=float)

    @property
    def conditions(self) -> pd.Series:
        """Conditions score indexed by state."""
        return self.regions.set_index('state')['conditions_score']

    @property
    def race_categories(self) -> List[str]:
        return list(self.race_proportions.columns)


@dataclass(frozen=True)
class ProviderPool:
    """Providers with their owning region and quality score."""
    providers: pd.DataFrame

    @property
    def n_providers(self) -> int:
        return len(self.providers)

    def counts_by_region(self) -> pd.Series:
        return self.providers.groupby('state').size()


@dataclass
class PopulationStructure:
    """Container for population sizes."""
    n_subjects: int
    n_providers: int
    n_regions: int

    @property
    def subjects_per_provider(self) -> float:
        return self.n_subjects / self.n_providers


@dataclass
class SimulationData:
    """Container for generated simulation data and metadata."""
    data: pd.DataFrame
    full_data: pd.DataFrame
    geography: GeographyTable
    provider_pool: ProviderPool
    metadata: Dict
    config: Dict
    seed: Optional[int] = None
    structure: Optional[PopulationStructure] = field(default=None)

    def __post_init__(self):
        """Validate data structure."""
        required_columns = ['subject_id', 'state', 'provider_id']

        missing = set(required_columns) - set(self.data.columns)
        if missing:
            raise ValueError(f"Data missing required columns: {missing}")

    def summary(self) -> Dict:
        """Generate summary statistics of the dataset."""
        df = self.full_data
        summary = {
            'n_subjects': len(df),
            'n_providers': df['provider_id'].nunique(),
            'n_regions': df['state'].nunique(),
            'age_mean': df['age'].mean(),
            'income_median': df['income'].median(),
        }
        if 'received_comprehensive_pnc' in df.columns:
            summary['outcome_rate'] = df['received_comprehensive_pnc'].mean()
        if 'income_reported' in df.columns:
            summary['income_band_distribution'] = (
                df['income_reported'].value_counts(normalize=True).sort_index().to_dict()
            )
        return summary

    def save(self, filepath: str):
        """Save retained columns to CSV file."""
        self.data.to_csv(filepath, index=False)
        logger.info("Saved %d subjects to %s", len(self.data), filepath)
