"""Subject-level assignment of region, race/ethnicity and provider."""

import numpy as np
import pandas as pd

from ..core.data_structures import GeographyTable, ProviderPool
from ..core.errors import ConfigurationError
from ..core.utils import categorical_draw


class EntityAssigner:
    """Creates one row per subject with region, race/ethnicity and provider.

    Providers are drawn through an index of providers sorted by region
    (offset and count per region), so a subject can only ever receive a
    provider from its own region.
    """

    def assign(
        self,
        n_subjects: int,
        geography: GeographyTable,
        provider_pool: ProviderPool,
        rng: np.random.Generator
    ) -> pd.DataFrame:
        """Generate the subject table.

        Args:
            n_subjects: Number of subjects
            geography: Region table
            provider_pool: Providers with their regions
            rng: Random generator

        Returns:
            pd.DataFrame: subject_id, state, state_conditions, race_ethnicity,
                provider_id, provider_quality
        """
        region_ids = geography.region_ids

        region_idx = rng.choice(len(region_ids), size=n_subjects, p=geography.weights)

        race_matrix = geography.race_proportions.to_numpy(dtype=float)
        race_idx = categorical_draw(rng, race_matrix[region_idx])
        races = np.array(geography.race_categories, dtype=object)[race_idx]

        provider_idx = self._draw_providers(region_idx, region_ids, provider_pool, rng)
        providers = provider_pool.providers

        conditions = geography.regions['conditions_score'].to_numpy(dtype=float)

        return pd.DataFrame({
            'subject_id': np.arange(1, n_subjects + 1),
            'state': region_ids[region_idx],
            'state_conditions': conditions[region_idx],
            'race_ethnicity': races,
            'provider_id': providers['provider_id'].to_numpy()[provider_idx],
            'provider_quality': providers['provider_quality'].to_numpy(dtype=float)[provider_idx],
        })

    @staticmethod
    def _draw_providers(
        region_idx: np.ndarray,
        region_ids: np.ndarray,
        provider_pool: ProviderPool,
        rng: np.random.Generator
    ) -> np.ndarray:
        """Uniform provider draw restricted to each subject's region."""
        providers = provider_pool.providers
        position = {state: i for i, state in enumerate(region_ids)}

        provider_region = providers['state'].map(position)
        if provider_region.isnull().any():
            unknown = sorted(providers.loc[provider_region.isnull(), 'state'].unique())
            raise ConfigurationError(f"Providers assigned to unknown regions: {unknown}")
        provider_region = provider_region.to_numpy(dtype=int)

        order = np.argsort(provider_region, kind='stable')
        counts = np.bincount(provider_region, minlength=len(region_ids))
        offsets = np.concatenate([[0], np.cumsum(counts)[:-1]])

        subject_counts = counts[region_idx]
        if (subject_counts == 0).any():
            empty = sorted(set(region_ids[region_idx[subject_counts == 0]]))
            raise ConfigurationError(f"Regions without an eligible provider: {empty}")

        draws = np.floor(rng.random(len(region_idx)) * subject_counts).astype(int)
        return order[offsets[region_idx] + draws]
