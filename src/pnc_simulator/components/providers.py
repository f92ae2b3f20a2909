"""Provider pool generation."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.data_structures import GeographyTable, ProviderPool
from ..core.errors import ConfigurationError
from ..core.utils import correlated_draw


class ProviderPoolGenerator:
    """Creates the provider pool and each provider's quality score."""

    def __init__(self, population_config: Dict, provider_config: Dict):
        """Initialize provider generator.

        Args:
            population_config: `population` section (sizes and provider ratio)
            provider_config: `providers` section (quality distribution)
        """
        self.population_config = population_config
        self.quality_config = provider_config.get('quality', {})

    def provider_count(self, n_subjects: int, n_regions: int) -> int:
        """Explicit `n_providers`, otherwise one provider per `provider_ratio` subjects.

        A ratio-derived count is raised to the number of regions so every
        region can be staffed; an explicit count below it is an error.
        """
        explicit = self.population_config.get('n_providers')
        if explicit is not None:
            if explicit < n_regions:
                raise ConfigurationError(
                    f"n_providers={explicit} leaves regions without a provider "
                    f"({n_regions} regions)"
                )
            return int(explicit)

        ratio = self.population_config['provider_ratio']
        return max(n_regions, int(round(n_subjects / ratio)))

    def generate(
        self,
        geography: GeographyTable,
        n_providers: int,
        rng: np.random.Generator
    ) -> ProviderPool:
        """Allocate providers to regions and score their quality.

        Every region receives one provider; the remaining slots follow a
        multinomial draw on population weights, so the total is exact.
        """
        n_regions = geography.n_regions
        if n_providers < n_regions:
            raise ConfigurationError(
                f"{n_providers} providers cannot cover {n_regions} regions"
            )

        counts = np.ones(n_regions, dtype=int)
        counts += rng.multinomial(n_providers - n_regions, geography.weights)

        states = np.repeat(geography.region_ids, counts)
        conditions = geography.conditions.loc[states].to_numpy(dtype=float)

        y = correlated_draw(
            rng,
            conditions,
            self.quality_config.get('conditions_correlation', 0.0)
        )
        quality = self.quality_config.get('mean', 0.0) + self.quality_config.get('sd', 1.0) * y

        width = max(4, len(str(n_providers)))
        providers = pd.DataFrame({
            'provider_id': [f"P{i:0{width}d}" for i in range(1, n_providers + 1)],
            'state': states,
            'provider_quality': quality,
        })

        return ProviderPool(providers=providers)
