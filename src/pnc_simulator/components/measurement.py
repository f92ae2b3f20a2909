"""Self-reported income with survey-style measurement error."""

import numpy as np
import pandas as pd

from typing import Dict, List

from ..core.errors import ConfigurationError


class IncomeReporter:
    """Turns true income into a self-reported income band.

    True income gets additive Gaussian noise, is clipped to [0, ceiling] and
    is cut into fixed-width bands. The band index is clipped to the top band,
    so values at or above the ceiling are reported in it.
    """

    def __init__(self, config: Dict):
        """Initialize reporter.

        Args:
            config: `measurement.income_reported` configuration
        """
        self.config = config
        self.source = config.get('source', 'income')
        self.name = config.get('name', 'income_reported')
        self.noise_sd = float(config['noise_sd'])
        self.ceiling = float(config['ceiling'])
        self.band_width = float(config['band_width'])

        if self.noise_sd < 0:
            raise ConfigurationError("Income reporting noise_sd must be non-negative")
        if self.ceiling <= 0 or self.band_width <= 0:
            raise ConfigurationError("Income reporting ceiling and band_width must be positive")

        self.n_bands = int(np.ceil(self.ceiling / self.band_width))
        self.labels = self._build_labels()

    def _build_labels(self) -> List[str]:
        labels = []
        for i in range(self.n_bands):
            lower = int(i * self.band_width)
            upper = int((i + 1) * self.band_width) - 1
            if i == self.n_bands - 1:
                labels.append(f"${lower:,}+")
            else:
                labels.append(f"${lower:,}-${upper:,}")
        return labels

    def noisy_income(self, income: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """True income plus noise, clipped to [0, ceiling]."""
        income = np.asarray(income, dtype=float)
        noisy = income + rng.normal(0, self.noise_sd, size=len(income))
        return np.clip(noisy, 0, self.ceiling)

    def to_bands(self, values: np.ndarray) -> np.ndarray:
        """Map clipped income values to band labels."""
        idx = np.floor(np.asarray(values, dtype=float) / self.band_width).astype(int)
        idx = np.clip(idx, 0, self.n_bands - 1)
        return np.array(self.labels, dtype=object)[idx]

    def apply(self, df: pd.DataFrame, rng: np.random.Generator) -> pd.DataFrame:
        """Return a new table with the reported income band appended."""
        noisy = self.noisy_income(df[self.source].to_numpy(dtype=float), rng)
        return df.assign(**{self.name: self.to_bands(noisy)})
