"""Exogenous (root) variable generation."""

import numpy as np
import pandas as pd

from scipy import stats
from typing import Dict

from ..core.dag import TRAITS


class ExogenousGenerator:
    """Generates root variables according to configuration.

    - age: skew-normal, clamped to [min, max]
    - parental_income: log-normal around a median, clamped to [floor, ceiling]
    - traits: i.i.d. standard normal
    """

    def __init__(self, config: Dict):
        """
        Initialize exogenous generator.

        Args:
            config: Exogenous configuration from YAML
        """
        self.config = config
        self.age_config = config['age']
        self.income_config = config['parental_income']
        self.traits = tuple(config.get('traits') or TRAITS)

    def generate(self, df: pd.DataFrame, rng: np.random.Generator) -> pd.DataFrame:
        """Generate all exogenous variables.

        Args:
            df: Subject table
            rng: Random generator

        Returns:
            pd.DataFrame: New table with exogenous columns appended
        """
        n = len(df)

        columns = {
            'age': self._generate_age(n, rng),
            'parental_income': self._generate_income(n, rng),
        }
        for trait in self.traits:
            columns[trait] = rng.standard_normal(n)

        return df.assign(**columns)

    def _generate_age(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Right-skewed maternal age."""
        spec = self.age_config
        ages = stats.skewnorm.rvs(
            spec['skew'],
            loc=spec['loc'],
            scale=spec['scale'],
            size=n,
            random_state=rng
        )
        ages = np.clip(ages, spec['min'], spec['max'])
        if spec.get('integer', True):
            ages = np.floor(ages)
        return ages

    def _generate_income(self, n: int, rng: np.random.Generator) -> np.ndarray:
        spec = self.income_config
        incomes = rng.lognormal(np.log(spec['median']), spec['spread'], size=n)
        return np.clip(incomes, spec['floor'], spec['ceiling'])
