"""Deterministic composite scores."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.base_step import BaseStep
from ..core.errors import ConfigurationError
from ..core.utils import apply_functional_form, standardize


class CompositeStep(BaseStep):
    """Weighted sum of the parents, standardized unless `standardize: false`."""

    kind = 'composite'

    def _validate_config(self) -> None:
        self.coefficients = self.config.get('coefficients', {}) or {}
        if not self.coefficients:
            raise ConfigurationError(f"'{self.name}' needs at least one coefficient")

    def referenced_parents(self) -> Dict[str, object]:
        return dict(self.coefficients)

    def compute(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> Dict[str, np.ndarray]:
        values = apply_functional_form(parents, self.coefficients, encoders)
        if self.config.get('standardize', True):
            values = standardize(values)
        return {self.name: values}
