"""Binary variables calibrated to a target prevalence."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.base_step import BaseStep
from ..core.errors import ConfigurationError
from ..core.utils import apply_functional_form, calibrated_flags


class BinaryStep(BaseStep):
    """Two-stage binary variable.

    Stage 1 scores every subject: linear signal of the parents plus
    N(0, noise_sd). Stage 2 ranks the realized scores and flags the top k,
    with k = round(prevalence * n); tied scores are broken at random.
    """

    kind = 'binary'

    def _validate_config(self) -> None:
        prevalence = self.config.get('prevalence')
        if prevalence is None or not 0 <= prevalence <= 1:
            raise ConfigurationError(
                f"'{self.name}' prevalence must lie in [0, 1], got {prevalence}"
            )
        self.prevalence = float(prevalence)

        self.noise_sd = float(self.config.get('noise_sd', 1.0))
        if self.noise_sd < 0:
            raise ConfigurationError(f"'{self.name}' noise_sd must be non-negative")

        self.coefficients = self.config.get('coefficients', {}) or {}

    def referenced_parents(self) -> Dict[str, object]:
        return dict(self.coefficients)

    def score(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> np.ndarray:
        """Continuous risk score from the parents plus independent noise."""
        signal = apply_functional_form(parents, self.coefficients, encoders)
        return signal + rng.normal(0, self.noise_sd, size=len(parents))

    def compute(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> Dict[str, np.ndarray]:
        scores = self.score(parents, rng, encoders)
        flags = calibrated_flags(scores, self.prevalence, rng)

        return {self.name: flags.astype(int)}
