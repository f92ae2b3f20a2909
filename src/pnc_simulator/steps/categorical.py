"""Categorical variables drawn from parent-shifted multinomial logits."""

import numpy as np
import pandas as pd

from typing import Dict, Optional

from ..core.base_step import BaseStep
from ..core.errors import ConfigurationError
from ..core.utils import apply_functional_form, categorical_draw, softmax


class CategoricalStep(BaseStep):
    """Weighted categorical draw whose weights move with the parents.

    Logits are `log(base probability)` plus:
    - for ordered categories, `signal * centred position`, so a larger
      linear signal of the `coefficients` parents moves mass toward later
      categories;
    - for any category listed under `effects`, the linear signal of that
      category's own coefficients.
    """

    kind = 'categorical'

    def _validate_config(self) -> None:
        categories = self.config.get('categories')
        if not categories:
            raise ConfigurationError(f"'{self.name}' needs categories with base probabilities")

        self.labels = [str(label) for label in categories]
        probs = np.array(list(categories.values()), dtype=float)
        if (probs < 0).any() or not np.isclose(probs.sum(), 1.0, atol=1e-6):
            raise ConfigurationError(
                f"'{self.name}' base probabilities must be non-negative and sum to 1, "
                f"got {probs.sum():.6f}"
            )
        self.base_probs = probs / probs.sum()

        self.ordered = bool(self.config.get('ordered', False))
        self.coefficients = self.config.get('coefficients', {}) or {}
        if self.coefficients and not self.ordered:
            raise ConfigurationError(
                f"'{self.name}' is unordered; use per-category 'effects' instead of 'coefficients'"
            )

        self.effects = self.config.get('effects', {}) or {}
        unknown = set(map(str, self.effects)) - set(self.labels)
        if unknown:
            raise ConfigurationError(f"'{self.name}' has effects for unknown categories {unknown}")

    def referenced_parents(self) -> Dict[str, object]:
        refs = dict(self.coefficients)
        for coefs in self.effects.values():
            refs.update(coefs)
        return refs

    def encoder(self) -> Optional[Dict[str, float]]:
        if not self.ordered:
            return None
        return {label: float(i) for i, label in enumerate(self.labels)}

    @property
    def is_nominal(self) -> bool:
        return not self.ordered

    def compute(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> Dict[str, np.ndarray]:
        n = len(parents)
        n_levels = len(self.labels)

        with np.errstate(divide='ignore'):
            logits = np.tile(np.log(self.base_probs), (n, 1))

        if self.coefficients:
            signal = apply_functional_form(parents, self.coefficients, encoders)
            positions = np.arange(n_levels) - (n_levels - 1) / 2
            logits += signal[:, np.newaxis] * positions[np.newaxis, :]

        for label, coefs in self.effects.items():
            idx = self.labels.index(str(label))
            logits[:, idx] += apply_functional_form(parents, coefs, encoders)

        probabilities = softmax(logits)
        indices = categorical_draw(rng, probabilities)

        return {self.name: np.array(self.labels, dtype=object)[indices]}
