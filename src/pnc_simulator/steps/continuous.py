"""Continuous variables generated with a target correlation to a principal parent."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.base_step import BaseStep
from ..core.errors import ConfigurationError
from ..core.utils import apply_functional_form, correlated_draw


class ContinuousStep(BaseStep):
    """Continuous variable: y = r * z(principal) + sqrt(1 - r^2) * u.

    On the linear scale the value is `mean + sd * y`, optionally clipped to
    [min, max]. On the log scale the principal is log-transformed, r is
    defined between the logs, and the value is
    `exp(log(median) + spread * y)` clipped to [floor, ceiling].
    """

    kind = 'continuous'

    def _validate_config(self) -> None:
        cfg = self.config

        if 'principal' not in cfg:
            raise ConfigurationError(f"'{self.name}' needs a principal parent")

        r = cfg.get('target_correlation')
        if r is None or not -1 <= r <= 1:
            raise ConfigurationError(
                f"'{self.name}' target_correlation must lie in [-1, 1], got {r}"
            )

        self.principal = cfg['principal']
        self.target_correlation = float(r)
        self.secondary = cfg.get('secondary', {}) or {}
        self.secondary_share = float(cfg.get('secondary_share', 0.5 if self.secondary else 0.0))
        if not 0 <= self.secondary_share < 1:
            raise ConfigurationError(
                f"'{self.name}' secondary_share must lie in [0, 1), got {self.secondary_share}"
            )

        self.scale = cfg.get('scale', 'linear')
        if self.scale == 'log':
            floor, ceiling = cfg['floor'], cfg['ceiling']
            if cfg['spread'] <= 0:
                raise ConfigurationError(f"'{self.name}' spread must be positive")
            if not 0 <= floor < ceiling:
                raise ConfigurationError(
                    f"'{self.name}' needs 0 <= floor < ceiling, got [{floor}, {ceiling}]"
                )
            if not floor <= cfg['median'] <= ceiling or cfg['median'] <= 0:
                raise ConfigurationError(
                    f"'{self.name}' median {cfg['median']} outside [{floor}, {ceiling}]"
                )
        elif self.scale == 'linear':
            if cfg.get('sd', 1.0) <= 0:
                raise ConfigurationError(f"'{self.name}' sd must be positive")
        else:
            raise ConfigurationError(f"Unknown scale for '{self.name}': {self.scale}")

    def referenced_parents(self) -> Dict[str, object]:
        refs = {self.principal: 1.0}
        refs.update(self.secondary)
        return refs

    def compute(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> Dict[str, np.ndarray]:
        cfg = self.config

        principal = parents[self.principal]
        if self.principal in encoders:
            principal = principal.map(encoders[self.principal])
        principal = principal.to_numpy(dtype=float)

        if self.scale == 'log':
            principal = np.log(np.maximum(principal, np.finfo(float).tiny))

        secondary = None
        if self.secondary:
            secondary = apply_functional_form(parents, self.secondary, encoders)

        y = correlated_draw(
            rng,
            principal,
            self.target_correlation,
            secondary=secondary,
            secondary_share=self.secondary_share
        )

        if self.scale == 'log':
            values = np.exp(np.log(cfg['median']) + cfg['spread'] * y)
            values = np.clip(values, cfg['floor'], cfg['ceiling'])
        else:
            values = cfg.get('mean', 0.0) + cfg.get('sd', 1.0) * y
            if 'min' in cfg or 'max' in cfg:
                values = np.clip(values, cfg.get('min', -np.inf), cfg.get('max', np.inf))

        return {self.name: values}
