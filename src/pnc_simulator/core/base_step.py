"""Abstract base class for all propagation steps."""

import numpy as np
import pandas as pd

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Dict, Optional, Sequence, Set

from .errors import ConfigurationError, DagOrderError


class BaseStep(ABC):
    """One variable of the causal graph, computed from its declared parents.

    A step never sees the whole table: `apply` hands `compute` a snapshot
    holding only the declared parent columns and appends the returned
    columns to a new table.
    """

    kind: str = ''

    def __init__(self, name: str, parents: Sequence[str], config: Dict):
        """Initialize step.

        Args:
            name: Variable produced by this step
            parents: Declared causal parents of the variable
            config: Per-variable configuration from YAML
        """
        self.name = name
        self.parents = tuple(parents)
        self.config = config
        self._validate_config()

    @abstractmethod
    def _validate_config(self) -> None:
        pass

    @abstractmethod
    def referenced_parents(self) -> Dict[str, object]:
        """Parent name -> coefficient for every parent the configuration uses."""
        pass

    @abstractmethod
    def compute(
        self,
        parents: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> Dict[str, np.ndarray]:
        pass

    def encoder(self) -> Optional[Dict[str, float]]:
        """Ordinal scores exposed to downstream steps, if any."""
        return None

    @property
    def is_nominal(self) -> bool:
        return False

    def check_parents(self, nominal: Set[str]) -> None:
        """Validate configured coefficients against the declared parents.

        Raises:
            ConfigurationError: On an undeclared parent, or a scalar
                coefficient on a nominal categorical parent
        """
        for parent, coef in self.referenced_parents().items():
            if parent == 'intercept':
                continue
            if parent not in self.parents:
                raise ConfigurationError(
                    f"'{self.name}' uses '{parent}', which is not a declared parent "
                    f"(declared: {list(self.parents)})"
                )
            if parent in nominal and not isinstance(coef, Mapping):
                raise ConfigurationError(
                    f"'{self.name}' needs a {{label: effect}} mapping for nominal parent '{parent}'"
                )

    def apply(
        self,
        df: pd.DataFrame,
        rng: np.random.Generator,
        encoders: Dict[str, Dict[str, float]]
    ) -> pd.DataFrame:
        """Return a new table with this step's columns appended."""
        missing = [p for p in self.parents if p not in df.columns]
        if missing:
            raise DagOrderError(f"'{self.name}' computed before its parents {missing}")

        snapshot = df[list(self.parents)].copy()
        new_columns = self.compute(snapshot, rng, encoders)

        return df.assign(**new_columns)
