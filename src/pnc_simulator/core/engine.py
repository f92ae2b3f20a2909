"""Causal propagation engine."""

import logging

import numpy as np
import pandas as pd

from typing import Dict, List, Sequence

from .base_step import BaseStep
from .dag import CAUSAL_GRAPH, GENERATION_ORDER
from .errors import ConfigurationError

from ..steps import STEP_TYPES


logger = logging.getLogger(__name__)

# Categorical columns created before propagation starts.
UPSTREAM_NOMINAL = ('state', 'race_ethnicity', 'provider_id')


class CausalPropagationEngine:
    """Computes every downstream variable in the hand-written generation order.

    Steps are built once from the `variables` section of the configuration.
    Coefficients are checked against the declared graph at build time, so a
    misconfigured variable fails before any subject is generated.
    """

    def __init__(
        self,
        config: Dict,
        order: Sequence[str] = GENERATION_ORDER,
        graph: Dict[str, Sequence[str]] = None
    ):
        """Initialize engine.

        Args:
            config: `variables` section of the configuration
            order: Generation order of the propagated variables
            graph: Declared node -> parents mapping
        """
        self.config = config
        self.order = tuple(order)
        self.graph = CAUSAL_GRAPH if graph is None else graph

        self.steps: List[BaseStep] = []
        self.encoders: Dict[str, Dict[str, float]] = {}
        self._build_steps()

    def _build_steps(self) -> None:
        nominal = set(UPSTREAM_NOMINAL)

        for name in self.order:
            if name not in self.config:
                raise ConfigurationError(f"No configuration for variable '{name}'")
            spec = self.config[name]

            kind = spec.get('kind')
            if kind not in STEP_TYPES:
                raise ConfigurationError(
                    f"Unknown kind for '{name}': {kind}. Choose from {list(STEP_TYPES)}"
                )

            step = STEP_TYPES[kind](name, self.graph[name], spec)
            step.check_parents(nominal)

            if step.encoder() is not None:
                self.encoders[name] = step.encoder()
            if step.is_nominal:
                nominal.add(name)

            self.steps.append(step)

        unused = sorted(set(self.config) - set(self.order))
        if unused:
            logger.warning("Ignoring configuration for variables outside the generation order: %s", unused)

    def propagate(self, df: pd.DataFrame, seed: np.random.SeedSequence) -> pd.DataFrame:
        """Run every step in order.

        Args:
            df: Table holding the entity and exogenous columns
            seed: Seed sequence; each step draws from its own child stream

        Returns:
            pd.DataFrame: New table with one column appended per step
        """
        streams = seed.spawn(len(self.steps))

        for step, stream in zip(self.steps, streams):
            df = step.apply(df, np.random.default_rng(stream), self.encoders)
            logger.debug("Generated %s (%s)", step.name, step.kind)

        return df
