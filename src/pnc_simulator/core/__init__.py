"""Core infrastructure for simulation generation."""

from .errors import SimulationError, InputIntegrityError, ConfigurationError, DagOrderError
from .base_step import BaseStep
from .data_structures import GeographyTable, ProviderPool, PopulationStructure, SimulationData
from .dag import CAUSAL_GRAPH, GENERATION_ORDER, PIPELINE_ORDER, validate_order
from .engine import CausalPropagationEngine

__all__ = [
    'SimulationError',
    'InputIntegrityError',
    'ConfigurationError',
    'DagOrderError',
    'BaseStep',
    'GeographyTable',
    'ProviderPool',
    'PopulationStructure',
    'SimulationData',
    'CAUSAL_GRAPH',
    'GENERATION_ORDER',
    'PIPELINE_ORDER',
    'validate_order',
    'CausalPropagationEngine',
]
