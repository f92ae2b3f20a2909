"""Synthetic postnatal-care utilization data from a declared causal DAG.

This module generates one row per simulated birthing person: region,
provider and race/ethnicity assignment, exogenous traits, and ~25 downstream
variables propagated in topological order with target correlations and
calibrated prevalences.
"""

from .generator import SimulationGenerator
from .core.data_structures import SimulationData

__all__ = ['SimulationGenerator', 'SimulationData']
__version__ = '1.0.0'
