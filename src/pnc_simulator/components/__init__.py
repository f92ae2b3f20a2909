"""Components for simulation generation."""

from .geography import GeographyBuilder
from .providers import ProviderPoolGenerator
from .assignment import EntityAssigner
from .exogenous import ExogenousGenerator
from .measurement import IncomeReporter

__all__ = [
    'GeographyBuilder',
    'ProviderPoolGenerator',
    'EntityAssigner',
    'ExogenousGenerator',
    'IncomeReporter'
]
