"""Shared fixtures: packaged configuration, geography tables and one default-size run."""

from __future__ import annotations

import pandas as pd
import pytest

from pnc_simulator import SimulationGenerator
from pnc_simulator.components import GeographyBuilder
from pnc_simulator.core.data_structures import GeographyTable
from pnc_simulator.utils import load_config, update_config


@pytest.fixture(scope="session")
def base_config() -> dict:
    return load_config()


@pytest.fixture(scope="session")
def geography(base_config: dict) -> GeographyTable:
    return GeographyBuilder(base_config["geography"]).load()


@pytest.fixture
def single_region_geography() -> GeographyTable:
    population = pd.DataFrame({"state": ["ZZ"], "population": [1000], "health_rank": [1]})
    race = pd.DataFrame({"state": ["ZZ"], "White": [60.0], "Black": [40.0]})
    return GeographyBuilder({}).build(population, race)


@pytest.fixture
def small_config(base_config: dict) -> dict:
    return update_config(base_config, {"population": {"n_subjects": 5, "n_providers": 2}})


@pytest.fixture(scope="session")
def large_run(base_config: dict):
    """Default configuration (50,000 subjects) generated once for the session."""
    gen = SimulationGenerator(config=base_config)
    return gen, gen.generate(seed=123)
