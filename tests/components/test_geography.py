"""Tests for building the region table from population and race/ethnicity inputs."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from pnc_simulator.components import GeographyBuilder
from pnc_simulator.core.errors import InputIntegrityError


@pytest.fixture
def population_df() -> pd.DataFrame:
    return pd.DataFrame({
        "state": ["AA", "BB", "CC"],
        "population": [100, 300, 600],
        "health_rank": [3, 1, 2],
    })


@pytest.fixture
def race_df() -> pd.DataFrame:
    return pd.DataFrame({
        "state": ["AA", "BB", "CC"],
        "White": [50.0, 70.0, 20.0],
        "Black": [30.0, 20.0, 30.0],
        "Hispanic": [20.0, 10.0, 50.0],
    })


def test_packaged_geography_weights_and_proportions_are_normalized(geography) -> None:
    assert geography.n_regions == 50
    assert geography.weights.sum() == pytest.approx(1.0, abs=1e-9)
    assert np.allclose(geography.race_proportions.sum(axis=1), 1.0, atol=1e-9)
    assert list(geography.region_ids) == sorted(geography.region_ids)


def test_conditions_score_is_standardized_and_inverts_rank(geography) -> None:
    score = geography.regions["conditions_score"]
    assert score.mean() == pytest.approx(0.0, abs=1e-9)
    assert score.std(ddof=0) == pytest.approx(1.0)

    best = geography.regions["health_rank"].idxmin()
    assert score.idxmax() == best


def test_build_from_frames(population_df, race_df) -> None:
    table = GeographyBuilder({}).build(population_df, race_df)

    assert np.allclose(table.weights, [0.1, 0.3, 0.6])
    assert table.race_proportions.loc["CC", "Hispanic"] == pytest.approx(0.5)
    assert table.conditions["BB"] > table.conditions["CC"] > table.conditions["AA"]
    assert table.race_categories == ["White", "Black", "Hispanic"]


def test_unmatched_regions_are_dropped_with_warning(population_df, race_df, caplog) -> None:
    population_df = pd.concat(
        [population_df, pd.DataFrame({"state": ["DD"], "population": [50], "health_rank": [4]})],
        ignore_index=True,
    )

    with caplog.at_level(logging.WARNING):
        table = GeographyBuilder({}).build(population_df, race_df)

    assert "DD" not in set(table.region_ids)
    assert table.n_regions == 3
    assert "DD" in caplog.text


def test_non_positive_population_is_rejected(population_df, race_df) -> None:
    population_df.loc[0, "population"] = 0
    with pytest.raises(InputIntegrityError, match="Non-positive population"):
        GeographyBuilder({}).build(population_df, race_df)


def test_non_numeric_rank_is_rejected(population_df, race_df) -> None:
    population_df["health_rank"] = population_df["health_rank"].astype(object)
    population_df.loc[1, "health_rank"] = "first"
    with pytest.raises(InputIntegrityError, match="health_rank"):
        GeographyBuilder({}).build(population_df, race_df)


def test_duplicated_region_is_rejected(population_df, race_df) -> None:
    race_df.loc[2, "state"] = "AA"
    with pytest.raises(InputIntegrityError, match="duplicated"):
        GeographyBuilder({}).build(population_df, race_df)


def test_empty_join_is_rejected(population_df, race_df) -> None:
    race_df["state"] = ["XX", "YY", "ZZ"]
    with pytest.raises(InputIntegrityError, match="No regions left"):
        GeographyBuilder({}).build(population_df, race_df)


def test_single_region_has_zero_conditions_score(single_region_geography) -> None:
    assert single_region_geography.n_regions == 1
    assert single_region_geography.weights[0] == 1.0
    assert single_region_geography.regions["conditions_score"].iloc[0] == 0.0


def test_missing_input_file_raises(tmp_path) -> None:
    builder = GeographyBuilder({
        "population_file": str(tmp_path / "missing.csv"),
        "race_file": str(tmp_path / "missing_race.csv"),
    })
    with pytest.raises(FileNotFoundError):
        builder.load()
