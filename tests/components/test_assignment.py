"""Tests for subject-level region, race/ethnicity and provider assignment."""

from __future__ import annotations

import numpy as np
import pytest

from pnc_simulator.components import EntityAssigner, ProviderPoolGenerator


def test_every_subject_has_a_provider_from_its_own_region(large_run) -> None:
    _, sim = large_run
    df = sim.full_data
    providers = sim.provider_pool.providers.set_index("provider_id")

    assert df["provider_id"].isin(providers.index).all()
    assert (providers.loc[df["provider_id"], "state"].to_numpy() == df["state"].to_numpy()).all()
    assert np.allclose(
        providers.loc[df["provider_id"], "provider_quality"].to_numpy(),
        df["provider_quality"].to_numpy(),
    )


def test_region_shares_follow_population_weights(large_run, geography) -> None:
    _, sim = large_run
    shares = sim.full_data["state"].value_counts(normalize=True)
    weights = dict(zip(geography.region_ids, geography.weights))

    assert shares["CA"] == pytest.approx(weights["CA"], abs=0.01)
    assert shares["TX"] == pytest.approx(weights["TX"], abs=0.01)


def test_race_ethnicity_follows_regional_proportions(large_run, geography) -> None:
    _, sim = large_run
    ca = sim.full_data.loc[sim.full_data["state"] == "CA", "race_ethnicity"]

    share = (ca == "Hispanic").mean()

    assert share == pytest.approx(geography.race_proportions.loc["CA", "Hispanic"], abs=0.03)


def test_subject_ids_are_sequential(large_run) -> None:
    _, sim = large_run
    ids = sim.full_data["subject_id"].to_numpy()
    assert np.array_equal(ids, np.arange(1, len(ids) + 1))


def test_single_region_assignment(single_region_geography) -> None:
    pool = ProviderPoolGenerator({"n_providers": 2}, {}).generate(
        single_region_geography, 2, np.random.default_rng(0)
    )

    df = EntityAssigner().assign(200, single_region_geography, pool, np.random.default_rng(1))

    assert (df["state"] == "ZZ").all()
    assert set(df["provider_id"]) <= set(pool.providers["provider_id"])
    assert set(df["race_ethnicity"]) <= {"White", "Black"}
    assert (df["state_conditions"] == 0.0).all()
