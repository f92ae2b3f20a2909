"""Tests for provider allocation and quality scores."""

from __future__ import annotations

import numpy as np
import pytest

from pnc_simulator.components import ProviderPoolGenerator
from pnc_simulator.core.errors import ConfigurationError


QUALITY = {"quality": {"mean": 0.0, "sd": 1.0, "conditions_correlation": 0.4}}


def test_every_region_gets_a_provider_and_total_is_exact(geography) -> None:
    generator = ProviderPoolGenerator({"provider_ratio": 100}, QUALITY)

    pool = generator.generate(geography, 120, np.random.default_rng(0))

    assert pool.n_providers == 120
    counts = pool.counts_by_region()
    assert set(counts.index) == set(geography.region_ids)
    assert (counts >= 1).all()
    assert pool.providers["provider_id"].is_unique


def test_provider_count_from_ratio_is_raised_to_region_count() -> None:
    generator = ProviderPoolGenerator({"provider_ratio": 100}, QUALITY)

    assert generator.provider_count(1000, 50) == 50
    assert generator.provider_count(50_000, 50) == 500


def test_explicit_provider_count_below_regions_is_rejected() -> None:
    generator = ProviderPoolGenerator({"n_providers": 10, "provider_ratio": 100}, QUALITY)

    with pytest.raises(ConfigurationError, match="n_providers"):
        generator.provider_count(1000, 50)


def test_generate_rejects_too_few_providers(geography) -> None:
    generator = ProviderPoolGenerator({"provider_ratio": 100}, QUALITY)

    with pytest.raises(ConfigurationError):
        generator.generate(geography, 49, np.random.default_rng(1))


def test_quality_tracks_regional_conditions(geography) -> None:
    generator = ProviderPoolGenerator({"provider_ratio": 100}, QUALITY)

    pool = generator.generate(geography, 10_000, np.random.default_rng(2))

    quality = pool.providers["provider_quality"].to_numpy()
    conditions = geography.conditions.loc[pool.providers["state"]].to_numpy()
    assert quality.mean() == pytest.approx(0.0, abs=0.05)
    assert quality.std() == pytest.approx(1.0, abs=0.05)
    assert np.corrcoef(quality, conditions)[0, 1] == pytest.approx(0.4, abs=0.05)


def test_larger_regions_get_more_providers(geography) -> None:
    generator = ProviderPoolGenerator({"provider_ratio": 100}, QUALITY)

    counts = generator.generate(geography, 5_000, np.random.default_rng(3)).counts_by_region()

    assert counts["CA"] > counts["WY"]
