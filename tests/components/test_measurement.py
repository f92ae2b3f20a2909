"""Tests for self-reported income bands."""

from __future__ import annotations

import numpy as np
import pytest

from pnc_simulator.components import IncomeReporter
from pnc_simulator.core.errors import ConfigurationError


CONFIG = {"noise_sd": 5000, "ceiling": 200000, "band_width": 25000}


def test_band_labels() -> None:
    reporter = IncomeReporter(CONFIG)

    assert reporter.n_bands == 8
    assert reporter.labels[0] == "$0-$24,999"
    assert reporter.labels[-1] == "$175,000+"


def test_values_at_or_above_ceiling_fall_in_top_band() -> None:
    reporter = IncomeReporter(CONFIG)

    bands = reporter.to_bands(np.array([0.0, 24_999.0, 25_000.0, 200_000.0, 1e7]))

    assert list(bands) == ["$0-$24,999", "$0-$24,999", "$25,000-$49,999", "$175,000+", "$175,000+"]


def test_noisy_income_is_clipped() -> None:
    reporter = IncomeReporter(CONFIG)
    income = np.array([0.0] * 500 + [400_000.0] * 500)

    noisy = reporter.noisy_income(income, np.random.default_rng(0))

    assert noisy.min() >= 0
    assert noisy.max() <= CONFIG["ceiling"]


def test_reported_income_labels_in_generated_data(large_run) -> None:
    gen, sim = large_run
    reporter = IncomeReporter(gen.config["measurement"]["income_reported"])

    assert set(sim.data["income_reported"]) <= set(reporter.labels)


@pytest.mark.parametrize("override", [{"noise_sd": -1}, {"band_width": 0}, {"ceiling": -5}])
def test_invalid_reporting_config_is_rejected(override) -> None:
    with pytest.raises(ConfigurationError):
        IncomeReporter({**CONFIG, **override})
