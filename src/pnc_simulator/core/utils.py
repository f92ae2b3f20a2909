"""Utility functions for simulation."""

import numpy as np
import pandas as pd

from typing import Dict, Mapping, Optional


def standardize(x: np.ndarray) -> np.ndarray:
    """Z-score an array using the population standard deviation.

    Constant inputs map to zeros instead of dividing by zero.
    """
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return x
    sd = x.std()
    if sd == 0 or not np.isfinite(sd):
        return np.zeros(len(x))
    return (x - x.mean()) / sd


def softmax(logits: np.ndarray) -> np.ndarray:
    """Row-wise softmax of an (n, k) matrix of logits."""
    exp_logits = np.exp(logits - logits.max(axis=1, keepdims=True))
    return exp_logits / exp_logits.sum(axis=1, keepdims=True)


def apply_functional_form(
    X: pd.DataFrame,
    coefficients: Mapping,
    encoders: Optional[Dict[str, Dict[str, float]]] = None
) -> np.ndarray:
    """Apply linear functional form: intercept + sum of parent effects.

    Args:
        X: Parent columns
        coefficients: Mapping from parent name to either a scalar (applied to
            the standardized parent, or to the raw value of a 0/1 indicator)
            or a {label: effect} mapping (fixed effect per category of a
            nominal parent). 'intercept' is added as-is.
        encoders: Ordinal scores for ordered categorical parents

    Returns:
        np.ndarray: Linear predictor values
    """
    encoders = encoders or {}
    result = np.zeros(len(X))

    for col, coef in coefficients.items():
        if col == 'intercept':
            result += coef
            continue

        if isinstance(coef, Mapping):
            result += X[col].map(coef).fillna(0.0).to_numpy(dtype=float)
        elif col in encoders:
            result += coef * standardize(X[col].map(encoders[col]).to_numpy(dtype=float))
        else:
            values = X[col].to_numpy(dtype=float)
            # 0/1 indicators enter unscaled
            if not is_indicator(values):
                values = standardize(values)
            result += coef * values

    return result


def is_indicator(values: np.ndarray) -> bool:
    """True when every value is 0 or 1."""
    return bool(np.isin(values, (0.0, 1.0)).all())


def correlated_draw(
    rng: np.random.Generator,
    principal: np.ndarray,
    target_correlation: float,
    secondary: Optional[np.ndarray] = None,
    secondary_share: float = 0.0
) -> np.ndarray:
    """Draw a standardized variable with a target Pearson correlation to a parent.

    Linear mixing closed form: y = r * z(principal) + sqrt(1 - r^2) * u, where u
    is unit-variance noise uncorrelated with the principal. When a secondary
    signal is given, its residual after projecting out the principal replaces
    `secondary_share` of the noise variance, so the other parents shape y
    without moving corr(y, principal) away from r.

    Args:
        rng: Random generator
        principal: Values of the principal parent
        target_correlation: Desired Pearson r with the principal
        secondary: Linear signal of the remaining parents
        secondary_share: Fraction of the residual variance taken by the secondary signal

    Returns:
        np.ndarray: Draws with mean ~0 and variance ~1
    """
    z = standardize(principal)
    n = len(z)
    noise = rng.standard_normal(n)

    if secondary is not None and secondary_share > 0:
        residual = np.asarray(secondary, dtype=float)
        residual = residual - residual.mean()
        residual = residual - (residual @ z / n) * z
        residual = standardize(residual)
        noise = np.sqrt(secondary_share) * residual + np.sqrt(1 - secondary_share) * noise

    r = target_correlation
    return r * z + np.sqrt(1 - r ** 2) * noise


def calibrated_flags(
    scores: np.ndarray,
    prevalence: float,
    rng: np.random.Generator
) -> np.ndarray:
    """Flag the round(prevalence * n) highest realized scores.

    Exactly k rows are flagged even when scores tie: rows are ranked by
    score, ties broken by a uniform draw from `rng`.

    Returns:
        np.ndarray: Boolean mask with exactly k True values
    """
    scores = np.asarray(scores, dtype=float)
    n = len(scores)
    k = int(round(prevalence * n))

    flags = np.zeros(n, dtype=bool)
    if k <= 0:
        return flags

    # lexsort sorts by the last key first
    ranked = np.lexsort((rng.random(n), scores))
    flags[ranked[n - k:]] = True
    return flags


def categorical_draw(rng: np.random.Generator, probabilities: np.ndarray) -> np.ndarray:
    """Sample one category index per row of an (n, k) probability matrix."""
    cumulative = probabilities.cumsum(axis=1)
    u = rng.random(len(probabilities))[:, np.newaxis]
    indices = (cumulative < u).sum(axis=1)
    return np.minimum(indices, probabilities.shape[1] - 1)
