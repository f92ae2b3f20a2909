"""Realized-versus-target checks for calibrated variables."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.utils import standardize


class CalibrationChecker:
    """
    Compare realized sample statistics with configured targets.

    - Binary variables: realized prevalence vs `prevalence`
    - Continuous variables: realized Pearson r with the principal parent vs
      `target_correlation` (on the log scale for log-scale variables)
    """

    def __init__(self, config: Dict):
        """
        Parameters
        ----------
        config : Dict
            Full simulation configuration.
        """
        self.variables = config['variables']

    @staticmethod
    def prevalence(values: np.ndarray) -> float:
        """Share of ones in a 0/1 array."""
        return float(np.mean(values))

    @staticmethod
    def pearson(x: np.ndarray, y: np.ndarray) -> float:
        """
        Pearson correlation of two arrays.

        Returns 0.0 when either array is constant.
        """
        zx = standardize(x)
        zy = standardize(y)
        return float(np.mean(zx * zy))

    def report(self, df: pd.DataFrame, encoders: Dict[str, Dict[str, float]] = None) -> pd.DataFrame:
        """
        Build one row per calibrated variable.

        Parameters
        ----------
        df : pd.DataFrame
            Full generated table (latent columns included).
        encoders : Dict, optional
            Ordinal scores for ordered categorical principals.

        Returns
        -------
        pd.DataFrame
            Columns: variable, statistic, target, realized, error.
        """
        encoders = encoders or {}
        rows = []

        for name, spec in self.variables.items():
            if name not in df.columns:
                continue

            kind = spec.get('kind')
            if kind == 'binary':
                target = spec['prevalence']
                realized = self.prevalence(df[name].to_numpy(dtype=float))
                statistic = 'prevalence'
            elif kind == 'continuous':
                principal = df[spec['principal']]
                if spec['principal'] in encoders:
                    principal = principal.map(encoders[spec['principal']])
                x = principal.to_numpy(dtype=float)
                y = df[name].to_numpy(dtype=float)
                if spec.get('scale') == 'log':
                    x = np.log(np.maximum(x, np.finfo(float).tiny))
                    y = np.log(np.maximum(y, np.finfo(float).tiny))
                target = spec['target_correlation']
                realized = self.pearson(x, y)
                statistic = f"corr({spec['principal']})"
            else:
                continue

            rows.append({
                'variable': name,
                'statistic': statistic,
                'target': target,
                'realized': realized,
                'error': realized - target,
            })

        return pd.DataFrame(rows, columns=['variable', 'statistic', 'target', 'realized', 'error'])


def print_calibration_summary(report: pd.DataFrame) -> None:
    """
    Print calibration results in a formatted table.

    Parameters
    ----------
    report : pd.DataFrame
        Output of CalibrationChecker.report.
    """
    print("\n" + "=" * 72)
    print("CALIBRATION SUMMARY")
    print("=" * 72)
    print(f"{'Variable':<28} {'Statistic':<24} {'Target':>8} {'Realized':>9}")
    print("-" * 72)
    for row in report.itertuples(index=False):
        print(f"{row.variable:<28} {row.statistic:<24} {row.target:>8.3f} {row.realized:>9.3f}")
    print("=" * 72)
