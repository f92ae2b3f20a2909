"""Semantic checks on a loaded configuration.

Per-variable parameters (prevalence, target correlation, category
probabilities) are checked by the steps themselves when the propagation
engine is built; this module covers the sections outside `variables`.
"""

from typing import Dict

from .dag import PIPELINE_ORDER, TRAITS
from .errors import ConfigurationError


REQUIRED_SECTIONS = ('population', 'geography', 'providers', 'exogenous', 'variables', 'measurement')
REQUIRED_OUTPUT_COLUMNS = ('subject_id', 'state', 'provider_id')


def validate_config(config: Dict) -> None:
    """Raise ConfigurationError on the first impossible setting."""
    missing = [s for s in REQUIRED_SECTIONS if s not in config]
    if missing:
        raise ConfigurationError(f"Configuration missing sections: {missing}")

    _validate_population(config['population'])
    _validate_providers(config['providers'])
    _validate_exogenous(config['exogenous'])
    _validate_output(config.get('output', {}))


def _validate_population(population: Dict) -> None:
    n_subjects = population.get('n_subjects')
    if not isinstance(n_subjects, int) or n_subjects < 1:
        raise ConfigurationError(f"n_subjects must be a positive integer, got {n_subjects}")

    n_providers = population.get('n_providers')
    if n_providers is not None:
        if not isinstance(n_providers, int) or n_providers < 1:
            raise ConfigurationError(f"n_providers must be a positive integer, got {n_providers}")
    else:
        ratio = population.get('provider_ratio')
        if ratio is None or ratio <= 0:
            raise ConfigurationError(f"provider_ratio must be positive, got {ratio}")


def _validate_providers(providers: Dict) -> None:
    quality = providers.get('quality', {})
    if quality.get('sd', 1.0) <= 0:
        raise ConfigurationError("Provider quality sd must be positive")
    r = quality.get('conditions_correlation', 0.0)
    if not -1 <= r <= 1:
        raise ConfigurationError(f"Provider conditions_correlation must lie in [-1, 1], got {r}")


def _require(section: Dict, key: str, label: str):
    """Return `section[key]`, or raise ConfigurationError naming the missing key."""
    if not isinstance(section, dict) or section.get(key) is None:
        raise ConfigurationError(f"Configuration missing '{label}.{key}'")
    return section[key]


def _validate_exogenous(exogenous: Dict) -> None:
    age = _require(exogenous, 'age', 'exogenous')
    scale = _require(age, 'scale', 'exogenous.age')
    age_min = _require(age, 'min', 'exogenous.age')
    age_max = _require(age, 'max', 'exogenous.age')
    _require(age, 'skew', 'exogenous.age')
    _require(age, 'loc', 'exogenous.age')
    if scale <= 0:
        raise ConfigurationError("Age scale must be positive")
    if not 0 <= age_min < age_max:
        raise ConfigurationError(f"Age bounds must satisfy 0 <= min < max, got [{age_min}, {age_max}]")

    income = _require(exogenous, 'parental_income', 'exogenous')
    spread = _require(income, 'spread', 'exogenous.parental_income')
    floor = _require(income, 'floor', 'exogenous.parental_income')
    ceiling = _require(income, 'ceiling', 'exogenous.parental_income')
    median = _require(income, 'median', 'exogenous.parental_income')
    if spread <= 0:
        raise ConfigurationError("Parental income spread must be positive")
    if not 0 <= floor < ceiling:
        raise ConfigurationError(
            f"Parental income needs 0 <= floor < ceiling, got [{floor}, {ceiling}]"
        )
    if not floor <= median <= ceiling or median <= 0:
        raise ConfigurationError(
            f"Parental income median {median} outside [{floor}, {ceiling}]"
        )

    # The trait set is fixed by the causal graph
    traits = exogenous.get('traits') or TRAITS
    if sorted(traits) != sorted(TRAITS):
        raise ConfigurationError(
            f"exogenous.traits must list exactly {list(TRAITS)}, got {list(traits)}"
        )


def _validate_output(output: Dict) -> None:
    columns = output.get('columns')
    if not columns:
        return

    missing = [c for c in REQUIRED_OUTPUT_COLUMNS if c not in columns]
    if missing:
        raise ConfigurationError(f"Output columns must include {missing}")

    known = set(PIPELINE_ORDER) | {'subject_id'}
    unknown = [c for c in columns if c not in known]
    if unknown:
        raise ConfigurationError(f"Unknown output columns: {unknown}")
