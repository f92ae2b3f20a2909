"""Configuration loader utility for YAML files."""

import copy

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import yaml


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config' / 'simulation.yml'


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to the YAML configuration file. Defaults to the packaged
        `config/simulation.yml`.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing configuration parameters.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the YAML file is malformed.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file {config_path}: {e}")

    return config


def update_config(config: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `config` with `overrides` merged in recursively.

    Nested mappings are merged key by key; any other value replaces the
    original.
    """
    merged = copy.deepcopy(config)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = update_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML file.

    Parameters
    ----------
    config : Dict[str, Any]
        Dictionary containing configuration parameters.
    config_path : str or Path
        Path where to save the YAML configuration file.
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
