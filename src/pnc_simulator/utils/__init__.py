"""Utility modules for the simulator."""

from .config_loader import load_config, save_config, update_config

__all__ = ['load_config', 'save_config', 'update_config']
