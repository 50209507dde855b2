"""
Configuration management.

config.yaml loading, environment overlays and placeholder resolution.
"""

from tickcron.config.loader import Config, load_config
from tickcron.config.resolver import resolve_config

__all__ = [
    "load_config",
    "Config",
    "resolve_config",
]
