"""
Configuration for amnotifier.

Process settings come from AMNOTIFIER_* environment variables; the provider
itself is loaded from a YAML file.
"""

from amnotifier.config.loader import (
    expand_env,
    extract_provider_section,
    get_config_path,
    load_provider,
    parse_provider,
)
from amnotifier.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "expand_env",
    "extract_provider_section",
    "get_config_path",
    "get_settings",
    "load_provider",
    "parse_provider",
]
