"""
Configuration for the beacon validator.

- Settings loaded from the environment and .env files
- The semantic group vocabulary probed by the filter checks
"""

from beacon_validator.config.semantic_groups import SemanticGroup
from beacon_validator.config.settings import (
    BeaconSettings,
    ObservabilitySettings,
    Settings,
    ValidatorSettings,
    get_settings,
)

__all__ = [
    "SemanticGroup",
    "BeaconSettings",
    "ObservabilitySettings",
    "Settings",
    "ValidatorSettings",
    "get_settings",
]
