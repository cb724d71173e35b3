"""Configuration module for Skyhop."""

from skyhop.config.schema import (
    ActuationMode,
    AscendConfig,
    DescendConfig,
    FlightPlan,
    GainsConfig,
    ProjectConfig,
    SessionConfig,
    SimulationConfig,
    SiteConfig,
    SkyhopConfig,
    TranslateConfig,
)
from skyhop.config.loader import get_default_config, load_config, save_config
from skyhop.config.validation import validate_config

__all__ = [
    "ActuationMode",
    "AscendConfig",
    "DescendConfig",
    "FlightPlan",
    "GainsConfig",
    "ProjectConfig",
    "SessionConfig",
    "SimulationConfig",
    "SiteConfig",
    "SkyhopConfig",
    "TranslateConfig",
    "get_default_config",
    "load_config",
    "save_config",
    "validate_config",
]
