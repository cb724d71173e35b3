"""
Configuration loader for Skyhop.

Handles YAML loading, saving, and default configuration.
"""

from pathlib import Path

import yaml

from skyhop.config.schema import SkyhopConfig
from skyhop.config.validation import validate_config


def load_config(config_path: Path) -> SkyhopConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated SkyhopConfig instance.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the configuration is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    config = SkyhopConfig(**raw_config)
    validate_config(config)

    return config


def save_config(config: SkyhopConfig, output_path: Path) -> None:
    """
    Save configuration to a YAML file.

    Args:
        config: SkyhopConfig instance to save.
        output_path: Path to the output YAML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)


def get_default_config() -> SkyhopConfig:
    """
    Get default configuration with all default values.

    Returns:
        SkyhopConfig instance with defaults.
    """
    return SkyhopConfig()
