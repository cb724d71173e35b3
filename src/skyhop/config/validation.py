"""
Configuration validation for Skyhop.

Provides cross-field checks beyond Pydantic schema validation.
"""

from skyhop.config.schema import GainsConfig, SkyhopConfig
from skyhop.errors import ConfigurationError


def validate_config(config: SkyhopConfig) -> None:
    """
    Perform cross-field validation on configuration.

    Args:
        config: SkyhopConfig instance to validate.

    Raises:
        ConfigurationError: If validation fails.
    """
    errors: list[str] = []

    errors.extend(_validate_ascend(config))
    errors.extend(_validate_translate(config))
    errors.extend(_validate_descend(config))

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in errors
        )
        raise ConfigurationError(error_msg)


def _validate_throttle_bounds(name: str, gains: GainsConfig) -> list[str]:
    """Throttle controllers must stay inside [0, 1]."""
    if gains.min_output < 0.0 or gains.max_output > 1.0:
        return [f"{name} output bounds must lie within [0, 1] for throttle"]
    return []


def _validate_ascend(config: SkyhopConfig) -> list[str]:
    """Validate ascend configuration."""
    ascend = config.plan.ascend
    errors = _validate_throttle_bounds("plan.ascend.gains", ascend.gains)

    if ascend.tolerance >= ascend.target_altitude:
        errors.append("plan.ascend.tolerance must be smaller than target_altitude")

    return errors


def _validate_translate(config: SkyhopConfig) -> list[str]:
    """Validate translate configuration."""
    translate = config.plan.translate
    errors: list[str] = []

    for name, gains in (
        ("plan.translate.gains", translate.gains),
        ("plan.translate.roll_gains", translate.roll_gains),
    ):
        if gains.min_output < -1.0 or gains.max_output > 1.0:
            errors.append(f"{name} output bounds must lie within [-1, 1]")

    return errors


def _validate_descend(config: SkyhopConfig) -> list[str]:
    """Validate descend configuration."""
    descend = config.plan.descend
    errors = _validate_throttle_bounds("plan.descend.gains", descend.gains)

    if descend.touchdown_altitude >= descend.gear_altitude:
        errors.append(
            "plan.descend.touchdown_altitude should be below gear_altitude"
        )

    return errors
