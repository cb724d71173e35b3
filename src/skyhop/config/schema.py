"""
Pydantic configuration schema for Skyhop.

This module defines all configuration models with strict validation,
enum fields, and default values matching the reference hop maneuver.
"""

from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ActuationMode(str, Enum):
    """Lateral actuation mode for the translate phase."""

    DIRECT = "direct"
    INCREMENTAL = "incremental"


# ============================================================================
# Sub-configuration Models
# ============================================================================


class ProjectConfig(BaseModel):
    """Project-level configuration."""

    name: str = Field(default="Skyhop", description="Project name")
    run_id: str = Field(
        default="auto",
        validate_default=True,
        description="Run identifier (auto generates UUID)",
    )
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("run_id", mode="before")
    @classmethod
    def generate_run_id(cls, v: str) -> str:
        """Generate UUID if run_id is 'auto'."""
        if v == "auto":
            return str(uuid.uuid4())[:8]
        return v


class SessionConfig(BaseModel):
    """kRPC session configuration."""

    address: str = Field(default="127.0.0.1", description="kRPC server address")
    rpc_port: int = Field(default=50000, ge=1, le=65535, description="RPC port")
    stream_port: int = Field(
        default=50001, ge=1, le=65535, description="Stream port"
    )
    client_name: str = Field(default="skyhop", description="Client name")
    call_timeout_s: Optional[float] = Field(
        default=None, gt=0, description="Per-call deadline (None blocks)"
    )


class SiteConfig(BaseModel):
    """Anchor site for the surface reference frame."""

    latitude_deg: float = Field(
        default=-0.0972, ge=-90, le=90, description="Anchor latitude"
    )
    longitude_deg: float = Field(
        default=-74.5577, ge=-180, le=180, description="Anchor longitude"
    )


class GainsConfig(BaseModel):
    """PID gains and output bounds."""

    kp: float = Field(default=0.0, description="Proportional gain")
    ki: float = Field(default=0.0, description="Integral gain")
    kd: float = Field(default=0.0, description="Derivative gain")
    min_output: float = Field(default=-1.0, description="Lower output bound")
    max_output: float = Field(default=1.0, description="Upper output bound")
    anti_windup: bool = Field(
        default=False, description="Skip integration while saturated"
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "GainsConfig":
        """Reject inverted output bounds."""
        if self.min_output > self.max_output:
            raise ValueError("min_output must not exceed max_output")
        return self


class AscendConfig(BaseModel):
    """Ascend phase configuration."""

    target_altitude: float = Field(default=100.0, gt=0, description="Hover altitude")
    tolerance: float = Field(default=1.0, gt=0, description="Altitude tolerance")
    gains: GainsConfig = Field(
        default_factory=lambda: GainsConfig(
            kp=0.6, ki=0.0, kd=0.6, min_output=0.0, max_output=1.0
        )
    )
    max_ticks: Optional[int] = Field(default=None, gt=0, description="Tick budget")


class TranslateConfig(BaseModel):
    """Translate phase configuration."""

    tolerance: float = Field(default=5.0, gt=0, description="Horizontal tolerance")
    offset_north: float = Field(
        default=0.0, description="Target offset north of captured position"
    )
    offset_east: float = Field(
        default=0.0, description="Target offset east of captured position"
    )
    slew_limit: float = Field(
        default=1.0, gt=0, description="Per-tick delta limit (incremental mode)"
    )
    gains: GainsConfig = Field(
        default_factory=lambda: GainsConfig(
            kp=0.7, ki=0.3, kd=0.6, min_output=-0.5, max_output=0.5
        )
    )
    roll_hold: bool = Field(default=False, description="Hold zero roll")
    roll_gains: GainsConfig = Field(
        default_factory=lambda: GainsConfig(
            kp=0.7, ki=0.3, kd=0.6, min_output=-0.5, max_output=0.5
        )
    )
    max_ticks: Optional[int] = Field(default=None, gt=0, description="Tick budget")


class DescendConfig(BaseModel):
    """Descend phase configuration."""

    target_vertical_speed: float = Field(
        default=-0.5, lt=0, description="Descent rate setpoint"
    )
    gear_altitude: float = Field(
        default=100.0, gt=0, description="Gear deployment altitude"
    )
    touchdown_altitude: float = Field(
        default=10.0, ge=0, description="Touchdown altitude"
    )
    gains: GainsConfig = Field(
        default_factory=lambda: GainsConfig(
            kp=0.8, ki=0.01, kd=0.03, min_output=0.0, max_output=1.0
        )
    )
    max_ticks: Optional[int] = Field(default=None, gt=0, description="Tick budget")


class FlightPlan(BaseModel):
    """Complete hop maneuver plan."""

    tick_period_s: float = Field(
        default=0.001, gt=0, le=1.0, description="Loop period and controller dt"
    )
    mode: ActuationMode = Field(
        default=ActuationMode.DIRECT, description="Lateral actuation mode"
    )
    site: SiteConfig = Field(default_factory=SiteConfig)
    ascend: AscendConfig = Field(default_factory=AscendConfig)
    translate: TranslateConfig = Field(default_factory=TranslateConfig)
    descend: DescendConfig = Field(default_factory=DescendConfig)


class SimulationConfig(BaseModel):
    """Simulated vehicle configuration."""

    max_thrust_accel: float = Field(
        default=20.0, gt=0, description="Full-throttle acceleration"
    )
    gravity: float = Field(default=9.81, gt=0, description="Surface gravity")
    lateral_accel: float = Field(
        default=4.0, gt=0, description="Full-input lateral acceleration"
    )
    body_radius: float = Field(default=600000.0, gt=0, description="Body radius")
    surface_height: float = Field(default=70.0, description="Terrain height")
    sim_step_s: float = Field(default=0.01, gt=0, description="Integration step")


# ============================================================================
# Root Configuration Model
# ============================================================================


class SkyhopConfig(BaseModel):
    """Root configuration model for Skyhop."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    plan: FlightPlan = Field(default_factory=FlightPlan)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)

    model_config = {"extra": "forbid"}
