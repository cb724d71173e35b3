"""
Hop maneuver phase sequencer for Skyhop.

Runs the fixed-period control loop that flies the vehicle through
ASCEND -> TRANSLATE -> DESCEND -> COMPLETE.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional
import time

from skyhop.config.schema import ActuationMode, FlightPlan, GainsConfig
from skyhop.control.actuation import AttitudeCommand
from skyhop.control.pid import PIDController
from skyhop.errors import FlightAbortedError, PhaseTimeoutError
from skyhop.frames.geodetic import FrameLike, Vector3, build_frame
from skyhop.logging.setup import bind_phase, clear_phase, get_logger
from skyhop.logging.telemetry import FlightRecorder, TickSample
from skyhop.session.interface import VehicleSession

logger = get_logger(__name__)


class Phase(Enum):
    """Maneuver phases, executed strictly in declaration order."""

    ASCEND = auto()
    TRANSLATE = auto()
    DESCEND = auto()
    COMPLETE = auto()


@dataclass
class FlightResult:
    """
    Outcome of a completed flight.

    Attributes:
        phase: Final phase (always COMPLETE for a returned result).
        phase_ticks: Control ticks executed per phase, exit ticks included.
        captured_position: Position read at the ASCEND exit tick.
        translate_target: Horizontal (north, east) target of TRANSLATE.
        gear_deployed: Whether the gear command was issued.
        summary: Flight recorder summary.
    """

    phase: Phase
    phase_ticks: dict[str, int] = field(default_factory=dict)
    captured_position: Optional[Vector3] = None
    translate_target: Optional[tuple[float, float]] = None
    gear_deployed: bool = False
    summary: dict[str, Any] = field(default_factory=dict)


class PhaseSequencer:
    """
    Phase-sequencing control loop.

    Owns the controllers of the active phase, polls the session each tick,
    and writes actuator commands back. Controllers are created on phase
    entry and dropped on exit; the altitude controller created for ASCEND
    keeps holding throttle through TRANSLATE.

    Any exception raised while flying aborts the flight: no further
    telemetry is read, zero throttle is commanded if the session still
    accepts it, and FlightAbortedError is raised. Interrupts such as
    KeyboardInterrupt also command zero throttle, then propagate unchanged.
    """

    def __init__(
        self,
        session: VehicleSession,
        plan: Optional[FlightPlan] = None,
        mode: Optional[ActuationMode] = None,
        sleep: Callable[[float], None] = time.sleep,
        frame: Optional[FrameLike] = None,
        recorder: Optional[FlightRecorder] = None,
    ) -> None:
        """
        Initialize sequencer.

        Args:
            session: Vehicle session handle.
            plan: Flight plan, defaults to the reference hop.
            mode: Lateral actuation mode, defaults to plan.mode.
            sleep: Function used to wait one tick period.
            frame: Pre-built anchor frame; built from the session if None.
            recorder: Flight recorder for per-tick samples.

        Raises:
            ConfigurationError: If any controller configuration is invalid.
        """
        self._session = session
        self._plan = plan or FlightPlan()
        self._mode = ActuationMode(mode or self._plan.mode)
        self._sleep = sleep
        self._frame = frame
        self._recorder = recorder or FlightRecorder()

        self._phase = Phase.ASCEND
        self._started = False
        self._tick = 0
        self._phase_tick = 0
        self._phase_ticks: Counter[str] = Counter()

        self._altitude_ctrl: Optional[PIDController] = None
        self._north_ctrl: Optional[PIDController] = None
        self._east_ctrl: Optional[PIDController] = None
        self._roll_ctrl: Optional[PIDController] = None
        self._landing_ctrl: Optional[PIDController] = None
        self._attitude: Optional[AttitudeCommand] = None

        self._captured_position: Optional[Vector3] = None
        self._translate_target: Optional[tuple[float, float]] = None
        self._gear_deployed = False

        self._validate_plan()

    def _validate_plan(self) -> None:
        """Build every controller once so bad parameters fail before flight."""
        plan = self._plan
        self._make_controller(plan.ascend.gains, plan.ascend.target_altitude)
        self._make_controller(plan.translate.gains, 0.0)
        if plan.translate.roll_hold:
            self._make_controller(plan.translate.roll_gains, 0.0)
        self._make_controller(plan.descend.gains, plan.descend.target_vertical_speed)

    def _make_controller(self, gains: GainsConfig, target: float) -> PIDController:
        return PIDController(
            kp=gains.kp,
            ki=gains.ki,
            kd=gains.kd,
            target=target,
            dt=self._plan.tick_period_s,
            min_output=gains.min_output,
            max_output=gains.max_output,
            anti_windup=gains.anti_windup,
        )

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> FlightResult:
        """
        Fly the complete maneuver.

        Returns:
            FlightResult once COMPLETE is reached.

        Raises:
            FlightAbortedError: If any session call or phase budget fails.
        """
        try:
            if not self._started:
                self.start()
            while self._phase is not Phase.COMPLETE:
                self.step()
        except Exception as e:
            self._abort(e)
        except BaseException:
            logger.warning("flight_interrupted", phase=self._phase.name)
            self._cut_throttle()
            raise
        finally:
            clear_phase()

        return self.result()

    def start(self) -> None:
        """Enable attitude hold and RCS, stage, build the anchor frame."""
        self._session.set_sas(True)
        self._session.set_rcs(True)
        self._session.activate_next_stage()

        if self._frame is None:
            site = self._plan.site
            self._frame = build_frame(
                self._session.body(),
                self._session.body_reference_frame(),
                site.latitude_deg,
                site.longitude_deg,
            )

        self._started = True
        logger.info("flight_started", mode=self._mode.value)
        self._enter(Phase.ASCEND)

    def step(self) -> Phase:
        """
        Execute one tick of the active phase.

        Returns:
            Phase active after the tick.
        """
        budget = self._phase_budget()
        if budget is not None and self._phase_tick >= budget:
            raise PhaseTimeoutError(self._phase.name, budget)

        self._tick += 1
        self._phase_tick += 1
        self._phase_ticks[self._phase.name] += 1

        if self._phase == Phase.ASCEND:
            exited = self._tick_ascend()
        elif self._phase == Phase.TRANSLATE:
            exited = self._tick_translate()
        elif self._phase == Phase.DESCEND:
            exited = self._tick_descend()
        else:
            return self._phase

        if not exited:
            self._sleep(self._plan.tick_period_s)

        return self._phase

    def _phase_budget(self) -> Optional[int]:
        if self._phase == Phase.ASCEND:
            return self._plan.ascend.max_ticks
        if self._phase == Phase.TRANSLATE:
            return self._plan.translate.max_ticks
        if self._phase == Phase.DESCEND:
            return self._plan.descend.max_ticks
        return None

    def _enter(self, phase: Phase) -> None:
        """Transition to a phase and create its controllers."""
        previous = self._phase
        self._phase = phase
        self._phase_tick = 0
        bind_phase(phase.name)

        if previous != phase:
            logger.info(
                "phase_transition",
                from_phase=previous.name,
                to_phase=phase.name,
                tick=self._tick,
            )

        plan = self._plan
        if phase == Phase.ASCEND:
            self._altitude_ctrl = self._make_controller(
                plan.ascend.gains, plan.ascend.target_altitude
            )
        elif phase == Phase.TRANSLATE:
            assert self._translate_target is not None
            north, east = self._translate_target
            self._north_ctrl = self._make_controller(plan.translate.gains, north)
            self._east_ctrl = self._make_controller(plan.translate.gains, east)
            if plan.translate.roll_hold:
                self._roll_ctrl = self._make_controller(plan.translate.roll_gains, 0.0)
            if self._mode == ActuationMode.INCREMENTAL:
                self._attitude = AttitudeCommand(plan.translate.slew_limit)
        elif phase == Phase.DESCEND:
            self._altitude_ctrl = None
            self._north_ctrl = None
            self._east_ctrl = None
            self._roll_ctrl = None
            self._attitude = None
            self._landing_ctrl = self._make_controller(
                plan.descend.gains, plan.descend.target_vertical_speed
            )
        elif phase == Phase.COMPLETE:
            self._landing_ctrl = None
            self._session.set_throttle(0.0)
            logger.info("flight_complete", ticks=self._tick)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _tick_ascend(self) -> bool:
        plan = self._plan.ascend
        altitude = self._session.surface_altitude()

        if abs(altitude - plan.target_altitude) <= plan.tolerance:
            position = self._session.position(self._frame)
            self._captured_position = (
                float(position[0]),
                float(position[1]),
                float(position[2]),
            )
            self._translate_target = (
                self._captured_position[1] + self._plan.translate.offset_north,
                self._captured_position[2] + self._plan.translate.offset_east,
            )
            logger.info(
                "translate_target_captured",
                north=self._translate_target[0],
                east=self._translate_target[1],
                altitude=altitude,
            )
            self._enter(Phase.TRANSLATE)
            return True

        assert self._altitude_ctrl is not None
        throttle = self._altitude_ctrl.control(altitude)
        self._session.set_throttle(throttle)

        self._record(TickSample(self._tick, "ASCEND", altitude, throttle=throttle))
        return False

    def _tick_translate(self) -> bool:
        plan = self._plan.translate
        altitude = self._session.surface_altitude()
        position = self._session.position(self._frame)
        roll = self._session.roll() if self._roll_ctrl is not None else None

        assert self._translate_target is not None
        north_offset = self._translate_target[0] - position[1]
        east_offset = self._translate_target[1] - position[2]

        if abs(north_offset) <= plan.tolerance and abs(east_offset) <= plan.tolerance:
            self._enter(Phase.DESCEND)
            return True

        assert self._north_ctrl is not None and self._east_ctrl is not None
        north_out = self._north_ctrl.control(position[1])
        east_out = self._east_ctrl.control(position[2])
        roll_out = (
            self._roll_ctrl.control(roll)
            if self._roll_ctrl is not None and roll is not None
            else None
        )

        if self._mode == ActuationMode.DIRECT:
            lateral = self._actuate_direct(north_out, east_out, roll_out)
        else:
            lateral = self._actuate_incremental(north_out, east_out, roll_out)

        assert self._altitude_ctrl is not None
        throttle = self._altitude_ctrl.control(altitude)
        self._session.set_throttle(throttle)

        self._record(
            TickSample(
                self._tick,
                "TRANSLATE",
                altitude,
                throttle=throttle,
                north_offset=north_offset,
                east_offset=east_offset,
                lateral=lateral,
            )
        )
        return False

    def _actuate_direct(
        self, north_out: float, east_out: float, roll_out: Optional[float]
    ) -> dict[str, float]:
        """Write controller outputs straight to the translation inputs."""
        self._session.set_right(north_out)
        self._session.set_up(-1.0 * east_out)
        lateral = {"right": north_out, "up": -1.0 * east_out}
        if roll_out is not None:
            self._session.set_roll(roll_out)
            lateral["roll"] = roll_out
        return lateral

    def _actuate_incremental(
        self, north_out: float, east_out: float, roll_out: Optional[float]
    ) -> dict[str, float]:
        """Accumulate slew-limited deltas into running attitude inputs."""
        assert self._attitude is not None
        deltas = {"yaw": north_out, "pitch": -1.0 * east_out}
        if roll_out is not None:
            deltas["roll"] = roll_out

        commands = self._attitude.step(**deltas)
        self._session.set_yaw(commands["yaw"])
        self._session.set_pitch(commands["pitch"])
        if "roll" in commands:
            self._session.set_roll(commands["roll"])
        return commands

    def _tick_descend(self) -> bool:
        plan = self._plan.descend
        altitude = self._session.surface_altitude()
        speed = self._session.vertical_speed()

        # Gear is independent of the controller and goes down even on the
        # tick that reaches touchdown.
        if not self._gear_deployed and altitude <= plan.gear_altitude:
            self._session.set_gear(True)
            self._gear_deployed = True
            logger.info("gear_deployed", altitude=altitude)

        if altitude <= plan.touchdown_altitude:
            self._enter(Phase.COMPLETE)
            return True

        assert self._landing_ctrl is not None
        throttle = self._landing_ctrl.control(speed)
        self._session.set_throttle(throttle)

        logger.debug("descend_tick", altitude=altitude, speed=speed, throttle=throttle)
        self._record(
            TickSample(
                self._tick,
                "DESCEND",
                altitude,
                throttle=throttle,
                vertical_speed=speed,
            )
        )
        return False

    # ------------------------------------------------------------------
    # Failure handling
    # ------------------------------------------------------------------

    def _abort(self, cause: Exception) -> None:
        """Command zero throttle if possible and raise FlightAbortedError."""
        phase = self._phase.name if self._started else "STARTUP"
        logger.error(
            "flight_aborted",
            phase=phase,
            error=str(cause),
            error_type=type(cause).__name__,
        )

        throttle_cut = self._cut_throttle()
        raise FlightAbortedError(phase, cause, throttle_cut) from cause

    def _cut_throttle(self) -> bool:
        """Best-effort zero throttle; True if the session accepted it."""
        try:
            self._session.set_throttle(0.0)
        except Exception as e:
            logger.error("safe_throttle_failed", error=str(e))
            return False
        return True

    def _record(self, sample: TickSample) -> None:
        self._recorder.record(sample)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def result(self) -> FlightResult:
        """Snapshot of the flight outcome so far."""
        return FlightResult(
            phase=self._phase,
            phase_ticks=dict(self._phase_ticks),
            captured_position=self._captured_position,
            translate_target=self._translate_target,
            gear_deployed=self._gear_deployed,
            summary=self._recorder.get_summary(),
        )

    @property
    def phase(self) -> Phase:
        """Active phase."""
        return self._phase

    @property
    def mode(self) -> ActuationMode:
        """Lateral actuation mode."""
        return self._mode

    @property
    def frame(self) -> Optional[FrameLike]:
        """Anchor frame (None until start())."""
        return self._frame

    @property
    def captured_position(self) -> Optional[Vector3]:
        """Position read at the ASCEND exit tick."""
        return self._captured_position

    @property
    def translate_target(self) -> Optional[tuple[float, float]]:
        """Horizontal (north, east) target of TRANSLATE."""
        return self._translate_target

    @property
    def gear_deployed(self) -> bool:
        """Whether the gear command was issued."""
        return self._gear_deployed

    @property
    def altitude_controller(self) -> Optional[PIDController]:
        """Altitude controller (ASCEND and TRANSLATE only)."""
        return self._altitude_ctrl

    @property
    def recorder(self) -> FlightRecorder:
        """Flight recorder."""
        return self._recorder

    @property
    def tick(self) -> int:
        """Total control ticks executed."""
        return self._tick
