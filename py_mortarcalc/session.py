"""Measurement protocol: a state machine turning input events into prompts and a dial value.

A full measurement walks through five clicks:

1. two ends of a reference segment on the map (scale calibration),
2. the firer's and the target's positions on the map (horizontal distance),
3. the target in the game view (elevation).

The calibration survives between measurements, so a quick measurement skips step 1.

`MeasurementSession.handle` takes one event and returns the messages for the display
collaborator; events must be delivered serially from one thread or task.

Examples:
    >>> session = MeasurementSession()
    >>> session.handle(Start())
    [ShowPrompt(text='Set 100 m scale: first point', auto_close_ms=None)]
    >>> session.state
    <MeasurementState.SCALE_POINT_1: 2>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Protocol, Tuple

from typing_extensions import Union

from py_mortarcalc.calibration import Calibration, measure_distance
from py_mortarcalc.config import get_config
from py_mortarcalc.elevation import estimate_elevation
from py_mortarcalc.exceptions import DegenerateCalibrationError, InvalidGeometryError
from py_mortarcalc.geometry import Point2D, ScreenGeometry
from py_mortarcalc.logger import logger
from py_mortarcalc.solver import FiringSolution, MortarSolver, SolverResult
from py_mortarcalc.unit import Angular, Distance, PreferredUnits

__all__ = (
    'MeasurementState',
    'Start',
    'QuickMeasure',
    'PointCaptured',
    'Reset',
    'ResizeGeometry',
    'PromptDismissed',
    'ToggleListening',
    'Event',
    'ShowPrompt',
    'ClosePrompt',
    'Message',
    'DisplaySink',
    'MeasurementSession',
    'transition',
    'dispatch',
    'run_events',
    'EMPTY_TEXT',
    'NO_SOLUTION_TEXT',
    'STATUS_READY',
    'STATUS_PAUSED',
    'STATUS_COMPLETE',
)

EMPTY_TEXT = "--"
NO_SOLUTION_TEXT = "No solution"

STATUS_READY = "Ready"
STATUS_PAUSED = "Paused"
STATUS_COMPLETE = "Measurement complete"

PROMPT_SCALE_1 = "Set {reference:g} m scale: first point"
PROMPT_SCALE_2 = "Set {reference:g} m scale: second point"
PROMPT_DISTANCE_1 = "Measure distance: first point (your position)"
PROMPT_DISTANCE_2 = "Measure distance: second point (target position)"
PROMPT_ELEVATION = "Horizontal distance: {distance}\nSet elevation: aim at the target and click"
PROMPT_RESULT = "Mortar distance: {result}"
PROMPT_NO_SOLUTION = "No solution - target out of range"
PROMPT_DEGENERATE = "Scale not set: calibration points coincide"
PROMPT_NOT_CALIBRATED = "Scale is not calibrated, start a full measurement"
PROMPT_BAD_GEOMETRY = "Invalid screen geometry: {reason}"


class MeasurementState(Enum):
    IDLE = auto()
    SCALE_POINT_1 = auto()
    SCALE_POINT_2 = auto()
    DISTANCE_POINT_1 = auto()
    DISTANCE_POINT_2 = auto()
    ELEVATION_POINT = auto()


# region Events
@dataclass(frozen=True)
class Start:
    """Begin a full measurement, scale calibration included."""


@dataclass(frozen=True)
class QuickMeasure:
    """Repeat a measurement with the current scale, or cancel the shown prompt."""


@dataclass(frozen=True)
class PointCaptured:
    """A click at screen coordinates."""

    x: float
    y: float

    @property
    def point(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass(frozen=True)
class Reset:
    """Abandon the current measurement."""


@dataclass(frozen=True)
class ResizeGeometry:
    """Screen resolution changed."""

    width_px: float
    height_px: float


@dataclass(frozen=True)
class PromptDismissed:
    """The display closed an auto-closing prompt on its own."""


@dataclass(frozen=True)
class ToggleListening:
    """Pause or resume reacting to measurement input."""


Event = Union[Start, QuickMeasure, PointCaptured, Reset, ResizeGeometry, PromptDismissed, ToggleListening]
# endregion Events


# region Messages
@dataclass(frozen=True)
class ShowPrompt:
    """Show `text`, replacing any prompt on screen.

    `auto_close_ms` is a hint for the display to close the prompt after a delay.
    """

    text: str
    auto_close_ms: Optional[int] = None


@dataclass(frozen=True)
class ClosePrompt:
    """Close the prompt on screen, if any."""


Message = Union[ShowPrompt, ClosePrompt]
# endregion Messages


class DisplaySink(Protocol):
    """Display collaborator receiving session messages."""

    def show_prompt(self, text: str, auto_close_ms: Optional[int] = None) -> None: ...

    def close_prompt(self) -> None: ...


def _distance_text(meters: float) -> str:
    return str(Distance.Meter(meters) << PreferredUnits.distance)


def _angle_text(degrees: float) -> str:
    return str(Angular.Degree(degrees) << PreferredUnits.angular)


def _result_text(result: SolverResult) -> str:
    if isinstance(result, FiringSolution):
        units = PreferredUnits.dial
        return f"{Distance.Meter(result.dial_m) >> units:.0f}{units.symbol}"
    return NO_SOLUTION_TEXT


def _default_geometry() -> ScreenGeometry:
    config = get_config()
    return ScreenGeometry.from_resolution(config.screen_width_px, config.screen_height_px,
                                          config.horizontal_fov_deg)


@dataclass
class MeasurementSession:
    """Measurement state machine.

    Attributes:
        geometry: Screen geometry used for elevation estimates.
        solver: Dial solver of the weapon in use.
        calibration: Pixel scale, kept across measurements.
        reference_distance_m: Real length of the calibration segment.
        result_auto_close_ms: Display time hint for the final prompt.
        state: Current step of the measurement.
        pending_point: First click of a two-point step.
        horizontal_distance_m: Last measured horizontal distance.
        elevation_deg: Last measured elevation.
        result: Last solver result.
        prompt_active: Whether a prompt is believed to be on screen.
        listening: Whether measurement input is accepted.
        status_text: One-line status for a status display.
    """

    geometry: ScreenGeometry = field(default_factory=_default_geometry)
    solver: MortarSolver = field(default_factory=MortarSolver.from_config)
    calibration: Calibration = field(default_factory=Calibration)
    reference_distance_m: float = field(default_factory=lambda: get_config().reference_distance_m)
    result_auto_close_ms: Optional[int] = field(default_factory=lambda: get_config().result_auto_close_ms)

    state: MeasurementState = field(default=MeasurementState.IDLE, init=False)
    pending_point: Optional[Point2D] = field(default=None, init=False)
    horizontal_distance_m: Optional[float] = field(default=None, init=False)
    elevation_deg: Optional[float] = field(default=None, init=False)
    result: Optional[SolverResult] = field(default=None, init=False)
    prompt_active: bool = field(default=False, init=False)
    listening: bool = field(default=True, init=False)
    status_text: str = field(default=STATUS_READY, init=False)

    _messages: List[Message] = field(default_factory=list, init=False, repr=False, compare=False)

    # region Status texts
    @property
    def horizontal_distance_text(self) -> str:
        if self.horizontal_distance_m is None:
            return EMPTY_TEXT
        return _distance_text(self.horizontal_distance_m)

    @property
    def elevation_angle_text(self) -> str:
        if self.elevation_deg is None:
            return EMPTY_TEXT
        return _angle_text(self.elevation_deg)

    @property
    def result_text(self) -> str:
        if self.result is None:
            return EMPTY_TEXT
        return _result_text(self.result)
    # endregion Status texts

    def handle(self, event: Event) -> List[Message]:
        """Apply one event and return the messages for the display."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event {event!r}")
        previous = self.state
        self._messages = []
        handler(self, event)
        if self.state is not previous:
            logger.debug(f"{previous.name} -> {self.state.name} on {type(event).__name__}")
        messages, self._messages = self._messages, []
        return messages

    # region Output helpers
    def _show(self, text: str, auto_close_ms: Optional[int] = None) -> None:
        self._messages.append(ShowPrompt(text, auto_close_ms))
        self.prompt_active = True
        self.status_text = text.split('\n')[0]

    def _close(self) -> None:
        self._messages.append(ClosePrompt())
        self.prompt_active = False

    def _clear_results(self) -> None:
        self.horizontal_distance_m = None
        self.elevation_deg = None
        self.result = None

    def _finish(self, text: str) -> None:
        self._show(text, self.result_auto_close_ms)
        self.pending_point = None
        self.state = MeasurementState.IDLE
        self.status_text = STATUS_COMPLETE
    # endregion Output helpers

    # region Event handlers
    def _on_start(self, _event: Start) -> None:
        if not self.listening:
            return
        self.pending_point = None
        self._clear_results()
        self.state = MeasurementState.SCALE_POINT_1
        self._show(PROMPT_SCALE_1.format(reference=self.reference_distance_m))

    def _on_quick_measure(self, event: QuickMeasure) -> None:
        if not self.listening:
            return
        if self.prompt_active:
            self._close()
            self.pending_point = None
            self.state = MeasurementState.IDLE
            self.status_text = STATUS_READY
            return
        if self.state is not MeasurementState.IDLE:
            return
        if not self.calibration.valid:
            self._on_start(Start())
            return
        self.pending_point = None
        self._clear_results()
        self.state = MeasurementState.DISTANCE_POINT_1
        self._show(PROMPT_DISTANCE_1)

    def _on_point_captured(self, event: PointCaptured) -> None:
        if not self.listening:
            return
        point = event.point
        state = self.state

        if state is MeasurementState.SCALE_POINT_1:
            self.pending_point = point
            self.state = MeasurementState.SCALE_POINT_2
            self._show(PROMPT_SCALE_2.format(reference=self.reference_distance_m))

        elif state is MeasurementState.SCALE_POINT_2:
            prefix = ""
            if self.pending_point is not None:
                try:
                    self.calibration.calibrate(self.pending_point, point, self.reference_distance_m)
                except DegenerateCalibrationError as exc:
                    logger.warning(str(exc))
                    prefix = PROMPT_DEGENERATE + "\n"
            self.pending_point = None
            self.state = MeasurementState.DISTANCE_POINT_1
            self._show(prefix + PROMPT_DISTANCE_1)

        elif state is MeasurementState.DISTANCE_POINT_1:
            self.pending_point = point
            self.state = MeasurementState.DISTANCE_POINT_2
            self._show(PROMPT_DISTANCE_2)

        elif state is MeasurementState.DISTANCE_POINT_2:
            first = self.pending_point
            if first is None:
                return
            if not self.calibration.valid:
                logger.warning("Distance measured without a valid scale")
                self.pending_point = None
                self.state = MeasurementState.IDLE
                self._show(PROMPT_NOT_CALIBRATED, self.result_auto_close_ms)
                return
            distance = measure_distance(first, point, self.calibration)
            # texts are formatted before any state changes
            prompt = PROMPT_ELEVATION.format(distance=_distance_text(distance))
            self.pending_point = None
            self.horizontal_distance_m = distance
            self.state = MeasurementState.ELEVATION_POINT
            self._show(prompt)

        elif state is MeasurementState.ELEVATION_POINT:
            try:
                elevation = estimate_elevation(self.geometry, point)
            except InvalidGeometryError as exc:
                logger.warning(str(exc))
                self.state = MeasurementState.IDLE
                self._show(PROMPT_BAD_GEOMETRY.format(reason=exc), self.result_auto_close_ms)
                return
            assert self.horizontal_distance_m is not None
            result = self.solver.solve(elevation, self.horizontal_distance_m)
            if result:
                prompt = PROMPT_RESULT.format(result=_result_text(result))
            else:
                prompt = PROMPT_NO_SOLUTION
            angle = _angle_text(elevation)
            self.elevation_deg, self.result = elevation, result
            logger.info(f"{prompt.splitlines()[0]} for {self.horizontal_distance_text} at {angle}")
            self._finish(prompt)

    def _on_reset(self, _event: Reset) -> None:
        self.pending_point = None
        self._clear_results()
        self._close()
        self.state = MeasurementState.IDLE
        self.status_text = STATUS_READY if self.listening else STATUS_PAUSED

    def _on_resize(self, event: ResizeGeometry) -> None:
        try:
            self.geometry = ScreenGeometry.from_resolution(event.width_px, event.height_px,
                                                           self.geometry.horizontal_fov_deg)
        except InvalidGeometryError as exc:
            logger.warning(f"{exc}, keeping {self.geometry.width_px}x{self.geometry.height_px}")
            self._show(PROMPT_BAD_GEOMETRY.format(reason=exc), self.result_auto_close_ms)
            return
        logger.debug(f"Geometry {event.width_px}x{event.height_px}, "
                     f"max elevation {self.geometry.max_elevation_deg:.2f} deg")

    def _on_prompt_dismissed(self, _event: PromptDismissed) -> None:
        self.prompt_active = False

    def _on_toggle_listening(self, _event: ToggleListening) -> None:
        self.listening = not self.listening
        self.status_text = STATUS_READY if self.listening else STATUS_PAUSED
        logger.info(f"Listening {'resumed' if self.listening else 'paused'}")
    # endregion Event handlers

    _handlers = {
        Start: _on_start,
        QuickMeasure: _on_quick_measure,
        PointCaptured: _on_point_captured,
        Reset: _on_reset,
        ResizeGeometry: _on_resize,
        PromptDismissed: _on_prompt_dismissed,
        ToggleListening: _on_toggle_listening,
    }


def transition(session: MeasurementSession, event: Event) -> Tuple[MeasurementState, List[Message]]:
    """Apply `event` to `session`; return the new state and the messages produced."""
    messages = session.handle(event)
    return session.state, messages


def dispatch(message: Message, sink: DisplaySink) -> None:
    if isinstance(message, ShowPrompt):
        sink.show_prompt(message.text, message.auto_close_ms)
    elif isinstance(message, ClosePrompt):
        sink.close_prompt()
    else:
        raise TypeError(f"Unsupported message {message!r}")


def run_events(session: MeasurementSession, events: Iterable[Event], sink: DisplaySink) -> MeasurementSession:
    """Feed `events` to `session` one at a time, forwarding every message to `sink`."""
    for event in events:
        for message in session.handle(event):
            dispatch(message, sink)
    return session
