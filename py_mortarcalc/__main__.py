"""Replay a script of input events through a measurement session.

Each line of the script is one event:

    start | quick | reset | dismiss | toggle
    click X Y
    resize WIDTH HEIGHT

Blank lines and text after `#` are ignored.
"""
import argparse
import logging
import sys
from importlib import metadata
from typing import Iterator, List, Optional, TextIO

from py_mortarcalc.logger import logger
from py_mortarcalc.config import basic_config, get_config
from py_mortarcalc.exceptions import MortarCalcError
from py_mortarcalc.session import (Event, MeasurementSession, PointCaptured, PromptDismissed, QuickMeasure,
                                   Reset, ResizeGeometry, Start, ToggleListening, run_events)

version = metadata.metadata("py_mortarcalc")['Version']

_SIMPLE_EVENTS = {
    'start': Start,
    'quick': QuickMeasure,
    'reset': Reset,
    'dismiss': PromptDismissed,
    'toggle': ToggleListening,
}


class ScriptError(ValueError):
    """Malformed event script line."""


def parse_event(line: str, lineno: int = 0) -> Optional[Event]:
    """Parse one script line; return None for blank and comment lines."""
    line = line.split('#', 1)[0].strip()
    if not line:
        return None
    command, *args = line.split()
    command = command.lower()
    try:
        if command in _SIMPLE_EVENTS and not args:
            return _SIMPLE_EVENTS[command]()
        if command == 'click' and len(args) == 2:
            return PointCaptured(float(args[0]), float(args[1]))
        if command == 'resize' and len(args) == 2:
            return ResizeGeometry(float(args[0]), float(args[1]))
    except ValueError as exc:
        raise ScriptError(f"line {lineno}: {exc}") from exc
    raise ScriptError(f"line {lineno}: can't parse {line!r}")


def iter_events(stream: TextIO) -> Iterator[Event]:
    for lineno, line in enumerate(stream, 1):
        if (event := parse_event(line, lineno)) is not None:
            yield event


class ConsoleDisplay:
    """Display sink printing prompts to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def show_prompt(self, text: str, auto_close_ms: Optional[int] = None) -> None:
        for line in text.split('\n'):
            print(f"> {line}", file=self.stream)

    def close_prompt(self) -> None:
        pass


def get_arg_parser():
    parser = argparse.ArgumentParser(
        prog=f'pymc v{version}',
        description="Mortar range dial calculator driven by screen clicks"
    )
    parser.add_argument('script', nargs='?', type=argparse.FileType('r'), default=sys.stdin,
                        help="Event script, reads stdin if omitted")
    parser.add_argument("-v", "--version", action='version',
                        version=f'pymc v{version}', help="Show version")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug messages")

    screen = parser.add_argument_group('Screen', 'Screen geometry')
    screen.add_argument("--width", type=int, help="Screen width in pixels")
    screen.add_argument("--height", type=int, help="Screen height in pixels")
    screen.add_argument("--fov", type=float, help="Horizontal field of view in degrees")

    weapon = parser.add_argument_group('Weapon')
    weapon.add_argument("--max-range", type=float, help="Maximum weapon range in meters")
    weapon.add_argument("--reference", type=float, help="Calibration segment length in meters")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = get_arg_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logger.setLevel(logging.DEBUG)
        logger.info("Debug messages enabled")

    overrides = {
        'screen_width_px': args.width,
        'screen_height_px': args.height,
        'horizontal_fov_deg': args.fov,
        'max_range_m': args.max_range,
        'reference_distance_m': args.reference,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        basic_config(get_config()._replace(**overrides))

    display = ConsoleDisplay()
    try:
        session = MeasurementSession()
        run_events(session, iter_events(args.script), display)
    except ScriptError as exc:
        logger.error(f"Invalid script: {exc}")
        return 2
    except MortarCalcError as exc:
        logger.error(str(exc))
        return 1
    except Exception as exc:
        logger.exception(exc)
        return 1

    print(f"Horizontal distance: {session.horizontal_distance_text}", file=display.stream)
    print(f"Elevation: {session.elevation_angle_text}", file=display.stream)
    print(f"Dial: {session.result_text}", file=display.stream)
    return 0


if __name__ == '__main__':
    sys.exit(main())
