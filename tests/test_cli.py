import pytest

from py_mortarcalc.__main__ import ConsoleDisplay, ScriptError, get_arg_parser, main, parse_event
from py_mortarcalc.config import get_config
from py_mortarcalc.session import PointCaptured, PromptDismissed, QuickMeasure, ResizeGeometry, Start

LEVEL_SHOT = """\
# 100 px reference segment
start
click 1000 719
click 1100 719

click 0 719      # firer
click 250 719    # target
click 1280 719
"""


@pytest.fixture
def script(tmp_path):
    def write(text):
        path = tmp_path / "events.txt"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


class TestParseEvent:

    @pytest.mark.parametrize("line, expected", [
        ("start", Start()),
        ("  QUICK  ", QuickMeasure()),
        ("dismiss # prompt timed out", PromptDismissed()),
        ("click 10 20.5", PointCaptured(10, 20.5)),
        ("resize 1920 1080", ResizeGeometry(1920, 1080)),
    ])
    def test_valid(self, line, expected):
        assert parse_event(line) == expected

    @pytest.mark.parametrize("line", ["", "   ", "# comment only"])
    def test_skipped(self, line):
        assert parse_event(line) is None

    @pytest.mark.parametrize("line", ["click 10", "click x y", "start now", "fire"])
    def test_invalid(self, line):
        with pytest.raises(ScriptError, match="line 7"):
            parse_event(line, 7)


class TestConsoleDisplay:

    def test_prompt_lines(self, capsys):
        display = ConsoleDisplay()
        display.show_prompt("first\nsecond", 3000)
        display.close_prompt()
        assert capsys.readouterr().out == "> first\n> second\n"


class TestMain:

    def test_level_shot(self, script, capsys):
        assert main([script(LEVEL_SHOT)]) == 0
        out = capsys.readouterr().out
        assert "> Set 100 m scale: first point" in out
        assert "> Horizontal distance: 250.0m" in out
        assert "> Mortar distance: 250m" in out
        assert "Dial: 250m" in out

    def test_max_range_override(self, script, capsys):
        text = LEVEL_SHOT.replace("click 1280 719", "click 1280 0")
        assert main(["--max-range", "200", script(text)]) == 0
        assert get_config().max_range_m == 200
        out = capsys.readouterr().out
        assert "> No solution - target out of range" in out
        assert "Dial: No solution" in out

    def test_nothing_measured(self, script, capsys):
        assert main([script("start\nreset\n")]) == 0
        out = capsys.readouterr().out
        assert "Horizontal distance: --" in out
        assert "Dial: --" in out

    def test_bad_script(self, script):
        assert main([script("start\nclick 1\n")]) == 2

    def test_bad_geometry_option(self, script, caplog):
        assert main(["--width", "0", script(LEVEL_SHOT)]) == 1
        errors = [record for record in caplog.records if record.levelname == "ERROR"]
        assert len(errors) == 1
        assert errors[0].exc_info is None
        assert "Invalid screen geometry 0x1440" in errors[0].getMessage()

    def test_arg_parser(self, script):
        args = get_arg_parser().parse_args(["--fov", "90", "--reference", "200", script("")])
        assert args.fov == 90
        assert args.reference == 200
        assert args.width is None
