import pytest

from py_mortarcalc import basicConfig, PreferredUnits, Unit, loadMetricUnits, loadImperialUnits
from py_mortarcalc.config import MortarConfig, basic_config, get_config, reset_config
from py_mortarcalc.session import MeasurementSession

CONFIG_TOML = """
[pymc]
horizontal_fov_deg = 90.0
max_range_m = 1000
screen_width_px = 1920
screen_height_px = 1080

[pymc.preferred_units]
distance = 'yard'
angular = 'mil'
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / ".pymc.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


class TestConfigLoader:

    @pytest.mark.parametrize(
        "test_name, config_func, expected_distance",
        [
            ("manual", lambda: basicConfig(preferred_units={'distance': Unit.Yard}), Unit.Yard),
            ("imperial", loadImperialUnits, Unit.Yard),
            ("metric", loadMetricUnits, Unit.Meter),
        ],
    )
    def test_preferred_units_load(self, test_name, config_func, expected_distance):
        PreferredUnits.restore_defaults()
        config_func()
        assert PreferredUnits.distance == expected_distance

    def test_load_file(self, config_file):
        basicConfig(str(config_file))
        config = get_config()
        assert config.horizontal_fov_deg == 90
        assert config.max_range_m == 1000
        assert config.reference_distance_m == 100
        assert PreferredUnits.distance == Unit.Yard
        assert PreferredUnits.angular == Unit.Mil

    def test_search_from_cwd(self, config_file, tmp_path, monkeypatch):
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        basicConfig()
        assert get_config().max_range_m == 1000

    def test_session_uses_config(self, config_file):
        basicConfig(str(config_file))
        session = MeasurementSession()
        assert session.geometry.width_px == 1920
        assert session.geometry.horizontal_fov_deg == 90
        assert session.solver.max_range_m == 1000

    def test_missing_sections_warn(self, tmp_path, caplog):
        path = tmp_path / "pymc.toml"
        path.write_text("[other]\nvalue = 1\n", encoding="utf-8")
        basicConfig(str(path))
        assert "Config has no `pymc` section" in caplog.text

        path.write_text("[pymc]\nmax_range_m = 800\nunknown = 1\n", encoding="utf-8")
        basicConfig(str(path))
        assert "Unknown config key `pymc.unknown`" in caplog.text
        assert "Config has no `pymc.preferred_units` section" in caplog.text
        assert get_config().max_range_m == 800

    def test_file_and_mapping_conflict(self, config_file):
        with pytest.raises(ValueError):
            basicConfig(str(config_file), preferred_units={'distance': Unit.Meter})


class TestMortarConfig:

    def test_defaults(self):
        config = MortarConfig()
        assert config.horizontal_fov_deg == 80
        assert config.max_range_m == 700
        assert config.reference_distance_m == 100
        assert config.result_auto_close_ms == 3000

    def test_set_and_reset(self):
        basic_config(MortarConfig(max_range_m=500))
        assert get_config().max_range_m == 500
        reset_config()
        assert get_config() == MortarConfig()
