"""Tests for the configuration system."""

import pytest

from geo_explore.config import Config
from geo_explore.config import defaults


class TestConfig:
    """Defaults, YAML overrides and dot access."""

    def test_defaults_loaded(self, tmp_path):
        config = Config(tmp_path / 'absent.yml', create_dirs=False)

        assert config.config_file is None
        assert config.get('point_pattern.envelope.nsim') == 99
        assert config.get('time_series.granularity') == 'month'
        assert config.plotting['mode'] == 'static'

    def test_yaml_deep_merge(self, tmp_path):
        config_file = tmp_path / 'config.yml'
        config_file.write_text(
            "point_pattern:\n"
            "  envelope:\n"
            "    nsim: 19\n"
            "time_series:\n"
            "  range:\n"
            "    start: '2001'\n"
        )

        config = Config(config_file, create_dirs=False)

        assert config.config_file == config_file
        assert config.get('point_pattern.envelope.nsim') == 19
        # Siblings of overridden keys keep their defaults
        assert config.get('point_pattern.envelope.nrank') == 1
        assert config.get('time_series.range.start') == '2001'
        assert config.get('time_series.range.end') is None

    def test_defaults_not_mutated(self, tmp_path):
        config = Config(tmp_path / 'absent.yml', create_dirs=False)
        config.set('point_pattern.envelope.nsim', 5)

        assert defaults.POINT_PATTERN['envelope']['nsim'] == 99

    def test_get_default_for_missing_key(self, test_config):
        assert test_config.get('point_pattern.nothing.here', 'fallback') == 'fallback'

    def test_set_creates_nested_keys(self, test_config):
        test_config.set('plotting.extra.grid', True)

        assert test_config.get('plotting.extra.grid') is True

    def test_update(self, test_config):
        test_config.update({'time_series': {'rolling': {'before': 6}}})

        assert test_config.get('time_series.rolling.before') == 6
        assert test_config.get('time_series.rolling.after') == 3

    def test_creates_directories(self, test_config, tmp_path):
        assert (tmp_path / 'outputs').is_dir()
        assert (tmp_path / 'logs').is_dir()

    def test_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / 'config.yml'
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            Config(config_file, create_dirs=False)


def test_get_config_is_shared(monkeypatch):
    from geo_explore.config import config as config_module

    monkeypatch.setattr(config_module, '_config', None)
    monkeypatch.setattr(Config, '_find_config_file', lambda self: None)
    monkeypatch.setattr(Config, '_ensure_directories', lambda self: None)

    first = config_module.get_config()

    assert first is config_module.get_config()
    assert first.get('plotting.cmap') == 'viridis'
