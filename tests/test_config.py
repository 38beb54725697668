"""Tests for configuration loading and validation."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from git_moar.config import (
    CONFIG_FILENAME,
    ReportConfig,
    build_config,
    load_config,
    write_sample_config,
)
from git_moar.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No global/project config files and no GIT_MOAR_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(work)
    for key in [k for k in os.environ if k.startswith("GIT_MOAR_")]:
        monkeypatch.delenv(key)
    return work


class TestLoadConfig:
    def test_defaults(self, isolated):
        assert load_config() == ReportConfig()

    def test_project_file(self, isolated):
        (isolated / CONFIG_FILENAME).write_text(
            'timezone = "UTC"\n'
            "[analysis]\n"
            "hotspot_limit = 5\n"
            "[filters]\n"
            'exclude_authors = ["bot@example.com"]\n'
        )
        config = load_config()
        assert config.timezone == "UTC"
        assert config.analysis.hotspot_limit == 5
        assert config.filters.exclude_authors == ("bot@example.com",)

    def test_precedence(self, isolated, monkeypatch):
        (isolated / CONFIG_FILENAME).write_text("[analysis]\nhotspot_limit = 5\n")
        monkeypatch.setenv("GIT_MOAR_ANALYSIS_HOTSPOT_LIMIT", "6")

        assert load_config().analysis.hotspot_limit == 6
        assert load_config(hotspot_limit=7).analysis.hotspot_limit == 7

    def test_env_types(self, isolated, monkeypatch):
        monkeypatch.setenv("GIT_MOAR_ANALYSIS_RESOLVE_BRANCHES", "off")
        monkeypatch.setenv("GIT_MOAR_ANALYSIS_GIT_TIMEOUT", "30.5")
        monkeypatch.setenv("GIT_MOAR_THEME", "light")
        config = load_config()
        assert config.analysis.resolve_branches is False
        assert config.analysis.git_timeout == 30.5
        assert config.theme == "light"

    def test_bad_env_value(self, isolated, monkeypatch):
        monkeypatch.setenv("GIT_MOAR_ANALYSIS_WORKERS", "many")
        with pytest.raises(ConfigurationError, match="GIT_MOAR_ANALYSIS_WORKERS"):
            load_config()

    def test_none_overrides_ignored(self, isolated):
        assert load_config(workers=None, timezone=None) == ReportConfig()

    def test_unknown_override(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(colour="blue")

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=isolated / "nope.toml")

    def test_invalid_toml(self, isolated):
        bad = isolated / "bad.toml"
        bad.write_text("theme = \n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)


class TestValidation:
    def test_bad_values(self):
        with pytest.raises(InvalidConfigError):
            build_config({"analysis": {"workers": 0}})
        with pytest.raises(InvalidConfigError):
            build_config({"theme": "blue"})
        with pytest.raises(InvalidConfigError):
            build_config({"timezone": "Mars/Olympus_Mons"})

    def test_unknown_section_key(self):
        with pytest.raises(ConfigurationError):
            build_config({"stats": {"sparkle": True}})

    def test_section_must_be_table(self):
        with pytest.raises(ConfigurationError):
            build_config({"filters": "none"})

    def test_tzinfo(self):
        assert ReportConfig().tzinfo is None
        assert ReportConfig(timezone="Europe/Berlin").tzinfo == ZoneInfo("Europe/Berlin")


class TestSampleConfig:
    def test_written_sample_loads(self, isolated):
        target = write_sample_config(isolated)
        assert target.name == CONFIG_FILENAME

        config = load_config()
        assert config.company_name == "My Company"
        assert "dependabot[bot]" in config.filters.exclude_authors

    def test_refuses_to_overwrite(self, isolated):
        write_sample_config(isolated)
        with pytest.raises(ConfigurationError, match="already exists"):
            write_sample_config(isolated)
        assert write_sample_config(isolated, overwrite=True).exists()
