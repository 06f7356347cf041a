"""Unit tests for pipeline configuration resolution."""

import pytest
from omegaconf import OmegaConf

from boron.contexts.targeting import config_resolver
from boron.contexts.targeting.config_resolver import (
    DEFAULT_PIPELINE_CONFIG,
    get_stage_settings,
    load_pipeline_config,
)


@pytest.fixture
def no_env_config(monkeypatch):
    monkeypatch.setattr(config_resolver, "PIPELINE_CONFIG_PATH", None)


@pytest.mark.unit
def test_defaults_without_file(no_env_config):
    config = load_pipeline_config()

    assert config.stage_timeout_s == 60
    assert config.default_template == "classic"
    assert config.session_store.ttl_s == 3600


@pytest.mark.unit
def test_partial_yaml_merges_over_defaults(tmp_path):
    """A YAML file only needs to name the values it changes."""
    config_file = tmp_path / "pipeline.yaml"
    config_file.write_text(
        "stage_timeout_s: 30\n"
        "stages:\n"
        "  skills:\n"
        "    temperature: 0.1\n"
        "    timeout_s: 10\n"
    )

    config = load_pipeline_config(config_file)

    assert config.stage_timeout_s == 30
    assert config.stages.skills.temperature == 0.1
    assert config.stages.skills.max_tokens == 3000
    assert config.stages.analyzer.max_tokens == 4000


@pytest.mark.unit
def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pipeline_config(tmp_path / "nope.yaml")


@pytest.mark.unit
def test_env_path_is_used(tmp_path, monkeypatch):
    config_file = tmp_path / "pipeline.yaml"
    config_file.write_text("default_template: modern\n")
    monkeypatch.setattr(config_resolver, "PIPELINE_CONFIG_PATH", str(config_file))

    assert load_pipeline_config().default_template == "modern"


@pytest.mark.unit
def test_unknown_stage():
    with pytest.raises(ValueError, match="Unknown pipeline stage"):
        get_stage_settings("summarizer", OmegaConf.create(DEFAULT_PIPELINE_CONFIG))


@pytest.mark.unit
class TestTimeoutPrecedence:
    """Override beats stage timeout beats global timeout."""

    def _config(self):
        return OmegaConf.merge(
            OmegaConf.create(DEFAULT_PIPELINE_CONFIG),
            {"stage_timeout_s": 45, "stages": {"skills": {"timeout_s": 10}}},
        )

    def test_global_timeout(self):
        settings = get_stage_settings("analyzer", self._config())
        assert settings.timeout_s == 45.0
        assert settings.temperature == 0.3
        assert settings.max_tokens == 4000

    def test_stage_timeout(self):
        assert get_stage_settings("skills", self._config()).timeout_s == 10.0

    def test_override(self):
        assert get_stage_settings("skills", self._config(), timeout_override=2).timeout_s == 2.0

    def test_no_timeout(self):
        config = OmegaConf.create({"stage_timeout_s": None, "stages": {}})
        settings = get_stage_settings("projects", config)

        assert settings.timeout_s is None
        assert settings.max_tokens == 4000
