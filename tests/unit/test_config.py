"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from stepflow_app.config.defaults import build_config, get_default_config
from stepflow_app.config.loader import ConfigLoader
from stepflow_app.config.validation import ConfigValidator
from stepflow_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()
        assert config.timing.status_duration_ms == 1500
        assert config.timing.transition_ms == 500
        assert config.timing.persistence_delay_ms == 2000
        assert config.persistence.storage_key == "userProgress"
        assert config.persistence.policy == "best_effort"
        assert config.engine.max_transitions is None

    def test_build_config_from_dict(self) -> None:
        config = build_config({"timing": {"transition_ms": 0}})
        assert config.timing.transition_ms == 0
        assert config.timing.status_duration_ms == 1500


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config()

        assert config["persistence"]["backend"] == "sqlite"
        assert config["timing"]["status_duration_ms"] == 1500

    def test_file_overrides_defaults(self, tmp_path) -> None:
        (tmp_path / "flow.yaml").write_text(
            "persistence:\n  backend: memory\n  policy: strict\n"
        )
        config = ConfigLoader.create(tmp_path).load_config()

        assert config.persistence.backend == "memory"
        assert config.persistence.policy == "strict"
        assert config.persistence.storage_key == "userProgress"

    def test_overrides_beat_file(self, tmp_path) -> None:
        (tmp_path / "flow.yaml").write_text("timing:\n  transition_ms: 100\n")
        config = ConfigLoader.create(tmp_path).load_config(
            {"timing": {"transition_ms": 0}}
        )
        assert config.timing.transition_ms == 0

    def test_empty_file(self, tmp_path) -> None:
        (tmp_path / "flow.yaml").write_text("")
        config = ConfigLoader.create(tmp_path).load_config()
        assert config == get_default_config()

    def test_invalid_config_raises(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        with pytest.raises(ConfigurationError) as excinfo:
            loader.load_config({"persistence": {"policy": "sometimes"}})

        assert excinfo.value.errors[0].field == "policy"

    def test_repository_config_is_valid(self) -> None:
        config = ConfigLoader.create().load_config()
        assert config.persistence.storage_key == "userProgress"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_timing(self) -> None:
        errors = ConfigValidator.validate_timing_params(
            {"status_duration_ms": 0, "transition_ms": 500}
        )
        assert errors == []

    def test_negative_timing(self) -> None:
        errors = ConfigValidator.validate_timing_params({"transition_ms": -1})
        assert len(errors) == 1
        assert errors[0].field == "transition_ms"

    def test_boolean_is_not_a_duration(self) -> None:
        errors = ConfigValidator.validate_timing_params({"status_duration_ms": True})
        assert len(errors) == 1

    def test_unknown_backend(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"backend": "redis"})
        assert errors[0].field == "backend"

    def test_empty_storage_key(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"storage_key": ""})
        assert errors[0].field == "storage_key"

    def test_engine_limits(self) -> None:
        assert ConfigValidator.validate_engine_params({"max_restarts": None}) == []
        errors = ConfigValidator.validate_engine_params({"max_transitions": -5})
        assert errors[0].field == "max_transitions"

    def test_log_level(self) -> None:
        assert ConfigValidator.validate_logging_params({"level": "debug"}) == []
        assert len(ConfigValidator.validate_logging_params({"level": "LOUD"})) == 1

    def test_unknown_section_and_field(self) -> None:
        errors = ConfigValidator.validate_config({
            "network": {},
            "timing": {"fps": 60},
        })
        fields = sorted(e.field for e in errors)
        assert fields == ["network", "timing.fps"]
