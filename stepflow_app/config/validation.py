"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import EngineParams, LoggingParams, PersistenceParams, TimingParams

BACKENDS = ("sqlite", "memory", "unavailable")
POLICIES = ("best_effort", "strict")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SECTIONS = {
    "timing": TimingParams,
    "persistence": PersistenceParams,
    "engine": EngineParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_timing_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timing parameters."""
        errors = []

        for name in ("status_duration_ms", "transition_ms", "persistence_delay_ms"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_persistence_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate persistence parameters."""
        errors = []

        if "backend" in params and params["backend"] not in BACKENDS:
            errors.append(ValidationError(
                field="backend",
                message=f"Must be one of {', '.join(BACKENDS)}",
                value=params["backend"]
            ))

        if "policy" in params and params["policy"] not in POLICIES:
            errors.append(ValidationError(
                field="policy",
                message=f"Must be one of {', '.join(POLICIES)}",
                value=params["policy"]
            ))

        for name in ("storage_key", "db_path"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty string",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_engine_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate engine limits."""
        errors = []

        for name in ("max_transitions", "max_restarts"):
            if name in params and params[name] is not None:
                value = params[name]
                if not _is_int(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be null or a non-negative integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ValidationError(
                field="format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_known_fields(config: dict[str, Any]) -> list[ValidationError]:
        """Reject sections and fields the FlowConfig dataclasses do not define."""
        errors = []

        for section, params in config.items():
            if section not in SECTIONS:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=params
                ))
                continue

            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue

            known = {f.name for f in fields(SECTIONS[section])}
            for name in params:
                if name not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{name}",
                        message="Unknown configuration field",
                        value=params[name]
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_known_fields(config)
        if errors:
            return errors

        if "timing" in config:
            errors.extend(ConfigValidator.validate_timing_params(config["timing"]))

        if "persistence" in config:
            errors.extend(ConfigValidator.validate_persistence_params(config["persistence"]))

        if "engine" in config:
            errors.extend(ConfigValidator.validate_engine_params(config["engine"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
