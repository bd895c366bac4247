"""Default configuration parameters for the presentation flow."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TimingParams:
    """Screen and persistence timing parameters."""
    status_duration_ms: int = 1500                   # Status screen display time
    transition_ms: int = 500                         # Exit transition after a button press
    persistence_delay_ms: int = 2000                 # Artificial delay before each storage call


@dataclass(frozen=True)
class PersistenceParams:
    """Progress storage parameters."""
    backend: str = "sqlite"                          # sqlite, memory or unavailable
    db_path: str = "progress.db"
    storage_key: str = "userProgress"
    policy: str = "best_effort"                      # best_effort or strict


@dataclass(frozen=True)
class EngineParams:
    """Flow engine limits."""
    max_transitions: Optional[int] = None            # None runs until abort or end of input
    max_restarts: Optional[int] = None               # None restarts after every abort


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class FlowConfig:
    """Complete flow configuration."""
    timing: TimingParams
    persistence: PersistenceParams
    engine: EngineParams
    logging: LoggingParams


def get_default_config() -> FlowConfig:
    """Get the default configuration instance."""
    return FlowConfig(
        timing=TimingParams(),
        persistence=PersistenceParams(),
        engine=EngineParams(),
        logging=LoggingParams(),
    )


def build_config(values: dict) -> FlowConfig:
    """Build a FlowConfig from a merged configuration dictionary."""
    return FlowConfig(
        timing=TimingParams(**values.get("timing", {})),
        persistence=PersistenceParams(**values.get("persistence", {})),
        engine=EngineParams(**values.get("engine", {})),
        logging=LoggingParams(**values.get("logging", {})),
    )
