"""
Error classification for the StepFlow app.

Storage failures inside the persistence gateway are raised as
PersistenceError and converted to the PersistenceFailure sentinel at the
gateway boundary. The remaining classes signal programming or
configuration mistakes and propagate to the host.
"""

from .system_failures import (
    SystemFailureError,
    PersistenceError,
    StageTransitionError,
    BranchMappingError,
    ConfigurationError,
)

__all__ = [
    "SystemFailureError",
    "PersistenceError",
    "StageTransitionError",
    "BranchMappingError",
    "ConfigurationError",
]
