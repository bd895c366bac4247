"""
System failure error classifications for unrecoverable errors.

These exceptions represent failures the flow engine cannot route around
on its own: a broken storage backend, a stage graph that has no edge for
the reported event, or a branch map that does not cover every action.
"""

from typing import Any, Dict, Iterable, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Storage backend read, write or delete failure."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class StageTransitionError(SystemFailureError):
    """A stage reported an event with no edge in the transition table."""

    def __init__(self, message: str, current_stage: Optional[str] = None,
                 attempted_event: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_stage = current_stage
        self.attempted_event = attempted_event


class BranchMappingError(SystemFailureError):
    """Branch map is not exhaustive over ActionKey and has no default."""

    def __init__(self, message: str, missing_keys: Optional[Iterable[str]] = None,
                 **kwargs):
        super().__init__(message, **kwargs)
        self.missing_keys = sorted(missing_keys or [])


class ConfigurationError(SystemFailureError):
    """Merged configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
