"""
Configuration module.

Frozen dataclass defaults, YAML overrides and validation for flow timing,
progress persistence, engine limits and logging.
"""
