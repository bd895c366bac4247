"""
StepFlow App - Sequential Presentation Flow Engine

Steps a single user through a fixed series of screens with one binary
decision point. Progress is persisted so a returning user skips the
introduction and lands directly on the continuation stage.
"""

__version__ = "0.1.0"
__author__ = "StepFlow Team"
