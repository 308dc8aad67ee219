"""Test helper modules.

- clock: Deterministic clocks for timestamp-dependent code
"""

from .clock import StepClock

__all__ = [
    'StepClock',
]
