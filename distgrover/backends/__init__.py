"""Amplitude engines consumed by the distributed gate protocol."""

from .base import AmplitudeEngine, Basis, Gate
from .statevector import StatevectorEngine

__all__ = [
    "AmplitudeEngine",
    "Basis",
    "Gate",
    "StatevectorEngine",
]
