"""Exceptions raised by the distributed Grover simulator.

Every error is fatal for the current run.  Planning errors surface before a
single qubit is allocated; :class:`LengthMismatch` signals a caller bug.
"""

from __future__ import annotations


class DistributedGroverError(RuntimeError):
    """Base class for all failures raised by :mod:`distgrover`."""


class CapacityExceeded(DistributedGroverError):
    """Raised when ``max_nodes * capacity_per_node`` cannot hold the register."""


class RouterTooLarge(DistributedGroverError):
    """Raised when the router would need more lines than a node's capacity."""


class TooManyQubits(DistributedGroverError):
    """Raised when data qubits plus ebit halves exceed the simulation ceiling."""


class LengthMismatch(DistributedGroverError, ValueError):
    """Raised when a node grouping does not match the expected qubit count."""


__all__ = [
    "DistributedGroverError",
    "CapacityExceeded",
    "RouterTooLarge",
    "TooManyQubits",
    "LengthMismatch",
]
