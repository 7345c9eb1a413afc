from __future__ import annotations

"""Common interface of the amplitude engines driving the protocol."""

from enum import Enum
from typing import Any, List, Sequence


class Gate(Enum):
    """Single-qubit gates the protocol applies, optionally controlled."""

    X = "x"
    Z = "z"
    H = "h"


class Basis(Enum):
    """Measurement bases."""

    Z = "standard"
    X = "hadamard"


class AmplitudeEngine:
    """Abstract owner of the simulated qubit state.

    Concrete engines need to implement the following methods:

    ``allocate`` / ``free``
        Hand out fresh qubits in ``|0>`` and release qubits that have been
        reset to ``|0>``.
    ``apply``
        Apply ``X``, ``Z`` or ``H`` to one target, conditioned on zero or
        more control qubits.
    ``measure``
        Measure a qubit in the standard or Hadamard basis, collapsing the
        state.
    ``dump``
        Optional debug snapshot of a set of qubits.

    Qubits are opaque integer handles.  Callers must never rely on their
    numeric value beyond identity.
    """

    def allocate(self, n: int) -> List[int]:
        """Allocate ``n`` qubits in ``|0>`` and return their handles."""
        raise NotImplementedError

    def free(self, handles: Sequence[int]) -> None:
        """Release ``handles``.  Each qubit must already be in ``|0>``."""
        raise NotImplementedError

    def apply(self, gate: Gate, controls: Sequence[int], target: int) -> None:
        """Apply ``gate`` to ``target`` when every qubit in ``controls`` is one."""
        raise NotImplementedError

    def measure(self, handle: int, basis: Basis = Basis.Z) -> bool:
        """Measure ``handle`` in ``basis`` and return ``True`` for outcome one."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    def reset(self, handle: int) -> None:
        """Return ``handle`` to ``|0>`` by measuring and flipping on one."""
        if self.measure(handle):
            self.apply(Gate.X, (), handle)

    def dump(self, handles: Sequence[int]) -> Any:
        """Return a snapshot of ``handles`` for debugging."""
        raise NotImplementedError

    # Convenience wrappers ---------------------------------------------
    def x(self, target: int) -> None:
        self.apply(Gate.X, (), target)

    def z(self, target: int) -> None:
        self.apply(Gate.Z, (), target)

    def h(self, target: int) -> None:
        self.apply(Gate.H, (), target)

    def cnot(self, control: int, target: int) -> None:
        self.apply(Gate.X, (control,), target)

    def mcz(self, controls: Sequence[int], target: int) -> None:
        self.apply(Gate.Z, tuple(controls), target)
