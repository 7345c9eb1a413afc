from __future__ import annotations

"""Dense statevector engine with dynamic qubit allocation.

The state is stored as a NumPy tensor of shape ``(2,) * k`` where axis ``i``
belongs to the ``i``-th live qubit handle.  Allocation appends an axis in
``|0>``, freeing removes it once the qubit has been reset.  Measurements
draw from a seedable :class:`numpy.random.Generator` so that protocol runs
are reproducible.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np
from qiskit.circuit.library import standard_gates
from qiskit.quantum_info import DensityMatrix, Statevector, partial_trace

from .base import AmplitudeEngine, Basis, Gate

_ATOL = 1e-9


def _gate_matrices() -> Dict[Gate, np.ndarray]:
    mats: Dict[Gate, np.ndarray] = {}
    for gate in Gate:
        gate_cls = getattr(standard_gates, f"{gate.name}Gate")
        mats[gate] = np.asarray(gate_cls().to_matrix(), dtype=complex)
    return mats


_MATRICES = _gate_matrices()


@dataclass
class StatevectorEngine(AmplitudeEngine):
    """NumPy statevector implementation of :class:`AmplitudeEngine`.

    Parameters
    ----------
    seed:
        Seed for the measurement random number generator.  ``None`` draws
        fresh entropy from the operating system.
    """

    seed: int | None = None
    rng: np.random.Generator = field(init=False, repr=False)
    peak_qubits: int = field(default=0, init=False)
    _state: np.ndarray = field(init=False, repr=False)
    _handles: List[int] = field(default_factory=list, init=False, repr=False)
    _next_handle: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)
        self._state = np.array(1.0 + 0.0j)

    # ------------------------------------------------------------------
    @property
    def num_qubits(self) -> int:
        """Number of currently allocated qubits."""
        return len(self._handles)

    @property
    def handles(self) -> tuple[int, ...]:
        return tuple(self._handles)

    def _axis(self, handle: int) -> int:
        try:
            return self._handles.index(handle)
        except ValueError:
            raise ValueError(f"Unknown qubit handle {handle}") from None

    # ------------------------------------------------------------------
    def allocate(self, n: int) -> List[int]:
        if n < 0:
            raise ValueError("Cannot allocate a negative number of qubits")
        new: List[int] = []
        for _ in range(n):
            self._state = np.stack([self._state, np.zeros_like(self._state)], axis=-1)
            handle = self._next_handle
            self._next_handle += 1
            self._handles.append(handle)
            new.append(handle)
        self.peak_qubits = max(self.peak_qubits, len(self._handles))
        return new

    def free(self, handles: Sequence[int]) -> None:
        for handle in handles:
            axis = self._axis(handle)
            excited = np.take(self._state, 1, axis=axis)
            if np.vdot(excited, excited).real > _ATOL:
                raise RuntimeError(f"Qubit {handle} must be reset before it is freed")
            self._state = np.take(self._state, 0, axis=axis)
            del self._handles[axis]

    # ------------------------------------------------------------------
    def apply(self, gate: Gate, controls: Sequence[int], target: int) -> None:
        controls = tuple(controls)
        if target in controls or len(set(controls)) != len(controls):
            raise ValueError("Controls and target must be distinct qubits")
        t_axis = self._axis(target)
        c_axes = [self._axis(c) for c in controls]
        index: List[int | slice] = [slice(None)] * self._state.ndim
        for axis in c_axes:
            index[axis] = 1
        # Integer indices drop axes, shifting the target position left.
        sub_axis = t_axis - sum(1 for axis in c_axes if axis < t_axis)
        block = self._state[tuple(index)]
        moved = np.moveaxis(block, sub_axis, 0)
        updated = np.tensordot(_MATRICES[gate], moved, axes=([1], [0]))
        block[...] = np.moveaxis(updated, 0, sub_axis)

    def measure(self, handle: int, basis: Basis = Basis.Z) -> bool:
        if basis is Basis.X:
            self.apply(Gate.H, (), handle)
        axis = self._axis(handle)
        excited = np.take(self._state, 1, axis=axis)
        p_one = float(np.vdot(excited, excited).real)
        # Snap rounding noise so that impossible outcomes are never drawn.
        if p_one < _ATOL:
            p_one = 0.0
        elif p_one > 1.0 - _ATOL:
            p_one = 1.0
        outcome = bool(self.rng.random() < p_one)
        index: List[int | slice] = [slice(None)] * self._state.ndim
        index[axis] = 0 if outcome else 1
        self._state[tuple(index)] = 0.0
        self._state /= np.sqrt(p_one if outcome else 1.0 - p_one)
        if basis is Basis.X:
            self.apply(Gate.H, (), handle)
        return outcome

    # ------------------------------------------------------------------
    def dump(self, handles: Sequence[int]) -> Statevector | DensityMatrix:
        """Return the state of ``handles`` in Qiskit's little-endian order.

        ``handles[0]`` becomes qubit 0 of the returned object.  When other
        qubits are still allocated they are traced out and a
        :class:`~qiskit.quantum_info.DensityMatrix` is returned instead of a
        :class:`~qiskit.quantum_info.Statevector`.
        """

        handles = list(handles)
        rest = [h for h in self._handles if h not in handles]
        ordered = handles + rest
        perm = [self._axis(h) for h in reversed(ordered)]
        vec = np.transpose(self._state, perm).reshape(-1) if perm else self._state.reshape(1)
        state = Statevector(np.array(vec, copy=True))
        if not rest:
            return state
        return partial_trace(state, list(range(len(handles), len(ordered))))


__all__ = ["StatevectorEngine"]
