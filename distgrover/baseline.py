from __future__ import annotations

"""Monolithic Grover reference built with Qiskit and evaluated via Aer.

The distributed protocol must reproduce the measurement statistics of the
same algorithm executed on a single block.  This module builds that
single-block circuit and returns its exact outcome distribution.
"""

from typing import Dict, Sequence

import numpy as np
from qiskit import QuantumCircuit, transpile
from qiskit.quantum_info import Statevector
from qiskit_aer import AerSimulator


def _append_mcz(circuit: QuantumCircuit, qubits: Sequence[int]) -> None:
    target = qubits[-1]
    controls = list(qubits[:-1])
    if not controls:
        circuit.z(target)
        return
    circuit.h(target)
    circuit.mcx(controls, target)
    circuit.h(target)


def build_grover_circuit(target: Sequence[bool], layers: int) -> QuantumCircuit:
    """Return the single-block Grover circuit for ``target``.

    Qubit ``i`` of the circuit corresponds to ``target[i]``.  The register
    starts in ``|->`` on every qubit, matching :class:`DistributedGrover`.
    """

    n = len(target)
    if n == 0:
        raise ValueError("target must not be empty")
    qubits = list(range(n))
    circuit = QuantumCircuit(n)
    for q in qubits:
        circuit.x(q)
        circuit.h(q)
    zeros = [q for q, bit in zip(qubits, target) if not bit]
    for _ in range(layers):
        for q in zeros:
            circuit.x(q)
        _append_mcz(circuit, qubits)
        for q in zeros:
            circuit.x(q)
        for q in qubits:
            circuit.h(q)
        _append_mcz(circuit, qubits)
        for q in qubits:
            circuit.h(q)
    return circuit


def run_statevector(circuit: QuantumCircuit) -> np.ndarray:
    """Evaluate ``circuit`` with the Aer statevector method."""

    sim = AerSimulator(method="statevector")
    circuit = circuit.copy()
    circuit.save_statevector()
    result = sim.run(transpile(circuit, sim)).result()
    return np.asarray(result.get_statevector(), dtype=complex)


def baseline_probabilities(target: Sequence[bool], layers: int) -> Dict[str, float]:
    """Return outcome probabilities keyed by bitstrings in register order."""

    vec = run_statevector(build_grover_circuit(target, layers))
    # Qiskit keys put qubit 0 rightmost; reverse into register order.
    return {
        key[::-1]: float(prob)
        for key, prob in Statevector(vec).probabilities_dict().items()
    }


__all__ = ["build_grover_circuit", "run_statevector", "baseline_probabilities"]
