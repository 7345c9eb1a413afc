import numpy as np
import pytest
from qiskit import QuantumCircuit
from qiskit.quantum_info import DensityMatrix, Statevector

from distgrover.backends import Basis, Gate, StatevectorEngine


def test_allocate_hands_out_distinct_handles():
    engine = StatevectorEngine(seed=1)
    first = engine.allocate(2)
    second = engine.allocate(1)
    assert len(set(first + second)) == 3
    assert engine.num_qubits == 3
    assert engine.peak_qubits == 3


def test_bell_pair_dump_matches_qiskit():
    engine = StatevectorEngine(seed=1)
    a, b = engine.allocate(2)
    engine.h(a)
    engine.cnot(a, b)
    state = engine.dump([a, b])
    assert isinstance(state, Statevector)
    expected = Statevector(np.array([1, 0, 0, 1]) / np.sqrt(2))
    assert state.equiv(expected)


def test_dump_uses_little_endian_handle_order():
    engine = StatevectorEngine(seed=1)
    a, b = engine.allocate(2)
    engine.x(a)
    assert engine.dump([a, b]).probabilities_dict() == pytest.approx({"01": 1.0})
    assert engine.dump([b, a]).probabilities_dict() == pytest.approx({"10": 1.0})


def test_dump_subset_returns_reduced_density_matrix():
    engine = StatevectorEngine(seed=1)
    a, b = engine.allocate(2)
    engine.h(a)
    engine.cnot(a, b)
    reduced = engine.dump([a])
    assert isinstance(reduced, DensityMatrix)
    np.testing.assert_allclose(reduced.data, np.eye(2) / 2, atol=1e-12)


def test_multi_controlled_z_matches_qiskit():
    engine = StatevectorEngine(seed=1)
    qubits = engine.allocate(3)
    for q in qubits:
        engine.h(q)
    engine.mcz(qubits[:2], qubits[2])

    qc = QuantumCircuit(3)
    qc.h(range(3))
    qc.h(2)
    qc.ccx(0, 1, 2)
    qc.h(2)
    assert engine.dump(qubits).equiv(Statevector(qc))


def test_measure_basis_states_is_deterministic():
    engine = StatevectorEngine(seed=3)
    a, b = engine.allocate(2)
    engine.x(a)
    assert engine.measure(a) is True
    assert engine.measure(b) is False


def test_measure_in_x_basis():
    engine = StatevectorEngine(seed=5)
    plus, minus = engine.allocate(2)
    engine.h(plus)
    engine.x(minus)
    engine.h(minus)
    for _ in range(5):
        assert engine.measure(plus, Basis.X) is False
        assert engine.measure(minus, Basis.X) is True


def test_measurement_collapses_entangled_partner():
    engine = StatevectorEngine(seed=11)
    a, b = engine.allocate(2)
    engine.h(a)
    engine.cnot(a, b)
    assert engine.measure(a) == engine.measure(b)


def test_seeded_engines_are_reproducible():
    def outcomes(seed):
        engine = StatevectorEngine(seed=seed)
        (q,) = engine.allocate(1)
        bits = []
        for _ in range(20):
            engine.h(q)
            bits.append(engine.measure(q))
        return bits

    assert outcomes(42) == outcomes(42)


def test_free_requires_reset():
    engine = StatevectorEngine(seed=1)
    a, b = engine.allocate(2)
    engine.x(a)
    with pytest.raises(RuntimeError, match="reset"):
        engine.free([a])
    engine.reset(a)
    engine.free([a])
    assert engine.handles == (b,)


def test_free_keeps_remaining_state():
    engine = StatevectorEngine(seed=1)
    a, b, c = engine.allocate(3)
    engine.x(a)
    engine.h(c)
    engine.free([b])
    state = engine.dump([a, c])
    expected = Statevector.from_label("+1")
    assert state.equiv(expected)


def test_apply_rejects_overlapping_controls_and_unknown_handles():
    engine = StatevectorEngine(seed=1)
    a, b = engine.allocate(2)
    with pytest.raises(ValueError):
        engine.apply(Gate.X, (a,), a)
    with pytest.raises(ValueError):
        engine.apply(Gate.X, (b, b), a)
    with pytest.raises(ValueError, match="Unknown"):
        engine.apply(Gate.H, (), 99)


def test_engine_keeps_no_operation_log():
    engine = StatevectorEngine(seed=2)
    (q,) = engine.allocate(1)
    for _ in range(50):
        engine.h(q)
        engine.measure(q)
    assert not hasattr(engine, "history")
    assert not hasattr(engine, "statevector")
