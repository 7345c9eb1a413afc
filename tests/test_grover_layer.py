import pytest

from distgrover import (
    EbitFabric,
    GroverLayer,
    HubMCZ,
    LengthMismatch,
    LocalMCZ,
    StatevectorEngine,
    iteration_count,
    parse_bitstring,
)
from distgrover.baseline import baseline_probabilities


class CountingStrategy(LocalMCZ):
    def __init__(self):
        self.calls = 0

    def apply(self, engine, fabric, nodes):
        self.calls += 1
        super().apply(engine, fabric, nodes)


def _register(engine, sizes):
    qubits = engine.allocate(sum(sizes))
    nodes, start = [], 0
    for size in sizes:
        nodes.append(tuple(qubits[start : start + size]))
        start += size
    for q in qubits:
        engine.x(q)
        engine.h(q)
    return qubits, nodes


def _register_order(state):
    return {key[::-1]: prob for key, prob in state.probabilities_dict().items()}


def test_layer_rejects_target_length_mismatch():
    engine = StatevectorEngine(seed=0)
    qubits, nodes = _register(engine, (2, 1))
    with pytest.raises(LengthMismatch):
        GroverLayer(engine, EbitFabric(engine), nodes, (True, False))


def test_layer_uses_one_mcz_for_oracle_and_one_for_diffuser():
    engine = StatevectorEngine(seed=0)
    qubits, nodes = _register(engine, (2, 1))
    strategy = CountingStrategy()
    layer = GroverLayer(engine, EbitFabric(engine), nodes, (True, False, True), strategy)
    layer.oracle()
    assert strategy.calls == 1
    layer.diffuser()
    assert strategy.calls == 2
    layer.apply()
    assert strategy.calls == 4
    assert layer.rounds == 4


def test_layer_consumes_two_ebit_rounds():
    engine = StatevectorEngine(seed=0)
    fabric = EbitFabric(engine)
    qubits, nodes = _register(engine, (2, 1))
    layer = GroverLayer(engine, fabric, nodes, (True, False, True))
    assert isinstance(layer.strategy, HubMCZ)
    layer.apply()
    assert fabric.created == 2 * len(nodes)
    assert engine.num_qubits == 3


def test_oracle_marks_only_the_target():
    engine = StatevectorEngine(seed=0)
    qubits, nodes = _register(engine, (1, 2))
    before = engine.dump(qubits).data.copy()
    GroverLayer(engine, EbitFabric(engine), nodes, (True, False, True)).oracle()
    after = engine.dump(qubits).data
    # Little-endian index of register bits 1, 0, 1.
    marked = 0b101
    ratio = after / before
    flips = [i for i in range(8) if abs(ratio[i] - ratio[0]) > 1e-9]
    assert flips == [marked]


@pytest.mark.parametrize(
    "bits, sizes",
    [("1011", (2, 2)), ("0110", (3, 1)), ("101", (2, 1)), ("11010", (3, 2))],
)
def test_distributed_layers_match_monolithic_baseline(bits, sizes):
    target = parse_bitstring(bits)
    layers = iteration_count(len(target))
    engine = StatevectorEngine(seed=len(bits))
    qubits, nodes = _register(engine, sizes)
    layer = GroverLayer(engine, EbitFabric(engine), nodes, target)
    for _ in range(layers):
        layer.apply()
    distributed = _register_order(engine.dump(qubits))
    baseline = baseline_probabilities(target, layers)
    for key in set(distributed) | set(baseline):
        assert distributed.get(key, 0.0) == pytest.approx(baseline.get(key, 0.0), abs=1e-9)
    assert max(distributed, key=distributed.get) == bits


def test_layer_parses_string_target():
    engine = StatevectorEngine(seed=0)
    qubits, nodes = _register(engine, (2, 1))
    layer = GroverLayer(engine, EbitFabric(engine), nodes, "010", LocalMCZ())
    assert layer.target == (False, True, False)
    with pytest.raises(ValueError):
        GroverLayer(engine, EbitFabric(engine), nodes, ("0", "1", "0"), LocalMCZ())
