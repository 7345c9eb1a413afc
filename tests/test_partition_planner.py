import math

import pytest

from distgrover import (
    CapacityExceeded,
    LengthMismatch,
    PartitionPlan,
    RouterTooLarge,
    ebit_cost,
    group,
    plan,
)


@pytest.mark.parametrize(
    "total, capacity, max_nodes, expected",
    [
        (8, 5, 5, (5, 3)),
        (9, 3, 3, (3, 3, 3)),
        (4, 4, 1, (4,)),
        (7, 3, 4, (3, 3, 1)),
        (1, 1, 1, (1,)),
    ],
)
def test_plan_examples(total, capacity, max_nodes, expected):
    assert plan(total, capacity, max_nodes) == expected


def test_plan_capacity_exceeded():
    with pytest.raises(CapacityExceeded):
        plan(10, 2, 3)


def test_plan_router_too_large():
    # Fits on 5 nodes of capacity 2, but the router would need 5 lines.
    with pytest.raises(RouterTooLarge):
        plan(10, 2, 5)


def test_capacity_checked_before_router():
    with pytest.raises(CapacityExceeded):
        plan(20, 2, 3)


def test_plan_rejects_non_positive_arguments():
    with pytest.raises(ValueError):
        plan(0, 2, 2)
    with pytest.raises(ValueError):
        plan(4, 0, 2)


def test_plan_properties_hold_over_feasible_grid():
    for total in range(1, 26):
        for capacity in range(1, 8):
            for max_nodes in range(1, 8):
                nodes = math.ceil(total / capacity)
                if capacity * max_nodes < total or nodes > capacity:
                    continue
                counts = plan(total, capacity, max_nodes)
                assert sum(counts) == total
                assert len(counts) == nodes
                assert all(c <= capacity for c in counts)
                assert all(c == capacity for c in counts[:-1])
                assert 1 <= counts[-1] <= capacity


def test_group_slices_register_contiguously():
    nodes = group([10, 11, 12, 13, 14, 15, 16, 17], (5, 3))
    assert nodes == ((10, 11, 12, 13, 14), (15, 16, 17))
    flat = [q for node in nodes for q in node]
    assert flat == [10, 11, 12, 13, 14, 15, 16, 17]


def test_group_length_mismatch():
    with pytest.raises(LengthMismatch):
        group([0, 1, 2], (2, 2))


def test_ebit_cost():
    assert ebit_cost((8,), layers=12) == 0
    assert ebit_cost((5, 3)) == 4
    assert ebit_cost((3, 3, 3), layers=2) == 12


def test_partition_plan_metrics():
    p = PartitionPlan.build(8, 5, 5)
    assert p.counts == (5, 3)
    assert p.node_count == 2
    assert p.total_qubits == 8
    assert p.simulated_qubits == 12
    assert p.ebits_per_layer == 4
    assert p.group(list(range(8)))[1] == (5, 6, 7)
