from __future__ import annotations

"""Greedy partition planner splitting a register across QPUs.

The planner fills nodes to capacity in order and leaves the last node with
the remainder.  Fewer nodes means fewer ebits per distributed gate, and the
greedy fill uses the smallest node count able to hold the register.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import CapacityExceeded, LengthMismatch, RouterTooLarge

LOGGER = logging.getLogger(__name__)

Node = Tuple[int, ...]
"""Qubit handles resident on one simulated QPU."""


def plan(total_qubits: int, capacity_per_node: int, max_nodes: int) -> Tuple[int, ...]:
    """Return the number of qubits held by each node.

    Parameters
    ----------
    total_qubits:
        Size of the data register.
    capacity_per_node:
        Maximum number of data qubits on a single node.
    max_nodes:
        Upper bound on the number of nodes.

    Raises
    ------
    CapacityExceeded
        If ``max_nodes * capacity_per_node < total_qubits``.
    RouterTooLarge
        If the required node count exceeds ``capacity_per_node``; the router
        needs one communication line per node.
    """

    if total_qubits < 1 or capacity_per_node < 1 or max_nodes < 1:
        raise ValueError("total_qubits, capacity_per_node and max_nodes must be positive")
    if max_nodes * capacity_per_node < total_qubits:
        raise CapacityExceeded(
            f"{total_qubits} qubits do not fit on {max_nodes} nodes of capacity "
            f"{capacity_per_node}"
        )
    node_count = math.ceil(total_qubits / capacity_per_node)
    if node_count > capacity_per_node:
        raise RouterTooLarge(
            f"{node_count} nodes need a router with more lines than the "
            f"node capacity {capacity_per_node}"
        )
    remainder = total_qubits - capacity_per_node * (node_count - 1)
    counts = (capacity_per_node,) * (node_count - 1) + (remainder,)
    LOGGER.debug(
        "Planned %d qubits on %d node(s) of capacity %d: %s",
        total_qubits,
        node_count,
        capacity_per_node,
        counts,
    )
    return counts


def group(qubits: Sequence[int], counts: Sequence[int]) -> Tuple[Node, ...]:
    """Slice ``qubits`` into consecutive nodes of sizes ``counts``."""

    if sum(counts) != len(qubits):
        raise LengthMismatch(
            f"Plan covers {sum(counts)} qubits but the register holds {len(qubits)}"
        )
    nodes = []
    start = 0
    for count in counts:
        if count < 1:
            raise LengthMismatch("Every node must hold at least one qubit")
        nodes.append(tuple(qubits[start : start + count]))
        start += count
    return tuple(nodes)


def ebit_cost(counts: Sequence[int], layers: int = 1) -> int:
    """Return the ebits consumed by ``layers`` hub-protocol Grover layers.

    Each layer runs two distributed multi-controlled-Z gates and each gate
    consumes one ebit per node.  A single node runs locally at no cost.
    """

    if len(counts) <= 1:
        return 0
    return 2 * len(counts) * layers


@dataclass(frozen=True)
class PartitionPlan:
    """Immutable result of :func:`plan` together with its inputs."""

    counts: Tuple[int, ...]
    capacity_per_node: int
    max_nodes: int

    @classmethod
    def build(cls, total_qubits: int, capacity_per_node: int, max_nodes: int) -> "PartitionPlan":
        counts = plan(total_qubits, capacity_per_node, max_nodes)
        return cls(counts, capacity_per_node, max_nodes)

    @property
    def total_qubits(self) -> int:
        return sum(self.counts)

    @property
    def node_count(self) -> int:
        return len(self.counts)

    @property
    def ebits_per_layer(self) -> int:
        """Ebits per Grover layer with the hub strategy.

        Other strategies spend a different amount; see
        :meth:`~distgrover.protocol.MCZStrategy.ebits_required`.
        """
        return ebit_cost(self.counts)

    @property
    def simulated_qubits(self) -> int:
        """Data qubits plus the two halves of one ebit per node."""
        return self.total_qubits + 2 * self.node_count

    def group(self, qubits: Sequence[int]) -> Tuple[Node, ...]:
        return group(qubits, self.counts)


__all__ = ["Node", "plan", "group", "ebit_cost", "PartitionPlan"]
