"""Grover layer (oracle followed by diffuser) over a node grouping."""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from .backends.base import AmplitudeEngine
from .config import coerce_bits
from .errors import LengthMismatch
from .fabric import EbitFabric
from .partitioner import Node
from .protocol import MCZStrategy, select_strategy

LOGGER = logging.getLogger(__name__)


class GroverLayer:
    """Build one amplitude amplification step across distributed nodes.

    Both the oracle and the diffuser consume exactly one distributed
    multi-controlled-Z, so every layer runs two ebit protocol rounds.
    """

    def __init__(
        self,
        engine: AmplitudeEngine,
        fabric: EbitFabric,
        nodes: Sequence[Node],
        target: Sequence[bool],
        strategy: MCZStrategy | None = None,
    ) -> None:
        self.nodes: Tuple[Node, ...] = tuple(tuple(node) for node in nodes)
        self.qubits: Tuple[int, ...] = tuple(q for node in self.nodes for q in node)
        self.target: Tuple[bool, ...] = coerce_bits(target)
        if len(self.qubits) != len(self.target):
            raise LengthMismatch(
                f"Nodes hold {len(self.qubits)} qubits but the target has "
                f"{len(self.target)} bits"
            )
        self.engine = engine
        self.fabric = fabric
        self.strategy = strategy or select_strategy(self.nodes)
        self.rounds = 0

    def _mcz(self) -> None:
        self.strategy.apply(self.engine, self.fabric, self.nodes)
        self.rounds += 1

    def _flip_zeros(self) -> None:
        for qubit, bit in zip(self.qubits, self.target):
            if not bit:
                self.engine.x(qubit)

    def oracle(self) -> None:
        """Flip the phase of the target basis state."""
        self._flip_zeros()
        self._mcz()
        self._flip_zeros()

    def diffuser(self) -> None:
        """Reflect about the uniform superposition (up to global phase)."""
        for qubit in self.qubits:
            self.engine.h(qubit)
        self._mcz()
        for qubit in self.qubits:
            self.engine.h(qubit)

    def apply(self) -> None:
        self.oracle()
        self.diffuser()
        LOGGER.debug("Applied Grover layer with %s strategy", self.strategy.name)
