from __future__ import annotations

"""Entanglement-assisted remote gates.

Nodes never interact directly.  Each protocol below entangles data qubits
with router halves of freshly prepared ebits, performs the non-local
interaction among router halves only, and finally measures the ebit halves
and feeds the outcomes forward as local Pauli corrections.

The order of steps matters: a correction is applied only after the
measurement it depends on, and every ebit is reset and freed before the
protocol returns.
"""

import logging
from typing import Iterable, List, Sequence

from .backends.base import AmplitudeEngine, Basis
from .errors import LengthMismatch
from .fabric import Ebit, EbitFabric
from .partitioner import Node

LOGGER = logging.getLogger(__name__)


def parity(bits: Iterable[bool]) -> bool:
    """Return ``True`` when an odd number of ``bits`` are set."""

    result = False
    for bit in bits:
        result ^= bool(bit)
    return result


def _check_nodes(nodes: Sequence[Node]) -> List[int]:
    if not nodes:
        raise LengthMismatch("At least one node is required")
    flat: List[int] = []
    for node in nodes:
        if not node:
            raise LengthMismatch("Nodes must hold at least one qubit")
        flat.extend(node)
    if len(set(flat)) != len(flat):
        raise LengthMismatch("A qubit may belong to a single node only")
    return flat


def _phase_onto(engine: AmplitudeEngine, node: Node) -> None:
    """Apply ``Z`` on the logical AND of ``node``."""
    engine.mcz(node[:-1], node[-1])


def remote_cnot(
    engine: AmplitudeEngine, fabric: EbitFabric, control: int, target: int
) -> None:
    """Apply ``CNOT(control, target)`` between two nodes through a router.

    Node A holds ``control`` and shares the ebit ``(eA, rA)`` with the
    router, node B holds ``target`` and shares ``(eB, rB)``.  The only
    non-local operation is a CNOT between the two router halves.
    """

    if control == target:
        raise LengthMismatch("Remote CNOT needs two distinct parties")
    ebit_a = fabric.create()
    ebit_b = fabric.create()
    try:
        engine.cnot(control, ebit_a.local)
        engine.cnot(ebit_b.local, target)
        engine.cnot(ebit_a.router, ebit_b.router)

        flip = (
            engine.measure(ebit_b.router, Basis.Z),
            engine.measure(ebit_a.local, Basis.Z),
        )
        if parity(flip):
            engine.x(target)
        phase = (
            engine.measure(ebit_b.local, Basis.X),
            engine.measure(ebit_a.router, Basis.X),
        )
        if parity(phase):
            engine.z(control)
        LOGGER.debug("Remote CNOT corrections: flip=%s phase=%s", flip, phase)
    finally:
        fabric.release((ebit_a, ebit_b))


class MCZStrategy:
    """Interface for multi-controlled-Z implementations over node groupings.

    ``apply`` flips the phase of the state in which every qubit of every
    node is one.  Implementations differ in how many ebits they spend.
    """

    name = "abstract"

    def supports(self, nodes: Sequence[Node]) -> bool:
        return True

    def ebits_required(self, nodes: Sequence[Node]) -> int:
        raise NotImplementedError

    def apply(
        self, engine: AmplitudeEngine, fabric: EbitFabric, nodes: Sequence[Node]
    ) -> None:
        raise NotImplementedError


class LocalMCZ(MCZStrategy):
    """Single-block multi-controlled-Z on the flattened register."""

    name = "local"

    def ebits_required(self, nodes: Sequence[Node]) -> int:
        return 0

    def apply(self, engine, fabric, nodes):
        flat = _check_nodes(nodes)
        engine.mcz(flat[:-1], flat[-1])


class HubMCZ(MCZStrategy):
    """Distributed multi-controlled-Z through one router half per node.

    Every node phase-kicks the AND of its qubits into its local ebit half,
    which the X-basis measurement teleports onto the router half.  A single
    multi-controlled-Z among router halves, with ``r_0`` as the hub target,
    realises the global gate.  Measuring the router halves in the X basis
    disentangles them and returns the phase correction to each node.
    """

    name = "hub"

    def ebits_required(self, nodes):
        return len(nodes)

    def apply(self, engine, fabric, nodes):
        _check_nodes(nodes)
        ebits: List[Ebit] = []
        try:
            for _ in nodes:
                ebits.append(fabric.create())
            for node, ebit in zip(nodes, ebits):
                engine.mcz(node, ebit.local)
                engine.h(ebit.router)
            meas_epr = []
            for ebit in ebits:
                bit = engine.measure(ebit.local, Basis.X)
                if bit:
                    engine.x(ebit.router)
                meas_epr.append(bit)
            routers = [ebit.router for ebit in ebits]
            engine.mcz(routers[1:], routers[0])
            meas_router = []
            for node, ebit in zip(nodes, ebits):
                bit = engine.measure(ebit.router, Basis.X)
                if bit:
                    _phase_onto(engine, node)
                meas_router.append(bit)
            LOGGER.debug(
                "Hub MCZ over %d node(s): epr=%s router=%s",
                len(nodes),
                meas_epr,
                meas_router,
            )
        finally:
            fabric.release(ebits)


class StarMCZ(MCZStrategy):
    """Three-control star protocol for four single-qubit parties.

    The last party hosts the target qubit and the three router halves.  Each
    control shares its own ebit with the target's site; once every router
    half carries a copy of its control, a local ``CCCZ`` acts on the three
    router halves and the target.
    """

    name = "star"
    controls = 3

    def supports(self, nodes):
        return len(nodes) == self.controls + 1 and all(len(node) == 1 for node in nodes)

    def ebits_required(self, nodes):
        return self.controls

    def apply(self, engine, fabric, nodes):
        _check_nodes(nodes)
        if not self.supports(nodes):
            raise LengthMismatch(
                f"Star protocol needs {self.controls + 1} single-qubit nodes, "
                f"got sizes {[len(node) for node in nodes]}"
            )
        controls = [node[0] for node in nodes[:-1]]
        target = nodes[-1][0]
        ebits: List[Ebit] = []
        try:
            for control in controls:
                ebit = fabric.create()
                ebits.append(ebit)
                engine.cnot(control, ebit.local)
                if engine.measure(ebit.local, Basis.Z):
                    engine.x(ebit.router)
            engine.mcz([ebit.router for ebit in ebits], target)
            for control, ebit in zip(controls, ebits):
                if engine.measure(ebit.router, Basis.X):
                    engine.z(control)
        finally:
            fabric.release(ebits)


def select_strategy(nodes: Sequence[Node], *, legacy_star: bool = False) -> MCZStrategy:
    """Pick the multi-controlled-Z strategy for ``nodes``.

    A single node runs locally.  ``legacy_star`` selects :class:`StarMCZ`,
    which only handles four single-qubit nodes.  Everything else uses the
    hub protocol.
    """

    _check_nodes(nodes)
    if legacy_star:
        star = StarMCZ()
        if not star.supports(nodes):
            raise LengthMismatch(
                "Legacy star protocol requires exactly 3 controls and 1 target "
                "on single-qubit nodes"
            )
        return star
    if len(nodes) == 1:
        return LocalMCZ()
    return HubMCZ()


def remote_mcz(
    engine: AmplitudeEngine,
    fabric: EbitFabric,
    nodes: Sequence[Node],
    strategy: MCZStrategy | None = None,
) -> None:
    """Apply a multi-controlled-Z over every qubit held by ``nodes``."""

    strategy = strategy or select_strategy(nodes)
    strategy.apply(engine, fabric, nodes)


__all__ = [
    "parity",
    "remote_cnot",
    "MCZStrategy",
    "LocalMCZ",
    "HubMCZ",
    "StarMCZ",
    "select_strategy",
    "remote_mcz",
]
