from __future__ import annotations

"""High level driver running distributed Grover search.

:class:`DistributedGrover` ties together the partition planner, the ebit
fabric and the Grover layer orchestrator on top of an amplitude engine.  It
returns a :class:`RunResult` holding the measured bitstring together with
resource and timing metrics.
"""

import logging
import math
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Tuple

from .backends.base import AmplitudeEngine
from .backends.statevector import StatevectorEngine
from .config import GroverConfig, format_bitstring
from .errors import LengthMismatch, TooManyQubits
from .fabric import EbitFabric
from .layer import GroverLayer
from .partitioner import PartitionPlan
from .protocol import StarMCZ, select_strategy

LOGGER = logging.getLogger(__name__)


def iteration_count(num_qubits: int, single_layer: bool = False) -> int:
    """Return the number of Grover layers for a ``num_qubits`` search space.

    Uses ``floor(pi/4 * sqrt(2**n) - 0.5)``; ``single_layer`` forces one layer.
    """

    if single_layer:
        return 1
    return int(math.floor(math.pi / 4 * math.sqrt(2**num_qubits) - 0.5))


@dataclass
class RunResult:
    """Outcome of :meth:`DistributedGrover.run`.

    Attributes
    ----------
    bitstring:
        Measured value of every data qubit in register order.
    target:
        Bitstring the oracle marked.
    layers:
        Number of Grover layers executed.
    plan:
        Partition plan used for the run.
    strategy:
        Name of the multi-controlled-Z strategy.
    ebits_per_layer:
        Ebits one layer spends with that strategy.
    ebits_consumed:
        Ebits prepared by the fabric during the run.
    peak_qubits:
        Largest number of simultaneously allocated qubits, when the engine
        reports it.
    planning_time, execution_time:
        Wall-clock durations of the planning and execution phases.
    """

    bitstring: Tuple[bool, ...]
    target: Tuple[bool, ...]
    layers: int
    plan: PartitionPlan
    strategy: str
    ebits_per_layer: int = 0
    ebits_consumed: int = 0
    peak_qubits: int | None = None
    planning_time: float = 0.0
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.bitstring == self.target

    @property
    def bitstring_str(self) -> str:
        return format_bitstring(self.bitstring)


class DistributedGrover:
    """Run Grover search on a register partitioned across simulated QPUs.

    Parameters
    ----------
    config:
        Immutable run parameters.
    engine:
        Amplitude engine to run on.  Defaults to a
        :class:`~distgrover.backends.StatevectorEngine` seeded with
        ``config.seed``.
    """

    def __init__(self, config: GroverConfig, engine: AmplitudeEngine | None = None) -> None:
        self.config = config
        self.engine = engine if engine is not None else StatevectorEngine(seed=config.seed)

    def plan(self) -> PartitionPlan:
        """Plan the partition and check the simulation ceiling."""

        cfg = self.config
        if cfg.legacy_star:
            # The star protocol predates partitioning: one party per qubit.
            parties = StarMCZ.controls + 1
            if cfg.num_qubits != parties:
                raise LengthMismatch(
                    f"Legacy star mode searches exactly {parties} qubits, "
                    f"target has {cfg.num_qubits}"
                )
            plan = PartitionPlan((1,) * parties, 1, parties)
        else:
            plan = PartitionPlan.build(cfg.num_qubits, cfg.capacity_per_node, cfg.max_nodes)
        if plan.simulated_qubits > cfg.max_simulated_qubits:
            raise TooManyQubits(
                f"Run needs {plan.simulated_qubits} simulated qubits "
                f"({plan.total_qubits} data + {2 * plan.node_count} ebit halves); "
                f"ceiling is {cfg.max_simulated_qubits}"
            )
        LOGGER.info(
            "Partitioned %d qubits into %d node(s): %s",
            plan.total_qubits,
            plan.node_count,
            list(plan.counts),
        )
        return plan

    def run(self) -> RunResult:
        cfg = self.config
        start = time.perf_counter()
        plan = self.plan()
        layers = iteration_count(cfg.num_qubits, cfg.single_layer)
        planning_time = time.perf_counter() - start

        start = time.perf_counter()
        engine = self.engine
        fabric = EbitFabric(engine)
        register = engine.allocate(plan.total_qubits)
        nodes = plan.group(register)
        strategy = select_strategy(nodes, legacy_star=cfg.legacy_star)
        layer = GroverLayer(engine, fabric, nodes, cfg.target, strategy)
        LOGGER.info(
            "Running %d Grover layer(s) with the %s strategy (%d ebits per layer)",
            layers,
            strategy.name,
            2 * strategy.ebits_required(nodes),
        )

        for qubit in register:
            engine.x(qubit)
            engine.h(qubit)
        for index in range(layers):
            layer.apply()
            LOGGER.debug("Finished layer %d/%d", index + 1, layers)

        bitstring = tuple(engine.measure(qubit) for qubit in register)
        # Measured qubits are in a known basis state; flip ones back to |0>.
        for qubit, bit in zip(register, bitstring):
            if bit:
                engine.x(qubit)
        engine.free(register)
        execution_time = time.perf_counter() - start

        result = RunResult(
            bitstring=bitstring,
            target=cfg.target,
            layers=layers,
            plan=plan,
            strategy=strategy.name,
            ebits_per_layer=2 * strategy.ebits_required(nodes),
            ebits_consumed=fabric.created,
            peak_qubits=getattr(engine, "peak_qubits", None),
            planning_time=planning_time,
            execution_time=execution_time,
        )
        LOGGER.info(
            "Measured %s (target %s) using %d ebits",
            result.bitstring_str,
            cfg.target_str,
            result.ebits_consumed,
        )
        return result


@dataclass
class TrialSummary:
    """Aggregate of repeated runs produced by :func:`run_trials`."""

    target: str
    shots: int
    counts: Counter = field(default_factory=Counter)
    ebits_consumed: int = 0

    @property
    def success_rate(self) -> float:
        if not self.shots:
            return 0.0
        return self.counts.get(self.target, 0) / self.shots

    def most_common(self) -> str | None:
        if not self.counts:
            return None
        return self.counts.most_common(1)[0][0]


def run_trials(
    config: GroverConfig,
    shots: int,
    *,
    engine_factory: Callable[[int | None], AmplitudeEngine] | None = None,
) -> TrialSummary:
    """Run ``shots`` independent searches and tally the outcomes.

    When ``config.seed`` is set, shot ``i`` uses seed ``config.seed + i`` so
    that the whole batch is reproducible.
    """

    if shots < 1:
        raise ValueError("shots must be positive")
    factory = engine_factory or (lambda seed: StatevectorEngine(seed=seed))
    summary = TrialSummary(target=config.target_str, shots=shots)
    for shot in range(shots):
        seed = None if config.seed is None else config.seed + shot
        result = DistributedGrover(config, engine=factory(seed)).run()
        summary.counts[result.bitstring_str] += 1
        summary.ebits_consumed += result.ebits_consumed
    LOGGER.info(
        "Success rate %.3f over %d shot(s) for target %s",
        summary.success_rate,
        shots,
        summary.target,
    )
    return summary


__all__ = [
    "iteration_count",
    "RunResult",
    "DistributedGrover",
    "TrialSummary",
    "run_trials",
]
