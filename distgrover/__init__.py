"""Python API for distributed Grover search across small QPUs."""

from .backends import AmplitudeEngine, Basis, Gate, StatevectorEngine
from .config import GroverConfig, DEFAULT_TARGET, parse_bitstring, coerce_bits, format_bitstring
from .errors import (
    DistributedGroverError,
    CapacityExceeded,
    RouterTooLarge,
    TooManyQubits,
    LengthMismatch,
)
from .fabric import Ebit, EbitFabric
from .partitioner import Node, PartitionPlan, plan, group, ebit_cost
from .protocol import (
    parity,
    remote_cnot,
    remote_mcz,
    select_strategy,
    MCZStrategy,
    LocalMCZ,
    HubMCZ,
    StarMCZ,
)
from .layer import GroverLayer
from .driver import (
    DistributedGrover,
    RunResult,
    TrialSummary,
    iteration_count,
    run_trials,
)

__all__ = [
    "AmplitudeEngine",
    "Basis",
    "Gate",
    "StatevectorEngine",
    "GroverConfig",
    "DEFAULT_TARGET",
    "parse_bitstring",
    "coerce_bits",
    "format_bitstring",
    "DistributedGroverError",
    "CapacityExceeded",
    "RouterTooLarge",
    "TooManyQubits",
    "LengthMismatch",
    "Ebit",
    "EbitFabric",
    "Node",
    "PartitionPlan",
    "plan",
    "group",
    "ebit_cost",
    "parity",
    "remote_cnot",
    "remote_mcz",
    "select_strategy",
    "MCZStrategy",
    "LocalMCZ",
    "HubMCZ",
    "StarMCZ",
    "GroverLayer",
    "DistributedGrover",
    "RunResult",
    "TrialSummary",
    "iteration_count",
    "run_trials",
]
