import os
from dataclasses import dataclass, field
from typing import Tuple


def _int_from_env(name: str, default: int | None) -> int | None:
    val = os.getenv(name)
    if val is None:
        return default
    if val.lower() == "none":
        return None
    try:
        return int(val)
    except ValueError:
        return default


def _bool_from_env(name: str, default: bool) -> bool:
    """Return a boolean value parsed from the environment."""

    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    val = val.strip().lower()
    if val in {"1", "true", "yes", "on"}:
        return True
    if val in {"0", "false", "no", "off"}:
        return False
    return default


def parse_bitstring(bits: str) -> Tuple[bool, ...]:
    """Return ``bits`` (a string of ``0``/``1`` characters) as booleans."""

    cleaned = bits.strip()
    if not cleaned or set(cleaned) - {"0", "1"}:
        raise ValueError(f"Invalid target bitstring {bits!r}; expected only 0 and 1")
    return tuple(ch == "1" for ch in cleaned)


def coerce_bits(bits) -> Tuple[bool, ...]:
    """Return ``bits`` as booleans.

    Strings go through :func:`parse_bitstring`; any other iterable may only
    hold booleans or the integers ``0`` and ``1``.
    """

    if isinstance(bits, str):
        return parse_bitstring(bits)
    result = []
    for bit in bits:
        if isinstance(bit, str) or bit not in (0, 1):
            raise ValueError(f"Invalid target bit {bit!r}; expected a bool, 0 or 1")
        result.append(bool(bit))
    return tuple(result)


def format_bitstring(bits) -> str:
    return "".join("1" if b else "0" for b in bits)


DEFAULT_TARGET = "10110101"
"""Demo target searched by the command line when ``--target`` is omitted."""


def _env_default(name: str, default: int) -> int:
    value = _int_from_env(name, default)
    return default if value is None else value


def _default_capacity() -> int:
    return _env_default("DISTGROVER_CAPACITY", 5)


def _default_max_nodes() -> int:
    return _env_default("DISTGROVER_MAX_NODES", 5)


def _default_max_qubits() -> int:
    return _env_default("DISTGROVER_MAX_QUBITS", 20)


def _default_verbosity() -> int:
    return _env_default("DISTGROVER_VERBOSITY", 0)


def _default_single_layer() -> bool:
    return _bool_from_env("DISTGROVER_SINGLE_LAYER", False)


def _default_seed() -> int | None:
    return _int_from_env("DISTGROVER_SEED", None)


@dataclass(frozen=True)
class GroverConfig:
    """Immutable parameters of one distributed Grover run.

    Values not supplied explicitly fall back to ``DISTGROVER_*`` environment
    variables and then to built-in defaults.

    Attributes
    ----------
    target:
        Marked bitstring, one boolean per data qubit in register order.
    capacity_per_node:
        Number of data qubits a single QPU can hold.
    max_nodes:
        Upper bound on the number of QPUs the planner may use.
    single_layer:
        Debug mode running exactly one Grover layer.
    verbosity:
        ``0`` warnings only, ``1`` informational, ``2`` or more debug tracing.
    max_simulated_qubits:
        Ceiling on data qubits plus concurrently live ebit halves.
    seed:
        Seed of the measurement random number generator.
    legacy_star:
        Use the three-control star protocol when the grouping allows it.
    """

    target: Tuple[bool, ...]
    capacity_per_node: int = field(default_factory=_default_capacity)
    max_nodes: int = field(default_factory=_default_max_nodes)
    single_layer: bool = field(default_factory=_default_single_layer)
    verbosity: int = field(default_factory=_default_verbosity)
    max_simulated_qubits: int = field(default_factory=_default_max_qubits)
    seed: int | None = field(default_factory=_default_seed)
    legacy_star: bool = False

    def __post_init__(self) -> None:
        target = coerce_bits(self.target)
        if not target:
            raise ValueError("target bitstring must not be empty")
        object.__setattr__(self, "target", target)
        if self.capacity_per_node < 1:
            raise ValueError("capacity_per_node must be positive")
        if self.max_nodes < 1:
            raise ValueError("max_nodes must be positive")
        if self.max_simulated_qubits < 1:
            raise ValueError("max_simulated_qubits must be positive")
        if self.verbosity < 0:
            raise ValueError("verbosity must be non-negative")

    @classmethod
    def from_bitstring(cls, bits: str, **kwargs) -> "GroverConfig":
        """Build a configuration whose target is parsed from ``bits``."""

        return cls(target=parse_bitstring(bits), **kwargs)

    @property
    def num_qubits(self) -> int:
        return len(self.target)

    @property
    def target_str(self) -> str:
        return format_bitstring(self.target)


__all__ = [
    "GroverConfig",
    "DEFAULT_TARGET",
    "parse_bitstring",
    "coerce_bits",
    "format_bitstring",
]
