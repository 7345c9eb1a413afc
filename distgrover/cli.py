"""Command line entry point for distributed Grover search."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import DEFAULT_TARGET, GroverConfig
from .driver import DistributedGrover, iteration_count, run_trials
from .errors import DistributedGroverError

LOGGER = logging.getLogger(__name__)


def _log_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="distgrover",
        description="Simulate Grover search distributed across small QPUs",
    )
    parser.add_argument(
        "--target", "-t", default=DEFAULT_TARGET, help="Marked bitstring, e.g. 10110101"
    )
    parser.add_argument("--capacity", type=int, default=None, help="Qubits per node")
    parser.add_argument("--max-nodes", type=int, default=None, help="Node budget")
    parser.add_argument(
        "--max-qubits",
        type=int,
        default=None,
        help="Ceiling on simultaneously simulated qubits",
    )
    parser.add_argument(
        "--single-layer", action="store_true", help="Run exactly one Grover layer"
    )
    parser.add_argument(
        "--legacy-star",
        action="store_true",
        help="Use the 3-control star protocol (four single-qubit nodes only)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Measurement RNG seed")
    parser.add_argument("--shots", type=int, default=1, help="Number of repeated runs")
    parser.add_argument(
        "--baseline",
        action="store_true",
        help="Also report the success probability of the single-block circuit",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase verbosity"
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> GroverConfig:
    overrides = {
        "capacity_per_node": args.capacity,
        "max_nodes": args.max_nodes,
        "max_simulated_qubits": args.max_qubits,
        "seed": args.seed,
    }
    kwargs = {key: value for key, value in overrides.items() if value is not None}
    if args.single_layer:
        kwargs["single_layer"] = True
    if args.verbose:
        kwargs["verbosity"] = args.verbose
    return GroverConfig.from_bitstring(
        args.target, legacy_star=args.legacy_star, **kwargs
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    if args.shots < 1:
        parser.error("--shots must be at least 1")
    logging.basicConfig(
        level=_log_level(config.verbosity),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.shots > 1:
            summary = run_trials(config, args.shots)
            for bits, count in summary.counts.most_common():
                print(f"{bits} {count}")
            print(f"success_rate {summary.success_rate:.3f}")
        else:
            result = DistributedGrover(config).run()
            print(result.bitstring_str)
    except (DistributedGroverError, ValueError) as exc:
        parser.exit(1, f"error: {exc}\n")

    if args.baseline:
        from .baseline import baseline_probabilities

        layers = iteration_count(config.num_qubits, config.single_layer)
        probs = baseline_probabilities(config.target, layers)
        print(f"baseline_success {probs.get(config.target_str, 0.0):.6f}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
