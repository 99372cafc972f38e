import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from gaengine.data import Instance, load_instance, load_tsplib_instances
from gaengine.tsp import TSPFitnessFunction, TSPRunConfig, TSPRunner


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _config(args) -> TSPRunConfig:
    return TSPRunConfig(
        max_population_size=args.population,
        time_limit=args.time_limit,
        max_generations=args.generations,
        best_count=args.best_count,
        crossover_percentage=args.crossover,
        mutation_initial_percentage=args.mutation,
        use_validator=args.validate,
        random_seed=args.seed,
    )


def _solve_instance(inst: Instance, cfg: TSPRunConfig) -> float:
    t0 = time.perf_counter()
    best = TSPRunner(inst.name).run_with_default_settings(inst.distances, inst.optimum, cfg)
    distance = TSPFitnessFunction(inst.distances).distance(best)
    gap = ""
    if inst.optimum:
        gap = f" gap={(distance / inst.optimum - 1) * 100:.2f}%"
    log(f"{inst.name}: n={inst.dimension} distance={distance:.2f}{gap} in {time.perf_counter() - t0:.2f}s")
    return distance


def solve(args) -> None:
    inst = load_instance(Path(args.instance))
    log(f"loaded {inst.name} ({inst.dimension} cities, optimum={inst.optimum})")
    _solve_instance(inst, _config(args))


def batch(args) -> None:
    data_root = Path(args.data_root)
    log(f"loading data from {data_root}")
    instances = load_tsplib_instances(data_root, max_nodes=args.max_nodes, max_instances=args.max_instances)
    if not instances:
        raise RuntimeError(
            f"No TSPLIB instances found in {data_root}. "
            "Place .tsp (and optional .opt.tour) files there before running."
        )
    log(f"loaded {len(instances)} instances: {', '.join(inst.name for inst in instances)}")
    cfg = _config(args)
    for inst in instances:
        _solve_instance(inst, cfg)


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--population", type=int, default=32, help="Population size cap")
    parser.add_argument("--time-limit", type=float, default=20.0, help="Seconds per instance")
    parser.add_argument("--generations", type=int, default=None, help="Generation cap")
    parser.add_argument("--best-count", type=int, default=2)
    parser.add_argument("--crossover", type=float, default=2.0, help="Crossover percentage")
    parser.add_argument("--mutation", type=float, default=50.0, help="Initial mutation percentage")
    parser.add_argument("--validate", action="store_true", help="Validate every chromosome")
    parser.add_argument("--seed", type=int, default=None)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Genetic algorithm TSP solver")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Solve a single TSPLIB instance")
    solve_parser.add_argument("instance")
    _add_run_options(solve_parser)
    solve_parser.set_defaults(func=solve)

    batch_parser = subparsers.add_parser("batch", help="Solve every TSPLIB instance in a directory")
    batch_parser.add_argument("--data-root", default="data/tsplib")
    batch_parser.add_argument("--max-nodes", type=int, default=None)
    batch_parser.add_argument("--max-instances", type=int, default=None)
    _add_run_options(batch_parser)
    batch_parser.set_defaults(func=batch)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
