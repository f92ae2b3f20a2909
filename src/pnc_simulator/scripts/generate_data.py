"""Script for generating simulated postnatal-care data.

Usage:
    pnc-generate --output ./data/simulated
    python -m pnc_simulator.scripts.generate_data --n-subjects 5000 --seed 7
"""

import argparse
import logging

from pathlib import Path
from typing import List, Optional

from ..evaluation import CalibrationChecker, print_calibration_summary
from ..generator import SimulationGenerator
from ..utils.config_loader import load_config, update_config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic postnatal-care population from the causal DAG."
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML configuration (packaged default if omitted)")
    parser.add_argument("--output", type=Path, default=Path("./data/simulated"),
                        help="Directory for CSV output")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument("--reps", type=int, default=1, help="Number of replications")
    parser.add_argument("--n-subjects", type=int, default=None, help="Override population size")
    parser.add_argument("--provider-ratio", type=float, default=None,
                        help="Override subjects per provider")
    parser.add_argument("--population-file", type=Path, default=None,
                        help="Regional population/ranking CSV")
    parser.add_argument("--race-file", type=Path, default=None,
                        help="Regional race/ethnicity CSV")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    """Load the configuration and apply command-line overrides."""
    config = load_config(args.config)

    overrides = {}
    if args.n_subjects is not None:
        overrides.setdefault('population', {})['n_subjects'] = args.n_subjects
    if args.provider_ratio is not None:
        overrides.setdefault('population', {})['provider_ratio'] = args.provider_ratio
    if args.population_file is not None:
        overrides.setdefault('geography', {})['population_file'] = str(args.population_file)
    if args.race_file is not None:
        overrides.setdefault('geography', {})['race_file'] = str(args.race_file)

    return update_config(config, overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Run simulation and write outputs."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )

    print("Initializing simulation generator...")
    gen = SimulationGenerator(config=build_config(args))

    print("\nConfiguration Summary:")
    print("=" * 60)
    for key, value in gen.get_config_summary().items():
        print(f"{key}: {value}")
    print("=" * 60)

    datasets = gen.generate(n_reps=args.reps, seed=args.seed, output_dir=str(args.output))
    if not isinstance(datasets, list):
        datasets = [datasets]

    checker = CalibrationChecker(gen.config)
    for rep, data in enumerate(datasets, start=1):
        print(f"\nData summary for replication {rep} (seed {data.seed}):")
        for key, value in data.summary().items():
            print(f"  {key}: {value}")
        print_calibration_summary(checker.report(data.full_data, gen.engine.encoders))

    print("\n" + "=" * 60)
    print("GENERATION COMPLETE")
    print("=" * 60)
    print(f"All files saved to: {args.output.absolute()}")
    print("\nGenerated files:")
    for filepath in sorted(args.output.glob("*.csv")):
        file_size = filepath.stat().st_size / (1024 * 1024)
        print(f"  - {filepath.name} ({file_size:.2f} MB)")


if __name__ == "__main__":
    main()
