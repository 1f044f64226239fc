#!/usr/bin/env python3
"""
GA Crossover CLI - Minimal entry point.

This is the command-line interface for the genetic algorithm crossover
runner. All configuration is specified in YAML files.

Usage:
    python3 ga_cli.py run_config.yaml
    python3 ga_cli.py --config run_config.yaml
    python3 ga_cli.py --help

Examples:
    # Recombine tours with order-based crossover
    python3 ga_cli.py examples/order_based_run.yaml

    # Recombine with two random cut points
    python3 ga_cli.py examples/n_cut_point_run.yaml
"""

import sys


def main():
    """Main entry point for GA CLI."""
    if len(sys.argv) < 2 or sys.argv[1] in ['-h', '--help', 'help']:
        print(__doc__)
        sys.exit(0 if len(sys.argv) > 1 else 1)

    config_path = sys.argv[1]

    if config_path.startswith('--config='):
        config_path = config_path.split('=', 1)[1]
    elif config_path == '--config':
        if len(sys.argv) < 3:
            print("Error: --config requires an argument")
            print(__doc__)
            sys.exit(1)
        config_path = sys.argv[2]

    try:
        from ga_crossover.cli import run_from_config
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
