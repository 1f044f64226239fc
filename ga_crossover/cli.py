"""
CLI module for GA crossover.

Handles run configuration loading, validation, and dispatching.
"""

from typing import Dict, Any
from pathlib import Path
import yaml

from .data_models import STRATEGIES
from .io_utils import GENE_TYPES


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration file must contain a mapping")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    required = ['input', 'output', 'generation']
    for field in required:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")
        if not isinstance(config[field], dict):
            raise ConfigValidationError(f"'{field}' must be a dictionary")

    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")

    gene_type = config.get('gene_type', 'str')
    if gene_type not in GENE_TYPES:
        raise ConfigValidationError(
            f"Invalid gene_type: '{gene_type}'. Must be one of {', '.join(sorted(GENE_TYPES))}"
        )

    if 'ga_config' in config and not Path(config['ga_config']).exists():
        raise ConfigValidationError(f"GA config not found: {config['ga_config']}")

    _validate_input_config(config['input'])
    _validate_generation_config(config['generation'])

    if 'crossover' in config:
        _validate_crossover_config(config['crossover'])


def _validate_input_config(input_config: Dict[str, Any]) -> None:
    """
    Validate the parent input section.

    Args:
        input_config: 'input' section of the run configuration

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    has_manifest = 'parents_manifest' in input_config
    has_dir = 'parents_dir' in input_config

    if not has_manifest and not has_dir:
        raise ConfigValidationError(
            "Run requires either 'input.parents_manifest' or 'input.parents_dir'"
        )

    if has_manifest and has_dir:
        raise ConfigValidationError(
            "Run cannot have both 'parents_manifest' and 'parents_dir'. "
            "Please specify only one."
        )

    if has_manifest:
        manifest_path = Path(input_config['parents_manifest'])
        if not manifest_path.exists():
            raise ConfigValidationError(f"Parent manifest not found: {manifest_path}")

    if has_dir:
        dir_path = Path(input_config['parents_dir'])
        if not dir_path.exists():
            raise ConfigValidationError(f"Parent directory not found: {dir_path}")
        if not dir_path.is_dir():
            raise ConfigValidationError(f"Parent path is not a directory: {dir_path}")


def _validate_generation_config(generation_config: Dict[str, Any]) -> None:
    """
    Validate the generation section.

    Args:
        generation_config: 'generation' section of the run configuration

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if 'pairs' not in generation_config:
        raise ConfigValidationError("Missing required field: 'generation.pairs'")

    num_pairs = generation_config['pairs']
    if isinstance(num_pairs, bool) or not isinstance(num_pairs, int) or num_pairs <= 0:
        raise ConfigValidationError(
            f"'generation.pairs' must be a positive integer, got: {num_pairs}"
        )


def _validate_crossover_config(crossover_config: Dict[str, Any]) -> None:
    """
    Validate the crossover override section.

    Args:
        crossover_config: 'crossover' section of the run configuration

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(crossover_config, dict):
        raise ConfigValidationError("'crossover' must be a dictionary")

    strategy = crossover_config.get('strategy')
    if strategy is not None and strategy not in STRATEGIES:
        raise ConfigValidationError(
            f"Invalid crossover strategy: '{strategy}'. Must be one of {', '.join(STRATEGIES)}"
        )

    probability = crossover_config.get('probability')
    if probability is not None and not (
        isinstance(probability, (int, float)) and 0.0 <= probability <= 1.0
    ):
        raise ConfigValidationError(
            f"'crossover.probability' must be between 0 and 1, got: {probability}"
        )

    num_cut_points = crossover_config.get('num_cut_points')
    if num_cut_points is not None and (
        isinstance(num_cut_points, bool) or not isinstance(num_cut_points, int) or num_cut_points < 0
    ):
        raise ConfigValidationError(
            f"'crossover.num_cut_points' must be a non-negative integer, got: {num_cut_points}"
        )

    cut_points = crossover_config.get('cut_points')
    if cut_points is not None and not (
        isinstance(cut_points, list) and all(isinstance(c, int) for c in cut_points)
    ):
        raise ConfigValidationError(
            f"'crossover.cut_points' must be a list of integers, got: {cut_points}"
        )


def run_from_config(config_path: str) -> None:
    """
    Load run configuration and execute an offspring run.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Various exceptions from the offspring run
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    from .orchestration import run_offspring_mode
    run_offspring_mode(config)

    print("\nRun completed successfully!")
