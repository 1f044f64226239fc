"""
Orchestration module for GA crossover.

Implements the offspring generation workflow: load parents, recombine
selected pairs, save children and lineage.
"""

from typing import Dict, Tuple
from pathlib import Path
from datetime import datetime
import numpy as np

from .data_models import Individual, LineageRecord, ParentManifest
from .io_utils import (
    load_config,
    load_parent_manifest,
    load_parents_from_directory,
    save_individual_to_csv,
    save_lineage_log,
    save_metadata,
    generate_child_path,
)
from .crossover import apply_crossover, crossover_statistics
from .random_utils import create_rng


DEFAULT_GA_CONFIG = Path(__file__).parent / "ga_crossover_config.yaml"


def resolve_crossover_config(run_config: Dict) -> Tuple[Dict, Dict]:
    """
    Merge packaged defaults, the referenced GA config and run overrides.

    Args:
        run_config: Run configuration dict from YAML

    Returns:
        Tuple of (ga_config, crossover_config)
    """
    ga_config = load_config(DEFAULT_GA_CONFIG)
    if 'ga_config' in run_config:
        custom = load_config(run_config['ga_config'])
        ga_config.update({k: v for k, v in custom.items() if k != 'crossover'})
        ga_config['crossover'] = {**ga_config.get('crossover', {}), **custom.get('crossover', {})}

    crossover_config = {**ga_config.get('crossover', {}), **run_config.get('crossover', {})}

    # Whichever of cut_points / num_cut_points the run sets wins over the other
    run_crossover = run_config.get('crossover', {})
    if 'cut_points' in run_crossover:
        crossover_config.pop('num_cut_points', None)
    elif 'num_cut_points' in run_crossover:
        crossover_config.pop('cut_points', None)

    return ga_config, crossover_config


def load_parents(run_config: Dict) -> ParentManifest:
    """
    Load parents from the manifest or directory named in the run config.

    Args:
        run_config: Run configuration dict from YAML

    Returns:
        ParentManifest with at least two parents

    Raises:
        ValueError: If fewer than two parents are available
    """
    input_config = run_config['input']
    gene_type = run_config.get('gene_type', 'str')

    if 'parents_manifest' in input_config:
        manifest = load_parent_manifest(input_config['parents_manifest'], gene_type)
    else:
        manifest = load_parents_from_directory(
            input_config['parents_dir'],
            input_config.get('pattern', '*.csv'),
            gene_type
        )

    if len(manifest) < 2:
        raise ValueError(f"Crossover needs at least two parents, found {len(manifest)}")

    return manifest


def select_parent_pair(
    manifest: ParentManifest,
    rng: np.random.Generator
) -> Tuple[Individual, Individual]:
    """
    Pick two distinct parents, weighted by manifest weights when present.

    Args:
        manifest: Available parents
        rng: Random number generator

    Returns:
        Tuple of (parent_a, parent_b)
    """
    weights = manifest.get_weights()
    probabilities = None
    if weights is not None:
        # Negative weights count as zero
        weights = np.clip(np.asarray(weights, dtype=float), 0.0, None)
        if np.count_nonzero(weights > 0) >= 2:
            probabilities = weights / weights.sum()

    idx_a, idx_b = rng.choice(len(manifest), size=2, replace=False, p=probabilities)
    return manifest.parents[int(idx_a)], manifest.parents[int(idx_b)]


def run_offspring_mode(run_config: Dict) -> None:
    """
    Generate offspring pairs by crossover of selected parents.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Resolve crossover settings (defaults < ga_config < run overrides)
        2. Setup RNG (run_config['random_seed'] or ga_config seed)
        3. Load parents from manifest or directory
        4. Create output directory: run_config['output']['root']
        5. For k in range(run_config['generation']['pairs']):
           a. Select two distinct parents
           b. Apply crossover -> two children
           c. Save children to output_root/child_{2k:03d}.csv and child_{2k+1:03d}.csv
           d. Create LineageRecords
        6. Save lineage log and run metadata
        7. Print summary report

    Returns:
        None (writes to disk)
    """
    print("=" * 70)
    print("OFFSPRING MODE")
    print("=" * 70)

    ga_config, crossover_config = resolve_crossover_config(run_config)
    strategy = crossover_config.get('strategy', 'n_cut_point')
    print(f"Crossover strategy: {strategy}")

    seed = run_config.get('random_seed', ga_config.get('random_seed'))
    rng, seed = create_rng(seed)
    print(f"Random seed: {seed}")

    manifest = load_parents(run_config)
    print(f"Loaded {len(manifest)} parents: {', '.join(p.id for p in manifest.parents)}")

    output_root = Path(run_config['output']['root'])
    overwrite = run_config['output'].get('overwrite', False)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    output_root.mkdir(parents=True, exist_ok=overwrite)
    print(f"Output directory: {output_root}\n")

    num_pairs = run_config['generation']['pairs']
    print(f"Generating {num_pairs} offspring pairs...")
    print()

    lineage_records = []
    skipped = 0
    permutation_children = 0

    for k in range(num_pairs):
        parent_a, parent_b = select_parent_pair(manifest, rng)
        children, crossover_info = apply_crossover(parent_a, parent_b, crossover_config, rng)
        stats = crossover_statistics(children, (parent_a, parent_b))

        if not crossover_info['applied']:
            skipped += 1
        permutation_children += stats['child_a_is_permutation'] + stats['child_b_is_permutation']

        mask = crossover_info.get('cut_points', crossover_info.get('mask'))
        timestamp = datetime.now().isoformat()

        for offset, child in enumerate(children):
            child_path = generate_child_path(output_root, 2 * k + offset)
            child.id = child_path.stem
            save_individual_to_csv(child, child_path, overwrite=overwrite)

            lineage_records.append(
                LineageRecord(
                    child_path=child_path,
                    parent_ids=child.metadata['parent_ids'],
                    strategy=strategy,
                    crossover_mask=mask,
                    seed=seed,
                    timestamp=timestamp,
                )
            )

        if (k + 1) % 10 == 0 or k == num_pairs - 1:
            print(f"  Progress: {k+1}/{num_pairs} pairs generated")

    lineage_log_path = output_root / 'lineage_log.csv'
    save_lineage_log(lineage_records, lineage_log_path, overwrite=overwrite)

    save_metadata(
        {
            'seed': seed,
            'strategy': strategy,
            'crossover': crossover_config,
            'pairs': num_pairs,
            'parents': [p.id for p in manifest.parents],
            'created_at': datetime.now().isoformat(),
        },
        output_root / 'run_metadata.yaml',
        overwrite=overwrite
    )

    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Children written: {len(lineage_records)}")
    print(f"Pairs copied without crossover: {skipped}")
    print(f"Children that are permutations of their parents: {permutation_children}")
    print(f"Lineage log: {lineage_log_path}")
