"""
Crossover operators for GA crossover.

Implements n-cut-point crossover for generic feature vectors and
order-based crossover for permutation encodings (e.g. routing tours).
"""

from typing import Any, Dict, List, Sequence, Tuple
import numpy as np

from .data_models import Individual, ValueWithIndex, STRATEGIES
from .random_utils import generate_cut_points, generate_mask
from .validation import (
    InvalidArgumentError,
    build_position_index,
    check_cut_points,
    check_same_length,
    is_permutation_of,
    lookup_position,
)


def alternate_n_cut_points(
    parent1: Sequence,
    parent2: Sequence,
    cut_points: Sequence[int]
) -> Tuple[List, List]:
    """
    Combine two parents with n-cut-point crossover.

    Positions are split into segments at each cut point. Segments alternate
    which parent feeds which offspring, starting with parent1 -> offspring1.

    Args:
        parent1: First parent feature vector
        parent2: Second parent feature vector (same length)
        cut_points: Ascending cut indices in [0, len(parent1))

    Returns:
        Tuple of (offspring1, offspring2)

    Raises:
        InvalidArgumentError: If lengths differ or cut points are invalid

    Example:
        >>> alternate_n_cut_points("ABC", "XYZ", [1, 2])
        (['A', 'Y', 'C'], ['X', 'B', 'Z'])
    """
    length = check_same_length(parent1, parent2)
    check_cut_points(cut_points, length)

    offspring1 = []
    offspring2 = []

    j = 0
    for i in range(length):
        # At most one segment switch per position
        if j < len(cut_points) and i == cut_points[j]:
            j += 1

        if j % 2 == 0:
            offspring1.append(parent1[i])
            offspring2.append(parent2[i])
        else:
            offspring1.append(parent2[i])
            offspring2.append(parent1[i])

    return offspring1, offspring2


def order_based_with_mask(
    parent1: Sequence,
    parent2: Sequence,
    mask: Sequence[bool]
) -> Tuple[List, List]:
    """
    Order-based crossover with a given inheritance mask.

    Positions where the mask is set keep the gene of the offspring's own
    parent. The remaining genes fill the free positions, left to right, in
    the relative order they hold in the other parent. If both parents are
    permutations of the same genes, so are both offspring.

    Args:
        parent1: First parent (permutation)
        parent2: Second parent (permutation of the same genes)
        mask: One flag per position; True means inherited directly

    Returns:
        Tuple of (offspring1, offspring2)

    Raises:
        InvalidArgumentError: If lengths differ or the parents are not
            permutations of the same genes
    """
    length = check_same_length(parent1, parent2)
    if len(mask) != length:
        raise InvalidArgumentError(
            f"Mask length ({len(mask)}) must match parent length ({length})"
        )

    position_in_parent1 = build_position_index(parent1)
    position_in_parent2 = build_position_index(parent2)

    # Equal length, distinct genes and parent1 within parent2 make a permutation
    for gene in parent1:
        lookup_position(position_in_parent2, gene)

    offspring1 = [None] * length
    offspring2 = [None] * length

    # Fixed positions, plus the free genes keyed by position in the other parent
    free_genes1 = []
    free_genes2 = []

    for i in range(length):
        if mask[i]:
            offspring1[i] = parent1[i]
            offspring2[i] = parent2[i]
        else:
            free_genes1.append(
                ValueWithIndex(lookup_position(position_in_parent2, parent1[i]), parent1[i])
            )
            free_genes2.append(
                ValueWithIndex(lookup_position(position_in_parent1, parent2[i]), parent2[i])
            )

    free_genes1.sort()
    free_genes2.sort()

    j = 0
    for i in range(length):
        if not mask[i]:
            offspring1[i] = free_genes1[j].value
            offspring2[i] = free_genes2[j].value
            j += 1

    return offspring1, offspring2


def order_based(
    parent1: Sequence,
    parent2: Sequence,
    rng: np.random.Generator
) -> Tuple[List, List]:
    """
    Combine two permutation parents with order-based crossover.

    Draws a fresh mask (one uniform bit per position) and applies
    order_based_with_mask.

    Args:
        parent1: First parent (permutation)
        parent2: Second parent (permutation of the same genes)
        rng: Random number generator

    Returns:
        Tuple of (offspring1, offspring2)

    Raises:
        InvalidArgumentError: If the parents are not permutations of the same genes
    """
    check_same_length(parent1, parent2)
    mask = generate_mask(len(parent1), rng)
    return order_based_with_mask(parent1, parent2, mask)


def apply_crossover(
    parent_a: Individual,
    parent_b: Individual,
    config: Dict,
    rng: np.random.Generator
) -> Tuple[Tuple[Individual, Individual], Dict]:
    """
    Apply crossover using configured strategy.

    This is the main entry point for crossover operations on individuals.

    Args:
        parent_a: First parent
        parent_b: Second parent
        config: Crossover configuration (strategy, probability, cut points)
        rng: Random number generator

    Returns:
        Tuple of ((child_a, child_b), crossover_info)
        where crossover_info records the strategy and the cut points or
        mask that were used

    Raises:
        ValueError: If strategy is unknown
        InvalidArgumentError: If the parents violate the strategy's preconditions
    """
    strategy = config.get('strategy', 'n_cut_point')
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown crossover strategy: {strategy}")

    probability = config.get('probability', 1.0)
    crossover_info: Dict[str, Any] = {'strategy': strategy, 'applied': True}

    if rng.random() >= probability:
        features_a, features_b = list(parent_a.features), list(parent_b.features)
        crossover_info['applied'] = False

    elif strategy == 'n_cut_point':
        cut_points = config.get('cut_points')
        if cut_points is None:
            length = check_same_length(parent_a.features, parent_b.features)
            cut_points = generate_cut_points(length, config.get('num_cut_points', 1), rng)
        features_a, features_b = alternate_n_cut_points(
            parent_a.features, parent_b.features, cut_points
        )
        crossover_info['cut_points'] = list(cut_points)

    else:
        check_same_length(parent_a.features, parent_b.features)
        mask = generate_mask(len(parent_a.features), rng)
        features_a, features_b = order_based_with_mask(
            parent_a.features, parent_b.features, mask
        )
        crossover_info['mask'] = mask

    children = []
    for suffix, features, own, other in (
        ("a", features_a, parent_a, parent_b),
        ("b", features_b, parent_b, parent_a),
    ):
        child_id = f"{parent_a.id}_x_{parent_b.id}_{suffix}"
        children.append(Individual(
            id=child_id,
            path=own.path.parent / f"{child_id}.csv",
            features=features,
            metadata={
                'parent_ids': [own.id, other.id],
                'crossover_strategy': strategy,
                'crossover_applied': crossover_info['applied'],
            }
        ))

    return (children[0], children[1]), crossover_info


def crossover_statistics(
    children: Tuple[Individual, Individual],
    parents: Tuple[Individual, Individual]
) -> Dict:
    """
    Calculate statistics about the crossover operation.

    Args:
        children: (child_a, child_b) as returned by apply_crossover
        parents: (parent_a, parent_b)

    Returns:
        Dictionary with crossover statistics
    """
    parent_a, parent_b = parents
    stats = {'length': parent_a.length()}

    for name, child in zip(("child_a", "child_b"), children):
        stats[f'{name}_from_parent_a'] = sum(
            gene == parent_gene for gene, parent_gene in zip(child.features, parent_a.features)
        )
        stats[f'{name}_from_parent_b'] = sum(
            gene == parent_gene for gene, parent_gene in zip(child.features, parent_b.features)
        )
        stats[f'{name}_is_permutation'] = is_permutation_of(child.features, parent_a.features)

    return stats
