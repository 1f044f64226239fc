"""
Precondition checks for crossover operators.

Both operators assume equal-length parents; n-cut-point crossover assumes
ascending in-range cut points and order-based crossover assumes the parents
are permutations of the same genes. Violations raise InvalidArgumentError
instead of producing corrupted offspring.
"""

import operator
from typing import Any, Dict, Hashable, Sequence


class InvalidArgumentError(ValueError):
    """Raised when crossover inputs violate an operator precondition."""
    pass


def check_same_length(parent1: Sequence, parent2: Sequence) -> int:
    """
    Ensure both parents have the same number of genes.

    Args:
        parent1: First parent feature vector
        parent2: Second parent feature vector

    Returns:
        The shared length L

    Raises:
        InvalidArgumentError: If lengths differ
    """
    if len(parent1) != len(parent2):
        raise InvalidArgumentError(
            f"Parents must have equal length, got {len(parent1)} and {len(parent2)}"
        )
    return len(parent1)


def check_cut_points(cut_points: Sequence[int], length: int) -> None:
    """
    Ensure cut points are integers in [0, length) in non-decreasing order.

    Repeated values are accepted; n-cut-point crossover stops matching
    cut points after the first repeat.

    Args:
        cut_points: Cut indices
        length: Feature vector length

    Raises:
        InvalidArgumentError: If a cut point is not an integer, out of range,
            or smaller than its predecessor
    """
    previous = None
    for position, cut in enumerate(cut_points):
        # numpy integers are accepted through __index__
        if isinstance(cut, bool) or not hasattr(cut, "__index__"):
            raise InvalidArgumentError(
                f"Cut point #{position} must be an integer, got {cut!r}"
            )
        cut = operator.index(cut)

        if not 0 <= cut < length:
            raise InvalidArgumentError(
                f"Cut point #{position} ({cut}) out of range [0, {length})"
            )

        if previous is not None and cut < previous:
            raise InvalidArgumentError(
                f"Cut points must be in ascending order: {list(cut_points)}"
            )
        previous = cut


def build_position_index(features: Sequence[Hashable]) -> Dict[Any, int]:
    """
    Build the inverse permutation of a feature vector (gene -> position).

    Args:
        features: Feature vector with hashable, distinct genes

    Returns:
        Dictionary mapping each gene to its index

    Raises:
        InvalidArgumentError: If a gene appears twice or is unhashable
    """
    index = {}
    for position, gene in enumerate(features):
        try:
            seen_at = index.setdefault(gene, position)
        except TypeError as e:
            raise InvalidArgumentError(f"Gene {gene!r} is not hashable") from e
        if seen_at != position:
            raise InvalidArgumentError(
                f"Gene {gene!r} appears at positions {seen_at} and {position}; "
                f"order-based crossover requires a permutation"
            )
    return index


def lookup_position(position_index: Dict[Any, int], gene: Any) -> int:
    """
    Position of a gene within the complementary parent.

    Args:
        position_index: Inverse permutation of the complementary parent
        gene: Gene to look up

    Returns:
        Index of the gene

    Raises:
        InvalidArgumentError: If the gene is absent
    """
    try:
        return position_index[gene]
    except KeyError:
        raise InvalidArgumentError(
            f"Gene {gene!r} not found in the other parent; parents must be "
            f"permutations of the same genes"
        ) from None


def is_permutation_of(features_a: Sequence, features_b: Sequence) -> bool:
    """
    Check whether two feature vectors hold the same distinct genes.

    Args:
        features_a: First feature vector
        features_b: Second feature vector

    Returns:
        True if both hold exactly the same genes, each once
    """
    if len(features_a) != len(features_b):
        return False
    try:
        index_b = build_position_index(features_b)
        build_position_index(features_a)
    except InvalidArgumentError:
        return False
    return all(gene in index_b for gene in features_a)
