"""
Random draws for crossover operators.

All randomness flows through an explicitly passed numpy Generator so runs
are reproducible from a single seed.
"""

from typing import List, Optional, Tuple
import numpy as np

from .validation import InvalidArgumentError


def create_rng(seed: Optional[int] = None) -> Tuple[np.random.Generator, int]:
    """
    Create a seeded random number generator.

    Args:
        seed: Seed to use; a fresh one is drawn when None

    Returns:
        Tuple of (rng, seed) so the seed can be recorded for reproduction
    """
    if seed is None:
        seed = int(np.random.randint(0, 2**31))
    return np.random.default_rng(seed), int(seed)


def gen_int_rand_number(rng: np.random.Generator, low: int, high: int) -> int:
    """
    Draw a uniform integer from the inclusive range [low, high].

    Args:
        rng: Random number generator
        low: Lowest value that can be drawn
        high: Highest value that can be drawn

    Returns:
        Random integer
    """
    return int(rng.integers(low, high, endpoint=True))


def generate_mask(length: int, rng: np.random.Generator) -> List[bool]:
    """
    Draw an order-based crossover mask, one independent bit per position.

    Args:
        length: Feature vector length
        rng: Random number generator

    Returns:
        List of booleans; True marks a position inherited directly
    """
    return [gen_int_rand_number(rng, 0, 1) == 1 for _ in range(length)]


def generate_cut_points(
    length: int,
    num_cut_points: int,
    rng: np.random.Generator
) -> List[int]:
    """
    Draw distinct, ascending cut points for n-cut-point crossover.

    Cut points are drawn from [1, length) so every cut splits the vector;
    a cut at position 0 would only swap the roles of the offspring.

    Args:
        length: Feature vector length
        num_cut_points: Number of cut points to draw
        rng: Random number generator

    Returns:
        Sorted list of cut indices

    Raises:
        InvalidArgumentError: If num_cut_points is negative or exceeds length - 1
    """
    available = max(length - 1, 0)
    if num_cut_points < 0 or num_cut_points > available:
        raise InvalidArgumentError(
            f"Cannot draw {num_cut_points} cut points for a vector of length {length} "
            f"(at most {available})"
        )

    if num_cut_points == 0:
        return []

    cut_points = rng.choice(np.arange(1, length), size=num_cut_points, replace=False)
    return sorted(int(c) for c in cut_points)
