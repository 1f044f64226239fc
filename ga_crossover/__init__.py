"""
GA Crossover

This package provides crossover operators for genetic algorithms and a
config-driven runner that recombines parent feature vectors stored as CSV.

Key Features:
- N-cut-point crossover for feature vectors of any gene type
- Order-based crossover that keeps permutation encodings (tours) valid
- Explicit precondition checks instead of silently corrupted offspring
- Reproducible runs (seeded numpy Generator) with lineage logging

Modules:
- data_models: Core data structures (Individual, ParentManifest, LineageRecord, ValueWithIndex)
- validation: Precondition checks and InvalidArgumentError
- random_utils: Seeded RNG, masks and cut point generation
- crossover: N-cut-point and order-based crossover operators
- io_utils: CSV I/O, manifest parsing, lineage logging, YAML config
- orchestration: Offspring generation workflow
- cli: Run configuration loading and validation
"""

__version__ = "0.1.0"
__author__ = "Optimization Team"

from .data_models import Individual, ParentManifest, LineageRecord, ValueWithIndex
from .validation import InvalidArgumentError
from .crossover import alternate_n_cut_points, order_based, order_based_with_mask

__all__ = [
    "Individual",
    "ParentManifest",
    "LineageRecord",
    "ValueWithIndex",
    "InvalidArgumentError",
    "alternate_n_cut_points",
    "order_based",
    "order_based_with_mask",
]
