"""
Data models for GA crossover.

Core data structures representing individuals, parent manifests, lineage
records, and the transient (value, index) pairs used by order-based crossover.
"""

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any

from .validation import is_permutation_of


STRATEGIES = ("n_cut_point", "order_based")


@dataclass(order=True)
class ValueWithIndex:
    """
    A gene value paired with the position it occupies in the other parent.

    Ordering is defined solely by ``index``; ``value`` never takes part in
    comparisons. Two pairs can only share an index when a parent holds a
    duplicate gene, which validation rejects before sorting.
    """
    index: int
    value: Any = field(compare=False)


@dataclass
class Individual:
    """
    Represents a single feature vector (individual in GA population).

    Attributes:
        id: Unique identifier for this individual
        path: Path to CSV file containing the feature vector
        features: Ordered list of genes
        metadata: Additional information (lineage, timestamps, etc.)
    """
    id: str
    path: Path
    features: list[Any]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Ensure path is a Path object."""
        if not isinstance(self.path, Path):
            self.path = Path(self.path)

    def copy(self) -> "Individual":
        """
        Create a copy of this individual with its own feature list.

        Returns:
            New Individual with copied features and metadata
        """
        return Individual(
            id=self.id,
            path=self.path,
            features=list(self.features),
            metadata=self.metadata.copy(),
        )

    def length(self) -> int:
        """Number of genes in the feature vector."""
        return len(self.features)

    def is_permutation_of(self, other: "Individual") -> bool:
        """
        Check whether both individuals hold the same genes, each exactly once.

        Args:
            other: Individual to compare against

        Returns:
            True if the feature vectors are permutations of each other
        """
        return is_permutation_of(self.features, other.features)


@dataclass
class ParentManifest:
    """
    Represents the set of parents available to an offspring run.

    Attributes:
        parents: List of Individual objects
        metadata: Additional information (weights, source, load time, etc.)
    """
    parents: list[Individual]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate manifest."""
        if not self.parents:
            raise ValueError("ParentManifest must contain at least one parent")

    def get_parent_by_id(self, parent_id: str) -> Optional[Individual]:
        """
        Retrieve parent by ID.

        Args:
            parent_id: ID of parent to retrieve

        Returns:
            Parent Individual if found, None otherwise
        """
        for parent in self.parents:
            if parent.id == parent_id:
                return parent
        return None

    def get_weights(self) -> Optional[list[float]]:
        """
        Get sampling weights for parents if available.

        Returns:
            List of weights (same length as parents) or None if not provided
        """
        if "weights" in self.metadata:
            weights = self.metadata["weights"]
            if len(weights) == len(self.parents):
                return weights
        return None

    def __len__(self) -> int:
        """Number of parents in manifest."""
        return len(self.parents)


@dataclass
class LineageRecord:
    """
    Tracks provenance of a generated child.

    Attributes:
        child_path: Path to child CSV file
        parent_ids: IDs of the two parents (the child's own parent first)
        strategy: Crossover strategy ("n_cut_point" or "order_based")
        crossover_mask: Cut points or boolean mask used, None if crossover was skipped
        seed: Random seed of the run
        timestamp: When this child was created
        metadata: Additional information
    """
    child_path: Path
    parent_ids: list[str]
    strategy: str
    crossover_mask: Optional[list]
    seed: int
    timestamp: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate lineage record and ensure path is Path object."""
        if not isinstance(self.child_path, Path):
            self.child_path = Path(self.child_path)

        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Invalid strategy: {self.strategy}. Must be one of {', '.join(STRATEGIES)}"
            )

        if len(self.parent_ids) != 2:
            raise ValueError("Crossover lineage must have exactly two parents")

    def to_dict(self) -> dict[str, Any]:
        """
        Convert lineage record to dictionary for CSV export.

        Returns:
            Dictionary with string-serializable values
        """
        return {
            "child_path": str(self.child_path),
            "parent_ids": ",".join(self.parent_ids),
            "strategy": self.strategy,
            "crossover_mask": str(self.crossover_mask) if self.crossover_mask is not None else "",
            "seed": self.seed,
            "timestamp": self.timestamp or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineageRecord":
        """
        Create lineage record from dictionary (e.g., from CSV).

        Args:
            data: Dictionary with lineage information

        Returns:
            LineageRecord instance

        Raises:
            ValueError: If the stored crossover mask cannot be parsed
        """
        crossover_mask = None
        if data.get("crossover_mask"):
            try:
                crossover_mask = ast.literal_eval(data["crossover_mask"])
            except (ValueError, SyntaxError) as e:
                raise ValueError(f"Unreadable crossover mask: {data['crossover_mask']!r}") from e

        return cls(
            child_path=Path(data["child_path"]),
            parent_ids=data["parent_ids"].split(","),
            strategy=data["strategy"],
            crossover_mask=crossover_mask,
            seed=int(data["seed"]),
            timestamp=data.get("timestamp") or None,
        )
