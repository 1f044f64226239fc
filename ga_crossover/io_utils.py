"""
I/O utilities for GA crossover.

Handles CSV parsing/serialization of feature vectors, manifest loading,
lineage logging, and YAML configuration/metadata files.
"""

import csv
from pathlib import Path
from typing import Any, Callable, Optional, Union
from datetime import datetime
import yaml

from .data_models import Individual, ParentManifest, LineageRecord


GENE_TYPES: dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "float": float,
}


def resolve_gene_type(gene_type: Union[str, Callable[[str], Any]]) -> Callable[[str], Any]:
    """
    Resolve a gene type name ("str", "int", "float") to a converter.

    Args:
        gene_type: Type name or converter callable

    Returns:
        Converter applied to each CSV gene cell

    Raises:
        ValueError: If the type name is unknown
    """
    if callable(gene_type):
        return gene_type
    if gene_type not in GENE_TYPES:
        raise ValueError(
            f"Unknown gene type: {gene_type!r}. Expected one of {sorted(GENE_TYPES)}"
        )
    return GENE_TYPES[gene_type]


def load_csv_to_individual(
    csv_path: Union[str, Path],
    individual_id: Optional[str] = None,
    gene_type: Union[str, Callable[[str], Any]] = str
) -> Individual:
    """
    Load a feature vector CSV file into an Individual object.

    CSV format:
        position,gene
        0,3
        1,0
        2,2
        ...

    Rows may appear in any order, but positions must cover 0..L-1 exactly once.

    Args:
        csv_path: Path to CSV file
        individual_id: Optional ID for the individual (defaults to filename stem)
        gene_type: Converter (or its name) applied to each gene cell

    Returns:
        Individual object with features loaded

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
    """
    csv_path = Path(csv_path)
    convert = resolve_gene_type(gene_type)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    if individual_id is None:
        individual_id = csv_path.stem

    genes_by_position = {}
    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        # Validate header
        if not all(col in (reader.fieldnames or []) for col in ['position', 'gene']):
            raise ValueError(f"Invalid CSV format in {csv_path}. Expected columns: position,gene")

        for row in reader:
            try:
                position = int(row['position'])
                gene = convert(row['gene'])
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid row in {csv_path}: {row}") from e

            if position in genes_by_position:
                raise ValueError(f"Duplicate position {position} in {csv_path}")
            genes_by_position[position] = gene

    if sorted(genes_by_position) != list(range(len(genes_by_position))):
        raise ValueError(
            f"Positions in {csv_path} must be contiguous from 0, "
            f"got {sorted(genes_by_position)}"
        )

    return Individual(
        id=individual_id,
        path=csv_path,
        features=[genes_by_position[i] for i in range(len(genes_by_position))],
        metadata={
            "loaded_at": datetime.now().isoformat(),
            "source_file": str(csv_path)
        }
    )


def save_individual_to_csv(
    individual: Individual,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save an Individual object to CSV file.

    Args:
        individual: Individual to save
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['position', 'gene'])
        for position, gene in enumerate(individual.features):
            writer.writerow([position, gene])

    individual.path = output_path
    individual.metadata["saved_at"] = datetime.now().isoformat()

    return output_path


def load_parent_manifest(
    manifest_path: Union[str, Path],
    gene_type: Union[str, Callable[[str], Any]] = str
) -> ParentManifest:
    """
    Load a parent manifest CSV file.

    CSV format:
        id,path,weight,tags
        tour_001,parents/tour_001.csv,1.0,elite
        tour_002,parents/tour_002.csv,0.5,

    Args:
        manifest_path: Path to manifest CSV
        gene_type: Converter (or its name) applied to each gene cell

    Returns:
        ParentManifest object

    Raises:
        FileNotFoundError: If manifest file doesn't exist
        ValueError: If manifest format is invalid
    """
    manifest_path = Path(manifest_path)

    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest file not found: {manifest_path}")

    parents = []
    weights = []

    with open(manifest_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        if not reader.fieldnames or 'id' not in reader.fieldnames or 'path' not in reader.fieldnames:
            raise ValueError("Invalid manifest format. Required columns: id, path")

        for row in reader:
            parent_path = Path(row['path'])

            # Relative paths are relative to the manifest
            if not parent_path.is_absolute():
                parent_path = manifest_path.parent / parent_path

            individual = load_csv_to_individual(parent_path, row['id'], gene_type)

            if row.get('tags'):
                individual.metadata['tags'] = row['tags']

            parents.append(individual)
            weight = float(row['weight']) if row.get('weight') else 1.0
            if weight < 0:
                raise ValueError(
                    f"Negative weight {weight} for parent '{row['id']}' in {manifest_path}"
                )
            weights.append(weight)

    return ParentManifest(
        parents=parents,
        metadata={
            'weights': weights,
            'manifest_path': str(manifest_path),
            'loaded_at': datetime.now().isoformat(),
        }
    )


def load_parents_from_directory(
    directory: Union[str, Path],
    pattern: str = "*.csv",
    gene_type: Union[str, Callable[[str], Any]] = str
) -> ParentManifest:
    """
    Load all CSV files from a directory as parents.

    Args:
        directory: Directory containing parent CSV files
        pattern: Glob pattern for CSV files (default: "*.csv")
        gene_type: Converter (or its name) applied to each gene cell

    Returns:
        ParentManifest with all loaded individuals

    Raises:
        FileNotFoundError: If directory doesn't exist
        ValueError: If no CSV files found
    """
    directory = Path(directory)

    if not directory.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")

    csv_files = sorted(directory.glob(pattern))

    if not csv_files:
        raise ValueError(f"No CSV files found in {directory} matching pattern {pattern}")

    parents = [load_csv_to_individual(csv_file, gene_type=gene_type) for csv_file in csv_files]

    return ParentManifest(
        parents=parents,
        metadata={
            'source_directory': str(directory),
            'loaded_at': datetime.now().isoformat(),
            'count': len(parents)
        }
    )


def save_lineage_log(
    lineage_records: list[LineageRecord],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save lineage records to CSV file.

    Args:
        lineage_records: List of LineageRecord objects
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved lineage log

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Lineage log already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        fieldnames = ['child_path', 'parent_ids', 'strategy', 'crossover_mask', 'seed', 'timestamp']
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for record in lineage_records:
            writer.writerow(record.to_dict())

    return output_path


def load_lineage_log(log_path: Union[str, Path]) -> list[LineageRecord]:
    """
    Load lineage records written by save_lineage_log.

    Args:
        log_path: Path to lineage CSV

    Returns:
        List of LineageRecord objects

    Raises:
        FileNotFoundError: If the log doesn't exist
    """
    log_path = Path(log_path)

    if not log_path.exists():
        raise FileNotFoundError(f"Lineage log not found: {log_path}")

    with open(log_path, 'r', newline='') as f:
        return [LineageRecord.from_dict(row) for row in csv.DictReader(f)]


def generate_child_path(
    output_folder: Path,
    index: int,
    prefix: str = "child",
    format_string: str = "{:03d}"
) -> Path:
    """
    Generate a standard child file path.

    Args:
        output_folder: Folder for this run's children
        index: Child index
        prefix: Filename prefix
        format_string: Format string for index

    Returns:
        Path for child CSV file
    """
    filename = f"{prefix}_{format_string.format(index)}.csv"
    return Path(output_folder) / filename


def load_config(config_path: Union[str, Path]) -> dict:
    """
    Load crossover configuration from YAML file.

    Args:
        config_path: Path to config YAML file

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def save_metadata(
    metadata: dict,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save metadata to YAML sidecar file.

    Args:
        metadata: Metadata dictionary
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved metadata file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Metadata file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.safe_dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path


def validate_csv_format(csv_path: Union[str, Path]) -> tuple[bool, Optional[str]]:
    """
    Validate that CSV file has correct format.

    Args:
        csv_path: Path to CSV file

    Returns:
        Tuple of (is_valid, error_message)
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        return False, f"File not found: {csv_path}"

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        required_cols = {'position', 'gene'}
        if not required_cols.issubset(set(reader.fieldnames or [])):
            return False, f"Missing required columns. Expected: {sorted(required_cols)}"

        positions = []
        for row_count, row in enumerate(reader, start=1):
            try:
                positions.append(int(row['position']))
            except (TypeError, ValueError):
                return False, f"Invalid position in row {row_count}"

    if not positions:
        return False, "CSV file is empty (no genes)"

    if sorted(positions) != list(range(len(positions))):
        return False, "Positions must cover 0..L-1 exactly once"

    return True, None
