"""
Reading and writing the concept registry as a table.

File layout (CSV, one row per concept):

    concept, domain, description, w2_var, w3_var, w4_var, w5_var, w6_var,
    scale_type, direction, notes[, family]

Blank wave cells mean the concept is not fielded in that wave. A missing
file, missing columns or an unusable row is a configuration error: the
whole registry is rejected rather than individual rows skipped.

Harmonization families are not part of the table; rows that name a family
are resolved against the families passed in (the defaults unless given).
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional

import pandas as pd

from ..data.waves import ALL_WAVES
from ..errors import ConfigurationError, MalformedRegistryError
from .mappings import DEFAULT_FAMILIES
from .registry import CANONICAL_DIRECTION, ConceptMapping, ConceptRegistry, HarmonizationFamily

# yaml is optional - only needed if loading from YAML files
try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False


WAVE_COLUMNS = [w.registry_column for w in ALL_WAVES]
REQUIRED_COLUMNS = ['concept', 'domain', 'description'] + WAVE_COLUMNS + [
    'scale_type', 'direction', 'notes'
]


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ''
    return str(value).strip()


def _row_to_mapping(row: dict, line: int) -> ConceptMapping:
    try:
        return ConceptMapping(
            concept=_text(row.get('concept')),
            domain=_text(row.get('domain')),
            description=_text(row.get('description')),
            variable_by_wave={
                col.split('_')[0]: row.get(col) for col in WAVE_COLUMNS
            },
            scale_type=_text(row.get('scale_type')),
            canonical_direction=_text(row.get('direction')) or CANONICAL_DIRECTION,
            notes=_text(row.get('notes')),
            family=_text(row.get('family')) or None,
        )
    except ConfigurationError as e:
        raise MalformedRegistryError(f"Registry row {line}: {e}") from e


def registry_from_frame(
    frame: pd.DataFrame,
    families: Optional[Iterable[HarmonizationFamily]] = None,
) -> ConceptRegistry:
    """Build a registry from a DataFrame in the file layout."""
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise MalformedRegistryError(f"Concept mappings missing required columns: {missing}")
    if frame.empty:
        raise MalformedRegistryError("Concept mappings table has no rows")

    mappings: List[ConceptMapping] = [
        _row_to_mapping(row, line)
        # line numbers as seen in the file, header is line 1
        for line, row in enumerate(frame.to_dict(orient='records'), start=2)
    ]
    return ConceptRegistry(mappings, DEFAULT_FAMILIES if families is None else families)


def load_concept_mappings(
    path: Path | str,
    families: Optional[Iterable[HarmonizationFamily]] = None,
) -> ConceptRegistry:
    """
    Load a concept registry from CSV or YAML.

    A YAML file holds a top-level 'concepts' list whose items use the same
    keys as the CSV columns.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedRegistryError: If the table shape or any row is invalid
        DuplicateConceptError: If a concept key appears twice
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Concept mappings file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in ('.yaml', '.yml'):
        if not YAML_AVAILABLE:
            raise ImportError(
                "Loading from YAML requires pyyaml. "
                "Install it with: pip install pyyaml"
            )
        with open(path, 'r', encoding='utf-8') as f:
            cfg = yaml.safe_load(f) or {}
        rows = cfg.get('concepts')
        if not isinstance(rows, list):
            raise MalformedRegistryError(f"{path}: expected a top-level 'concepts' list")
        frame = pd.DataFrame(rows)
        # Only concept and domain must be spelled out in YAML
        for col in REQUIRED_COLUMNS[2:]:
            if col not in frame.columns:
                frame[col] = None
    elif suffix == '.csv':
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"Unsupported registry format: {suffix}. Use .csv or .yaml")

    return registry_from_frame(frame, families)


def save_concept_mappings(registry: ConceptRegistry, path: Path | str) -> Path:
    """Write a registry in the CSV file layout."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = registry.to_frame()
    frame.to_csv(path, index=False)
    return path
