"""
File loaders for raw wave files.

Each loader returns the data together with its label side-tables:
(DataFrame, variable_labels, value_labels), where variable_labels maps
column -> description and value_labels maps column -> {code: label text}.
SPSS and Stata files are read with pyreadstat so numeric codes are kept and
labels come from the file metadata; CSV files carry no labels.
"""

import re
import warnings
from pathlib import Path
from typing import Dict, List, Tuple, Any

import pandas as pd

LabeledTable = Tuple[pd.DataFrame, Dict[str, str], Dict[str, Dict[Any, str]]]


def _from_pyreadstat(df: pd.DataFrame, meta) -> LabeledTable:
    variable_labels = {
        col: label
        for col, label in zip(meta.column_names, meta.column_labels or [])
        if label
    }
    value_labels = {
        col: dict(labels)
        for col, labels in (meta.variable_value_labels or {}).items()
    }
    return df, variable_labels, value_labels


def load_spss(filepath: Path, **kwargs) -> LabeledTable:
    """
    Load an SPSS SAV file, keeping numeric codes and label metadata.

    Requires pyreadstat to be installed.
    """
    try:
        import pyreadstat
    except ImportError:
        raise ImportError(
            "Loading SPSS files requires pyreadstat. "
            "Install it with: pip install pyreadstat"
        )
    df, meta = pyreadstat.read_sav(str(filepath), apply_value_formats=False, **kwargs)
    return _from_pyreadstat(df, meta)


def load_stata(filepath: Path, **kwargs) -> LabeledTable:
    """Load a Stata DTA file, keeping numeric codes and label metadata."""
    try:
        import pyreadstat
    except ImportError:
        raise ImportError(
            "Loading Stata files requires pyreadstat. "
            "Install it with: pip install pyreadstat"
        )
    df, meta = pyreadstat.read_dta(str(filepath), apply_value_formats=False, **kwargs)
    return _from_pyreadstat(df, meta)


def load_csv(
    filepath: Path,
    encoding: str = 'utf-8',
    **kwargs
) -> LabeledTable:
    """
    Load a CSV file. CSV files carry no variable or value labels.

    Args:
        filepath: Path to the CSV file
        encoding: File encoding (default: utf-8)
        **kwargs: Additional arguments passed to pd.read_csv
    """
    encodings_to_try = [encoding, 'utf-8', 'latin-1', 'cp1252']

    # Set low_memory=False to avoid mixed type warnings
    kwargs.setdefault('low_memory', False)

    for enc in encodings_to_try:
        try:
            return pd.read_csv(filepath, encoding=enc, **kwargs), {}, {}
        except UnicodeDecodeError:
            continue

    # Last resort: replace undecodable bytes
    warnings.warn(f"Could not decode {filepath} with standard encodings, using errors='replace'")
    return pd.read_csv(filepath, encoding='utf-8', encoding_errors='replace', **kwargs), {}, {}


def load_file(
    filepath: Path,
    encoding: str = 'utf-8',
    **kwargs
) -> LabeledTable:
    """
    Load a data file, automatically detecting format from extension.

    Supported formats: .sav, .dta, .csv
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Data file not found: {filepath}")

    suffix = filepath.suffix.lower()

    if suffix == '.sav':
        return load_spss(filepath, **kwargs)
    elif suffix == '.dta':
        return load_stata(filepath, **kwargs)
    elif suffix == '.csv':
        return load_csv(filepath, encoding=encoding, **kwargs)
    else:
        raise ValueError(
            f"Unsupported file format: {suffix}. "
            f"Supported formats: .sav, .dta, .csv"
        )


def find_data_files(directory: Path, patterns: List[str]) -> List[Path]:
    """
    Find data files in a directory matching given patterns.

    Patterns are tried in order; returns files matching the first
    pattern that finds any files (sorted for deterministic ordering).
    """
    directory = Path(directory)

    if not directory.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")

    for pattern in patterns:
        matches = list(directory.glob(pattern))
        if matches:
            return sorted(matches)

    raise ValueError(
        f"No data files found in {directory} matching patterns: {patterns}"
    )


def clean_column_name(name: str) -> str:
    """
    Normalise a column name: lower case, non-alphanumerics to underscores.

    >>> clean_column_name('Q143A')
    'q143a'
    >>> clean_column_name('Se 3.1')
    'se_3_1'
    """
    cleaned = re.sub(r'[^0-9a-zA-Z]+', '_', str(name)).strip('_').lower()
    if not cleaned:
        cleaned = 'x'
    if cleaned[0].isdigit():
        cleaned = f"x{cleaned}"
    return cleaned


def clean_column_names(names: List[str]) -> Dict[str, str]:
    """Map original names to cleaned, de-duplicated names (suffix _2, _3, ...)."""
    seen: Dict[str, int] = {}
    mapping = {}
    for name in names:
        base = clean_column_name(name)
        count = seen.get(base, 0) + 1
        seen[base] = count
        mapping[name] = base if count == 1 else f"{base}_{count}"
    return mapping
