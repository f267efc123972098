"""
Concept accessor: query concepts out of wave datasets.

Every function takes the registry explicitly. Unknown concept keys are a
configuration error and raise UnknownConceptError; a concept that is not
fielded in a wave, or whose variable is missing from the loaded data, is a
diagnostic and yields None (or an empty table) instead.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple

import pandas as pd

from ..cleaning.missing import LabelTextPolicy, resolve_missing
from ..data.labeled import LabeledColumn, WaveDataset
from ..data.waves import Wave, key_by_wave
from ..diagnostics import (
    CONCEPT_UNMAPPED,
    NO_DATA,
    VARIABLE_MISSING,
    DiagnosticReport,
    emit,
)
from .registry import ConceptRegistry


def _check_concept(
    dataset: WaveDataset,
    concept: str,
    registry: ConceptRegistry,
    wave: Optional[Any],
) -> Tuple[Wave, Optional[str], Optional[str], str]:
    """
    Resolve a concept in a dataset.

    Returns (wave, variable, failure_kind, message); failure_kind is None
    when the concept is available.
    """
    wave = Wave.parse(wave) if wave is not None else dataset.wave
    var = registry.variable_for(concept, wave)

    if var is None:
        return wave, None, CONCEPT_UNMAPPED, f"Concept {concept} not mapped for {wave}"
    if var not in dataset:
        return wave, var, VARIABLE_MISSING, f"Variable {var} not found in {wave} data"
    return wave, var, None, f"Concept {concept} -> {var} in {wave}"


def get_concept(
    dataset: WaveDataset,
    concept: str,
    registry: ConceptRegistry,
    wave: Optional[Any] = None,
    clean: bool = True,
    policy: Optional[LabelTextPolicy] = None,
    report: Optional[DiagnosticReport] = None,
    prefer_harmonized: bool = False,
) -> Optional[LabeledColumn]:
    """
    Fetch the raw variable behind a concept for one wave.

    Args:
        dataset: Wave dataset to read from
        concept: Concept key
        registry: Concept registry
        wave: Wave to resolve the mapping for (defaults to dataset.wave)
        clean: Apply label-based missing-value cleaning. Applying it to an
               already-cleaned column changes nothing.
        policy: Label policy to clean with (default catalog if None)
        report: Optional DiagnosticReport
        prefer_harmonized: Return `<var>_harm` instead of the raw variable
                           when the dataset has been harmonized

    Returns:
        The (optionally cleaned) column, or None with a diagnostic if the
        concept is unmapped for the wave or its variable is missing.

    Raises:
        UnknownConceptError: If the concept is not registered
    """
    wave, var, failure, message = _check_concept(dataset, concept, registry, wave)
    if failure is not None:
        emit(failure, message, report, wave=wave, concept=concept, variable=var)
        return None

    column = dataset[var]
    if prefer_harmonized and f"{var}_harm" in dataset:
        column = dataset[f"{var}_harm"]
    if clean:
        column = resolve_missing(
            column, policy or LabelTextPolicy(), report=report, wave=wave, variable=var
        )
    return column


def get_concept_all_waves(
    concept: str,
    wave_datasets: Mapping[Any, WaveDataset],
    registry: ConceptRegistry,
    clean: bool = True,
    add_wave_column: bool = True,
    report: Optional[DiagnosticReport] = None,
    prefer_harmonized: bool = False,
    policy: Optional[LabelTextPolicy] = None,
) -> pd.DataFrame:
    """
    Stack one concept across waves into a long table.

    Waves where the concept is unmapped or missing contribute no rows.

    Returns:
        DataFrame with columns [wave, <concept>] (or [<concept>] when
        add_wave_column is False). Empty, with the same columns, if no wave
        yields data.

    Raises:
        ValueError: If two keys of wave_datasets name the same wave

    Example:
        >>> waves = {'W2': w2, 'W4': w4}
        >>> trust = get_concept_all_waves('trust_executive', waves, registry)
        >>> trust['wave'].unique().tolist()
        ['W2', 'W4']
    """
    registry.get(concept)

    columns = (['wave'] if add_wave_column else []) + [concept]
    frames = []
    for wave, dataset in key_by_wave(wave_datasets).items():
        column = get_concept(
            dataset, concept, registry, wave=wave, clean=clean, report=report,
            prefer_harmonized=prefer_harmonized, policy=policy,
        )
        if column is None:
            continue
        part = pd.DataFrame({concept: column.values.reset_index(drop=True)})
        if add_wave_column:
            part.insert(0, 'wave', wave.value)
        frames.append(part)

    if not frames:
        emit(NO_DATA, f"Concept {concept} not found in any wave", report, concept=concept)
        return pd.DataFrame(columns=columns)

    return pd.concat(frames, ignore_index=True)[columns]


def validate_concept(
    dataset: WaveDataset,
    concept: str,
    registry: ConceptRegistry,
    wave: Optional[Any] = None,
) -> Tuple[bool, str]:
    """
    Check that a concept can be extracted from a dataset.

    Returns:
        (ok, message). The message names the failed check: the concept is
        not mapped for the wave, or its variable is absent from the data.
    """
    _, _, failure, message = _check_concept(dataset, concept, registry, wave)
    if failure is not None:
        return False, f"✗ {message}"
    return True, f"✓ {message}"


def extract_concepts(
    dataset: WaveDataset,
    concepts: Iterable[str],
    registry: ConceptRegistry,
    wave: Optional[Any] = None,
    clean: bool = True,
    report: Optional[DiagnosticReport] = None,
    policy: Optional[LabelTextPolicy] = None,
) -> Optional[pd.DataFrame]:
    """
    Pull several concepts from one wave into a table, one column each.

    Returns None with a diagnostic if none of the concepts is available.
    """
    extracted = {}
    for concept in concepts:
        column = get_concept(
            dataset, concept, registry, wave=wave, clean=clean, policy=policy, report=report
        )
        if column is not None:
            extracted[concept] = column.values.reset_index(drop=True)

    if not extracted:
        emit(NO_DATA, "No concepts extracted", report, wave=wave or dataset.wave)
        return None
    return pd.DataFrame(extracted)


def concept_missingness(frame: pd.DataFrame, concept: str, wave_col: str = 'wave') -> pd.DataFrame:
    """
    Per-wave count of valid and missing values for a concept column.

    Works on an assembled table or the output of get_concept_all_waves.
    """
    if concept not in frame.columns:
        raise KeyError(f"Column '{concept}' not in table")

    grouped = frame.groupby(wave_col, sort=True)[concept]
    result = pd.DataFrame({
        'n_total': grouped.size(),
        'n_valid': grouped.count(),
    })
    result['n_missing'] = result['n_total'] - result['n_valid']
    result['pct_valid'] = (100 * result['n_valid'] / result['n_total']).round(1)
    return result.reset_index()
