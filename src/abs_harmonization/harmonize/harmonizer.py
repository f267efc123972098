"""
Per-wave harmonization.

For one wave this module:

1. cleans every variable of every harmonization family registered for the
   wave with the numeric sentinel policy (0, 97, 98, 99 -> NaN),
2. reverses the scale when the family's ScaleSpec for the wave says the raw
   polarity is descending, using that ScaleSpec's width,
3. stores the result as `<var>_harm` with an audit note on its label,
4. builds one column per registry concept, taken from `<var>_harm` when it
   exists and from the raw variable otherwise.

Raw columns are never modified or dropped. Families without a ScaleSpec for
the wave and family variables not fielded in the wave are skipped silently;
a concept variable declared by the registry but missing from the data is
reported as a diagnostic.
"""

import logging
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd

from ..cleaning.missing import DEFAULT_MISSING_CODES, NumericCodePolicy, resolve_missing
from ..cleaning.scales import ScaleSpec, harmonize_scale
from ..concepts.registry import ConceptRegistry, HarmonizationFamily
from ..data.labeled import LabeledColumn, WaveDataset
from ..diagnostics import DiagnosticReport, VARIABLE_MISSING, emit
from .assembler import WAVE_COL

logger = logging.getLogger(__name__)

HARM_SUFFIX = '_harm'


def harmonized_name(variable: str) -> str:
    return f"{variable}{HARM_SUFFIX}"


def _harmonized_value_labels(value_labels: Dict[Any, str], spec: ScaleSpec) -> Dict[Any, str]:
    """
    Re-key value labels to the harmonized codes.

    Out-of-range codes pass through unreversed scales unchanged, so their
    labels are kept; reversal turns them into NaN, so their labels go.
    """
    relabeled = {}
    for code, text in value_labels.items():
        try:
            v = float(code)
        except (TypeError, ValueError):
            continue
        if not (v.is_integer() and 1 <= v <= spec.width):
            if not spec.needs_reversal:
                # keys are numeric either way, text codes ('8') included
                relabeled[int(v) if v.is_integer() else v] = text
            continue
        new_code = spec.width + 1 - int(v) if spec.needs_reversal else int(v)
        relabeled[new_code] = text
    return dict(sorted(relabeled.items(), key=lambda kv: float(kv[0])))


def harmonize_family(
    dataset: WaveDataset,
    family: HarmonizationFamily,
    report: Optional[DiagnosticReport] = None,
    missing_codes: Sequence[Any] = DEFAULT_MISSING_CODES,
) -> WaveDataset:
    """
    Add `<var>_harm` columns for one family in one wave.

    Returns the dataset unchanged if the family has no ScaleSpec for the wave.
    """
    spec = family.scale_for(dataset.wave)
    if spec is None:
        logger.debug("%s: family '%s' not harmonized in this wave", dataset.wave, family.name)
        return dataset

    policy = NumericCodePolicy(tuple(missing_codes))
    annotation = family.annotation(spec)
    new_columns = {}

    for var in family.variables:
        if var not in dataset:
            continue
        raw = dataset[var]
        cleaned = resolve_missing(raw, policy, report=report, wave=dataset.wave, variable=var)
        values = harmonize_scale(cleaned.values, spec)
        label = f"{raw.label} {annotation}" if raw.label else annotation
        new_columns[harmonized_name(var)] = LabeledColumn(
            values=values,
            label=label,
            value_labels=_harmonized_value_labels(raw.value_labels, spec),
        )

    logger.debug(
        "%s: family '%s' harmonized %d variables (%dpt, %s)",
        dataset.wave, family.name, len(new_columns), spec.width, spec.direction.value,
    )
    return dataset.with_columns(new_columns)


def standardize_variables(
    dataset: WaveDataset,
    registry: ConceptRegistry,
    harmonize: bool = True,
    report: Optional[DiagnosticReport] = None,
    missing_codes: Sequence[Any] = DEFAULT_MISSING_CODES,
    fill_absent: bool = True,
) -> WaveDataset:
    """
    Harmonize all families for the dataset's wave, then add concept columns.

    Args:
        dataset: Raw wave dataset
        registry: Concept registry (read-only)
        harmonize: If False, concept columns are copied from raw variables
        report: Optional DiagnosticReport to record findings in
        missing_codes: Sentinel codes cleaned before scale harmonization
        fill_absent: If True, concepts without data in this wave still get an
                     all-NaN column so every wave carries every concept

    Returns:
        A new WaveDataset; the input is not modified.
    """
    wave = dataset.wave

    if harmonize:
        for family in registry.families_for_wave(wave):
            dataset = harmonize_family(dataset, family, report=report, missing_codes=missing_codes)

    concept_columns = {}
    for mapping in registry:
        var = mapping.variable_for(wave)
        source = None
        if var is not None:
            if var in dataset:
                source = dataset.get(harmonized_name(var))
                if source is None:
                    source = dataset[var]
            else:
                emit(
                    VARIABLE_MISSING,
                    f"Variable {var} for concept {mapping.concept} not found in {wave} data",
                    report, wave=wave, concept=mapping.concept, variable=var,
                )

        if source is not None:
            concept_columns[mapping.concept] = LabeledColumn(
                values=source.values.copy(),
                label=dataset[var].label,
                value_labels=source.value_labels,
            )
        elif fill_absent:
            concept_columns[mapping.concept] = LabeledColumn(
                values=pd.Series(np.nan, index=range(dataset.n_rows), dtype=float),
                label=mapping.description or None,
            )

    return dataset.with_columns(concept_columns)


def harmonize_wave(
    dataset: WaveDataset,
    registry: ConceptRegistry,
    report: Optional[DiagnosticReport] = None,
    add_wave_column: bool = True,
    missing_codes: Sequence[Any] = DEFAULT_MISSING_CODES,
) -> WaveDataset:
    """
    Apply every harmonization step to one wave.

    Raises:
        ValueError: If add_wave_column is set and the data already has a
                    'wave' column holding anything but the wave tag

    Example:
        >>> registry = default_registry()
        >>> w4 = harmonize_wave(raw_w4, registry)
        >>> w4['trust_executive'].label
        'Trust in the president/prime minister'
    """
    if add_wave_column:
        existing = dataset.get(WAVE_COL)
        if existing is not None and not (existing.values == dataset.wave.value).all():
            raise ValueError(
                f"{dataset.wave}: raw column '{WAVE_COL}' would be overwritten by the wave tag"
            )
        dataset = dataset.with_columns({
            WAVE_COL: LabeledColumn(
                values=pd.Series([dataset.wave.value] * dataset.n_rows, dtype=object),
                label='Survey wave',
            )
        })
    return standardize_variables(
        dataset, registry, harmonize=True, report=report, missing_codes=missing_codes
    )
