"""
Missing-value resolution.

Two complementary strategies turn raw survey codes into the absent marker
(NaN):

- NumericCodePolicy: a fixed set of sentinel codes (0, 97, 98, 99 by
  default). Anything else passes through, out-of-range values included.
- LabelTextPolicy: a catalog of label texts ("Don't know", "Refused", ...).
  Numeric codes for missing answers vary by question across Asian Barometer
  waves, but the value-label text is consistent, so the codes are looked up
  through each column's own value-label dictionary.

Which policy applies to which column is an explicit choice of the caller.
Passing a sequence of policies applies them in order.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..data.labeled import LabeledColumn, WaveDataset
from ..diagnostics import DiagnosticReport, NO_VALUE_LABELS, VARIABLE_MISSING, emit


DEFAULT_MISSING_CODES: Tuple[int, ...] = (0, 97, 98, 99)

# SPSS value-label texts that mark a missing/invalid response.
# Exact, case-sensitive matches.
NA_LABELS: Tuple[str, ...] = (
    # Generic missing indicators
    "Missing",
    "NA",
    "N/A",
    "Not applicable",

    # Don't know / can't answer
    "don't understand",
    "Don't understand",
    "Do not understand the question",
    "don't understand the question",
    "Don't understand the question",
    "DK",
    "Don't know",
    "Can't choose",
    "Cannot choose",
    "Can't determine",

    # Refusal
    "Refused",
    "Refuse",
    "Decline to answer",
    "No answer",
    "No more answer",
    "No further reply",

    # Question-specific
    "Not a member of any organization or group",  # W2 q20
    "Unclassifiable / inconceivable",             # W2 q100
)


@dataclass(frozen=True)
class NumericCodePolicy:
    """Treat a fixed set of raw codes as missing."""
    codes: Tuple[Any, ...] = DEFAULT_MISSING_CODES

    def __post_init__(self):
        object.__setattr__(self, 'codes', tuple(self.codes))

    def missing_codes(self, column: LabeledColumn) -> List[Any]:
        return list(self.codes)


@dataclass(frozen=True)
class LabelTextPolicy:
    """Treat every code whose value label is in the catalog as missing."""
    labels: Tuple[str, ...] = NA_LABELS
    extra_labels: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'labels', tuple(self.labels))
        object.__setattr__(self, 'extra_labels', tuple(self.extra_labels))

    @property
    def catalog(self) -> frozenset:
        return frozenset(self.labels) | frozenset(self.extra_labels)

    def missing_codes(self, column: LabeledColumn) -> List[Any]:
        catalog = self.catalog
        return [code for code, text in column.value_labels.items() if text in catalog]


MissingPolicy = Union[NumericCodePolicy, LabelTextPolicy]


def coerce_numeric_text(values: pd.Series) -> pd.Series:
    """
    Convert numbers stored as text ('0', '97') to numeric.

    The series is returned unchanged unless every non-null value parses.
    """
    is_text = pd.api.types.is_object_dtype(values) or isinstance(values.dtype, pd.StringDtype)
    if not is_text or values.isna().all():
        return values
    converted = pd.to_numeric(values, errors='coerce')
    if converted[values.notna()].isna().any():
        return values
    return converted


def _as_policies(policy) -> List[MissingPolicy]:
    if isinstance(policy, (NumericCodePolicy, LabelTextPolicy)):
        return [policy]
    return list(policy)


def _apply_policy(
    column: LabeledColumn,
    policy: MissingPolicy,
    report: Optional[DiagnosticReport],
    wave,
    variable: Optional[str],
) -> LabeledColumn:
    if isinstance(policy, LabelTextPolicy) and not column.has_value_labels:
        name = variable or 'column'
        emit(
            NO_VALUE_LABELS,
            f"No value labels found for {name}; label-based cleaning skipped",
            report, wave=wave, variable=variable,
        )
        return column

    if isinstance(policy, NumericCodePolicy):
        values = coerce_numeric_text(column.values)
        if values is not column.values:
            column = column.with_values(values)

    codes = policy.missing_codes(column)
    if not codes:
        return column

    values = column.values.mask(column.values.isin(codes))
    return column.with_values(values)


def resolve_missing(
    column: Union[LabeledColumn, pd.Series],
    policy: Union[MissingPolicy, Sequence[MissingPolicy]] = NumericCodePolicy(),
    report: Optional[DiagnosticReport] = None,
    wave=None,
    variable: Optional[str] = None,
) -> Union[LabeledColumn, pd.Series]:
    """
    Replace missing-indicating codes with NaN.

    Args:
        column: LabeledColumn (or a bare Series, which has no value labels)
        policy: A policy or sequence of policies applied in order
        report: Optional DiagnosticReport to record findings in
        wave: Wave the column belongs to, for diagnostics
        variable: Variable name, for diagnostics

    Returns:
        A new column of the same type as the input. The input is unchanged.

    Example:
        >>> col = LabeledColumn(pd.Series([1, 2, 97, 98, 3, 0]))
        >>> resolve_missing(col, NumericCodePolicy()).values.tolist()
        [1.0, 2.0, nan, nan, 3.0, nan]
    """
    bare = not isinstance(column, LabeledColumn)
    result = LabeledColumn(values=pd.Series(column)) if bare else column

    for p in _as_policies(policy):
        result = _apply_policy(result, p, report, wave, variable)

    return result.values if bare else result


def clean_multiple_vars(
    dataset: WaveDataset,
    variables: Iterable[str],
    suffix: str = '_clean',
    policy: Union[MissingPolicy, Sequence[MissingPolicy]] = NumericCodePolicy(),
    report: Optional[DiagnosticReport] = None,
) -> WaveDataset:
    """
    Add cleaned copies of several variables as `<var><suffix>` columns.

    Variables not present in the dataset are reported and skipped.
    """
    new_columns = {}
    for var in variables:
        if var not in dataset:
            emit(
                VARIABLE_MISSING,
                f"Variable {var} not found in {dataset.wave} data",
                report, wave=dataset.wave, variable=var,
            )
            continue
        new_columns[f"{var}{suffix}"] = resolve_missing(
            dataset[var], policy, report=report, wave=dataset.wave, variable=var
        )
    return dataset.with_columns(new_columns)
