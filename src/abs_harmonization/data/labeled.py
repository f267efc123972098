"""
Labeled column and wave dataset containers.

These mirror what SPSS files carry: every column holds raw response codes,
an optional variable label (the question text) and an optional dictionary
of value labels (code -> text). Instances are never modified in place;
every transformation returns a new column or dataset.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

import numpy as np
import pandas as pd

from .waves import Wave


@dataclass(frozen=True, eq=False)
class LabeledColumn:
    """
    A single survey variable with its labels.

    Attributes:
        values: Raw response values, one per respondent
        label: Human-readable variable description (question text)
        value_labels: Mapping of raw code -> label text. Empty when the
                      source file carried no value labels.
    """
    values: pd.Series
    label: Optional[str] = None
    value_labels: Dict[Any, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.values, pd.Series):
            object.__setattr__(self, 'values', pd.Series(self.values))
        object.__setattr__(self, 'value_labels', dict(self.value_labels or {}))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def has_value_labels(self) -> bool:
        return bool(self.value_labels)

    def with_values(
        self,
        values: pd.Series,
        label: Optional[str] = None,
    ) -> 'LabeledColumn':
        """Return a new column with the same value labels and new values."""
        return LabeledColumn(
            values=values,
            label=self.label if label is None else label,
            value_labels=self.value_labels,
        )

    def label_for(self, code: Any) -> Optional[str]:
        """Look up the label text for a raw code, tolerating 1 vs 1.0."""
        if code in self.value_labels:
            return self.value_labels[code]
        try:
            as_float = float(code)
        except (TypeError, ValueError):
            return None
        for key, text in self.value_labels.items():
            try:
                if float(key) == as_float:
                    return text
            except (TypeError, ValueError):
                continue
        return None

    def n_missing(self) -> int:
        return int(self.values.isna().sum())

    def describe(self) -> str:
        lines = [self.label or '(no label)']
        for code, text in self.value_labels.items():
            lines.append(f"  {code} -> {text}")
        return '\n'.join(lines)


class WaveDataset:
    """
    All variables for one survey wave; rows are respondents.

    Example:
        >>> ds = WaveDataset.from_frame(df, 'W4', variable_labels={'q7': 'Trust: executive'})
        >>> ds['q7'].label
        'Trust: executive'
        >>> ds.n_rows
        1200
    """

    def __init__(self, wave: Any, columns: Mapping[str, LabeledColumn]):
        self.wave = Wave.parse(wave)
        self._columns: Dict[str, LabeledColumn] = {}

        lengths = {name: len(col) for name, col in columns.items()}
        if len(set(lengths.values())) > 1:
            raise ValueError(
                f"{self.wave}: columns have unequal row counts: "
                f"{dict(list(lengths.items())[:5])}"
            )

        for name, col in columns.items():
            if not isinstance(col, LabeledColumn):
                col = LabeledColumn(values=pd.Series(col))
            # Positional index keeps columns aligned with each other
            values = col.values.reset_index(drop=True)
            self._columns[name] = LabeledColumn(
                values=values, label=col.label, value_labels=col.value_labels
            )

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        wave: Any,
        variable_labels: Optional[Mapping[str, str]] = None,
        value_labels: Optional[Mapping[str, Mapping[Any, str]]] = None,
    ) -> 'WaveDataset':
        """
        Build a dataset from a DataFrame plus label side-tables.

        Args:
            frame: Respondent-by-variable table of raw codes
            wave: Wave identifier for every row
            variable_labels: Column name -> description
            value_labels: Column name -> {code: label text}
        """
        variable_labels = variable_labels or {}
        value_labels = value_labels or {}
        columns = {
            name: LabeledColumn(
                values=frame[name],
                label=variable_labels.get(name),
                value_labels=dict(value_labels.get(name, {})),
            )
            for name in frame.columns
        }
        return cls(wave, columns)

    @property
    def n_rows(self) -> int:
        if not self._columns:
            return 0
        return len(next(iter(self._columns.values())))

    @property
    def column_names(self) -> List[str]:
        return list(self._columns.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __getitem__(self, name: str) -> LabeledColumn:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def get(self, name: str) -> Optional[LabeledColumn]:
        return self._columns.get(name)

    def items(self):
        return self._columns.items()

    def with_columns(self, new_columns: Mapping[str, LabeledColumn]) -> 'WaveDataset':
        """
        Return a new dataset with columns added or replaced.

        The original dataset and its columns are left untouched.
        """
        merged = dict(self._columns)
        merged.update(new_columns)
        return WaveDataset(self.wave, merged)

    def filter_rows(self, mask: pd.Series) -> 'WaveDataset':
        """Keep only the rows where mask is True."""
        keep = np.asarray(mask, dtype=bool)
        return WaveDataset(
            self.wave,
            {
                name: col.with_values(col.values[keep].reset_index(drop=True))
                for name, col in self._columns.items()
            },
        )

    def rename_columns(self, mapper) -> 'WaveDataset':
        return WaveDataset(
            self.wave, {mapper(name): col for name, col in self._columns.items()}
        )

    def variable_labels(self) -> Dict[str, Optional[str]]:
        return {name: col.label for name, col in self._columns.items()}

    def to_frame(self) -> pd.DataFrame:
        if not self._columns:
            return pd.DataFrame()
        return pd.DataFrame({name: col.values for name, col in self._columns.items()})

    def __repr__(self) -> str:
        return f"WaveDataset(wave={self.wave}, rows={self.n_rows}, columns={len(self)})"
