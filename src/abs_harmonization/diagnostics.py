"""
Data-availability diagnostics.

Missing mappings, variables absent from a loaded wave and columns without
value labels are expected in multi-wave survey work: not every wave fields
every battery. They are reported, never raised. Each diagnostic is emitted
as a HarmonizationWarning and, when a DiagnosticReport is supplied, recorded
there so a run can end with a summary.
"""

import warnings
from collections import Counter
from dataclasses import dataclass, asdict
from typing import Iterator, List, Optional

import pandas as pd

from .errors import HarmonizationWarning


CONCEPT_UNMAPPED = 'concept_unmapped'
VARIABLE_MISSING = 'variable_missing'
NO_VALUE_LABELS = 'no_value_labels'
NO_DATA = 'no_data'

DIAGNOSTIC_KINDS = (CONCEPT_UNMAPPED, VARIABLE_MISSING, NO_VALUE_LABELS, NO_DATA)


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal finding."""
    kind: str
    message: str
    wave: Optional[str] = None
    concept: Optional[str] = None
    variable: Optional[str] = None


class DiagnosticReport:
    """Accumulates diagnostics across a harmonization run."""

    def __init__(self):
        self._items: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def extend(self, other: 'DiagnosticReport') -> None:
        self._items.extend(other)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def by_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    def to_frame(self) -> pd.DataFrame:
        columns = ['kind', 'message', 'wave', 'concept', 'variable']
        return pd.DataFrame([asdict(d) for d in self._items], columns=columns)

    def summary(self) -> str:
        if not self._items:
            return "No diagnostics."
        counts = Counter(d.kind for d in self._items)
        lines = [f"{len(self._items)} diagnostics:"]
        for kind in DIAGNOSTIC_KINDS:
            if counts.get(kind):
                lines.append(f"  {kind}: {counts[kind]}")
        return '\n'.join(lines)


def emit(
    kind: str,
    message: str,
    report: Optional[DiagnosticReport] = None,
    wave=None,
    concept: Optional[str] = None,
    variable: Optional[str] = None,
) -> Diagnostic:
    """Warn about a finding and record it in the report if one is given."""
    diagnostic = Diagnostic(
        kind=kind,
        message=message,
        wave=str(wave) if wave is not None else None,
        concept=concept,
        variable=variable,
    )
    warnings.warn(message, HarmonizationWarning, stacklevel=3)
    if report is not None:
        report.add(diagnostic)
    return diagnostic
