"""
Cross-wave assembly.

Harmonized wave tables are stacked (not joined) into one long table tagged
by wave. Columns a wave lacks are NaN for that wave's rows. The total row
count is always the sum of the per-wave row counts.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from ..concepts.registry import ConceptRegistry
from ..data.labeled import WaveDataset
from ..data.waves import Wave, key_by_wave

WAVE_COL = 'wave'
ROW_COL = 'respondent_row'


@dataclass
class AssembledDataset:
    """
    Long-format table of all waves.

    Attributes:
        frame: wave, respondent_row, then every raw, `_harm` and concept column
        labels: Column name -> variable label (first non-empty label seen)
        waves: Waves included, in stacking order
    """
    frame: pd.DataFrame
    labels: Dict[str, Optional[str]] = field(default_factory=dict)
    waves: List[Wave] = field(default_factory=list)

    @property
    def n_rows(self) -> int:
        return len(self.frame)

    @property
    def columns(self) -> List[str]:
        return list(self.frame.columns)

    def rows_for(self, wave: Any) -> pd.DataFrame:
        wave = Wave.parse(wave)
        return self.frame[self.frame[WAVE_COL] == wave.value]

    def wave_counts(self) -> pd.Series:
        return self.frame[WAVE_COL].value_counts().reindex([w.value for w in self.waves])


def _check_reserved(frame: pd.DataFrame, wave: Wave) -> None:
    """The stacking columns may only hold what assemble itself would write."""
    if WAVE_COL in frame and not (frame[WAVE_COL] == wave.value).all():
        raise ValueError(f"{wave}: column '{WAVE_COL}' holds values other than the wave tag")
    if ROW_COL in frame and frame[ROW_COL].tolist() != list(range(len(frame))):
        raise ValueError(f"{wave}: column '{ROW_COL}' would be overwritten")


def assemble(waves: Mapping[Any, WaveDataset]) -> AssembledDataset:
    """
    Row-stack wave datasets in W2..W6 order.

    Args:
        waves: Wave identifier -> (harmonized) WaveDataset

    Raises:
        ValueError: If a mapping key disagrees with the dataset's own wave,
                    two keys name the same wave, or a data column clashes
                    with the wave/respondent_row columns
    """
    keyed = key_by_wave(waves)
    for wave, dataset in keyed.items():
        if dataset.wave != wave:
            raise ValueError(f"Dataset for {wave} is tagged as {dataset.wave}")

    ordered = list(keyed)

    frames = []
    labels: Dict[str, Optional[str]] = {WAVE_COL: 'Survey wave', ROW_COL: 'Row within wave'}
    for wave in ordered:
        dataset = keyed[wave]
        frame = dataset.to_frame()
        _check_reserved(frame, wave)
        frame = frame.drop(columns=[WAVE_COL, ROW_COL], errors='ignore')
        frame.insert(0, WAVE_COL, wave.value)
        frame.insert(1, ROW_COL, range(dataset.n_rows))
        frames.append(frame)

        for name, label in dataset.variable_labels().items():
            if labels.get(name) is None:
                labels[name] = label

    if frames:
        combined = pd.concat(frames, ignore_index=True, sort=False)
    else:
        combined = pd.DataFrame(columns=[WAVE_COL, ROW_COL])

    return AssembledDataset(frame=combined, labels=labels, waves=ordered)


def create_harmonization_codebook(registry: ConceptRegistry) -> pd.DataFrame:
    """concept, W2, W3, W4, W5, W6: raw variable behind each concept (NaN if unmapped)."""
    return registry.codebook()


def export_variable_codebook(
    datasets: Mapping[Any, WaveDataset],
    path: Optional[Path | str] = None,
) -> pd.DataFrame:
    """
    List every variable with its label, per wave.

    Args:
        datasets: Wave identifier -> WaveDataset
        path: If given, the table is also written there as CSV
    """
    rows = []
    for dataset in sorted(datasets.values(), key=lambda d: d.wave.order):
        for name, label in dataset.variable_labels().items():
            rows.append({'source_wave': dataset.wave.value, 'variable': name, 'label': label})
    codebook = pd.DataFrame(rows, columns=['source_wave', 'variable', 'label'])

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        codebook.to_csv(path, index=False)

    return codebook
