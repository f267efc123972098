"""
End-to-end harmonization pipeline.

This module provides the HarmonizationPipeline class which orchestrates:
- Loading raw waves via WaveLoader (optional, datasets may be passed in)
- Harmonizing each wave against the concept registry
- Stacking the waves into one long table
- Collecting diagnostics and writing outputs
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from .cleaning.missing import LabelTextPolicy
from .concepts.accessor import get_concept_all_waves
from .concepts.io import load_concept_mappings
from .concepts.mappings import default_registry
from .concepts.registry import ConceptRegistry
from .config.base import DataPaths, HarmonizationConfig
from .data.labeled import WaveDataset
from .data.waves import Wave, key_by_wave
from .diagnostics import DiagnosticReport
from .harmonize.assembler import AssembledDataset, assemble, create_harmonization_codebook
from .harmonize.harmonizer import harmonize_wave
from .loaders.wave_loader import WaveLoader


@dataclass
class HarmonizationResult:
    """
    Output of one pipeline run.

    Attributes:
        assembled: Long-format table of all harmonized waves
        codebook: concept x wave table of raw variable names
        report: Every diagnostic raised during the run
        waves: The harmonized WaveDatasets, keyed by wave
    """
    assembled: AssembledDataset
    codebook: pd.DataFrame
    report: DiagnosticReport
    waves: Dict[Wave, WaveDataset] = field(default_factory=dict)


class HarmonizationPipeline:
    """
    Harmonizes a set of waves and assembles them.

    Waves are processed one at a time; the registry is only read.

    Example:
        >>> from abs_harmonization import HarmonizationPipeline, default_registry
        >>> pipeline = HarmonizationPipeline(default_registry())
        >>> result = pipeline.harmonize({'W2': w2, 'W4': w4})
        >>> result.assembled.wave_counts()
        >>> pipeline.save(result, './outputs')
    """

    def __init__(
        self,
        registry: Optional[ConceptRegistry] = None,
        config: Optional[HarmonizationConfig] = None,
        verbose: Optional[bool] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            registry: Concept registry (default_registry() if None)
            config: Missing-value and wave-selection settings (defaults if None)
            verbose: Overrides config.verbose when given
        """
        self.registry = registry if registry is not None else default_registry()
        self.config = config or HarmonizationConfig()
        self.verbose = self.config.verbose if verbose is None else verbose

    @classmethod
    def from_config(
        cls,
        config_path: Path | str,
        verbose: Optional[bool] = None,
    ) -> 'HarmonizationPipeline':
        """Build a pipeline from a YAML file, using paths.registry when set."""
        paths = DataPaths.from_yaml(config_path)
        config = HarmonizationConfig.from_yaml(config_path)
        registry = (
            load_concept_mappings(paths.registry_path)
            if paths.registry_path is not None
            else default_registry()
        )
        return cls(registry, config, verbose=verbose)

    def _log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    @property
    def label_policy(self) -> Optional[LabelTextPolicy]:
        """Label policy for concept extraction, or None if label cleaning is off."""
        if not self.config.label_cleaning:
            return None
        return LabelTextPolicy(
            labels=self.config.missing_labels,
            extra_labels=self.config.extra_missing_labels,
        )

    def _select(self, datasets: Mapping[Any, WaveDataset]) -> Dict[Wave, WaveDataset]:
        selected = key_by_wave(datasets)
        if self.config.waves is not None:
            skipped = [w for w in selected if w not in self.config.waves]
            if skipped:
                self._log(f"Skipping waves not in config: {[w.value for w in skipped]}")
            selected = {w: v for w, v in selected.items() if w in self.config.waves}
        return selected

    def harmonize(self, datasets: Mapping[Any, WaveDataset]) -> HarmonizationResult:
        """
        Harmonize every wave and stack the results.

        Args:
            datasets: Wave identifier -> raw WaveDataset

        Returns:
            HarmonizationResult with the assembled table, codebook and report
        """
        report = DiagnosticReport()
        selected = self._select(datasets)

        self._log(f"\n{'='*60}")
        self._log(f"Harmonizing {len(selected)} waves with {len(self.registry)} concepts")
        self._log(f"{'='*60}")

        harmonized: Dict[Wave, WaveDataset] = {}
        for wave in sorted(selected, key=lambda w: w.order):
            n_before = len(report)
            harmonized[wave] = harmonize_wave(
                selected[wave],
                self.registry,
                report=report,
                missing_codes=self.config.missing_codes,
            )
            self._log(
                f"✓ {wave}: {harmonized[wave].n_rows:,} rows, "
                f"{len(report) - n_before} diagnostics"
            )

        assembled = assemble(harmonized)
        self._log(f"\nTotal rows: {assembled.n_rows:,}")
        if len(report):
            self._log(report.summary())

        return HarmonizationResult(
            assembled=assembled,
            codebook=create_harmonization_codebook(self.registry),
            report=report,
            waves=harmonized,
        )

    def run(self, paths: DataPaths) -> HarmonizationResult:
        """Load the configured waves from disk, then harmonize them."""
        loader = WaveLoader(paths, verbose=self.verbose)
        datasets = loader.load_all(self.config.waves)
        return self.harmonize(datasets)

    def concept_across_waves(
        self,
        concept: str,
        result: HarmonizationResult,
        prefer_harmonized: bool = True,
    ) -> pd.DataFrame:
        """Stack one concept from a result's waves, cleaned with the configured label policy."""
        policy = self.label_policy
        return get_concept_all_waves(
            concept,
            result.waves,
            self.registry,
            clean=policy is not None,
            report=result.report,
            prefer_harmonized=prefer_harmonized,
            policy=policy,
        )

    def save(self, result: HarmonizationResult, output_dir: Path | str) -> Dict[str, Path]:
        """
        Write harmonized.csv, codebook.csv and diagnostics.csv.

        Returns:
            Dictionary mapping output name to the file written
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        outputs = {
            'harmonized': output_dir / 'harmonized.csv',
            'codebook': output_dir / 'codebook.csv',
            'diagnostics': output_dir / 'diagnostics.csv',
        }
        result.assembled.frame.to_csv(outputs['harmonized'], index=False)
        result.codebook.to_csv(outputs['codebook'], index=False)
        result.report.to_frame().to_csv(outputs['diagnostics'], index=False)

        self._log(f"\n✓ Saved {result.assembled.n_rows:,} rows to {outputs['harmonized']}")
        return outputs
