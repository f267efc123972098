"""
ABS Harmonization: cross-wave harmonization of Asian Barometer survey data.

This package provides tools for:
- Loading labeled wave files (SPSS, Stata, CSV) for one country
- Resolving missing-value codes and label texts
- Reversing response scales so every wave points the same way
- Mapping wave-specific question numbers to stable concept names
- Stacking harmonized waves into one long table with diagnostics

Quick Start:
    from abs_harmonization import HarmonizationPipeline, WaveLoader, load_config

    config = load_config('configs/example.yaml')
    loader = WaveLoader(config['paths'])
    waves = loader.load_all()

    pipeline = HarmonizationPipeline(config=config['harmonization'])
    result = pipeline.harmonize(waves)
    pipeline.save(result, config['paths'].output_dir)

Modules:
    config: Configuration management (paths, waves, missing-value settings)
    loaders: Data loading (wave files with labels)
    cleaning: Missing-value resolution and scale reversal
    concepts: Concept registry and accessor
    harmonize: Per-wave harmonization and cross-wave assembly
    pipeline: End-to-end orchestration (HarmonizationPipeline)
"""

__version__ = '0.1.0'

from .errors import (
    HarmonizationError,
    ConfigurationError,
    UnknownConceptError,
    DuplicateConceptError,
    UnknownWaveError,
    MalformedRegistryError,
    ScaleError,
    HarmonizationWarning,
)

from .data import (
    Wave,
    ALL_WAVES,
    LabeledColumn,
    WaveDataset,
)

from .config import (
    DataPaths,
    HarmonizationConfig,
    WAVE_REGISTRY,
    get_wave_config,
    list_waves,
    load_config,
)

from .diagnostics import Diagnostic, DiagnosticReport

from .cleaning import (
    NumericCodePolicy,
    LabelTextPolicy,
    resolve_missing,
    ScaleSpec,
    reverse_scale,
    harmonize_scale,
)

from .concepts import (
    ConceptMapping,
    ConceptRegistry,
    HarmonizationFamily,
    default_registry,
    load_concept_mappings,
    get_concept,
    get_concept_all_waves,
    validate_concept,
)

from .harmonize import (
    AssembledDataset,
    harmonize_wave,
    standardize_variables,
    assemble,
    create_harmonization_codebook,
)

from .loaders import (
    WaveLoader,
    scan_wave_directory,
)

from .summaries import get_wave_summary, frequency_table

from .pipeline import HarmonizationPipeline, HarmonizationResult

__all__ = [
    # Version
    '__version__',
    # Errors
    'HarmonizationError',
    'ConfigurationError',
    'UnknownConceptError',
    'DuplicateConceptError',
    'UnknownWaveError',
    'MalformedRegistryError',
    'ScaleError',
    'HarmonizationWarning',
    # Data
    'Wave',
    'ALL_WAVES',
    'LabeledColumn',
    'WaveDataset',
    # Config
    'DataPaths',
    'HarmonizationConfig',
    'WAVE_REGISTRY',
    'get_wave_config',
    'list_waves',
    'load_config',
    # Diagnostics
    'Diagnostic',
    'DiagnosticReport',
    # Cleaning
    'NumericCodePolicy',
    'LabelTextPolicy',
    'resolve_missing',
    'ScaleSpec',
    'reverse_scale',
    'harmonize_scale',
    # Concepts
    'ConceptMapping',
    'ConceptRegistry',
    'HarmonizationFamily',
    'default_registry',
    'load_concept_mappings',
    'get_concept',
    'get_concept_all_waves',
    'validate_concept',
    # Harmonize
    'AssembledDataset',
    'harmonize_wave',
    'standardize_variables',
    'assemble',
    'create_harmonization_codebook',
    # Loaders
    'WaveLoader',
    'scan_wave_directory',
    # Summaries
    'get_wave_summary',
    'frequency_table',
    # Pipeline
    'HarmonizationPipeline',
    'HarmonizationResult',
]
