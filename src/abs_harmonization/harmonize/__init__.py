"""
Wave harmonization and cross-wave assembly.

Example usage:
    from abs_harmonization.concepts import default_registry
    from abs_harmonization.harmonize import harmonize_wave, assemble

    registry = default_registry()
    harmonized = {w: harmonize_wave(ds, registry) for w, ds in raw_waves.items()}
    assembled = assemble(harmonized)
"""

from .harmonizer import (
    HARM_SUFFIX,
    harmonized_name,
    harmonize_family,
    standardize_variables,
    harmonize_wave,
)

from .assembler import (
    WAVE_COL,
    ROW_COL,
    AssembledDataset,
    assemble,
    create_harmonization_codebook,
    export_variable_codebook,
)

__all__ = [
    # Harmonizer
    'HARM_SUFFIX',
    'harmonized_name',
    'harmonize_family',
    'standardize_variables',
    'harmonize_wave',
    # Assembler
    'WAVE_COL',
    'ROW_COL',
    'AssembledDataset',
    'assemble',
    'create_harmonization_codebook',
    'export_variable_codebook',
]
