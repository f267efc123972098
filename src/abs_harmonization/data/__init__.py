"""
Core data containers: wave identifiers and labeled survey tables.
"""

from .waves import Wave, ALL_WAVES, key_by_wave, sort_waves
from .labeled import LabeledColumn, WaveDataset

__all__ = [
    'Wave',
    'ALL_WAVES',
    'sort_waves',
    'key_by_wave',
    'LabeledColumn',
    'WaveDataset',
]
