"""
Data loading module for the harmonization pipeline.

Example usage:
    from abs_harmonization.config import DataPaths
    from abs_harmonization.loaders import WaveLoader

    paths = DataPaths(raw_data_dir='~/data/asian_barometer', output_dir='./outputs')
    loader = WaveLoader(paths)

    # Load a single wave
    w4 = loader.load_wave('W4')

    # Load all configured waves
    waves = loader.load_all()
"""

from .file_io import (
    load_csv,
    load_stata,
    load_spss,
    load_file,
    find_data_files,
    clean_column_name,
    clean_column_names,
)

from .wave_loader import (
    WaveLoader,
    scan_wave_directory,
)

__all__ = [
    # Main class
    'WaveLoader',
    'scan_wave_directory',
    # File loaders (rarely needed directly)
    'load_csv',
    'load_stata',
    'load_spss',
    'load_file',
    'find_data_files',
    'clean_column_name',
    'clean_column_names',
]
