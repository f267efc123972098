"""
Configuration module for the harmonization pipeline.

Example usage:
    from abs_harmonization.config import DataPaths, HarmonizationConfig, load_config

    # Load all config from a YAML file
    config = load_config('configs/example.yaml')
    paths = config['paths']

    # Or create directly without YAML
    paths = DataPaths(
        raw_data_dir='~/data/asian_barometer',
        output_dir='./outputs',
    )

    # Per-wave file settings
    from abs_harmonization.config import get_wave_config
    get_wave_config('W5').country_col   # 'COUNTRY'
"""

from .base import (
    DataPaths,
    HarmonizationConfig,
    load_config,
)

from .waves import (
    WaveConfig,
    WAVE_REGISTRY,
    get_wave_config,
    list_waves,
)

__all__ = [
    # Base config classes
    'DataPaths',
    'HarmonizationConfig',
    'load_config',
    # Wave file config
    'WaveConfig',
    'WAVE_REGISTRY',
    'get_wave_config',
    'list_waves',
]
