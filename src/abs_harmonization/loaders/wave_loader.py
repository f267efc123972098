"""
Wave data loading module.

This module provides the WaveLoader class which finds each wave's raw file,
reads it with its labels, applies the wave's country filter and name
cleaning, and hands back a WaveDataset.
"""

import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..config.base import DataPaths
from ..config.waves import WaveConfig, WAVE_REGISTRY, get_wave_config
from ..data.labeled import WaveDataset
from ..data.waves import Wave
from .file_io import clean_column_names, find_data_files, load_file


class WaveLoader:
    """
    Loads Asian Barometer wave files from local directories.

    This class handles:
    - Finding wave data files (SAV, DTA, CSV)
    - Reading variable and value labels along with the codes
    - Keeping only the configured country for merged multi-country releases
    - Normalising column names so q-numbers compare across waves

    Example:
        >>> from abs_harmonization.config import DataPaths
        >>> paths = DataPaths(raw_data_dir='~/data/asian_barometer', output_dir='./outputs')
        >>> loader = WaveLoader(paths)
        >>>
        >>> # Load a single wave
        >>> w4 = loader.load_wave('W4')
        >>>
        >>> # Load several waves
        >>> waves = loader.load_all(['W2', 'W3', 'W4', 'W6'])
    """

    def __init__(self, paths: DataPaths, verbose: bool = True):
        """
        Initialize the wave loader.

        Args:
            paths: DataPaths configuration with directory locations
            verbose: If True, print progress messages
        """
        self.paths = paths
        self.verbose = verbose
        self._cache: Dict[Wave, WaveDataset] = {}

    def _log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def load_wave(self, wave: Any, use_cache: bool = True) -> WaveDataset:
        """
        Load a single wave.

        Args:
            wave: Wave identifier (e.g., 'W4')
            use_cache: If True, return cached data if available
        """
        wave = Wave.parse(wave)
        if use_cache and wave in self._cache:
            self._log(f"✓ {wave}: loaded from cache")
            return self._cache[wave]

        config = get_wave_config(wave)
        self._log(f"Loading {config.name}...")

        df, variable_labels, value_labels = self._load_data(config)
        self._log(f"  Data: {len(df):,} rows, {len(df.columns)} columns")

        df = self._filter_country(df, config)

        dataset = WaveDataset.from_frame(df, wave, variable_labels, value_labels)
        if config.clean_names:
            mapping = clean_column_names(dataset.column_names)
            dataset = dataset.rename_columns(mapping.get)

        self._log(f"✓ {wave}: {dataset.n_rows:,} respondents")
        self._cache[wave] = dataset
        return dataset

    def _load_data(self, config: WaveConfig):
        wave_dir = self.paths.wave_dir(config.wave)

        if not wave_dir.exists():
            raise FileNotFoundError(
                f"Wave directory not found: {wave_dir}\n"
                f"Expected folder '{config.folder_name}' in {self.paths.raw_data_dir}"
            )

        files = find_data_files(wave_dir, config.get_file_patterns())
        if len(files) > 1:
            warnings.warn(f"{config.wave}: {len(files)} matching files, using {files[0].name}")
        return load_file(files[0], encoding=config.encoding)

    def _filter_country(self, df: pd.DataFrame, config: WaveConfig) -> pd.DataFrame:
        if not config.has_country_filter():
            return df

        if config.country_col not in df.columns:
            raise ValueError(
                f"{config.wave}: country column '{config.country_col}' not found. "
                f"Available columns: {list(df.columns)[:10]}..."
            )

        filtered = df[df[config.country_col] == config.country_code].reset_index(drop=True)
        self._log(f"  Kept {len(filtered):,} rows with {config.country_col} == {config.country_code}")
        return filtered

    def load_all(
        self,
        waves: Optional[List[Any]] = None,
        skip_errors: bool = True,
    ) -> Dict[Wave, WaveDataset]:
        """
        Load multiple waves.

        Args:
            waves: Waves to load (None = every configured wave)
            skip_errors: If True, continue loading other waves if one fails

        Returns:
            Dictionary mapping Wave to WaveDataset
        """
        if waves is None:
            waves = list(WAVE_REGISTRY.keys())

        results = {}
        for wave in waves:
            wave = Wave.parse(wave)
            try:
                results[wave] = self.load_wave(wave)
            except (FileNotFoundError, ValueError) as e:
                if skip_errors:
                    warnings.warn(f"Failed to load {wave}: {e}")
                else:
                    raise

        return results

    def clear_cache(self, wave: Optional[Any] = None) -> None:
        """Clear cached data for one wave, or all waves if None."""
        if wave is not None:
            self._cache.pop(Wave.parse(wave), None)
        else:
            self._cache.clear()


def scan_wave_directory(raw_data_dir: Path, verbose: bool = True) -> Dict[str, List[Path]]:
    """
    Scan a directory to discover available wave data files.

    Useful for checking what data is available before configuring paths.

    Returns:
        Dictionary mapping folder names to lists of data files found
    """
    raw_data_dir = Path(raw_data_dir)

    if not raw_data_dir.exists():
        raise FileNotFoundError(f"Directory not found: {raw_data_dir}")

    results = {}
    patterns = ['*.sav', '*.dta', '*.csv']

    for folder in sorted(raw_data_dir.iterdir()):
        if folder.is_dir():
            files = []
            for pattern in patterns:
                files.extend(folder.glob(pattern))
                files.extend(folder.glob(f'*/{pattern}'))  # Check subdirs too

            if files:
                results[folder.name] = sorted(files)
                if verbose:
                    print(f"{folder.name}/")
                    for f in files[:3]:
                        print(f"  {f.name}")
                    if len(files) > 3:
                        print(f"  ... and {len(files) - 3} more files")

    return results
