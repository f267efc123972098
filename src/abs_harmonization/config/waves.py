"""
Wave file registry.

Each Asian Barometer wave ships as its own SPSS file with its own folder
layout and, for the merged multi-country releases, a country column that
has to be filtered. WAVE_REGISTRY is the single source of truth for where
and how each wave is read. To add a release, add or edit an entry here.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..data.waves import Wave


CAMBODIA = 12


@dataclass(frozen=True)
class WaveConfig:
    """
    Immutable configuration for loading a single wave.

    Attributes:
        wave: Wave identifier
        name: Display name of the release
        folder_name: Folder under DataPaths.raw_data_dir
        file_patterns: Glob patterns tried in order
        country_col: Country column in the raw file (None if single-country)
        country_code: Keep only rows with this country code (None = keep all)
        clean_names: Normalise column names (lower case, underscores)
    """
    wave: Wave
    name: str
    folder_name: str
    file_patterns: tuple = ('*.sav', '*.dta', '*.csv')
    country_col: Optional[str] = 'country'
    country_code: Optional[int] = None
    clean_names: bool = True
    encoding: str = 'utf-8'

    def get_file_patterns(self) -> List[str]:
        return list(self.file_patterns)

    def has_country_filter(self) -> bool:
        return self.country_col is not None and self.country_code is not None


# =============================================================================
# WAVE REGISTRY
# =============================================================================

WAVE_REGISTRY: Dict[Wave, WaveConfig] = {

    Wave.W2: WaveConfig(
        wave=Wave.W2,
        name='Asian Barometer Wave 2',
        folder_name='Wave2',
        country_code=CAMBODIA,
    ),

    Wave.W3: WaveConfig(
        wave=Wave.W3,
        name='Asian Barometer Wave 3',
        folder_name='Wave3',
        country_code=CAMBODIA,
    ),

    Wave.W4: WaveConfig(
        wave=Wave.W4,
        name='Asian Barometer Wave 4',
        folder_name='Wave4',
        country_code=CAMBODIA,
    ),

    Wave.W5: WaveConfig(
        wave=Wave.W5,
        name='Asian Barometer Wave 5',
        folder_name='Wave5',
        # W5 merge file spells the column in upper case before name cleaning
        country_col='COUNTRY',
        country_code=CAMBODIA,
    ),

    Wave.W6: WaveConfig(
        wave=Wave.W6,
        name='Asian Barometer Wave 6 (Cambodia release)',
        folder_name='Wave6',
        country_col=None,
    ),
}


def get_wave_config(wave: Any) -> WaveConfig:
    wave = Wave.parse(wave)
    if wave not in WAVE_REGISTRY:
        available = ', '.join(w.value for w in WAVE_REGISTRY)
        raise KeyError(f"No file configuration for wave '{wave}'. Available: {available}")
    return WAVE_REGISTRY[wave]


def list_waves() -> List[Wave]:
    return list(WAVE_REGISTRY.keys())
