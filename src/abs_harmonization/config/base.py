"""
Base configuration classes for the harmonization pipeline.

This module provides path management and general configuration loading,
so the same pipeline runs on a laptop, a cluster or a shared drive by
swapping config files rather than editing code.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple
import os

from ..cleaning.missing import DEFAULT_MISSING_CODES, NA_LABELS
from ..data.waves import Wave, sort_waves
from .waves import WAVE_REGISTRY, get_wave_config

# yaml is optional - only needed if loading from YAML files
try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False


def _read_yaml(config_path: Path | str) -> Dict[str, Any]:
    if not YAML_AVAILABLE:
        raise ImportError(
            "Loading from YAML requires pyyaml. "
            "Install it with: pip install pyyaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


@dataclass
class DataPaths:
    """
    Paths configuration for raw wave files, the concept registry and outputs.

    Attributes:
        raw_data_dir: Root directory containing one folder per wave
                      Expected structure: raw_data_dir/{wave_folder}/files...
        registry_path: Concept mappings file (CSV or YAML). None means the
                       built-in default registry is used.
        output_dir: Directory for harmonized datasets and codebooks

    Example:
        >>> paths = DataPaths.from_yaml("configs/local.yaml")
        >>> paths.raw_data_dir
        PosixPath('/Users/me/data/asian_barometer')

        >>> # Or create directly
        >>> paths = DataPaths(
        ...     raw_data_dir='~/data/asian_barometer',
        ...     registry_path='./docs/concept_mappings.csv',
        ...     output_dir='./outputs'
        ... )
    """
    raw_data_dir: Path
    output_dir: Path
    registry_path: Optional[Path] = None

    def __post_init__(self):
        """Convert string paths to Path objects and expand user/env vars."""
        self.raw_data_dir = self._resolve_path(self.raw_data_dir)
        self.output_dir = self._resolve_path(self.output_dir)
        if self.registry_path is not None:
            self.registry_path = self._resolve_path(self.registry_path)

    @staticmethod
    def _resolve_path(path: Any) -> Path:
        """Resolve a path string, expanding ~ and environment variables."""
        path_str = str(path)
        expanded = os.path.expandvars(os.path.expanduser(path_str))
        return Path(expanded)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> 'DataPaths':
        """
        Load paths from a YAML configuration file.

        Expected YAML structure:
            paths:
              raw_data: /path/to/waves
              output: /path/to/output
              registry: /path/to/concept_mappings.csv   # optional

        Raises:
            FileNotFoundError: If config file doesn't exist
            KeyError: If required keys are missing from config
            ImportError: If pyyaml is not installed
        """
        cfg = _read_yaml(config_path)
        paths_cfg = cfg.get('paths', {})

        required_keys = ['raw_data', 'output']
        missing = [k for k in required_keys if k not in paths_cfg]
        if missing:
            raise KeyError(f"Missing required path keys in config: {missing}")

        return cls.from_dict(paths_cfg)

    @classmethod
    def from_dict(cls, paths_dict: Dict[str, str]) -> 'DataPaths':
        """
        Create DataPaths from a dictionary.

        Args:
            paths_dict: Dictionary with keys 'raw_data', 'output' and
                        optionally 'registry'
        """
        return cls(
            raw_data_dir=paths_dict['raw_data'],
            output_dir=paths_dict['output'],
            registry_path=paths_dict.get('registry'),
        )

    def validate(self, check_writable: bool = True) -> List[str]:
        """
        Validate that configured paths exist and are accessible.

        Returns:
            List of warning/error messages (empty if all valid)
        """
        issues = []

        if not self.raw_data_dir.exists():
            issues.append(f"raw_data_dir does not exist: {self.raw_data_dir}")

        if self.registry_path is not None and not self.registry_path.exists():
            issues.append(f"registry_path does not exist: {self.registry_path}")

        if not self.output_dir.exists():
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                issues.append(f"Cannot create output_dir: {self.output_dir}")

        if check_writable and self.output_dir.exists():
            test_file = self.output_dir / '.write_test'
            try:
                test_file.touch()
                test_file.unlink()
            except PermissionError:
                issues.append(f"output_dir is not writable: {self.output_dir}")

        return issues

    def wave_dir(self, wave: Any) -> Path:
        """Folder holding one wave's raw files."""
        return self.raw_data_dir / get_wave_config(wave).folder_name

    def missing_wave_folders(self, waves: Optional[List[Any]] = None) -> List[Wave]:
        """Waves (all configured ones if None) whose folder is absent under raw_data_dir."""
        waves = sort_waves(waves) if waves is not None else list(WAVE_REGISTRY)
        return [w for w in waves if not self.wave_dir(w).is_dir()]


@dataclass
class HarmonizationConfig:
    """
    Settings for missing-value handling and which waves to process.

    Numeric sentinel codes are cleaned before scale harmonization; the
    label catalog is used by the concept accessor when clean=True.
    """
    missing_codes: Tuple[Any, ...] = DEFAULT_MISSING_CODES
    missing_labels: Tuple[str, ...] = NA_LABELS
    extra_missing_labels: Tuple[str, ...] = ()
    label_cleaning: bool = True

    # None = all waves found
    waves: Optional[List[Wave]] = None

    verbose: bool = True

    def __post_init__(self):
        self.missing_codes = tuple(self.missing_codes)
        self.missing_labels = tuple(self.missing_labels)
        self.extra_missing_labels = tuple(self.extra_missing_labels)
        if self.waves is not None:
            self.waves = sort_waves(self.waves)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> 'HarmonizationConfig':
        """
        Load harmonization settings from the 'harmonization' section.

        Expected YAML structure (all keys optional):
            harmonization:
              missing_codes: [0, 97, 98, 99]
              extra_missing_labels: ["Not asked in this country"]
              label_cleaning: true
              waves: [W2, W3, W4, W6]
              verbose: true
        """
        cfg = _read_yaml(config_path)
        h_cfg = cfg.get('harmonization', {}) or {}

        return cls(
            missing_codes=h_cfg.get('missing_codes', DEFAULT_MISSING_CODES),
            missing_labels=h_cfg.get('missing_labels', NA_LABELS),
            extra_missing_labels=h_cfg.get('extra_missing_labels', ()),
            label_cleaning=h_cfg.get('label_cleaning', True),
            waves=h_cfg.get('waves'),
            verbose=h_cfg.get('verbose', True),
        )


def load_config(config_path: Path | str) -> Dict[str, Any]:
    """
    Load a complete configuration file and return all config objects.

    Returns:
        Dictionary with keys 'paths', 'harmonization'
    """
    config_path = Path(config_path)

    return {
        'paths': DataPaths.from_yaml(config_path),
        'harmonization': HarmonizationConfig.from_yaml(config_path),
    }
