#!/usr/bin/env python
"""
Harmonize Asian Barometer waves into one long dataset.

This script runs the complete pipeline:
1. Load each configured wave (country filter, column name cleaning)
2. Clean missing-value codes and harmonize response scales
3. Add concept columns from the registry
4. Stack all waves and write harmonized.csv, codebook.csv, diagnostics.csv

Usage:
    python scripts/harmonize_waves.py --config configs/example.yaml
    python scripts/harmonize_waves.py --config configs/example.yaml --waves W2 W4 --output ./out
    python scripts/harmonize_waves.py --config configs/example.yaml --export-registry registry.csv
"""

import argparse
import sys
import warnings
from pathlib import Path

# Add src to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / 'src'))

from abs_harmonization import (
    DataPaths,
    HarmonizationConfig,
    HarmonizationPipeline,
    HarmonizationWarning,
    Wave,
    WaveLoader,
)
from abs_harmonization.concepts import (
    default_registry,
    load_concept_mappings,
    save_concept_mappings,
)


def main():
    parser = argparse.ArgumentParser(
        description='Harmonize Asian Barometer waves into one long dataset'
    )

    parser.add_argument(
        '--config', type=str, required=True,
        help='Path to YAML config with paths and harmonization sections'
    )
    parser.add_argument(
        '--waves', type=str, nargs='+', default=None,
        help='Waves to process (e.g. W2 W4); overrides the config'
    )
    parser.add_argument(
        '--output', type=str, default=None,
        help='Output directory (default: paths.output from the config)'
    )
    parser.add_argument(
        '--export-registry', type=str, default=None,
        help='Also write the concept registry to this CSV path'
    )
    parser.add_argument(
        '--quiet', action='store_true',
        help='Suppress progress output and data warnings'
    )

    args = parser.parse_args()

    paths = DataPaths.from_yaml(args.config)
    issues = paths.validate(check_writable=False)
    if issues:
        for issue in issues:
            print(f"⚠ {issue}")
        sys.exit(1)

    config = HarmonizationConfig.from_yaml(args.config)
    if args.waves:
        config.waves = [Wave.parse(w) for w in args.waves]

    for wave in paths.missing_wave_folders(config.waves):
        print(f"⚠ No folder for {wave}: {paths.wave_dir(wave)}")

    if args.quiet:
        warnings.simplefilter('ignore', HarmonizationWarning)

    if paths.registry_path is not None:
        registry = load_concept_mappings(paths.registry_path)
    else:
        registry = default_registry()
    pipeline = HarmonizationPipeline(registry, config, verbose=not args.quiet)

    loader = WaveLoader(paths, verbose=not args.quiet)
    datasets = loader.load_all(config.waves)
    if not datasets:
        print("No waves could be loaded.")
        sys.exit(1)

    result = pipeline.harmonize(datasets)
    pipeline.save(result, args.output or paths.output_dir)

    if args.export_registry:
        save_concept_mappings(pipeline.registry, args.export_registry)
        if not args.quiet:
            print(f"✓ Registry written to {args.export_registry}")


if __name__ == '__main__':
    main()
