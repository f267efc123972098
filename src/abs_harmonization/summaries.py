"""
Per-wave descriptive summaries of an assembled table.
"""

import pandas as pd

from .harmonize.assembler import WAVE_COL


def _check_columns(frame: pd.DataFrame, variable: str, wave_col: str) -> None:
    missing = [c for c in (variable, wave_col) if c not in frame.columns]
    if missing:
        raise KeyError(f"Columns not found: {missing}")


def get_wave_summary(
    frame: pd.DataFrame,
    variable: str,
    wave_col: str = WAVE_COL,
) -> pd.DataFrame:
    """
    Summarize one variable by wave.

    Args:
        frame: Long-format table (e.g., AssembledDataset.frame)
        variable: Column to summarize; non-numeric values count as missing
        wave_col: Column holding the wave tag

    Returns:
        One row per wave with n_total, n_valid, n_missing, pct_valid, mean,
        median, sd, min and max. Statistics are NaN for waves with no valid
        values.
    """
    _check_columns(frame, variable, wave_col)

    values = pd.to_numeric(frame[variable], errors='coerce')
    grouped = values.groupby(frame[wave_col], sort=True)

    summary = pd.DataFrame({
        'n_total': grouped.size(),
        'n_valid': grouped.count(),
    })
    summary['n_missing'] = summary['n_total'] - summary['n_valid']
    summary['pct_valid'] = (100 * summary['n_valid'] / summary['n_total']).round(1)
    summary['mean'] = grouped.mean().round(2)
    summary['median'] = grouped.median()
    summary['sd'] = grouped.std().round(2)
    summary['min'] = grouped.min()
    summary['max'] = grouped.max()

    return summary.reset_index()


def frequency_table(
    frame: pd.DataFrame,
    variable: str,
    wave_col: str = WAVE_COL,
    dropna: bool = False,
) -> pd.DataFrame:
    """
    Count each value of a variable within each wave.

    Percentages are within wave. Missing values appear as a NaN row unless
    dropna is True.

    Returns:
        DataFrame with columns wave_col, value, n, pct
    """
    _check_columns(frame, variable, wave_col)

    counts = (
        frame.groupby(wave_col, sort=True)[variable]
        .value_counts(dropna=dropna)
        .rename('n')
        .reset_index()
        .rename(columns={variable: 'value'})
    )
    totals = counts.groupby(wave_col)['n'].transform('sum')
    counts['pct'] = (100 * counts['n'] / totals).round(1)
    return counts.sort_values([wave_col, 'value'], na_position='last').reset_index(drop=True)
