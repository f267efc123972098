"""
Cleaning primitives: missing-value resolution and scale reversal.
"""

from .missing import (
    DEFAULT_MISSING_CODES,
    NA_LABELS,
    NumericCodePolicy,
    LabelTextPolicy,
    resolve_missing,
    clean_multiple_vars,
    coerce_numeric_text,
)

from .scales import (
    SUPPORTED_WIDTHS,
    Direction,
    ScaleSpec,
    reverse_scale,
    reverse_4point,
    reverse_5point,
    reverse_6point,
    harmonize_scale,
)

__all__ = [
    # Missing values
    'DEFAULT_MISSING_CODES',
    'NA_LABELS',
    'NumericCodePolicy',
    'LabelTextPolicy',
    'resolve_missing',
    'clean_multiple_vars',
    'coerce_numeric_text',
    # Scales
    'SUPPORTED_WIDTHS',
    'Direction',
    'ScaleSpec',
    'reverse_scale',
    'reverse_4point',
    'reverse_5point',
    'reverse_6point',
    'harmonize_scale',
]
