"""
Ordinal scale reversal.

Asian Barometer questionnaires flip the polarity of several batteries
between waves (e.g. trust is 1=none..4=great deal in W2 but 1=great deal..
4=none in W4). Reversal maps v -> width + 1 - v for 1 <= v <= width and
forces everything else, leftover sentinels and NaN included, to NaN.

The width must come from the ScaleSpec of the (family, wave) pair being
harmonized: applying a 4-point reversal to 6-point data silently corrupts
the scale.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import numpy as np
import pandas as pd

from ..errors import ScaleError


SUPPORTED_WIDTHS = (4, 5, 6)


class Direction(str, Enum):
    """Polarity of raw code 1 relative to the canonical 'higher = more positive'."""
    ASCENDING = 'ascending'    # 1 = most negative, already canonical
    DESCENDING = 'descending'  # 1 = most positive, needs reversal

    @classmethod
    def parse(cls, value: Any) -> 'Direction':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ScaleError(
                f"Unknown scale direction: {value!r}. Use 'ascending' or 'descending'"
            ) from None


@dataclass(frozen=True)
class ScaleSpec:
    """Width and raw polarity of one question battery in one wave."""
    width: int
    direction: Direction = Direction.ASCENDING

    def __post_init__(self):
        _check_width(self.width)
        object.__setattr__(self, 'direction', Direction.parse(self.direction))

    @property
    def needs_reversal(self) -> bool:
        return self.direction is Direction.DESCENDING


def _check_width(width: int) -> None:
    if width not in SUPPORTED_WIDTHS:
        raise ScaleError(
            f"Unsupported scale width: {width}. Supported: {SUPPORTED_WIDTHS}"
        )


def reverse_scale(values: Union[pd.Series, Any], width: int) -> Union[pd.Series, float]:
    """
    Reverse-code an ordinal scale of the given width.

    Accepts a Series or a single value. Valid values 1..width are mapped to
    width + 1 - v; invalid values (0, 97, 98, 99, NaN, ...) become NaN.

    >>> reverse_scale(1, 4)
    4
    >>> reverse_scale(pd.Series([1, 2, 3, 4, 98]), 4).tolist()
    [4.0, 3.0, 2.0, 1.0, nan]
    """
    _check_width(width)

    if isinstance(values, pd.Series):
        numeric = pd.to_numeric(values, errors='coerce')
        in_range = numeric.between(1, width)
        return (width + 1 - numeric).where(in_range)

    try:
        v = float(values)
    except (TypeError, ValueError):
        return np.nan
    if np.isnan(v) or not 1 <= v <= width:
        return np.nan
    reversed_value = width + 1 - v
    return int(reversed_value) if reversed_value.is_integer() else reversed_value


def reverse_4point(values):
    """1->4, 2->3, 3->2, 4->1."""
    return reverse_scale(values, 4)


def reverse_5point(values):
    """1->5, 2->4, 3->3, 4->2, 5->1."""
    return reverse_scale(values, 5)


def reverse_6point(values):
    """1->6, 2->5, ... 6->1."""
    return reverse_scale(values, 6)


def harmonize_scale(values: pd.Series, spec: ScaleSpec) -> pd.Series:
    """Bring values to the canonical direction described by spec."""
    if spec.needs_reversal:
        return reverse_scale(values, spec.width)
    return values.copy()
