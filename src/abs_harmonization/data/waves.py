"""
Wave identifiers.

The Asian Barometer waves handled here form a fixed enumeration. Every
mapping keyed by wave in this package uses Wave members, so unknown wave
keys are rejected where a mapping is built rather than where it is read.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Mapping, TypeVar

from ..errors import UnknownWaveError


V = TypeVar('V')

_WAVE_PATTERN = re.compile(r'^(?:w|wave)\s*([2-6])(?:_var)?$', re.IGNORECASE)


class Wave(str, Enum):
    W2 = 'W2'
    W3 = 'W3'
    W4 = 'W4'
    W5 = 'W5'
    W6 = 'W6'

    def __str__(self) -> str:
        return self.value

    @property
    def number(self) -> int:
        return int(self.value[1:])

    @property
    def order(self) -> int:
        """Position in the canonical W2 < W3 < ... < W6 ordering."""
        return list(Wave).index(self)

    @property
    def registry_column(self) -> str:
        """Column name used for this wave in a tabular registry file."""
        return f"{self.value.lower()}_var"

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, Wave):
            return self.order < other.order
        return NotImplemented

    @classmethod
    def parse(cls, value: Any) -> 'Wave':
        """
        Resolve a wave identifier.

        Accepts a Wave member or strings like 'W4', 'w4', 'w4_var', 'Wave4'.

        Raises:
            UnknownWaveError: If the value does not name one of W2..W6
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            match = _WAVE_PATTERN.match(value.strip())
            if match:
                return cls(f"W{match.group(1)}")
        available = ', '.join(w.value for w in cls)
        raise UnknownWaveError(f"Invalid wave: {value!r}. Use one of: {available}")


ALL_WAVES: List[Wave] = list(Wave)


def sort_waves(waves) -> List[Wave]:
    """Parse and sort wave identifiers into enumeration order."""
    return sorted({Wave.parse(w) for w in waves}, key=lambda w: w.order)


def key_by_wave(mapping: Mapping[Any, V]) -> Dict[Wave, V]:
    """
    Re-key a mapping by parsed Wave, in enumeration order.

    Raises:
        ValueError: If two keys name the same wave (e.g. 'W2' and Wave.W2)
    """
    keyed: Dict[Wave, V] = {}
    for key, value in mapping.items():
        wave = Wave.parse(key)
        if wave in keyed:
            raise ValueError(f"More than one dataset given for {wave}")
        keyed[wave] = value
    return {w: keyed[w] for w in sorted(keyed, key=lambda w: w.order)}
