"""
Concept registry.

A concept is a theoretical construct ("trust in the executive") measured by
different raw variables in different waves. The registry maps every concept
to its per-wave variable name and to the harmonization family that knows the
scale width and polarity of that battery in each wave.

The registry is built once, is immutable, and is passed explicitly to every
harmonization and accessor call.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

import numpy as np
import pandas as pd

from ..cleaning.scales import ScaleSpec
from ..data.waves import Wave, ALL_WAVES
from ..errors import (
    DuplicateConceptError,
    MalformedRegistryError,
    UnknownConceptError,
)


CANONICAL_DIRECTION = 'higher_is_more_positive'


def _wave_mapping(raw: Mapping[Any, Any], owner: str) -> Mapping[Wave, Any]:
    """Key a mapping by Wave, rejecting unknown keys up front."""
    if not isinstance(raw, Mapping):
        raise MalformedRegistryError(
            f"{owner}: expected a mapping keyed by wave, got {type(raw).__name__}"
        )
    keyed = {}
    for key, value in raw.items():
        wave = Wave.parse(key)
        if wave in keyed:
            raise MalformedRegistryError(f"{owner}: wave {wave} given twice")
        keyed[wave] = value
    return MappingProxyType(keyed)


@dataclass(frozen=True)
class HarmonizationFamily:
    """
    A battery of questions that shares one scale per wave.

    Attributes:
        name: Family key (e.g. 'trust')
        variables: Raw variable names belonging to the battery
        scales: Wave -> ScaleSpec. Waves not listed are not harmonized.
        anchors: Scale width -> (low, high) texts of the canonical scale,
                 used to annotate harmonized column labels.
    """
    name: str
    variables: Tuple[str, ...]
    scales: Mapping[Wave, ScaleSpec]
    anchors: Mapping[int, Tuple[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise MalformedRegistryError("Harmonization family needs a name")
        object.__setattr__(self, 'variables', tuple(self.variables))
        scales = _wave_mapping(self.scales, f"family '{self.name}'")
        for wave, spec in scales.items():
            if not isinstance(spec, ScaleSpec):
                raise MalformedRegistryError(
                    f"family '{self.name}': scale for {wave} is not a ScaleSpec"
                )
        object.__setattr__(self, 'scales', scales)
        object.__setattr__(self, 'anchors', MappingProxyType(dict(self.anchors)))

    def scale_for(self, wave: Any) -> Optional[ScaleSpec]:
        return self.scales.get(Wave.parse(wave))

    def annotation(self, spec: ScaleSpec) -> str:
        """Audit suffix recorded on harmonized column labels."""
        low, high = self.anchors.get(spec.width, ('lowest', 'highest'))
        return f"[harmonized {spec.width}pt: 1={low}, {spec.width}={high}]"


@dataclass(frozen=True)
class ConceptMapping:
    """
    One registry row.

    Attributes:
        concept: Unique concept key (e.g. 'trust_executive')
        domain: Thematic domain (trust, economic, democracy, politics, covid, ...)
        description: What the concept measures
        variable_by_wave: Wave -> raw variable name; unmapped waves are omitted
        scale_type: Free-text scale description (e.g. '4pt/6pt trust')
        canonical_direction: Convention harmonized values follow
        notes: Free-text remarks (scale changes, verification status)
        family: Harmonization family whose per-wave ScaleSpec applies
    """
    concept: str
    domain: str
    variable_by_wave: Mapping[Wave, str]
    description: str = ''
    scale_type: str = ''
    canonical_direction: str = CANONICAL_DIRECTION
    notes: str = ''
    family: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.concept, str) or not self.concept.strip():
            raise MalformedRegistryError(f"Concept key must be a non-empty string: {self.concept!r}")
        owner = f"concept '{self.concept}'"
        if not isinstance(self.domain, str) or not self.domain.strip():
            raise MalformedRegistryError(f"{owner}: domain must be a non-empty string")
        if self.canonical_direction != CANONICAL_DIRECTION:
            raise MalformedRegistryError(
                f"{owner}: unknown direction {self.canonical_direction!r}, "
                f"expected '{CANONICAL_DIRECTION}'"
            )
        raw = _wave_mapping(self.variable_by_wave, owner)
        # Blank and None entries mean "not fielded in this wave"
        cleaned = {
            wave: str(var).strip()
            for wave, var in raw.items()
            if var is not None and not _is_blank(var)
        }
        if not cleaned:
            raise MalformedRegistryError(f"{owner}: no wave has a variable mapping")
        object.__setattr__(self, 'variable_by_wave', MappingProxyType(cleaned))

    def variable_for(self, wave: Any) -> Optional[str]:
        return self.variable_by_wave.get(Wave.parse(wave))

    @property
    def waves(self) -> Tuple[Wave, ...]:
        return tuple(w for w in ALL_WAVES if w in self.variable_by_wave)

    def to_dict(self) -> Dict[str, Any]:
        row = {
            'concept': self.concept,
            'domain': self.domain,
            'description': self.description,
        }
        for wave in ALL_WAVES:
            row[wave.registry_column] = self.variable_by_wave.get(wave)
        row.update({
            'scale_type': self.scale_type,
            'direction': self.canonical_direction,
            'notes': self.notes,
            'family': self.family,
        })
        return row


def _is_blank(value: Any) -> bool:
    if isinstance(value, float) and np.isnan(value):
        return True
    return isinstance(value, str) and value.strip() in ('', 'NA', 'nan')


class ConceptRegistry:
    """
    Read-only lookup over concept mappings and harmonization families.

    Example:
        >>> registry = ConceptRegistry(mappings, families)
        >>> registry.variable_for('trust_election_commission', 'W3')
        'q16'
        >>> registry.availability('voted_last_election')
        (<Wave.W2: 'W2'>, <Wave.W3: 'W3'>, <Wave.W4: 'W4'>, <Wave.W6: 'W6'>)
    """

    def __init__(
        self,
        mappings: Iterable[ConceptMapping],
        families: Iterable[HarmonizationFamily] = (),
    ):
        self._mappings: Dict[str, ConceptMapping] = {}
        for mapping in mappings:
            if not isinstance(mapping, ConceptMapping):
                raise MalformedRegistryError(
                    f"Registry rows must be ConceptMapping, got {type(mapping).__name__}"
                )
            if mapping.concept in self._mappings:
                raise DuplicateConceptError(
                    f"Duplicate concept in registry: '{mapping.concept}'"
                )
            self._mappings[mapping.concept] = mapping

        self._families: Dict[str, HarmonizationFamily] = {}
        for family in families:
            if family.name in self._families:
                raise MalformedRegistryError(f"Duplicate harmonization family: '{family.name}'")
            self._families[family.name] = family

        for mapping in self._mappings.values():
            if mapping.family is not None and mapping.family not in self._families:
                raise MalformedRegistryError(
                    f"Concept '{mapping.concept}' names unknown family '{mapping.family}'"
                )

    # -------------------------------------------------------------------------
    # Basic access
    # -------------------------------------------------------------------------

    def __contains__(self, concept: object) -> bool:
        return concept in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self):
        return iter(self._mappings.values())

    @property
    def concepts(self) -> List[str]:
        return list(self._mappings.keys())

    @property
    def domains(self) -> List[str]:
        return sorted({m.domain for m in self._mappings.values()})

    @property
    def families(self) -> List[HarmonizationFamily]:
        return list(self._families.values())

    def get(self, concept: str) -> ConceptMapping:
        try:
            return self._mappings[concept]
        except KeyError:
            raise UnknownConceptError(f"Concept not found: {concept}") from None

    def family(self, name: str) -> HarmonizationFamily:
        if name not in self._families:
            available = ', '.join(sorted(self._families))
            raise KeyError(f"Unknown harmonization family: '{name}'. Available: {available}")
        return self._families[name]

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def variable_for(self, concept: str, wave: Any) -> Optional[str]:
        """
        Raw variable backing a concept in a wave.

        Raises:
            UnknownConceptError: If the concept is not registered

        Returns:
            The variable name, or None if the concept is not fielded in that wave
        """
        return self.get(concept).variable_for(wave)

    def concepts_in_domain(self, domain: str) -> Set[str]:
        return {m.concept for m in self._mappings.values() if m.domain == domain}

    def concepts_in_wave(self, wave: Any) -> Set[str]:
        wave = Wave.parse(wave)
        return {m.concept for m in self._mappings.values() if wave in m.variable_by_wave}

    def availability(self, concept: str) -> Tuple[Wave, ...]:
        """Waves where the concept has a mapping, in W2..W6 order."""
        return self.get(concept).waves

    def scale_for(self, concept: str, wave: Any) -> Optional[ScaleSpec]:
        """ScaleSpec of the concept's family in a wave, if it is harmonized there."""
        mapping = self.get(concept)
        if mapping.family is None:
            return None
        return self._families[mapping.family].scale_for(wave)

    def families_for_wave(self, wave: Any) -> List[HarmonizationFamily]:
        wave = Wave.parse(wave)
        return [f for f in self._families.values() if wave in f.scales]

    # -------------------------------------------------------------------------
    # Tabular views
    # -------------------------------------------------------------------------

    def list_concepts(
        self,
        domain: Optional[str] = None,
        wave: Optional[Any] = None,
    ) -> pd.DataFrame:
        """Concept overview, optionally filtered by domain and wave availability."""
        columns = ['concept', 'domain', 'description', 'scale_type', 'notes']
        rows = []
        wave = Wave.parse(wave) if wave is not None else None
        for m in self._mappings.values():
            if domain is not None and m.domain != domain:
                continue
            if wave is not None and wave not in m.variable_by_wave:
                continue
            rows.append({c: getattr(m, c) for c in columns})
        return pd.DataFrame(rows, columns=columns)

    def list_wave_concepts(self, wave: Any) -> pd.DataFrame:
        """Concepts fielded in one wave, with the backing variable name."""
        wave = Wave.parse(wave)
        columns = ['concept', 'domain', 'description', 'variable', 'scale_type', 'notes']
        rows = [
            {
                'concept': m.concept,
                'domain': m.domain,
                'description': m.description,
                'variable': m.variable_by_wave[wave],
                'scale_type': m.scale_type,
                'notes': m.notes,
            }
            for m in self._mappings.values()
            if wave in m.variable_by_wave
        ]
        return pd.DataFrame(rows, columns=columns)

    def concept_info(self, concept: str) -> Dict[str, Any]:
        return self.get(concept).to_dict()

    def codebook(self) -> pd.DataFrame:
        """concept, W2..W6 table of raw variable names (NaN where unmapped)."""
        rows = []
        for m in self._mappings.values():
            row = {'concept': m.concept}
            for wave in ALL_WAVES:
                row[wave.value] = m.variable_by_wave.get(wave, np.nan)
            rows.append(row)
        return pd.DataFrame(rows, columns=['concept'] + [w.value for w in ALL_WAVES])

    def to_frame(self) -> pd.DataFrame:
        """Registry in its tabular file layout."""
        return pd.DataFrame([m.to_dict() for m in self._mappings.values()])

    def __repr__(self) -> str:
        return (
            f"ConceptRegistry(concepts={len(self._mappings)}, "
            f"families={list(self._families)})"
        )
