"""
Concept registry and accessor.

Example usage:
    from abs_harmonization.concepts import default_registry, get_concept

    registry = default_registry()
    registry.variable_for('trust_election_commission', 'W5')   # 'q18'
    registry.availability('voted_last_election')               # W2, W3, W4, W6

    col = get_concept(w3_data, 'trust_executive', registry, clean=True)
"""

from .registry import (
    CANONICAL_DIRECTION,
    ConceptMapping,
    ConceptRegistry,
    HarmonizationFamily,
)

from .mappings import (
    DEFAULT_CONCEPT_MAPPINGS,
    DEFAULT_FAMILIES,
    default_registry,
)

from .io import (
    load_concept_mappings,
    registry_from_frame,
    save_concept_mappings,
)

from .accessor import (
    get_concept,
    get_concept_all_waves,
    validate_concept,
    extract_concepts,
    concept_missingness,
)

__all__ = [
    # Registry
    'CANONICAL_DIRECTION',
    'ConceptMapping',
    'ConceptRegistry',
    'HarmonizationFamily',
    # Defaults
    'DEFAULT_CONCEPT_MAPPINGS',
    'DEFAULT_FAMILIES',
    'default_registry',
    # File I/O
    'load_concept_mappings',
    'registry_from_frame',
    'save_concept_mappings',
    # Accessor
    'get_concept',
    'get_concept_all_waves',
    'validate_concept',
    'extract_concepts',
    'concept_missingness',
]
