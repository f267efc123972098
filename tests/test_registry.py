import pandas as pd
import pytest

from abs_harmonization.cleaning import Direction, ScaleSpec
from abs_harmonization.concepts import (
    ConceptMapping,
    ConceptRegistry,
    DEFAULT_CONCEPT_MAPPINGS,
    DEFAULT_FAMILIES,
    HarmonizationFamily,
)
from abs_harmonization.data import ALL_WAVES, Wave
from abs_harmonization.errors import (
    DuplicateConceptError,
    MalformedRegistryError,
    UnknownConceptError,
    UnknownWaveError,
)


def test_default_lookups(registry):
    assert registry.variable_for('trust_executive', 'W2') == 'q7'
    assert registry.variable_for('trust_election_commission', 'W5') == 'q18'
    assert registry.variable_for('trust_election_commission', 'W3') == 'q16'
    assert registry.variable_for('trust_relatives', 'W4') == 'q25'
    assert registry.variable_for('voted_last_election', 'W5') is None


def test_availability_in_wave_order(registry):
    assert registry.availability('voted_last_election') == (
        Wave.W2, Wave.W3, Wave.W4, Wave.W6
    )
    assert registry.availability('covid_vaccination') == (Wave.W6,)


def test_availability_agrees_with_variable_for(registry):
    for concept in registry.concepts:
        expected = tuple(w for w in ALL_WAVES if registry.variable_for(concept, w) is not None)
        assert registry.availability(concept) == expected


def test_every_concept_has_at_least_one_wave(registry):
    assert all(len(registry.availability(c)) >= 1 for c in registry.concepts)


def test_unknown_concept_raises(registry):
    with pytest.raises(UnknownConceptError, match="Concept not found: no_such_concept"):
        registry.variable_for('no_such_concept', 'W2')
    # lookups by key behave like a mapping miss
    with pytest.raises(KeyError):
        registry.get('no_such_concept')


def test_unknown_wave_raises(registry):
    with pytest.raises(UnknownWaveError):
        registry.variable_for('trust_executive', 'W7')


def test_duplicate_concept_rejected():
    duplicated = list(DEFAULT_CONCEPT_MAPPINGS) + [
        ConceptMapping('trust_executive', 'trust', {'W2': 'q7'}, family='trust')
    ]
    with pytest.raises(DuplicateConceptError, match="trust_executive"):
        ConceptRegistry(duplicated, DEFAULT_FAMILIES)


def test_mapping_without_waves_rejected():
    with pytest.raises(MalformedRegistryError):
        ConceptMapping('orphan', 'misc', {'W2': None, 'W3': '', 'W4': 'NA'})


def test_mapping_with_unknown_wave_key_rejected():
    with pytest.raises(UnknownWaveError):
        ConceptMapping('odd', 'misc', {'W8': 'q1'})


def test_unknown_family_rejected():
    mapping = ConceptMapping('x', 'misc', {'W2': 'q1'}, family='missing_family')
    with pytest.raises(MalformedRegistryError, match="unknown family"):
        ConceptRegistry([mapping], DEFAULT_FAMILIES)


def test_duplicate_family_rejected():
    family = HarmonizationFamily('f', ('q1',), {'W2': ScaleSpec(4)})
    with pytest.raises(MalformedRegistryError):
        ConceptRegistry([], [family, family])


def test_family_requires_scale_specs():
    with pytest.raises(MalformedRegistryError):
        HarmonizationFamily('f', ('q1',), {'W2': 4})


def test_scale_for_uses_family_spec(registry):
    assert registry.scale_for('trust_executive', 'W2') == ScaleSpec(4, Direction.ASCENDING)
    assert registry.scale_for('trust_executive', 'W3') == ScaleSpec(6, Direction.DESCENDING)
    assert registry.scale_for('econ_country_current', 'W4') == ScaleSpec(5, Direction.DESCENDING)
    assert registry.scale_for('voted_last_election', 'W2') is None


def test_families_for_wave(registry):
    names = {f.name for f in registry.families_for_wave('W6')}
    assert names == {'economic', 'trust', 'social_trust'}


def test_family_lookup(registry):
    assert registry.family('trust').scale_for('W4').width == 4
    with pytest.raises(KeyError, match="Available"):
        registry.family('nope')


def test_domain_and_wave_queries(registry):
    assert len(registry.concepts_in_domain('covid')) == 8
    assert 'trust_executive' in registry.concepts_in_domain('trust')
    assert 'voted_last_election' not in registry.concepts_in_wave('W5')
    assert 'covid_infection' in registry.concepts_in_wave('W6')
    assert 'covid_infection' not in registry.concepts_in_wave('W4')
    assert set(registry.domains) >= {'economic', 'trust', 'politics', 'democracy', 'covid'}


def test_list_concepts_filters(registry):
    covid = registry.list_concepts(domain='covid')
    assert set(covid['domain']) == {'covid'}
    assert list(covid.columns) == ['concept', 'domain', 'description', 'scale_type', 'notes']

    w5 = registry.list_concepts(wave='W5')
    assert 'voted_last_election' not in set(w5['concept'])


def test_list_wave_concepts_includes_variable(registry):
    w6 = registry.list_wave_concepts('W6')
    row = w6[w6['concept'] == 'covid_lockdown'].iloc[0]
    assert row['variable'] == 'q143c'


def test_concept_info(registry):
    info = registry.concept_info('trust_ngos')
    assert info['w2_var'] == 'q19'
    assert info['w3_var'] == 'q17'
    assert info['family'] == 'trust'


def test_codebook_has_nan_for_unmapped_waves(registry):
    codebook = registry.codebook()
    assert list(codebook.columns) == ['concept', 'W2', 'W3', 'W4', 'W5', 'W6']
    assert len(codebook) == len(registry)

    voted = codebook.set_index('concept').loc['voted_last_election']
    assert voted['W4'] == 'q33'
    assert pd.isna(voted['W5'])


def test_registry_is_read_only(registry):
    mapping = registry.get('trust_executive')
    with pytest.raises(TypeError):
        mapping.variable_by_wave[Wave.W2] = 'q99'
    with pytest.raises(AttributeError):
        mapping.concept = 'other'


def test_mapping_requires_domain():
    with pytest.raises(MalformedRegistryError, match="domain"):
        ConceptMapping('trust_courts', '  ', {'W2': 'q8'})


def test_mapping_rejects_unknown_direction():
    with pytest.raises(MalformedRegistryError, match="lower_is_better"):
        ConceptMapping(
            'trust_courts', 'trust', {'W2': 'q8'}, canonical_direction='lower_is_better'
        )
