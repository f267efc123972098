import pandas as pd
import pytest

from abs_harmonization.concepts import (
    load_concept_mappings,
    registry_from_frame,
    save_concept_mappings,
)
from abs_harmonization.concepts.io import REQUIRED_COLUMNS
from abs_harmonization.data import ALL_WAVES
from abs_harmonization.errors import MalformedRegistryError


def _row(**overrides):
    row = {col: '' for col in REQUIRED_COLUMNS}
    row.update(concept='trust_courts', domain='trust', w2_var='q8', w4_var='q8')
    row.update(overrides)
    return row


def test_csv_round_trip(tmp_path, registry):
    path = save_concept_mappings(registry, tmp_path / 'mappings.csv')
    loaded = load_concept_mappings(path)

    assert loaded.concepts == registry.concepts
    for concept in registry.concepts:
        for wave in ALL_WAVES:
            assert loaded.variable_for(concept, wave) == registry.variable_for(concept, wave)
        assert loaded.get(concept).family == registry.get(concept).family


def test_csv_blank_cells_mean_unmapped(tmp_path):
    path = tmp_path / 'mappings.csv'
    pd.DataFrame([_row()]).to_csv(path, index=False)

    loaded = load_concept_mappings(path)
    assert loaded.availability('trust_courts') == (ALL_WAVES[0], ALL_WAVES[2])
    assert loaded.get('trust_courts').family is None


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_concept_mappings(tmp_path / 'nope.csv')


def test_unsupported_suffix_raises(tmp_path):
    path = tmp_path / 'mappings.json'
    path.write_text('{}')
    with pytest.raises(ValueError, match="Unsupported"):
        load_concept_mappings(path)


def test_missing_columns_rejected():
    frame = pd.DataFrame([{'concept': 'a', 'domain': 'b', 'w2_var': 'q1'}])
    with pytest.raises(MalformedRegistryError, match="missing required columns"):
        registry_from_frame(frame)


def test_empty_table_rejected():
    with pytest.raises(MalformedRegistryError):
        registry_from_frame(pd.DataFrame(columns=REQUIRED_COLUMNS))


def test_blank_concept_rejected_with_line_number():
    frame = pd.DataFrame([_row(), _row(concept='')])
    with pytest.raises(MalformedRegistryError, match="row 3"):
        registry_from_frame(frame)


def test_row_without_waves_rejected():
    frame = pd.DataFrame([_row(w2_var='', w4_var='')])
    with pytest.raises(MalformedRegistryError, match="row 2"):
        registry_from_frame(frame)


def test_unknown_family_in_file_rejected():
    frame = pd.DataFrame([_row(family='nonexistent')])
    with pytest.raises(MalformedRegistryError):
        registry_from_frame(frame)


def test_yaml_registry(tmp_path):
    path = tmp_path / 'mappings.yaml'
    path.write_text(
        "concepts:\n"
        "  - concept: trust_executive\n"
        "    domain: trust\n"
        "    w2_var: q7\n"
        "    w6_var: q7\n"
        "    family: trust\n"
        "  - concept: general_trust\n"
        "    domain: trust\n"
        "    w3_var: q22\n"
    )

    loaded = load_concept_mappings(path)
    assert loaded.concepts == ['trust_executive', 'general_trust']
    assert loaded.scale_for('trust_executive', 'W6').width == 4
    assert loaded.variable_for('general_trust', 'W2') is None


def test_yaml_without_concepts_list_rejected(tmp_path):
    path = tmp_path / 'mappings.yaml'
    path.write_text("paths:\n  raw_data: x\n")
    with pytest.raises(MalformedRegistryError, match="concepts"):
        load_concept_mappings(path)


def test_row_with_blank_domain_rejected():
    frame = pd.DataFrame([_row(), _row(concept='trust_police', domain='')])
    with pytest.raises(MalformedRegistryError, match="row 3.*domain"):
        registry_from_frame(frame)


def test_row_with_unknown_direction_rejected():
    frame = pd.DataFrame([_row(direction='lower_is_better')])
    with pytest.raises(MalformedRegistryError, match="row 2.*direction"):
        registry_from_frame(frame)


def test_explicit_canonical_direction_accepted():
    frame = pd.DataFrame([_row(direction='higher_is_more_positive')])
    loaded = registry_from_frame(frame)
    assert loaded.get('trust_courts').canonical_direction == 'higher_is_more_positive'
