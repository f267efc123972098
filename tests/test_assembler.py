import pandas as pd
import pytest

from abs_harmonization.data import Wave, WaveDataset
from abs_harmonization.harmonize import (
    ROW_COL,
    WAVE_COL,
    assemble,
    create_harmonization_codebook,
    export_variable_codebook,
    harmonize_wave,
)


@pytest.fixture
def harmonized(w2_dataset, w4_dataset, small_registry):
    return {
        'W4': harmonize_wave(w4_dataset, small_registry),
        'W2': harmonize_wave(w2_dataset, small_registry),
    }


def test_row_count_is_conserved(harmonized):
    assembled = assemble(harmonized)
    assert assembled.n_rows == sum(ds.n_rows for ds in harmonized.values())


def test_waves_stacked_in_order_with_tags(harmonized):
    assembled = assemble(harmonized)
    frame = assembled.frame

    assert assembled.waves == [Wave.W2, Wave.W4]
    assert frame[WAVE_COL].tolist() == ['W2'] * 4 + ['W4'] * 3
    assert frame[ROW_COL].tolist() == [0, 1, 2, 3, 0, 1, 2]
    assert list(frame.columns[:2]) == [WAVE_COL, ROW_COL]


def test_columns_missing_from_a_wave_are_nan(harmonized):
    frame = assemble(harmonized).frame

    # q32 only exists in W2, q33 only in W4
    assert frame.loc[frame[WAVE_COL] == 'W4', 'q32'].isna().all()
    assert frame.loc[frame[WAVE_COL] == 'W2', 'q33'].isna().all()
    assert frame['voted_last_election'].notna().all()


def test_harmonized_concepts_align_across_waves(harmonized):
    assembled = assemble(harmonized)

    w2 = assembled.rows_for('W2')['trust_executive']
    w4 = assembled.rows_for('W4')['trust_executive']
    # "a great deal of trust" is 4 in both waves
    assert w2.iloc[0] == 4
    assert w4.iloc[0] == 4


def test_wave_counts(harmonized):
    counts = assemble(harmonized).wave_counts()
    assert counts.to_dict() == {'W2': 4, 'W4': 3}


def test_labels_collected(harmonized):
    labels = assemble(harmonized).labels
    assert labels['q7'] == 'Trust in the prime minister'
    assert labels[WAVE_COL] == 'Survey wave'


def test_mismatched_key_rejected(w2_dataset):
    with pytest.raises(ValueError, match="tagged as W2"):
        assemble({'W3': w2_dataset})


def test_empty_input():
    assembled = assemble({})
    assert assembled.n_rows == 0
    assert assembled.columns == [WAVE_COL, ROW_COL]


def test_raw_waves_can_be_stacked_too():
    a = WaveDataset.from_frame(pd.DataFrame({'x': [1]}), 'W5')
    b = WaveDataset.from_frame(pd.DataFrame({'y': [2, 3]}), 'W6')
    frame = assemble({'W6': b, 'W5': a}).frame

    assert frame[WAVE_COL].tolist() == ['W5', 'W6', 'W6']
    assert frame['x'].isna().tolist() == [False, True, True]


def test_harmonization_codebook(small_registry):
    codebook = create_harmonization_codebook(small_registry)

    assert list(codebook.columns) == ['concept', 'W2', 'W3', 'W4', 'W5', 'W6']
    voted = codebook.set_index('concept').loc['voted_last_election']
    assert voted['W4'] == 'q33'
    assert pd.isna(voted['W5'])


def test_export_variable_codebook(tmp_path, w2_dataset, w4_dataset):
    path = tmp_path / 'out' / 'variables.csv'
    codebook = export_variable_codebook({'W4': w4_dataset, 'W2': w2_dataset}, path)

    assert list(codebook.columns) == ['source_wave', 'variable', 'label']
    assert codebook['source_wave'].tolist() == ['W2'] * 3 + ['W4'] * 3
    assert path.exists()
    assert len(pd.read_csv(path)) == 6


def test_same_wave_under_two_keys_rejected(w2_dataset):
    with pytest.raises(ValueError, match="More than one dataset given for W2"):
        assemble({'W2': w2_dataset, Wave.W2: w2_dataset})


def test_raw_wave_column_clash_rejected():
    raw = WaveDataset.from_frame(pd.DataFrame({'wave': [6, 6], 'x': [1, 2]}), 'W6')
    with pytest.raises(ValueError, match="'wave'"):
        assemble({'W6': raw})


def test_raw_respondent_row_clash_rejected():
    raw = WaveDataset.from_frame(pd.DataFrame({'respondent_row': [10, 11]}), 'W6')
    with pytest.raises(ValueError, match="'respondent_row'"):
        assemble({'W6': raw})
