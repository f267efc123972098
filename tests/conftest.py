import pandas as pd
import pytest

from abs_harmonization.concepts import (
    ConceptMapping,
    ConceptRegistry,
    DEFAULT_FAMILIES,
    default_registry,
)
from abs_harmonization.data import WaveDataset


TRUST_LABELS_W2 = {
    1: "None at all",
    2: "Not very much trust",
    3: "Quite a lot of trust",
    4: "A great deal of trust",
    8: "Can't choose",
    9: "Decline to answer",
}

TRUST_LABELS_W4 = {
    1: "A great deal of trust",
    2: "Quite a lot of trust",
    3: "Not very much trust",
    4: "None at all",
    98: "Don't know",
}


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def small_registry():
    """Three concepts: two harmonized batteries and one plain question."""
    mappings = [
        ConceptMapping(
            concept='trust_executive',
            domain='trust',
            description='Trust in the president/prime minister',
            variable_by_wave={w: 'q7' for w in ('W2', 'W3', 'W4', 'W5', 'W6')},
            family='trust',
        ),
        ConceptMapping(
            concept='econ_country_current',
            domain='economic',
            description='Economic condition of the country today',
            variable_by_wave={w: 'q1' for w in ('W2', 'W3', 'W4', 'W5', 'W6')},
            family='economic',
        ),
        ConceptMapping(
            concept='voted_last_election',
            domain='politics',
            description='Voted in the last national election',
            variable_by_wave={'W2': 'q32', 'W3': 'q32', 'W4': 'q33', 'W6': 'q33'},
        ),
    ]
    return ConceptRegistry(mappings, DEFAULT_FAMILIES)


@pytest.fixture
def w2_dataset():
    frame = pd.DataFrame({
        'q1': [0, 1, 3, 5],
        'q7': [4, 1, 8, 9],
        'q32': [1, 2, 1, 1],
    })
    return WaveDataset.from_frame(
        frame,
        'W2',
        variable_labels={
            'q1': 'Overall economic condition of the country',
            'q7': 'Trust in the prime minister',
            'q32': 'Voted in the last election',
        },
        value_labels={'q7': TRUST_LABELS_W2},
    )


@pytest.fixture
def w4_dataset():
    frame = pd.DataFrame({
        'q1': [1, 5, 98],
        'q7': [1, 4, 98],
        'q33': [1, 2, 2],
    })
    return WaveDataset.from_frame(
        frame,
        'W4',
        variable_labels={
            'q1': 'Overall economic condition of the country',
            'q7': 'Trust in the president',
            'q33': 'Voted in the last election',
        },
        value_labels={'q7': TRUST_LABELS_W4},
    )
