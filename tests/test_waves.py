import pytest

from abs_harmonization.data import ALL_WAVES, Wave, key_by_wave, sort_waves
from abs_harmonization.errors import ConfigurationError, UnknownWaveError


@pytest.mark.parametrize("value", ["W4", "w4", "w4_var", "Wave4", " W4 ", Wave.W4])
def test_parse_accepts_common_spellings(value):
    assert Wave.parse(value) is Wave.W4


@pytest.mark.parametrize("value", ["W1", "W7", "wave", "", None, 4])
def test_parse_rejects_unknown_waves(value):
    with pytest.raises(UnknownWaveError):
        Wave.parse(value)


def test_unknown_wave_error_is_configuration_and_value_error():
    with pytest.raises(ConfigurationError):
        Wave.parse("W9")
    with pytest.raises(ValueError):
        Wave.parse("W9")


def test_enumeration_order():
    assert ALL_WAVES == [Wave.W2, Wave.W3, Wave.W4, Wave.W5, Wave.W6]
    assert Wave.W2 < Wave.W3 < Wave.W6
    assert [w.order for w in ALL_WAVES] == [0, 1, 2, 3, 4]


def test_sort_waves_parses_and_deduplicates():
    assert sort_waves(["W6", "w2", Wave.W4, "W2"]) == [Wave.W2, Wave.W4, Wave.W6]


def test_registry_column_and_str():
    assert Wave.W5.registry_column == "w5_var"
    assert str(Wave.W3) == "W3"
    assert Wave.W6.number == 6


def test_key_by_wave_orders_and_parses():
    keyed = key_by_wave({'w6': 'b', Wave.W2: 'a'})
    assert list(keyed) == [Wave.W2, Wave.W6]
    assert keyed[Wave.W6] == 'b'


def test_key_by_wave_rejects_duplicates():
    with pytest.raises(ValueError, match="W3"):
        key_by_wave({'W3': 1, 'wave3': 2})
