import numpy as np
import pandas as pd
import pytest

from abs_harmonization.data import LabeledColumn, WaveDataset


def test_label_for_tolerates_float_codes():
    col = LabeledColumn(pd.Series([1.0, 2.0]), value_labels={1: "Yes", 2: "No"})

    assert col.label_for(1.0) == "Yes"
    assert col.label_for(2) == "No"
    assert col.label_for(3) is None
    assert col.label_for("abc") is None


def test_with_values_keeps_labels():
    col = LabeledColumn(pd.Series([1, 2]), label="Q", value_labels={1: "Yes"})
    new = col.with_values(pd.Series([np.nan, 2.0]))

    assert new.label == "Q"
    assert new.value_labels == {1: "Yes"}
    assert new.n_missing() == 1
    assert col.n_missing() == 0


def test_from_frame_attaches_labels():
    frame = pd.DataFrame({"q7": [1, 2], "q8": [3, 4]})
    ds = WaveDataset.from_frame(
        frame, "W3",
        variable_labels={"q7": "Trust: executive"},
        value_labels={"q7": {1: "Trust fully"}},
    )

    assert ds.n_rows == 2
    assert ds.column_names == ["q7", "q8"]
    assert ds["q7"].label == "Trust: executive"
    assert ds["q7"].value_labels == {1: "Trust fully"}
    assert ds["q8"].label is None
    assert not ds["q8"].has_value_labels


def test_unequal_row_counts_rejected():
    with pytest.raises(ValueError, match="unequal row counts"):
        WaveDataset("W2", {
            "a": LabeledColumn(pd.Series([1, 2])),
            "b": LabeledColumn(pd.Series([1, 2, 3])),
        })


def test_with_columns_returns_new_dataset():
    ds = WaveDataset("W2", {"a": LabeledColumn(pd.Series([1, 2]))})
    extended = ds.with_columns({"b": LabeledColumn(pd.Series([3, 4]))})

    assert "b" in extended
    assert "b" not in ds
    assert extended.wave == ds.wave


def test_filter_rows_and_rename():
    ds = WaveDataset.from_frame(pd.DataFrame({"Q1": [1, 2, 3]}), "W6")
    filtered = ds.filter_rows(pd.Series([True, False, True]))
    renamed = filtered.rename_columns(str.lower)

    assert renamed["q1"].values.tolist() == [1, 3]
    assert ds.n_rows == 3


def test_to_frame_round_trip():
    frame = pd.DataFrame({"q1": [1, 2], "q2": ["a", "b"]})
    ds = WaveDataset.from_frame(frame, "W4")

    pd.testing.assert_frame_equal(ds.to_frame(), frame)


def test_empty_dataset():
    ds = WaveDataset("W5", {})
    assert ds.n_rows == 0
    assert ds.to_frame().empty
