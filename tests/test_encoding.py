from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from diabetes_predictor.encoding import CanonicalRow, encode_frame, encode_row
from diabetes_predictor.errors import InvalidCode, InvalidValue, SchemaMismatch
from diabetes_predictor.registry import AGE, FEATURE_COLUMNS, INCOME


def _raw_rows() -> pd.DataFrame:
    return pd.DataFrame({
        "Diabetes_binary": [0, 1, 0],
        "Age": [1, 7, 13],
        "BMI": [22, 30.5, 41],
        "Education": [1, 5, 6],
        "Income": [1, 8, 4],
        "NoDocbcCost": [0, 1, 0],
        "PhysActivity": [1, 0, 1],
    })


def test_encode_frame_recodes_codes_to_labels():
    out = encode_frame(_raw_rows())
    assert list(out.columns) == list(FEATURE_COLUMNS) + ["Diabetes_binary"]
    assert out["Age"].tolist() == ["18-24", "50-54", "80 or older"]
    assert out["Income"].tolist() == ["LT $10k", "GT $75k", "$20-25k"]
    assert out["NoDocbcCost"].tolist() == ["No Barrier", "Cost Barrier", "No Barrier"]
    assert out["Diabetes_binary"].tolist() == ["Nondiabetic", "Diabetic", "Nondiabetic"]
    assert out["BMI"].dtype == float


def test_encode_frame_keeps_full_level_set():
    out = encode_frame(_raw_rows())
    assert list(out["Age"].cat.categories) == list(AGE.labels)
    assert list(out["Income"].cat.categories) == list(INCOME.labels)


def test_encode_frame_drops_unrelated_columns():
    df = _raw_rows()
    df["HighBP"] = [1, 0, 1]
    assert "HighBP" not in encode_frame(df).columns


def test_encode_frame_is_idempotent():
    once = encode_frame(_raw_rows())
    twice = encode_frame(once)
    pd.testing.assert_frame_equal(once, twice)


def test_encode_frame_accepts_mixed_codes_and_labels():
    df = _raw_rows()
    df["Education"] = df["Education"].astype(object)
    df.loc[1, "Education"] = "some college"
    out = encode_frame(df)
    assert out["Education"].tolist() == ["None", "Some College", "College Graduate"]


def test_encode_frame_keeps_missing_values_missing():
    df = _raw_rows()
    df["Income"] = [1.0, np.nan, 4.0]
    df["BMI"] = [22.0, np.nan, 41.0]
    out = encode_frame(df)
    assert out["Income"].isna().tolist() == [False, True, False]
    assert np.isnan(out["BMI"].iloc[1])


def test_encode_frame_rejects_out_of_range_code():
    df = _raw_rows()
    df.loc[0, "Education"] = 99
    with pytest.raises(InvalidCode):
        encode_frame(df)


def test_encode_frame_rejects_non_numeric_bmi():
    df = _raw_rows()
    df["BMI"] = df["BMI"].astype(object)
    df.loc[0, "BMI"] = "heavy"
    with pytest.raises(InvalidValue):
        encode_frame(df)


def test_encode_frame_missing_column():
    with pytest.raises(SchemaMismatch):
        encode_frame(_raw_rows().drop(columns=["Income"]))


def test_encode_row_from_strings():
    row = encode_row({
        "Age": "50-54",
        "BMI": "30",
        "Education": "Some College",
        "Income": "GT $75K",
        "NoDocbcCost": "No Barrier",
        "PhysActivity": "1",
    })
    assert row == CanonicalRow(
        age="50-54",
        bmi=30.0,
        education="Some College",
        income="GT $75k",
        no_doc_bc_cost="No Barrier",
        phys_activity="Yes",
    )


def test_encode_row_matches_bulk_encoding():
    raw = _raw_rows()
    bulk = encode_frame(raw)
    for i in range(len(raw)):
        fields = {c: raw[c].iloc[i] for c in FEATURE_COLUMNS}
        row = encode_row(fields)
        expected = {c: bulk[c].iloc[i] for c in FEATURE_COLUMNS}
        assert row.as_dict() == expected


def test_encode_row_is_idempotent():
    row = encode_row({
        "Age": 9, "BMI": 27.5, "Education": 4, "Income": 6, "NoDocbcCost": 0, "PhysActivity": 1,
    })
    assert encode_row(row.as_dict()) == row


def test_encode_row_requires_every_field():
    with pytest.raises(SchemaMismatch):
        encode_row({"Age": 1, "BMI": 20.0})


def test_encode_row_rejects_unknown_fields():
    fields = {"Age": 1, "BMI": 20.0, "Education": 1, "Income": 1, "NoDocbcCost": 0, "PhysActivity": 0}
    with pytest.raises(SchemaMismatch):
        encode_row({**fields, "HighBP": 1})


def test_encode_row_rejects_supplied_nan():
    fields = {"Age": 1, "BMI": 20.0, "Education": 1, "Income": 1, "NoDocbcCost": 0, "PhysActivity": 0}
    with pytest.raises(InvalidValue):
        encode_row({**fields, "BMI": float("nan")})
    with pytest.raises(InvalidCode):
        encode_row({**fields, "Income": np.nan})


def test_canonical_row_to_frame_roundtrip():
    row = encode_row({
        "Age": 2, "BMI": 19.0, "Education": 6, "Income": 8, "NoDocbcCost": 1, "PhysActivity": 0,
    })
    frame = row.to_frame()
    assert list(frame.columns) == list(FEATURE_COLUMNS)
    assert isinstance(frame["Age"].dtype, pd.CategoricalDtype)
    assert CanonicalRow.from_mapping(frame.iloc[0].to_dict()) == row
