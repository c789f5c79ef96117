from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from fastapi.testclient import TestClient

from diabetes_predictor.datasets.loaders import load_diabetes_csv
from diabetes_predictor.defaults import compute_defaults
from diabetes_predictor.encoding import encode_row
from diabetes_predictor.model import ModelSourceCallable, SklearnPredictor
from diabetes_predictor.service import ServingContext, Settings, create_app

INFO = {"name": "Mike Keating", "link": "https://github.com/mike-keating-iv/st558-final-project"}


@pytest.fixture
def env(monkeypatch, trained):
    csv_path, model_path, _ = trained
    monkeypatch.setenv("DIABETES_DATA_PATH", str(csv_path))
    monkeypatch.setenv("DIABETES_MODEL_PATH", str(model_path))
    monkeypatch.delenv("DIABETES_INFO_NAME", raising=False)
    monkeypatch.delenv("DIABETES_INFO_LINK", raising=False)
    return csv_path, model_path


@pytest.fixture
def client(env):
    with TestClient(create_app(Settings())) as c:
        yield c


def test_info(client):
    resp = client.get("/info")
    assert resp.status_code == 200
    assert resp.json() == INFO


def test_pred_without_params_uses_defaults(client, env):
    csv_path, _ = env
    resp = client.get("/pred")
    assert resp.status_code == 200
    body = resp.json()

    defaults = compute_defaults(load_diabetes_csv(csv_path).frame)
    ctx = client.app.state.context
    expected = ctx.predictor.predict(encode_row(defaults.as_dict()))
    assert body["prediction"] == expected
    assert body["inputs"] == encode_row(defaults.as_dict()).as_dict()


def test_pred_literal_example(client):
    resp = client.get("/pred", params={
        "Age": "50-54",
        "BMI": 30,
        "Income": "GT $75k",
        "Education": "Some College",
        "NoDocbcCost": "No Barrier",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["prediction"] in {"Nondiabetic", "Diabetic"}
    assert body["inputs"]["Income"] == "GT $75k"
    assert body["inputs"]["BMI"] == 30.0


def test_pred_accepts_codes(client):
    by_code = client.get("/pred", params={"Age": 7, "Education": 5, "Income": 8, "NoDocbcCost": 0})
    by_label = client.get("/pred", params={
        "Age": "50-54", "Education": "Some College", "Income": "GT $75k", "NoDocbcCost": "No Barrier",
    })
    assert by_code.status_code == by_label.status_code == 200
    assert by_code.json() == by_label.json()
    decimal = client.get("/pred", params={"Age": "7.0", "Education": "5.0", "Income": 8, "NoDocbcCost": 0})
    assert decimal.json() == by_code.json()


def test_pred_out_of_range_code_is_rejected_consistently(client):
    for _ in range(3):
        resp = client.get("/pred", params={"Education": 99})
        assert resp.status_code == 422
        assert "Education" in resp.json()["detail"]


def test_pred_unknown_label_is_rejected(client):
    resp = client.get("/pred", params={"NoDocbcCost": "Maybe"})
    assert resp.status_code == 422


def test_pred_non_numeric_bmi(client):
    resp = client.get("/pred", params={"BMI": "heavy"})
    assert resp.status_code == 422


def test_pred_nan_bmi_is_a_client_error(client):
    resp = client.get("/pred", params={"BMI": "nan"})
    assert resp.status_code == 422
    assert "BMI" in resp.json()["detail"]


def test_health_and_defaults(client, trained):
    _, _, report = trained
    health = client.get("/health").json()
    assert health["model_family"] == report.selected_family
    assert health["n_rows"] == 400
    defaults = client.get("/defaults").json()["defaults"]
    assert set(defaults) == {"Age", "BMI", "Education", "Income", "NoDocbcCost", "PhysActivity"}


def test_startup_fails_without_model(monkeypatch, env, tmp_path):
    monkeypatch.setenv("DIABETES_MODEL_PATH", str(tmp_path / "missing.pkl"))
    with pytest.raises(RuntimeError):
        with TestClient(create_app(Settings())):
            pass


def test_injected_context():
    frame = pd.DataFrame({
        "Age": [1, 1, 2], "BMI": [25.0, 35.0, 45.0], "Education": [6, 6, 1],
        "Income": [8, 8, 8], "NoDocbcCost": [0, 0, 0], "PhysActivity": [1, 1, 1],
    })
    from diabetes_predictor.datasets.loaders import LoadedDataset
    from diabetes_predictor.encoding import encode_frame

    dataset = LoadedDataset(frame=encode_frame(frame), source="memory")
    predictor = SklearnPredictor(ModelSourceCallable(
        fn=lambda X: np.where(X["BMI"] >= 30, "Diabetic", "Nondiabetic"), name="bmi_rule",
    ))
    ctx = ServingContext(
        dataset=dataset,
        defaults=compute_defaults(dataset.frame),
        predictor=predictor,
        info=INFO,
    )
    with TestClient(create_app(Settings(), context=ctx)) as c:
        assert c.get("/pred").json()["prediction"] == "Diabetic"
        assert c.get("/pred", params={"BMI": 20}).json()["prediction"] == "Nondiabetic"
        assert c.get("/health").json()["model_family"] == "bmi_rule"


def test_info_from_env(monkeypatch, env):
    monkeypatch.setenv("DIABETES_INFO_NAME", "Jane Analyst")
    monkeypatch.setenv("DIABETES_INFO_LINK", "https://example.org/diabetes")
    with TestClient(create_app(Settings())) as c:
        assert c.get("/info").json() == {"name": "Jane Analyst", "link": "https://example.org/diabetes"}


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.delenv("DIABETES_CORS_ORIGINS", raising=False)
    assert Settings().cors_origins == ["http://localhost:8000"]
    monkeypatch.setenv("DIABETES_CORS_ORIGINS", "https://a.example, https://b.example,")
    assert Settings().cors_origins == [
        "http://localhost:8000",
        "https://a.example",
        "https://b.example",
    ]
