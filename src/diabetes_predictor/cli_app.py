"""Typer-based CLI for the diabetes predictor."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(name="diabetes-predictor", help="Train, select and serve diabetes classifiers.")


def _version_callback(value: bool) -> None:
    if value:
        from diabetes_predictor import __version__

        typer.echo(f"diabetes-predictor {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="DIABETES_LOG_LEVEL", help="Logging level."
    ),
) -> None:
    """Train, select and serve diabetes classifiers."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def train(
    dataset: Optional[str] = typer.Option(
        None, "--dataset", "-d", help="Path to the BRFSS indicators CSV."
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Path to a training spec JSON file."
    ),
    model_out: Optional[str] = typer.Option(
        None, "--model-out", "-o", help="Where to write the selected model."
    ),
    report: Optional[str] = typer.Option(None, "--report", help="Write the training report JSON here."),
    family: Optional[List[str]] = typer.Option(
        None, "--family", "-f", help="Restrict to these families (repeatable)."
    ),
    folds: Optional[int] = typer.Option(None, "--folds", help="Cross-validation folds."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed."),
) -> None:
    """Tune every family with cross-validation, keep the best, persist it."""
    from diabetes_predictor.training import train as run_training
    from diabetes_predictor.training.spec import load_training_spec

    spec_dict: dict = {}
    if spec:
        spec_dict = json.loads(Path(spec).read_text(encoding="utf-8"))
    if dataset:
        spec_dict["dataset_path"] = dataset
    if model_out:
        spec_dict["model_path"] = model_out
    if report:
        spec_dict["report_path"] = report
    if family:
        spec_dict["families"] = list(family)
    if folds is not None:
        spec_dict["cv_folds"] = folds
    if seed is not None:
        spec_dict["seed"] = seed
    if "dataset_path" not in spec_dict:
        raise typer.BadParameter("Provide --dataset or a spec with dataset_path.")

    result = run_training(load_training_spec(spec_dict))
    for r in result.families:
        typer.echo(f"{r.family:<20} cv {result.scoring}={r.cv_score:.4f}  test accuracy={r.test_accuracy:.4f}")
    typer.echo(f"Selected: {result.selected_family}")
    typer.echo(f"Model: {result.model_path}")


@app.command()
def serve(
    data: Optional[str] = typer.Option(None, "--data", help="Dataset CSV used for defaults."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Pickled model artifact."),
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(8000, "--port", "-p"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from diabetes_predictor.service.config import get_settings
    from diabetes_predictor.service.main import create_app

    if data:
        os.environ["DIABETES_DATA_PATH"] = data
    if model:
        os.environ["DIABETES_MODEL_PATH"] = model
    uvicorn.run(create_app(get_settings()), host=host, port=port)


@app.command()
def predict(
    data: Optional[str] = typer.Option(None, "--data", help="Dataset CSV used for defaults."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Pickled model artifact."),
    age: Optional[str] = typer.Option(None, "--age"),
    bmi: Optional[float] = typer.Option(None, "--bmi"),
    education: Optional[str] = typer.Option(None, "--education"),
    income: Optional[str] = typer.Option(None, "--income"),
    no_doc_bc_cost: Optional[str] = typer.Option(None, "--no-doc-bc-cost"),
    phys_activity: Optional[str] = typer.Option(None, "--phys-activity"),
) -> None:
    """Predict one row locally; omitted fields take their defaults."""
    from diabetes_predictor.service.config import get_settings
    from diabetes_predictor.service.context import build_context

    if data:
        os.environ["DIABETES_DATA_PATH"] = data
    if model:
        os.environ["DIABETES_MODEL_PATH"] = model
    ctx = build_context(get_settings())
    result = ctx.predict({
        "Age": age,
        "BMI": bmi,
        "Education": education,
        "Income": income,
        "NoDocbcCost": no_doc_bc_cost,
        "PhysActivity": phys_activity,
    })
    typer.echo(json.dumps({"prediction": result.label, "inputs": result.row.as_dict()}, indent=2))


@app.command()
def defaults(
    data: str = typer.Argument(..., help="Path to the BRFSS indicators CSV."),
) -> None:
    """Print the default value used for each omitted field."""
    from diabetes_predictor.datasets.loaders import load_diabetes_csv
    from diabetes_predictor.defaults import compute_defaults

    table = compute_defaults(load_diabetes_csv(data).frame)
    typer.echo(json.dumps(table.as_dict(), indent=2))


@app.command()
def variables() -> None:
    """List the categorical code tables."""
    from diabetes_predictor.registry import get_variable, list_variables

    for name in list_variables():
        var = get_variable(name)
        typer.echo(f"{name}:")
        for code, label in zip(var.codes, var.labels):
            typer.echo(f"  {code:>3}  {label}")
