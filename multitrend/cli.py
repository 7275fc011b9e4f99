#!filepath: multitrend/cli.py
from pathlib import Path
from typing import Optional

import typer
from pydantic import BaseModel
from rich import print
from rich.markup import escape
from rich.table import Table

from multitrend import __version__, init_logging
from multitrend.config.app_config import AppConfig
from multitrend.utils.errors import PipelineError, ReadError

app = typer.Typer(help="MultiTrend windowing / evaluation CLI")


def _override(section: BaseModel, **updates) -> BaseModel:
    """Re-validate a config section with the non-None overrides applied."""
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates:
        return section
    return type(section).model_validate({**section.model_dump(), **updates})


def _load_config(config: Optional[Path], **sections) -> AppConfig:
    """
    sections: {"window": {...}, "training": {...}} command line overrides.
    Invalid values (file or flags) print an error and exit with code 1.
    """
    try:
        cfg = AppConfig.load(str(config) if config else None)
        for name, updates in sections.items():
            setattr(cfg, name, _override(getattr(cfg, name), **updates))
    except (FileNotFoundError, ValueError) as e:
        print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    init_logging(cfg.log)
    return cfg


def _tier(accuracy: float) -> str:
    if accuracy > 0.6:
        return "green"
    if accuracy > 0.5:
        return "yellow"
    return "red"


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def prepare(
    csv: Path = typer.Argument(..., help="long-form CSV: Date,Symbol,Open,Close"),
    config: Optional[Path] = typer.Option(None, help="YAML config file"),
    lookback: Optional[int] = typer.Option(None, help="override window.lookback_length"),
    horizon: Optional[int] = typer.Option(None, help="override window.horizon_length"),
):
    """
    Build samples and the chronological split, print the dataset summary.
    """
    from multitrend.workflows.train_evaluate import build_preparation_pipeline

    cfg = _load_config(config, window={"lookback_length": lookback, "horizon_length": horizon})
    try:
        ctx = build_preparation_pipeline(cfg, release_samples=True).run(str(csv))
    except (PipelineError, ReadError, ValueError) as e:
        print(f"[red]Error loading data: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    s = ctx.summary
    print(f"[green]Loaded {len(s.entities)} stocks: {', '.join(s.entities)}[/green]")
    print(f"dates: {s.date_count} ({s.first_date} → {s.last_date})")
    print(f"lookback={s.lookback_length} horizon={s.horizon_length}")
    print(f"{s.train_samples} training samples, {s.test_samples} test samples")
    ctx.dispose()


@app.command()
def train(
    csv: Path = typer.Argument(..., help="long-form CSV: Date,Symbol,Open,Close"),
    config: Optional[Path] = typer.Option(None, help="YAML config file"),
    epochs: Optional[int] = typer.Option(None, help="override training.epochs"),
    batch_size: Optional[int] = typer.Option(None, help="override training.batch_size"),
    model: Optional[str] = typer.Option(None, help="sgd | mlp"),
    out: Optional[Path] = typer.Option(None, help="artifact root directory"),
):
    """
    Prepare, train, evaluate and persist; print the per-entity accuracy ranking.
    """
    from multitrend.workflows.train_evaluate import build_train_evaluate_pipeline

    cfg = _load_config(
        config,
        training={"epochs": epochs, "batch_size": batch_size, "model_name": model},
        artifact={"root_dir": str(out) if out is not None else None},
    )

    try:
        ctx = build_train_evaluate_pipeline(cfg).run(str(csv))
    except (PipelineError, ReadError, ValueError) as e:
        print(f"[red]Training failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if ctx.evaluation is not None:
        print(
            f"Test Loss: {ctx.test_metrics['loss']:.4f} | "
            f"Test Accuracy: {ctx.test_metrics['accuracy'] * 100:.2f}%"
        )

        table = Table(title="Stock Performance Ranking")
        table.add_column("Entity")
        table.add_column("Accuracy", justify="right")
        for entity, acc in ctx.evaluation.ranking():
            color = _tier(acc)
            table.add_row(entity, f"[{color}]{acc * 100:.2f}%[/{color}]")
        print(table)

    print(f"[blue]artifacts: {ctx.model_artifact.path}[/blue]")
    ctx.dispose()


if __name__ == "__main__":
    app()

# python -m multitrend.cli train data/stocks.csv --epochs 20
