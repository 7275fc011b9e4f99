# multitrend/workflows/train_evaluate.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from multitrend.config.app_config import AppConfig
from multitrend.core.types import ScaleParams
from multitrend.data.csv_loader import CsvObservationLoader
from multitrend.data.scale_store import ScaleParamsStore
from multitrend.engines.evaluate_engine import EvaluationAggregateEngine
from multitrend.engines.gap_fill_engine import ForwardFillEngine
from multitrend.engines.normalize_engine import MinMaxNormalizeEngine
from multitrend.engines.pivot_engine import PivotBuildEngine
from multitrend.engines.split_engine import ChronologicalSplitEngine
from multitrend.engines.window_label_engine import WindowLabelEngine
from multitrend.observability.instrumentation import Instrumentation
from multitrend.pipeline.model_artifact import ModelArtifact, resolve_model_artifact_from_dir
from multitrend.pipeline.pipeline import TrendPipeline
from multitrend.pipeline.step import PipelineStep
from multitrend.steps.artifact_persist_step import ArtifactPersistStep
from multitrend.steps.gap_fill_step import GapFillStep
from multitrend.steps.ingest_step import IngestStep
from multitrend.steps.model_evaluate_step import ModelEvaluateStep
from multitrend.steps.model_train_step import ModelTrainStep
from multitrend.steps.normalize_step import NormalizeStep
from multitrend.steps.pivot_build_step import PivotBuildStep
from multitrend.steps.split_step import ChronologicalSplitStep
from multitrend.steps.window_label_step import WindowLabelStep
from multitrend.training.engines.model_train_engine import TrendClassifierEngine
from multitrend.training.engines.registry import resolve_model_train_engine, spec_from_config
from multitrend.utils.path import PathManager


def _preparation_steps(cfg: AppConfig, inst: Instrumentation, *, release_samples: bool) -> list[PipelineStep]:
    return [
        IngestStep(CsvObservationLoader(cfg.data), inst=inst),
        PivotBuildStep(PivotBuildEngine(), inst=inst),
        GapFillStep(ForwardFillEngine(), inst=inst),
        NormalizeStep(MinMaxNormalizeEngine(), inst=inst),
        WindowLabelStep(
            WindowLabelEngine(
                lookback_length=cfg.window.lookback_length,
                horizon_length=cfg.window.horizon_length,
            ),
            inst=inst,
        ),
        ChronologicalSplitStep(
            ChronologicalSplitEngine(train_ratio=cfg.window.train_ratio),
            inst=inst,
            release_samples=release_samples,
        ),
    ]


def build_preparation_pipeline(
        cfg: Optional[AppConfig] = None,
        *,
        inst: Optional[Instrumentation] = None,
        release_samples: bool = False,
) -> TrendPipeline:
    """
    ingest → pivot → fill → normalise → window / label → split
    """
    if cfg is None:
        cfg = AppConfig.load()
    inst = inst or Instrumentation()

    return TrendPipeline(
        steps=_preparation_steps(cfg, inst, release_samples=release_samples),
        cfg=cfg,
        inst=inst,
    )


def build_train_evaluate_pipeline(
        cfg: Optional[AppConfig] = None,
        *,
        inst: Optional[Instrumentation] = None,
        engine: Optional[TrendClassifierEngine] = None,
        pm: Optional[PathManager] = None,
) -> TrendPipeline:
    """
    preparation steps → train → evaluate → persist
    """
    if cfg is None:
        cfg = AppConfig.load()
    inst = inst or Instrumentation()

    pm = pm or PathManager(cfg.artifact.root_dir)

    if engine is None:
        engine = resolve_model_train_engine(spec=spec_from_config(cfg.training), cfg=cfg.training)

    return TrendPipeline(
        steps=[
            *_preparation_steps(cfg, inst, release_samples=True),
            ModelTrainStep(engine, inst=inst),
            ModelEvaluateStep(EvaluationAggregateEngine(), inst=inst),
            ArtifactPersistStep(pm, inst=inst),
        ],
        cfg=cfg,
        inst=inst,
    )


def load_run(run_dir: str | Path, cfg: Optional[AppConfig] = None) -> Tuple[ModelArtifact, TrendClassifierEngine, ScaleParams]:
    """
    Restore (artifact, trained engine, scale params) from a persisted run directory.
    """
    cfg = cfg or AppConfig()
    artifact = resolve_model_artifact_from_dir(Path(run_dir))

    engine = resolve_model_train_engine(spec=artifact.spec, cfg=cfg.training)
    engine.load(artifact.path / "model.joblib")

    scale = ScaleParamsStore.load(artifact.path / "scale_params.json")
    return artifact, engine, scale
