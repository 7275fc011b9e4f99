# multitrend/steps/artifact_persist_step.py
from __future__ import annotations

import json
from datetime import datetime, timezone

import pyarrow as pa
import pyarrow.parquet as pq

from multitrend import logs
from multitrend.data.scale_store import ScaleParamsStore
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.model_artifact import ModelArtifact
from multitrend.pipeline.step import PipelineStep
from multitrend.training.engines.registry import spec_from_config
from multitrend.utils.filesystem import FileSystem
from multitrend.utils.path import PathManager


class ArtifactPersistStep(PipelineStep):
    """
    ArtifactPersistStep

    Writes the run-scoped artifact directory:
      scale_params.json, model.joblib, predictions.parquet, artifact.json
    and attaches a ModelArtifact to the context.
    """

    def __init__(self, pm: PathManager, inst=None):
        super().__init__(inst)
        self.pm = pm

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "scale", "summary")
        cfg = ctx.cfg.artifact

        run_dir = FileSystem.ensure_dir(self.pm.run_dir(ctx.run_id))

        with self.timed():
            with self.inst.timer("persist"):
                ScaleParamsStore.save(self.pm.scale_params_file(ctx.run_id), ctx.scale)

                if cfg.persist_model and ctx.engine is not None and ctx.engine.model is not None:
                    ctx.engine.save(self.pm.model_file(ctx.run_id))

                if cfg.persist_predictions and ctx.evaluation is not None:
                    table = pa.Table.from_pandas(ctx.evaluation.to_frame(), preserve_index=False)
                    pq.write_table(table, self.pm.predictions_file(ctx.run_id))

                metrics = {}
                if ctx.training_summary is not None:
                    metrics.update({f"train.{k}": v for k, v in ctx.training_summary.metrics.items()})
                metrics.update({f"test.{k}": v for k, v in ctx.test_metrics.items()})
                if ctx.evaluation is not None:
                    metrics["entity_accuracy"] = dict(ctx.evaluation.accuracies)

                artifact = ModelArtifact(
                    path=run_dir,
                    spec=spec_from_config(ctx.cfg.training),
                    run_id=ctx.run_id,
                    entities=list(ctx.summary.entities),
                    lookback_length=ctx.summary.lookback_length,
                    horizon_length=ctx.summary.horizon_length,
                    metrics=metrics,
                    created_at=datetime.now(timezone.utc),
                )

                meta = artifact.to_meta()
                meta["dataset"] = ctx.summary.as_dict()
                meta["pipeline_metrics"] = self.inst.metrics.snapshot()
                FileSystem.safe_write(
                    self.pm.artifact_meta_file(ctx.run_id),
                    json.dumps(meta, indent=2).encode("utf-8"),
                )

        ctx.model_artifact = artifact
        logs.info(f"[{self.step_name}] model_artifact={artifact.path}")
        return ctx
