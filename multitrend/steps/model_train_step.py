# multitrend/steps/model_train_step.py
from __future__ import annotations

from typing import Dict

from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep
from multitrend.training.engines.model_train_engine import TrendClassifierEngine


class ModelTrainStep(PipelineStep):
    """
    ModelTrainStep

    Contract:
    - consumes ctx.split (train, test used as validation data)
    - produces ctx.engine / ctx.training_summary
    - each run fits a fresh engine spawned from the configured one (shared stop flag)
    - per-epoch progress goes to instrumentation, then to ctx.on_epoch_end
    """

    def __init__(self, engine: TrendClassifierEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "split")
        cfg = ctx.cfg.training
        split = ctx.split
        engine = self.engine.spawn()

        def _on_epoch_end(epoch: int, epoch_logs: Dict[str, float]) -> None:
            self.inst.progress.update("train", epoch + 1, cfg.epochs, "epochs", **epoch_logs)
            if ctx.on_epoch_end is not None:
                ctx.on_epoch_end(epoch, epoch_logs)

        self.inst.progress.start("train", cfg.epochs, "epochs")
        with self.timed():
            with self.inst.timer("train"):
                ctx.training_summary = engine.fit(
                    split.train.inputs,
                    split.train.labels,
                    split.test.inputs,
                    split.test.labels,
                    epoch_count=cfg.epochs,
                    batch_size=cfg.batch_size,
                    on_epoch_end=_on_epoch_end,
                )
        self.inst.progress.done("train")

        ctx.engine = engine
        for key, value in ctx.training_summary.metrics.items():
            self.inst.metrics.record(f"train.{key}", round(value, 6))
        return ctx
