# multitrend/steps/model_evaluate_step.py
from __future__ import annotations

from multitrend import logs
from multitrend.engines.evaluate_engine import EvaluationAggregateEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class ModelEvaluateStep(PipelineStep):
    """
    Predict on the test split and decompose per entity.

    produces ctx.predictions / ctx.test_metrics / ctx.evaluation
    """

    def __init__(self, engine: EvaluationAggregateEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        if not ctx.cfg.training.evaluation_enabled:
            logs.info(f"[{self.step_name}] evaluation disabled -> skip")
            return ctx

        self.require(ctx, "split", "engine")
        test = ctx.split.test

        with self.timed():
            with self.inst.timer("predict"):
                ctx.predictions = ctx.engine.predict(test.inputs)
            ctx.test_metrics = ctx.engine.evaluate(test.inputs, test.labels)

            with self.inst.timer("evaluate"):
                ctx.evaluation = self.engine.execute(
                    predictions=ctx.predictions,
                    labels=test.labels,
                    entities=test.entities,
                    horizon_length=test.horizon_length,
                    anchor_dates=test.anchor_dates,
                )

        self.inst.metrics.record("test.loss", round(ctx.test_metrics["loss"], 6))
        self.inst.metrics.record("test.accuracy", round(ctx.test_metrics["accuracy"], 6))
        for entity, acc in ctx.evaluation.ranking():
            logs.info(f"[{self.step_name}] {entity:<12} accuracy={acc:.4f}")
        return ctx
