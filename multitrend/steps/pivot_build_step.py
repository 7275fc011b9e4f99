# multitrend/steps/pivot_build_step.py
from __future__ import annotations

from multitrend.engines.pivot_engine import PivotBuildEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class PivotBuildStep(PipelineStep):
    """ctx.observations → ctx.pivot"""

    def __init__(self, engine: PivotBuildEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "observations")

        with self.timed():
            with self.inst.timer("pivot"):
                ctx.pivot = self.engine.execute(ctx.observations)

        self.inst.metrics.record("entities", ctx.pivot.entity_count)
        self.inst.metrics.record("dates", ctx.pivot.date_count)
        return ctx
