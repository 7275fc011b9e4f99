# multitrend/steps/gap_fill_step.py
from __future__ import annotations

from multitrend.engines.gap_fill_engine import ForwardFillEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class GapFillStep(PipelineStep):
    """ctx.pivot → ctx.filled"""

    def __init__(self, engine: ForwardFillEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "pivot")

        with self.timed():
            with self.inst.timer("gap_fill"):
                ctx.filled = self.engine.execute(ctx.pivot)

        self.inst.metrics.record("holes_before_fill", ctx.pivot.hole_count())
        self.inst.metrics.record("holes_after_fill", ctx.filled.hole_count())
        return ctx
