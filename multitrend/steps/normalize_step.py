# multitrend/steps/normalize_step.py
from __future__ import annotations

from multitrend.engines.normalize_engine import MinMaxNormalizeEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class NormalizeStep(PipelineStep):
    """
    ctx.filled → ctx.scale (fit once, read-only afterwards) + ctx.normalized
    """

    def __init__(self, engine: MinMaxNormalizeEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "filled")

        with self.timed():
            with self.inst.timer("normalize"):
                ctx.normalized, ctx.scale = self.engine.execute(ctx.filled)

        return ctx
