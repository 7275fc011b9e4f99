# multitrend/steps/window_label_step.py
from __future__ import annotations

from multitrend.engines.window_label_engine import WindowLabelEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class WindowLabelStep(PipelineStep):
    """
    (ctx.filled, ctx.scale) → ctx.samples

    Scale parameters are passed explicitly and never modified.
    """

    def __init__(self, engine: WindowLabelEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "filled", "scale")

        with self.timed():
            with self.inst.timer("window_label"):
                ctx.samples = self.engine.execute(ctx.filled, ctx.scale)

        self.inst.metrics.record("samples", len(ctx.samples))
        return ctx
