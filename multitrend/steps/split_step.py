# multitrend/steps/split_step.py
from __future__ import annotations

from multitrend.core.types import DatasetSummary
from multitrend.engines.split_engine import ChronologicalSplitEngine
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


class ChronologicalSplitStep(PipelineStep):
    """
    ctx.samples → ctx.split + ctx.summary

    release_samples=True disposes ctx.samples once the split owns its copies.
    """

    def __init__(self, engine: ChronologicalSplitEngine, inst=None, *, release_samples: bool = True):
        super().__init__(inst)
        self.engine = engine
        self.release_samples = release_samples

    def run(self, ctx: TrendContext) -> TrendContext:
        self.require(ctx, "samples", "pivot")

        with self.timed():
            with self.inst.timer("split"):
                ctx.split = self.engine.execute(ctx.samples)

        samples = ctx.samples
        ctx.summary = DatasetSummary(
            entities=ctx.pivot.entities,
            date_count=ctx.pivot.date_count,
            first_date=ctx.pivot.dates[0],
            last_date=ctx.pivot.dates[-1],
            sample_count=len(samples),
            train_samples=len(ctx.split.train),
            test_samples=len(ctx.split.test),
            lookback_length=samples.lookback_length,
            horizon_length=samples.horizon_length,
        )

        if self.release_samples:
            samples.dispose()
            ctx.samples = None

        return ctx
