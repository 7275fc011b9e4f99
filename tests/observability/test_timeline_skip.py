# tests/observability/test_timeline_skip.py
from __future__ import annotations

import pytest

from multitrend.config.app_config import AppConfig
from multitrend.observability.instrumentation import Instrumentation
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.pipeline import TrendPipeline
from multitrend.pipeline.step import PipelineStep


class DummySkipStep(PipelineStep):
    """
    Always skips:
    - no leaf timer
    - only checks the timeline stays clean
    """

    def run(self, ctx: TrendContext) -> TrendContext:
        # step scope (record=False) with no leaf timer inside
        with self.timed():
            pass
        return ctx


class DummyLeafStep(PipelineStep):
    """Runs one real leaf timer, as a control."""

    def run(self, ctx: TrendContext) -> TrendContext:
        with self.timed():
            with self.inst.timer("DUMMY_LEAF"):
                pass
        return ctx


@pytest.fixture
def inst():
    return Instrumentation(enabled=True)


# ------------------------------------------------------------------
# a skipped step never writes to the timeline
# ------------------------------------------------------------------

def test_skip_step_does_not_pollute_timeline(inst):
    pipeline = TrendPipeline(steps=[DummySkipStep(inst)], cfg=AppConfig(), inst=inst)

    ctx = pipeline.run("unused.csv", run_id="skip")

    assert ctx.run_id == "skip"
    assert inst.timeline == {}, "Skip step should not write anything into timeline"


# ------------------------------------------------------------------
# control: a real leaf step does write
# ------------------------------------------------------------------

def test_leaf_step_writes_timeline(inst):
    pipeline = TrendPipeline(steps=[DummyLeafStep(inst)], cfg=AppConfig(), inst=inst)

    pipeline.run("unused.csv")

    assert "DUMMY_LEAF" in inst.timeline
    assert inst.timeline["DUMMY_LEAF"] >= 0.0


def test_missing_upstream_slot_fails_fast(inst):
    class NeedsPivot(PipelineStep):
        def run(self, ctx):
            self.require(ctx, "pivot")
            return ctx

    with pytest.raises(RuntimeError, match="pivot"):
        TrendPipeline(steps=[NeedsPivot(inst)], cfg=AppConfig(), inst=inst).run("x.csv")
