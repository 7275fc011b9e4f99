from __future__ import annotations

import pytest

from multitrend.observability.instrumentation import Instrumentation, NoOpInstrumentation
from multitrend.pipeline.step import PipelineStep


def test_leaf_timers_enter_timeline_in_order():
    inst = Instrumentation()

    with inst.timer("Parent", record=False):
        with inst.timer("a"):
            pass
        with inst.timer("b"):
            pass

    assert list(inst.timeline) == ["a", "b"]
    assert all(sec >= 0.0 for sec in inst.timeline.values())


def test_timer_records_even_when_body_raises():
    inst = Instrumentation()

    with pytest.raises(ZeroDivisionError):
        with inst.timer("boom"):
            1 / 0

    assert "boom" in inst.timeline


def test_disabled_instrumentation_records_nothing():
    inst = Instrumentation(enabled=False)

    with inst.timer("a"):
        pass
    inst.metrics.record("x", 1)

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_noop_instrumentation_is_inert():
    inst = NoOpInstrumentation()

    with inst.timer("a"):
        pass
    inst.metrics.record("x", 1)
    inst.progress.update("train", 1, 2, "epochs", loss=0.5)
    inst.generate_timeline_report("run")

    assert inst.timeline == {}


def test_step_without_inst_falls_back_to_noop():
    step = PipelineStep()

    assert isinstance(step.inst, NoOpInstrumentation)
    assert step.step_name == "PipelineStep"
    with pytest.raises(NotImplementedError):
        step.run(None)


def test_repeated_leaf_accumulates():
    inst = Instrumentation()

    with inst.timer("predict"):
        pass
    first = inst.timeline["predict"]
    with inst.timer("predict"):
        pass

    assert list(inst.timeline) == ["predict"]
    assert inst.timeline["predict"] >= first
