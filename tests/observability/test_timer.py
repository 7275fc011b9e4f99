#!filepath: tests/observability/test_timer.py

import time

import pytest

from multitrend.observability.timer import Timer

def test_timer_basic():
    t = Timer(enabled=True)
    t.start("train")
    time.sleep(0.01)
    elapsed = t.end("train")

    assert elapsed > 0
    assert isinstance(elapsed, float)

def test_timer_disabled():
    t = Timer(enabled=False)
    t.start("train")
    elapsed = t.end("train")

    assert elapsed == 0.0

def test_timer_end_without_start():
    assert Timer().end("never") == 0.0

def test_timer_rejects_reentry():
    t = Timer()
    t.start("train")

    with pytest.raises(RuntimeError):
        t.start("train")

    assert t.running == ("train",)
    t.end("train")
    assert t.running == ()
