#!filepath: multitrend/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from multitrend.observability.progress import ProgressReporter
from multitrend.observability.timer import Timer
from multitrend.observability.metrics import MetricRecorder
from multitrend.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Instrumentation (leaf-only accounting + parent scope)

    Rules:
    1. the timeline records leaf timers only (record=True)
    2. step / parent timers bound wall-time only (record=False)
    3. record=False timers have no side effects
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)

        # timeline: OrderedDict[leaf_name, elapsed_seconds], repeated leaves accumulate within a run
        self.timeline: Dict[str, float] = OrderedDict()

    def reset(self) -> None:
        """Drop the timeline and metrics of a previous run."""
        self.timeline.clear()
        self.metrics.metrics.clear()

    # ---------------------------------------------------------
    # context-manager timer (single entry point)
    # ---------------------------------------------------------
    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = inst.timeline.get(name, 0.0) + elapsed

        return _ctx()

    # ---------------------------------------------------------
    # timeline output (cold path)
    # ---------------------------------------------------------
    def generate_timeline_report(self, run_id: str):
        TimelineReporter(self.timeline, run_id).print()


# -------------------------------------------------------------
# No-op Instrumentation
# -------------------------------------------------------------
class NoOpInstrumentation:
    """Used when observability is disabled."""

    def __init__(self):
        self.progress = ProgressReporter(enabled=False)
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = OrderedDict()

    def reset(self) -> None:
        pass

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def generate_timeline_report(self, run_id: str):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
