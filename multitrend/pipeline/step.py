from __future__ import annotations

from multitrend.pipeline.context import TrendContext
from multitrend.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline Step base class

    Responsibilities:
      1. orchestration around ONE engine call
      2. the step-level time boundary (parent scope, not recorded)

    Rules:
      - the step itself never enters the timeline
      - leaf timers inside the step are recorded
      - behaviour never depends on whether inst is enabled
    """

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    # --------------------------------------------------
    # Step identity
    # --------------------------------------------------
    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    # --------------------------------------------------
    # Step-level timer (parent scope, not recorded)
    # --------------------------------------------------
    def timed(self):
        return self.inst.timer(self.step_name, record=False)

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def run(self, ctx: TrendContext) -> TrendContext:
        raise NotImplementedError

    def require(self, ctx: TrendContext, *slots: str) -> None:
        missing = [s for s in slots if getattr(ctx, s) is None]
        if missing:
            raise RuntimeError(f"[{self.step_name}] upstream slot(s) not filled: {missing}")
