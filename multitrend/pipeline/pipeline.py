#!filepath: multitrend/pipeline/pipeline.py
from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import pandas as pd

from multitrend import logs
from multitrend.observability.instrumentation import Instrumentation
from multitrend.pipeline.context import TrendContext
from multitrend.pipeline.step import PipelineStep


def new_run_id() -> str:
    return f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:6]}"


class TrendPipeline:
    """
    TrendPipeline = scheduler

    Rules:
    - the pipeline owns ordering and the context
    - the pipeline never times steps itself
    - every failure propagates (no retry, no partial result)
    - instrumentation is reset at the start of each run
    """

    def __init__(
            self,
            steps: list[PipelineStep],
            cfg,
            inst: Instrumentation,
    ):
        self.steps = steps
        self.cfg = cfg
        self.inst = inst

    def run(
            self,
            source: Union[str, Path, pd.DataFrame, list],
            *,
            run_id: Optional[str] = None,
            on_epoch_end: Optional[Callable[[int, Dict[str, float]], None]] = None,
    ) -> TrendContext:
        run_id = run_id or new_run_id()
        logs.info(f"[Pipeline] ====== START {run_id} ======")
        self.inst.reset()

        ctx = TrendContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            on_epoch_end=on_epoch_end,
        )
        if isinstance(source, list):
            ctx.observations = source
        else:
            ctx.source = source

        for step in self.steps:
            ctx = step.run(ctx)

        self.inst.generate_timeline_report(run_id)
        logs.info(f"[Pipeline] ====== DONE {run_id} ======")

        return ctx
