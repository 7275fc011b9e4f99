#!filepath: multitrend/observability/metrics.py
from dataclasses import dataclass, field
from typing import Any, Dict

from multitrend import logs


@dataclass
class MetricRecorder:
    """
    Run-scoped scalar metrics (last write wins), e.g.
    entities / samples / holes_after_fill / train.loss / test.accuracy
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def snapshot(self, prefix: str = "") -> Dict[str, Any]:
        """Copy of the recorded metrics, optionally only keys under `prefix`."""
        return {k: v for k, v in self.metrics.items() if k.startswith(prefix)}
