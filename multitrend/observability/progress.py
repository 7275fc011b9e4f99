#!filepath: multitrend/observability/progress.py
from multitrend import logs


class ProgressReporter:
    """
    Log-only progress reporting (no terminal widgets, safe under pytest / CI).
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def start(self, task: str, total: int, unit: str = ""):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} started total={total} {unit}")

    def update(self, task: str, current: int, total: int, unit: str = "", **fields):
        if not self.enabled:
            return
        extra = "".join(f" {k}={v:.4f}" if isinstance(v, float) else f" {k}={v}" for k, v in fields.items())
        logs.info(f"[Progress] {task}: {current}/{total} {unit}{extra}")

    def done(self, task: str):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} done")
