#!filepath: multitrend/observability/timer.py
import time
from typing import Dict, Tuple


class Timer:
    """
    perf_counter based named timer

    - start(name) / end(name) → elapsed seconds
    - one live interval per name; re-entering a running name is an error
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._running: Dict[str, float] = {}

    @property
    def running(self) -> Tuple[str, ...]:
        return tuple(self._running)

    def start(self, name: str):
        if not self.enabled:
            return
        if name in self._running:
            raise RuntimeError(f"[Timer] {name!r} is already running")
        self._running[name] = time.perf_counter()

    def end(self, name: str) -> float:
        if not self.enabled:
            return 0.0
        started = self._running.pop(name, None)
        if started is None:
            return 0.0
        return time.perf_counter() - started
