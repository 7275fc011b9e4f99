from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class TrainingSummary:
    """
    TrainingSummary (FINAL / FROZEN)

    In-memory result of one fit() call; no I/O semantics.
    history[key] holds one value per completed epoch for
    loss / accuracy / val_loss / val_accuracy.
    """
    epochs_requested: int
    epochs_completed: int
    stopped: bool
    history: Dict[str, List[float]] = field(default_factory=dict)

    def last(self, key: str) -> Optional[float]:
        values = self.history.get(key) or []
        return values[-1] if values else None

    @property
    def metrics(self) -> Dict[str, float]:
        return {k: v[-1] for k, v in self.history.items() if v}
