# multitrend/pipeline/model_artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Literal


# ============================================================
# Model Spec (FROZEN)
# ============================================================
@dataclass(frozen=True)
class ModelSpec:
    family: Literal["sgd", "mlp"]
    task: Literal["classification"]
    version: str


# ============================================================
# Model Artifact (run-scoped)
# ============================================================
@dataclass(frozen=True)
class ModelArtifact:
    """
    ModelArtifact

    Semantics:
    - path always points to a run artifact ROOT directory
    """
    path: Path
    spec: ModelSpec
    run_id: str
    entities: list[str]
    lookback_length: int
    horizon_length: int
    metrics: dict[str, Any] | None = None
    created_at: datetime | None = None

    def to_meta(self) -> dict:
        return {
            "run_id": self.run_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "spec": {
                "family": self.spec.family,
                "task": self.spec.task,
                "version": self.spec.version,
            },
            "entities": list(self.entities),
            "window": {
                "lookback_length": self.lookback_length,
                "horizon_length": self.horizon_length,
            },
            "metrics": dict(self.metrics or {}),
        }


def resolve_model_artifact_from_dir(artifact_dir: Path) -> ModelArtifact:
    """
    Rebuild a ModelArtifact from <artifact_dir>/artifact.json.
    """
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / "artifact.json"
    if not meta_path.exists():
        raise RuntimeError(f"[ModelArtifact] artifact.json not found in {artifact_dir}")

    meta = json.loads(meta_path.read_text(encoding="utf-8"))

    created = meta.get("created_at")
    return ModelArtifact(
        path=artifact_dir,
        spec=ModelSpec(
            family=meta["spec"]["family"],
            task=meta["spec"]["task"],
            version=meta["spec"]["version"],
        ),
        run_id=meta["run_id"],
        entities=list(meta["entities"]),
        lookback_length=int(meta["window"]["lookback_length"]),
        horizon_length=int(meta["window"]["horizon_length"]),
        metrics=meta.get("metrics"),
        created_at=datetime.fromisoformat(created) if created else None,
    )
