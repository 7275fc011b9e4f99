#!filepath: multitrend/data/scale_store.py
from __future__ import annotations

import json
from pathlib import Path

from multitrend import logs
from multitrend.core.types import ScaleParams
from multitrend.utils.filesystem import FileSystem


class ScaleParamsStore:
    """
    JSON persistence for fitted scale parameters.

    Record layout (schema_version = 1):
        {
          "schema_version": 1,
          "entities": [...],
          "scale_params": {entity: {field: {"min": .., "max": ..}}}
        }
    """

    @staticmethod
    @logs.catch()
    def save(path: str | Path, params: ScaleParams) -> Path:
        path = Path(path)
        payload = json.dumps(params.to_record(), indent=2, sort_keys=False)
        FileSystem.safe_write(path, payload.encode("utf-8"))
        logs.info(f"[ScaleParamsStore] saved {len(params.entities)} entities → {path}")
        return path

    @staticmethod
    def load(path: str | Path) -> ScaleParams:
        path = Path(path)
        record = json.loads(path.read_text(encoding="utf-8"))
        params = ScaleParams.from_record(record)
        logs.info(f"[ScaleParamsStore] loaded {len(params.entities)} entities ← {path}")
        return params
