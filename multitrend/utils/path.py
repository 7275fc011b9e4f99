#!filepath: multitrend/utils/path.py
from pathlib import Path
from typing import Optional

from multitrend import logs


class PathManager:
    """
    Artifact directory layout:

    <root>
     └── runs/
           └── <run_id>/
                 ├── scale_params.json
                 ├── model.joblib
                 ├── artifact.json
                 └── predictions.parquet

    root is held per instance; it defaults to <cwd>/artifacts, resolved
    on first use.
    """

    def __init__(self, root: Path | str | None = None):
        self._root: Optional[Path] = Path(root).resolve() if root is not None else None

    # ---------------------------------------------------------
    # root
    # ---------------------------------------------------------
    def root(self) -> Path:
        if self._root is None:
            self._root = (Path.cwd() / "artifacts").resolve()
            logs.debug(f"[PathManager] default root = {self._root}")
        return self._root

    def set_root(self, new_root: Path | str | None):
        self._root = Path(new_root).resolve() if new_root is not None else None
        logs.debug(f"[PathManager] set_root = {self._root}")

    # ---------------------------------------------------------
    # runs/
    # ---------------------------------------------------------
    def runs_dir(self) -> Path:
        return self.root() / "runs"

    def run_dir(self, run_id: str) -> Path:
        return self.runs_dir() / run_id

    def scale_params_file(self, run_id: str) -> Path:
        return self.run_dir(run_id) / "scale_params.json"

    def model_file(self, run_id: str) -> Path:
        return self.run_dir(run_id) / "model.joblib"

    def artifact_meta_file(self, run_id: str) -> Path:
        return self.run_dir(run_id) / "artifact.json"

    def predictions_file(self, run_id: str) -> Path:
        return self.run_dir(run_id) / "predictions.parquet"
