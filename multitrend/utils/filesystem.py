#!filepath: multitrend/utils/filesystem.py
import shutil
from pathlib import Path

from multitrend import logs


class FileSystem:
    """
    Filesystem helpers
    - create directories on demand
    - atomic write (tmp file -> rename)
    - remove files / directories
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created dir: {p}")
        return p

    @staticmethod
    def safe_write(path: str | Path, data: bytes) -> None:
        """
        Atomic write:
            1) write a tmp sibling
            2) rename onto the target
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")

        with open(tmp_path, "wb") as f:
            f.write(data)
            logs.debug(f"[FS] wrote tmp file: {tmp_path}")

        tmp_path.replace(path)
        logs.debug(f"[FS] atomic write done: {path}")

    @staticmethod
    def remove(path: str | Path) -> None:
        p = Path(path)

        if not p.exists():
            logs.debug(f"[FS] nothing to remove: {p}")
            return

        if p.is_dir():
            shutil.rmtree(p)
            logs.debug(f"[FS] removed dir: {p}")
        else:
            p.unlink()
            logs.debug(f"[FS] removed file: {p}")
