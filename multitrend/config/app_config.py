#!filepath: multitrend/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from .log_config import LogConfig
from .data_config import DataConfig
from .window_config import WindowConfig
from .training_config import TrainingConfig
from .artifact_config import ArtifactConfig


def default_config_path() -> str:
    """
    multitrend/config/app_config.py → multitrend/config/base.yml
    """
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "base.yml")


class AppConfig(BaseModel):
    log: LogConfig = LogConfig()
    data: DataConfig = DataConfig()
    window: WindowConfig = WindowConfig()
    training: TrainingConfig = TrainingConfig()
    artifact: ArtifactConfig = ArtifactConfig()

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config after .env

        Resolution order for the file:
            1) explicit `path`
            2) $MULTITREND_CONFIG
            3) packaged base.yml
        """
        # 1) .env from the working directory (may define MULTITREND_CONFIG)
        load_dotenv(os.path.join(os.getcwd(), ".env"))

        # 2) resolve file
        if path is None:
            path = os.getenv("MULTITREND_CONFIG") or default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) read YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Config root must be a mapping: {path}")

        return cls(**raw)
