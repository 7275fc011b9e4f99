from .app_config import AppConfig
from .log_config import LogConfig
from .data_config import DataConfig, ColumnConfig
from .window_config import WindowConfig
from .training_config import TrainingConfig
from .artifact_config import ArtifactConfig

__all__ = [
    "AppConfig",
    "LogConfig",
    "DataConfig",
    "ColumnConfig",
    "WindowConfig",
    "TrainingConfig",
    "ArtifactConfig",
]
