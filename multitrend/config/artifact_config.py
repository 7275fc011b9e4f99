# multitrend/config/artifact_config.py
from pydantic import BaseModel


class ArtifactConfig(BaseModel):
    root_dir: str = "artifacts"
    persist_model: bool = True
    persist_predictions: bool = True
