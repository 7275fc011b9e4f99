# multitrend/config/training_config.py
from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class TrainingConfig(BaseModel):
    """
    TrainingConfig

    Binds the trainable classifier collaborator:
    (model_name, task_type, model_version) selects the engine from the registry.
    """

    # model
    model_name: Literal["sgd", "mlp"] = "sgd"
    task_type: Literal["classification"] = "classification"
    model_version: str = "v1"
    model_params: Dict[str, Any] = Field(default_factory=dict)

    # fit loop
    epochs: int = Field(default=100, gt=0)
    batch_size: int = Field(default=32, gt=0)
    random_state: int = 42

    # evaluation
    evaluation_enabled: bool = True
