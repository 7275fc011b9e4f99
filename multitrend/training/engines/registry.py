from typing import Callable, Dict, Tuple

from multitrend.config.training_config import TrainingConfig
from multitrend.pipeline.model_artifact import ModelSpec
from multitrend.training.engines.model_train_engine import TrendClassifierEngine
from multitrend.training.engines.model.sgd_classifier_train_engine import (
    SGDTrendClassifierEngine,
)
from multitrend.training.engines.model.mlp_classifier_train_engine import (
    MLPTrendClassifierEngine,
)

_ENGINE_REGISTRY: Dict[
    Tuple[str, str, str],
    Callable[[TrainingConfig], TrendClassifierEngine],
] = {
    ("sgd", "classification", "v1"): lambda cfg: SGDTrendClassifierEngine(cfg),
    ("mlp", "classification", "v1"): lambda cfg: MLPTrendClassifierEngine(cfg),
}


def spec_from_config(cfg: TrainingConfig) -> ModelSpec:
    return ModelSpec(family=cfg.model_name, task=cfg.task_type, version=cfg.model_version)


def resolve_model_train_engine(
        *, spec: ModelSpec, cfg: TrainingConfig
) -> TrendClassifierEngine:
    key = (spec.family, spec.task, spec.version)

    if key not in _ENGINE_REGISTRY:
        available = ", ".join(str(k) for k in _ENGINE_REGISTRY)
        raise ValueError(
            f"No TrendClassifierEngine for {key}. Available: {available}"
        )

    return _ENGINE_REGISTRY[key](cfg)
