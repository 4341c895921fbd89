from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Union


class ModelType(str, Enum):
    LINEAR_REGRESSION = "Linear Regression"
    RANDOM_FOREST = "Random Forest"
    GRADIENT_BOOSTING = "Gradient Boosting"


@dataclass(frozen=True)
class ModelWeights:
    """Blend weights for lag1, lag24, hour-of-day mean, global mean and temperature demand."""
    lag1: float
    lag24: float
    hour: float
    mean: float
    temp: float


DEFAULT_MODEL = ModelType.GRADIENT_BOOSTING

# New variants are new rows here, nothing else.
MODEL_WEIGHTS: Mapping[ModelType, ModelWeights] = MappingProxyType(
    {
        ModelType.LINEAR_REGRESSION: ModelWeights(lag1=0.45, lag24=0.00, hour=0.35, mean=0.20, temp=0.9),
        ModelType.RANDOM_FOREST: ModelWeights(lag1=0.54, lag24=0.06, hour=0.30, mean=0.10, temp=1.05),
        ModelType.GRADIENT_BOOSTING: ModelWeights(lag1=0.60, lag24=0.05, hour=0.28, mean=0.07, temp=1.15),
    }
)

# short names, as used on the command line
_ALIASES: Dict[str, ModelType] = {
    "lr": ModelType.LINEAR_REGRESSION,
    "linear": ModelType.LINEAR_REGRESSION,
    "rf": ModelType.RANDOM_FOREST,
    "gbr": ModelType.GRADIENT_BOOSTING,
    "gb": ModelType.GRADIENT_BOOSTING,
}


def is_known_model(name: Union[str, ModelType, None]) -> bool:
    if isinstance(name, ModelType):
        return True
    if name is None:
        return False
    return str(name) in {m.value for m in ModelType} or str(name).strip().lower() in _ALIASES


def resolve_model(name: Union[str, ModelType, None]) -> ModelType:
    """Map a model name to its ModelType. Unknown names fall back to Gradient Boosting."""
    if isinstance(name, ModelType):
        return name
    if name is None:
        return DEFAULT_MODEL
    try:
        return ModelType(str(name))
    except ValueError:
        return _ALIASES.get(str(name).strip().lower(), DEFAULT_MODEL)


def get_weights(name: Union[str, ModelType, None]) -> ModelWeights:
    return MODEL_WEIGHTS[resolve_model(name)]
