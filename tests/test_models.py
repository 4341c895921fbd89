from __future__ import annotations

import dataclasses

import pytest

from spotcast.core.models import (
    MODEL_WEIGHTS,
    ModelType,
    ModelWeights,
    get_weights,
    is_known_model,
    resolve_model,
)


def test_weight_table_values() -> None:
    assert MODEL_WEIGHTS[ModelType.LINEAR_REGRESSION] == ModelWeights(0.45, 0.00, 0.35, 0.20, 0.9)
    assert MODEL_WEIGHTS[ModelType.RANDOM_FOREST] == ModelWeights(0.54, 0.06, 0.30, 0.10, 1.05)
    assert MODEL_WEIGHTS[ModelType.GRADIENT_BOOSTING] == ModelWeights(0.60, 0.05, 0.28, 0.07, 1.15)


def test_weight_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        MODEL_WEIGHTS[ModelType.RANDOM_FOREST] = ModelWeights(1, 0, 0, 0, 0)  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        MODEL_WEIGHTS[ModelType.RANDOM_FOREST].lag1 = 1.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Linear Regression", ModelType.LINEAR_REGRESSION),
        ("Random Forest", ModelType.RANDOM_FOREST),
        ("Gradient Boosting", ModelType.GRADIENT_BOOSTING),
        (ModelType.RANDOM_FOREST, ModelType.RANDOM_FOREST),
        ("rf", ModelType.RANDOM_FOREST),
        (" LR ", ModelType.LINEAR_REGRESSION),
        ("Neural Prophet", ModelType.GRADIENT_BOOSTING),
        (None, ModelType.GRADIENT_BOOSTING),
    ],
)
def test_resolve_model(name, expected) -> None:
    assert resolve_model(name) is expected


def test_unknown_model_uses_gradient_boosting_weights() -> None:
    assert get_weights("XGBoost") == MODEL_WEIGHTS[ModelType.GRADIENT_BOOSTING]
    assert not is_known_model("XGBoost")
    assert is_known_model("gbr")
    assert is_known_model("Random Forest")
