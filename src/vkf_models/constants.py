from __future__ import annotations


SUPPORTED_MODEL_NAMES: tuple[str, ...] = (
    "vkf_binary",
    "vkf_continuous",
)

NOISE_PARAMETER_BY_MODEL: dict[str, str] = {
    "vkf_binary": "omega",
    "vkf_continuous": "sigma2",
}

SIGNAL_NAMES: tuple[str, ...] = (
    "predictions",
    "volatility",
    "learning_rate",
    "prediction_error",
    "volatility_prediction_error",
)

BINARY_OUTCOME_VALUES: tuple[float, ...] = (0.0, 1.0)

DEFAULT_GROUP_COLUMNS: tuple[str, ...] = ("participant_id", "block_id")
DEFAULT_TRIAL_COLUMN = "trial_index"
