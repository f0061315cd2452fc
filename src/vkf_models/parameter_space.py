from __future__ import annotations

import math
from copy import deepcopy
from typing import Iterable, Mapping

import numpy as np

from .constants import NOISE_PARAMETER_BY_MODEL, SUPPORTED_MODEL_NAMES


class InvalidParameterError(ValueError):
    """Raised when a filter hyperparameter lies outside its domain."""

    def __init__(self, message: str, *, parameter_name: str, value: object) -> None:
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value


# Bounds are exclusive on both sides; `None` means unbounded.
_PARAMETER_SPECS: dict[str, list[dict[str, object]]] = {
    "vkf_binary": [
        {
            "name": "lambda_",
            "lower": 0.0,
            "upper": 1.0,
            "default": 0.1,
            "message": "lambda should be in the unit range",
        },
        {
            "name": "v0",
            "lower": 0.0,
            "upper": None,
            "default": 0.1,
            "message": "v0 should be positive",
        },
        {
            "name": "omega",
            "lower": 0.0,
            "upper": None,
            "default": 1.0,
            "message": "omega should be positive",
        },
    ],
    "vkf_continuous": [
        {
            "name": "lambda_",
            "lower": 0.0,
            "upper": 1.0,
            "default": 0.1,
            "message": "lambda should be in the unit range",
        },
        {
            "name": "v0",
            "lower": 0.0,
            "upper": None,
            "default": 0.1,
            "message": "v0 should be positive",
        },
        {
            "name": "sigma2",
            "lower": 0.0,
            "upper": None,
            "default": 1.0,
            "message": "sigma2 should be positive",
        },
    ],
}


def _validate_model_name(model_name: str) -> str:
    model_name_str = str(model_name)
    if model_name_str not in SUPPORTED_MODEL_NAMES:
        raise ValueError(
            f"Unsupported model_name '{model_name_str}'. "
            f"Supported models: {list(SUPPORTED_MODEL_NAMES)}"
        )
    if model_name_str not in _PARAMETER_SPECS:
        raise ValueError(f"No parameter specification registered for '{model_name_str}'.")
    return model_name_str


def _check_open_interval(spec_entry: Mapping[str, object], value: object) -> float:
    name = str(spec_entry["name"])
    message = str(spec_entry["message"])
    try:
        value_float = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"{message}; got non-numeric {name}={value!r}",
            parameter_name=name,
            value=value,
        ) from exc

    lower = spec_entry["lower"]
    upper = spec_entry["upper"]
    out_of_range = math.isnan(value_float)
    if lower is not None and not value_float > float(lower):  # type: ignore[arg-type]
        out_of_range = True
    if upper is not None and not value_float < float(upper):  # type: ignore[arg-type]
        out_of_range = True

    if out_of_range:
        raise InvalidParameterError(
            f"{message}; got {name}={value_float!r}",
            parameter_name=name,
            value=value,
        )
    return value_float


def get_parameter_spec(model_name: str) -> list[dict[str, object]]:
    """Return the ordered parameter specification for a model."""
    model_name_str = _validate_model_name(model_name)
    return deepcopy(_PARAMETER_SPECS[model_name_str])


def get_default_params(model_name: str) -> dict[str, float]:
    """Return default hyperparameters keyed by name."""
    return {
        str(entry["name"]): float(entry["default"])  # type: ignore[arg-type]
        for entry in get_parameter_spec(model_name)
    }


def noise_parameter_name(model_name: str) -> str:
    """Return the name of the model's observation-noise parameter."""
    return NOISE_PARAMETER_BY_MODEL[_validate_model_name(model_name)]


def validate_model_params(model_name: str, params: Mapping[str, object]) -> dict[str, float]:
    """Validate hyperparameters and return them as floats in spec order.

    Parameters are checked in the order `lambda_`, `v0`, then the noise term,
    and the first violation raises `InvalidParameterError`.
    """
    spec = get_parameter_spec(model_name)
    expected = [str(entry["name"]) for entry in spec]
    missing = [name for name in expected if name not in params]
    unexpected = sorted(set(params) - set(expected))
    if missing or unexpected:
        raise ValueError(
            f"Parameter mismatch for model '{model_name}': "
            f"missing={missing}, unexpected={unexpected}. Expected {expected}."
        )

    return {
        str(entry["name"]): _check_open_interval(entry, params[str(entry["name"])])
        for entry in spec
    }


def theta_to_named_params(
    model_name: str,
    theta: np.ndarray | Iterable[float],
) -> dict[str, float]:
    """Convert an ordered `theta` vector to validated named parameters."""
    spec = get_parameter_spec(model_name)
    theta_vector = np.asarray(theta, dtype=float)
    if theta_vector.ndim != 1:
        raise ValueError(f"theta must be a one-dimensional vector; found shape {theta_vector.shape}.")
    if theta_vector.size != len(spec):
        raise ValueError(
            f"theta length mismatch for model '{model_name}': "
            f"expected {len(spec)}, got {theta_vector.size}."
        )

    named = {
        str(spec_entry["name"]): float(value)
        for spec_entry, value in zip(spec, theta_vector, strict=True)
    }
    return validate_model_params(model_name, named)


def resolve_initial_variance(w0: object, noise: float) -> float:
    """Return the initial posterior variance, defaulting to the noise parameter."""
    if w0 is None:
        return float(noise)
    return _check_open_interval(
        {"name": "w0", "lower": 0.0, "upper": None, "message": "w0 should be positive"},
        w0,
    )
