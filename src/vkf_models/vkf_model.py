from __future__ import annotations

import numpy as np

from .data_validation import _as_outcome_matrix, _warn_on_non_binary_outcomes
from .observation_models import build_observation_model
from .parameter_space import noise_parameter_name, resolve_initial_variance, validate_model_params
from .recursive_filter import run_filter
from .signals import SignalBundle


def vkf_binary(
    outcomes: object,
    lambda_: float,
    v0: float,
    omega: float,
    *,
    w0: float | None = None,
) -> tuple[np.ndarray, SignalBundle]:
    """Volatile Kalman filter for binary outcomes.

    Args:
        outcomes: T x C matrix of outcomes read as 0/1 (1-D input is one cue).
        lambda_: Volatility learning rate, 0 < lambda_ < 1.
        v0: Initial volatility, > 0.
        omega: Noise parameter, > 0.
        w0: Initial posterior variance, > 0. Defaults to `omega`.

    Returns:
        tuple: (predictions, signals). `predictions` is the T x C array of
        latent means before each outcome (the logistic of which is the
        predicted probability).

    Raises:
        InvalidParameterError: If any parameter lies outside its domain.
    """
    return run_vkf(outcomes, "vkf_binary", lambda_=lambda_, v0=v0, noise=omega, w0=w0)


def vkf_continuous(
    outcomes: object,
    lambda_: float,
    v0: float,
    sigma2: float,
    *,
    w0: float | None = None,
) -> tuple[np.ndarray, SignalBundle]:
    """Volatile Kalman filter for continuous outcomes.

    Args:
        outcomes: T x C matrix of real-valued outcomes (1-D input is one cue).
        lambda_: Volatility learning rate, 0 < lambda_ < 1.
        v0: Initial volatility, > 0.
        sigma2: Outcome noise variance, > 0.
        w0: Initial posterior variance, > 0. Defaults to `sigma2`.

    Returns:
        tuple: (predictions, signals).

    Raises:
        InvalidParameterError: If any parameter lies outside its domain.
    """
    return run_vkf(outcomes, "vkf_continuous", lambda_=lambda_, v0=v0, noise=sigma2, w0=w0)


def run_vkf(
    outcomes: object,
    model_name: str,
    *,
    lambda_: float,
    v0: float,
    noise: float,
    w0: float | None = None,
) -> tuple[np.ndarray, SignalBundle]:
    """Run the variant registered under `model_name` with a generic noise term.

    All parameters are validated before any outcome is read.
    """
    noise_name = noise_parameter_name(model_name)
    params = validate_model_params(
        model_name, {"lambda_": lambda_, "v0": v0, noise_name: noise}
    )
    initial_variance = resolve_initial_variance(w0, params[noise_name])

    matrix = _as_outcome_matrix(outcomes)
    if model_name == "vkf_binary":
        _warn_on_non_binary_outcomes(matrix)

    signals = run_filter(
        matrix,
        build_observation_model(model_name, params[noise_name]),
        lambda_=params["lambda_"],
        v0=params["v0"],
        w0=initial_variance,
    )
    return signals.predictions, signals
