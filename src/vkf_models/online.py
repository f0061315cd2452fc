from __future__ import annotations

import numpy as np

from .observation_models import (
    BinaryObservationModel,
    ContinuousObservationModel,
    ObservationModel,
    build_observation_model,
)
from .parameter_space import (
    noise_parameter_name,
    resolve_initial_variance,
    validate_model_params,
)
from .recursive_filter import initial_state, vkf_step
from .signals import TrialSignals


class VolatileKalmanFilter:
    """
    Trial-by-trial volatile Kalman filter.

    Latent state x_t ∈ ℝ with time-varying volatility.
    Observations are linked to x_t through `model`.

    Each call to `update` consumes one row of outcomes (one value per cue)
    and advances the posterior. Feeding a whole sequence through `update`
    gives the same signals as the batch functions.
    """

    def __init__(self, model: ObservationModel, lambda_=0.1, v0=0.1, n_cues=1, w0=None):
        """
        model   : observation model (binary or continuous link)
        lambda_ : volatility learning rate
        v0      : initial volatility
        n_cues  : number of independent cues filtered side by side
        w0      : initial posterior variance (defaults to the noise parameter)
        """
        noise_name = noise_parameter_name(model.model_name)
        params = validate_model_params(
            model.model_name,
            {"lambda_": lambda_, "v0": v0, noise_name: model.noise},
        )
        if int(n_cues) < 1:
            raise ValueError("n_cues must be >= 1")

        # model holds the validated float noise value
        self.model = build_observation_model(model.model_name, params[noise_name])
        self.lambda_ = params["lambda_"]
        self.v0 = params["v0"]
        self.w0 = resolve_initial_variance(w0, self.model.noise)
        self.n_cues = int(n_cues)
        self.n_trials = 0

        # posterior
        self.state = initial_state(self.n_cues, w0=self.w0, v0=self.v0)

    def reset(self):
        self.state = initial_state(self.n_cues, w0=self.w0, v0=self.v0)
        self.n_trials = 0

    def update(self, observation) -> TrialSignals:
        """
        observation : scalar or length-n_cues row of outcomes
        returns the signals of this trial (prior prediction and volatility,
        learning rate, prediction errors)
        """
        row = np.asarray(observation, dtype=float).reshape(-1)
        if row.size != self.n_cues:
            raise ValueError(f"Expected {self.n_cues} outcome(s) per trial, got {row.size}.")

        self.state, signals = vkf_step(self.state, row, self.model, self.lambda_)
        self.n_trials += 1
        return signals

    def predict(self) -> np.ndarray:
        """Return the expected next outcome under the observation link"""
        return self.model.predict(self.state.m)

    def learning_rate(self) -> np.ndarray:
        """Return the gain that would apply to the next prediction error"""
        mean_gain, _ = self.model.gains(self.state.w, self.state.v)
        return mean_gain

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(model={self.model!r}, lambda_={self.lambda_}, "
            f"v0={self.v0}, w0={self.w0}, n_cues={self.n_cues}, n_trials={self.n_trials})"
        )


class BinaryVKF(VolatileKalmanFilter):
    """Volatile Kalman filter with Bernoulli outcomes o_t ∈ {0, 1}."""

    def __init__(self, lambda_=0.1, v0=0.1, omega=1.0, n_cues=1, w0=None):
        super().__init__(
            BinaryObservationModel(omega), lambda_=lambda_, v0=v0, n_cues=n_cues, w0=w0
        )

    def mean_belief(self) -> np.ndarray:
        """Return P(o=1) for the next trial"""
        return self.predict()


class ContinuousVKF(VolatileKalmanFilter):
    """Volatile Kalman filter with Gaussian outcomes o_t ~ N(x_t, sigma2)."""

    def __init__(self, lambda_=0.1, v0=0.1, sigma2=1.0, n_cues=1, w0=None):
        super().__init__(
            ContinuousObservationModel(sigma2), lambda_=lambda_, v0=v0, n_cues=n_cues, w0=w0
        )

