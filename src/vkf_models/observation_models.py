from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np


class ObservationModel:
    """
    Link between the latent mean and the observed outcome.

    Subclasses provide the expected outcome for a latent mean and the pair of
    gains used by the recursive update:

        mean_gain : weight applied to the prediction error for the mean
        var_gain  : weight used to shrink the predicted variance

    The observation-noise parameter also seeds the initial posterior variance.
    """

    model_name: ClassVar[str] = ""

    @property
    def noise(self) -> float:
        raise NotImplementedError

    def predict(self, m: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def gains(self, w: np.ndarray, v: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        raise NotImplementedError


def sigmoid(x: np.ndarray) -> np.ndarray:
    """Logistic function, evaluated without clipping."""
    return 1.0 / (1.0 + np.exp(-x))


@dataclass(frozen=True)
class BinaryObservationModel(ObservationModel):
    """
    Bernoulli outcomes o_t ∈ {0, 1} through a logistic link.

    The variance gain is Kalman-like, while the mean moves by a Newton-like
    step sqrt(w + v) under the Laplace approximation. The two gains are not
    interchangeable.
    """

    omega: float
    model_name: ClassVar[str] = "vkf_binary"

    @property
    def noise(self) -> float:
        return self.omega

    def predict(self, m: np.ndarray) -> np.ndarray:
        return sigmoid(m)

    def gains(self, w: np.ndarray, v: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        predicted_var = w + v
        var_gain = predicted_var / (predicted_var + self.omega)
        mean_gain = np.sqrt(predicted_var)
        return mean_gain, var_gain


@dataclass(frozen=True)
class ContinuousObservationModel(ObservationModel):
    """
    Gaussian outcomes o_t ~ N(x_t, sigma2) through the identity link.
    """

    sigma2: float
    model_name: ClassVar[str] = "vkf_continuous"

    @property
    def noise(self) -> float:
        return self.sigma2

    def predict(self, m: np.ndarray) -> np.ndarray:
        return m

    def gains(self, w: np.ndarray, v: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        predicted_var = w + v
        k = predicted_var / (predicted_var + self.sigma2)  # learning rate
        return k, k


_OBSERVATION_MODELS: dict[str, type[ObservationModel]] = {
    "vkf_binary": BinaryObservationModel,
    "vkf_continuous": ContinuousObservationModel,
}


def build_observation_model(model_name: str, noise: float) -> ObservationModel:
    """Construct the observation model registered under `model_name`."""
    model_name_str = str(model_name)
    if model_name_str not in _OBSERVATION_MODELS:
        raise ValueError(
            f"Unsupported model_name '{model_name_str}'. "
            f"Supported models: {list(_OBSERVATION_MODELS)}"
        )
    return _OBSERVATION_MODELS[model_name_str](float(noise))
