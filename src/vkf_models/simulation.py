from __future__ import annotations

from typing import Sequence

import numpy as np

from .constants import SUPPORTED_MODEL_NAMES
from .observation_models import sigmoid


def _volatility_schedule(
    n_trials: int,
    volatilities: Sequence[float],
    switch_every: int,
) -> np.ndarray:
    """Cycle through volatility regimes, switching every `switch_every` trials."""
    levels = np.asarray(volatilities, dtype=float)
    if levels.ndim != 1 or levels.size == 0:
        raise ValueError("volatilities must be a non-empty one-dimensional sequence")
    if np.any(levels < 0.0):
        raise ValueError("volatilities must be >= 0")
    regime_index = (np.arange(n_trials) // switch_every) % levels.size
    return levels[regime_index]


def simulate_volatile_outcomes(
    n_trials: int,
    model_name: str,
    *,
    n_cues: int = 1,
    volatilities: Sequence[float] = (0.01, 0.1),
    switch_every: int = 50,
    noise: float = 1.0,
    random_seed: int = 0,
) -> dict[str, np.ndarray]:
    """Simulate outcomes from a latent random walk with switching volatility.

    The latent state x follows x_t = x_{t-1} + e_t with e_t ~ N(0, vol_t), where
    vol_t alternates between the `volatilities` regimes. Outcomes are drawn
    through the model's link: Bernoulli(sigmoid(x_t)) for `vkf_binary`,
    N(x_t, noise) for `vkf_continuous`. Each cue gets an independent walk.

    Args:
        n_trials: Number of trials T.
        model_name: Observation link to simulate.
        n_cues: Number of independent cues C.
        volatilities: Process-noise variances cycled through over time.
        switch_every: Trials per volatility regime.
        noise: Observation-noise variance (continuous only).
        random_seed: Seed for `numpy.random.default_rng`.

    Returns:
        dict: `outcomes`, `latent` (both T x C) and `true_volatility` (T,).
    """
    if n_trials <= 0:
        raise ValueError("n_trials must be > 0")
    if n_cues <= 0:
        raise ValueError("n_cues must be > 0")
    if switch_every <= 0:
        raise ValueError("switch_every must be > 0")
    if str(model_name) not in SUPPORTED_MODEL_NAMES:
        raise ValueError(
            f"Unsupported model_name '{model_name}'. "
            f"Supported models: {list(SUPPORTED_MODEL_NAMES)}"
        )

    rng = np.random.default_rng(random_seed)
    true_volatility = _volatility_schedule(n_trials, volatilities, switch_every)

    steps = rng.standard_normal((n_trials, n_cues)) * np.sqrt(true_volatility)[:, None]
    latent = np.cumsum(steps, axis=0)

    if model_name == "vkf_binary":
        outcomes = (rng.random((n_trials, n_cues)) < sigmoid(latent)).astype(float)
    else:
        if noise <= 0:
            raise ValueError("noise must be > 0")
        outcomes = latent + np.sqrt(noise) * rng.standard_normal((n_trials, n_cues))

    return {
        "outcomes": outcomes,
        "latent": latent,
        "true_volatility": true_volatility,
    }
