from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .data_validation import _as_outcome_matrix
from .observation_models import ObservationModel
from .signals import SignalBundle, TrialSignals, _allocate_signal_arrays, _record_trial


@dataclass(frozen=True)
class FilterState:
    """
    Posterior of the volatile Kalman filter, one entry per cue.

    m : latent mean estimate
    w : posterior variance of m
    v : volatility estimate
    """

    m: np.ndarray
    w: np.ndarray
    v: np.ndarray


def initial_state(n_cues: int, w0: float, v0: float) -> FilterState:
    """Return the prior state: m = 0, w = w0, v = v0 for every cue."""
    return FilterState(
        m=np.zeros(n_cues),
        w=np.full(n_cues, float(w0)),
        v=np.full(n_cues, float(v0)),
    )


def vkf_step(
    state: FilterState,
    outcome: np.ndarray,
    model: ObservationModel,
    lambda_: float,
) -> tuple[FilterState, TrialSignals]:
    """Incorporate one trial's outcomes and return the new state and signals.

    The returned signals carry the prior state (`prediction`, `volatility`)
    alongside the gain and errors computed for this trial.
    """
    m_prev = state.m
    w_prev = state.w
    v = state.v

    delta_m = outcome - model.predict(m_prev)
    mean_gain, var_gain = model.gains(w_prev, v)
    m = m_prev + mean_gain * delta_m
    w = (1.0 - var_gain) * (w_prev + v)

    # covariance between the new and previous mean estimates
    wcov = (1.0 - var_gain) * w_prev
    delta_v = (m - m_prev) ** 2 + w + w_prev - 2.0 * wcov - v
    v_next = v + lambda_ * delta_v

    signals = TrialSignals(
        prediction=m_prev,
        volatility=v,
        learning_rate=mean_gain,
        prediction_error=delta_m,
        volatility_prediction_error=delta_v,
    )
    return FilterState(m=m, w=w, v=v_next), signals


def run_filter(
    outcomes: object,
    model: ObservationModel,
    lambda_: float,
    v0: float,
    w0: float | None = None,
) -> SignalBundle:
    """Run the filter over a T x C outcome matrix.

    Parameters are assumed to be validated already; the initial posterior
    variance defaults to the model's noise parameter.
    """
    matrix = _as_outcome_matrix(outcomes)
    n_trials, n_cues = matrix.shape

    arrays = _allocate_signal_arrays(n_trials, n_cues)
    state = initial_state(n_cues, w0=model.noise if w0 is None else w0, v0=v0)

    for t in range(n_trials):
        state, signals = vkf_step(state, matrix[t], model, lambda_)
        _record_trial(arrays, t, signals)

    return SignalBundle(**arrays)
