from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from .constants import SIGNAL_NAMES


@dataclass(frozen=True)
class TrialSignals:
    """Signals produced by one trial update, one value per cue."""

    prediction: np.ndarray
    volatility: np.ndarray
    learning_rate: np.ndarray
    prediction_error: np.ndarray
    volatility_prediction_error: np.ndarray


@dataclass(frozen=True)
class SignalBundle:
    """
    Per-trial filter signals, each a T x C array.

    Row t holds the state used to predict outcome t, before that outcome is
    incorporated.
    """

    predictions: np.ndarray
    volatility: np.ndarray
    learning_rate: np.ndarray
    prediction_error: np.ndarray
    volatility_prediction_error: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return tuple(self.predictions.shape)  # type: ignore[return-value]

    def as_dict(self) -> dict[str, np.ndarray]:
        return {name: getattr(self, name) for name in SIGNAL_NAMES}

    def to_frame(self, cue_names: Sequence[object] | None = None) -> pd.DataFrame:
        """Return a long-format table with one row per trial and cue."""
        n_trials, n_cues = self.shape
        if cue_names is None:
            cue_names = list(range(n_cues))
        if len(cue_names) != n_cues:
            raise ValueError(f"cue_names must contain {n_cues} entries, got {len(cue_names)}.")

        frame = pd.DataFrame(
            {
                "trial_index": np.repeat(np.arange(n_trials), n_cues),
                "cue": np.tile(np.asarray(cue_names, dtype=object), n_trials),
            }
        )
        for name in SIGNAL_NAMES:
            frame[name] = getattr(self, name).reshape(-1)
        return frame


def _allocate_signal_arrays(n_trials: int, n_cues: int) -> dict[str, np.ndarray]:
    return {name: np.full((n_trials, n_cues), np.nan) for name in SIGNAL_NAMES}


def _record_trial(arrays: dict[str, np.ndarray], t: int, signals: TrialSignals) -> None:
    arrays["predictions"][t] = signals.prediction
    arrays["volatility"][t] = signals.volatility
    arrays["learning_rate"][t] = signals.learning_rate
    arrays["prediction_error"][t] = signals.prediction_error
    arrays["volatility_prediction_error"][t] = signals.volatility_prediction_error
