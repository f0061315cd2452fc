"""Public API for volatile Kalman filter models."""

from .observation_models import (
    BinaryObservationModel,
    ContinuousObservationModel,
    ObservationModel,
    build_observation_model,
)
from .online import BinaryVKF, ContinuousVKF, VolatileKalmanFilter
from .orchestration import run_vkf_on_frame
from .parameter_space import (
    InvalidParameterError,
    get_default_params,
    get_parameter_spec,
    theta_to_named_params,
    validate_model_params,
)
from .recursive_filter import FilterState, initial_state, run_filter, vkf_step
from .signals import SignalBundle, TrialSignals
from .simulation import simulate_volatile_outcomes
from .vkf_model import run_vkf, vkf_binary, vkf_continuous

__all__ = [
    "vkf_binary",
    "vkf_continuous",
    "run_vkf",
    "run_filter",
    "vkf_step",
    "initial_state",
    "FilterState",
    "SignalBundle",
    "TrialSignals",
    "ObservationModel",
    "BinaryObservationModel",
    "ContinuousObservationModel",
    "build_observation_model",
    "VolatileKalmanFilter",
    "BinaryVKF",
    "ContinuousVKF",
    "run_vkf_on_frame",
    "simulate_volatile_outcomes",
    "InvalidParameterError",
    "get_parameter_spec",
    "get_default_params",
    "validate_model_params",
    "theta_to_named_params",
]
