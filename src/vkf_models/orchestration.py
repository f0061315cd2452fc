from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from .constants import DEFAULT_GROUP_COLUMNS, DEFAULT_TRIAL_COLUMN, SIGNAL_NAMES
from .data_validation import (
    _coerce_numeric_columns,
    _drop_non_finite_rows,
    _validate_required_columns,
)
from .parameter_space import (
    get_default_params,
    noise_parameter_name,
    resolve_initial_variance,
    validate_model_params,
)
from .vkf_model import run_vkf


def _prepare_filter_input(
    df: pd.DataFrame,
    *,
    outcome_columns: Sequence[str],
    group_columns: Sequence[str],
    trial_column: str,
) -> pd.DataFrame:
    """Validate and sort a trial table for filtering.

    Only rows without a usable trial position are dropped here. Gaps in an
    outcome column are handled per cue so they never remove trials from
    another cue.
    """
    context = "volatile Kalman filtering"
    _validate_required_columns(
        df,
        [*group_columns, trial_column, *outcome_columns],
        context=context,
    )

    model_df = _coerce_numeric_columns(df, [trial_column, *outcome_columns], context=context)
    model_df = _drop_non_finite_rows(model_df, [trial_column], context=context)
    sort_columns = [*group_columns, trial_column]
    return model_df.sort_values(sort_columns, kind="stable", na_position="last").reset_index(
        drop=True
    )


def _iter_groups(model_df: pd.DataFrame, group_columns: list[str]):
    """Yield `(key_tuple, group_df)`; missing key values form their own group."""
    if not group_columns:
        yield (), model_df
        return
    for group_key, group_df in model_df.groupby(group_columns, sort=False, dropna=False):
        if not isinstance(group_key, tuple):
            group_key = (group_key,)
        yield group_key, group_df


def run_vkf_on_frame(
    df: pd.DataFrame,
    model_name: str,
    *,
    outcome_columns: Sequence[str] = ("outcome",),
    params: Mapping[str, float] | None = None,
    group_columns: Sequence[str] = DEFAULT_GROUP_COLUMNS,
    trial_column: str = DEFAULT_TRIAL_COLUMN,
    w0: float | None = None,
) -> pd.DataFrame:
    """Run the filter per group of a trial table and return per-trial signals.

    The filter state starts from the prior for every group (for example each
    participant-block), trials are ordered by `trial_column` within a group and
    every outcome column is filtered as an independent cue: a trial with a
    non-finite outcome is skipped for that cue only. Rows with a missing group
    key are kept and filtered together as one group.

    Args:
        df: Trial table.
        model_name: `"vkf_binary"` or `"vkf_continuous"`.
        outcome_columns: Columns holding the outcomes, one per cue.
        params: Hyperparameters; missing entries fall back to defaults.
        group_columns: Columns whose unique combinations reset the filter.
        trial_column: Column giving trial order within a group.
        w0: Initial posterior variance; defaults to the noise parameter.

    Returns:
        DataFrame with one row per trial and cue, cue by cue.

    Raises:
        InvalidParameterError: If a hyperparameter lies outside its domain.
    """
    merged_params = get_default_params(model_name)
    merged_params.update(dict(params or {}))
    named = validate_model_params(model_name, merged_params)
    noise_name = noise_parameter_name(model_name)
    initial_variance = resolve_initial_variance(w0, named[noise_name])

    outcome_columns = list(outcome_columns)
    group_columns = list(group_columns)
    model_df = _prepare_filter_input(
        df,
        outcome_columns=outcome_columns,
        group_columns=group_columns,
        trial_column=trial_column,
    )

    results: list[dict[str, object]] = []
    for cue in outcome_columns:
        cue_df = _drop_non_finite_rows(
            model_df, [cue], context=f"volatile Kalman filtering of cue '{cue}'"
        )
        for group_key, group_df in _iter_groups(cue_df, group_columns):
            outcomes = group_df[cue].to_numpy(dtype=float)
            _, signals = run_vkf(
                outcomes,
                model_name,
                lambda_=named["lambda_"],
                v0=named["v0"],
                noise=named[noise_name],
                w0=initial_variance,
            )
            signal_arrays = signals.as_dict()

            for t, trial_value in enumerate(group_df[trial_column].to_numpy()):
                row_dict: dict[str, object] = dict(zip(group_columns, group_key))
                row_dict[trial_column] = trial_value
                row_dict["cue"] = cue
                row_dict["outcome"] = float(outcomes[t])
                for name in SIGNAL_NAMES:
                    row_dict[name] = float(signal_arrays[name][t, 0])
                row_dict["model_name"] = model_name
                for param_name, value in named.items():
                    row_dict[f"param_{param_name.rstrip('_')}"] = float(value)
                row_dict["param_w0"] = initial_variance
                results.append(row_dict)

    return pd.DataFrame(results)
