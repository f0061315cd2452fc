"""
Tests for running the filter over grouped trial tables.
"""

import numpy as np
import pandas as pd
import pytest

from vkf_models import InvalidParameterError, run_vkf_on_frame, vkf_binary, vkf_continuous
from vkf_models.constants import SIGNAL_NAMES


@pytest.fixture
def trial_table():
    rng = np.random.default_rng(5)
    rows = []
    for participant_id in ("p01", "p02"):
        for block_id in (1, 2):
            for trial_index in range(1, 11):
                rows.append(
                    {
                        "participant_id": participant_id,
                        "block_id": block_id,
                        "trial_index": trial_index,
                        "outcome": float(rng.random() < 0.7),
                        "reward": float(rng.normal()),
                    }
                )
    # shuffle so ordering has to come from trial_index
    return pd.DataFrame(rows).sample(frac=1.0, random_state=0).reset_index(drop=True)


def test_filter_resets_per_group(trial_table):
    result = run_vkf_on_frame(trial_table, "vkf_binary", params={"lambda_": 0.2})
    assert len(result) == len(trial_table)

    first_trials = result[result["trial_index"] == 1]
    np.testing.assert_array_equal(first_trials["predictions"], 0.0)
    np.testing.assert_array_equal(first_trials["volatility"], 0.1)


def test_group_matches_direct_call(trial_table):
    result = run_vkf_on_frame(
        trial_table,
        "vkf_binary",
        params={"lambda_": 0.2, "v0": 0.3, "omega": 0.8},
    )
    block = (
        trial_table[(trial_table["participant_id"] == "p02") & (trial_table["block_id"] == 2)]
        .sort_values("trial_index")
    )
    _, signals = vkf_binary(block["outcome"].to_numpy(), 0.2, 0.3, 0.8)

    got = result[(result["participant_id"] == "p02") & (result["block_id"] == 2)]
    got = got.sort_values("trial_index")
    for name in SIGNAL_NAMES:
        np.testing.assert_allclose(got[name].to_numpy(), getattr(signals, name)[:, 0])


def test_multiple_outcome_columns_are_cues(trial_table):
    result = run_vkf_on_frame(
        trial_table,
        "vkf_continuous",
        outcome_columns=["outcome", "reward"],
        group_columns=["participant_id"],
    )
    assert len(result) == 2 * len(trial_table)
    assert set(result["cue"]) == {"outcome", "reward"}

    ordered = trial_table.sort_values(["participant_id", "trial_index"], kind="stable")
    subset = ordered[ordered["participant_id"] == "p01"]
    _, signals = vkf_continuous(subset["reward"].to_numpy(), 0.1, 0.1, 1.0)
    got = result[(result["participant_id"] == "p01") & (result["cue"] == "reward")]
    np.testing.assert_allclose(got["learning_rate"].to_numpy(), signals.learning_rate[:, 0])


def test_parameter_columns(trial_table):
    result = run_vkf_on_frame(trial_table, "vkf_continuous", params={"sigma2": 2.0}, w0=0.5)
    row = result.iloc[0]
    assert row["model_name"] == "vkf_continuous"
    assert row["param_lambda"] == 0.1
    assert row["param_v0"] == 0.1
    assert row["param_sigma2"] == 2.0
    assert row["param_w0"] == 0.5


def test_non_finite_outcomes_are_dropped_with_warning(trial_table):
    trial_table.loc[0, "outcome"] = np.nan
    with pytest.warns(RuntimeWarning, match="Dropping 1 rows"):
        result = run_vkf_on_frame(trial_table, "vkf_binary")
    assert len(result) == len(trial_table) - 1


def test_missing_columns(trial_table):
    with pytest.raises(ValueError, match="Missing required columns"):
        run_vkf_on_frame(trial_table.drop(columns=["block_id"]), "vkf_binary")


def test_invalid_params(trial_table):
    with pytest.raises(InvalidParameterError):
        run_vkf_on_frame(trial_table, "vkf_binary", params={"omega": 0.0})


def test_no_grouping(trial_table):
    ordered = trial_table.sort_values("trial_index", kind="stable")
    result = run_vkf_on_frame(ordered, "vkf_continuous", outcome_columns=["reward"], group_columns=())
    assert len(result) == len(trial_table)
    assert result["predictions"].iloc[0] == 0.0
    assert "participant_id" not in result.columns


def test_gap_in_one_cue_leaves_other_cue_untouched():
    table = pd.DataFrame(
        {
            "participant_id": ["p01"] * 5,
            "block_id": [1] * 5,
            "trial_index": [1, 2, 3, 4, 5],
            "a": [1.0, 0.5, 2.0, -1.0, 0.3],
            "b": [0.0, np.nan, 1.0, 1.0, 0.0],
        }
    )
    with pytest.warns(RuntimeWarning, match="cue 'b'"):
        joint = run_vkf_on_frame(table, "vkf_continuous", outcome_columns=["a", "b"])
    alone = run_vkf_on_frame(table, "vkf_continuous", outcome_columns=["a"])

    joint_a = joint[joint["cue"] == "a"].reset_index(drop=True)
    assert len(joint_a) == 5
    for name in SIGNAL_NAMES:
        np.testing.assert_array_equal(joint_a[name].to_numpy(), alone[name].to_numpy())

    joint_b = joint[joint["cue"] == "b"]
    assert joint_b["trial_index"].tolist() == [1, 3, 4, 5]
    _, signals = vkf_continuous([0.0, 1.0, 1.0, 0.0], 0.1, 0.1, 1.0)
    np.testing.assert_allclose(joint_b["predictions"].to_numpy(), signals.predictions[:, 0])


def test_rows_with_missing_group_key_are_kept():
    table = pd.DataFrame(
        {
            "participant_id": ["p01", None, "p01"],
            "trial_index": [1, 1, 2],
            "outcome": [1.0, 0.0, 1.0],
        }
    )
    result = run_vkf_on_frame(table, "vkf_binary", group_columns=["participant_id"])
    assert len(result) == 3

    missing_key = result[result["participant_id"].isna()]
    assert len(missing_key) == 1
    assert missing_key["predictions"].iloc[0] == 0.0
    assert result.loc[result["participant_id"] == "p01", "trial_index"].tolist() == [1, 2]


def test_non_numeric_outcomes_are_reported(trial_table):
    trial_table["outcome"] = trial_table["outcome"].astype(object)
    trial_table.loc[3, "outcome"] = "missing"
    with pytest.warns(RuntimeWarning, match="non-numeric values in 'outcome'"):
        result = run_vkf_on_frame(trial_table, "vkf_binary")
    assert len(result) == len(trial_table) - 1


def test_rows_without_trial_position_are_dropped_for_every_cue(trial_table):
    trial_table.loc[0, "trial_index"] = np.nan
    with pytest.warns(RuntimeWarning, match="Dropping 1 rows"):
        result = run_vkf_on_frame(trial_table, "vkf_continuous", outcome_columns=["outcome", "reward"])
    assert len(result) == 2 * (len(trial_table) - 1)
