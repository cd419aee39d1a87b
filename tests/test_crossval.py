"""
Tests for row-wise k-fold cross-validation of PLS models.
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from plscv.cross_validation import crossval_pls, row_blocks
from plscv.exceptions import (
    ArgumentCountError,
    DimensionError,
    NumericalDegradationWarning,
)


def structured_data(N=100, K=10, noise=0.1, seed=42):
    rng = np.random.default_rng(seed)
    X = rng.standard_normal((N, K))
    Y = X[:, :2] + noise * rng.standard_normal((N, 2))
    return X, Y


def test_row_blocks_rounding():
    """N = 10 and 3 folds gives contiguous slices of sizes 3, 4 and 3."""
    blocks = row_blocks(10, 3, random_state=0)
    permutation = np.random.default_rng(0).permutation(10)

    assert [block.size for block in blocks] == [3, 4, 3]
    assert_array_equal(blocks[0], permutation[0:3])
    assert_array_equal(blocks[1], permutation[3:7])
    assert_array_equal(blocks[2], permutation[7:10])


def test_row_blocks_round_half_away_from_zero():
    """Bounds at x.5 are rounded up, never to the nearest even number."""
    blocks = row_blocks(7, 4, random_state=1)

    assert [block.size for block in blocks] == [2, 2, 1, 2]
    assert_array_equal(np.sort(np.concatenate(blocks)), np.arange(7))


@pytest.mark.parametrize("N, blocks_r", [(10, 3), (11, 4), (17, 5), (23, 23), (100, 7)])
def test_row_blocks_partition(N, blocks_r):
    """Every sample is held out exactly once and sizes differ by at most one."""
    blocks = row_blocks(N, blocks_r, random_state=N)
    sizes = [block.size for block in blocks]

    assert len(blocks) == blocks_r
    assert max(sizes) - min(sizes) <= 1
    assert_array_equal(np.sort(np.concatenate(blocks)), np.arange(N))


def test_row_blocks_leave_one_out():
    blocks = row_blocks(12, 12, random_state=3)

    assert all(block.size == 1 for block in blocks)


def test_row_blocks_accepts_generator():
    blocks_a = row_blocks(20, 4, random_state=np.random.default_rng(5))
    blocks_b = row_blocks(20, 4, random_state=5)

    for block_a, block_b in zip(blocks_a, blocks_b):
        assert_array_equal(block_a, block_b)


def test_row_blocks_rejects_empty_folds():
    with pytest.raises(ValueError):
        row_blocks(3, 5, random_state=0)


def test_output_shapes():
    X, Y = structured_data()
    cumpress, press = crossval_pls(X, Y, lvs=range(6), blocks_r=10, random_state=0)

    assert cumpress.shape == (6,)
    assert press.shape == (6, 2)
    assert_allclose(cumpress, press.sum(axis=1))


def test_lvs_are_deduplicated_and_unrequested_rows_are_zero():
    X, Y = structured_data()
    cumpress, press = crossval_pls(
        X, Y, lvs=[3, 0, 3], blocks_r=5, random_state=0
    )

    assert cumpress.shape == (4,)
    assert_array_equal(press[1:3], 0)
    assert np.all(press[[0, 3]] > 0)


def test_zero_latent_variables_is_training_mean_prediction():
    """PRESS with 0 LVs equals the squared deviations from the training means."""
    X, Y = structured_data(N=40)
    seed = 11
    cumpress, press = crossval_pls(
        X, Y, lvs=[0, 1], blocks_r=6, prepx=2, prepy=1, random_state=seed
    )

    expected = np.zeros(2)
    for block in row_blocks(40, 6, random_state=seed):
        training = np.setdiff1d(np.arange(40), block)
        expected += np.sum((Y[block] - Y[training].mean(axis=0)) ** 2, axis=0)

    assert_allclose(press[0], expected, rtol=1e-10)
    assert_allclose(cumpress[0], expected.sum(), rtol=1e-10)


def test_structured_data_press_decreases_then_plateaus():
    X, Y = structured_data()
    cumpress, _ = crossval_pls(
        X, Y, lvs=range(6), blocks_r=10, prepx=2, prepy=2, random_state=0
    )

    assert cumpress[0] > cumpress[1] > cumpress[2]
    assert cumpress[2] < 0.25 * cumpress[0]
    # Further components gain little compared to the first two
    assert cumpress[2] - cumpress[3:].min() < 0.1 * (cumpress[0] - cumpress[2])


def test_reproducible_with_seed():
    X, Y = structured_data(N=50)
    first = crossval_pls(X, Y, lvs=range(4), blocks_r=5, random_state=123)
    second = crossval_pls(X, Y, lvs=range(4), blocks_r=5, random_state=123)

    assert_array_equal(first[0], second[0])
    assert_array_equal(first[1], second[1])


def test_parallel_folds_match_sequential():
    X, Y = structured_data(N=50)
    sequential = crossval_pls(X, Y, lvs=range(4), blocks_r=5, random_state=9)
    parallel = crossval_pls(X, Y, lvs=range(4), blocks_r=5, random_state=9, n_jobs=2)

    assert_allclose(parallel[0], sequential[0], rtol=1e-12)
    assert_allclose(parallel[1], sequential[1], rtol=1e-12)


def test_defaults():
    """Defaults are lvs = 0..rank(X) and leave-one-out."""
    X, Y = structured_data(N=20, K=4)
    cumpress, press = crossval_pls(X, Y[:, 0], random_state=0)

    assert cumpress.shape == (5,)
    assert press.shape == (5, 1)
    assert np.all(cumpress > 0)


def test_rank_deficient_training_sets_warn_and_repeat():
    rng = np.random.default_rng(4)
    X = rng.standard_normal((30, 2)) @ rng.standard_normal((2, 5))
    Y = X[:, :1] + 0.1 * rng.standard_normal((30, 1))

    with pytest.warns(NumericalDegradationWarning):
        cumpress, press = crossval_pls(
            X, Y, lvs=range(5), blocks_r=5, prepx=1, prepy=1, random_state=0
        )

    assert_allclose(press[3], press[2])
    assert_allclose(press[4], press[2])


def test_no_warning_for_well_posed_data():
    X, Y = structured_data()
    with warnings.catch_warnings():
        warnings.simplefilter("error", NumericalDegradationWarning)
        crossval_pls(X, Y, lvs=range(6), blocks_r=10, random_state=0)


def test_plot_hook_receives_requested_lvs():
    X, Y = structured_data(N=30)
    calls = []
    cumpress, _ = crossval_pls(
        X,
        Y,
        lvs=[0, 2, 4],
        blocks_r=3,
        plot=True,
        plot_function=lambda values, lvs: calls.append((values, lvs)),
        random_state=0,
    )

    assert len(calls) == 1
    values, lvs = calls[0]
    assert_array_equal(lvs, [0, 2, 4])
    assert_array_equal(values, cumpress[[0, 2, 4]])


def test_missing_arguments():
    X, _ = structured_data()
    with pytest.raises(ArgumentCountError):
        crossval_pls(X, None)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lvs": [[0, 1], [2, 3]]},
        {"blocks_r": [3, 4]},
        {"prepx": [1, 2]},
        {"prepy": [[2]] * 2},
        # Shape problems are reported before value problems
        {"lvs": [[0, 1], [2, 3]], "blocks_r": 2},
    ],
)
def test_dimension_errors(kwargs):
    X, Y = structured_data(N=20)
    with pytest.raises(DimensionError):
        crossval_pls(X, Y, **kwargs)


def test_y_rows_must_match_x():
    X, Y = structured_data(N=20)
    with pytest.raises(DimensionError):
        crossval_pls(X, Y[:-1], lvs=[0, 1], blocks_r=4)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lvs": [-1, 2]},
        {"lvs": [0, 1.5]},
        {"lvs": []},
        {"blocks_r": 2},
        {"blocks_r": 21},
        {"blocks_r": 3.5},
        {"prepx": 3},
        {"prepy": -1},
    ],
)
def test_value_errors(kwargs):
    X, Y = structured_data(N=20)
    kwargs = {"lvs": [0, 1], "blocks_r": 4, **kwargs}
    with pytest.raises(ValueError) as excinfo:
        crossval_pls(X, Y, **kwargs)

    assert not isinstance(excinfo.value, DimensionError)


def test_lvs_as_set():
    """A set of latent variables gives the same PRESS as the list form."""
    X, Y = structured_data(N=40)
    from_set = crossval_pls(X, Y, lvs={0, 1, 2}, blocks_r=4, random_state=2)
    from_list = crossval_pls(X, Y, lvs=[0, 1, 2], blocks_r=4, random_state=2)

    assert_array_equal(from_set[0], from_list[0])
    assert_array_equal(from_set[1], from_list[1])


def test_returned_number_of_stable_components():
    """The smallest number of stable components over folds can be returned."""
    X, Y = structured_data(N=40)
    cumpress, press, n_components = crossval_pls(
        X, Y, lvs=range(4), blocks_r=4, random_state=0, return_n_components=True
    )

    assert n_components == 3
    assert cumpress.shape == (4,)

    rng = np.random.default_rng(4)
    X = rng.standard_normal((30, 2)) @ rng.standard_normal((2, 5))
    Y = X[:, :1] + 0.1 * rng.standard_normal((30, 1))
    with pytest.warns(NumericalDegradationWarning):
        _, _, n_components = crossval_pls(
            X,
            Y,
            lvs=range(5),
            blocks_r=5,
            prepx=1,
            prepy=1,
            random_state=0,
            return_n_components=True,
        )

    assert n_components == 2
