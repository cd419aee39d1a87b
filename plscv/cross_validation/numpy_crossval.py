"""
Row-wise k-fold cross-validation of PLS models fitted with Improved Kernel PLS
Algorithm #2. For each fold, the training block is preprocessed, its
cross-products XTX and XTY are handed to KernelPLS once with the largest number of
latent variables of interest, and the held-out block is predicted with every
requested number of latent variables from that single fit.

The folds can be processed in parallel using joblib. The per-fold PRESS blocks are
always summed in fold order so the result does not depend on `n_jobs`.
"""

import warnings
from collections.abc import Callable
from typing import Any, List, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt
from joblib import Parallel, delayed

from .. import plotting
from .._validation import (
    check_blocks_r_value,
    check_lvs_values,
    check_scalar,
    check_X_Y,
    flatten_vector,
)
from ..exceptions import NumericalDegradationWarning
from ..numpy_kernel_pls import KernelPLS
from ..preprocessing import PrepMode, apply_preprocessing, check_prep_mode, preprocess


def _round_half_up(x: float) -> int:
    # Fold bounds are non-negative, so this is rounding half away from zero
    return int(np.floor(x + 0.5))


def row_blocks(
    N: int,
    blocks_r: int,
    random_state: Union[None, int, np.random.Generator] = None,
) -> List[npt.NDArray[np.int_]]:
    """
    Randomly partitions the sample indices `0, ..., N - 1` into `blocks_r` folds.

    A random permutation of the indices is sliced into contiguous chunks. With
    1-based positions into the permutation, fold `i` spans
    `round((i - 1) * N / blocks_r + 1)` to `round(i * N / blocks_r)`, where halves
    are rounded away from zero. Fold sizes therefore differ by at most one sample.

    Parameters
    ----------
    N : int
        Number of samples.

    blocks_r : int
        Number of folds.

    random_state : None, int or numpy.random.Generator, optional, default=None
        Seed or generator for the permutation. Passing the same seed yields the
        same partition.

    Returns
    -------
    blocks : list of Array of shape (N_i,)
        Indices of the samples held out in each fold.

    Raises
    ------
    ValueError
        If a fold would be empty or the folds do not cover every sample exactly
        once.
    """
    rng = np.random.default_rng(random_state)
    permutation = rng.permutation(N)
    elem_r = N / blocks_r
    blocks = []
    for i in range(blocks_r):
        start = _round_half_up(i * elem_r + 1)
        stop = _round_half_up((i + 1) * elem_r)
        block = permutation[start - 1 : stop]
        if block.size == 0:
            raise ValueError(
                f"Fold {i + 1} of {blocks_r} is empty for N = {N}. Use fewer folds."
            )
        blocks.append(block)
    covered = np.concatenate(blocks)
    if covered.size != N or np.unique(covered).size != N:
        raise ValueError(
            f"Splitting N = {N} samples into {blocks_r} folds did not assign every "
            "sample to exactly one fold."
        )
    return blocks


def _fold_press(
    X: npt.NDArray[np.floating],
    Y: npt.NDArray[np.floating],
    validation_indices: npt.NDArray[np.int_],
    lvs: npt.NDArray[np.int_],
    prepx: PrepMode,
    prepy: PrepMode,
    ddof: int,
) -> Tuple[npt.NDArray[np.floating], int]:
    """
    Fits on all samples except `validation_indices` and returns the PRESS of the
    held-out samples for each number of latent variables in `lvs`, along with the
    number of stable components of the fit.

    Returns
    -------
    press : Array of shape (max(lvs) + 1, O)
        Sum of squared residuals per response variable. Rows for numbers of latent
        variables not in `lvs` are zero.

    n_components : int
        Number of components actually extracted on the training set.
    """
    training_mask = np.ones(X.shape[0], dtype=bool)
    training_mask[validation_indices] = False

    training_X, X_mean, X_std = preprocess(X[training_mask], prepx, ddof=ddof)
    training_Y, Y_mean, Y_std = preprocess(Y[training_mask], prepy, ddof=ddof)
    # Held-out rows use the training statistics only
    validation_X = apply_preprocessing(X[validation_indices], X_mean, X_std)
    validation_Y = apply_preprocessing(Y[validation_indices], Y_mean, Y_std)

    max_lv = int(lvs[-1])
    pls = KernelPLS(copy=False, dtype=X.dtype)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", NumericalDegradationWarning)
        pls.fit(training_X.T @ training_X, training_X.T @ training_Y, max_lv)

    press = np.zeros(shape=(max_lv + 1, Y.shape[1]), dtype=X.dtype)
    for lv in lvs:
        if lv > 0:
            residual = validation_Y - pls.predict(validation_X, n_components=lv)
        else:
            # Modelling with the training mean
            residual = validation_Y
        press[lv] = np.sum(residual**2, axis=0)
    return press, pls.max_stable_components


def crossval_pls(
    X: npt.ArrayLike,
    Y: npt.ArrayLike,
    lvs: Optional[npt.ArrayLike] = None,
    blocks_r: Optional[int] = None,
    prepx: Union[int, PrepMode] = PrepMode.AUTOSCALE,
    prepy: Union[int, PrepMode] = PrepMode.AUTOSCALE,
    plot: bool = False,
    plot_function: Optional[
        Callable[[npt.NDArray[np.floating], npt.NDArray[np.int_]], Any]
    ] = None,
    random_state: Union[None, int, np.random.Generator] = None,
    n_jobs: int = 1,
    verbose: int = 0,
    ddof: int = 0,
    return_n_components: bool = False,
) -> Union[
    Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating]],
    Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating], int],
]:
    """
    Row-wise k-fold cross-validation of the prediction error of PLS models.

    Parameters
    ----------
    X : Array of shape (N, M)
        Predictor variables.

    Y : Array of shape (N, O) or (N,)
        Response variables.

    lvs : Array-like of int or None, optional, default=None
        Numbers of latent variables to evaluate, e.g., `range(0, 6)`. 0 is the model
        that predicts the training mean. Duplicates are removed. If None, then
        `0, ..., rank(X)` are used.

    blocks_r : int or None, optional, default=None
        Number of folds. Must satisfy 2 < `blocks_r` <= N. If None, then N is used,
        i.e., leave-one-out.

    prepx : PrepMode or int, optional, default=PrepMode.AUTOSCALE
        Preprocessing of `X`: 0 none, 1 mean centering, 2 autoscaling. Statistics
        are computed on the training rows of each fold.

    prepy : PrepMode or int, optional, default=PrepMode.AUTOSCALE
        Preprocessing of `Y`, as for `prepx`.

    plot : bool, optional, default=False
        Whether to render the cumulative PRESS against the number of latent
        variables.

    plot_function : Callable or None, optional, default=None
        Called as `plot_function(cumpress[lvs], lvs)` when `plot` is True. If None,
        then `plscv.plotting.plot_vec` is used, which requires matplotlib.

    random_state : None, int or numpy.random.Generator, optional, default=None
        Seed or generator for the random assignment of samples to folds.

    n_jobs : int, optional, default=1
        Number of parallel jobs over folds. A value of -1 uses all available cores.

    verbose : int, optional, default=0
        Controls verbosity of parallel jobs.

    ddof : int, optional, default=0
        Delta degrees of freedom of the standard deviation used in autoscaling.

    return_n_components : bool, optional, default=False
        Whether to also return the smallest number of stable components over all
        folds.

    Returns
    -------
    cumpress : Array of shape (max(lvs) + 1,)
        Cumulative PRESS over response variables. Index `a` holds the PRESS with
        `a` latent variables.

    press : Array of shape (max(lvs) + 1, O)
        PRESS per response variable.

    n_components : int
        Only returned if `return_n_components` is True. The smallest number of
        components that could be extracted over all folds. Equal to `max(lvs)`
        unless the training cross-products of some fold were rank-deficient.

    Raises
    ------
    ArgumentCountError
        If `X` or `Y` is None.

    DimensionError
        If `Y` does not have N rows, `lvs` is not a vector, or `blocks_r`, `prepx`
        or `prepy` are not scalars.

    ValueError
        If `lvs` is empty or contains negative or non-integer values, if
        `blocks_r` is not an integer with 2 < `blocks_r` <= N, or if `prepx` or
        `prepy` is not 0, 1 or 2.

    Warns
    -----
    NumericalDegradationWarning.
        If the training cross-products of some fold did not support `max(lvs)`
        components. PRESS is still reported for every number of latent variables;
        counts above the stable number repeat the stable model.
    """
    X, Y = check_X_Y(X, Y)
    N = X.shape[0]

    if lvs is None:
        lvs = np.arange(np.linalg.matrix_rank(X) + 1)
    if blocks_r is None:
        blocks_r = N
    lvs = flatten_vector(lvs, "lvs")
    check_scalar(blocks_r, "blocks_r")
    check_scalar(prepx, "prepx")
    check_scalar(prepy, "prepy")
    check_scalar(plot, "plot")

    lvs = check_lvs_values(lvs)
    blocks_r = check_blocks_r_value(blocks_r, N)
    prepx = check_prep_mode(prepx, "prepx")
    prepy = check_prep_mode(prepy, "prepy")

    blocks = row_blocks(N, blocks_r, random_state)

    if verbose:
        print(
            f"Cross-validating Improved Kernel PLS Algorithm #2 with up to "
            f"{lvs[-1]} latent variables on {blocks_r} folds."
        )

    results = Parallel(n_jobs=n_jobs, verbose=verbose)(
        delayed(_fold_press)(X, Y, block, lvs, prepx, prepy, ddof) for block in blocks
    )

    press = np.zeros(shape=(lvs[-1] + 1, Y.shape[1]), dtype=X.dtype)
    for fold_press, _ in results:
        press += fold_press
    cumpress = np.sum(press, axis=1)

    stable_components = min(n_components for _, n_components in results)
    if stable_components < lvs[-1]:
        warnings.warn(
            message=f"Only {stable_components} stable component(s) could be extracted "
            f"in at least one fold. PRESS for more than {stable_components} latent "
            "variable(s) repeats the model with fewer components.",
            category=NumericalDegradationWarning,
            stacklevel=2,
        )

    if plot:
        if plot_function is None:
            plotting.plot_vec(
                cumpress[lvs],
                labels=lvs,
                xylabels=("#LVs", "PRESS"),
                kind="line",
            )
        else:
            plot_function(cumpress[lvs], lvs)

    if return_n_components:
        return cumpress, press, stable_components
    return cumpress, press
