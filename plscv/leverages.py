"""
Leverages of the predictor variables in a PLS model.
"""

from collections.abc import Callable
from typing import Any, Optional, Union

import numpy as np
import numpy.typing as npt

from . import plotting
from ._validation import (
    check_labels,
    check_lvs_values,
    check_scalar,
    check_X_Y,
    flatten_vector,
)
from .numpy_kernel_pls import KernelPLS
from .preprocessing import PrepMode, check_prep_mode, preprocess


def leverages_pls(
    X: npt.ArrayLike,
    Y: npt.ArrayLike,
    lvs: Optional[npt.ArrayLike] = None,
    prepx: Union[int, PrepMode] = PrepMode.AUTOSCALE,
    prepy: Union[int, PrepMode] = PrepMode.AUTOSCALE,
    plot: bool = False,
    labels: Optional[npt.ArrayLike] = None,
    classes: Optional[npt.ArrayLike] = None,
    plot_function: Optional[Callable[[np.ndarray, np.ndarray, np.ndarray], Any]] = None,
    ddof: int = 0,
) -> npt.NDArray[np.floating]:
    """
    Computes the leverage of each predictor variable as the squared norm of its row
    in the weights matrix of a PLS model with `max(lvs)` latent variables, i.e., the
    diagonal of W @ W.T.

    Parameters
    ----------
    X : Array of shape (N, M)
        Predictor variables.

    Y : Array of shape (N, O) or (N,)
        Response variables.

    lvs : Array-like of int or None, optional, default=None
        Latent variables considered. The model is fitted with `max(lvs)` of them,
        so `[1, 2]` and `[2]` both use the first two. Zeros are dropped. If None,
        then `1, ..., rank(X)` are used.

    prepx : PrepMode or int, optional, default=PrepMode.AUTOSCALE
        Preprocessing of `X`: 0 none, 1 mean centering, 2 autoscaling.

    prepy : PrepMode or int, optional, default=PrepMode.AUTOSCALE
        Preprocessing of `Y`, as for `prepx`.

    plot : bool, optional, default=False
        Whether to render a bar plot of the leverages.

    labels : Array-like of shape (M,) or None, optional, default=None
        Names of the variables in the plot. Defaults to `1, ..., M`.

    classes : Array-like of shape (M,) or None, optional, default=None
        Groups of the variables, one colour per group in the plot. Defaults to a
        single group.

    plot_function : Callable or None, optional, default=None
        Called as `plot_function(L, labels, classes)` when `plot` is True. If None,
        then `plscv.plotting.plot_vec` is used, which requires matplotlib.

    ddof : int, optional, default=0
        Delta degrees of freedom of the standard deviation used in autoscaling.

    Returns
    -------
    L : Array of shape (M,)
        Leverages of the predictor variables. All entries are non-negative.

    Raises
    ------
    ArgumentCountError
        If `X` or `Y` is None.

    DimensionError
        If `Y` does not have N rows, `lvs` is not a vector, `prepx` or `prepy` is
        not a scalar, or `labels` or `classes` do not have M entries.

    ValueError
        If `lvs` contains negative or non-integer values or no positive value, or
        if `prepx` or `prepy` is not 0, 1 or 2.
    """
    X, Y = check_X_Y(X, Y)
    M = X.shape[1]

    if lvs is None:
        lvs = np.arange(1, np.linalg.matrix_rank(X) + 1)
    lvs = flatten_vector(lvs, "lvs")
    check_scalar(prepx, "prepx")
    check_scalar(prepy, "prepy")
    check_scalar(plot, "plot")
    if labels is not None:
        labels = check_labels(labels, M, "labels")
    if classes is not None:
        classes = check_labels(classes, M, "classes")

    if lvs.size > 0:
        lvs = check_lvs_values(lvs)
        lvs = lvs[lvs != 0]
    if lvs.size == 0:
        raise ValueError("lvs must contain at least one positive latent variable.")
    prepx = check_prep_mode(prepx, "prepx")
    prepy = check_prep_mode(prepy, "prepy")

    xcs, _, _ = preprocess(X, prepx, ddof=ddof)
    ycs, _, _ = preprocess(Y, prepy, ddof=ddof)

    pls = KernelPLS(copy=False, dtype=X.dtype)
    pls.fit(xcs.T @ xcs, xcs.T @ ycs, int(lvs[-1]))

    L = np.sum(pls.W**2, axis=1)

    if plot:
        if labels is None:
            labels = np.arange(1, M + 1)
        if classes is None:
            classes = np.ones(M, dtype=int)
        if plot_function is None:
            plotting.plot_vec(
                L, labels=labels, classes=classes, xylabels=("Variables", "Leverages")
            )
        else:
            plot_function(L, labels, classes)

    return L
