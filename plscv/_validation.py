"""
Argument checks shared by the cross-validation and leverage routines. Shapes are
checked before values so that a call with several problems reports the shape
problem first.
"""

from typing import Any, Tuple

import numpy as np
import numpy.typing as npt

from .exceptions import ArgumentCountError, DimensionError


def check_X_Y(
    X: npt.ArrayLike, Y: npt.ArrayLike, dtype: np.floating = np.float64
) -> Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating]]:
    """
    Converts `X` and `Y` to 2-D arrays of `dtype` with the same number of rows.

    Parameters
    ----------
    X : Array of shape (N, M) or (N,)
        Predictor variables. A 1-D array is treated as a single column.

    Y : Array of shape (N, O) or (N,)
        Response variables. A 1-D array is treated as a single column.

    dtype : numpy.float, default=numpy.float64
        The float datatype of the returned arrays.

    Returns
    -------
    X : Array of shape (N, M)

    Y : Array of shape (N, O)

    Raises
    ------
    ArgumentCountError
        If `X` or `Y` is None.

    DimensionError
        If `X` has more than two dimensions or `Y` does not have N rows.
    """
    if X is None or Y is None:
        raise ArgumentCountError("Both X and Y are required.")
    X = np.asarray(X, dtype=dtype)
    Y = np.asarray(Y, dtype=dtype)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if Y.ndim == 1:
        Y = Y.reshape(-1, 1)
    if X.ndim != 2:
        raise DimensionError(f"X must be N-by-M, got shape {X.shape}.")
    if Y.ndim != 2 or Y.shape[0] != X.shape[0]:
        raise DimensionError(
            f"Y must be N-by-O with N = {X.shape[0]}, got shape {Y.shape}."
        )
    return X, Y


def flatten_vector(values: Any, name: str) -> np.ndarray:
    """
    Accepts scalars, rows, columns and sets. Anything else is a DimensionError.

    Sets are sorted before conversion, so `{0, 1, 2}` and `[0, 1, 2]` give the same
    array.
    """
    if isinstance(values, (set, frozenset)):
        values = sorted(values)
    values = np.asarray(values)
    if sum(dim != 1 for dim in values.shape) > 1:
        raise DimensionError(
            f"{name} must be a 1-by-A vector, got shape {values.shape}."
        )
    return values.reshape(-1)


def check_lvs_values(lvs: np.ndarray) -> npt.NDArray[np.int_]:
    """Returns the sorted, deduplicated latent variable counts in `lvs`."""
    if lvs.size == 0:
        raise ValueError("lvs must contain at least one number of latent variables.")
    if lvs.dtype.kind not in "iuf":
        raise ValueError(f"lvs must contain integers, got dtype {lvs.dtype}.")
    lvs = np.unique(lvs)
    if np.any(lvs < 0):
        raise ValueError("lvs must not contain negative values.")
    if not np.all(np.isfinite(lvs)) or not np.array_equal(np.fix(lvs), lvs):
        raise ValueError("lvs must contain integers.")
    return lvs.astype(int)


def check_scalar(value: Any, name: str) -> None:
    """
    Raises a DimensionError if `value` is not a scalar.

    Parameters
    ----------
    value : Any
        The argument to check.

    name : str
        Name of the argument in the error message.
    """
    if np.ndim(value) != 0:
        raise DimensionError(f"{name} must be 1-by-1, got shape {np.shape(value)}.")


def check_blocks_r_value(blocks_r: Any, N: int) -> int:
    """
    Validates the number of folds.

    Parameters
    ----------
    blocks_r : Any
        Requested number of folds.

    N : int
        Number of samples.

    Returns
    -------
    blocks_r : int

    Raises
    ------
    ValueError
        If `blocks_r` is not an integer with 2 < `blocks_r` <= N.
    """
    try:
        value = float(blocks_r)
    except (TypeError, ValueError):
        raise ValueError(f"blocks_r must be an integer, got {blocks_r!r}.") from None
    if not value.is_integer():
        raise ValueError(f"blocks_r must be an integer, got {blocks_r}.")
    if value <= 2:
        raise ValueError(f"blocks_r must be above 2, got {int(value)}.")
    if value > N:
        raise ValueError(f"blocks_r must be at most N = {N}, got {int(value)}.")
    return int(value)


def check_labels(values: Any, K: int, name: str) -> np.ndarray:
    """
    Flattens per-variable `values` such as plot labels or classes.

    Parameters
    ----------
    values : Array-like of shape (K,)
        One entry per variable.

    K : int
        Expected number of entries.

    name : str
        Name of the argument in the error message.

    Returns
    -------
    values : Array of shape (K,)

    Raises
    ------
    DimensionError
        If `values` is not a vector of `K` entries.
    """
    values = flatten_vector(values, name)
    if values.shape[0] != K:
        raise DimensionError(
            f"{name} must have {K} entries, got {values.shape[0]}."
        )
    return values
