"""
Column-wise preprocessing of data blocks.

The statistics returned by `preprocess` are computed on the rows it is given. In
cross-validation they are computed on the training rows only and then applied to
the held-out rows with `apply_preprocessing`, so that no information leaks from
the validation set.
"""

from enum import IntEnum
from typing import Tuple, Union

import numpy as np
import numpy.typing as npt

from .exceptions import DimensionError


class PrepMode(IntEnum):
    """Preprocessing applied to a data block."""

    NONE = 0
    MEAN_CENTER = 1
    AUTOSCALE = 2


def check_prep_mode(mode: Union[int, PrepMode], name: str = "prep") -> PrepMode:
    """
    Converts `mode` to a PrepMode.

    Raises
    ------
    DimensionError
        If `mode` is not a scalar.

    ValueError
        If `mode` is not one of 0, 1 or 2.
    """
    if np.ndim(mode) != 0:
        raise DimensionError(f"{name} must be a scalar, got shape {np.shape(mode)}.")
    try:
        value = float(mode)
        if not value.is_integer():
            raise ValueError
        return PrepMode(int(value))
    except (TypeError, ValueError):
        raise ValueError(
            f"Invalid {name}: {mode}. Must be 0 (none), 1 (mean centering) or "
            "2 (autoscaling)."
        ) from None


def preprocess(
    matrix: npt.ArrayLike,
    mode: Union[int, PrepMode] = PrepMode.AUTOSCALE,
    ddof: int = 0,
    dtype: np.floating = np.float64,
) -> Tuple[
    npt.NDArray[np.floating], npt.NDArray[np.floating], npt.NDArray[np.floating]
]:
    """
    Centers and/or scales the columns of `matrix`.

    Parameters
    ----------
    matrix : Array of shape (N, K) or (N,)
        Data block. A 1-D array is treated as a single column.

    mode : PrepMode or int, default=PrepMode.AUTOSCALE
        0: no preprocessing, 1: mean centering, 2: autoscaling.

    ddof : int, default=0
        The delta degrees of freedom used for the standard deviation in
        autoscaling. The default gives the population standard deviation.

    dtype : numpy.float, default=numpy.float64
        The float datatype of the returned arrays.

    Returns
    -------
    centered : Array of shape (N, K)
        The preprocessed block, (matrix - center) / scale.

    center : Array of shape (1, K)
        Zeros for mode 0, column-wise means otherwise.

    scale : Array of shape (1, K)
        Ones for modes 0 and 1, column-wise standard deviations for mode 2.
        Columns with a standard deviation at or below machine epsilon are given a
        scale of 1.

    Raises
    ------
    DimensionError
        If `matrix` is not 1-D or 2-D.

    ValueError
        If `mode` is invalid.
    """
    mode = check_prep_mode(mode, "mode")
    matrix = np.asarray(matrix, dtype=dtype)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.ndim != 2:
        raise DimensionError(
            f"matrix must be 1-D or 2-D, got {matrix.ndim} dimensions."
        )

    K = matrix.shape[1]
    if mode == PrepMode.NONE:
        center = np.zeros(shape=(1, K), dtype=dtype)
    else:
        center = matrix.mean(axis=0, keepdims=True)

    if mode == PrepMode.AUTOSCALE:
        scale = matrix.std(axis=0, ddof=ddof, keepdims=True)
        scale[np.abs(scale) <= np.finfo(dtype).eps] = 1
    else:
        scale = np.ones(shape=(1, K), dtype=dtype)

    return apply_preprocessing(matrix, center, scale), center, scale


def apply_preprocessing(
    matrix: npt.ArrayLike,
    center: npt.NDArray[np.floating],
    scale: npt.NDArray[np.floating],
) -> npt.NDArray[np.floating]:
    """
    Applies previously computed `center` and `scale` to the rows of `matrix`.
    """
    matrix = np.asarray(matrix, dtype=center.dtype)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    return (matrix - center) / scale
