"""
Contains the KernelPLS class which fits partial least-squares regression directly on
the cross-product matrices XTX and XTY using Improved Kernel PLS Algorithm #2 by
Dayal and MacGregor:
https://doi.org/10.1002/(SICI)1099-128X(199701)11:1%3C73::AID-CEM435%3E3.0.CO;2-%23

The samples are never revisited during fitting. Regression coefficients for every
number of components up to `A` are available after a single fit, which is what the
cross-validation and leverage routines rely on.

The KernelPLS class subclasses scikit-learn's BaseEstimator. It is written using
NumPy.
"""

import warnings
from typing import Optional, Tuple

import numpy as np
import numpy.linalg as la
import numpy.typing as npt
from sklearn.base import BaseEstimator

from .exceptions import DimensionError, NumericalDegradationWarning


class KernelPLS(BaseEstimator):
    """
    Implements partial least-squares regression on precomputed cross-product
    matrices using Improved Kernel PLS Algorithm #2 by Dayal and MacGregor:
    https://doi.org/10.1002/(SICI)1099-128X(199701)11:1%3C73::AID-CEM435%3E3.0.CO;2-%23

    `XTX` and `XTY` must be computed from already preprocessed (centered and possibly
    scaled) data. No centering or scaling happens inside this class.

    Parameters
    ----------
    copy : bool, default=True
        Whether to copy `XTY` before fitting. Deflation modifies `XTY`. If False and
        `dtype` matches the type of `XTY`, then the caller's array is overwritten.

    dtype : numpy.float, default=numpy.float64
        The float datatype to use in computation of the PLS algorithm. Using a lower
        precision than float64 will yield significantly worse results when using an
        increasing number of components due to propagation of numerical errors.

    Notes
    -----
    Each weight vector is normalized to unit length and its sign is fixed so that its
    entry of largest magnitude is positive. This makes fits deterministic across
    numerically equivalent eigensolver paths.
    """

    def __init__(
        self,
        copy: bool = True,
        dtype: np.floating = np.float64,
    ) -> None:
        self.copy = copy
        self.dtype = dtype
        self.eps = np.finfo(dtype).eps
        self.name = "Improved Kernel PLS Algorithm #2"
        self.A = None
        self.K = None
        self.M = None
        self.B = None
        self.W = None
        self.P = None
        self.Q = None
        self.R = None
        self.max_stable_components = None

    def _degradation_warning(self, i: int, reason: str) -> None:
        """
        Warns the user that no further stable component could be extracted.

        Parameters
        ----------
        i : int
            Number of components extracted so far.

        reason : str
            Which quantity fell below the numerical tolerance.
        """
        warnings.warn(
            message=f"{reason} is close to zero. Only {i} stable component(s) could "
            f"be extracted; results with A = {i + 1} component(s) or higher repeat "
            f"the {i}-component model.",
            category=NumericalDegradationWarning,
            stacklevel=3,
        )
        self.max_stable_components = i

    @staticmethod
    def _fix_sign(w: npt.NDArray[np.floating]) -> npt.NDArray[np.floating]:
        """
        Flips the sign of the weight vector `w` so that its entry of largest
        magnitude is positive. Ties go to the first such entry.

        Parameters
        ----------
        w : Array of shape (K, 1)
            Unit-length weight vector.

        Returns
        -------
        w : Array of shape (K, 1)
        """
        if w.flat[np.argmax(np.abs(w))] < 0:
            return -w
        return w

    def _check_inputs(
        self, XTX: npt.ArrayLike, XTY: npt.ArrayLike, A: int
    ) -> Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating]]:
        """
        Converts `XTX` and `XTY` to arrays of `self.dtype` and validates their
        shapes and `A`.

        Parameters
        ----------
        XTX : Array of shape (K, K)

        XTY : Array of shape (K, M) or (K,)

        A : int
            Number of components.

        Returns
        -------
        XTX : Array of shape (K, K)

        XTY : Array of shape (K, M)

        Raises
        ------
        DimensionError
            If `XTX` is not square or `XTY` does not have K rows.

        ValueError
            If `A` is not a non-negative integer.
        """
        XTX = np.asarray(XTX, dtype=self.dtype)
        XTY = np.asarray(XTY, dtype=self.dtype)
        if XTY.ndim == 1:
            XTY = XTY.reshape(-1, 1)
        if XTX.ndim != 2 or XTX.shape[0] != XTX.shape[1]:
            raise DimensionError(
                f"XTX must be a square K-by-K matrix, got shape {XTX.shape}."
            )
        if XTY.ndim != 2 or XTY.shape[0] != XTX.shape[0]:
            raise DimensionError(
                f"XTY must have {XTX.shape[0]} rows to match XTX, got shape "
                f"{XTY.shape}."
            )
        if isinstance(A, bool) or not float(A).is_integer() or A < 0:
            raise ValueError(f"A must be a non-negative integer, got {A}.")
        return XTX, XTY

    def fit(self, XTX: npt.ArrayLike, XTY: npt.ArrayLike, A: int) -> None:
        """
        Fits Improved Kernel PLS Algorithm #2 on `XTX` and `XTY` using `A`
        components.

        Parameters
        ----------
        XTX : Array of shape (K, K)
            Cross-product of the preprocessed predictor variables, X.T @ X.

        XTY : Array of shape (K, M) or (K,)
            Cross-product of the preprocessed predictor and response variables,
            X.T @ Y.

        A : int
            Maximum number of components in the PLS model.

        Attributes
        ----------
        A : int
            Number of components requested.

        max_stable_components : int
            Number of components actually extracted before the deflated
            cross-products became rank-deficient. Equal to `A` for well-posed fits.

        B : Array of shape (A, K, M)
            PLS regression coefficients tensor. `B[a - 1]` holds the coefficients
            using `a` components and equals `R[:, :a] @ Q[:, :a].T`.

        W : Array of shape (K, A)
            PLS weights matrix for X.

        P : Array of shape (K, A)
            PLS loadings matrix for X.

        Q : Array of shape (M, A)
            PLS Loadings matrix for Y.

        R : Array of shape (K, A)
            PLS weights matrix to compute scores T directly from X. Equal to
            W (P^T W)^-1, built one column at a time.

        Returns
        -------
        None.

        Raises
        ------
        DimensionError
            If `XTX` is not square or `XTY` does not have as many rows as `XTX`.

        ValueError
            If `A` is not a non-negative integer.

        Warns
        -----
        NumericalDegradationWarning.
            If the residual variance of X, the weight or the score variance of a
            component goes below machine precision before `A` components have been
            extracted.
        """
        XTX, XTY = self._check_inputs(XTX, XTY, A)
        if self.copy:
            XTY = XTY.copy()
        A = int(A)
        K = XTX.shape[0]
        M = XTY.shape[1]

        self.B = np.zeros(shape=(A, K, M), dtype=self.dtype)
        W = np.zeros(shape=(A, K), dtype=self.dtype)
        P = np.zeros(shape=(A, K), dtype=self.dtype)
        Q = np.zeros(shape=(A, M), dtype=self.dtype)
        R = np.zeros(shape=(A, K), dtype=self.dtype)
        self.W = W.T
        self.P = P.T
        self.Q = Q.T
        self.R = R.T
        self.A = A
        self.max_stable_components = A
        self.K = K
        self.M = M

        # Tolerances are relative to the size of the undeflated cross-products
        tol = 100 * max(K, M) * self.eps
        xty_scale = float(la.norm(XTY))
        xtx_scale = float(np.trace(XTX))
        # Trace of the deflated XTX, i.e., the variance of X not yet explained
        residual_x_variance = xtx_scale

        for i in range(A):
            if residual_x_variance <= tol * xtx_scale:
                self._degradation_warning(i, "Residual variance of X")
                break

            # Step 2
            if M == 1:
                norm = la.norm(XTY, ord=2)
                if norm <= tol * xty_scale:
                    self._degradation_warning(i, "Weight")
                    break
                w = XTY / norm
            elif M < K:
                XTYTXTY = XTY.T @ XTY
                eig_vals, eig_vecs = la.eigh(XTYTXTY)
                q = eig_vecs[:, -1:]
                w = XTY @ q
                norm = la.norm(w)
                if norm <= tol * xty_scale:
                    self._degradation_warning(i, "Weight")
                    break
                w = w / norm
            else:
                XTYYTX = XTY @ XTY.T
                eig_vals, eig_vecs = la.eigh(XTYYTX)
                norm = eig_vals[-1]
                if norm <= (tol * xty_scale) ** 2:
                    self._degradation_warning(i, "Weight")
                    break
                w = eig_vecs[:, -1:]
            w = self._fix_sign(w)

            # Step 3
            r = np.copy(w)
            for j in range(i):
                r = r - P[j].reshape(-1, 1).T @ w * R[j].reshape(-1, 1)

            # Step 4
            rXTX = r.T @ XTX
            tTt = (rXTX @ r).item()
            if tTt <= tol * xtx_scale:
                self._degradation_warning(i, "Score variance")
                break
            W[i] = w.squeeze()
            R[i] = r.squeeze()
            p = rXTX.T / tTt
            q = (r.T @ XTY).T / tTt
            P[i] = p.squeeze()
            Q[i] = q.squeeze()

            # Step 5
            XTY -= (p @ q.T) * tTt
            residual_x_variance -= tTt * (p.T @ p).item()

            # Compute regression coefficients
            if i == 0:
                self.B[i] = r @ q.T
            else:
                self.B[i] = self.B[i - 1] + r @ q.T

        n = self.max_stable_components
        if 0 < n < A:
            self.B[n:] = self.B[n - 1]

    def coefficients(self, n_components: int) -> npt.NDArray[np.floating]:
        """
        Returns the regression coefficients using `n_components` components.

        Parameters
        ----------
        n_components : int
            Number of components. 0 yields a matrix of zeros, i.e., the model that
            predicts the mean of the preprocessed training responses.

        Returns
        -------
        B : Array of shape (K, M)
            Regression coefficients, R[:, :n_components] @ Q[:, :n_components].T.

        Raises
        ------
        ValueError
            If `n_components` is negative or larger than the fitted `A`.
        """
        if n_components < 0 or n_components > self.A:
            raise ValueError(
                f"n_components must be between 0 and {self.A}, got {n_components}."
            )
        if n_components == 0:
            return np.zeros(shape=(self.K, self.M), dtype=self.dtype)
        return self.B[n_components - 1]

    def predict(
        self, X: npt.ArrayLike, n_components: Optional[int] = None
    ) -> npt.NDArray[np.floating]:
        """
        Predicts on preprocessed `X` with `B` using `n_components` components. If
        `n_components` is None, then predictions are returned for each individual
        number of components.

        Parameters
        ----------
        X : Array of shape (N, K)
            Predictor variables, preprocessed with the training statistics.

        n_components : int or None, optional, default=None.
            Number of components in the PLS model. If None, then each individual number
            of components is used.

        Returns
        -------
        Y_pred : Array of shape (N, M) or (A, N, M)
            Predictions on the preprocessed scale of Y.
        """
        X = np.asarray(X, dtype=self.dtype)
        if n_components is None:
            return X @ self.B
        return X @ self.coefficients(n_components)


def fit_kernel_pls(
    XTX: npt.ArrayLike,
    XTY: npt.ArrayLike,
    A: int,
    dtype: np.floating = np.float64,
) -> Tuple[
    npt.NDArray[np.floating],
    npt.NDArray[np.floating],
    npt.NDArray[np.floating],
    npt.NDArray[np.floating],
    npt.NDArray[np.floating],
    int,
]:
    """
    Functional front-end to `KernelPLS`. Fits `A` components on `XTX` and `XTY`.

    Returns
    -------
    B : Array of shape (A, K, M)
        Regression coefficients for 1..A components.

    W, P, Q, R : Arrays of shape (K, A), (K, A), (M, A), (K, A)
        Weights, X loadings, Y loadings and the regression basis.

    n_components : int
        Number of components actually extracted.
    """
    pls = KernelPLS(copy=True, dtype=dtype)
    pls.fit(XTX, XTY, A)
    return pls.B, pls.W, pls.P, pls.Q, pls.R, pls.max_stable_components
