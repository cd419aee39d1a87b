"""
Exceptions and warnings raised by plscv.

Input validation failures are raised at the call boundary before any computation
starts. Numerical degradation while extracting components is not fatal and is
reported with a warning instead.
"""


class DimensionError(ValueError):
    """
    Raised when the shapes of `X`, `Y` or a configuration argument do not agree,
    e.g. when `Y` does not have the same number of rows as `X` or when `lvs` is not
    a flat collection of scalars.
    """


class ArgumentCountError(TypeError):
    """Raised when a required input such as `X` or `Y` is missing."""


class NumericalDegradationWarning(UserWarning):
    """
    Issued when the deflated cross-product matrices become rank-deficient before the
    requested number of components has been extracted. Results with more components
    than the reported number of stable components repeat the last stable model.
    """
