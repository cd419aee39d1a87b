__version__ = "1.0.0"
__all__ = [
    "cross_validation",
    "exceptions",
    "leverages",
    "numpy_kernel_pls",
    "plotting",
    "preprocessing",
    "KernelPLS",
    "PrepMode",
    "crossval_pls",
    "fit_kernel_pls",
    "leverages_pls",
    "preprocess",
]

from . import (
    cross_validation,
    exceptions,
    leverages,
    numpy_kernel_pls,
    plotting,
    preprocessing,
)
from .cross_validation import crossval_pls
from .leverages import leverages_pls
from .numpy_kernel_pls import KernelPLS, fit_kernel_pls
from .preprocessing import PrepMode, preprocess
