__all__ = ["crossval_pls", "numpy_crossval", "row_blocks"]

from . import numpy_crossval
from .numpy_crossval import crossval_pls, row_blocks
