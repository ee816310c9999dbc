"""Low-rank approximation algorithms.

This package contains the dense kernels, the power-iteration eigensolver and
the truncated SVD built on top of them, plus a LAPACK baseline for
comparison.
"""

from .kernels import multiply, transpose, norm, normalize
from .power_iteration import EigenPair, power_iteration, random_unit_vector
from .svd_lowrank import (
    Decomposition,
    SingularTriplet,
    deflate,
    numpy_svd_lowrank,
    power_svd,
    reconstruct,
)

__all__ = [
    "multiply",
    "transpose",
    "norm",
    "normalize",
    "EigenPair",
    "power_iteration",
    "random_unit_vector",
    "Decomposition",
    "SingularTriplet",
    "deflate",
    "numpy_svd_lowrank",
    "power_svd",
    "reconstruct",
]
