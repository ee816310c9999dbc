# Truncated-SVD image compression package

from .channels import CompressionResult, compress_image, is_grayscale, singular_value_distribution
from .errors import InvalidDimensionsError, SVDCompressError
from .metrics import compression_ratio
from .rank_selection import RankMode, estimate_rank_from_percentage, resolve_rank, select_rank_by_percentage

__version__ = "0.1.0"

__all__ = [
    'CompressionResult',
    'compress_image',
    'is_grayscale',
    'singular_value_distribution',
    'InvalidDimensionsError',
    'SVDCompressError',
    'compression_ratio',
    'RankMode',
    'estimate_rank_from_percentage',
    'resolve_rank',
    'select_rank_by_percentage',
]
