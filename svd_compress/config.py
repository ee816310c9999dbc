"""Default numerical and pipeline settings."""

# ---------------------------------------------------------------------------
# Numerics
# ---------------------------------------------------------------------------

# Threshold for convergence, degenerate vectors and early stopping.
EPSILON = 1e-10

# Power iteration budget per singular triplet.
DEFAULT_MAX_ITERATIONS = 100

# ---------------------------------------------------------------------------
# Pixel handling
# ---------------------------------------------------------------------------

# Maximum per-pixel channel difference still treated as gray.
GRAYSCALE_TOLERANCE = 5

OPAQUE_ALPHA = 255

# RGBA samples per pixel.
PIXEL_STRIDE = 4

# ---------------------------------------------------------------------------
# CLI defaults
# ---------------------------------------------------------------------------

DEFAULT_RANK = 50
DEFAULT_PERCENTAGE = 50.0
