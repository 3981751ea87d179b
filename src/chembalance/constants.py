"""Numeric constants shared by the solver and the integer reducer."""

# Pivots and matrix entries below this magnitude are treated as zero.
EPSILON = 1e-10

# Distance to the nearest integer accepted when approximating a fraction.
FRACTION_TOLERANCE = 1e-6

# Denominators 1..MAX_DENOMINATOR are searched in increasing order.
MAX_DENOMINATOR = 1000

# Used when no denominator within the bound fits (lossy).
FALLBACK_DENOMINATOR = 1000
