"""
Configuration & Constants
=========================
Central registry for the fixed capacities the encoder is built around.

Everything that bounds memory (largest symbol, number of variations, size of
the debug log) is a named constant here so the worst-case footprint is known
up front.
"""

# Largest supported symbol version and its side length in modules
MAX_VERSION: int = 10
MAX_SIZE: int = 4 * MAX_VERSION + 17

# Largest generator polynomial kept in the Reed-Solomon table
MAX_GENERATOR_DEGREE: int = 68

# Protection rotator limits
MAX_VARIATIONS: int = 8
MAX_REFRESH_RATE: int = 10
MAX_INVERT_PERCENTAGE: int = 20

# Display clock, in ticks per second
DEFAULT_FRAME_RATE: int = 60

DEFAULT_EC_LEVEL: str = "Q"

# Records kept by the in-memory debug log
LOG_RING_CAPACITY: int = 64
