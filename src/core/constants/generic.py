"""Generic constants for reward and KPI calculations.

These constants are protocol-agnostic and can be used across different platforms.
"""

# Time constants
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR

# Precision constants
WAD = 10**18  # Standard 18 decimal precision, canonical USD scale
MAX_TOKEN_DECIMALS = 77  # uint256 holds at most 77 full decimal digits

# Decimal context precision wide enough for uint256 products
ACCRUAL_PRECISION = 78

# Default computation parameters
DEFAULT_REFERENCE_PERIOD = SECONDS_PER_DAY
DEFAULT_QUERY_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_SCAN_CONCURRENCY = 4
DEFAULT_EXCLUDED_STRATEGIES = frozenset({"NoopStrategy"})
