"""Error taxonomy for reward and KPI calculations.

Missing prices are not errors: they travel as warnings on a successful
result (see ``src.core.models.reward.Valuation``).
"""


class RewardCalculatorError(Exception):
    """Base class for all calculator errors."""


class InvalidArgument(RewardCalculatorError, ValueError):
    """Caller supplied a bad address, window or period. Never retried."""


class DataUnavailable(RewardCalculatorError):
    """An oracle or chain state read failed or timed out.

    The core does not retry; callers may retry with backoff.
    """

    def __init__(self, message: str, *, source: str = ""):
        super().__init__(message)
        self.source = source


class UnsupportedPlatform(RewardCalculatorError):
    """No adapter for a position's platform tag, or a pool shape the reader cannot split per token."""
