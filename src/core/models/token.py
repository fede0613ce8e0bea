"""Token data model."""

from dataclasses import dataclass

from src.core.constants import MAX_TOKEN_DECIMALS


@dataclass(frozen=True)
class Token:
    """ERC20 token identity and precision."""

    address: str
    decimals: int = 18
    symbol: str = "???"

    def __post_init__(self):
        if not 0 <= self.decimals <= MAX_TOKEN_DECIMALS:
            raise ValueError(f"Token decimals out of range: {self.decimals}")

    @property
    def key(self) -> str:
        """Case-insensitive identity used for grouping and dedup."""
        return self.address.lower()

    @property
    def unit(self) -> int:
        """Raw units in one whole token."""
        return 10**self.decimals

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        if isinstance(other, Token):
            return self.key == other.key
        return False

    def __str__(self) -> str:
        return f"{self.symbol}({self.address})"
