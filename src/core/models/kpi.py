"""KPI result data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from src.core.fixed_point import from_wad

from .reward import PriceWarning


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class KPIStatus(Enum):
    """Status of KPI calculation."""

    SUCCESS = "success"
    INACTIVE = "inactive"  # Vault not active, KPI defined as zero
    EMPTY_VAULT = "empty_vault"  # Nothing deposited, KPI defined as zero
    ERROR = "error"


@dataclass
class KPIResult:
    """Rewards-to-deposits ratio of a vault over the reference period."""

    vault_id: str
    value: int  # WAD-scaled ratio
    status: KPIStatus
    calculated_at: datetime = field(default_factory=_utcnow)

    # Inputs of the ratio
    strategy: Optional[str] = None
    rewards_usd: int = 0  # WAD
    deposited_usd: int = 0  # WAD
    period_seconds: Optional[int] = None

    # Additional context
    warnings: List[PriceWarning] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if KPI was calculated from real inputs."""
        return self.status == KPIStatus.SUCCESS

    @property
    def ratio(self) -> Decimal:
        return from_wad(self.value)

    @property
    def display_value(self) -> str:
        """Format value for display."""
        if self.status == KPIStatus.ERROR:
            return "N/A"
        return f"{self.ratio * 100:.4f}%"

    @property
    def signal(self) -> str:
        """Get signal indicator (positive/negative/neutral)."""
        if not self.is_valid:
            return "neutral"
        return "positive" if self.value > 0 else "negative"
