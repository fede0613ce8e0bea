"""Registry snapshot and vault scan report models."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Tuple

from src.core.fixed_point import from_wad

from .position import Platform
from .reward import StrategyRewards
from .vault import VaultInfo


@dataclass(frozen=True)
class RegistrySnapshot:
    """Vault list and exclusions taken once at the start of a scan."""

    vaults: Tuple[str, ...]
    excluded_strategy_names: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, vaults: Iterable[str], excluded: Iterable[str] = ()) -> "RegistrySnapshot":
        # Keep first occurrence order, drop case-insensitive duplicates
        seen = set()
        ordered = []
        for vault in vaults:
            if vault.lower() in seen:
                continue
            seen.add(vault.lower())
            ordered.append(vault)
        return cls(vaults=tuple(ordered), excluded_strategy_names=frozenset(excluded))

    def is_excluded(self, strategy_name: str) -> bool:
        return strategy_name in self.excluded_strategy_names

    def __len__(self) -> int:
        return len(self.vaults)


@dataclass
class VaultRewards:
    """Strategy rewards attributed to the vault that holds the strategy."""

    vault: VaultInfo
    rewards: StrategyRewards

    @property
    def usd(self) -> int:
        return self.rewards.usd


@dataclass
class ScanReport:
    """Outcome of a rewards scan across every registered vault."""

    period_seconds: int
    results: List[VaultRewards] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)  # vault -> reason
    failed: Dict[str, str] = field(default_factory=dict)  # vault -> error

    @property
    def total_usd(self) -> int:
        return sum(r.usd for r in self.results)

    @property
    def by_platform(self) -> Dict[Platform, int]:
        totals: Dict[Platform, int] = {}
        for r in self.results:
            totals[r.vault.platform] = totals.get(r.vault.platform, 0) + r.usd
        return totals

    @property
    def vault_count(self) -> int:
        return len(self.results) + len(self.skipped) + len(self.failed)

    @property
    def display_total(self) -> str:
        return f"${from_wad(self.total_usd):,.2f}"
