"""Rewards scan across every vault in the registry."""

import asyncio
import logging
from typing import Iterable, Optional, Union

from config.settings import Settings, get_settings
from src.core.constants import (
    DEFAULT_EXCLUDED_STRATEGIES,
    DEFAULT_REFERENCE_PERIOD,
    DEFAULT_SCAN_CONCURRENCY,
)
from src.core.models import RegistrySnapshot, ScanReport, VaultRewards
from src.data.clients.base import ChainStateReader
from src.data.query import QueryRunner
from src.rewards import build_reward_calculator
from src.rewards.calculator import RewardCalculator, check_period

logger = logging.getLogger(__name__)

SKIP_INACTIVE = "inactive"
SKIP_EXCLUDED = "excluded"
SKIP_UNKNOWN = "unknown"


class VaultScanner:
    """
    Computes strategy rewards for all registered vaults.

    Inactive vaults and vaults whose strategy is on the exclusion list are
    skipped. A failure on one vault is recorded and the scan goes on.
    """

    def __init__(
        self,
        calculator: RewardCalculator,
        reader: ChainStateReader,
        runner: Optional[QueryRunner] = None,
        excluded_strategy_names: Iterable[str] = DEFAULT_EXCLUDED_STRATEGIES,
        max_concurrent: int = DEFAULT_SCAN_CONCURRENCY,
        default_period: int = DEFAULT_REFERENCE_PERIOD,
    ):
        self.calculator = calculator
        self.reader = reader
        self.runner = runner or QueryRunner()
        self.excluded_strategy_names = frozenset(excluded_strategy_names)
        self.max_concurrent = max_concurrent
        self.default_period = check_period(default_period)

    async def snapshot(self) -> RegistrySnapshot:
        """Take the vault list once, with the configured exclusions."""
        vaults = await self.runner.run(self.reader.list_vaults(), "list_vaults")
        return RegistrySnapshot.of(vaults, self.excluded_strategy_names)

    async def scan(
        self,
        period_seconds: Optional[int] = None,
        snapshot: Optional[RegistrySnapshot] = None,
    ) -> ScanReport:
        """
        Compute rewards of every active, non-excluded vault.

        Args:
            period_seconds: Trailing window length (None = default period)
            snapshot: Vault list to scan (None = read from the registry)

        Returns:
            ScanReport with per-vault results, skips and failures
        """
        period = check_period(self.default_period if period_seconds is None else period_seconds)
        if snapshot is None:
            snapshot = await self.snapshot()
        report = ScanReport(period_seconds=period)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def scan_with_semaphore(vault: str):
            async with semaphore:
                return await self._scan_vault(vault, period, snapshot)

        tasks = [scan_with_semaphore(v) for v in snapshot.vaults]
        completed = await asyncio.gather(*tasks, return_exceptions=True)

        for vault, outcome in zip(snapshot.vaults, completed):
            # Cancellation and interrupts abort the whole scan
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                logger.error(f"Error scanning vault {vault}: {outcome}")
                report.failed[vault] = f"{type(outcome).__name__}: {outcome}"
                continue
            if isinstance(outcome, str):
                report.skipped[vault] = outcome
            else:
                report.results.append(outcome)

        logger.info(
            f"Scanned {report.vault_count} vault(s): {len(report.results)} computed, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed, "
            f"total {report.display_total}"
        )
        return report

    async def _scan_vault(
        self, vault: str, period: int, snapshot: RegistrySnapshot
    ) -> Union[VaultRewards, str]:
        """Return VaultRewards, or the skip reason."""
        info = await self.runner.run(self.reader.get_vault(vault), f"get_vault({vault})")
        if info is None:
            logger.warning(f"Vault {vault} not found, skipping")
            return SKIP_UNKNOWN
        if not info.active:
            logger.info(f"Vault {vault} ({info.name}) inactive, skipping")
            return SKIP_INACTIVE
        if snapshot.is_excluded(info.strategy_name):
            logger.info(f"Vault {vault} strategy {info.strategy_name} excluded, skipping")
            return SKIP_EXCLUDED

        rewards = await self.calculator.strategy_rewards(info.strategy, period)
        logger.debug(f"Vault {vault} ({info.name}) {info.platform.value}: {rewards.valuation.display_value}")
        return VaultRewards(vault=info, rewards=rewards)


def build_scanner(
    settings: Optional[Settings] = None,
    calculator: Optional[RewardCalculator] = None,
) -> VaultScanner:
    """Wire a VaultScanner sharing the calculator's reader and runner."""
    settings = settings or get_settings()
    calculator = calculator or build_reward_calculator(settings)
    return VaultScanner(
        calculator=calculator,
        reader=calculator.reader,
        runner=calculator.runner,
        excluded_strategy_names=settings.excluded_strategy_names,
        max_concurrent=settings.scan_concurrency,
        default_period=settings.reference_period_seconds,
    )
