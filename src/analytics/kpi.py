"""Vault KPI: rewards earned per unit of value deposited."""

import logging
from typing import Optional

from config.settings import Settings, get_settings
from src.core.constants import DEFAULT_REFERENCE_PERIOD, WAD
from src.core.errors import DataUnavailable, InvalidArgument
from src.core.fixed_point import mul_div, token_to_usd
from src.core.models import KPIResult, KPIStatus, VaultInfo
from src.data.clients.base import ChainStateReader, PriceOracle
from src.data.query import QueryRunner
from src.rewards import build_reward_calculator
from src.rewards.calculator import RewardCalculator, check_period
from src.rewards.positions import validate_address

logger = logging.getLogger(__name__)


class KpiEngine:
    """
    Computes the KPI of a vault.

    KPI = rewards USD over the reference period / deposited USD now,
    as a WAD-scaled ratio. Inactive and empty vaults score zero.
    """

    def __init__(
        self,
        calculator: RewardCalculator,
        reader: ChainStateReader,
        oracle: PriceOracle,
        runner: Optional[QueryRunner] = None,
        reference_period: int = DEFAULT_REFERENCE_PERIOD,
        max_price_age: Optional[int] = None,
    ):
        self.calculator = calculator
        self.reader = reader
        self.oracle = oracle
        self.runner = runner or QueryRunner()
        self.reference_period = check_period(reference_period)
        self.max_price_age = max_price_age

    async def kpi(self, vault: str) -> int:
        """Compute the KPI of a vault as a WAD-scaled ratio.

        Args:
            vault: Vault contract address

        Returns:
            rewards_usd * WAD // deposited_usd, or 0 for inactive and
            empty vaults

        Raises:
            InvalidArgument: If ``vault`` is not a valid vault address
            DataUnavailable: If rewards or the deposit price could not be read
        """
        result = await self.vault_kpi(vault)
        return result.value

    async def vault_kpi(self, vault: str) -> KPIResult:
        """Compute the KPI of a vault with its inputs and price warnings."""
        validate_address(vault, "vault address")

        info = await self.runner.run(self.reader.get_vault(vault), f"get_vault({vault})")
        if info is None:
            raise InvalidArgument(f"Unknown vault: {vault}")

        if not info.active:
            logger.info(f"Vault {vault} ({info.name}) is inactive, KPI is zero")
            return KPIResult(
                vault_id=vault,
                value=0,
                status=KPIStatus.INACTIVE,
                strategy=info.strategy,
                period_seconds=self.reference_period,
            )

        if info.is_empty:
            logger.info(f"Vault {vault} ({info.name}) holds no deposits, KPI is zero")
            return KPIResult(
                vault_id=vault,
                value=0,
                status=KPIStatus.EMPTY_VAULT,
                strategy=info.strategy,
                period_seconds=self.reference_period,
            )

        rewards = await self.calculator.strategy_rewards(info.strategy, self.reference_period)
        deposited = await self.deposited_usd(info, rewards.window_end)

        if deposited == 0:
            value, status = 0, KPIStatus.EMPTY_VAULT
        else:
            value, status = mul_div(rewards.usd, WAD, deposited), KPIStatus.SUCCESS

        result = KPIResult(
            vault_id=vault,
            value=value,
            status=status,
            strategy=info.strategy,
            rewards_usd=rewards.usd,
            deposited_usd=deposited,
            period_seconds=self.reference_period,
            warnings=list(rewards.warnings),
            metadata={"vault_name": info.name, "strategy_name": info.strategy_name},
        )
        logger.info(f"Vault {vault} ({info.name}) KPI {result.display_value}")
        return result

    async def deposited_usd(self, info: VaultInfo, at: int) -> int:
        """USD value (WAD) of everything deposited in the vault.

        Raises:
            DataUnavailable: If the underlying token has no usable price
        """
        token = info.underlying
        point = await self.runner.run(
            self.oracle.get_usd_price(token, at),
            f"price({token.symbol}, {at})",
        )
        if point is None or point.price <= 0:
            logger.error(f"No price for {token}, cannot value deposits of {info.address}")
            raise DataUnavailable(f"No price for vault underlying {token}", source="oracle")

        age = point.age(at)
        if self.max_price_age is not None and age is not None and age > self.max_price_age:
            logger.error(f"Price of {token} is {age}s old, cannot value deposits of {info.address}")
            raise DataUnavailable(f"Stale price for vault underlying {token}", source="oracle")

        return token_to_usd(info.total_assets, token.decimals, point.price)


def build_kpi_engine(
    settings: Optional[Settings] = None,
    calculator: Optional[RewardCalculator] = None,
) -> KpiEngine:
    """Wire a KpiEngine sharing the calculator's reader, oracle and runner."""
    settings = settings or get_settings()
    calculator = calculator or build_reward_calculator(settings)
    return KpiEngine(
        calculator=calculator,
        reader=calculator.reader,
        oracle=calculator.valuation.oracle,
        runner=calculator.runner,
        reference_period=settings.reference_period_seconds,
        max_price_age=settings.max_price_age_seconds,
    )
