"""Chain state reader backed by a JSON-RPC node."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from config.settings import Settings, get_settings
from src.core.errors import DataUnavailable, UnsupportedPlatform
from src.core.models import Platform, PoolRef, StrategyInfo, Token, VaultInfo
from src.data.clients.base import ChainStateReader
from src.protocols.tetu.abis import (
    BOOKKEEPER_ABI,
    ERC20_ABI,
    MASTER_CHEF_ABI,
    REWARD_DISTRIBUTOR_ABI,
    SMART_VAULT_ABI,
    STAKING_REWARDS_ABI,
    STRATEGY_ABI,
)
from src.protocols.tetu.config import (
    BOOKKEEPER_ADDRESS,
    POOL_ID_SEPARATOR,
    platform_from_code,
)

logger = logging.getLogger(__name__)

# Errors meaning "this contract does not answer that call"
_NOT_A_CONTRACT = (BadFunctionCallOutput, ContractLogicError)


class Web3ChainStateReader(ChainStateReader):
    """Reads strategies, vaults and reward pools through AsyncWeb3.

    Pool ids are the reward pool address, suffixed with ``:<pid>`` for
    MasterChef-style farms. Historical reads resolve the timestamp to the
    last block mined at or before it.
    """

    def __init__(self, settings: Optional[Settings] = None, web3: Optional[AsyncWeb3] = None):
        self.settings = settings or get_settings()
        self._web3 = web3
        self._blocks: Dict[int, int] = {}  # timestamp -> block number
        self._tokens: Dict[str, Token] = {}
        self._distributor_tokens: Dict[str, str] = {}  # distributor -> accrued token

    async def _get_web3(self) -> AsyncWeb3:
        """Get or create Web3 instance."""
        if self._web3 is None:
            rpc_url = self.settings.rpc_url
            if not rpc_url:
                raise ValueError("RPC URL not configured. Set RPC_URL in .env")
            self._web3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        return self._web3

    async def _contract(self, address: str, abi: List[Dict[str, Any]]):
        web3 = await self._get_web3()
        return web3.eth.contract(address=web3.to_checksum_address(address), abi=abi)

    async def _call(self, address: str, abi, fn: str, *args, block: Any = "latest"):
        """Call a view function, translating transport failures."""
        contract = await self._contract(address, abi)
        try:
            return await getattr(contract.functions, fn)(*args).call(block_identifier=block)
        except _NOT_A_CONTRACT:
            raise
        except (Web3Exception, aiohttp.ClientError, OSError) as e:
            logger.error(f"RPC call {fn} on {address} failed: {e}")
            raise DataUnavailable(f"RPC call {fn} on {address} failed: {e}", source="rpc") from e

    async def read_contract(self, address: str, abi, fn: str, *args, at: Optional[int] = None):
        """Call a view function at the block for ``at`` (latest if None)."""
        block = "latest" if at is None else await self.block_at(at)
        return await self._call(address, abi, fn, *args, block=block)

    # ========== BLOCKS ==========

    async def _latest_block(self) -> Dict[str, Any]:
        web3 = await self._get_web3()
        try:
            return await web3.eth.get_block("latest")
        except (Web3Exception, aiohttp.ClientError, OSError) as e:
            logger.error(f"Failed to fetch latest block: {e}")
            raise DataUnavailable(f"Failed to fetch latest block: {e}", source="rpc") from e

    async def _block_timestamp(self, number: int) -> int:
        web3 = await self._get_web3()
        try:
            block = await web3.eth.get_block(number)
        except (Web3Exception, aiohttp.ClientError, OSError) as e:
            logger.error(f"Failed to fetch block {number}: {e}")
            raise DataUnavailable(f"Failed to fetch block {number}: {e}", source="rpc") from e
        return block["timestamp"]

    async def block_at(self, at: int) -> int:
        """Find the last block mined at or before ``at`` (binary search)."""
        if at in self._blocks:
            return self._blocks[at]

        latest = await self._latest_block()
        if at >= latest["timestamp"]:
            return latest["number"]

        lo, hi = 0, latest["number"]
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if await self._block_timestamp(mid) <= at:
                lo = mid
            else:
                hi = mid - 1

        logger.debug(f"Timestamp {at} resolved to block {lo}")
        self._blocks[at] = lo
        return lo

    async def current_timestamp(self) -> int:
        latest = await self._latest_block()
        return latest["timestamp"]

    # ========== TOKENS ==========

    async def get_token(self, address: str) -> Token:
        """Fetch ERC20 metadata, cached per address."""
        key = address.lower()
        if key not in self._tokens:
            try:
                decimals = await self._call(address, ERC20_ABI, "decimals")
            except _NOT_A_CONTRACT as e:
                logger.error(f"{address} is not an ERC20 token: {e}")
                raise DataUnavailable(f"{address} is not an ERC20 token", source="rpc") from e
            try:
                symbol = await self._call(address, ERC20_ABI, "symbol")
            except _NOT_A_CONTRACT:
                # Some tokens return bytes32 symbols
                symbol = "???"
            self._tokens[key] = Token(address=address, decimals=decimals, symbol=symbol)
        return self._tokens[key]

    # ========== REGISTRY ==========

    async def get_strategy(self, strategy: str) -> Optional[StrategyInfo]:
        try:
            name = await self._call(strategy, STRATEGY_ABI, "STRATEGY_NAME")
            code = await self._call(strategy, STRATEGY_ABI, "platform")
            underlying = await self._call(strategy, STRATEGY_ABI, "underlying")
            reward_addresses = await self._call(strategy, STRATEGY_ABI, "rewardTokens")
        except _NOT_A_CONTRACT:
            logger.debug(f"{strategy} does not answer the strategy interface")
            return None

        reward_tokens = tuple([await self.get_token(a) for a in reward_addresses])
        pools: Tuple[PoolRef, ...] = ()
        pool_id = await self._strategy_pool_id(strategy)
        if pool_id and reward_tokens:
            pools = (PoolRef(pool_id=pool_id, reward_tokens=reward_tokens),)

        return StrategyInfo(
            address=strategy,
            name=name,
            platform=platform_from_code(code),
            underlying=await self.get_token(underlying),
            pools=pools,
        )

    async def _strategy_pool_id(self, strategy: str) -> Optional[str]:
        try:
            pool = await self._call(strategy, STRATEGY_ABI, "rewardPool")
        except _NOT_A_CONTRACT:
            return None
        try:
            pid = await self._call(strategy, STRATEGY_ABI, "poolId")
        except _NOT_A_CONTRACT:
            return pool
        return f"{pool}{POOL_ID_SEPARATOR}{pid}"

    async def get_vault(self, vault: str) -> Optional[VaultInfo]:
        try:
            name = await self._call(vault, SMART_VAULT_ABI, "name")
            active = await self._call(vault, SMART_VAULT_ABI, "active")
            strategy = await self._call(vault, SMART_VAULT_ABI, "strategy")
            underlying = await self._call(vault, SMART_VAULT_ABI, "underlying")
            total_assets = await self._call(vault, SMART_VAULT_ABI, "underlyingBalanceWithInvestment")
        except _NOT_A_CONTRACT:
            logger.debug(f"{vault} does not answer the vault interface")
            return None

        info = await self.get_strategy(strategy)
        return VaultInfo(
            address=vault,
            name=name,
            active=active,
            strategy=strategy,
            underlying=await self.get_token(underlying),
            total_assets=total_assets,
            strategy_name=info.name if info else "",
            platform=info.platform if info else Platform.UNKNOWN,
        )

    async def list_vaults(self) -> List[str]:
        bookkeeper = self.settings.bookkeeper_address or BOOKKEEPER_ADDRESS
        try:
            return list(await self._call(bookkeeper, BOOKKEEPER_ABI, "vaults"))
        except _NOT_A_CONTRACT as e:
            logger.error(f"Bookkeeper {bookkeeper} did not return vaults: {e}")
            raise DataUnavailable(f"Bookkeeper {bookkeeper} did not return vaults", source="rpc") from e

    # ========== POOLS ==========

    @staticmethod
    def _split_pool_id(pool_id: str) -> Tuple[str, Optional[int]]:
        if POOL_ID_SEPARATOR in pool_id:
            pool, pid = pool_id.split(POOL_ID_SEPARATOR, 1)
            return pool, int(pid)
        return pool_id, None

    async def _pool_read(self, fn: str, pool_id: str, *args, at: int):
        """Read a pool view at the block for ``at``."""
        block = await self.block_at(at)
        pool, pid = self._split_pool_id(pool_id)
        abi = MASTER_CHEF_ABI if pid is not None else STAKING_REWARDS_ABI
        try:
            return await self._call(pool, abi, fn, *args, block=block)
        except _NOT_A_CONTRACT as e:
            logger.error(f"Pool {pool_id} rejected {fn}: {e}")
            raise DataUnavailable(f"Pool {pool_id} rejected {fn}: {e}", source="rpc") from e

    async def pool_emission_rate(self, platform: str, pool_id: str, token: Token, at: int) -> Decimal:
        _, pid = self._split_pool_id(pool_id)
        if pid is None:
            rate = await self._pool_read("rewardRate", pool_id, at=at)
            return Decimal(rate)

        per_second = await self._pool_read("rewardPerSecond", pool_id, at=at)
        total_alloc = await self._pool_read("totalAllocPoint", pool_id, at=at)
        _, alloc, _, _ = await self._pool_read("poolInfo", pool_id, pid, at=at)
        if total_alloc == 0:
            return Decimal(0)
        return Decimal(per_second) * Decimal(alloc) / Decimal(total_alloc)

    async def pool_stake(self, strategy: str, platform: str, pool_id: str, at: int) -> Tuple[int, int]:
        pool, pid = self._split_pool_id(pool_id)
        web3 = await self._get_web3()
        holder = web3.to_checksum_address(strategy)
        if pid is None:
            staked = await self._pool_read("balanceOf", pool_id, holder, at=at)
            total = await self._pool_read("totalSupply", pool_id, at=at)
            return staked, total

        staked, _ = await self._pool_read("userInfo", pool_id, pid, holder, at=at)
        lp_token, _, _, _ = await self._pool_read("poolInfo", pool_id, pid, at=at)
        block = await self.block_at(at)
        total = await self._call(lp_token, ERC20_ABI, "balanceOf", web3.to_checksum_address(pool), block=block)
        return staked, total

    async def _distributor_token(self, pool: str) -> str:
        """Address of the single token a reward distributor accrues, cached per pool."""
        key = pool.lower()
        if key not in self._distributor_tokens:
            try:
                self._distributor_tokens[key] = await self._call(pool, REWARD_DISTRIBUTOR_ABI, "rewardToken")
            except _NOT_A_CONTRACT as e:
                logger.error(f"Reward distributor {pool} rejected rewardToken: {e}")
                raise DataUnavailable(f"Reward distributor {pool} rejected rewardToken", source="rpc") from e
        return self._distributor_tokens[key]

    async def position_balance(
        self,
        strategy: str,
        platform: str,
        pool_id: str,
        token: Token,
        at: int,
    ) -> int:
        pool, _ = self._split_pool_id(pool_id)
        accrued = await self._distributor_token(pool)
        if accrued.lower() != token.key:
            raise UnsupportedPlatform(f"Reward distributor {pool} accrues {accrued} only, not {token}")

        block = await self.block_at(at)
        web3 = await self._get_web3()
        try:
            return await self._call(
                pool,
                REWARD_DISTRIBUTOR_ABI,
                "rewardAccrued",
                web3.to_checksum_address(strategy),
                block=block,
            )
        except _NOT_A_CONTRACT as e:
            logger.error(f"Reward distributor {pool} rejected rewardAccrued: {e}")
            raise DataUnavailable(f"Reward distributor {pool} rejected rewardAccrued", source="rpc") from e

    async def close(self) -> None:
        """Close the provider."""
        self._web3 = None
