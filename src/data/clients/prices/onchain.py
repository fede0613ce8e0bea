"""Price oracle reading the on-chain price calculator contract."""

import logging
from typing import Optional

from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from config.settings import Settings, get_settings
from src.core.models import PricePoint, Token
from src.data.clients.base import PriceOracle, PriceSource
from src.data.clients.web3_reader import Web3ChainStateReader
from src.protocols.tetu.abis import PRICE_CALCULATOR_ABI
from src.protocols.tetu.config import PRICE_CALCULATOR_ADDRESS

logger = logging.getLogger(__name__)


class OnChainPriceOracle(PriceOracle):
    """USD prices from ``getPriceWithDefaultOutput`` at the block for a timestamp.

    The calculator returns 0 for tokens it cannot route, which is reported
    as a missing price.
    """

    def __init__(self, reader: Web3ChainStateReader, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.reader = reader
        self.address = self.settings.price_calculator_address or PRICE_CALCULATOR_ADDRESS

    @property
    def source_name(self) -> str:
        return PriceSource.ONCHAIN.value

    async def get_usd_price(self, token: Token, at: int) -> Optional[PricePoint]:
        try:
            price = await self.reader.read_contract(
                self.address,
                PRICE_CALCULATOR_ABI,
                "getPriceWithDefaultOutput",
                Web3.to_checksum_address(token.address),
                at=at,
            )
        except (BadFunctionCallOutput, ContractLogicError) as e:
            logger.debug(f"Price calculator has no price for {token}: {e}")
            return None

        if price == 0:
            logger.debug(f"Price calculator returned zero for {token}")
            return None
        return PricePoint(token=token, price=price, timestamp=at)
