"""Protocol-specific implementations.

This module contains protocol-specific contract addresses, platform codes
and ABIs for the vault systems the reward calculator reads.

Currently supported:
- Tetu on Polygon (src.protocols.tetu)
"""

# Import specific modules as needed:
#   from src.protocols.tetu.config import PLATFORM_CODES
#   from src.protocols.tetu.abis import STRATEGY_ABI
