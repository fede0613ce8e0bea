"""Minimal contract ABIs for the reads the calculator performs."""


def _view(name, inputs=(), outputs=("uint256",)):
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": f"arg{i}", "type": t} for i, t in enumerate(inputs)],
        "outputs": [{"name": "", "type": t} for t in outputs],
    }


ERC20_ABI = [
    _view("decimals", outputs=("uint8",)),
    _view("symbol", outputs=("string",)),
    _view("balanceOf", inputs=("address",)),
]

STRATEGY_ABI = [
    _view("STRATEGY_NAME", outputs=("string",)),
    _view("platform", outputs=("uint8",)),
    _view("underlying", outputs=("address",)),
    _view("rewardTokens", outputs=("address[]",)),
    _view("rewardPool", outputs=("address",)),
    _view("poolId"),
]

SMART_VAULT_ABI = [
    _view("name", outputs=("string",)),
    _view("active", outputs=("bool",)),
    _view("strategy", outputs=("address",)),
    _view("underlying", outputs=("address",)),
    _view("underlyingBalanceWithInvestment"),
]

BOOKKEEPER_ABI = [
    _view("vaults", outputs=("address[]",)),
]

PRICE_CALCULATOR_ABI = [
    _view("getPriceWithDefaultOutput", inputs=("address",)),
]

# Synthetix-style single reward staking pool
STAKING_REWARDS_ABI = [
    _view("rewardRate"),
    _view("totalSupply"),
    _view("balanceOf", inputs=("address",)),
]

# MasterChef-style multi pool farm with per-second emission
MASTER_CHEF_ABI = [
    _view("rewardPerSecond"),
    _view("totalAllocPoint"),
    _view(
        "poolInfo",
        inputs=("uint256",),
        outputs=("address", "uint256", "uint256", "uint256"),
    ),
    _view("userInfo", inputs=("uint256", "address"), outputs=("uint256", "uint256")),
]

# Compound-style comptroller accruing one reward token per holder
REWARD_DISTRIBUTOR_ABI = [
    _view("rewardToken", outputs=("address",)),
    _view("rewardAccrued", inputs=("address",)),
]
