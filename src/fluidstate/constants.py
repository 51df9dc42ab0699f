from __future__ import annotations

# Mainnet deployment
MAINNET_LIQUIDITY_PROXY = "0x52aa899454998be5b000ad077a46bbe360f4e497"
MAINNET_DEX_FACTORY = "0x91716C4EDA1Fb55e84Bf8b4c7085f84285c19085"

# Multicall3 is deployed at the same address on every major EVM chain
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

DEFAULT_BATCH_SIZE = 500

UINT256_MAX = 2**256 - 1
