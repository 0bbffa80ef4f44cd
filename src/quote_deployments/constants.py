"""Configuration constants for quote-deployments library."""

from .types import ConstantSpec

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Network configuration, keyed by canonical chain alias.
# Verifier kinds: "etherscan", "sourcify", "oklink"
CHAINS = {
    "eth": {
        "chain_id": 1,
        "chain_name": "Ethereum Mainnet",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=1",
    },
    "bsc": {
        "chain_id": 56,
        "chain_name": "BNB Smart Chain",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=56",
    },
    "monad": {
        "chain_id": 143,
        "chain_name": "Monad",
        "verifier": "sourcify",
        "verifier_url": "https://sourcify-api-monad.blockvision.org/",
    },
    "base": {
        "chain_id": 8453,
        "chain_name": "Base",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=8453",
    },
    "op": {
        "chain_id": 10,
        "chain_name": "Optimism",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=10",
    },
    "arb": {
        "chain_id": 42161,
        "chain_name": "Arbitrum One",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=42161",
    },
    "polygon": {
        "chain_id": 137,
        "chain_name": "Polygon",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=137",
    },
    "blast": {
        "chain_id": 81457,
        "chain_name": "Blast",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=81457",
    },
    "avax": {
        "chain_id": 43114,
        "chain_name": "Avalanche C-Chain",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=43114",
    },
    "unichain": {
        "chain_id": 130,
        "chain_name": "Unichain",
        "verifier": "etherscan",
        "verifier_url": "https://api.etherscan.io/v2/api?chainid=130",
    },
    "xlayer": {
        "chain_id": 196,
        "chain_name": "X Layer",
        "verifier": "oklink",
        "verifier_url": "https://www.oklink.com/api/v5/explorer/contract/verify-source-code-plugin/xlayer",
    },
}

# Accepted spellings -> canonical alias
CHAIN_ALIASES = {
    "eth": "eth",
    "ethereum": "eth",
    "bsc": "bsc",
    "bnb": "bsc",
    "monad": "monad",
    "base": "base",
    "optimism": "op",
    "op": "op",
    "arbitrum": "arb",
    "arb": "arb",
    "polygon": "polygon",
    "matic": "polygon",
    "blast": "blast",
    "avax": "avax",
    "avalanche": "avax",
    "unichain": "unichain",
    "xlayer": "xlayer",
}

# Contract names in deployment receipts -> registry role
IMPLEMENTATION_ROLE = "implementation"
PROXY_ROLE = "proxy"
PROXY_ADMIN_ROLE = "proxy_admin"

CONTRACT_ROLES = {
    "QueryData": IMPLEMENTATION_ROLE,
    "TransparentUpgradeableProxy": PROXY_ROLE,
    "ProxyAdmin": PROXY_ADMIN_ROLE,
}

# Known external libraries -> fully qualified declaration path for linking
LIBRARY_PATHS = {
    "QueryAlgebraTicksSuperCompact": "src/extLib/QueryAlgebraTicksSuperCompact.sol:QueryAlgebraTicksSuperCompact",
    "QueryZoraTicksSuperCompact": "src/extLib/QueryZoraTicksSuperCompact.sol:QueryZoraTicksSuperCompact",
    "QueryUniv4TicksSuperCompact": "src/extLib/QueryUniv4TicksSuperCompact.sol:QueryUniv4TicksSuperCompact",
    "QueryUniv3TicksSuperCompact": "src/extLib/QueryUniv3TicksSuperCompact.sol:QueryUniv3TicksSuperCompact",
    "QueryPancakeInfinityLBReserveSuperCompact": "src/extLib/QueryPancakeInfinityLBReserveSuperCompact.sol:QueryPancakeInfinityLBReserveSuperCompact",
    "QueryIzumiSuperCompact": "src/extLib/QueryIzumiSuperCompact.sol:QueryIzumiSuperCompact",
    "QueryHorizonTicksSuperCompact": "src/extLib/QueryHorizonTicksSuperCompact.sol:QueryHorizonTicksSuperCompact",
    "QueryFluidLite": "src/extLib/QueryFluidLite.sol:QueryFluidLite",
    "QueryFluid": "src/extLib/QueryFluid.sol:QueryFluid",
}

# Deployment phases, in merge order. Receipts live at
# broadcast/<script>/<chain_id>/run-latest.json
DEPLOY_SCRIPTS = ("DeployImpl.s.sol", "DeployProxy.s.sol")
RECEIPT_FILENAME = "run-latest.json"

# Build settings the verifier must reproduce
VERIFIED_CONTRACT = "src/Quote.sol:QueryData"
COMPILER_VERSION = "0.8.17"
COMPILER_BUILD = "v0.8.17+commit.8df45f5f"
OPTIMIZER_RUNS = 200
PROXY_DEPLOY_SCRIPT = "script/DeployProxy.s.sol:DeployProxy"
VERIFIER_API_KEY_ENV = "ETHERSCAN_API_KEY"

# Address constants in src/Quote.sol
QUOTE_CONSTANTS = (
    ConstantSpec("POOL_MANAGER", "public", ("uniswapV4", "poolManager")),
    ConstantSpec("STATE_VIEW", "public", ("uniswapV4", "stateView")),
    ConstantSpec("POSITION_MANAGER", "public", ("uniswapV4", "positionManager")),
    ConstantSpec("FLUID_LITE_DEX", "public", ("fluidLite", "dex")),
    ConstantSpec("FLUID_LITE_DEPLOYER_CONTRACT", "public", ("fluidLite", "deployerContract")),
    ConstantSpec("FLUID_LIQUIDITY", "public", ("fluid", "liquidity")),
    ConstantSpec("FLUID_DEX_V2", "public", ("fluid", "dexV2")),
)

# Address constants in script/UpgradeProxy.s.sol
UPGRADE_CONSTANTS = (
    ConstantSpec("PROXY", "internal", ("proxy",)),
    ConstantSpec("PROXY_ADMIN", "internal", ("proxyAdmin",)),
    ConstantSpec("NEW_IMPLEMENTATION", "internal", ("implementation",)),
)

# Protocol groups written into a freshly seeded registry
SEED_PROTOCOL_GROUPS = {
    "uniswapV4": ("poolManager", "stateView", "positionManager"),
    "fluidLite": ("dex", "deployerContract"),
    "fluid": ("liquidity", "dexV2"),
}

# Metadata comment naming the active network in src/Quote.sol
NETWORK_COMMENT_PATTERN = r"// Core contract addresses \([^)\n]*\)"
NETWORK_COMMENT_FORMAT = "// Core contract addresses ({chain_name})"
