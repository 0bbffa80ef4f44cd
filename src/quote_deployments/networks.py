"""Chain alias resolution for quote-deployments library."""

from typing import List

from .constants import CHAIN_ALIASES, CHAINS
from .exceptions import UnknownChainError
from .types import ChainMeta, VerifierKind


def supported_chains() -> List[str]:
    """Canonical aliases of all configured chains, in configuration order."""
    return list(CHAINS)


def resolve_chain(alias: str) -> ChainMeta:
    """
    Resolve a user-supplied chain alias to its configuration.

    Accepts any spelling in CHAIN_ALIASES, case-insensitively.

    Args:
        alias: Chain alias, e.g. "Arbitrum" or "arb"

    Returns:
        ChainMeta for the canonical chain

    Raises:
        UnknownChainError: If the alias is not configured
    """
    canonical = CHAIN_ALIASES.get(alias.strip().lower())
    if canonical is None or canonical not in CHAINS:
        raise UnknownChainError(
            f'Unknown chain "{alias}". Supported chains: {", ".join(supported_chains())}'
        )

    config = CHAINS[canonical]
    return ChainMeta(
        alias=canonical,
        chain_id=config["chain_id"],
        chain_name=config["chain_name"],
        verifier=VerifierKind(config["verifier"]),
        verifier_url=config["verifier_url"],
    )
