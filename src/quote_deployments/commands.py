"""Verification and upgrade command synthesis for quote-deployments library."""

from typing import List

from .constants import (
    COMPILER_BUILD,
    COMPILER_VERSION,
    LIBRARY_PATHS,
    OPTIMIZER_RUNS,
    PROXY_DEPLOY_SCRIPT,
    VERIFIED_CONTRACT,
    VERIFIER_API_KEY_ENV,
    ZERO_ADDRESS,
)
from .exceptions import UnmappedLibraryError
from .types import ChainMeta, ChainRegistry, SynthesizedCommands, VerifierKind

# Verifiers that can verify during `forge script --broadcast`
AUTO_VERIFY_KINDS = (VerifierKind.ETHERSCAN, VerifierKind.OKLINK)


def _join(lines: List[str]) -> str:
    return " \\\n  ".join(lines)


def library_flags(registry: ChainRegistry) -> List[str]:
    """
    One --libraries flag per deployed library, in registry order.

    Raises:
        UnmappedLibraryError: If a library has no declaration path
    """
    flags = []
    for name, address in registry.libraries.items():
        try:
            path = LIBRARY_PATHS[name]
        except KeyError:
            raise UnmappedLibraryError(
                f"Library '{name}' has no declaration path; cannot link it"
            ) from None
        if not address or address == ZERO_ADDRESS:
            continue
        flags.append(f"--libraries {path}:{address}")
    return flags


def verify_command(registry: ChainRegistry, chain: ChainMeta) -> str:
    """Build `forge verify-contract` for the implementation contract."""
    implementation = registry.implementation
    libraries = library_flags(registry)

    if chain.verifier is VerifierKind.SOURCIFY:
        return _join(
            [
                "forge verify-contract",
                f"--rpc-url {chain.alias}",
                "--verifier sourcify",
                f"--verifier-url '{chain.verifier_url}'",
                f"--compiler-version {COMPILER_VERSION}",
                f"--num-of-optimizations {OPTIMIZER_RUNS}",
                *libraries,
                implementation,
                VERIFIED_CONTRACT,
            ]
        )

    lines = [
        "forge verify-contract",
        implementation,
        VERIFIED_CONTRACT,
        f"--verifier {chain.verifier.value}",
        f'--verifier-url "{chain.verifier_url}"',
    ]
    if chain.verifier is VerifierKind.ETHERSCAN:
        lines.append(f"--etherscan-api-key ${VERIFIER_API_KEY_ENV}")
    lines += [
        f"--num-of-optimizations {OPTIMIZER_RUNS}",
        f"--compiler-version {COMPILER_BUILD}",
        *libraries,
        "--watch",
    ]
    return _join(lines)


def upgrade_command(registry: ChainRegistry, chain: ChainMeta) -> str:
    """Build the `forge script` command that deploys the proxy for the implementation."""
    lines = [
        f"IMPLEMENTATION={registry.implementation}",
        f"forge script {PROXY_DEPLOY_SCRIPT}",
        f"--rpc-url {chain.alias}",
        f"--chain {chain.chain_id}",
        "--broadcast",
    ]
    if chain.verifier in AUTO_VERIFY_KINDS:
        lines += [
            "--verify",
            f"--verifier {chain.verifier.value}",
            f'--verifier-url "{chain.verifier_url}"',
        ]
        if chain.verifier is VerifierKind.ETHERSCAN:
            lines.append(f"--etherscan-api-key ${VERIFIER_API_KEY_ENV}")
    lines.append("-vvvv")
    return _join(lines)


def synthesize(registry: ChainRegistry, chain: ChainMeta) -> SynthesizedCommands:
    """
    Produce the verify and upgrade commands for a chain.

    The verify command is None until an implementation is deployed. Library
    linkage is all-or-nothing: an unmapped library fails the whole call.

    Args:
        registry: Merged registry
        chain: Chain configuration (verifier kind and URL)

    Returns:
        SynthesizedCommands

    Raises:
        UnmappedLibraryError: If a registry library has no declaration path
    """
    library_flags(registry)

    if not registry.implementation or registry.implementation == ZERO_ADDRESS:
        verify = None
    else:
        verify = verify_command(registry, chain)

    return SynthesizedCommands(
        verify_command=verify,
        upgrade_command=upgrade_command(registry, chain),
    )
