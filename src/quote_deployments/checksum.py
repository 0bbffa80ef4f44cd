"""Checksum address normalization for quote-deployments library."""

import hashlib
import os
import re
import warnings
from dataclasses import dataclass
from typing import Callable, Optional

from eth_utils import keccak

from .constants import ZERO_ADDRESS
from .exceptions import FallbackChecksumWarning, InvalidAddressError
from .logging import logger

HASHER_ENV = "QUOTE_DEPLOY_HASHER"

_ADDRESS_RE = re.compile(r"^(0x|0X)?([0-9a-fA-F]{40})$")


@dataclass(frozen=True)
class Hasher:
    """
    Digest function used to derive checksum casing.

    Only the keccak-256 hasher reproduces the network's checksum. The
    non-canonical hasher exists for environments without a keccak backend;
    its output must not be trusted by verification tooling.
    """

    name: str
    digest: Callable[[bytes], bytes]
    canonical: bool


KECCAK_HASHER = Hasher(name="keccak256", digest=keccak, canonical=True)
SHA3_FALLBACK_HASHER = Hasher(
    name="sha3-256",
    digest=lambda data: hashlib.sha3_256(data).digest(),
    canonical=False,
)

HASHERS = {h.name: h for h in (KECCAK_HASHER, SHA3_FALLBACK_HASHER)}


def resolve_hasher(name: Optional[str] = None) -> Hasher:
    """
    Pick the checksum hasher for this process.

    Args:
        name: Hasher name (defaults to $QUOTE_DEPLOY_HASHER, then "keccak256")

    Returns:
        The selected Hasher

    Raises:
        ValueError: If the name is not a known hasher
    """
    if name is None:
        name = os.environ.get(HASHER_ENV) or KECCAK_HASHER.name

    try:
        hasher = HASHERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown hasher '{name}'. Choose one of: {', '.join(HASHERS)}"
        ) from None

    if not hasher.canonical:
        logger.warning(
            f"Using fallback checksum hasher '{hasher.name}'; "
            "addresses will not match the keccak-256 checksum"
        )
    return hasher


def is_address(value: str) -> bool:
    return isinstance(value, str) and _ADDRESS_RE.match(value) is not None


def apply_checksum_casing(hex_digits: str, digest: bytes) -> str:
    """
    Capitalize each hex letter whose matching digest nibble is >= 8.

    Args:
        hex_digits: 40 lowercase hex digits, no prefix
        digest: Hash of hex_digits encoded as ASCII

    Returns:
        0x-prefixed mixed-case address
    """
    digest_hex = digest.hex()
    return "0x" + "".join(
        char.upper() if int(digest_hex[i], 16) >= 8 else char
        for i, char in enumerate(hex_digits)
    )


def normalize(address: str, hasher: Optional[Hasher] = None) -> str:
    """
    Convert an address to canonical mixed-case checksum form.

    The zero address is the "not deployed" sentinel and is returned as-is.

    Args:
        address: 40 hex digits, optionally 0x-prefixed, any letter case
        hasher: Digest capability (defaults to keccak-256)

    Returns:
        Checksummed, 0x-prefixed address

    Raises:
        InvalidAddressError: If address is not 40 hex digits
    """
    match = _ADDRESS_RE.match(address) if isinstance(address, str) else None
    if match is None:
        raise InvalidAddressError(f"Invalid address: {address!r}")

    hex_digits = match.group(2).lower()
    if hex_digits == ZERO_ADDRESS[2:]:
        return ZERO_ADDRESS

    if hasher is None:
        hasher = KECCAK_HASHER
    elif not hasher.canonical:
        warnings.warn(
            f"Checksum for 0x{hex_digits} computed with non-canonical hasher '{hasher.name}'",
            FallbackChecksumWarning,
            stacklevel=2,
        )

    return apply_checksum_casing(hex_digits, hasher.digest(hex_digits.encode("ascii")))
