"""Deployment receipt parsers for quote-deployments library."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .checksum import Hasher, normalize
from .constants import (
    CONTRACT_ROLES,
    IMPLEMENTATION_ROLE,
    LIBRARY_PATHS,
    PROXY_ADMIN_ROLE,
    PROXY_ROLE,
)
from .logging import logger
from .types import AddressExtractionResult


def read_receipt(file_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load a deployment receipt written by the deploy tool.

    A phase that did not run leaves no receipt, so absence is not an error.

    Args:
        file_path: Path to run-latest.json

    Returns:
        Receipt document, or None if missing or unreadable
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info(f"No receipt at {file_path}")
        return None
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        logger.warning(f"Ignoring unreadable receipt {file_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring receipt {file_path}: top level is not an object")
        return None

    return data


def extract(
    receipt: Optional[Dict[str, Any]], hasher: Optional[Hasher] = None
) -> AddressExtractionResult:
    """
    Extract proxy, implementation and library addresses from a receipt.

    Transactions are scanned in receipt order; when several match the same
    role the last one wins. Unrecognized contract names are ignored.

    Args:
        receipt: Receipt document from read_receipt (None for a missing receipt)
        hasher: Checksum hasher

    Returns:
        AddressExtractionResult with checksummed addresses

    Raises:
        InvalidAddressError: If a recognized transaction carries a malformed address
    """
    if not receipt:
        return AddressExtractionResult()

    transactions = receipt.get("transactions") or []
    roles: Dict[str, str] = {}
    libraries: Dict[str, str] = {}

    for tx in transactions:
        if not isinstance(tx, dict):
            continue

        name = tx.get("contractName")
        address = tx.get("contractAddress")
        if not name or not address:
            continue

        if name in CONTRACT_ROLES:
            roles[CONTRACT_ROLES[name]] = normalize(address, hasher)
        elif name in LIBRARY_PATHS:
            libraries[name] = normalize(address, hasher)

    return AddressExtractionResult(
        implementation=roles.get(IMPLEMENTATION_ROLE),
        proxy=roles.get(PROXY_ROLE),
        proxy_admin=roles.get(PROXY_ADMIN_ROLE),
        libraries=libraries,
    )
