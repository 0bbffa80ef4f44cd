"""Registry merge and persistence for quote-deployments library."""

import dataclasses
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import tomlkit

from .checksum import Hasher, is_address, normalize
from .constants import LIBRARY_PATHS, SEED_PROTOCOL_GROUPS, ZERO_ADDRESS
from .exceptions import ParseError, RegistryNotFoundError, UnmappedLibraryError, ValidationError
from .logging import logger
from .paths import get_project_root, get_registry_path
from .storage import write_text_atomic
from .types import AddressExtractionResult, ChainMeta, ChainRegistry

# Document key -> ChainRegistry attribute
SCALAR_FIELDS = {
    "proxy": "proxy",
    "proxyAdmin": "proxy_admin",
    "implementation": "implementation",
}


def _is_empty(address: Optional[str]) -> bool:
    return not address or address == ZERO_ADDRESS


def merge(
    prior: ChainRegistry, results: Iterable[AddressExtractionResult]
) -> ChainRegistry:
    """
    Fold extraction results into a registry.

    Results are applied in order. A non-empty value replaces whatever came
    before it; an empty value (None or the zero address) never replaces
    anything. Libraries merge key by key under the same rule. chain_id and
    protocol addresses are carried over untouched.

    Args:
        prior: Registry as loaded from disk
        results: Extraction results in phase order

    Returns:
        New ChainRegistry; prior is not modified
    """
    scalars = {attr: getattr(prior, attr) for attr in SCALAR_FIELDS.values()}
    libraries = dict(prior.libraries)

    for result in results:
        for attr in SCALAR_FIELDS.values():
            value = getattr(result, attr)
            if not _is_empty(value):
                scalars[attr] = value

        for name, address in result.libraries.items():
            if not _is_empty(address):
                libraries[name] = address

    return dataclasses.replace(
        prior,
        libraries=libraries,
        protocol_addresses={g: dict(v) for g, v in prior.protocol_addresses.items()},
        **scalars,
    )


def registry_from_document(
    data: Dict[str, Any], hasher: Optional[Hasher] = None
) -> ChainRegistry:
    """
    Build a ChainRegistry from a parsed registry document.

    Scalar fields and libraries are normalized to checksum form. Protocol
    groups (every other table) are kept verbatim.

    Raises:
        ParseError: If chainId is missing or a value has the wrong shape
        UnmappedLibraryError: If a library name is not a known library
    """
    chain_id = data.get("chainId")
    if not isinstance(chain_id, int) or isinstance(chain_id, bool):
        raise ParseError(f"Registry chainId must be an integer, got {chain_id!r}")

    scalars: Dict[str, str] = {}
    for key, attr in SCALAR_FIELDS.items():
        value = data.get(key, ZERO_ADDRESS)
        if not is_address(value):
            raise ParseError(f"Registry field '{key}' is not an address: {value!r}")
        scalars[attr] = normalize(value, hasher)

    raw_libraries = data.get("libraries", {})
    if not isinstance(raw_libraries, dict):
        raise ParseError("Registry field 'libraries' must be a table")

    libraries: Dict[str, str] = {}
    for name, value in raw_libraries.items():
        if name not in LIBRARY_PATHS:
            raise UnmappedLibraryError(f"Unknown library '{name}' in registry")
        if not is_address(value):
            raise ParseError(f"Library '{name}' is not an address: {value!r}")
        libraries[name] = normalize(value, hasher)

    protocol_addresses: Dict[str, Dict[str, str]] = {}
    for key, value in data.items():
        if key == "chainId" or key == "libraries" or key in SCALAR_FIELDS:
            continue
        if not isinstance(value, dict):
            raise ParseError(f"Unexpected registry field '{key}'")
        for name, address in value.items():
            if not isinstance(address, str):
                raise ParseError(f"Protocol address '{key}.{name}' must be a string")
        protocol_addresses[key] = dict(value)

    return ChainRegistry(
        chain_id=chain_id,
        libraries=libraries,
        protocol_addresses=protocol_addresses,
        **scalars,
    )


def registry_to_document(registry: ChainRegistry) -> str:
    """Render a registry as a TOML document."""
    doc = tomlkit.document()
    doc.add("chainId", registry.chain_id)
    for key, attr in SCALAR_FIELDS.items():
        doc.add(key, getattr(registry, attr))

    libraries = tomlkit.table()
    for name, address in registry.libraries.items():
        libraries.add(name, address)
    doc.add("libraries", libraries)

    for group, entries in registry.protocol_addresses.items():
        table = tomlkit.table()
        for name, address in entries.items():
            table.add(name, address)
        doc.add(group, table)

    return tomlkit.dumps(doc)


def seed_registry(chain: ChainMeta) -> ChainRegistry:
    """Registry for a chain with nothing deployed yet."""
    return ChainRegistry(
        chain_id=chain.chain_id,
        proxy=ZERO_ADDRESS,
        proxy_admin=ZERO_ADDRESS,
        implementation=ZERO_ADDRESS,
        libraries={},
        protocol_addresses={
            group: {name: ZERO_ADDRESS for name in names}
            for group, names in SEED_PROTOCOL_GROUPS.items()
        },
    )


class RegistryStore:
    """Reads and writes per-chain registry documents under <root>/deployed."""

    def __init__(
        self,
        root: Optional[Union[Path, str]] = None,
        hasher: Optional[Hasher] = None,
    ):
        """
        Initialize the registry store.

        Args:
            root: Project root (defaults to $QUOTE_DEPLOY_ROOT, then the current directory)
            hasher: Checksum hasher used when loading
        """
        self.root = get_project_root(root)
        self.hasher = hasher

    def path(self, chain: ChainMeta) -> Path:
        return get_registry_path(chain.alias, self.root)

    def exists(self, chain: ChainMeta) -> bool:
        return self.path(chain).exists()

    def load(self, chain: ChainMeta) -> ChainRegistry:
        """
        Load the registry for a chain.

        Args:
            chain: Resolved chain configuration

        Returns:
            ChainRegistry with checksummed scalar and library addresses

        Raises:
            RegistryNotFoundError: If no registry exists for the chain
            ParseError: If the document is malformed
            ValidationError: If the document belongs to another chain id
        """
        path = self.path(chain)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            raise RegistryNotFoundError(
                f"Registry not found at {path}. "
                f"Run quote-init-registry {chain.alias} to create it."
            ) from None
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Malformed registry {path}: {e}") from e

        registry = registry_from_document(data, self.hasher)
        if registry.chain_id != chain.chain_id:
            raise ValidationError(
                f"Registry {path} has chainId {registry.chain_id}, "
                f"expected {chain.chain_id} for {chain.alias}"
            )
        return registry

    def save(self, chain: ChainMeta, registry: ChainRegistry) -> Path:
        """
        Write the full registry for a chain atomically.

        Raises:
            ValidationError: If the registry's chain id does not match the chain
        """
        if registry.chain_id != chain.chain_id:
            raise ValidationError(
                f"Refusing to save chainId {registry.chain_id} as {chain.alias} "
                f"(chainId {chain.chain_id})"
            )

        path = self.path(chain)
        write_text_atomic(path, registry_to_document(registry))
        logger.info(f"Saved registry {path}")
        return path

    def create(self, chain: ChainMeta) -> Optional[Path]:
        """
        Write a seed registry for a chain that has none.

        Returns:
            Path of the new registry, or None if one already exists
        """
        if self.exists(chain):
            logger.info(f"Registry already exists: {self.path(chain)}")
            return None
        return self.save(chain, seed_registry(chain))
