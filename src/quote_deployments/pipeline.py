"""Main API for quote-deployments library."""

import dataclasses
from pathlib import Path
from typing import Optional, Union

from .checksum import Hasher, normalize
from .constants import DEPLOY_SCRIPTS, QUOTE_CONSTANTS, UPGRADE_CONSTANTS
from .commands import synthesize
from .exceptions import ParseError, TemplateNotFoundError
from .logging import logger
from .networks import resolve_chain
from .parsers import extract, read_receipt
from .paths import get_receipt_path, get_template_path, get_upgrade_script_path
from .registry import RegistryStore, merge
from .storage import read_text_exact, write_text_atomic
from .templating import TemplateEngine, raise_for_drift
from .types import ChainMeta, ChainRegistry, ReconcileOutcome, TemplateOutcome


def _read_template(path: Path) -> str:
    try:
        return read_text_exact(path)
    except FileNotFoundError:
        raise TemplateNotFoundError(f"Template not found at {path}") from None
    except UnicodeDecodeError as e:
        raise ParseError(f"Template {path} is not valid UTF-8: {e}") from e


def _rewrite(
    path: Path,
    engine: TemplateEngine,
    registry: ChainRegistry,
    chain_name: Optional[str] = None,
) -> TemplateOutcome:
    template = _read_template(path)
    text, report = engine.apply(template, registry, chain_name=chain_name)

    # Drift aborts before anything is written
    raise_for_drift(report, str(path))

    for outcome in report.outcomes:
        logger.info(f"  {outcome.name:<30} {outcome.value or '-':<44} {outcome.status.value}")

    written = text != template
    if written:
        write_text_atomic(path, text)
        logger.info(f"Updated {path}")
    else:
        logger.info(f"{path} already up to date")

    return TemplateOutcome(path=str(path), report=report, written=written)


def reconcile(
    chain: Union[str, ChainMeta],
    root: Optional[Union[Path, str]] = None,
    hasher: Optional[Hasher] = None,
) -> ReconcileOutcome:
    """
    Merge the latest deployment receipts into a chain's registry.

    Reads the receipt of each deploy phase (a missing receipt contributes
    nothing), merges them over the stored registry in phase order, saves the
    result atomically and synthesizes the follow-up commands. Commands are
    built before saving, so an unmapped library leaves the registry untouched.

    Args:
        chain: Chain alias or resolved configuration
        root: Project root
        hasher: Checksum hasher

    Returns:
        ReconcileOutcome

    Raises:
        UnknownChainError: If the alias is not configured
        RegistryNotFoundError: If the chain has no registry
        ParseError: If the registry is malformed
        UnmappedLibraryError: If a library cannot be linked
    """
    if not isinstance(chain, ChainMeta):
        chain = resolve_chain(chain)

    logger.info(f"Processing {chain.alias.upper()} (Chain ID: {chain.chain_id})")

    store = RegistryStore(root, hasher=hasher)
    prior = store.load(chain)

    results = tuple(
        extract(read_receipt(get_receipt_path(script, chain.chain_id, store.root)), hasher)
        for script in DEPLOY_SCRIPTS
    )
    registry = merge(prior, results)

    logger.info(f"  Implementation: {registry.implementation}")
    logger.info(f"  Proxy:          {registry.proxy}")
    logger.info(f"  ProxyAdmin:     {registry.proxy_admin}")
    logger.info(f"  Libraries:      {len(registry.libraries)} found")

    commands = synthesize(registry, chain)
    path = store.save(chain, registry)

    return ReconcileOutcome(
        chain=chain,
        registry=registry,
        results=results,
        commands=commands,
        registry_path=str(path),
    )


def prepare_template(
    chain: Union[str, ChainMeta],
    root: Optional[Union[Path, str]] = None,
    target: Optional[Union[Path, str]] = None,
    hasher: Optional[Hasher] = None,
) -> TemplateOutcome:
    """
    Write a chain's protocol addresses into the Quote contract source.

    Args:
        chain: Chain alias or resolved configuration
        root: Project root
        target: Source file (defaults to <root>/src/Quote.sol)
        hasher: Checksum hasher

    Returns:
        TemplateOutcome

    Raises:
        TemplateNotFoundError: If the source file does not exist
        ParseError: If the source file is not valid UTF-8
        DeclarationNotFoundError: If a constant with a value has no declaration
    """
    if not isinstance(chain, ChainMeta):
        chain = resolve_chain(chain)

    store = RegistryStore(root, hasher=hasher)
    registry = store.load(chain)
    path = Path(target) if target is not None else get_template_path(store.root)

    logger.info(f"Preparing {path.name} for {chain.alias.upper()} (Chain ID: {chain.chain_id})")
    engine = TemplateEngine(QUOTE_CONSTANTS, hasher=hasher)
    return _rewrite(path, engine, registry, chain_name=chain.chain_name)


def sync_upgrade_constants(
    chain: Union[str, ChainMeta],
    root: Optional[Union[Path, str]] = None,
    new_impl: Optional[str] = None,
    target: Optional[Union[Path, str]] = None,
    hasher: Optional[Hasher] = None,
) -> TemplateOutcome:
    """
    Write PROXY / PROXY_ADMIN / NEW_IMPLEMENTATION into the upgrade script.

    Args:
        chain: Chain alias or resolved configuration
        root: Project root
        new_impl: Implementation to upgrade to (defaults to the registry's)
        target: Script file (defaults to <root>/script/UpgradeProxy.s.sol)
        hasher: Checksum hasher

    Returns:
        TemplateOutcome

    Raises:
        InvalidAddressError: If new_impl is malformed
    """
    if not isinstance(chain, ChainMeta):
        chain = resolve_chain(chain)

    store = RegistryStore(root, hasher=hasher)
    registry = store.load(chain)
    if new_impl is not None:
        # Override for this rewrite only; the stored registry keeps its value
        registry = dataclasses.replace(registry, implementation=normalize(new_impl, hasher))

    path = Path(target) if target is not None else get_upgrade_script_path(store.root)

    logger.info(f"Syncing upgrade constants in {path.name} for {chain.alias.upper()}")
    engine = TemplateEngine(UPGRADE_CONSTANTS, comment_pattern=None, hasher=hasher)
    return _rewrite(path, engine, registry)


def init_registry(
    chain: Union[str, ChainMeta], root: Optional[Union[Path, str]] = None
) -> Optional[Path]:
    """
    Create an empty registry for a new chain.

    Returns:
        Path of the new registry, or None if the chain already has one
    """
    if not isinstance(chain, ChainMeta):
        chain = resolve_chain(chain)
    return RegistryStore(root).create(chain)
