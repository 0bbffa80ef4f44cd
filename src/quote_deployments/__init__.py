"""
quote-deployments: per-chain address registry and code templating for Quote deployments
"""

from importlib.metadata import PackageNotFoundError, version

from .checksum import Hasher, normalize, resolve_hasher
from .commands import synthesize
from .exceptions import (
    DeclarationNotFoundError,
    DeploymentError,
    FallbackChecksumWarning,
    InvalidAddressError,
    NotFoundError,
    ParseError,
    RegistryNotFoundError,
    TemplateNotFoundError,
    UnknownChainError,
    UnmappedLibraryError,
    ValidationError,
)
from .networks import resolve_chain
from .parsers import extract, read_receipt
from .pipeline import init_registry, prepare_template, reconcile, sync_upgrade_constants
from .registry import RegistryStore, merge
from .templating import TemplateEngine
from .types import (
    AddressExtractionResult,
    ChainMeta,
    ChainRegistry,
    SubstitutionStatus,
    SynthesizedCommands,
    TemplateReport,
    VerifierKind,
)

try:
    __version__ = version("quote-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "normalize",
    "resolve_hasher",
    "Hasher",
    "extract",
    "read_receipt",
    "merge",
    "RegistryStore",
    "TemplateEngine",
    "synthesize",
    "resolve_chain",
    "reconcile",
    "prepare_template",
    "sync_upgrade_constants",
    "init_registry",
    "AddressExtractionResult",
    "ChainMeta",
    "ChainRegistry",
    "SubstitutionStatus",
    "SynthesizedCommands",
    "TemplateReport",
    "VerifierKind",
    "DeploymentError",
    "NotFoundError",
    "RegistryNotFoundError",
    "TemplateNotFoundError",
    "ParseError",
    "ValidationError",
    "UnknownChainError",
    "UnmappedLibraryError",
    "DeclarationNotFoundError",
    "InvalidAddressError",
    "FallbackChecksumWarning",
]
