"""Data types and dataclasses for quote-deployments library."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


class VerifierKind(Enum):
    """Contract verification services, each with its own forge flag set."""

    ETHERSCAN = "etherscan"
    SOURCIFY = "sourcify"
    OKLINK = "oklink"


@dataclass(frozen=True)
class ChainMeta:
    """Static configuration of a supported network."""

    alias: str  # Canonical alias, e.g. "base"
    chain_id: int
    chain_name: str  # Human-readable, written into the template comment
    verifier: VerifierKind
    verifier_url: str


@dataclass(frozen=True)
class AddressExtractionResult:
    """Addresses found in one deployment receipt. Empty fields are None."""

    implementation: Optional[str] = None
    proxy: Optional[str] = None
    proxy_admin: Optional[str] = None
    libraries: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mapping so results can only be combined, never edited
        object.__setattr__(self, "libraries", MappingProxyType(dict(self.libraries)))

    def is_empty(self) -> bool:
        return not (self.implementation or self.proxy or self.proxy_admin or self.libraries)


@dataclass
class ChainRegistry:
    """Persisted per-network address record."""

    chain_id: int
    proxy: str
    proxy_admin: str
    implementation: str
    libraries: Dict[str, str] = field(default_factory=dict)
    # group -> name -> address, carried verbatim (e.g. "uniswapV4")
    protocol_addresses: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def lookup(self, source: Tuple[str, ...]) -> Optional[str]:
        """
        Resolve a value path against the registry.

        A one-element path names a scalar field by its document key
        ("proxy", "proxyAdmin", "implementation"); a two-element path names
        a protocol group and key. Returns None when the value is absent.
        """
        if len(source) == 1:
            return {
                "proxy": self.proxy,
                "proxyAdmin": self.proxy_admin,
                "implementation": self.implementation,
            }.get(source[0])

        group, name = source
        return self.protocol_addresses.get(group, {}).get(name)


@dataclass(frozen=True)
class ConstantSpec:
    """An address constant declared in a source template."""

    name: str  # e.g. "POOL_MANAGER"
    visibility: str  # "public" or "internal"
    source: Tuple[str, ...]  # Registry path, see ChainRegistry.lookup


class SubstitutionStatus(Enum):
    """
    Outcome of templating one constant.

    - SUBSTITUTED: literal rewritten to the registry value
    - ALREADY_CURRENT: literal already equal to the registry value
    - NO_DECLARATION: no matching declaration in the template
    - NO_VALUE: registry has no value for the constant
    """

    SUBSTITUTED = "substituted"
    ALREADY_CURRENT = "already-current"
    NO_DECLARATION = "no-declaration"
    NO_VALUE = "no-value"


@dataclass(frozen=True)
class ConstantOutcome:
    """Templating result for a single constant."""

    name: str
    status: SubstitutionStatus
    value: Optional[str] = None  # Checksummed target value, if any


@dataclass(frozen=True)
class TemplateReport:
    """Per-constant outcomes of one templating pass, in table order."""

    outcomes: Tuple[ConstantOutcome, ...]
    comment_updated: bool = False

    def status_of(self, name: str) -> SubstitutionStatus:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome.status
        raise KeyError(name)

    def missing_declarations(self) -> Tuple[str, ...]:
        """Names that had a registry value but no declaration to receive it."""
        return tuple(
            o.name
            for o in self.outcomes
            if o.status is SubstitutionStatus.NO_DECLARATION and o.value is not None
        )

    @property
    def changed(self) -> bool:
        return self.comment_updated or any(
            o.status is SubstitutionStatus.SUBSTITUTED for o in self.outcomes
        )


@dataclass(frozen=True)
class SynthesizedCommands:
    """Shell commands for verifying and deploying/upgrading the proxy."""

    verify_command: Optional[str]
    upgrade_command: str


@dataclass(frozen=True)
class ReconcileOutcome:
    """Result of reconciling receipts into a chain's registry."""

    chain: ChainMeta
    registry: ChainRegistry
    results: Tuple[AddressExtractionResult, ...]  # One per deploy phase
    commands: SynthesizedCommands
    registry_path: str


@dataclass(frozen=True)
class TemplateOutcome:
    """Result of templating one source file."""

    path: str
    report: TemplateReport
    written: bool
