"""Custom exception classes for quote-deployments library."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class NotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a required input file is not found."""

    pass


class RegistryNotFoundError(NotFoundError):
    """Raised when no registry file exists for a chain."""

    pass


class TemplateNotFoundError(NotFoundError):
    """Raised when a source template to rewrite is not found."""

    pass


class ParseError(DeploymentError, ValueError):
    """Raised when a registry document is malformed."""

    pass


class ValidationError(DeploymentError, ValueError):
    """Raised when input is well-formed but not acceptable."""

    pass


class UnknownChainError(ValidationError):
    """Raised when a chain alias is not configured."""

    pass


class UnmappedLibraryError(ValidationError):
    """Raised when a library name has no declaration path."""

    pass


class DeclarationNotFoundError(ValidationError):
    """Raised when a constant with a registry value has no declaration in the template."""

    pass


class InvalidAddressError(DeploymentError, ValueError):
    """Raised when an address literal is not 40 hex digits."""

    pass


class FallbackChecksumWarning(UserWarning):
    """Emitted when checksums are computed without the keccak-256 hasher."""

    pass
