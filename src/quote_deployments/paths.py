"""Path management utilities for quote-deployments library."""

import os
from pathlib import Path
from typing import Optional, Union

from .constants import RECEIPT_FILENAME

ROOT_ENV = "QUOTE_DEPLOY_ROOT"


def get_project_root(root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the contracts project root.

    Args:
        root: Explicit root (defaults to $QUOTE_DEPLOY_ROOT, then the current directory)

    Returns:
        Absolute path to the project root
    """
    if root is None:
        root = os.environ.get(ROOT_ENV) or Path.cwd()
    return Path(root).absolute()


def get_registry_path(chain: str, root: Optional[Union[Path, str]] = None) -> Path:
    """Path of the registry document for a canonical chain alias."""
    return get_project_root(root) / "deployed" / f"{chain}.toml"


def get_receipt_path(
    script_name: str, chain_id: int, root: Optional[Union[Path, str]] = None
) -> Path:
    """
    Path of the latest deployment receipt written by the deploy tool.

    Args:
        script_name: Deploy script file name, e.g. "DeployImpl.s.sol"
        chain_id: Numeric chain id
        root: Project root

    Returns:
        Path to broadcast/<script_name>/<chain_id>/run-latest.json
    """
    return get_project_root(root) / "broadcast" / script_name / str(chain_id) / RECEIPT_FILENAME


def get_template_path(root: Optional[Union[Path, str]] = None) -> Path:
    return get_project_root(root) / "src" / "Quote.sol"


def get_upgrade_script_path(root: Optional[Union[Path, str]] = None) -> Path:
    return get_project_root(root) / "script" / "UpgradeProxy.s.sol"
