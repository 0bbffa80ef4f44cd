"""Shared pytest fixtures for quote-deployments tests."""

import shutil
from pathlib import Path

import pytest

from quote_deployments.checksum import KECCAK_HASHER
from quote_deployments.logging import logger
from quote_deployments.networks import resolve_chain
from quote_deployments.types import ChainMeta, ChainRegistry

ZERO = "0x0000000000000000000000000000000000000000"

# EIP-55 reference vectors
ADDR_A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ADDR_B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ADDR_C = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
ADDR_D = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"
ADDR_E = "0x52908400098527886E0F7030069857D2E4169EE7"
ADDR_F = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"
ADDR_G = "0xde709f2102306220921060314715629080e2fb77"
ADDR_H = "0x27b1fdb04752bbc536007a920d24acb045561c26"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def project_root(tmp_path: Path, fixtures_dir: Path) -> Path:
    """Copy the sample contracts project into a temporary directory."""
    root = tmp_path / "project"
    shutil.copytree(fixtures_dir / "project", root)
    return root


@pytest.fixture
def base_chain() -> ChainMeta:
    return resolve_chain("base")


@pytest.fixture
def hasher():
    return KECCAK_HASHER


@pytest.fixture
def sample_registry() -> ChainRegistry:
    """Registry matching fixtures/project/deployed/base.toml after loading."""
    return ChainRegistry(
        chain_id=8453,
        proxy=ZERO,
        proxy_admin=ZERO,
        implementation=ADDR_A,
        libraries={"QueryUniv3TicksSuperCompact": ADDR_B},
        protocol_addresses={
            "uniswapV4": {
                "poolManager": ADDR_E,
                "stateView": ADDR_F,
                "positionManager": ADDR_G,
            },
            "fluidLite": {"dex": ZERO, "deployerContract": ZERO},
        },
    )


@pytest.fixture
def quote_template(fixtures_dir: Path) -> str:
    return (fixtures_dir / "project" / "src" / "Quote.sol").read_text()


@pytest.fixture
def upgrade_script(fixtures_dir: Path) -> str:
    return (fixtures_dir / "project" / "script" / "UpgradeProxy.s.sol").read_text()


@pytest.fixture
def package_log(caplog):
    """caplog attached to the package logger, which does not propagate."""
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)
