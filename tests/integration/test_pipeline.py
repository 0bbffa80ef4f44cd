"""Integration tests for the reconcile and templating pipeline."""

import os
import shutil
import stat
import tomllib
from pathlib import Path

import pytest

from quote_deployments import (
    DeclarationNotFoundError,
    InvalidAddressError,
    ParseError,
    RegistryNotFoundError,
    RegistryStore,
    SubstitutionStatus,
    TemplateNotFoundError,
    UnknownChainError,
    UnmappedLibraryError,
    init_registry,
    prepare_template,
    reconcile,
    resolve_chain,
    sync_upgrade_constants,
)

ZERO = "0x0000000000000000000000000000000000000000"
ADDR_A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ADDR_B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ADDR_C = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
ADDR_D = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"
ADDR_E = "0x52908400098527886E0F7030069857D2E4169EE7"
ADDR_F = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"
ADDR_G = "0xde709f2102306220921060314715629080e2fb77"
ADDR_H = "0x27b1fdb04752bbc536007a920d24acb045561c26"


def snapshot(root: Path) -> dict:
    return {p: p.read_bytes() for p in root.rglob("*") if p.is_file()}


class TestReconcile:
    """Test reconcile end to end against a sample project."""

    def test_merges_both_phases(self, project_root: Path):
        outcome = reconcile("base", root=project_root)
        registry = outcome.registry

        assert registry.implementation == ADDR_C
        assert registry.proxy == ADDR_F
        assert registry.proxy_admin == ADDR_G
        assert registry.libraries == {
            "QueryUniv3TicksSuperCompact": ADDR_B,
            "QueryUniv4TicksSuperCompact": ADDR_D,
        }
        assert len(outcome.results) == 2

    def test_persists_registry(self, project_root: Path):
        reconcile("base", root=project_root)

        with open(project_root / "deployed" / "base.toml", "rb") as f:
            saved = tomllib.load(f)

        assert saved["chainId"] == 8453
        assert saved["implementation"] == ADDR_C
        assert saved["proxy"] == ADDR_F
        assert saved["libraries"]["QueryUniv4TicksSuperCompact"] == ADDR_D
        assert saved["uniswapV4"]["poolManager"] == ADDR_E
        assert saved["fluidLite"] == {"dex": ZERO, "deployerContract": ZERO}

    def test_synthesizes_commands(self, project_root: Path):
        commands = reconcile("base", root=project_root).commands

        assert commands.verify_command is not None
        assert ADDR_C in commands.verify_command
        assert commands.verify_command.count("--libraries ") == 2
        assert commands.upgrade_command.startswith(f"IMPLEMENTATION={ADDR_C}")

    def test_missing_receipts_keep_prior_addresses(self, project_root: Path):
        shutil.rmtree(project_root / "broadcast")

        outcome = reconcile("base", root=project_root)

        assert all(result.is_empty() for result in outcome.results)
        assert outcome.registry.implementation == ADDR_A
        assert outcome.registry.proxy == ZERO
        assert outcome.registry.libraries == {"QueryUniv3TicksSuperCompact": ADDR_B}

    def test_proxy_phase_alone_keeps_prior_implementation(self, project_root: Path):
        shutil.rmtree(project_root / "broadcast" / "DeployImpl.s.sol")

        registry = reconcile("base", root=project_root).registry

        assert registry.implementation == ADDR_A
        assert registry.proxy == ADDR_F

    def test_accepts_alias_spelling(self, project_root: Path):
        assert reconcile("BASE", root=project_root).chain.alias == "base"

    def test_idempotent_on_rerun(self, project_root: Path):
        reconcile("base", root=project_root)
        first = (project_root / "deployed" / "base.toml").read_text()

        reconcile("base", root=project_root)

        assert (project_root / "deployed" / "base.toml").read_text() == first

    def test_undecodable_receipt_treated_as_missing(self, project_root: Path):
        receipt = project_root / "broadcast" / "DeployProxy.s.sol" / "8453" / "run-latest.json"
        receipt.write_bytes(b"\xff\xfe" + receipt.read_bytes())

        registry = reconcile("base", root=project_root).registry

        assert registry.implementation == ADDR_C
        assert registry.proxy == ZERO

    def test_undecodable_registry_raises_parse_error(self, project_root: Path):
        path = project_root / "deployed" / "base.toml"
        path.write_bytes(path.read_bytes() + b"# \xff\xfe\n")
        before = snapshot(project_root)

        with pytest.raises(ParseError):
            reconcile("base", root=project_root)

        assert snapshot(project_root) == before

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_registry_keeps_file_mode(self, project_root: Path):
        path = project_root / "deployed" / "base.toml"
        path.chmod(0o644)

        reconcile("base", root=project_root)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_unknown_chain_touches_nothing(self, project_root: Path):
        before = snapshot(project_root)

        with pytest.raises(UnknownChainError):
            reconcile("solana", root=project_root)

        assert snapshot(project_root) == before

    def test_missing_registry_raises(self, project_root: Path):
        with pytest.raises(RegistryNotFoundError):
            reconcile("eth", root=project_root)

    def test_unknown_library_aborts_without_write(self, project_root: Path):
        path = project_root / "deployed" / "base.toml"
        path.write_text(path.read_text().replace("QueryUniv3TicksSuperCompact", "QueryCurve"))
        before = path.read_text()

        with pytest.raises(UnmappedLibraryError):
            reconcile("base", root=project_root)

        assert path.read_text() == before

    def test_malformed_receipt_address_aborts_without_write(self, project_root: Path):
        receipt = project_root / "broadcast" / "DeployProxy.s.sol" / "8453" / "run-latest.json"
        receipt.write_text(receipt.read_text().replace("0xde709f2102306220921060314715629080e2fb77", "0xdead"))
        before = snapshot(project_root)

        with pytest.raises(InvalidAddressError):
            reconcile("base", root=project_root)

        assert snapshot(project_root) == before


class TestPrepareTemplate:
    """Test prepare_template against the sample Quote.sol."""

    def test_rewrites_quote_source(self, project_root: Path):
        outcome = prepare_template("base", root=project_root)
        text = (project_root / "src" / "Quote.sol").read_text()

        assert outcome.written
        assert f"address public constant POOL_MANAGER = {ADDR_E};" in text
        assert "// Core contract addresses (Base)" in text
        assert outcome.report.status_of("FLUID_LIQUIDITY") is SubstitutionStatus.NO_VALUE

    def test_second_run_writes_nothing(self, project_root: Path):
        prepare_template("base", root=project_root)
        path = project_root / "src" / "Quote.sol"
        first = path.read_text()

        outcome = prepare_template("base", root=project_root)

        assert not outcome.written
        assert path.read_text() == first

    def test_drift_aborts_before_writing(self, project_root: Path):
        path = project_root / "src" / "Quote.sol"
        path.write_text(path.read_text().replace("POOL_MANAGER =", "V4_POOL_MANAGER ="))
        before = path.read_text()

        with pytest.raises(DeclarationNotFoundError):
            prepare_template("base", root=project_root)

        assert path.read_text() == before

    def test_crlf_line_endings_preserved(self, project_root: Path):
        path = project_root / "src" / "Quote.sol"
        original = path.read_bytes().replace(b"\n", b"\r\n")
        path.write_bytes(original)

        outcome = prepare_template("base", root=project_root)
        rewritten = path.read_bytes()

        assert outcome.written
        assert rewritten.count(b"\r\n") == original.count(b"\r\n")
        assert b"\n" not in rewritten.replace(b"\r\n", b"")
        assert f"POOL_MANAGER = {ADDR_E};\r\n".encode() in rewritten

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_template_keeps_file_mode(self, project_root: Path):
        path = project_root / "src" / "Quote.sol"
        path.chmod(0o644)

        prepare_template("base", root=project_root)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_commented_declaration_untouched(self, project_root: Path):
        prepare_template("base", root=project_root)
        text = (project_root / "src" / "Quote.sol").read_text()

        assert f"// address public constant POOL_MANAGER = {ZERO};" in text
        assert text.count(ADDR_E) == 1

    def test_undecodable_template_raises_parse_error(self, project_root: Path):
        path = project_root / "src" / "Quote.sol"
        path.write_bytes(b"\xff\xfe" + path.read_bytes())
        before = path.read_bytes()

        with pytest.raises(ParseError):
            prepare_template("base", root=project_root)

        assert path.read_bytes() == before

    def test_missing_template_raises(self, project_root: Path):
        (project_root / "src" / "Quote.sol").unlink()

        with pytest.raises(TemplateNotFoundError):
            prepare_template("base", root=project_root)

    def test_target_override(self, project_root: Path, tmp_path: Path):
        target = tmp_path / "Other.sol"
        shutil.copy(project_root / "src" / "Quote.sol", target)
        original = (project_root / "src" / "Quote.sol").read_text()

        outcome = prepare_template("base", root=project_root, target=target)

        assert outcome.path == str(target)
        assert ADDR_E in target.read_text()
        assert (project_root / "src" / "Quote.sol").read_text() == original

    def test_does_not_modify_registry(self, project_root: Path):
        path = project_root / "deployed" / "base.toml"
        before = path.read_text()

        prepare_template("base", root=project_root)

        assert path.read_text() == before


class TestSyncUpgradeConstants:
    """Test sync_upgrade_constants against the sample upgrade script."""

    def test_uses_registry_values(self, project_root: Path):
        reconcile("base", root=project_root)

        sync_upgrade_constants("base", root=project_root)
        text = (project_root / "script" / "UpgradeProxy.s.sol").read_text()

        assert f"address internal constant PROXY = {ADDR_F};" in text
        assert f"address internal constant PROXY_ADMIN = {ADDR_G};" in text
        assert f"address internal constant NEW_IMPLEMENTATION = {ADDR_C};" in text

    def test_new_impl_override(self, project_root: Path):
        registry_path = project_root / "deployed" / "base.toml"
        before = registry_path.read_text()

        outcome = sync_upgrade_constants("base", root=project_root, new_impl=ADDR_H.upper().replace("0X", "0x"))
        text = (project_root / "script" / "UpgradeProxy.s.sol").read_text()

        assert f"address internal constant NEW_IMPLEMENTATION = {ADDR_H};" in text
        assert outcome.report.status_of("NEW_IMPLEMENTATION") is SubstitutionStatus.SUBSTITUTED
        assert registry_path.read_text() == before

    def test_invalid_new_impl_raises(self, project_root: Path):
        before = snapshot(project_root)

        with pytest.raises(InvalidAddressError):
            sync_upgrade_constants("base", root=project_root, new_impl="0x1234")

        assert snapshot(project_root) == before

    def test_target_override(self, project_root: Path, tmp_path: Path):
        target = tmp_path / "Upgrade.s.sol"
        shutil.copy(project_root / "script" / "UpgradeProxy.s.sol", target)

        sync_upgrade_constants("base", root=project_root, target=target)

        assert f"NEW_IMPLEMENTATION = {ADDR_A};" in target.read_text()


class TestInitRegistry:
    """Test init_registry."""

    def test_creates_loadable_registry(self, project_root: Path):
        path = init_registry("ethereum", root=project_root)

        assert path == project_root / "deployed" / "eth.toml"
        registry = RegistryStore(project_root).load(resolve_chain("eth"))
        assert registry.chain_id == 1
        assert registry.implementation == ZERO

    def test_existing_registry_untouched(self, project_root: Path):
        before = (project_root / "deployed" / "base.toml").read_text()

        assert init_registry("base", root=project_root) is None
        assert (project_root / "deployed" / "base.toml").read_text() == before
