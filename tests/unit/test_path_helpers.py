"""Unit tests for path helper functions."""

from pathlib import Path

from quote_deployments.paths import (
    get_project_root,
    get_receipt_path,
    get_registry_path,
    get_template_path,
    get_upgrade_script_path,
)


class TestGetProjectRoot:
    """Test the get_project_root function."""

    def test_defaults_to_current_directory(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("QUOTE_DEPLOY_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_project_root() == tmp_path.absolute()

    def test_reads_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("QUOTE_DEPLOY_ROOT", str(tmp_path))

        assert get_project_root() == tmp_path

    def test_explicit_root_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("QUOTE_DEPLOY_ROOT", "/somewhere/else")

        assert get_project_root(tmp_path) == tmp_path

    def test_accepts_string_and_returns_absolute(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        root = get_project_root("contracts")

        assert root.is_absolute()
        assert root == tmp_path / "contracts"


class TestProjectPaths:
    """Test the per-file path helpers."""

    def test_registry_path(self, tmp_path: Path):
        assert get_registry_path("base", tmp_path) == tmp_path / "deployed" / "base.toml"

    def test_receipt_path(self, tmp_path: Path):
        path = get_receipt_path("DeployImpl.s.sol", 8453, tmp_path)

        assert path == tmp_path / "broadcast" / "DeployImpl.s.sol" / "8453" / "run-latest.json"

    def test_template_paths(self, tmp_path: Path):
        assert get_template_path(tmp_path) == tmp_path / "src" / "Quote.sol"
        assert get_upgrade_script_path(tmp_path) == tmp_path / "script" / "UpgradeProxy.s.sol"
