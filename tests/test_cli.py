"""Tests for CLI commands."""

from __future__ import annotations

import asyncio
import json
import os

import pytest
from conftest import build_model
from typer.testing import CliRunner

from model_store.cli.main import app
from model_store.config.settings import StoreConfig
from model_store.storage.backends.disk import DiskBackend
from model_store.storage.store import ModelStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_config_file(tmp_path, monkeypatch):
    """Point the CLI config file at an empty location."""
    monkeypatch.setattr(
        "model_store.cli.main._get_config_file", lambda: tmp_path / "cfg" / "config.yaml"
    )


@pytest.fixture
def populated_root(tmp_path):
    """A disk root holding three English models, h3 newest."""
    root = tmp_path / "store"
    store = ModelStore(DiskBackend(root), StoreConfig(max_models_to_keep=5))
    for index, content_hash in enumerate(["h1", "h2", "h3"], start=1):
        asyncio.run(store.save(build_model(slots_model=b"x" * index), content_hash))
        path = root / "models" / f"{content_hash}.en.model"
        os.utime(path, ns=(index * 1_000_000_000, index * 1_000_000_000))
    return root


class TestCLIHelp:
    """Tests for CLI help commands."""

    def test_help(self):
        """Test --help displays correctly."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Versioned NLU model artifact store" in result.stdout

    def test_version(self):
        """Test version command output."""
        from model_store import __version__

        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCLIList:
    """Tests for list command."""

    def test_list_newest_first(self, populated_root):
        """Models are listed newest first."""
        result = runner.invoke(app, ["list", "en", "--root", str(populated_root)])
        assert result.exit_code == 0
        assert result.stdout.index("h3.en.model") < result.stdout.index("h1.en.model")

    def test_list_empty(self, tmp_path):
        """An empty store says so."""
        result = runner.invoke(app, ["list", "en", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "No models stored" in result.stdout


class TestCLIShow:
    """Tests for show command."""

    def test_show_latest(self, populated_root):
        """The latest model is summarized."""
        result = runner.invoke(app, ["show", "en", "--root", str(populated_root)])
        assert result.exit_code == 0
        assert "Slots model: 3 bytes" in result.stdout

    def test_show_by_hash(self, populated_root):
        """A specific model can be selected."""
        result = runner.invoke(app, ["show", "en", "--hash", "h1", "--root", str(populated_root)])
        assert result.exit_code == 0
        assert "Slots model: 1 bytes" in result.stdout

    def test_show_missing(self, tmp_path):
        """A missing model exits non-zero."""
        result = runner.invoke(app, ["show", "en", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "No model found" in result.stdout


class TestCLIPrune:
    """Tests for prune command."""

    def test_prune_json(self, populated_root):
        """Pruning with the default bound keeps two models."""
        result = runner.invoke(app, ["prune", "en", "--root", str(populated_root), "--json"])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["kept"] == ["h3.en.model", "h2.en.model"]
        assert report["deleted"] == ["h1.en.model"]
        assert not (populated_root / "models" / "h1.en.model").exists()

    def test_prune_keep_override(self, populated_root):
        """--keep overrides the configured bound."""
        result = runner.invoke(app, ["prune", "en", "--keep", "1", "--root", str(populated_root)])
        assert result.exit_code == 0
        assert "deleted 2" in result.stdout
        assert [p.name for p in (populated_root / "models").iterdir()] == ["h3.en.model"]

    def test_prune_uses_config_file(self, populated_root, tmp_path, monkeypatch):
        """Defaults from the YAML config file apply."""
        config_file = tmp_path / "custom" / "config.yaml"
        config_file.parent.mkdir()
        config_file.write_text("defaults:\n  max_models_to_keep: 3\n")
        monkeypatch.setattr("model_store.cli.main._get_config_file", lambda: config_file)

        result = runner.invoke(app, ["prune", "en", "--root", str(populated_root), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["deleted"] == []


class TestCLIConfig:
    """Tests for config command."""

    def test_config_show(self, monkeypatch):
        """Effective configuration includes environment overrides."""
        monkeypatch.setenv("MODEL_STORE_MAX_MODELS", "7")
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert '"max_models_to_keep": 7' in result.stdout
