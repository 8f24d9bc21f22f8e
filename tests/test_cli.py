import pytest
from typer.testing import CliRunner

from newsagent.cli import app
from newsagent.config import ConfigModel, load_config, load_sources, save_config, save_sources
from newsagent.errors import StoreError

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    save_config(
        ConfigModel(
            workspace_root=str(tmp_path / "ws"),
            topics=[{"name": "Agents", "keywords": ["agent"], "priority": "high"}],
        ),
        path,
    )
    save_sources([], tmp_path / "sources.yaml")
    monkeypatch.setenv("NEWSAGENT_CONFIG", str(path))
    return path


def test_sources_add_and_remove(config_path):
    result = runner.invoke(app, ["sources", "add", "--name", "HN", "--url", "https://hnrss.org/newest"])
    assert result.exit_code == 0

    duplicate = runner.invoke(app, ["sources", "add", "--name", "HN", "--url", "https://other.example"])
    assert duplicate.exit_code == 1

    assert [s.name for s in load_sources(config_path.parent / "sources.yaml")] == ["HN"]

    removed = runner.invoke(app, ["sources", "remove", "HN"])
    assert removed.exit_code == 0
    assert load_sources(config_path.parent / "sources.yaml") == []


def test_topics_add_rejects_duplicates(config_path):
    result = runner.invoke(
        app,
        ["topics", "add", "--name", "Open models", "-k", "llama", "-k", "mistral", "-p", "low"],
    )
    assert result.exit_code == 0

    duplicate = runner.invoke(app, ["topics", "add", "--name", "Agents"])
    assert duplicate.exit_code == 1

    topics = load_config(config_path).topics
    assert [t.name for t in topics] == ["Agents", "Open models"]
    assert topics[1].keywords == ["llama", "mistral"]


def test_config_command_shows_topics(config_path):
    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert "Agents" in result.output


def test_run_without_config_exits_with_hint(tmp_path, monkeypatch):
    monkeypatch.setenv("NEWSAGENT_CONFIG", str(tmp_path / "missing.yaml"))

    result = runner.invoke(app, ["run", "--dry-run"])

    assert result.exit_code == 1
    assert "newsagent init" in result.output


class _RecordingStore:
    configs = []

    def __init__(self, db_config):
        self.configs.append(db_config)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_init_connects_with_password_from_environment(tmp_path, monkeypatch):
    _RecordingStore.configs = []
    monkeypatch.setattr("newsagent.cli.init.SeenItemStore", _RecordingStore)
    monkeypatch.setenv("NEWSAGENT_DB_PASSWORD", "s3cret")

    result = runner.invoke(
        app, ["init", "-c", str(tmp_path / "conf"), "-w", str(tmp_path / "ws")]
    )

    assert result.exit_code == 0
    assert [c["password"] for c in _RecordingStore.configs] == ["s3cret"]
    assert load_config(tmp_path / "conf" / "config.yaml").postgres.password is None
    assert len(load_sources(tmp_path / "conf" / "sources.yaml")) == 4


class _BrokenHistoryStore(_RecordingStore):
    def recent_history(self, days=7, limit=50):
        raise StoreError("Cannot read history: connection lost")


def test_history_read_failure_exits_cleanly(config_path, monkeypatch):
    monkeypatch.setattr("newsagent.cli.history.SeenItemStore", _BrokenHistoryStore)

    result = runner.invoke(app, ["history"])

    assert result.exit_code == 1
    assert "connection lost" in result.output
