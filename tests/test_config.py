import pytest
import yaml

from newsagent.config import (
    Config,
    ConfigModel,
    FeedConfig,
    load_config,
    load_sources,
    save_config,
    save_sources,
)


def test_duplicate_topic_names_rejected():
    with pytest.raises(ValueError, match="Duplicate topic name"):
        ConfigModel(topics=[{"name": "AI"}, {"name": "AI"}])


def test_admission_threshold_cannot_be_below_min_relevance():
    with pytest.raises(ValueError, match="admission_threshold"):
        ConfigModel(classifier={"min_relevance": 0.7, "admission_threshold": 0.5})


def test_defaults():
    model = ConfigModel()

    assert model.classifier.batch_size == 10
    assert model.classifier.admission_threshold == 0.6
    assert model.run_defaults.max_articles_per_run == 50
    assert model.analysis.content_max_chars == 3000
    assert model.analysis.language == "English"


def test_load_config_reports_missing_and_invalid_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("topics:\n  - priority: urgent\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(bad)


def test_config_round_trips_through_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    model = ConfigModel(
        workspace_root=str(tmp_path),
        topics=[{"name": "Agents", "keywords": ["agent"], "priority": "high"}],
    )

    save_config(model, path)
    loaded = load_config(path)

    assert loaded.topics[0].name == "Agents"
    assert loaded.topics[0].priority == "high"


def test_invalid_sources_skipped(tmp_path):
    path = tmp_path / "sources.yaml"
    path.write_text(
        yaml.safe_dump({"sources": [{"name": "Good", "url": "https://g.example/rss"}, {"name": "No URL"}]}),
        encoding="utf-8",
    )

    sources = load_sources(path)

    assert [s.name for s in sources] == ["Good"]


def test_config_paths_and_env_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    save_config(
        ConfigModel(
            workspace_root=str(tmp_path / "ws"),
            postgres={"password_env": "NEWSAGENT_TEST_DB_PASSWORD"},
        ),
        config_path,
    )
    save_sources([FeedConfig(name="Feed", url="https://f.example/rss")], tmp_path / "sources.yaml")
    monkeypatch.setenv("NEWSAGENT_TEST_DB_PASSWORD", "secret")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    config = Config(config_path)

    assert config.workspace_root == tmp_path / "ws"
    assert config.reports_dir == tmp_path / "ws" / "reports"
    assert [f.name for f in config.load_feeds()] == ["Feed"]
    assert config.get_db_config()["password"] == "secret"
    assert config.get_llm_config()["api_key"] == "sk-test"


def test_config_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("NEWSAGENT_CONFIG", str(tmp_path / "custom.yaml"))

    assert Config().config_path == tmp_path / "custom.yaml"


def test_missing_sources_file_means_no_feeds(tmp_path):
    config = Config.from_model(ConfigModel(workspace_root=str(tmp_path)), tmp_path / "config.yaml")

    assert config.load_feeds() == []
