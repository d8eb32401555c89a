import json

import pytest

import config as config_module
from config import CATEGORIES, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in config_module.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)


def test_api_key_is_required():
    with pytest.raises(ValueError, match="anthropic_api_key"):
        load_config()


def test_defaults_with_key_from_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    cfg = load_config()

    assert cfg["anthropic_api_key"] == "sk-test"
    assert cfg["max_tokens"] == 8000
    assert cfg["categories"] == CATEGORIES
    assert cfg["web_search"] is True


def test_json_file_then_environment(monkeypatch, tmp_path):
    path = tmp_path / "bot.json"
    path.write_text(json.dumps({"anthropic_api_key": "from-file", "model": "file-model", "related_count": "5"}))
    monkeypatch.setenv("ARTICLE_MODEL", "env-model")
    monkeypatch.setenv("ARTICLE_WEB_SEARCH", "false")

    cfg = load_config(str(path))

    assert cfg["anthropic_api_key"] == "from-file"
    assert cfg["model"] == "env-model"
    assert cfg["related_count"] == 5
    assert cfg["web_search"] is False


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.json"))


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "k")
    monkeypatch.setenv("ARTICLE_MAX_TOKENS", "lots")
    with pytest.raises(ValueError, match="ARTICLE_MAX_TOKENS"):
        load_config()
