# bot/config.py
import json
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

CATEGORIES = [
    "Digital Privacy",
    "Digital Security",
    "Online Anonymity",
    "Digital Scams",
    "Future Tech",
    "Policy & Rights",
    "Family Privacy",
    "Digital Wellness",
    "Tech Deep Dive",
]

DEFAULTS = {
    "anthropic_api_key": "",
    "anthropic_base_url": "https://api.anthropic.com/v1",
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 8000,
    "request_timeout": 300,
    "generation_attempts": 1,
    "retry_wait_seconds": 30,
    "web_search": True,
    "categories": CATEGORIES,
    "max_existing_titles": 20,
    "related_count": 3,
    "site_name": "NoIdentity.Space",
    "site_url": "https://noidentity.space",
    "author": "NoIdentity Team",
    "articles_dir": "articles",
    "template_path": str(BASE_DIR / "templates" / "article_template.html"),
    "index_path": "articles.html",
    "index_container": "#articles-grid",
    "output_dir": ".",
    "log_file": "log.json",
}

# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    "ANTHROPIC_API_KEY": ("anthropic_api_key", str),
    "ANTHROPIC_BASE_URL": ("anthropic_base_url", str),
    "ARTICLE_MODEL": ("model", str),
    "ARTICLE_MAX_TOKENS": ("max_tokens", int),
    "ARTICLE_REQUEST_TIMEOUT": ("request_timeout", int),
    "ARTICLE_GENERATION_ATTEMPTS": ("generation_attempts", int),
    "ARTICLE_WEB_SEARCH": ("web_search", lambda v: v.strip().lower() not in ("0", "false", "no", "off")),
    "ARTICLE_LOG_FILE": ("log_file", str),
}

INT_KEYS = (
    "max_tokens",
    "request_timeout",
    "generation_attempts",
    "retry_wait_seconds",
    "max_existing_titles",
    "related_count",
)


def load_config(config_path: str = None) -> dict:
    """
    Load bot configuration: defaults, then an optional JSON file, then the
    environment (a local .env file is honoured).
    """
    load_dotenv()
    config = dict(DEFAULTS)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with path.open("r", encoding="utf-8") as f:
            config.update(json.load(f))

    for env_name, (key, convert) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        try:
            config[key] = convert(value)
        except ValueError:
            raise ValueError(f"Invalid value for {env_name}: {value!r}")

    for key in INT_KEYS:
        try:
            config[key] = int(config[key])
        except (TypeError, ValueError):
            raise ValueError(f"Config key {key} must be an integer, got {config[key]!r}")

    required_keys = ["anthropic_api_key"]

    for key in required_keys:
        if key not in config or not config[key]:
            raise ValueError(f"Missing required config key: {key}")

    if not config["categories"]:
        raise ValueError("Config key categories must not be empty")
    config["categories"] = list(config["categories"])

    return config
