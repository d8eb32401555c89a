import json
from pathlib import Path

import pytest

from config import DEFAULTS
from core.logger import set_log_file

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "article_template.html"

CONTENT = (
    "<p><strong>Introduction:</strong> Delivery scams are back.</p>"
    '<h2 id="how-it-works">How it works</h2><p>One.</p>'
    "<h2>Red flags</h2><p>Two.</p>"
    '<div class="tip-box"><strong>💡 Pro Tip:</strong> Never click.</div>'
    "<h2>What to do</h2><p>Three.</p>"
    '<div class="warning-box"><strong>⚠️ Warning:</strong> Act fast.</div>'
    "<h2>Conclusion</h2><p>Four.</p>"
)


class StubClient:
    """Stands in for AnthropicClient; returns queued responses or raises queued errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def create_message(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def text_response(*texts, stop_reason="end_turn"):
    return {
        "content": [{"type": "text", "text": t} for t in texts],
        "stop_reason": stop_reason,
    }


@pytest.fixture(autouse=True)
def json_log(tmp_path):
    log_file = tmp_path / "log.json"
    set_log_file(log_file)
    return log_file


@pytest.fixture
def payload():
    return {
        "title": "New Scam Alert 2025!",
        "filename": "ignored-by-the-pipeline",
        "category": "Digital Scams",
        "metaDescription": "Fake delivery texts are surging again.",
        "keywords": "smishing, delivery scam",
        "readingTime": "11 min read",
        "emoji": "🔒",
        "imageColor": "#f97316",
        "summary": "Fake delivery texts are back.",
        "content": CONTENT,
    }


@pytest.fixture
def payload_text(payload):
    return json.dumps(payload, ensure_ascii=False)


@pytest.fixture
def template_html():
    return TEMPLATE_PATH.read_text(encoding="utf-8")


@pytest.fixture
def config(tmp_path):
    cfg = dict(DEFAULTS)
    cfg.update({
        "anthropic_api_key": "test-key",
        "retry_wait_seconds": 0,
        "articles_dir": str(tmp_path / "articles"),
        "template_path": str(TEMPLATE_PATH),
        "index_path": str(tmp_path / "articles.html"),
        "output_dir": str(tmp_path / "out"),
        "log_file": str(tmp_path / "log.json"),
    })
    return cfg


def write_article(directory: Path, stem: str, title: str = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    heading = f"<h1>{title}</h1>" if title else ""
    path = directory / f"{stem}.html"
    path.write_text(f"<html><body>{heading}<p>Body</p></body></html>", encoding="utf-8")
    return path
