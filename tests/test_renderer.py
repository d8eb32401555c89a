import json
from datetime import date

import pytest
from bs4 import BeautifulSoup

from config import CATEGORIES, DEFAULTS
from core.errors import MissingTemplateError
from core.renderer import (
    author_initials,
    build_table_of_contents,
    load_template,
    read_article_metadata,
    render_article,
)
from core.validator import normalize_response
from models.article import CorpusEntry

PUBLISHED = date(2026, 10, 18)


@pytest.fixture
def record(payload):
    record = normalize_response(json.dumps(payload), CATEGORIES).record
    record.slug = "new-scam-alert-2025"
    return record


def render(template_html, record, related=()):
    return BeautifulSoup(render_article(template_html, record, PUBLISHED, list(related), DEFAULTS), "html.parser")


def test_title_category_and_glyph_appear_once(template_html, record):
    soup = render(template_html, record)

    assert len(soup.find_all(string=record.title)) == 1
    assert len(soup.find_all(string=record.category)) == 1
    assert len(soup.find_all(string=record.emoji)) == 1
    assert [h.get_text() for h in soup.find_all("h1")] == [record.title]
    assert soup.title.get_text() == "New Scam Alert 2025! | NoIdentity.Space"


def test_metadata_slots_are_filled(template_html, record):
    soup = render(template_html, record)

    assert soup.find("meta", attrs={"name": "description"})["content"] == record.meta_description
    assert soup.find("meta", attrs={"name": "keywords"})["content"] == record.keywords
    assert soup.find("meta", attrs={"property": "og:title"})["content"] == record.title
    time_tag = soup.find("time")
    assert time_tag.get_text() == "October 18, 2026"
    assert time_tag["datetime"] == "2026-10-18"
    assert soup.find(attrs={"data-slot": "reading-time"}).get_text() == "11 min read"
    assert "#f97316" in soup.find(attrs={"data-slot": "featured-glyph"})["style"]


def test_toc_has_one_entry_per_section(template_html, record):
    soup = render(template_html, record)
    body = soup.find(attrs={"data-slot": "body"})
    headings = body.find_all("h2", recursive=False)
    links = soup.find(attrs={"data-slot": "toc"}).find_all("a")

    assert len(headings) == 4
    assert len(links) == len(headings)
    assert [a["href"] for a in links] == [f"#{h['id']}" for h in headings]
    assert headings[0]["id"] == "how-it-works"
    assert headings[1]["id"] == "red-flags"


def test_table_of_contents_is_idempotent():
    soup = BeautifulSoup(
        "<div><h2>Intro</h2><h2>Intro</h2><h2 id='kept'>Other</h2></div>", "html.parser"
    )
    body = soup.div
    first = build_table_of_contents(body)
    markup = str(soup)
    second = build_table_of_contents(body)

    assert first == [("intro", "Intro"), ("intro-2", "Intro"), ("kept", "Other")]
    assert second == first
    assert str(soup) == markup


def test_ads_follow_second_and_fourth_sections(template_html, record):
    body = render(template_html, record).find(attrs={"data-slot": "body"})
    order = [
        "ad" if "ad-container" in (tag.get("class") or []) else tag.name
        for tag in body.find_all(recursive=False)
    ]
    h2_positions = [i for i, name in enumerate(order) if name == "h2"]
    ad_positions = [i for i, name in enumerate(order) if name == "ad"]

    assert len(ad_positions) == 2
    assert h2_positions[1] < ad_positions[0] < h2_positions[2]
    assert h2_positions[3] < ad_positions[1]
    assert body.find(class_="share-section") is not None
    assert body.find(class_="author-box") is not None


def test_share_links_are_percent_encoded(template_html, record):
    share = render(template_html, record).find(class_="share-section")
    href = share.find("a")["href"]
    assert "https%3A%2F%2Fnoidentity.space%2Farticles%2Fnew-scam-alert-2025.html" in href
    assert "New%20Scam%20Alert%202025%21" in href


def test_related_links(template_html, record):
    related = [CorpusEntry(file="a.html", name="a", title="Article A"),
               CorpusEntry(file="b.html", name="b", title="Article B")]
    links = render(template_html, record, related).find(attrs={"data-slot": "related"}).find_all("a")
    assert [(a["href"], a.get_text()) for a in links] == [("a.html", "Article A"), ("b.html", "Article B")]


def test_render_does_not_depend_on_previous_calls(template_html, record):
    first = render_article(template_html, record, PUBLISHED, [], DEFAULTS)
    second = render_article(template_html, record, PUBLISHED, [], DEFAULTS)
    assert first == second


def test_malformed_content_is_repaired(template_html, record):
    record.content = "<p>Unclosed <strong>bold<h2>Next"
    soup = render(template_html, record)
    body = soup.find(attrs={"data-slot": "body"})
    assert "Unclosed" in body.get_text()
    assert "Next" in body.get_text()
    assert body.find(class_="author-box") is not None


def test_missing_template(tmp_path):
    with pytest.raises(MissingTemplateError):
        load_template(tmp_path / "missing.html")


def test_template_without_body_slot(record):
    with pytest.raises(MissingTemplateError):
        render_article("<html><body><h1 data-slot='heading'></h1></body></html>", record, PUBLISHED, [], DEFAULTS)


def test_read_article_metadata(template_html, record):
    html = render_article(template_html, record, PUBLISHED, [], DEFAULTS)
    recovered = read_article_metadata(html, "new-scam-alert-2025")

    assert recovered.title == record.title
    assert recovered.category == record.category
    assert recovered.emoji == record.emoji
    assert recovered.image_color == "#f97316"
    assert recovered.summary == record.meta_description
    assert recovered.filename == "new-scam-alert-2025.html"


def test_shield_glyph_still_appears_once(template_html, record):
    record.emoji = "🛡️"
    soup = render(template_html, record)
    assert len(soup.find_all(string=record.emoji)) == 1
    assert soup.find(class_="author-avatar").get_text() == "NT"


def test_author_initials():
    assert author_initials("NoIdentity Team") == "NT"
    assert author_initials("ada") == "A"
    assert author_initials("") == "A"
