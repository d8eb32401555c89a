import html
from pathlib import Path
from urllib.parse import quote

from bs4 import BeautifulSoup

from models.article import ArticleRecord
from .errors import IndexUpdateSkipped
from .logger import log_event

PLACEHOLDER_IMAGE = "https://placehold.co/600x400/{color}/ffffff?text={glyph}"

CARD_TEMPLATE = (
    '<article class="article-card" data-category="{category}">'
    '<a href="articles/{filename}">'
    '<img src="{image}" alt="{title}" loading="lazy">'
    '<div class="article-card-body">'
    '<span class="article-category">{category}</span>'
    "<h3>{title}</h3>"
    "<p>{summary}</p>"
    '<span class="read-more">Read more &rarr;</span>'
    "</div>"
    "</a>"
    "</article>"
)


def placeholder_image_url(color: str, glyph: str) -> str:
    return PLACEHOLDER_IMAGE.format(
        color=quote(color.lstrip("#"), safe=""),
        glyph=quote(glyph, safe="")
    )


def build_card(record: ArticleRecord) -> str:
    return CARD_TEMPLATE.format(
        category=html.escape(record.category),
        filename=quote(record.filename),
        image=html.escape(placeholder_image_url(record.image_color, record.emoji)),
        title=html.escape(record.title),
        summary=html.escape(record.summary),
    )


def prepend_card(index_html: str, card_html: str, container_selector: str) -> str:
    """Return the index document with the card as the container's first child."""
    soup = BeautifulSoup(index_html, "html.parser")
    container = soup.select_one(container_selector)
    if container is None:
        raise IndexUpdateSkipped(f"Card container {container_selector!r} not found in index page")

    card = BeautifulSoup(card_html, "html.parser").find("article")
    container.insert(0, card)
    container.insert(1, "\n")
    return str(soup)


def update_index(index_path, record: ArticleRecord, container_selector: str) -> Path:
    """Prepend the article's card to the listing page, newest first."""
    path = Path(index_path)
    if not path.is_file():
        raise IndexUpdateSkipped(f"Index page not found: {path}")

    updated = prepend_card(
        path.read_text(encoding="utf-8"),
        build_card(record),
        container_selector
    )
    path.write_text(updated, encoding="utf-8")
    log_event("SUCCESS", "Index page updated", {"index": str(path), "article": record.filename})
    return path
