import html
import re
from datetime import date
from pathlib import Path
from typing import List, Tuple
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

from models.article import ArticleRecord, CorpusEntry
from utils.text_cleaner import clean_article_text, slugify, unique_slug
from .errors import MissingTemplateError

# Ad placeholders go after these h2 sections (1-based; the intro is section 0).
AD_AFTER_SECTIONS = (2, 4)

AD_BLOCK = (
    '<div class="ad-container">'
    '<p class="ad-label">Advertisement</p>'
    '<div class="ad-placeholder"></div>'
    "</div>"
)

SHARE_BLOCK = (
    '<div class="share-section">'
    "<h4>Share this article</h4>"
    '<div class="share-buttons">'
    '<a href="https://twitter.com/intent/tweet?url={url}&amp;text={text}" target="_blank" rel="noopener">X / Twitter</a>'
    '<a href="https://www.linkedin.com/sharing/share-offsite/?url={url}" target="_blank" rel="noopener">LinkedIn</a>'
    '<a href="https://www.facebook.com/sharer/sharer.php?u={url}" target="_blank" rel="noopener">Facebook</a>'
    "</div>"
    "</div>"
)

AUTHOR_BLOCK = (
    '<div class="author-box">'
    '<div class="author-avatar">{initials}</div>'
    '<div class="author-info">'
    "<h4>{author}</h4>"
    "<p>Privacy advocates and security researchers helping you take back control of your digital life.</p>"
    "</div>"
    "</div>"
)

COLOR_STYLE = re.compile(r"background(?:-color)?\s*:\s*(#[0-9a-fA-F]{6})")


def author_initials(author: str) -> str:
    """Initials for the avatar badge, e.g. NoIdentity Team -> NT."""
    return "".join(word[0] for word in author.split()[:2] if word[0].isalnum()).upper() or "A"


def load_template(template_path) -> str:
    path = Path(template_path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise MissingTemplateError(f"Article template not found: {template_path} ({err})")


def _fragment(markup: str) -> list:
    return list(BeautifulSoup(markup, "html.parser").contents)


def split_sections(nodes: list) -> list:
    """Group top-level nodes into [intro, section 1, section 2, ...] at each <h2>."""
    sections = [[]]
    for node in nodes:
        if isinstance(node, Tag) and node.name == "h2":
            sections.append([])
        sections[-1].append(node)
    return sections


def assemble_body(body: Tag, content: str, article_url: str, title: str, author: str) -> None:
    """Fill `body` with the content sections, ad placeholders and closing blocks."""
    body.clear()
    parsed = BeautifulSoup(clean_article_text(content), "html.parser")
    for index, section in enumerate(split_sections(list(parsed.contents))):
        for node in section:
            body.append(node.extract())
        if index in AD_AFTER_SECTIONS:
            for node in _fragment(AD_BLOCK):
                body.append(node)

    share = SHARE_BLOCK.format(url=quote(article_url, safe=""), text=quote(title, safe=""))
    for node in _fragment(share) + _fragment(AUTHOR_BLOCK.format(
        author=html.escape(author),
        initials=html.escape(author_initials(author))
    )):
        body.append(node)


def build_table_of_contents(body: Tag) -> List[Tuple[str, str]]:
    """
    Give every top-level <h2> a unique id and return (id, text) pairs in
    document order. Existing unique ids are kept, so a second pass changes nothing.
    """
    entries = []
    used = set()
    for heading in body.find_all("h2", recursive=False):
        text = heading.get_text(" ", strip=True)
        anchor = heading.get("id")
        if not anchor or anchor in used:
            anchor = unique_slug(slugify(text) if text else "section", used)
            heading["id"] = anchor
        used.add(anchor)
        entries.append((anchor, text))
    return entries


def _slot(soup: BeautifulSoup, name: str):
    return soup.find(attrs={"data-slot": name})


def _set_text(soup: BeautifulSoup, name: str, text: str) -> None:
    tag = _slot(soup, name)
    if tag is not None:
        tag.string = text


def _set_content(soup: BeautifulSoup, name: str, value: str) -> None:
    tag = _slot(soup, name)
    if tag is not None:
        tag["content"] = value


def render_article(
    template_html: str,
    record: ArticleRecord,
    published: date,
    related: List[CorpusEntry],
    site: dict,
) -> str:
    """
    Build the article document from the template text. The template string is
    parsed afresh on every call and never modified.
    """
    soup = BeautifulSoup(template_html, "html.parser")

    _set_text(soup, "document-title", f"{record.title} | {site['site_name']}")
    _set_content(soup, "description", record.meta_description)
    _set_content(soup, "keywords", record.keywords)
    _set_content(soup, "og-title", record.title)
    _set_content(soup, "og-description", record.meta_description)
    _set_text(soup, "category", record.category)
    _set_text(soup, "heading", record.title)
    _set_text(soup, "reading-time", record.reading_time)

    published_tag = _slot(soup, "publish-date")
    if published_tag is not None:
        published_tag.string = f"{published:%B} {published.day}, {published.year}"
        if published_tag.name == "time":
            published_tag["datetime"] = published.isoformat()

    glyph = _slot(soup, "featured-glyph")
    if glyph is not None:
        glyph.clear()
        glyph["style"] = f"background: {record.image_color}"
        emoji = soup.new_tag("span", attrs={"class": "featured-emoji"})
        emoji.string = record.emoji
        glyph.append(emoji)

    body = _slot(soup, "body")
    if body is None:
        raise MissingTemplateError("Article template has no body slot")
    article_url = f"{site['site_url'].rstrip('/')}/articles/{record.filename}"
    assemble_body(body, record.content, article_url, record.title, site["author"])

    toc = _slot(soup, "toc")
    if toc is not None:
        toc.clear()
        for anchor, text in build_table_of_contents(body):
            item = soup.new_tag("li")
            link = soup.new_tag("a", href=f"#{anchor}")
            link.string = text
            item.append(link)
            toc.append(item)

    related_slot = _slot(soup, "related")
    if related_slot is not None:
        related_slot.clear()
        for entry in related:
            link = soup.new_tag("a", href=entry.file, attrs={"class": "related-card"})
            heading = soup.new_tag("h4")
            heading.string = entry.title
            link.append(heading)
            related_slot.append(link)

    return str(soup)


def read_article_metadata(article_html: str, slug: str) -> ArticleRecord:
    """Recover the card fields of an already rendered article."""
    soup = BeautifulSoup(article_html, "html.parser")

    def text_of(name):
        tag = _slot(soup, name)
        return tag.get_text(" ", strip=True) if tag is not None else ""

    def content_of(name):
        tag = _slot(soup, name)
        return tag.get("content", "") if tag is not None else ""

    title = text_of("heading")
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(" ", strip=True) if h1 is not None else ""

    color = ""
    glyph = _slot(soup, "featured-glyph")
    if glyph is not None:
        match = COLOR_STYLE.search(glyph.get("style", ""))
        color = match.group(1) if match else ""

    description = content_of("description")
    return ArticleRecord(
        title=title,
        category=text_of("category"),
        content="",
        meta_description=description,
        keywords=content_of("keywords"),
        reading_time=text_of("reading-time"),
        emoji=text_of("featured-glyph"),
        image_color=color,
        summary=description,
        slug=slug,
    )
