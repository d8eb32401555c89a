import re
import unicodedata

MAX_SLUG_LENGTH = 80


def clean_article_text(text: str) -> str:
    """
    Remove the em character mojibake, turn leftover **bold** markdown into
    <strong> tags and collapse runs of blank lines.
    """
    text = text.replace("â€”", "—")
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text, flags=re.DOTALL)
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = text.strip()
    return text


def slugify(text: str) -> str:
    """
    Turn a title into a URL-safe filename stem.

    "New Scam Alert 2025!" -> "new-scam-alert-2025"
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"[^a-z0-9\s_-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text).strip("-")
    text = text[:MAX_SLUG_LENGTH].rstrip("-")
    return text or "article"


def slug_as_title(slug: str) -> str:
    """Best-effort inverse of slugify; case and punctuation are lost."""
    words = [w for w in slug.replace("_", "-").split("-") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def unique_slug(slug: str, taken) -> str:
    """Append -2, -3, ... until the slug is not in `taken`."""
    if slug not in taken:
        return slug
    n = 2
    while f"{slug}-{n}" in taken:
        n += 1
    return f"{slug}-{n}"
