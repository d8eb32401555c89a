from dataclasses import dataclass, field

# Keys used by the model's JSON payload, mapped to record attributes.
PAYLOAD_FIELDS = {
    "title": "title",
    "category": "category",
    "metaDescription": "meta_description",
    "keywords": "keywords",
    "readingTime": "reading_time",
    "emoji": "emoji",
    "imageColor": "image_color",
    "summary": "summary",
    "content": "content",
}


@dataclass
class ArticleRecord:
    title: str
    category: str
    content: str
    meta_description: str = ""
    keywords: str = ""
    reading_time: str = ""
    emoji: str = ""
    image_color: str = ""
    summary: str = ""
    slug: str = ""

    @property
    def filename(self) -> str:
        return f"{self.slug}.html"

    @classmethod
    def from_payload(cls, payload: dict) -> "ArticleRecord":
        values = {
            attr: str(payload[key])
            for key, attr in PAYLOAD_FIELDS.items()
            if payload.get(key) is not None
        }
        return cls(**values)

    def to_payload(self) -> dict:
        payload = {key: getattr(self, attr) for key, attr in PAYLOAD_FIELDS.items()}
        payload["filename"] = self.slug
        return payload


@dataclass
class CorpusEntry:
    file: str
    name: str
    title: str
    modified: float = 0.0


@dataclass
class Corpus:
    """Existing articles: every stored key plus the entries with a recoverable title."""

    keys: set = field(default_factory=set)
    entries: list = field(default_factory=list)

    @property
    def titles(self) -> list:
        return [e.title for e in self.entries]
