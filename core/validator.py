import copy
import html
import json
import re
from dataclasses import dataclass
from typing import List, Optional, Union

import jsonschema

from models.article import ArticleRecord
from utils.file_handler import load_schema
from .errors import MalformedPayloadError
from .logger import log_event

SCHEMA_NAME = "article_structoutput"
FALLBACK_TITLE = "Untitled Article"
HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

FALLBACK_FIELDS = {
    "meta_description": "Auto-generated article fallback.",
    "keywords": "privacy, security, ai",
    "reading_time": "8 min read",
    "emoji": "📰",
    "image_color": "#6366f1",
    "summary": "Automatically generated article.",
}


@dataclass
class Parsed:
    record: ArticleRecord


@dataclass
class Fallback:
    record: ArticleRecord
    raw_text: str
    error: Optional[MalformedPayloadError] = None


ParseOutcome = Union[Parsed, Fallback]


def find_balanced_object(text: str) -> Optional[str]:
    """
    Return the first {...} substring whose braces balance, skipping braces
    inside JSON strings. None when there is no opening brace or it never closes.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def decode_payload(text: str) -> dict:
    """Direct JSON parse, then a re-parse of the first balanced object."""
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    candidate = find_balanced_object(text)
    if candidate is not None:
        try:
            data = json.loads(candidate)
            if isinstance(data, dict):
                return data
        except json.JSONDecodeError as err:
            raise MalformedPayloadError(f"Embedded object is not valid JSON: {err}")
    raise MalformedPayloadError("No JSON object found in response text")


def match_category(value: str, categories: List[str]) -> Optional[str]:
    wanted = value.strip().casefold()
    for category in categories:
        if category.casefold() == wanted:
            return category
    return None


def parse_article_payload(text: str, categories: List[str], schema: dict = None) -> ArticleRecord:
    """Strict parse: raise MalformedPayloadError unless `text` is a valid article record."""
    data = decode_payload(text)

    json_schema = copy.deepcopy((schema or load_schema(SCHEMA_NAME))["format"])
    json_schema["properties"]["category"]["enum"] = list(categories)

    category = data.get("category")
    if isinstance(category, str):
        data["category"] = match_category(category, categories) or category

    try:
        jsonschema.validate(instance=data, schema=json_schema)
    except jsonschema.ValidationError as err:
        raise MalformedPayloadError(f"JSON does not match schema: {err.message}")

    record = ArticleRecord.from_payload(data)
    for attr, default in FALLBACK_FIELDS.items():
        if not getattr(record, attr).strip():
            setattr(record, attr, default)
    if not HEX_COLOR.match(record.image_color.strip()):
        record.image_color = FALLBACK_FIELDS["image_color"]
    for attr in ("title", "category", "summary"):
        setattr(record, attr, " ".join(getattr(record, attr).split()))
    return record


def fallback_record(raw_text: str, categories: List[str]) -> ArticleRecord:
    return ArticleRecord(
        title=FALLBACK_TITLE,
        category=categories[0],
        content=f"<p>{html.escape(raw_text)}</p>",
        **FALLBACK_FIELDS
    )


def normalize_response(text: str, categories: List[str], schema: dict = None) -> ParseOutcome:
    """
    Turn extracted response text into a renderable record. Never raises on
    bad model output: an unparseable payload yields a Fallback record.
    """
    try:
        return Parsed(parse_article_payload(text, categories, schema))
    except MalformedPayloadError as err:
        log_event("WARNING", "Response was not a valid article record, using fallback", {
            "error": str(err),
            "snippet": text[:300],
        })
        return Fallback(fallback_record(text, categories), text, err)
